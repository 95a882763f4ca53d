"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass

from riftchess.core.types import Coord, parse_square, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable (from, to) pair in board coordinates."""

    from_sq: Coord
    to_sq: Coord

    def __str__(self) -> str:
        return f"{square_name(self.from_sq)}{square_name(self.to_sq)}"

    @classmethod
    def from_coords(cls, from_row: int, from_col: int, to_row: int, to_col: int) -> Move:
        return cls((from_row, from_col), (to_row, to_col))

    @classmethod
    def from_uci(cls, text: str) -> Move:
        """Parse 'e2e4' style text."""
        if len(text) != 4:
            raise ValueError(f"Invalid move text: {text!r}")
        return cls(parse_square(text[:2]), parse_square(text[2:]))
