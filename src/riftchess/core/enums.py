"""Core enumerations for the rift chess domain."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @property
    def forward(self) -> int:
        """Row delta of a forward step (white moves towards row 0)."""
        return -1 if self == Color.WHITE else 1

    @property
    def pawn_row(self) -> int:
        return 6 if self == Color.WHITE else 1

    @property
    def home_rows(self) -> tuple[int, int]:
        """The two rows this side occupies at the start of the game."""
        return (6, 7) if self == Color.WHITE else (0, 1)

    @classmethod
    def from_name(cls, name: str) -> Color:
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Invalid color: {name!r}") from None

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    @property
    def is_slider(self) -> bool:
        return self in (PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN)

    @classmethod
    def from_name(cls, name: str) -> PieceType:
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Invalid piece type: {name!r}") from None

    def __str__(self) -> str:
        return self.name.lower()


class FieldEffect(StrEnum):
    """Global movement modifiers. At most one is active at a time."""

    FAMINE = "famine"
    HOLIDAY_REJUVENATION = "holiday_rejuvenation"
    SANDSTORM = "sandstorm"
    JACK_FROST_MISCHIEF = "jack_frost_mischief"
    BLANK = "blank"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")
