"""Piece record with per-piece ability flags."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from riftchess.core.enums import Color, PieceType

_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}


@dataclass(slots=True)
class Piece:
    """A piece on the board or in a captured pool.

    ``id`` is stable for the lifetime of a game and is the key used for
    freezes and forced moves, since pieces relocate.
    """

    id: int
    color: Color
    piece_type: PieceType
    has_moved: bool = False
    frozen: bool = False
    frozen_by_field_effect: bool = False
    fairy_fountain: bool = False

    # ── Freezing ─────────────────────────────────────────────────────────

    def freeze(self, *, by_field_effect: bool) -> None:
        """Freeze the piece.

        A permanent freeze is never downgraded to a field-effect freeze.
        """
        if self.frozen and not self.frozen_by_field_effect:
            return
        self.frozen = True
        self.frozen_by_field_effect = by_field_effect

    def thaw(self) -> None:
        self.frozen = False
        self.frozen_by_field_effect = False

    # ── Helpers ──────────────────────────────────────────────────────────

    @property
    def is_king(self) -> bool:
        return self.piece_type == PieceType.KING

    @property
    def is_pawn(self) -> bool:
        return self.piece_type == PieceType.PAWN

    def copy(self) -> Piece:
        return replace(self)

    def __str__(self) -> str:
        """FEN-style letter (uppercase = white, lowercase = black)."""
        letter = _LETTERS[self.piece_type]
        return letter.upper() if self.color == Color.WHITE else letter

    # ── Serialisation ────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "color": str(self.color),
            "type": str(self.piece_type),
            "hasMoved": self.has_moved,
            "frozen": self.frozen,
            "frozenByFieldEffect": self.frozen_by_field_effect,
            "fairyFountain": self.fairy_fountain,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Piece:
        return cls(
            id=int(data["id"]),
            color=Color.from_name(data["color"]),
            piece_type=PieceType.from_name(data["type"]),
            has_moved=bool(data.get("hasMoved", False)),
            frozen=bool(data.get("frozen", False)),
            frozen_by_field_effect=bool(data.get("frozenByFieldEffect", False)),
            fairy_fountain=bool(data.get("fairyFountain", False)),
        )
