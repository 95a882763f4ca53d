"""Field-effect modifier: rewrites movement while a global effect is active.

Precedence is famine > sandstorm > holiday rejuvenation. When none of
them applies to a piece, :func:`intercept` returns ``None`` and the
generator falls back to the piece's own pattern (including the per-pawn
fairy-fountain override).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from riftchess.core.enums import FieldEffect, PieceType
from riftchess.core.types import (
    BISHOP_DIRS,
    KING_OFFSETS,
    LONG_KNIGHT_OFFSETS,
    QUEEN_DIRS,
    ROOK_DIRS,
    Coord,
)

if TYPE_CHECKING:
    from riftchess.core.move_generator import MoveGenerator
    from riftchess.core.piece import Piece

SANDSTORM_RANGE = 3
HOLIDAY_FRIENDLY_JUMPS = 1

_DIRS: dict[PieceType, tuple[Coord, ...]] = {
    PieceType.BISHOP: BISHOP_DIRS,
    PieceType.ROOK: ROOK_DIRS,
    PieceType.QUEEN: QUEEN_DIRS,
}


def intercept(
    gen: MoveGenerator, sq: Coord, piece: Piece, effect: FieldEffect | None
) -> set[Coord] | None:
    """Destinations dictated by *effect*, or ``None`` to use defaults."""
    if effect == FieldEffect.FAMINE:
        return _famine(piece)
    if effect == FieldEffect.SANDSTORM:
        return _sandstorm(gen, sq, piece)
    if effect == FieldEffect.HOLIDAY_REJUVENATION:
        return _holiday(gen, sq, piece)
    return None


def _famine(piece: Piece) -> set[Coord] | None:
    if piece.is_pawn:
        return set()
    return None


def _sandstorm(gen: MoveGenerator, sq: Coord, piece: Piece) -> set[Coord]:
    # Kings would be allowed to move while in check, but check is never
    # detected, so they stay put.
    if piece.piece_type in (PieceType.PAWN, PieceType.KING):
        return set()
    if piece.piece_type == PieceType.KNIGHT:
        return gen.leaps(sq, piece.color, KING_OFFSETS)
    return gen.slides(
        sq, piece.color, _DIRS[piece.piece_type], max_distance=SANDSTORM_RANGE
    )


def _holiday(gen: MoveGenerator, sq: Coord, piece: Piece) -> set[Coord] | None:
    if piece.is_pawn:
        return gen.pawn_moves(sq, piece) | gen.pawn_double_push(sq, piece)
    if piece.piece_type == PieceType.KNIGHT:
        return gen.leaps(sq, piece.color, LONG_KNIGHT_OFFSETS)
    if piece.piece_type.is_slider:
        return gen.slides(
            sq,
            piece.color,
            _DIRS[piece.piece_type],
            friendly_jumps=HOLIDAY_FRIENDLY_JUMPS,
        )
    return None
