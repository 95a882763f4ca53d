"""Pseudo-legal destination generation.

There is no check awareness: a move that leaves the mover's own king
capturable is still generated. Field effects are consulted before the
default per-piece dispatch.
"""

from __future__ import annotations

from collections.abc import Iterable

from riftchess.core import field_effects
from riftchess.core.board import Board
from riftchess.core.enums import Color, FieldEffect, PieceType
from riftchess.core.piece import Piece
from riftchess.core.types import (
    BISHOP_DIRS,
    KING_OFFSETS,
    KNIGHT_OFFSETS,
    QUEEN_DIRS,
    ROOK_DIRS,
    Coord,
    in_bounds,
)

_SLIDER_DIRS: dict[PieceType, tuple[Coord, ...]] = {
    PieceType.BISHOP: BISHOP_DIRS,
    PieceType.ROOK: ROOK_DIRS,
    PieceType.QUEEN: QUEEN_DIRS,
}


class MoveGenerator:
    """Generates destination squares for pieces on a :class:`Board`.

    Args:
        board: The board to read. It is never mutated.
        field_effect: The active field effect, or ``None``.
    """

    __slots__ = ("_board", "_field_effect")

    def __init__(self, board: Board, field_effect: FieldEffect | None = None) -> None:
        self._board = board
        self._field_effect = field_effect

    @property
    def board(self) -> Board:
        return self._board

    # -- Public API ---------------------------------------------------------

    def destinations(self, sq: Coord) -> set[Coord]:
        """Destination squares for the piece on *sq* (empty if none)."""
        piece = self._board[sq]
        if piece is None:
            return set()

        intercepted = field_effects.intercept(self, sq, piece, self._field_effect)
        if intercepted is not None:
            return intercepted

        if piece.is_pawn:
            if piece.fairy_fountain:
                moves = self.fairy_pawn_moves(sq, piece)
            else:
                moves = self.pawn_moves(sq, piece)
            if self._field_effect == FieldEffect.BLANK:
                moves |= self.pawn_side_captures(sq, piece)
            return moves
        if piece.piece_type == PieceType.KNIGHT:
            return self.leaps(sq, piece.color, KNIGHT_OFFSETS)
        if piece.piece_type == PieceType.KING:
            return self.leaps(sq, piece.color, KING_OFFSETS)
        return self.slides(sq, piece.color, _SLIDER_DIRS[piece.piece_type])

    def all_destinations(self, color: Color) -> dict[Coord, set[Coord]]:
        """Non-empty destination sets for every piece of *color*."""
        result: dict[Coord, set[Coord]] = {}
        for sq in self._board.pieces(color):
            moves = self.destinations(sq)
            if moves:
                result[sq] = moves
        return result

    # -- Movement primitives -------------------------------------------------

    def leaps(self, sq: Coord, color: Color, offsets: Iterable[Coord]) -> set[Coord]:
        """Fixed-offset targets that are on the board and not own-occupied."""
        board = self._board
        row, col = sq
        moves: set[Coord] = set()
        for dr, dc in offsets:
            target = (row + dr, col + dc)
            if not in_bounds(*target):
                continue
            occupant = board[target]
            if occupant is None or occupant.color != color:
                moves.add(target)
        return moves

    def slides(
        self,
        sq: Coord,
        color: Color,
        directions: Iterable[Coord],
        *,
        max_distance: int = 7,
        friendly_jumps: int = 0,
    ) -> set[Coord]:
        """Walk each direction until the edge, a piece, or *max_distance*.

        An enemy piece blocks with inclusion. An own piece blocks without
        inclusion, unless a friendly jump is still available for that
        direction, in which case the walk continues past it.
        """
        board = self._board
        row, col = sq
        moves: set[Coord] = set()
        for dr, dc in directions:
            jumps_left = friendly_jumps
            for dist in range(1, max_distance + 1):
                target = (row + dr * dist, col + dc * dist)
                if not in_bounds(*target):
                    break
                occupant = board[target]
                if occupant is None:
                    moves.add(target)
                    continue
                if occupant.color != color:
                    moves.add(target)
                    break
                if jumps_left > 0:
                    jumps_left -= 1
                    continue
                break
        return moves

    def pawn_moves(self, sq: Coord, piece: Piece) -> set[Coord]:
        """Standard pawn pushes and diagonal captures."""
        board = self._board
        row, col = sq
        step = piece.color.forward
        moves: set[Coord] = set()

        one = (row + step, col)
        if in_bounds(*one) and board.is_empty(one):
            moves.add(one)
            two = (row + 2 * step, col)
            if row == piece.color.pawn_row and board.is_empty(two):
                moves.add(two)

        for dc in (-1, 1):
            target = (row + step, col + dc)
            if not in_bounds(*target):
                continue
            occupant = board[target]
            if occupant is not None and occupant.color != piece.color:
                moves.add(target)
        return moves

    def pawn_double_push(self, sq: Coord, piece: Piece) -> set[Coord]:
        """Forward-2 from any row, if both cells ahead are empty."""
        board = self._board
        row, col = sq
        step = piece.color.forward
        one = (row + step, col)
        two = (row + 2 * step, col)
        if in_bounds(*two) and board.is_empty(one) and board.is_empty(two):
            return {two}
        return set()

    def fairy_pawn_moves(self, sq: Coord, piece: Piece) -> set[Coord]:
        """Forward 2, or forward 2 then one square left/right."""
        step = 2 * piece.color.forward
        return self.leaps(sq, piece.color, ((step, 0), (step, -1), (step, 1)))

    def pawn_side_captures(self, sq: Coord, piece: Piece) -> set[Coord]:
        """Captures onto an enemy directly left or right."""
        board = self._board
        row, col = sq
        moves: set[Coord] = set()
        for dc in (-1, 1):
            target = (row, col + dc)
            if not in_bounds(*target):
                continue
            occupant = board[target]
            if occupant is not None and occupant.color != piece.color:
                moves.add(target)
        return moves
