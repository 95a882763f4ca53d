"""Board - piece placement on an 8x8 grid."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from riftchess.core.enums import Color, PieceType
from riftchess.core.piece import Piece
from riftchess.core.types import BOARD_SIZE, Coord, in_bounds

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 8x8 grid of optional pieces.

    The board also owns the piece-id counter so that every piece spawned
    during a game gets a fresh, never reused id.
    """

    __slots__ = ("_grid", "_next_id")

    def __init__(self) -> None:
        self._grid: list[list[Piece | None]] = [
            [None] * BOARD_SIZE for _ in range(BOARD_SIZE)
        ]
        self._next_id = 1

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Coord) -> Piece | None:
        row, col = sq
        if not in_bounds(row, col):
            raise IndexError(f"Square off the board: {sq}")
        return self._grid[row][col]

    def __setitem__(self, sq: Coord, piece: Piece | None) -> None:
        row, col = sq
        if not in_bounds(row, col):
            raise IndexError(f"Square off the board: {sq}")
        self._grid[row][col] = piece

    def is_empty(self, sq: Coord) -> bool:
        return self[sq] is None

    def spawn(self, sq: Coord, color: Color, piece_type: PieceType) -> Piece:
        """Create a new piece with a fresh id and put it on *sq*."""
        piece = Piece(self._next_id, color, piece_type)
        self._next_id += 1
        self[sq] = piece
        return piece

    # -- Query helpers ------------------------------------------------------

    def occupied(self) -> Iterator[tuple[Coord, Piece]]:
        """All (square, piece) pairs in row-major order."""
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                piece = self._grid[row][col]
                if piece is not None:
                    yield (row, col), piece

    def pieces(self, color: Color, piece_type: PieceType | None = None) -> list[Coord]:
        """Squares occupied by *color* (optionally only *piece_type*)."""
        return [
            sq
            for sq, piece in self.occupied()
            if piece.color == color
            and (piece_type is None or piece.piece_type == piece_type)
        ]

    def find(self, piece_id: int) -> Coord | None:
        """Current square of the piece with *piece_id*, if on the board."""
        for sq, piece in self.occupied():
            if piece.id == piece_id:
                return sq
        return None

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._grid = [
            [piece.copy() if piece is not None else None for piece in row]
            for row in self._grid
        ]
        b._next_id = self._next_id
        return b

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting layout, black on rows 0-1, white on rows 6-7."""
        b = cls()
        for col, pt in enumerate(_BACK_RANK):
            b.spawn((0, col), Color.BLACK, pt)
            b.spawn((1, col), Color.BLACK, PieceType.PAWN)
        for col, pt in enumerate(_BACK_RANK):
            b.spawn((6, col), Color.WHITE, PieceType.PAWN)
            b.spawn((7, col), Color.WHITE, pt)
        return b

    # -- Serialisation ------------------------------------------------------

    def to_rows(self) -> list[list[dict[str, Any] | None]]:
        return [
            [piece.to_dict() if piece is not None else None for piece in row]
            for row in self._grid
        ]

    @classmethod
    def from_rows(cls, rows: list[list[dict[str, Any] | None]], next_id: int) -> Board:
        if len(rows) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in rows):
            raise ValueError("Board must have 8 rows of 8 squares")
        b = cls()
        b._grid = [
            [Piece.from_dict(cell) if cell is not None else None for cell in row]
            for row in rows
        ]
        b._next_id = next_id
        return b

    @property
    def next_id(self) -> int:
        return self._next_id

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        rows: list[str] = []
        for row in range(BOARD_SIZE):
            cells = [str(p) if p else "." for p in self._grid[row]]
            rows.append(f"{BOARD_SIZE - row} {' '.join(cells)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
