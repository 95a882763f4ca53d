"""Coordinate type alias and board geometry helpers.

Board layout (row, col), row 0 is the black back rank:
    (0, 0)=a8 ... (0, 7)=h8
    ...
    (7, 0)=a1 ... (7, 7)=h1
"""

from __future__ import annotations

from typing import TypeAlias

Coord: TypeAlias = tuple[int, int]  # (row, col), both 0-7

BOARD_SIZE = 8

KNIGHT_OFFSETS: tuple[Coord, ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

# "3-then-1" leap used while Holiday's Rejuvenation is active.
LONG_KNIGHT_OFFSETS: tuple[Coord, ...] = (
    (-3, -1),
    (-3, 1),
    (-1, -3),
    (-1, 3),
    (1, -3),
    (1, 3),
    (3, -1),
    (3, 1),
)

# Also the fixed scan order for adjacent-square effects.
KING_OFFSETS: tuple[Coord, ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[Coord, ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
ROOK_DIRS: tuple[Coord, ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))
QUEEN_DIRS: tuple[Coord, ...] = ROOK_DIRS + BISHOP_DIRS


def in_bounds(row: int, col: int) -> bool:
    """Whether (row, col) lies on the board."""
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def chebyshev(a: Coord, b: Coord) -> int:
    """King-move distance between two squares."""
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def step_towards(src: Coord, dst: Coord) -> Coord:
    """Unit (row, col) step pointing from *src* towards *dst*."""
    dr = dst[0] - src[0]
    dc = dst[1] - src[1]
    return ((dr > 0) - (dr < 0), (dc > 0) - (dc < 0))


def square_name(sq: Coord) -> str:
    """Algebraic name, e.g. (7, 0) → 'a1', (0, 7) → 'h8'."""
    row, col = sq
    return chr(ord("a") + col) + str(BOARD_SIZE - row)


def parse_square(name: str) -> Coord:
    """Parse algebraic name, e.g. 'e2' → (6, 4)."""
    if len(name) != 2 or name[0] not in "abcdefgh" or name[1] not in "12345678":
        raise ValueError(f"Invalid square name: {name!r}")
    return (BOARD_SIZE - int(name[1]), ord(name[0]) - ord("a"))


def squares_within(center: Coord, radius: int) -> list[Coord]:
    """In-bounds squares within Chebyshev *radius* of *center*, row-major."""
    row, col = center
    return [
        (r, c)
        for r in range(row - radius, row + radius + 1)
        for c in range(col - radius, col + radius + 1)
        if in_bounds(r, c)
    ]
