"""Core domain layer — board, pieces, rifts and movement, no I/O.

Quick start::

    from riftchess.core import Board, MoveGenerator

    board = Board.initial()
    gen = MoveGenerator(board)
    print(gen.destinations((6, 4)))  # {(5, 4), (4, 4)}
"""

from riftchess.core.board import Board
from riftchess.core.dice import Dice, DiceExhaustedError, FixedDice, RandomDice
from riftchess.core.enums import Color, FieldEffect, PieceType
from riftchess.core.move import Move
from riftchess.core.move_generator import MoveGenerator
from riftchess.core.piece import Piece
from riftchess.core.rifts import (
    RIFT_COUNT,
    RIFT_ROWS,
    RiftPlacementError,
    generate_random_rifts,
    is_valid_layout,
    placement_error,
    toggle_rift,
)
from riftchess.core.types import (
    Coord,
    chebyshev,
    in_bounds,
    parse_square,
    square_name,
)

__all__ = [
    # Enums
    "Color",
    "FieldEffect",
    "PieceType",
    # Types / helpers
    "Coord",
    "chebyshev",
    "in_bounds",
    "parse_square",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "Piece",
    # Randomness
    "Dice",
    "DiceExhaustedError",
    "FixedDice",
    "RandomDice",
    # Rifts
    "RIFT_COUNT",
    "RIFT_ROWS",
    "RiftPlacementError",
    "generate_random_rifts",
    "is_valid_layout",
    "placement_error",
    "toggle_rift",
]
