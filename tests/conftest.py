"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from riftchess.core.board import Board
from riftchess.core.enums import Color, PieceType
from riftchess.core.types import Coord, parse_square
from riftchess.game.interfaces import GamePhase
from riftchess.game.state import Activation, GameState

# a6, b5, c4, d3
RIFTS: tuple[Coord, ...] = ((2, 0), (3, 1), (4, 2), (5, 3))

_LETTERS: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

StateFactory = Callable[..., GameState]


@pytest.fixture
def rifts() -> tuple[Coord, ...]:
    return RIFTS


@pytest.fixture
def playing_state() -> GameState:
    """Standard opening position, rifts placed, white to move."""
    state = GameState(rifts=RIFTS)
    state.phase = GamePhase.PLAYING
    return state


@pytest.fixture
def make_state() -> StateFactory:
    """Build a playing state from ``{"e1": "K", "e8": "k", ...}``.

    Uppercase letters are white pieces, lowercase black.
    """

    def build(
        pieces: dict[str, str],
        *,
        rifts: tuple[Coord, ...] = RIFTS,
        to_move: Color = Color.WHITE,
    ) -> GameState:
        board = Board()
        for name, letter in pieces.items():
            color = Color.WHITE if letter.isupper() else Color.BLACK
            board.spawn(parse_square(name), color, _LETTERS[letter.lower()])
        state = GameState(board=board, rifts=rifts)
        state.phase = GamePhase.PLAYING
        state.turn.reset_for(to_move)
        return state

    return build


@pytest.fixture
def activate() -> Callable[[GameState, str, str], GameState]:
    """Mark the piece standing on *rift* as having just entered it."""

    def go(state: GameState, rift: str, came_from: str) -> GameState:
        sq = parse_square(rift)
        piece = state.board[sq]
        assert piece is not None, f"no piece on {rift}"
        state.spent_rifts.add(sq)
        state.turn.rift_activated_this_turn = True
        state.activation = Activation(sq, piece.id, piece.color, parse_square(came_from))
        return state

    return go
