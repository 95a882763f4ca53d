"""Turn rules as pure functions over :class:`GameState`.

Every public function takes a state and returns a new one; the argument
is left untouched. Rejected commands raise :class:`RuleViolation` with a
user-facing message.
"""

from __future__ import annotations

import logging
from typing import Any

from riftchess.core.dice import D20, Dice
from riftchess.core.enums import Color
from riftchess.core.move import Move
from riftchess.core.move_generator import MoveGenerator
from riftchess.core.rifts import (
    DEFAULT_MAX_ATTEMPTS,
    RIFT_COUNT,
    generate_random_rifts,
    is_valid_layout,
    toggle_rift,
)
from riftchess.core.types import Coord, in_bounds, square_name
from riftchess.effects.catalog import effect_for_roll
from riftchess.effects.resolver import resolve, resume
from riftchess.game.interfaces import GamePhase, ResolutionStage
from riftchess.game.state import Activation, GameState

_LOGGER = logging.getLogger(__name__)

_MOVE_STAGES = (ResolutionStage.IDLE, ResolutionStage.AWAITING_EXTRA_MOVE)
KING_MOVE_LIMIT = 2


class RuleViolation(ValueError):
    """A command is not allowed in the current state."""


class IllegalMoveError(RuleViolation):
    """A requested move is not legal."""


# ── Setup ────────────────────────────────────────────────────────────────────


def new_game() -> GameState:
    """Fresh board in the setup phase, no rifts."""
    return GameState()


def _require_setup(state: GameState) -> None:
    if state.phase != GamePhase.SETUP:
        raise RuleViolation("Rifts can only be changed during setup")


def place_rift(state: GameState, row: int, col: int) -> GameState:
    """Toggle a rift on (row, col).

    Raises:
        RuleViolation: not in setup.
        RiftPlacementError: the rift breaks a placement rule.
    """
    _require_setup(state)
    new = state.copy()
    new.rifts = toggle_rift(state.rifts, (row, col))
    return new


def generate_rifts(
    state: GameState, dice: Dice, max_attempts: int = DEFAULT_MAX_ATTEMPTS
) -> GameState:
    """Replace the rift set with a randomly drawn one."""
    _require_setup(state)
    new = state.copy()
    new.rifts = generate_random_rifts(dice, max_attempts)
    return new


def start_game(state: GameState) -> GameState:
    _require_setup(state)
    if not is_valid_layout(state.rifts):
        raise RuleViolation(
            f"Place all {RIFT_COUNT} rifts before starting "
            f"({len(state.rifts)} placed)"
        )
    new = state.copy()
    new.phase = GamePhase.PLAYING
    new.turn.reset_for(Color.WHITE)
    new.stage = ResolutionStage.IDLE
    _LOGGER.info("Game started with rifts %s", [square_name(r) for r in new.rifts])
    return new


# ── Moves ────────────────────────────────────────────────────────────────────


def legal_moves(state: GameState, sq: Coord) -> set[Coord]:
    """Destinations of the piece on *sq*, ignoring whose turn it is."""
    if not in_bounds(*sq):
        return set()
    piece = state.board[sq]
    if piece is None or piece.frozen:
        return set()
    return MoveGenerator(state.board, state.field_effect).destinations(sq)


def _king_window_open(state: GameState) -> bool:
    """The current player's king moved first and may move once more."""
    turn = state.turn
    color = turn.current_player
    return (
        state.king_abilities[color].double_move
        and turn.king_moved_first
        and turn.king_moves_this_turn[color] < KING_MOVE_LIMIT
    )


def move_rejection(state: GameState, move: Move) -> str | None:
    """Why *move* cannot be played now, or ``None`` if it can."""
    if state.phase != GamePhase.PLAYING:
        return "The game is not in progress"
    if state.stage not in _MOVE_STAGES:
        return "Resolve the rift effect first"
    if not in_bounds(*move.from_sq) or not in_bounds(*move.to_sq):
        return "Square is off the board"

    piece = state.board[move.from_sq]
    if piece is None:
        return f"No piece on {square_name(move.from_sq)}"
    if piece.color != state.current_player:
        return f"It is {state.current_player}'s turn"
    if piece.frozen:
        return f"The {piece.piece_type} on {square_name(move.from_sq)} is frozen"
    target = state.board[move.to_sq]
    if target is not None and target.color == piece.color:
        return "Cannot capture your own piece"

    forced = state.turn.forced_mover
    if forced is not None and piece.id != forced:
        return "The piece from Foot Soldier's Gambit must move again"
    if forced is None and _king_window_open(state) and not piece.is_king:
        return "Only the king may move again this turn"

    if move.to_sq not in legal_moves(state, move.from_sq):
        return f"Illegal move: {move}"
    return None


def is_valid_move(state: GameState, move: Move) -> bool:
    return move_rejection(state, move) is None


def apply_move(state: GameState, move: Move) -> GameState:
    """Play *move* for the current player.

    Entering an unspent rift (once per turn) suspends the turn until the
    rift die is rolled.

    Raises:
        IllegalMoveError: the move is rejected.
    """
    reason = move_rejection(state, move)
    if reason is not None:
        raise IllegalMoveError(reason)

    new = state.copy()
    turn = new.turn
    color = turn.current_player
    if new.board[move.to_sq] is not None:
        new.capture(move.to_sq)
    piece = new.board[move.from_sq]
    assert piece is not None
    new.board[move.from_sq] = None
    new.board[move.to_sq] = piece
    piece.has_moved = True
    turn.player_has_moved[color] = True
    new.ply_count += 1
    new.last_move = move
    new.last_effect = None

    if new.is_game_over:
        _LOGGER.info("%s captured the king with %s", color, move)
        return new

    if piece.is_king:
        turn.king_moves_this_turn[color] += 1
        if turn.moves_this_turn == 0:
            turn.king_moved_first = True
    turn.moves_this_turn += 1

    was_forced = turn.forced_mover == piece.id
    if was_forced:
        turn.forced_mover = None
        new.stage = ResolutionStage.IDLE

    if (
        move.to_sq in new.rifts
        and move.to_sq not in new.spent_rifts
        and not turn.rift_activated_this_turn
    ):
        turn.rift_activated_this_turn = True
        new.spent_rifts.add(move.to_sq)
        new.activation = Activation(move.to_sq, piece.id, color, move.from_sq)
        new.stage = ResolutionStage.AWAITING_ROLL
        _LOGGER.info("%s entered the rift on %s", color, square_name(move.to_sq))
        return new

    if was_forced:
        _advance_turn(new)
    else:
        _finish_half_turn(new)
    return new


# ── Rift resolution ──────────────────────────────────────────────────────────


def roll_rift_die(state: GameState, dice: Dice) -> tuple[GameState, int]:
    """Roll the d20 for the pending activation and resolve its effect."""
    if state.stage != ResolutionStage.AWAITING_ROLL or state.activation is None:
        raise RuleViolation("No rift is waiting for a roll")
    if state.turn.dice_rolled_this_turn:
        raise RuleViolation("The rift die was already rolled this turn")

    new = state.copy()
    new.turn.dice_rolled_this_turn = True
    roll = dice.roll(D20)
    new, outcome, choice = resolve(new, effect_for_roll(roll), roll, dice)
    new.last_effect = outcome
    if choice is not None:
        new.pending_choice = choice
        new.stage = ResolutionStage.AWAITING_CHOICE
        return new, roll
    _complete_effect(new)
    return new, roll


def submit_choice(
    state: GameState, choice_id: str, payload: dict[str, Any], dice: Dice
) -> GameState:
    """Answer the pending choice and finish the suspended effect.

    Raises:
        RuleViolation: nothing is pending or *choice_id* is stale.
        ChoiceError: the payload is not acceptable; *state* is unchanged.
    """
    choice = state.pending_choice
    if state.stage != ResolutionStage.AWAITING_CHOICE or choice is None:
        raise RuleViolation("No choice is pending")
    if choice_id != choice.choice_id:
        raise RuleViolation(f"Unknown choice id {choice_id!r}")
    new, outcome = resume(state, payload, dice)
    new.last_effect = outcome
    _complete_effect(new)
    return new


def _complete_effect(state: GameState) -> None:
    state.stage = ResolutionStage.IDLE
    state.activation = None
    state.pending_choice = None
    if state.is_game_over:
        return
    _finish_half_turn(state)


# ── Turn flow ────────────────────────────────────────────────────────────────


def end_turn(state: GameState) -> GameState:
    """Give up the optional second king move."""
    if (
        state.phase != GamePhase.PLAYING
        or state.stage != ResolutionStage.IDLE
        or not _king_window_open(state)
    ):
        raise RuleViolation("There is no optional move to skip")
    new = state.copy()
    _advance_turn(new)
    return new


def resign(state: GameState, color: Color) -> GameState:
    if state.is_game_over:
        raise RuleViolation("The game is already over")
    new = state.copy()
    new.end_game(color.opposite)
    _LOGGER.info("%s resigned", color)
    return new


def _finish_half_turn(state: GameState) -> None:
    if state.is_game_over:
        return
    turn = state.turn
    if turn.forced_mover is not None:
        if _forced_mover_can_move(state):
            state.stage = ResolutionStage.AWAITING_EXTRA_MOVE
            return
        _LOGGER.info("Forced mover cannot move again; the obligation lapses")
        turn.forced_mover = None
    if _king_window_open(state):
        return
    _advance_turn(state)


def _forced_mover_can_move(state: GameState) -> bool:
    """The Gambit piece is on the board with a legal move left.

    A king that already used both of its moves this turn stays put.
    """
    turn = state.turn
    assert turn.forced_mover is not None
    sq = state.board.find(turn.forced_mover)
    if sq is None or not legal_moves(state, sq):
        return False
    piece = state.board[sq]
    assert piece is not None
    return not (
        piece.is_king
        and turn.king_moves_this_turn[turn.current_player] >= KING_MOVE_LIMIT
    )


def _advance_turn(state: GameState) -> None:
    turn = state.turn
    player = turn.current_player.opposite
    if turn.pending_skip == player:
        _LOGGER.info("%s loses a turn to Eerie Fog's Turmoil", player)
        turn.pending_skip = None
        player = player.opposite
    turn.reset_for(player)
    state.stage = ResolutionStage.IDLE
    state.activation = None
    state.pending_choice = None
