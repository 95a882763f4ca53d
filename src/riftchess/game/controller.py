"""GameController — the command surface of a rift chess game.

Wraps the pure functions of :mod:`riftchess.game.rules`, owns the dice,
and emits events via simple callbacks so that the network relay and tests
can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from riftchess.core.dice import Dice, RandomDice
from riftchess.core.enums import Color
from riftchess.core.move import Move
from riftchess.core.rifts import DEFAULT_MAX_ATTEMPTS, RIFT_COUNT, RiftPlacementError
from riftchess.core.types import Coord
from riftchess.effects.choices import ChoiceError, PendingChoice
from riftchess.effects.outcome import EffectOutcome
from riftchess.game import rules
from riftchess.game.interfaces import CommandResult, GamePhase, IGameController
from riftchess.game.rules import RuleViolation
from riftchess.game.state import GameState

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, "GameState"], None]
EffectCallback = Callable[[EffectOutcome, "GameState"], None]
ChoiceCallback = Callable[[PendingChoice], None]
PhaseCallback = Callable[[GamePhase], None]
GameOverCallback = Callable[[Color], None]  # winner


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_effect: list[EffectCallback] = field(default_factory=list)
    on_choice_required: list[ChoiceCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController(IGameController):
    """Validates commands, applies them and notifies listeners.

    Rejected commands leave the state untouched and return a
    :class:`CommandResult` carrying the reason. Methods are meant to be
    called from a single thread (or under a lock).
    """

    __slots__ = ("_state", "_dice", "_max_attempts", "events")

    def __init__(
        self,
        dice: Dice | None = None,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._dice = dice if dice is not None else RandomDice()
        self._max_attempts = max_attempts
        self._state = rules.new_game()
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def dice(self) -> Dice:
        return self._dice

    @property
    def current_player(self) -> Color:
        return self._state.current_player

    def snapshot(self) -> dict[str, Any]:
        return self._state.to_dict()

    def legal_moves(self, row: int, col: int) -> set[Coord]:
        return rules.legal_moves(self._state, (row, col))

    # ── IGameController impl ─────────────────────────────────────────────

    def new_game(self) -> None:
        self._state = rules.new_game()
        self._emit_phase(GamePhase.SETUP)

    def place_rift(self, row: int, col: int) -> CommandResult:
        try:
            self._state = rules.place_rift(self._state, row, col)
        except (RuleViolation, RiftPlacementError) as exc:
            return self._reject("place_rift", exc)
        return CommandResult.ok(self._state.rifts)

    def generate_random_rifts(self) -> CommandResult:
        try:
            self._state = rules.generate_rifts(
                self._state, self._dice, self._max_attempts
            )
        except RuleViolation as exc:
            return self._reject("generate_random_rifts", exc)
        placed = len(self._state.rifts)
        if placed < RIFT_COUNT:
            return CommandResult(
                True,
                f"Only {placed} of {RIFT_COUNT} rifts could be placed",
                self._state.rifts,
            )
        return CommandResult.ok(self._state.rifts)

    def start_game(self) -> CommandResult:
        try:
            self._state = rules.start_game(self._state)
        except RuleViolation as exc:
            return self._reject("start_game", exc)
        self._emit_phase(GamePhase.PLAYING)
        return CommandResult.ok()

    def request_move(
        self, from_row: int, from_col: int, to_row: int, to_col: int
    ) -> CommandResult:
        move = Move.from_coords(from_row, from_col, to_row, to_col)
        try:
            self._state = rules.apply_move(self._state, move)
        except RuleViolation as exc:
            return self._reject("request_move", exc)
        self._emit_move(move)
        self._after_command()
        return CommandResult.ok(self._state.stage)

    def roll_rift_die(self) -> CommandResult:
        try:
            self._state, roll = rules.roll_rift_die(self._state, self._dice)
        except RuleViolation as exc:
            return self._reject("roll_rift_die", exc)
        self._emit_effect()
        self._after_command()
        return CommandResult.ok(roll)

    def submit_choice(self, choice_id: str, payload: dict[str, Any]) -> CommandResult:
        try:
            self._state = rules.submit_choice(
                self._state, choice_id, payload, self._dice
            )
        except (RuleViolation, ChoiceError) as exc:
            return self._reject("submit_choice", exc)
        self._emit_effect()
        self._after_command()
        return CommandResult.ok()

    def end_turn(self) -> CommandResult:
        try:
            self._state = rules.end_turn(self._state)
        except RuleViolation as exc:
            return self._reject("end_turn", exc)
        return CommandResult.ok()

    def resign(self, color: Color) -> CommandResult:
        try:
            self._state = rules.resign(self._state, color)
        except RuleViolation as exc:
            return self._reject("resign", exc)
        self._after_command()
        return CommandResult.ok()

    # ── Internal helpers ─────────────────────────────────────────────────

    def _reject(self, command: str, exc: Exception) -> CommandResult:
        _LOGGER.debug("%s rejected: %s", command, exc)
        return CommandResult.rejected(str(exc))

    def _after_command(self) -> None:
        state = self._state
        if state.is_game_over:
            assert state.winner is not None
            self._emit_game_over(state.winner)
            return
        if state.pending_choice is not None:
            for cb in self.events.on_choice_required:
                cb(state.pending_choice)

    def _emit_move(self, move: Move) -> None:
        for cb in self.events.on_move:
            cb(move, self._state)

    def _emit_effect(self) -> None:
        outcome = self._state.last_effect
        if outcome is None:
            return
        for cb in self.events.on_effect:
            cb(outcome, self._state)

    def _emit_game_over(self, winner: Color) -> None:
        _LOGGER.info("Game over: %s wins", winner)
        self._emit_phase(GamePhase.ENDED)
        for cb in self.events.on_game_over:
            cb(winner)

    def _emit_phase(self, phase: GamePhase) -> None:
        for cb in self.events.on_phase_changed:
            cb(phase)
