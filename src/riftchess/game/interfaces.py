"""Phase enums, command results and the controller interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, StrEnum, auto
from typing import Any

from riftchess.core.enums import Color

# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Top-level finite-state-machine states."""

    SETUP = auto()  # placing rifts
    PLAYING = auto()
    ENDED = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ResolutionStage(StrEnum):
    """Sub-state of PLAYING describing what input the game waits for."""

    IDLE = "idle"  # a normal move
    AWAITING_ROLL = "awaiting_roll"  # a rift was entered
    AWAITING_CHOICE = "awaiting_choice"  # an effect needs a player decision
    AWAITING_EXTRA_MOVE = "awaiting_extra_move"  # Foot Soldier's Gambit


# ── Command results ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of a command. Rejections carry a user-facing reason."""

    accepted: bool
    reason: str = ""
    value: Any = None

    @classmethod
    def ok(cls, value: Any = None) -> CommandResult:
        return cls(True, "", value)

    @classmethod
    def rejected(cls, reason: str) -> CommandResult:
        return cls(False, reason)

    def __bool__(self) -> bool:
        return self.accepted


# ── Abstract interface ───────────────────────────────────────────────────────


class IGameController(ABC):
    """Interface for the game orchestrator."""

    @abstractmethod
    def new_game(self) -> None:
        """Reset to a fresh board in the setup phase."""

    @abstractmethod
    def place_rift(self, row: int, col: int) -> CommandResult:
        """Toggle a rift on (row, col) during setup."""

    @abstractmethod
    def generate_random_rifts(self) -> CommandResult:
        """Replace the rift set with a random valid one."""

    @abstractmethod
    def start_game(self) -> CommandResult:
        """Leave setup once four rifts are placed."""

    @abstractmethod
    def request_move(
        self, from_row: int, from_col: int, to_row: int, to_col: int
    ) -> CommandResult:
        """Move a piece of the current player."""

    @abstractmethod
    def roll_rift_die(self) -> CommandResult:
        """Roll the d20 for a pending rift activation."""

    @abstractmethod
    def submit_choice(self, choice_id: str, payload: dict[str, Any]) -> CommandResult:
        """Answer a pending effect choice."""

    @abstractmethod
    def end_turn(self) -> CommandResult:
        """Pass the optional second king move."""

    @abstractmethod
    def resign(self, color: Color) -> CommandResult:
        """Player of *color* resigns."""
