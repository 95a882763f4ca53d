"""Game management layer — state, turn rules and the controller.

Quick start::

    from riftchess.game import GameController

    ctrl = GameController()
    ctrl.generate_random_rifts()
    ctrl.start_game()
    ctrl.request_move(6, 4, 4, 4)  # e2-e4
"""

from riftchess.game.controller import GameController, GameEvents
from riftchess.game.interfaces import (
    CommandResult,
    GamePhase,
    IGameController,
    ResolutionStage,
)
from riftchess.game.rules import IllegalMoveError, RuleViolation
from riftchess.game.state import Activation, GameState, KingAbility, TurnState

__all__ = [
    # Interfaces
    "CommandResult",
    "GamePhase",
    "IGameController",
    "ResolutionStage",
    # Errors
    "IllegalMoveError",
    "RuleViolation",
    # Concrete
    "Activation",
    "GameController",
    "GameEvents",
    "GameState",
    "KingAbility",
    "TurnState",
]
