"""Tests for GameController — the command surface."""

from typing import Any

from riftchess.core.dice import FixedDice
from riftchess.core.enums import Color
from riftchess.effects.catalog import RiftEffect
from riftchess.game.controller import GameController
from riftchess.game.interfaces import GamePhase, ResolutionStage

LAYOUT = [1, 1, 2, 2, 3, 3, 4, 4]  # a6, b5, c4, d3


def _started(*rolls: int) -> GameController:
    ctrl = GameController(FixedDice([*LAYOUT, *rolls]))
    assert ctrl.generate_random_rifts()
    assert ctrl.start_game()
    return ctrl


class TestSetup:
    def test_new_controller_in_setup(self) -> None:
        ctrl = GameController(FixedDice())
        assert ctrl.state.phase == GamePhase.SETUP
        assert ctrl.snapshot()["phase"] == "setup"

    def test_place_rift(self) -> None:
        ctrl = GameController(FixedDice())
        result = ctrl.place_rift(3, 3)
        assert result and result.value == ((3, 3),)

    def test_place_rift_rejected(self) -> None:
        ctrl = GameController(FixedDice())
        result = ctrl.place_rift(0, 3)
        assert not result
        assert result.reason == "Rifts can only be placed on rows 3, 4, 5, or 6"

    def test_partial_random_layout_reports(self) -> None:
        ctrl = GameController(FixedDice([1, 1, 1, 2]), max_attempts=2)
        result = ctrl.generate_random_rifts()
        assert result.accepted
        assert result.reason == "Only 1 of 4 rifts could be placed"
        assert not ctrl.start_game()

    def test_start_emits_phase(self) -> None:
        ctrl = GameController(FixedDice(LAYOUT))
        phases: list[GamePhase] = []
        ctrl.events.on_phase_changed.append(phases.append)
        ctrl.generate_random_rifts()
        ctrl.start_game()
        assert phases == [GamePhase.PLAYING]

    def test_new_game_resets(self) -> None:
        ctrl = _started()
        ctrl.request_move(6, 4, 4, 4)
        ctrl.new_game()
        assert ctrl.state.phase == GamePhase.SETUP
        assert ctrl.state.rifts == ()


class TestCommands:
    def test_move_and_event(self) -> None:
        ctrl = _started()
        seen: list[Any] = []
        ctrl.events.on_move.append(lambda move, state: seen.append(str(move)))
        assert ctrl.request_move(6, 4, 4, 4)
        assert seen == ["e2e4"]
        assert ctrl.current_player == Color.BLACK

    def test_rejected_move_leaves_state(self) -> None:
        ctrl = _started()
        before = ctrl.snapshot()
        result = ctrl.request_move(1, 4, 3, 4)
        assert not result
        assert result.reason == "It is white's turn"
        assert ctrl.snapshot() == before

    def test_legal_moves(self) -> None:
        ctrl = _started()
        assert ctrl.legal_moves(6, 4) == {(5, 4), (4, 4)}
        assert ctrl.legal_moves(9, 9) == set()

    def test_roll_returns_value_and_emits(self) -> None:
        ctrl = _started(14)
        outcomes: list[RiftEffect] = []
        ctrl.events.on_effect.append(lambda outcome, state: outcomes.append(outcome.effect))
        result = ctrl.request_move(6, 3, 5, 3)
        assert result.value == ResolutionStage.AWAITING_ROLL
        result = ctrl.roll_rift_die()
        assert result.value == 14
        assert outcomes == [RiftEffect.CONQUERORS_TALE]
        assert ctrl.snapshot()["lastEffect"]["effect"] == "Conqueror's Tale"

    def test_roll_rejected_when_nothing_pending(self) -> None:
        ctrl = _started(14)
        result = ctrl.roll_rift_die()
        assert not result and "No rift" in result.reason

    def test_choice_required_then_submitted(self) -> None:
        ctrl = _started(2)
        choices: list[str] = []
        ctrl.events.on_choice_required.append(lambda c: choices.append(c.choice_id))
        ctrl.request_move(6, 3, 5, 3)
        ctrl.roll_rift_die()
        assert len(choices) == 1

        bad = ctrl.submit_choice(choices[0], {"square": [0, 0]})
        assert not bad
        assert ctrl.state.stage == ResolutionStage.AWAITING_CHOICE

        assert ctrl.submit_choice(choices[0], {"square": [6, 4]})
        assert ctrl.current_player == Color.BLACK

    def test_end_turn_rejected(self) -> None:
        assert not _started().end_turn()

    def test_resign_emits_game_over(self) -> None:
        ctrl = _started()
        winners: list[Color] = []
        phases: list[GamePhase] = []
        ctrl.events.on_game_over.append(winners.append)
        ctrl.events.on_phase_changed.append(phases.append)
        assert ctrl.resign(Color.WHITE)
        assert winners == [Color.BLACK]
        assert phases == [GamePhase.ENDED]
        assert not ctrl.resign(Color.BLACK)

    def test_king_capture_emits_game_over(self) -> None:
        ctrl = _started()
        winners: list[Color] = []
        ctrl.events.on_game_over.append(winners.append)
        # clear a path: queen takes the black king directly
        board = ctrl.state.board
        board[(1, 3)] = None
        board[(6, 3)] = None
        queen = board[(7, 3)]
        board[(7, 3)] = None
        board[(2, 3)] = queen
        assert ctrl.request_move(2, 3, 0, 3)  # takes the queen on d8
        ctrl.request_move(1, 4, 2, 4)
        assert ctrl.request_move(0, 3, 0, 4)
        assert winners == [Color.WHITE]
