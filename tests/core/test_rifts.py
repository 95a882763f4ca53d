"""Tests for rift placement rules and random generation."""

import logging

import pytest

from riftchess.core.dice import FixedDice, RandomDice
from riftchess.core.rifts import (
    RiftPlacementError,
    generate_random_rifts,
    is_valid_layout,
    placement_error,
    toggle_rift,
)


class TestPlacement:
    def test_valid_square(self) -> None:
        assert placement_error((), (3, 4)) is None

    @pytest.mark.parametrize("row", [0, 1, 6, 7])
    def test_row_out_of_range(self, row: int) -> None:
        assert placement_error((), (row, 0)) == (
            "Rifts can only be placed on rows 3, 4, 5, or 6"
        )

    def test_same_row_or_column(self) -> None:
        reason = "No two rifts can share the same row or column"
        assert placement_error(((3, 4),), (3, 0)) == reason
        assert placement_error(((3, 4),), (5, 4)) == reason

    def test_column_out_of_range(self) -> None:
        assert placement_error((), (3, 8)) is not None

    def test_toggle_adds_and_removes(self) -> None:
        rifts = toggle_rift((), (2, 0))
        assert rifts == ((2, 0),)
        assert toggle_rift(rifts, (2, 0)) == ()

    def test_toggle_rejects(self) -> None:
        with pytest.raises(RiftPlacementError, match="same row or column"):
            toggle_rift(((2, 0),), (2, 5))

    def test_fifth_rift_rejected(self) -> None:
        full = ((2, 0), (3, 1), (4, 2), (5, 3))
        with pytest.raises(RiftPlacementError):
            toggle_rift(full, (4, 7))


class TestLayout:
    def test_valid(self, rifts) -> None:
        assert is_valid_layout(rifts)

    def test_too_few(self) -> None:
        assert not is_valid_layout(((2, 0), (3, 1), (4, 2)))

    def test_shared_column(self) -> None:
        assert not is_valid_layout(((2, 0), (3, 0), (4, 2), (5, 3)))


class TestGenerate:
    def test_scripted_layout(self) -> None:
        # row index (d4) then column (d8) per draw
        dice = FixedDice([1, 1, 2, 2, 3, 3, 4, 4])
        assert generate_random_rifts(dice) == ((2, 0), (3, 1), (4, 2), (5, 3))

    def test_conflicts_are_redrawn(self) -> None:
        dice = FixedDice([1, 1, 1, 5, 2, 2, 3, 3, 4, 4])
        assert generate_random_rifts(dice) == ((2, 0), (3, 1), (4, 2), (5, 3))
        assert dice.remaining == 0

    def test_gives_up_after_max_attempts(self, caplog: pytest.LogCaptureFixture) -> None:
        dice = FixedDice([1, 1, 1, 2, 1, 3])
        with caplog.at_level(logging.WARNING, logger="riftchess.core.rifts"):
            rifts = generate_random_rifts(dice, max_attempts=3)
        assert rifts == ((2, 0),)
        assert "placed 1 of 4" in caplog.text

    def test_random_layout_always_valid(self) -> None:
        for seed in range(20):
            assert is_valid_layout(generate_random_rifts(RandomDice(seed)))
