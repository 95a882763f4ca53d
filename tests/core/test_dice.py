"""Tests for dice sources."""

import pytest

from riftchess.core.dice import D8, D20, DiceExhaustedError, FixedDice, RandomDice


class TestRandomDice:
    def test_seeded_is_reproducible(self) -> None:
        a, b = RandomDice(7), RandomDice(7)
        assert [a.roll() for _ in range(10)] == [b.roll() for _ in range(10)]

    def test_range(self) -> None:
        dice = RandomDice(1)
        rolls = {dice.roll(D8) for _ in range(500)}
        assert rolls == set(range(1, D8 + 1))

    def test_rejects_zero_sides(self) -> None:
        with pytest.raises(ValueError):
            RandomDice().roll(0)

    def test_choice(self) -> None:
        dice = RandomDice(3)
        assert dice.choice("abc") in "abc"

    def test_choice_empty(self) -> None:
        with pytest.raises(ValueError):
            RandomDice().choice([])


class TestFixedDice:
    def test_replays_script(self) -> None:
        dice = FixedDice([4, 20])
        assert dice.roll(D20) == 4
        assert dice.roll(D20) == 20
        assert dice.remaining == 0

    def test_exhausted(self) -> None:
        with pytest.raises(DiceExhaustedError):
            FixedDice().roll()

    def test_push(self) -> None:
        dice = FixedDice()
        dice.push(3, 1)
        assert dice.remaining == 2

    def test_choice_is_one_based(self) -> None:
        assert FixedDice([2]).choice(("white", "black")) == "black"
