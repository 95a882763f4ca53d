"""Randomness sources.

Every random decision in the game goes through a :class:`Dice` so that
games can be seeded, replayed and tested deterministically.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")

D20 = 20
D8 = 8


class DiceExhaustedError(RuntimeError):
    """A scripted dice ran out of values."""


class Dice(ABC):
    """Interface for a source of die rolls."""

    @abstractmethod
    def roll(self, sides: int = D20) -> int:
        """Uniform integer in ``1..sides``."""

    def choice(self, items: Sequence[T]) -> T:
        """Uniformly pick one element of a non-empty sequence."""
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        return items[self.roll(len(items)) - 1]


class RandomDice(Dice):
    """Dice backed by :class:`random.Random`."""

    __slots__ = ("_rng",)

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def roll(self, sides: int = D20) -> int:
        if sides < 1:
            raise ValueError(f"Die needs at least one side, got {sides}")
        return self._rng.randint(1, sides)


class FixedDice(Dice):
    """Replays a fixed script of values, for tests and replays.

    Values are returned as-is, regardless of ``sides``.
    """

    __slots__ = ("_values", "_pos")

    def __init__(self, values: Iterable[int] = ()) -> None:
        self._values = list(values)
        self._pos = 0

    def push(self, *values: int) -> None:
        self._values.extend(values)

    @property
    def remaining(self) -> int:
        return len(self._values) - self._pos

    def roll(self, sides: int = D20) -> int:
        if self._pos >= len(self._values):
            raise DiceExhaustedError(f"No scripted value left for a d{sides}")
        value = self._values[self._pos]
        self._pos += 1
        return value
