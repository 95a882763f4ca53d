"""Rift placement rules: validation, toggling and random generation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from riftchess.core.types import BOARD_SIZE, Coord

if TYPE_CHECKING:
    from riftchess.core.dice import Dice

_LOGGER = logging.getLogger(__name__)

RIFT_COUNT = 4
RIFT_ROWS: tuple[int, ...] = (2, 3, 4, 5)
DEFAULT_MAX_ATTEMPTS = 100


class RiftPlacementError(ValueError):
    """Raised when a rift cannot be placed; the message is user-facing."""


def placement_error(rifts: tuple[Coord, ...], sq: Coord) -> str | None:
    """Reason why a new rift on *sq* is not allowed, or ``None``."""
    row, col = sq
    if row not in RIFT_ROWS:
        return "Rifts can only be placed on rows 3, 4, 5, or 6"
    if not 0 <= col < BOARD_SIZE:
        return "Rift column must be between 0 and 7"
    if any(r == row or c == col for r, c in rifts):
        return "No two rifts can share the same row or column"
    if len(rifts) >= RIFT_COUNT:
        return f"All {RIFT_COUNT} rifts are already placed"
    return None


def toggle_rift(rifts: tuple[Coord, ...], sq: Coord) -> tuple[Coord, ...]:
    """Return *rifts* with *sq* removed if present, otherwise added.

    Raises:
        RiftPlacementError: the rift cannot be added.
    """
    if sq in rifts:
        return tuple(r for r in rifts if r != sq)
    reason = placement_error(rifts, sq)
    if reason is not None:
        raise RiftPlacementError(reason)
    return rifts + (sq,)


def is_valid_layout(rifts: tuple[Coord, ...]) -> bool:
    """Exactly four rifts on rows 2-5 with distinct rows and columns."""
    if len(rifts) != RIFT_COUNT:
        return False
    rows = {r for r, _ in rifts}
    cols = {c for _, c in rifts}
    return (
        len(rows) == RIFT_COUNT
        and len(cols) == RIFT_COUNT
        and rows <= set(RIFT_ROWS)
        and all(0 <= c < BOARD_SIZE for c in cols)
    )


def generate_random_rifts(
    dice: Dice, max_attempts: int = DEFAULT_MAX_ATTEMPTS
) -> tuple[Coord, ...]:
    """Draw random non-conflicting rifts until four are placed.

    Gives up after *max_attempts* draws, so the result may hold fewer
    than four rifts.
    """
    rifts: tuple[Coord, ...] = ()
    attempts = 0
    while len(rifts) < RIFT_COUNT and attempts < max_attempts:
        sq = (dice.choice(RIFT_ROWS), dice.roll(BOARD_SIZE) - 1)
        if placement_error(rifts, sq) is None:
            rifts += (sq,)
        attempts += 1
    if len(rifts) < RIFT_COUNT:
        _LOGGER.warning(
            "Random rift generation placed %d of %d rifts in %d attempts",
            len(rifts),
            RIFT_COUNT,
            attempts,
        )
    return rifts
