"""Pending player choices that suspend a rift effect mid-resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from riftchess.core.enums import Color
from riftchess.core.types import Coord, in_bounds
from riftchess.effects.catalog import RiftEffect


class ChoiceError(ValueError):
    """A submitted choice is malformed or not among the options."""


class ChoiceKind(StrEnum):
    """What the player is asked to pick, and the payload shape expected."""

    CAPTURED_PIECE = "captured_piece"  # {"index": int}
    TARGET_SQUARE = "target_square"  # {"square": [row, col]}
    DIRECTION = "direction"  # {"direction": "up" | "down" | "left" | "right"}
    RIFT = "rift"  # {"square": [row, col]}
    ACCEPT_DECLINE = "accept_decline"  # {"accept": bool}
    REVIVAL = "revival"  # {"index": int, "square": [row, col]}


CARDINAL_DIRECTIONS: dict[str, Coord] = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}


@dataclass(frozen=True, slots=True)
class PendingChoice:
    """A suspended effect waiting for :func:`submit_choice`.

    Attributes:
        choice_id: Token the submission must echo back.
        effect: The effect being resolved.
        kind: Payload shape expected.
        color: Side that must answer.
        rift: Square of the activating rift.
        options: Allowed values (indices, squares, direction names or bools).
        squares: Allowed squares for :attr:`ChoiceKind.REVIVAL`.
    """

    choice_id: str
    effect: RiftEffect
    kind: ChoiceKind
    color: Color
    rift: Coord
    options: tuple[Any, ...]
    squares: tuple[Coord, ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "choiceId": self.choice_id,
            "effect": self.effect.title,
            "roll": int(self.effect),
            "kind": str(self.kind),
            "color": str(self.color),
            "rift": list(self.rift),
            "options": [_jsonable(o) for o in self.options],
            "squares": [list(sq) for sq in self.squares],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PendingChoice:
        kind = ChoiceKind(data["kind"])
        options: tuple[Any, ...] = tuple(data.get("options", ()))
        if kind in (ChoiceKind.TARGET_SQUARE, ChoiceKind.RIFT):
            options = tuple(_to_coord(o) for o in options)
        return cls(
            choice_id=data["choiceId"],
            effect=RiftEffect(int(data["roll"])),
            kind=kind,
            color=Color.from_name(data["color"]),
            rift=_to_coord(data["rift"]),
            options=options,
            squares=tuple(_to_coord(sq) for sq in data.get("squares", ())),
        )


# ── Payload parsing ─────────────────────────────────────────────────────────


def parse_index(payload: dict[str, Any], allowed: tuple[Any, ...]) -> int:
    value = payload.get("index")
    if not isinstance(value, int) or isinstance(value, bool):
        raise ChoiceError("Choice payload needs an integer 'index'")
    if value not in allowed:
        raise ChoiceError(f"Index {value} is not one of the options")
    return value


def parse_square(payload: dict[str, Any], allowed: tuple[Coord, ...]) -> Coord:
    try:
        sq = _to_coord(payload.get("square"))
    except (TypeError, ValueError):
        raise ChoiceError("Choice payload needs a 'square' as [row, col]") from None
    if sq not in allowed:
        raise ChoiceError(f"Square {list(sq)} is not one of the options")
    return sq


def parse_direction(payload: dict[str, Any], allowed: tuple[Any, ...]) -> str:
    value = payload.get("direction")
    if value not in allowed:
        raise ChoiceError(f"Direction {value!r} is not one of the options")
    return value


def parse_accept(payload: dict[str, Any]) -> bool:
    value = payload.get("accept")
    if not isinstance(value, bool):
        raise ChoiceError("Choice payload needs a boolean 'accept'")
    return value


def _to_coord(value: Any) -> Coord:
    row, col = value
    if not isinstance(row, int) or not isinstance(col, int):
        raise TypeError("Coordinates must be integers")
    if not in_bounds(row, col):
        raise ValueError(f"Square off the board: {value!r}")
    return (row, col)


def _jsonable(value: Any) -> Any:
    if isinstance(value, tuple):
        return list(value)
    return value
