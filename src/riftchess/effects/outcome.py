"""Record of a resolved (or suspended) rift effect."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from riftchess.effects.catalog import RiftEffect


@dataclass(frozen=True, slots=True)
class EffectOutcome:
    """What an effect did.

    ``changed`` is False for an intentional no-op; ``failed`` marks a
    handler that raised and was rolled back. The two are never both set
    by a successful resolution.
    """

    effect: RiftEffect
    roll: int
    changed: bool = False
    failed: bool = False
    pending: bool = False
    details: tuple[str, ...] = field(default=())
    extra_rolls: tuple[int, ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "roll": self.roll,
            "effect": self.effect.title,
            "kind": str(self.effect.kind),
            "description": self.effect.info.description,
            "changed": self.changed,
            "failed": self.failed,
            "pending": self.pending,
            "details": list(self.details),
            "extraRolls": list(self.extra_rolls),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EffectOutcome:
        roll = int(data["roll"])
        return cls(
            effect=_effect_by_title(data["effect"], roll),
            roll=roll,
            changed=bool(data.get("changed", False)),
            failed=bool(data.get("failed", False)),
            pending=bool(data.get("pending", False)),
            details=tuple(data.get("details", ())),
            extra_rolls=tuple(int(r) for r in data.get("extraRolls", ())),
        )


def _effect_by_title(title: str, roll: int) -> RiftEffect:
    for effect in RiftEffect:
        if effect.title == title:
            return effect
    raise ValueError(f"Unknown rift effect: {title!r} (roll {roll})")
