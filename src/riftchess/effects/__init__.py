"""Rift effects — the d20 table, player choices and the resolver.

Quick start::

    from riftchess.effects import RiftEffect, effect_for_roll

    effect = effect_for_roll(13)
    print(effect.title, effect.kind)  # Catapult Roulette special
"""

from riftchess.effects.catalog import EffectKind, RiftEffect, effect_for_roll
from riftchess.effects.choices import ChoiceError, ChoiceKind, PendingChoice
from riftchess.effects.outcome import EffectOutcome
from riftchess.effects.resolver import resolve, resume, time_distortion_radius

__all__ = [
    "ChoiceError",
    "ChoiceKind",
    "EffectKind",
    "EffectOutcome",
    "PendingChoice",
    "RiftEffect",
    "effect_for_roll",
    "resolve",
    "resume",
    "time_distortion_radius",
]
