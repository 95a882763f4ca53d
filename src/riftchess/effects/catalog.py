"""The rift effect table: d20 roll → effect."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum


class EffectKind(StrEnum):
    """Whether an effect acts once or installs a field effect."""

    SPECIAL = "special"
    FIELD = "field"


class RiftEffect(IntEnum):
    """One member per rift effect, valued by the roll that selects it."""

    NECROMANCERS_TRAP = 1
    ARCHERS_TRICK_SHOT = 2
    SANDWORM = 3
    HONORABLE_SACRIFICE = 4
    DEMOTION = 5
    FOOT_SOLDIERS_GAMBIT = 6
    FAMINE = 7
    HOLIDAYS_REJUVENATION = 8
    SANDSTORM = 9
    DRAGONS_BREATH = 10
    JACK_FROSTS_MISCHIEF = 11
    PORTAL_IN_THE_RIFT = 12
    CATAPULT_ROULETTE = 13
    CONQUERORS_TALE = 14
    MEDUSAS_GAZE = 15
    TIME_DISTORTION = 16
    CROSSROAD_DEMONS_DEAL = 17
    FAIRY_FOUNTAIN = 18
    EERIE_FOGS_TURMOIL = 19
    SPRING_OF_REVIVAL = 20
    BLANK = 21

    @property
    def info(self) -> EffectInfo:
        return _EFFECT_INFO[self]

    @property
    def title(self) -> str:
        return self.info.name

    @property
    def kind(self) -> EffectKind:
        return self.info.kind


@dataclass(frozen=True, slots=True)
class EffectInfo:
    """Display metadata for an effect."""

    name: str
    kind: EffectKind
    description: str


_EFFECT_INFO: dict[RiftEffect, EffectInfo] = {
    RiftEffect.NECROMANCERS_TRAP: EffectInfo(
        "Necromancer's Trap",
        EffectKind.SPECIAL,
        "Remove your piece. Place one of your opponent's captured pieces onto the rift.",
    ),
    RiftEffect.ARCHERS_TRICK_SHOT: EffectInfo(
        "Archer's Trick Shot",
        EffectKind.SPECIAL,
        "Choose a target up to 3 squares away in a straight line from the rift "
        "and remove it.",
    ),
    RiftEffect.SANDWORM: EffectInfo(
        "Sandworm",
        EffectKind.SPECIAL,
        "Remove all pieces within 1 square of the rift, plus the activating piece.",
    ),
    RiftEffect.HONORABLE_SACRIFICE: EffectInfo(
        "Honorable Sacrifice",
        EffectKind.SPECIAL,
        "Remove your activating piece and one enemy piece within 1 square.",
    ),
    RiftEffect.DEMOTION: EffectInfo(
        "Demotion",
        EffectKind.SPECIAL,
        "Remove your activating piece. If it was a Castle, Knight, Bishop, or "
        "Queen, place a captured Pawn of yours on the rift.",
    ),
    RiftEffect.FOOT_SOLDIERS_GAMBIT: EffectInfo(
        "Foot Soldier's Gambit",
        EffectKind.SPECIAL,
        "The activating piece must immediately move again.",
    ),
    RiftEffect.FAMINE: EffectInfo(
        "Famine", EffectKind.FIELD, "Pawns cannot move."
    ),
    RiftEffect.HOLIDAYS_REJUVENATION: EffectInfo(
        "Holiday's Rejuvenation",
        EffectKind.FIELD,
        "Pawns may move two spaces forward. Castles, Bishops, Queens can jump "
        "over 1 friendly piece. Knights move 3+1 instead of 2+1.",
    ),
    RiftEffect.SANDSTORM: EffectInfo(
        "Sandstorm",
        EffectKind.FIELD,
        "Pawns cannot move. Knights move only 1 square. Castles, Bishops, "
        "Queens max range: 3 squares. Kings cannot move.",
    ),
    RiftEffect.DRAGONS_BREATH: EffectInfo(
        "Dragon's Breath",
        EffectKind.SPECIAL,
        "Choose a direction; remove the first enemy up to 3 squares away in "
        "a straight line.",
    ),
    RiftEffect.JACK_FROSTS_MISCHIEF: EffectInfo(
        "Jack Frost's Mischief",
        EffectKind.FIELD,
        "Roll a D20: Odd = nothing happens. Even = the piece slides 1 extra "
        "square in the same direction.",
    ),
    RiftEffect.PORTAL_IN_THE_RIFT: EffectInfo(
        "Portal in the Rift",
        EffectKind.SPECIAL,
        "Move the activating piece to another unactivated rift.",
    ),
    RiftEffect.CATAPULT_ROULETTE: EffectInfo(
        "Catapult Roulette",
        EffectKind.SPECIAL,
        "Roll 2D8 to choose a random square (column A–H, row 1–8). Remove any "
        "piece on that square.",
    ),
    RiftEffect.CONQUERORS_TALE: EffectInfo(
        "Conqueror's Tale",
        EffectKind.SPECIAL,
        "Your king gains the ability to move twice per turn for the rest of "
        "the game.",
    ),
    RiftEffect.MEDUSAS_GAZE: EffectInfo(
        "Medusa's Gaze",
        EffectKind.SPECIAL,
        "The activating piece is frozen in place (except by other rifts).",
    ),
    RiftEffect.TIME_DISTORTION: EffectInfo(
        "Time Distortion/Stasis",
        EffectKind.FIELD,
        "All pieces within a rolled radius are frozen until the field changes.",
    ),
    RiftEffect.CROSSROAD_DEMONS_DEAL: EffectInfo(
        "Crossroad Demon's Deal",
        EffectKind.SPECIAL,
        "You may decline. If accepted: remove your activating piece and roll "
        "a D20 to lose more pieces, then revive one of your fallen officers.",
    ),
    RiftEffect.FAIRY_FOUNTAIN: EffectInfo(
        "Fairy Fountain",
        EffectKind.SPECIAL,
        "Activating Pawn gains new movement: Forward 2 spaces, plus 1 space "
        "left/right.",
    ),
    RiftEffect.EERIE_FOGS_TURMOIL: EffectInfo(
        "Eerie Fog's Turmoil",
        EffectKind.FIELD,
        "Roll a D20: 3–20 = play normally. 1–2 = skip your next turn.",
    ),
    RiftEffect.SPRING_OF_REVIVAL: EffectInfo(
        "Spring of Revival",
        EffectKind.SPECIAL,
        "Place one of your captured pieces onto a starting square.",
    ),
    RiftEffect.BLANK: EffectInfo(
        "Blank", EffectKind.FIELD, "Pawns may now move sideways to capture."
    ),
}


def effect_for_roll(roll: int) -> RiftEffect:
    """Map a d20 roll to its effect; anything outside 1-20 is Blank."""
    if 1 <= roll <= 20:
        return RiftEffect(roll)
    return RiftEffect.BLANK
