"""Rift effect resolver.

:func:`resolve` runs the handler for a rolled effect on a copy of the
game state. A handler either finishes, or returns a :class:`PendingChoice`
that suspends the effect until :func:`resume` is called with the player's
answer. Handlers that raise unexpectedly are rolled back to the state as
it was before dispatch; the caller still advances the turn.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from riftchess.core.dice import D8, D20, Dice
from riftchess.core.enums import Color, FieldEffect, PieceType
from riftchess.core.piece import Piece
from riftchess.core.types import (
    KING_OFFSETS,
    QUEEN_DIRS,
    Coord,
    in_bounds,
    square_name,
    squares_within,
    step_towards,
)
from riftchess.effects.catalog import RiftEffect
from riftchess.effects.choices import (
    CARDINAL_DIRECTIONS,
    ChoiceError,
    ChoiceKind,
    PendingChoice,
    parse_accept,
    parse_direction,
    parse_index,
    parse_square,
)
from riftchess.effects.outcome import EffectOutcome

if TYPE_CHECKING:
    from riftchess.game.state import Activation, GameState

_LOGGER = logging.getLogger(__name__)

ARCHER_RANGE = 3
DRAGON_RANGE = 3
EERIE_FOG_SKIP_MAX = 2
# kings and pawns are never demoted
_DEMOTABLE: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
)


def time_distortion_radius(roll: int) -> int:
    """Freeze radius for a Time Distortion d20 roll."""
    if roll >= 19:
        return 4
    if roll >= 15:
        return 3
    if roll >= 9:
        return 2
    return 1


# ── Resolution context ───────────────────────────────────────────────────────


class _Resolution:
    """Mutable scratchpad shared by one handler invocation.

    The activation is captured up front: removing a king mid-handler ends
    the game and clears ``state.activation``.
    """

    __slots__ = (
        "state",
        "dice",
        "effect",
        "roll",
        "changed",
        "details",
        "rolls",
        "activation",
    )

    def __init__(
        self,
        state: GameState,
        dice: Dice,
        effect: RiftEffect,
        roll: int,
        details: tuple[str, ...] = (),
        rolls: tuple[int, ...] = (),
    ) -> None:
        if state.activation is None:
            raise RuntimeError("No rift activation in progress")
        self.state = state
        self.dice = dice
        self.effect = effect
        self.roll = roll
        self.changed = False
        self.details: list[str] = list(details)
        self.rolls: list[int] = list(rolls)
        self.activation: Activation = state.activation

    # -- Activation shortcuts -------------------------------------------------

    @property
    def rift(self) -> Coord:
        return self.activation.rift

    @property
    def color(self) -> Color:
        return self.activation.color

    def activator(self) -> tuple[Coord, Piece] | None:
        """Square and piece of the activator, if it is still on the board."""
        sq = self.state.board.find(self.activation.piece_id)
        if sq is None:
            return None
        piece = self.state.board[sq]
        assert piece is not None
        return sq, piece

    # -- Effect primitives ----------------------------------------------------

    def note(self, message: str, *args: Any) -> None:
        self.details.append(message % args if args else message)

    def draw(self, sides: int = D20) -> int:
        value = self.dice.roll(sides)
        self.rolls.append(value)
        return value

    def remove(self, sq: Coord) -> Piece:
        piece = self.state.capture(sq)
        self.changed = True
        self.note("%s %s removed from %s", piece.color, piece.piece_type, square_name(sq))
        return piece

    def put(self, sq: Coord, piece: Piece) -> None:
        self.state.place(sq, piece)
        self.changed = True
        self.note("%s %s placed on %s", piece.color, piece.piece_type, square_name(sq))

    def relocate(self, src: Coord, dst: Coord) -> None:
        piece = self.state.board[src]
        if piece is None:
            raise ValueError(f"No piece to relocate on {src}")
        self.state.board[src] = None
        self.state.place(dst, piece)
        self.changed = True
        self.note("%s moved to %s", piece.piece_type, square_name(dst))

    def set_field(self, effect: FieldEffect) -> None:
        self.state.set_field_effect(effect)
        self.changed = True
        self.note("Field effect is now %s", effect.label)

    def ask(
        self,
        kind: ChoiceKind,
        options: tuple[Any, ...],
        squares: tuple[Coord, ...] = (),
    ) -> PendingChoice:
        return PendingChoice(
            choice_id=self.state.next_choice_id(self.effect),
            effect=self.effect,
            kind=kind,
            color=self.color,
            rift=self.rift,
            options=options,
            squares=squares,
        )

    def outcome(self, *, pending: bool = False) -> EffectOutcome:
        return EffectOutcome(
            effect=self.effect,
            roll=self.roll,
            changed=self.changed,
            pending=pending,
            details=tuple(self.details),
            extra_rolls=tuple(self.rolls),
        )


Handler = Callable[[_Resolution], "PendingChoice | None"]
Resumer = Callable[[_Resolution, PendingChoice, Any], None]


# ── Public API ───────────────────────────────────────────────────────────────


def resolve(
    state: GameState, effect: RiftEffect, roll: int, dice: Dice
) -> tuple[GameState, EffectOutcome, PendingChoice | None]:
    """Apply *effect* for the current activation.

    *state* is not modified. Returns the new state, the outcome, and the
    pending choice (if the effect needs a player decision).
    """
    ctx = _Resolution(state.copy(), dice, effect, roll)
    _LOGGER.info("Rift %s rolled %d: %s", square_name(ctx.rift), roll, effect.title)
    try:
        choice = _HANDLERS[effect](ctx)
    except Exception:
        _LOGGER.exception("Rift effect %s failed; state rolled back", effect.title)
        return _rolled_back(state, effect, roll, ctx.rolls)

    if ctx.state.is_game_over:
        choice = None
    if choice is None and not ctx.changed:
        _LOGGER.info("Rift effect %s had no effect", effect.title)
    return ctx.state, ctx.outcome(pending=choice is not None), choice


def resume(
    state: GameState, payload: dict[str, Any], dice: Dice
) -> tuple[GameState, EffectOutcome]:
    """Complete the pending choice of *state* with *payload*.

    Raises:
        ChoiceError: the payload is malformed or not among the options;
            *state* is left as it was.
    """
    choice = state.pending_choice
    if choice is None:
        raise ChoiceError("No choice is pending")
    answer = _parse_payload(choice, payload)

    previous = state.last_effect
    ctx = _Resolution(
        state.copy(),
        dice,
        choice.effect,
        previous.roll if previous is not None else int(choice.effect),
        details=previous.details if previous is not None else (),
        rolls=previous.extra_rolls if previous is not None else (),
    )
    ctx.changed = previous.changed if previous is not None else False
    try:
        _RESUMERS[choice.effect](ctx, choice, answer)
    except Exception:
        _LOGGER.exception(
            "Rift effect %s failed while applying a choice; state rolled back",
            choice.effect.title,
        )
        return _rolled_back(state, choice.effect, ctx.roll, ctx.rolls)[:2]

    ctx.state.pending_choice = None
    if not ctx.changed:
        _LOGGER.info("Rift effect %s had no effect", choice.effect.title)
    return ctx.state, ctx.outcome()


def _rolled_back(
    state: GameState, effect: RiftEffect, roll: int, rolls: list[int]
) -> tuple[GameState, EffectOutcome, None]:
    restored = state.copy()
    restored.pending_choice = None
    outcome = EffectOutcome(
        effect=effect,
        roll=roll,
        failed=True,
        details=("Effect failed and was reverted",),
        extra_rolls=tuple(rolls),
    )
    return restored, outcome, None


def _parse_payload(choice: PendingChoice, payload: dict[str, Any]) -> Any:
    if not isinstance(payload, dict):
        raise ChoiceError("Choice payload must be an object")
    kind = choice.kind
    if kind == ChoiceKind.CAPTURED_PIECE:
        return parse_index(payload, choice.options)
    if kind in (ChoiceKind.TARGET_SQUARE, ChoiceKind.RIFT):
        return parse_square(payload, choice.options)
    if kind == ChoiceKind.DIRECTION:
        return parse_direction(payload, choice.options)
    if kind == ChoiceKind.ACCEPT_DECLINE:
        return parse_accept(payload)
    return (parse_index(payload, choice.options), parse_square(payload, choice.squares))


# ── Handlers ─────────────────────────────────────────────────────────────────


def _necromancers_trap(ctx: _Resolution) -> PendingChoice | None:
    found = ctx.activator()
    if found is not None:
        ctx.remove(found[0])
    pool = ctx.state.captured[ctx.color.opposite]
    if not pool:
        ctx.note("No captured %s piece to raise", ctx.color.opposite)
        return None
    return ctx.ask(ChoiceKind.CAPTURED_PIECE, tuple(range(len(pool))))


def _resume_necromancers_trap(ctx: _Resolution, choice: PendingChoice, index: int) -> None:
    piece = ctx.state.take_captured(ctx.color.opposite, index)
    ctx.put(choice.rift, piece)


def _first_piece_on_ray(
    state: GameState, origin: Coord, direction: Coord, reach: int
) -> Coord | None:
    row, col = origin
    dr, dc = direction
    for dist in range(1, reach + 1):
        sq = (row + dr * dist, col + dc * dist)
        if not in_bounds(*sq):
            return None
        if state.board[sq] is not None:
            return sq
    return None


def _archers_trick_shot(ctx: _Resolution) -> PendingChoice | None:
    targets = tuple(
        sq
        for direction in QUEEN_DIRS
        if (sq := _first_piece_on_ray(ctx.state, ctx.rift, direction, ARCHER_RANGE))
        is not None
    )
    if not targets:
        ctx.note("No target in range")
        return None
    return ctx.ask(ChoiceKind.TARGET_SQUARE, targets)


def _resume_archers_trick_shot(ctx: _Resolution, choice: PendingChoice, sq: Coord) -> None:
    ctx.remove(sq)


def _sandworm(ctx: _Resolution) -> None:
    for sq in squares_within(ctx.rift, 1):
        if ctx.state.board[sq] is not None:
            ctx.remove(sq)


def _honorable_sacrifice(ctx: _Resolution) -> None:
    found = ctx.activator()
    if found is not None:
        ctx.remove(found[0])
    row, col = ctx.rift
    for dr, dc in KING_OFFSETS:
        sq = (row + dr, col + dc)
        if not in_bounds(*sq):
            continue
        piece = ctx.state.board[sq]
        if piece is not None and piece.color != ctx.color:
            ctx.remove(sq)
            return
    ctx.note("No enemy piece adjacent to the rift")


def _demotion(ctx: _Resolution) -> None:
    found = ctx.activator()
    if found is None:
        return
    sq, piece = found
    if piece.piece_type not in _DEMOTABLE:
        ctx.note("Only officers can be demoted")
        return
    pool = ctx.state.captured[ctx.color]
    pawn_index = next((i for i, p in enumerate(pool) if p.is_pawn), None)
    if pawn_index is None:
        ctx.note("No captured pawn to promote in its place")
        return
    ctx.remove(sq)
    ctx.put(sq, ctx.state.take_captured(ctx.color, pawn_index))


def _foot_soldiers_gambit(ctx: _Resolution) -> None:
    found = ctx.activator()
    if found is None:
        return
    ctx.state.turn.forced_mover = found[1].id
    ctx.changed = True
    ctx.note("%s must move again", found[1].piece_type)


def _famine(ctx: _Resolution) -> None:
    ctx.set_field(FieldEffect.FAMINE)


def _holidays_rejuvenation(ctx: _Resolution) -> None:
    ctx.set_field(FieldEffect.HOLIDAY_REJUVENATION)


def _sandstorm(ctx: _Resolution) -> None:
    if not all(ctx.state.turn.player_has_moved.values()):
        ctx.note("Sandstorm needs both sides to have moved")
        return
    ctx.set_field(FieldEffect.SANDSTORM)


def _dragon_targets(ctx: _Resolution) -> dict[str, Coord]:
    targets: dict[str, Coord] = {}
    for name, direction in CARDINAL_DIRECTIONS.items():
        sq = _first_piece_on_ray(ctx.state, ctx.rift, direction, DRAGON_RANGE)
        if sq is None:
            continue
        piece = ctx.state.board[sq]
        if piece is not None and piece.color != ctx.color:
            targets[name] = sq
    return targets


def _dragons_breath(ctx: _Resolution) -> PendingChoice | None:
    targets = _dragon_targets(ctx)
    if not targets:
        ctx.note("No enemy in any direction")
        return None
    return ctx.ask(ChoiceKind.DIRECTION, tuple(targets))


def _resume_dragons_breath(ctx: _Resolution, choice: PendingChoice, direction: str) -> None:
    target = _dragon_targets(ctx)[direction]
    ctx.remove(target)


def _jack_frosts_mischief(ctx: _Resolution) -> None:
    ctx.set_field(FieldEffect.JACK_FROST_MISCHIEF)
    if ctx.draw() % 2 == 1:
        ctx.note("The frost settles; nothing slides")
        return
    found = ctx.activator()
    if found is None:
        return
    sq, piece = found
    dr, dc = step_towards(ctx.activation.from_sq, ctx.rift)
    dest = (sq[0] + dr, sq[1] + dc)
    if not in_bounds(*dest):
        ctx.note("The piece slid off the board")
        ctx.remove(sq)
        return
    other = ctx.state.board[dest]
    if other is not None:
        piece.freeze(by_field_effect=True)
        other.freeze(by_field_effect=True)
        ctx.note("Collision on %s froze both pieces", square_name(dest))
        return
    ctx.relocate(sq, dest)


def _portal_in_the_rift(ctx: _Resolution) -> PendingChoice | None:
    if ctx.activator() is None:
        return None
    targets = tuple(r for r in ctx.state.unspent_rifts() if r != ctx.rift)
    if not targets:
        ctx.note("No unactivated rift to travel to")
        return None
    return ctx.ask(ChoiceKind.RIFT, targets)


def _resume_portal_in_the_rift(ctx: _Resolution, choice: PendingChoice, dest: Coord) -> None:
    found = ctx.activator()
    if found is None:
        raise RuntimeError("Activator vanished before the portal opened")
    if ctx.state.board[dest] is not None:
        ctx.remove(dest)
        if ctx.state.is_game_over:
            return
    ctx.relocate(found[0], dest)


def _catapult_roulette(ctx: _Resolution) -> None:
    col = ctx.draw(D8) - 1
    rank = ctx.draw(D8)
    sq = (8 - rank, col)
    if not in_bounds(*sq):
        raise ValueError(f"Catapult roll off the board: {sq}")
    if ctx.state.board[sq] is None:
        ctx.note("The boulder lands on empty %s", square_name(sq))
        return
    ctx.remove(sq)


def _conquerors_tale(ctx: _Resolution) -> None:
    ability = ctx.state.king_abilities[ctx.color]
    if ability.double_move:
        ctx.note("The %s king already moves twice", ctx.color)
        return
    ability.double_move = True
    ctx.changed = True
    ctx.note("The %s king may now move twice per turn", ctx.color)


def _medusas_gaze(ctx: _Resolution) -> None:
    found = ctx.activator()
    if found is None:
        return
    found[1].freeze(by_field_effect=False)
    ctx.changed = True
    ctx.note("%s turned to stone on %s", found[1].piece_type, square_name(found[0]))


def _time_distortion(ctx: _Resolution) -> None:
    radius = time_distortion_radius(ctx.draw())
    frozen = 0
    for sq in squares_within(ctx.rift, radius):
        piece = ctx.state.board[sq]
        if piece is not None:
            piece.freeze(by_field_effect=True)
            frozen += 1
    ctx.changed = ctx.changed or frozen > 0
    ctx.note("Time stops within radius %d (%d pieces)", radius, frozen)


def _crossroad_demons_deal(ctx: _Resolution) -> PendingChoice | None:
    return ctx.ask(ChoiceKind.ACCEPT_DECLINE, (True, False))


def _resume_crossroad_demons_deal(
    ctx: _Resolution, choice: PendingChoice, accept: bool
) -> None:
    if not accept:
        ctx.note("The deal was declined")
        return
    found = ctx.activator()
    if found is not None:
        ctx.remove(found[0])
        if ctx.state.is_game_over:
            return

    toll = 1 if ctx.draw() % 2 == 1 else 2
    victims = [
        sq
        for sq, piece in ctx.state.board.occupied()
        if piece.color == ctx.color and not piece.is_king
    ][:toll]
    for sq in victims:
        ctx.remove(sq)

    pool = ctx.state.captured[ctx.color]
    officers = [i for i, p in enumerate(pool) if not p.is_pawn and not p.is_king]
    if not officers:
        ctx.note("No fallen officer to revive")
        return
    index = officers[ctx.draw(len(officers)) - 1]
    ctx.put(choice.rift, ctx.state.take_captured(ctx.color, index))


def _fairy_fountain(ctx: _Resolution) -> None:
    found = ctx.activator()
    if found is None or not found[1].is_pawn:
        ctx.note("Only a pawn can drink from the fountain")
        return
    found[1].fairy_fountain = True
    ctx.changed = True


def _eerie_fogs_turmoil(ctx: _Resolution) -> None:
    if ctx.draw() > EERIE_FOG_SKIP_MAX:
        ctx.note("The fog lifts")
        return
    ctx.state.turn.pending_skip = ctx.color
    ctx.changed = True
    ctx.note("%s will skip their next turn", ctx.color)


def _revival_squares(ctx: _Resolution) -> tuple[Coord, ...]:
    return tuple(
        (row, col)
        for row in sorted(ctx.color.home_rows)
        for col in range(8)
        if ctx.state.board[(row, col)] is None
    )


def _spring_of_revival(ctx: _Resolution) -> PendingChoice | None:
    pool = ctx.state.captured[ctx.color]
    if not pool:
        ctx.note("No captured piece to revive")
        return None
    squares = _revival_squares(ctx)
    if not squares:
        ctx.note("No open starting square")
        return None
    return ctx.ask(ChoiceKind.REVIVAL, tuple(range(len(pool))), squares)


def _resume_spring_of_revival(
    ctx: _Resolution, choice: PendingChoice, answer: tuple[int, Coord]
) -> None:
    index, sq = answer
    ctx.put(sq, ctx.state.take_captured(ctx.color, index))


def _blank(ctx: _Resolution) -> None:
    ctx.set_field(FieldEffect.BLANK)


_HANDLERS: dict[RiftEffect, Handler] = {
    RiftEffect.NECROMANCERS_TRAP: _necromancers_trap,
    RiftEffect.ARCHERS_TRICK_SHOT: _archers_trick_shot,
    RiftEffect.SANDWORM: _sandworm,
    RiftEffect.HONORABLE_SACRIFICE: _honorable_sacrifice,
    RiftEffect.DEMOTION: _demotion,
    RiftEffect.FOOT_SOLDIERS_GAMBIT: _foot_soldiers_gambit,
    RiftEffect.FAMINE: _famine,
    RiftEffect.HOLIDAYS_REJUVENATION: _holidays_rejuvenation,
    RiftEffect.SANDSTORM: _sandstorm,
    RiftEffect.DRAGONS_BREATH: _dragons_breath,
    RiftEffect.JACK_FROSTS_MISCHIEF: _jack_frosts_mischief,
    RiftEffect.PORTAL_IN_THE_RIFT: _portal_in_the_rift,
    RiftEffect.CATAPULT_ROULETTE: _catapult_roulette,
    RiftEffect.CONQUERORS_TALE: _conquerors_tale,
    RiftEffect.MEDUSAS_GAZE: _medusas_gaze,
    RiftEffect.TIME_DISTORTION: _time_distortion,
    RiftEffect.CROSSROAD_DEMONS_DEAL: _crossroad_demons_deal,
    RiftEffect.FAIRY_FOUNTAIN: _fairy_fountain,
    RiftEffect.EERIE_FOGS_TURMOIL: _eerie_fogs_turmoil,
    RiftEffect.SPRING_OF_REVIVAL: _spring_of_revival,
    RiftEffect.BLANK: _blank,
}

_RESUMERS: dict[RiftEffect, Resumer] = {
    RiftEffect.NECROMANCERS_TRAP: _resume_necromancers_trap,
    RiftEffect.ARCHERS_TRICK_SHOT: _resume_archers_trick_shot,
    RiftEffect.DRAGONS_BREATH: _resume_dragons_breath,
    RiftEffect.PORTAL_IN_THE_RIFT: _resume_portal_in_the_rift,
    RiftEffect.CROSSROAD_DEMONS_DEAL: _resume_crossroad_demons_deal,
    RiftEffect.SPRING_OF_REVIVAL: _resume_spring_of_revival,
}

assert set(_HANDLERS) == set(RiftEffect), "every rift effect needs a handler"
