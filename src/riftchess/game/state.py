"""Game state value — board, rifts, pools, modifiers and turn bookkeeping.

:class:`GameState` is plain data. Rule functions in
:mod:`riftchess.game.rules` copy it, change the copy and return it, so a
state handed out is never mutated behind the holder's back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from riftchess.core.board import Board
from riftchess.core.enums import Color, FieldEffect
from riftchess.core.move import Move
from riftchess.core.piece import Piece
from riftchess.core.types import Coord
from riftchess.effects.catalog import RiftEffect
from riftchess.effects.choices import PendingChoice
from riftchess.effects.outcome import EffectOutcome
from riftchess.game.interfaces import GamePhase, ResolutionStage


def _per_color(value: Any) -> dict[Color, Any]:
    return {Color.WHITE: value, Color.BLACK: value}


@dataclass(slots=True)
class KingAbility:
    """Per-color king powers granted by rift effects."""

    double_move: bool = False


@dataclass(slots=True)
class Activation:
    """A rift entry waiting to be resolved."""

    rift: Coord
    piece_id: int
    color: Color
    from_sq: Coord


@dataclass(slots=True)
class TurnState:
    """Bookkeeping that lives for one turn (or until consumed)."""

    current_player: Color = Color.WHITE
    rift_activated_this_turn: bool = False
    dice_rolled_this_turn: bool = False
    king_moves_this_turn: dict[Color, int] = field(default_factory=lambda: _per_color(0))
    king_moved_first: bool = False
    moves_this_turn: int = 0
    player_has_moved: dict[Color, bool] = field(
        default_factory=lambda: _per_color(False)
    )
    pending_skip: Color | None = None
    forced_mover: int | None = None

    def reset_for(self, player: Color) -> None:
        """Clear per-turn counters and hand the turn to *player*."""
        self.current_player = player
        self.rift_activated_this_turn = False
        self.dice_rolled_this_turn = False
        self.king_moves_this_turn = _per_color(0)
        self.king_moved_first = False
        self.moves_this_turn = 0
        self.forced_mover = None

    def copy(self) -> TurnState:
        return TurnState(
            current_player=self.current_player,
            rift_activated_this_turn=self.rift_activated_this_turn,
            dice_rolled_this_turn=self.dice_rolled_this_turn,
            king_moves_this_turn=dict(self.king_moves_this_turn),
            king_moved_first=self.king_moved_first,
            moves_this_turn=self.moves_this_turn,
            player_has_moved=dict(self.player_has_moved),
            pending_skip=self.pending_skip,
            forced_mover=self.forced_mover,
        )


@dataclass
class GameState:
    """Complete, serializable state of one game."""

    board: Board = field(default_factory=Board.initial)
    rifts: tuple[Coord, ...] = ()
    spent_rifts: set[Coord] = field(default_factory=set)
    captured: dict[Color, list[Piece]] = field(
        default_factory=lambda: {Color.WHITE: [], Color.BLACK: []}
    )
    field_effect: FieldEffect | None = None
    king_abilities: dict[Color, KingAbility] = field(
        default_factory=lambda: {Color.WHITE: KingAbility(), Color.BLACK: KingAbility()}
    )
    turn: TurnState = field(default_factory=TurnState)
    phase: GamePhase = GamePhase.SETUP
    winner: Color | None = None
    stage: ResolutionStage = ResolutionStage.IDLE
    activation: Activation | None = None
    pending_choice: PendingChoice | None = None
    last_move: Move | None = None
    last_effect: EffectOutcome | None = None
    ply_count: int = 0
    choice_seq: int = 0

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def current_player(self) -> Color:
        return self.turn.current_player

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.ENDED

    def frozen_pieces(self) -> set[int]:
        """Ids of frozen pieces on the board."""
        return {piece.id for _, piece in self.board.occupied() if piece.frozen}

    def unspent_rifts(self) -> tuple[Coord, ...]:
        return tuple(r for r in self.rifts if r not in self.spent_rifts)

    # ── Mutation helpers (use on a copy) ─────────────────────────────────

    def capture(self, sq: Coord) -> Piece:
        """Move the piece on *sq* to its color's captured pool.

        Removing a king ends the game in favour of the other side.
        """
        piece = self.board[sq]
        if piece is None:
            raise ValueError(f"No piece to remove on {sq}")
        self.board[sq] = None
        piece.thaw()
        self.captured[piece.color].append(piece)
        if piece.is_king:
            self.end_game(piece.color.opposite)
        return piece

    def place(self, sq: Coord, piece: Piece) -> None:
        """Put *piece* on an empty square."""
        if self.board[sq] is not None:
            raise ValueError(f"Square {sq} is occupied")
        self.board[sq] = piece

    def take_captured(self, color: Color, index: int) -> Piece:
        """Splice one piece out of *color*'s captured pool."""
        return self.captured[color].pop(index)

    def set_field_effect(self, effect: FieldEffect | None) -> None:
        """Replace the active field effect.

        Field-effect freezes are lifted; permanent freezes stay.
        """
        for _, piece in self.board.occupied():
            if piece.frozen and piece.frozen_by_field_effect:
                piece.thaw()
        self.field_effect = effect

    def end_game(self, winner: Color) -> None:
        if self.phase == GamePhase.ENDED:
            return
        self.phase = GamePhase.ENDED
        self.winner = winner
        self.stage = ResolutionStage.IDLE
        self.activation = None
        self.pending_choice = None

    def next_choice_id(self, effect: RiftEffect) -> str:
        self.choice_seq += 1
        return f"{effect.name.lower()}-{self.choice_seq}"

    # ── Copying ──────────────────────────────────────────────────────────

    def copy(self) -> GameState:
        return GameState(
            board=self.board.copy(),
            rifts=self.rifts,
            spent_rifts=set(self.spent_rifts),
            captured={c: [p.copy() for p in pool] for c, pool in self.captured.items()},
            field_effect=self.field_effect,
            king_abilities={
                c: KingAbility(a.double_move) for c, a in self.king_abilities.items()
            },
            turn=self.turn.copy(),
            phase=self.phase,
            winner=self.winner,
            stage=self.stage,
            activation=(
                Activation(
                    self.activation.rift,
                    self.activation.piece_id,
                    self.activation.color,
                    self.activation.from_sq,
                )
                if self.activation is not None
                else None
            ),
            pending_choice=self.pending_choice,
            last_move=self.last_move,
            last_effect=self.last_effect,
            ply_count=self.ply_count,
            choice_seq=self.choice_seq,
        )

    # ── Serialisation ────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly snapshot of everything the state holds."""
        turn = self.turn
        return {
            "phase": str(self.phase),
            "stage": str(self.stage),
            "currentPlayer": str(turn.current_player),
            "winner": str(self.winner) if self.winner is not None else None,
            "board": self.board.to_rows(),
            "nextPieceId": self.board.next_id,
            "rifts": [
                {"row": r, "col": c, "spent": (r, c) in self.spent_rifts}
                for r, c in self.rifts
            ],
            "captured": {
                str(color): [p.to_dict() for p in pool]
                for color, pool in self.captured.items()
            },
            "fieldEffect": str(self.field_effect) if self.field_effect else None,
            "kingAbilities": {
                str(color): {"doubleMove": a.double_move}
                for color, a in self.king_abilities.items()
            },
            "turn": {
                "riftActivatedThisTurn": turn.rift_activated_this_turn,
                "diceRolledThisTurn": turn.dice_rolled_this_turn,
                "kingMovedThisTurn": {
                    str(c): n for c, n in turn.king_moves_this_turn.items()
                },
                "kingMovedFirst": turn.king_moved_first,
                "movesThisTurn": turn.moves_this_turn,
                "playerHasMoved": {
                    str(c): moved for c, moved in turn.player_has_moved.items()
                },
                "pendingEerieFogSkip": (
                    str(turn.pending_skip) if turn.pending_skip is not None else None
                ),
                "forcedMover": turn.forced_mover,
            },
            "activation": (
                {
                    "rift": list(self.activation.rift),
                    "pieceId": self.activation.piece_id,
                    "color": str(self.activation.color),
                    "from": list(self.activation.from_sq),
                }
                if self.activation is not None
                else None
            ),
            "pendingChoice": (
                self.pending_choice.to_dict() if self.pending_choice else None
            ),
            "lastMove": (
                {
                    "from": list(self.last_move.from_sq),
                    "to": list(self.last_move.to_sq),
                }
                if self.last_move is not None
                else None
            ),
            "lastEffect": self.last_effect.to_dict() if self.last_effect else None,
            "plyCount": self.ply_count,
            "choiceSeq": self.choice_seq,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameState:
        """Rebuild a state from :meth:`to_dict` output."""
        t = data["turn"]
        turn = TurnState(
            current_player=Color.from_name(data["currentPlayer"]),
            rift_activated_this_turn=bool(t["riftActivatedThisTurn"]),
            dice_rolled_this_turn=bool(t["diceRolledThisTurn"]),
            king_moves_this_turn={
                Color.from_name(c): int(n) for c, n in t["kingMovedThisTurn"].items()
            },
            king_moved_first=bool(t["kingMovedFirst"]),
            moves_this_turn=int(t["movesThisTurn"]),
            player_has_moved={
                Color.from_name(c): bool(m) for c, m in t["playerHasMoved"].items()
            },
            pending_skip=(
                Color.from_name(t["pendingEerieFogSkip"])
                if t["pendingEerieFogSkip"]
                else None
            ),
            forced_mover=t["forcedMover"],
        )
        act = data.get("activation")
        last_move = data.get("lastMove")
        rifts = tuple((int(r["row"]), int(r["col"])) for r in data["rifts"])
        return cls(
            board=Board.from_rows(data["board"], int(data["nextPieceId"])),
            rifts=rifts,
            spent_rifts={
                (int(r["row"]), int(r["col"])) for r in data["rifts"] if r["spent"]
            },
            captured={
                Color.from_name(c): [Piece.from_dict(p) for p in pool]
                for c, pool in data["captured"].items()
            },
            field_effect=(
                FieldEffect(data["fieldEffect"]) if data["fieldEffect"] else None
            ),
            king_abilities={
                Color.from_name(c): KingAbility(bool(a["doubleMove"]))
                for c, a in data["kingAbilities"].items()
            },
            turn=turn,
            phase=GamePhase[data["phase"].upper()],
            winner=Color.from_name(data["winner"]) if data["winner"] else None,
            stage=ResolutionStage(data["stage"]),
            activation=(
                Activation(
                    rift=(act["rift"][0], act["rift"][1]),
                    piece_id=int(act["pieceId"]),
                    color=Color.from_name(act["color"]),
                    from_sq=(act["from"][0], act["from"][1]),
                )
                if act
                else None
            ),
            pending_choice=(
                PendingChoice.from_dict(data["pendingChoice"])
                if data.get("pendingChoice")
                else None
            ),
            last_move=(
                Move(tuple(last_move["from"]), tuple(last_move["to"]))
                if last_move
                else None
            ),
            last_effect=(
                EffectOutcome.from_dict(data["lastEffect"])
                if data.get("lastEffect")
                else None
            ),
            ply_count=int(data.get("plyCount", 0)),
            choice_seq=int(data.get("choiceSeq", 0)),
        )
