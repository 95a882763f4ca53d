"""Rooms for online play: seats, spectators and the authoritative game."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Hashable
from enum import StrEnum

from riftchess.core.dice import Dice, RandomDice
from riftchess.core.enums import Color
from riftchess.game.controller import GameController

_LOGGER = logging.getLogger(__name__)

MAX_PLAYERS = 2
MAX_SPECTATORS = 2


class Role(StrEnum):
    PLAYER = "player"
    SPECTATOR = "spectator"


class RoomFullError(Exception):
    def __init__(self, code: str, role: Role) -> None:
        self.code = code
        self.role = role
        super().__init__(f"Room '{code}' has no free {role} slot")


class NotSeatedError(Exception):
    """The client is a spectator or has no color yet."""


class NotYourTurnError(Exception):
    def __init__(self, color: Color, current: Color) -> None:
        self.color = color
        self.current = current
        super().__init__(f"It is {current}'s turn, not {color}'s")


class Room:
    """One game and the clients attached to it.

    Clients are any hashable handle (a websocket in the server). The first
    player waits without a color; colors are assigned by a coin flip once
    the second player joins.
    """

    __slots__ = (
        "code",
        "controller",
        "players",
        "spectators",
        "connections",
        "lock",
        "_coin",
    )

    def __init__(
        self,
        code: str,
        controller: GameController | None = None,
        coin: Dice | None = None,
    ) -> None:
        self.code = code
        self.controller = controller if controller is not None else GameController()
        self.players: dict[Hashable, Color | None] = {}
        self.spectators: list[Hashable] = []
        self.connections = 0  # open sockets, joined or not
        self.lock = asyncio.Lock()
        self._coin = coin if coin is not None else RandomDice()

    # ── Membership ───────────────────────────────────────────────────────

    @property
    def clients(self) -> list[Hashable]:
        return [*self.players, *self.spectators]

    @property
    def is_empty(self) -> bool:
        return not self.players and not self.spectators and self.connections == 0

    def join(self, client: Hashable, role: Role = Role.PLAYER) -> Color | None:
        """Attach *client*; returns its color if one is assigned.

        Raises:
            RoomFullError: no free slot for *role*.
        """
        if client in self.players:
            return self.players[client]
        if role == Role.SPECTATOR:
            if len(self.spectators) >= MAX_SPECTATORS:
                raise RoomFullError(self.code, role)
            self.spectators.append(client)
            return None
        if len(self.players) >= MAX_PLAYERS:
            raise RoomFullError(self.code, role)
        self.players[client] = None
        if len(self.players) == MAX_PLAYERS:
            self._assign_colors()
        return self.players[client]

    def leave(self, client: Hashable) -> None:
        if client in self.spectators:
            self.spectators.remove(client)
            return
        if client in self.players:
            color = self.players.pop(client)
            _LOGGER.info("Player %s left room %s", color or "(unseated)", self.code)

    def _assign_colors(self) -> None:
        taken = {c for c in self.players.values() if c is not None}
        waiting = [client for client, c in self.players.items() if c is None]
        if len(waiting) == MAX_PLAYERS:
            first = self._coin.choice((Color.WHITE, Color.BLACK))
            self.players[waiting[0]] = first
            self.players[waiting[1]] = first.opposite
        elif waiting:
            # a seat reopened; the newcomer takes the color left behind
            (free,) = {Color.WHITE, Color.BLACK} - taken
            self.players[waiting[0]] = free
        _LOGGER.info(
            "Room %s colors: %s",
            self.code,
            ", ".join(str(c) for c in self.players.values()),
        )

    def color_of(self, client: Hashable) -> Color | None:
        return self.players.get(client)

    # ── Authorization ────────────────────────────────────────────────────

    def authorize(self, client: Hashable, *, turn: bool = True) -> Color:
        """Color of *client*, checked against the side to act.

        Raises:
            NotSeatedError: the client holds no color.
            NotYourTurnError: *turn* is set and another side must act.
        """
        color = self.players.get(client)
        if color is None:
            raise NotSeatedError("Only seated players can do that")
        if turn:
            state = self.controller.state
            acting = (
                state.pending_choice.color
                if state.pending_choice is not None
                else state.current_player
            )
            if color != acting:
                raise NotYourTurnError(color, acting)
        return color


class RoomRegistry:
    """Rooms by code, created on first use and dropped when empty."""

    __slots__ = ("_rooms", "_factory")

    def __init__(self, factory: Callable[[str], Room] | None = None) -> None:
        self._rooms: dict[str, Room] = {}
        self._factory = factory if factory is not None else Room

    def __contains__(self, code: str) -> bool:
        return code in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def get(self, code: str) -> Room | None:
        return self._rooms.get(code)

    def get_or_create(self, code: str) -> Room:
        room = self._rooms.get(code)
        if room is None:
            room = self._factory(code)
            self._rooms[code] = room
            _LOGGER.info("Room %s created", code)
        return room

    def release(self, code: str) -> None:
        """Delete room *code* if nobody is left in it."""
        room = self._rooms.get(code)
        if room is not None and room.is_empty:
            del self._rooms[code]
            _LOGGER.info("Room %s deleted", code)
