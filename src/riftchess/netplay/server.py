"""FastAPI relay: one authoritative game per room, JSON over websockets.

Clients never send state, only commands. Every accepted command is
followed by a ``state`` broadcast to everyone in the room; rejected
commands get a ``rejected`` reply to the sender only.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Literal

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from riftchess.config import Settings
from riftchess.core.dice import RandomDice
from riftchess.game.controller import GameController
from riftchess.game.interfaces import CommandResult
from riftchess.netplay.rooms import (
    NotSeatedError,
    NotYourTurnError,
    Role,
    Room,
    RoomFullError,
    RoomRegistry,
)

_LOGGER = logging.getLogger(__name__)

MessageType = Literal[
    "join",
    "place_rift",
    "random_rifts",
    "start",
    "move",
    "roll",
    "choice",
    "end_turn",
    "resign",
    "reset",
]


class ClientMessage(BaseModel):
    """A command sent by a client. Only the fields its type needs are read."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: MessageType
    role: Role = Role.PLAYER
    row: int | None = None
    col: int | None = None
    from_sq: tuple[int, int] | None = Field(default=None, alias="from")
    to_sq: tuple[int, int] | None = Field(default=None, alias="to")
    choice_id: str | None = Field(default=None, alias="choiceId")
    payload: dict[str, Any] = Field(default_factory=dict)


# ── Room plumbing ────────────────────────────────────────────────────────────


def state_message(room: Room, notice: str = "") -> dict[str, Any]:
    seated = {str(c) for c in room.players.values() if c is not None}
    return {
        "type": "state",
        "room": room.code,
        "state": room.controller.snapshot(),
        "seats": {"white": "white" in seated, "black": "black" in seated},
        "spectators": len(room.spectators),
        "notice": notice,
    }


async def broadcast(room: Room, notice: str = "") -> None:
    clients = room.clients
    if not clients:
        return
    msg = json.dumps(state_message(room, notice))
    await asyncio.gather(
        *[ws.send_text(msg) for ws in clients],
        return_exceptions=True,
    )


def _rejected(reason: str) -> dict[str, Any]:
    return {"type": "rejected", "reason": reason}


def _require(value: Any, what: str) -> Any:
    if value is None:
        raise ValueError(f"Message is missing '{what}'")
    return value


def dispatch(room: Room, client: Any, msg: ClientMessage) -> CommandResult:
    """Run *msg* against the room's game on behalf of *client*.

    Raises:
        NotSeatedError, NotYourTurnError: the client may not act.
        ValueError: a required field is missing.
    """
    ctrl = room.controller
    kind = msg.type

    if kind in ("place_rift", "random_rifts", "start", "reset"):
        room.authorize(client, turn=False)
        if kind == "place_rift":
            return ctrl.place_rift(_require(msg.row, "row"), _require(msg.col, "col"))
        if kind == "random_rifts":
            return ctrl.generate_random_rifts()
        if kind == "start":
            return ctrl.start_game()
        ctrl.new_game()
        return CommandResult.ok()

    if kind == "resign":
        return ctrl.resign(room.authorize(client, turn=False))

    room.authorize(client)
    if kind == "move":
        (fr, fc), (tr, tc) = _require(msg.from_sq, "from"), _require(msg.to_sq, "to")
        return ctrl.request_move(fr, fc, tr, tc)
    if kind == "roll":
        return ctrl.roll_rift_die()
    if kind == "choice":
        return ctrl.submit_choice(_require(msg.choice_id, "choiceId"), msg.payload)
    return ctrl.end_turn()


async def join_room(room: Room, websocket: WebSocket, role: Role) -> None:
    """Seat *websocket* and tell it, and every player, their color."""
    room.join(websocket, role)
    notices = []
    for client in room.clients:
        if client is websocket or client in room.players:
            color = room.color_of(client)
            notices.append(
                client.send_json(
                    {
                        "type": "joined",
                        "room": room.code,
                        "role": str(Role.PLAYER if client in room.players else role),
                        "color": str(color) if color is not None else None,
                    }
                )
            )
    await asyncio.gather(*notices, return_exceptions=True)


# ── Application factory ──────────────────────────────────────────────────────


def create_app(
    settings: Settings | None = None, registry: RoomRegistry | None = None
) -> FastAPI:
    settings = settings if settings is not None else Settings()
    if registry is None:
        registry = RoomRegistry(
            lambda code: Room(
                code,
                GameController(
                    RandomDice(settings.seed), max_attempts=settings.rift_attempts
                ),
            )
        )

    app = FastAPI(title="Rift Chess relay")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.registry = registry

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "rooms": len(registry)}

    @app.get("/rooms/{code}")
    async def room_snapshot(code: str) -> dict[str, Any]:
        room = registry.get(code)
        if room is None:
            raise HTTPException(status_code=404, detail=f"room '{code}' not found")
        return state_message(room)

    @app.websocket("/ws/game/{code}")
    async def ws_game(websocket: WebSocket, code: str) -> None:
        await websocket.accept()
        room = registry.get_or_create(code)
        room.connections += 1
        await websocket.send_json(state_message(room))

        try:
            while True:
                text = await websocket.receive_text()
                try:
                    msg = ClientMessage.model_validate(json.loads(text))
                except (json.JSONDecodeError, ValidationError) as exc:
                    _LOGGER.debug("Bad message in room %s: %s", code, exc)
                    await websocket.send_json(_rejected("Malformed message"))
                    continue

                async with room.lock:
                    if msg.type == "join":
                        try:
                            await join_room(room, websocket, msg.role)
                        except RoomFullError as exc:
                            await websocket.send_json(
                                {"type": "room_full", "room": exc.code, "role": str(exc.role)}
                            )
                            continue
                        await broadcast(room)
                        continue

                    try:
                        result = dispatch(room, websocket, msg)
                    except (NotSeatedError, NotYourTurnError, ValueError) as exc:
                        result = CommandResult.rejected(str(exc))

                    if result:
                        await broadcast(room, result.reason)
                    else:
                        await websocket.send_json(_rejected(result.reason))
        except WebSocketDisconnect:
            _LOGGER.debug("Client left room %s", code)
        finally:
            async with room.lock:
                was_member = websocket in room.clients
                room.leave(websocket)
                room.connections -= 1
                registry.release(code)
                if was_member and code in registry:
                    await broadcast(room)
