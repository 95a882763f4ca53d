"""Tests for the FastAPI relay — HTTP routes and websocket play."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from riftchess.config import Settings
from riftchess.core.dice import FixedDice
from riftchess.core.enums import Color
from riftchess.game.controller import GameController
from riftchess.netplay.rooms import Role, Room, RoomRegistry
from riftchess.netplay.server import create_app, join_room

LAYOUT = [1, 1, 2, 2, 3, 3, 4, 4]  # a6, b5, c4, d3


@pytest.fixture
def client() -> Iterator[TestClient]:
    registry = RoomRegistry(
        lambda code: Room(code, GameController(FixedDice(LAYOUT)), coin=FixedDice([1]))
    )
    with TestClient(create_app(Settings(), registry)) as test_client:
        yield test_client


def _join(ws: Any, role: str = "player") -> dict[str, Any]:
    ws.send_json({"type": "join", "role": role})
    return ws.receive_json()


class _Socket:
    """Stands in for a websocket; a closed one fails every send."""

    def __init__(self, *, closed: bool = False) -> None:
        self.closed = closed
        self.sent: list[dict[str, Any]] = []

    async def send_json(self, data: dict[str, Any]) -> None:
        if self.closed:
            raise RuntimeError("socket is closed")
        self.sent.append(data)


class TestHttp:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "rooms": 0}

    def test_unknown_room(self, client: TestClient) -> None:
        assert client.get("/rooms/nowhere").status_code == 404

    def test_room_snapshot(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/game/r1") as ws:
            ws.receive_json()
            data = client.get("/rooms/r1").json()
            assert data["type"] == "state"
            assert data["state"]["phase"] == "setup"


class TestWebsocket:
    def test_initial_state(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/game/r2") as ws:
            initial = ws.receive_json()
            assert initial["type"] == "state"
            assert initial["room"] == "r2"
            assert initial["state"]["currentPlayer"] == "white"
            assert initial["seats"] == {"white": False, "black": False}

    def test_malformed_messages(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/game/r3") as ws:
            ws.receive_json()
            ws.send_text("not json")
            assert ws.receive_json() == {"type": "rejected", "reason": "Malformed message"}
            ws.send_json({"type": "teleport"})
            assert ws.receive_json()["type"] == "rejected"

    def test_unseated_client_rejected(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/game/r4") as ws:
            ws.receive_json()
            ws.send_json({"type": "random_rifts"})
            reply = ws.receive_json()
            assert reply == {"type": "rejected", "reason": "Only seated players can do that"}

    def test_spectator_join(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/game/r5") as ws:
            ws.receive_json()
            joined = _join(ws, "spectator")
            assert joined == {"type": "joined", "room": "r5", "role": "spectator", "color": None}
            assert ws.receive_json()["spectators"] == 1
            ws.send_json({"type": "start"})
            assert ws.receive_json()["type"] == "rejected"


class TestTwoPlayerGame:
    def test_full_flow(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/game/duel") as white:
            white.receive_json()
            assert _join(white)["color"] is None
            white.receive_json()

            with client.websocket_connect("/ws/game/duel") as black:
                black.receive_json()
                black.send_json({"type": "join"})
                assert white.receive_json()["color"] == "white"
                assert black.receive_json()["color"] == "black"
                for ws in (white, black):
                    assert ws.receive_json()["seats"] == {"white": True, "black": True}

                white.send_json({"type": "random_rifts"})
                for ws in (white, black):
                    assert len(ws.receive_json()["state"]["rifts"]) == 4

                black.send_json({"type": "start"})
                for ws in (white, black):
                    assert ws.receive_json()["state"]["phase"] == "playing"

                black.send_json({"type": "move", "from": [1, 4], "to": [3, 4]})
                reply = black.receive_json()
                assert reply == {"type": "rejected", "reason": "It is white's turn, not black's"}

                white.send_json({"type": "move", "from": [6, 4], "to": [5, 5]})
                assert white.receive_json()["reason"] == "Illegal move: e2f3"

                white.send_json({"type": "move", "from": [6, 4], "to": [4, 4]})
                for ws in (white, black):
                    state = ws.receive_json()["state"]
                    assert state["currentPlayer"] == "black"
                    assert state["lastMove"] == {"from": [6, 4], "to": [4, 4]}

                with client.websocket_connect("/ws/game/duel") as third:
                    third.receive_json()
                    assert _join(third) == {"type": "room_full", "room": "duel", "role": "player"}

            left = white.receive_json()
            assert left["seats"] == {"white": True, "black": False}

        assert client.get("/health").json()["rooms"] == 0

    def test_reset(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/game/again") as a:
            a.receive_json()
            _join(a)
            a.receive_json()
            with client.websocket_connect("/ws/game/again") as b:
                b.receive_json()
                b.send_json({"type": "join"})
                a.receive_json()
                b.receive_json()
                a.receive_json()
                b.receive_json()

                a.send_json({"type": "place_rift", "row": 3, "col": 3})
                for ws in (a, b):
                    assert ws.receive_json()["state"]["rifts"] == [
                        {"row": 3, "col": 3, "spent": False}
                    ]
                b.send_json({"type": "reset"})
                for ws in (a, b):
                    assert ws.receive_json()["state"]["rifts"] == []


class TestJoinNotices:
    def test_closed_peer_does_not_break_join(self) -> None:
        room = Room("stale", GameController(FixedDice()), coin=FixedDice([1]))
        peer = _Socket(closed=True)
        room.join(peer)
        newcomer = _Socket()

        asyncio.run(join_room(room, newcomer, Role.PLAYER))  # type: ignore[arg-type]

        assert newcomer.sent == [
            {"type": "joined", "room": "stale", "role": "player", "color": "black"}
        ]
        assert room.color_of(newcomer) == Color.BLACK
        assert room.color_of(peer) == Color.WHITE
