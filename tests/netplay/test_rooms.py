"""Tests for rooms: seats, spectators and turn authorization."""

import pytest

from riftchess.core.dice import FixedDice
from riftchess.core.enums import Color
from riftchess.game.controller import GameController
from riftchess.netplay.rooms import (
    NotSeatedError,
    NotYourTurnError,
    Role,
    Room,
    RoomFullError,
    RoomRegistry,
)


def _room(coin: int = 1) -> Room:
    return Room("abc", GameController(FixedDice()), coin=FixedDice([coin]))


class TestSeats:
    def test_first_player_waits_for_color(self) -> None:
        room = _room()
        assert room.join("alice") is None

    def test_coin_flip_on_second_player(self) -> None:
        room = _room(coin=2)
        room.join("alice")
        assert room.join("bob") == Color.WHITE
        assert room.color_of("alice") == Color.BLACK

    def test_rejoin_is_idempotent(self) -> None:
        room = _room()
        room.join("alice")
        room.join("bob")
        assert room.join("alice") == Color.WHITE

    def test_third_player_rejected(self) -> None:
        room = _room()
        room.join("alice")
        room.join("bob")
        with pytest.raises(RoomFullError) as exc:
            room.join("carol")
        assert exc.value.code == "abc"

    def test_spectator_limit(self) -> None:
        room = _room()
        room.join("s1", Role.SPECTATOR)
        room.join("s2", Role.SPECTATOR)
        with pytest.raises(RoomFullError):
            room.join("s3", Role.SPECTATOR)
        assert room.clients == ["s1", "s2"]

    def test_newcomer_takes_free_color(self) -> None:
        room = _room(coin=1)
        room.join("alice")
        room.join("bob")
        room.leave("alice")
        assert room.join("carol") == Color.WHITE
        assert room.color_of("bob") == Color.BLACK

    def test_leave_empties_room(self) -> None:
        room = _room()
        room.join("alice")
        room.join("s1", Role.SPECTATOR)
        room.leave("alice")
        room.leave("s1")
        assert room.is_empty


class TestAuthorize:
    def test_turn_order(self) -> None:
        room = _room(coin=1)
        room.join("alice")
        room.join("bob")
        assert room.authorize("alice") == Color.WHITE
        with pytest.raises(NotYourTurnError):
            room.authorize("bob")
        assert room.authorize("bob", turn=False) == Color.BLACK

    def test_spectator_cannot_act(self) -> None:
        room = _room()
        room.join("s1", Role.SPECTATOR)
        with pytest.raises(NotSeatedError):
            room.authorize("s1", turn=False)

    def test_unpaired_player_cannot_act(self) -> None:
        room = _room()
        room.join("alice")
        with pytest.raises(NotSeatedError):
            room.authorize("alice", turn=False)


class TestRegistry:
    def test_get_or_create(self) -> None:
        registry = RoomRegistry()
        room = registry.get_or_create("x")
        assert registry.get_or_create("x") is room
        assert "x" in registry and len(registry) == 1

    def test_release_only_when_empty(self) -> None:
        registry = RoomRegistry()
        room = registry.get_or_create("x")
        room.join("alice")
        registry.release("x")
        assert "x" in registry
        room.leave("alice")
        registry.release("x")
        assert registry.get("x") is None
