"""Online play — rooms and the FastAPI websocket relay.

Quick start::

    import uvicorn
    from riftchess.netplay import create_app

    uvicorn.run(create_app(), port=8000)
"""

from riftchess.netplay.rooms import (
    NotSeatedError,
    NotYourTurnError,
    Role,
    Room,
    RoomFullError,
    RoomRegistry,
)
from riftchess.netplay.server import ClientMessage, create_app

__all__ = [
    "ClientMessage",
    "NotSeatedError",
    "NotYourTurnError",
    "Role",
    "Room",
    "RoomFullError",
    "RoomRegistry",
    "create_app",
]
