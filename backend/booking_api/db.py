from __future__ import annotations

"""Process-wide Motor client.

The client is created once by `connect_mongo` on startup and shared by every
request through the `get_db` dependency.
"""

import os
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase


_mongo_client: Optional[AsyncIOMotorClient] = None
_db: Optional[AsyncIOMotorDatabase] = None


def _mongo_url() -> str:
    url = os.environ.get("MONGO_URL") or os.environ.get("MONGODB_URI")
    if not url:
        raise RuntimeError("Missing env var MONGO_URL")
    return url


def _db_name() -> str:
    return os.environ.get("DB_NAME", "booking_api")


def _server_selection_timeout_ms() -> int:
    return int(os.environ.get("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000"))


async def connect_mongo() -> None:
    global _mongo_client, _db

    if _mongo_client is not None and _db is not None:
        return

    _mongo_client = AsyncIOMotorClient(
        _mongo_url(),
        tz_aware=True,
        serverSelectionTimeoutMS=_server_selection_timeout_ms(),
    )
    _db = _mongo_client[_db_name()]


async def close_mongo() -> None:
    global _mongo_client, _db

    if _mongo_client is not None:
        _mongo_client.close()

    _mongo_client = None
    _db = None


async def get_db() -> AsyncIOMotorDatabase:
    if _db is None:
        await connect_mongo()
    assert _db is not None
    return _db
