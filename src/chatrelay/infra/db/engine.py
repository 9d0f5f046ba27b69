"""Shared MongoDB client lifecycle.

``build_mongo`` is a lifespan dependency: it creates one
``AsyncIOMotorClient`` for the whole process, attaches it and the chat
turn collection to ``app.state``, and closes the client on shutdown.
Per-request dependencies read from ``app.state``.

A missing connection URI aborts startup.  An unreachable server does
not: the relay keeps serving and ``/api/health`` reports the store as
disconnected until the driver reconnects.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from datetime import timedelta
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from chatrelay.configs.config import AppConfig, ConfigError, get_app_config
from chatrelay.infra.lifespan import get_app

from .repository import ChatTurnRepository

logger = logging.getLogger(__name__)

_PING_COMMAND = "ping"


async def is_store_connected(client: AsyncIOMotorClient, timeout: timedelta) -> bool:
    """Live ping bounded by *timeout*; never raises."""
    try:
        await asyncio.wait_for(
            client.admin.command(_PING_COMMAND), timeout.total_seconds()
        )
    except (PyMongoError, asyncio.TimeoutError):
        return False
    return True


# ---------------------------------------------------------------------------
# Lifespan dependency
# ---------------------------------------------------------------------------


async def build_mongo(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create the Mongo client + collection handle, attach to ``app.state``."""
    tp = config.third_party
    if not tp.mongodb_uri:
        raise ConfigError(
            "MongoDB URI is not set "
            "(CHATRELAY_THIRD_PARTY__MONGODB_URI); refusing to start."
        )

    client: AsyncIOMotorClient = AsyncIOMotorClient(tp.mongodb_uri, tz_aware=True)
    collection = client[tp.mongodb_database][tp.mongodb_collection]

    if await is_store_connected(client, tp.mongodb_ping_timeout):
        logger.info(
            "Connected to MongoDB (database=%s, collection=%s)",
            tp.mongodb_database,
            tp.mongodb_collection,
        )
        try:
            await ChatTurnRepository(collection).ensure_indexes()
        except PyMongoError:
            logger.warning("Could not create chat turn indexes", exc_info=True)
    else:
        logger.error(
            "MongoDB not reachable at startup -- serving anyway, "
            "history and chat writes will fail until it is."
        )

    app.state.mongo_client = client
    app.state.chat_turn_collection = collection
    yield
    client.close()
    logger.info("MongoDB client closed")


# ---------------------------------------------------------------------------
# Per-request dependencies -- read from app.state
# ---------------------------------------------------------------------------


def get_mongo_client(request: Request) -> AsyncIOMotorClient:
    """Return the shared ``AsyncIOMotorClient`` from ``app.state``."""
    return request.app.state.mongo_client


def get_chat_turn_collection(request: Request) -> AsyncIOMotorCollection:
    """Return the chat turn collection handle from ``app.state``."""
    return request.app.state.chat_turn_collection


def get_chat_turn_repository(
    collection: Annotated[AsyncIOMotorCollection, Depends(get_chat_turn_collection)],
) -> ChatTurnRepository:
    """Return a repository over the shared collection handle."""
    return ChatTurnRepository(collection)
