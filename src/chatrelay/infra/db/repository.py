"""Chat turn repository -- the only code that touches the collection.

Two operations, both single round-trips with no cross-operation
atomicity:

- ``insert`` stamps the persistence time and writes one document.
- ``find_recent`` reads the newest ``limit`` turns and hands them back
  oldest-first.
"""

import logging
from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from chatrelay.core.exceptions import StoreError
from chatrelay.infra.metrics import STORE_ERRORS_TOTAL, TURNS_PERSISTED_TOTAL
from chatrelay.infra.telemetry import (
    ATTR_SESSION_ID,
    ATTR_STORE_LIMIT,
    ATTR_STORE_RESULT_COUNT,
    SPAN_STORE_FIND_RECENT,
    SPAN_STORE_INSERT,
    tracer,
)
from chatrelay.infra.time_utils import utc_now

from .models import FIELD_SESSION_ID, FIELD_TIMESTAMP, ChatTurn

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50
# BSON int64 ceiling; larger limits cannot be encoded in a find command.
MAX_HISTORY_LIMIT = 2**63 - 1

OP_INSERT = "insert"
OP_FIND_RECENT = "find_recent"

SESSION_TIMESTAMP_INDEX = [(FIELD_SESSION_ID, ASCENDING), (FIELD_TIMESTAMP, DESCENDING)]


def coerce_limit(raw: Any, default: int = DEFAULT_HISTORY_LIMIT) -> int:
    """Turn caller input into a usable ``limit``.

    Integers and integer strings pass through; ``0`` is kept (it yields
    an empty page).  Missing, non-numeric, negative and out-of-range
    input fall back to *default*.
    """
    if raw is None or isinstance(raw, bool):
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value if 0 <= value <= MAX_HISTORY_LIMIT else default


class ChatTurnRepository:
    """Insert / find-recent over the chat turn collection."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._collection = collection

    async def insert(self, turn: ChatTurn) -> ChatTurn:
        """Persist *turn*; return it with ``timestamp`` and ``id`` set."""
        if turn.timestamp is None:
            turn = turn.model_copy(update={"timestamp": utc_now()})

        with tracer.start_as_current_span(SPAN_STORE_INSERT) as span:
            span.set_attribute(ATTR_SESSION_ID, turn.session_id)
            try:
                result = await self._collection.insert_one(turn.to_document())
            except PyMongoError as exc:
                STORE_ERRORS_TOTAL.labels(operation=OP_INSERT).inc()
                raise StoreError(
                    f"Failed to save chat turn: {exc}", operation=OP_INSERT
                ) from exc

        TURNS_PERSISTED_TOTAL.inc()
        logger.debug("Saved chat turn %s for session %s", result.inserted_id, turn.session_id)
        return turn.model_copy(update={"id": str(result.inserted_id)})

    async def find_recent(self, session_id: str | None, limit: int) -> list[ChatTurn]:
        """Return up to *limit* most recent turns, oldest first.

        ``session_id=None`` reads across all sessions.
        """
        if limit <= 0:
            return []

        query: dict[str, Any] = {}
        if session_id is not None:
            query[FIELD_SESSION_ID] = session_id

        with tracer.start_as_current_span(SPAN_STORE_FIND_RECENT) as span:
            span.set_attribute(ATTR_SESSION_ID, session_id or "")
            span.set_attribute(ATTR_STORE_LIMIT, limit)
            try:
                cursor = (
                    self._collection.find(query)
                    .sort(FIELD_TIMESTAMP, DESCENDING)
                    .limit(limit)
                )
                docs = await cursor.to_list(length=limit)
            except PyMongoError as exc:
                STORE_ERRORS_TOTAL.labels(operation=OP_FIND_RECENT).inc()
                raise StoreError(
                    f"Failed to read chat history: {exc}", operation=OP_FIND_RECENT
                ) from exc
            span.set_attribute(ATTR_STORE_RESULT_COUNT, len(docs))

        return [ChatTurn.from_document(doc) for doc in reversed(docs)]

    async def ensure_indexes(self) -> None:
        """Create the (sessionId, timestamp) index used by ``find_recent``."""
        await self._collection.create_index(SESSION_TIMESTAMP_INDEX)
