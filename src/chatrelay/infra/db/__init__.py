"""MongoDB persistence for chat turns (client lifecycle, model, repository)."""

from .engine import (
    build_mongo,
    get_chat_turn_collection,
    get_chat_turn_repository,
    get_mongo_client,
    is_store_connected,
)
from .models import (
    DEFAULT_SESSION_ID,
    FIELD_BOT_RESPONSE,
    FIELD_ID,
    FIELD_SESSION_ID,
    FIELD_TIMESTAMP,
    FIELD_USER_MESSAGE,
    ChatTurn,
)
from .repository import DEFAULT_HISTORY_LIMIT, ChatTurnRepository, coerce_limit

__all__ = [
    "build_mongo",
    "ChatTurn",
    "ChatTurnRepository",
    "coerce_limit",
    "DEFAULT_HISTORY_LIMIT",
    "DEFAULT_SESSION_ID",
    "FIELD_BOT_RESPONSE",
    "FIELD_ID",
    "FIELD_SESSION_ID",
    "FIELD_TIMESTAMP",
    "FIELD_USER_MESSAGE",
    "get_chat_turn_collection",
    "get_chat_turn_repository",
    "get_mongo_client",
    "is_store_connected",
]
