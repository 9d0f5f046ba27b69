"""Chat relay and history services."""

from .chat import MESSAGE_REQUIRED, ChatRelayService
from .deps import get_chat_service, get_history_service
from .history import HistoryService
from .models import ChatReply

__all__ = [
    "ChatRelayService",
    "ChatReply",
    "get_chat_service",
    "get_history_service",
    "HistoryService",
    "MESSAGE_REQUIRED",
]
