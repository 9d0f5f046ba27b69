"""Pydantic models for the HTTP API.

Field names are snake_case in Python and camelCase on the wire
(``sessionId``, ``userMessage`` ...) to match the browser client.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chatrelay.infra.db import ChatTurn
from chatrelay.infra.time_utils import to_iso

STORE_CONNECTED = "connected"
STORE_DISCONNECTED = "disconnected"
RELAY_CONFIGURED = "configured"
RELAY_NOT_CONFIGURED = "not configured"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatRequest(CamelModel):
    """Request body for ``POST /api/chat``.

    ``message`` is optional here so an absent message is reported with
    the same 400 envelope as an empty one.
    """

    message: str | None = Field(default=None, description="User message")
    session_id: str | None = Field(default=None, description="Opaque session key")


class ChatResponse(CamelModel):
    success: Literal[True] = True
    response: str = Field(description="Reply text from the webhook")
    timestamp: str = Field(description="ISO-8601 completion time")


class HistoryMessage(CamelModel):
    """One turn as served by ``GET /api/history``."""

    user_message: str
    bot_response: str
    timestamp: str | None
    session_id: str

    @classmethod
    def from_turn(cls, turn: ChatTurn) -> "HistoryMessage":
        return cls(
            user_message=turn.user_message,
            bot_response=turn.bot_response,
            timestamp=to_iso(turn.timestamp) if turn.timestamp else None,
            session_id=turn.session_id,
        )


class HistoryResponse(CamelModel):
    success: Literal[True] = True
    messages: list[HistoryMessage] = Field(
        default_factory=list, description="Turns, oldest first"
    )


class HealthResponse(CamelModel):
    status: Literal["ok"] = "ok"
    store: Literal["connected", "disconnected"]
    relay: Literal["configured", "not configured"]
    timestamp: str


class ErrorResponse(CamelModel):
    success: Literal[False] = False
    error: str = Field(description="Human-readable error message")
    details: str | None = Field(default=None, description="Underlying cause, if safe")
