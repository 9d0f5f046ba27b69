"""Domain models returned by the chat services."""

from datetime import datetime

from pydantic import BaseModel, Field


class ChatReply(BaseModel):
    """Outcome of a fully successful chat turn."""

    reply: str = Field(description="Reply text relayed from the webhook")
    timestamp: datetime = Field(description="When the turn completed (UTC)")
