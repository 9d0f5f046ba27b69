"""Chat turn document model.

One document per completed exchange in the ``messages`` collection::

    {
        "_id": ObjectId,
        "userMessage": str,
        "botResponse": str,
        "sessionId": str,
        "timestamp": Date,
    }

Field names are camelCase on disk so documents written by earlier
deployments of the relay stay readable.
"""

from datetime import datetime
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Document field names
# ---------------------------------------------------------------------------

FIELD_ID: Final = "_id"
FIELD_USER_MESSAGE: Final = "userMessage"
FIELD_BOT_RESPONSE: Final = "botResponse"
FIELD_SESSION_ID: Final = "sessionId"
FIELD_TIMESTAMP: Final = "timestamp"

DEFAULT_SESSION_ID: Final = "default"


class ChatTurn(BaseModel):
    """One user message + bot reply pair. Immutable."""

    model_config = ConfigDict(frozen=True)

    user_message: str = Field(min_length=1, description="What the user sent")
    bot_response: str = Field(description="Reply relayed back from the webhook")
    session_id: str = Field(
        default=DEFAULT_SESSION_ID, description="Caller-chosen session key"
    )
    timestamp: datetime | None = Field(
        default=None, description="Persistence time; filled in on insert"
    )
    id: str | None = Field(default=None, description="Store-assigned document id")

    def to_document(self) -> dict[str, Any]:
        """Document body for ``insert_one`` (``_id`` is left to the store)."""
        return {
            FIELD_USER_MESSAGE: self.user_message,
            FIELD_BOT_RESPONSE: self.bot_response,
            FIELD_SESSION_ID: self.session_id,
            FIELD_TIMESTAMP: self.timestamp,
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "ChatTurn":
        doc_id = doc.get(FIELD_ID)
        return cls(
            user_message=doc[FIELD_USER_MESSAGE],
            bot_response=doc[FIELD_BOT_RESPONSE],
            session_id=doc.get(FIELD_SESSION_ID) or DEFAULT_SESSION_ID,
            timestamp=doc.get(FIELD_TIMESTAMP),
            id=str(doc_id) if doc_id is not None else None,
        )
