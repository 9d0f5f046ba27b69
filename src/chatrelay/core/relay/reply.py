"""Reply extraction from the webhook's loosely-typed response body.

The automation webhook does not promise a schema, so the reply text is
looked up under the conventional keys in order and the outcome is one
of two shapes:

- ``ReplyFound`` -- the first key holding a non-empty string.
- ``NoReply`` -- nothing usable (unknown keys, empty strings, a JSON
  array or a non-JSON body).
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

REPLY_KEYS: tuple[str, ...] = ("response", "message", "output")


class ReplyFound(BaseModel):
    """Reply text located under one of ``REPLY_KEYS``."""

    type: Literal["found"] = "found"
    key: str = Field(description="Response field the text came from")
    text: str = Field(description="Reply text")


class NoReply(BaseModel):
    """The body carried no recognizable reply."""

    type: Literal["none"] = "none"


WebhookReply = ReplyFound | NoReply


def extract_reply(body: Any) -> WebhookReply:
    """Resolve *body* against ``REPLY_KEYS`` in order."""
    if not isinstance(body, dict):
        return NoReply()
    for key in REPLY_KEYS:
        value = body.get(key)
        if isinstance(value, str) and value:
            return ReplyFound(key=key, text=value)
    return NoReply()


def reply_text(reply: WebhookReply, fallback: str) -> str:
    if isinstance(reply, ReplyFound):
        return reply.text
    return fallback
