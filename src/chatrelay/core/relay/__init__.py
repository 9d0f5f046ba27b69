"""Outbound relay to the workflow-automation webhook."""

from .client import DEFAULT_RELAY_TIMEOUT, WebhookRelayClient
from .deps import build_relay_client, get_http_client, get_relay_client
from .reply import REPLY_KEYS, NoReply, ReplyFound, WebhookReply, extract_reply, reply_text

__all__ = [
    "build_relay_client",
    "DEFAULT_RELAY_TIMEOUT",
    "extract_reply",
    "get_http_client",
    "get_relay_client",
    "NoReply",
    "REPLY_KEYS",
    "ReplyFound",
    "reply_text",
    "WebhookRelayClient",
    "WebhookReply",
]
