"""FastAPI dependency factories for the chat services.

Per-request ``Depends`` factories with an explicit parameter chain;
both services are cheap wrappers over the shared clients held in
``app.state``.
"""

from typing import Annotated

from fastapi import Depends

from chatrelay.core.relay import WebhookRelayClient, get_relay_client
from chatrelay.infra.db import ChatTurnRepository, get_chat_turn_repository

from .chat import ChatRelayService
from .history import HistoryService


def get_chat_service(
    relay_client: Annotated[WebhookRelayClient, Depends(get_relay_client)],
    repository: Annotated[ChatTurnRepository, Depends(get_chat_turn_repository)],
) -> ChatRelayService:
    return ChatRelayService(relay_client, repository)


def get_history_service(
    repository: Annotated[ChatTurnRepository, Depends(get_chat_turn_repository)],
) -> HistoryService:
    return HistoryService(repository)
