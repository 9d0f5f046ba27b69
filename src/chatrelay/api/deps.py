"""Centralized FastAPI dependency type aliases.

Import these ``*Dep`` aliases in route modules instead of writing
``Annotated[T, Depends(get_xxx)]`` everywhere.  Each alias maps to one
``get_*`` factory that tests can replace via
``app.dependency_overrides[get_xxx] = ...``.
"""

from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorClient

from chatrelay.configs.config import AppConfig, get_app_config
from chatrelay.core.relay import WebhookRelayClient, get_relay_client
from chatrelay.core.service import (
    ChatRelayService,
    HistoryService,
    get_chat_service,
    get_history_service,
)
from chatrelay.infra.db import get_mongo_client

AppConfigDep = Annotated[AppConfig, Depends(get_app_config)]
ChatServiceDep = Annotated[ChatRelayService, Depends(get_chat_service)]
HistoryServiceDep = Annotated[HistoryService, Depends(get_history_service)]
RelayClientDep = Annotated[WebhookRelayClient, Depends(get_relay_client)]
MongoClientDep = Annotated[AsyncIOMotorClient, Depends(get_mongo_client)]
