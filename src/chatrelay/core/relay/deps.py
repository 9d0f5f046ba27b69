"""FastAPI dependencies for the webhook relay.

``build_relay_client`` owns the shared ``httpx.AsyncClient`` for the
process lifetime.  ``get_relay_client`` is per-request and re-reads the
webhook URL from config, so setting it on a running deployment takes
effect without a restart.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

import httpx
from fastapi import Depends, FastAPI, Request

from chatrelay.configs.config import AppConfig, get_app_config
from chatrelay.infra.lifespan import get_app

from .client import WebhookRelayClient

logger = logging.getLogger(__name__)


async def build_relay_client(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create the shared outbound HTTP client, attach to ``app.state``."""
    if not config.third_party.webhook_url:
        logger.warning(
            "Webhook URL is not set (CHATRELAY_THIRD_PARTY__WEBHOOK_URL); "
            "/api/chat will answer with a configuration error."
        )
    client = httpx.AsyncClient(
        timeout=config.relay.timeout.total_seconds(),
        follow_redirects=True,
    )
    app.state.http_client = client
    yield
    await client.aclose()


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the shared ``httpx.AsyncClient`` from ``app.state``."""
    return request.app.state.http_client


def get_relay_client(
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> WebhookRelayClient:
    """Build a relay client over the shared HTTP client for this request."""
    return WebhookRelayClient(
        http_client,
        config.third_party.webhook_url,
        timeout=config.relay.timeout,
        fallback_reply=config.relay.fallback_reply,
    )
