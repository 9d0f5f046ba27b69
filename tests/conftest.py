"""Shared fixtures: in-memory collection, webhook stub, wired test app."""

import json
from collections.abc import AsyncGenerator, Iterator
from types import SimpleNamespace
from typing import Annotated, Any, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from bson import ObjectId
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from pymongo import DESCENDING

from chatrelay.configs.config import AppConfig, get_app_config
from chatrelay.core.relay import build_relay_client
from chatrelay.infra.db import build_mongo
from chatrelay.infra.lifespan import get_app

WEBHOOK_URL = "http://webhook.test/hook"

# ---------------------------------------------------------------------------
# In-memory stand-in for an AsyncIOMotorCollection
# ---------------------------------------------------------------------------


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key: str, direction: int) -> "FakeCursor":
        self._docs.sort(key=lambda d: d[key], reverse=direction == DESCENDING)
        return self

    def limit(self, n: int) -> "FakeCursor":
        self._docs = self._docs[:n]
        return self

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        return list(self._docs if length is None else self._docs[:length])


class FakeCollection:
    """Implements just the collection calls the repository makes."""

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []
        self.fail_with: Exception | None = None
        self.queries: list[dict[str, Any]] = []

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        if self.fail_with is not None:
            raise self.fail_with
        stored = {**doc, "_id": ObjectId()}
        self.docs.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    def find(self, query: dict[str, Any]) -> FakeCursor:
        if self.fail_with is not None:
            raise self.fail_with
        self.queries.append(query)
        matched = [
            dict(d) for d in self.docs if all(d.get(k) == v for k, v in query.items())
        ]
        return FakeCursor(matched)

    async def create_index(self, keys: Any) -> str:
        return "sessionId_1_timestamp_-1"


@pytest.fixture
def collection() -> FakeCollection:
    return FakeCollection()


# ---------------------------------------------------------------------------
# Webhook stub served through httpx.MockTransport
# ---------------------------------------------------------------------------


class WebhookStub:
    """Records every request and answers with ``handler``."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={"response": "pong"})
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def reply_with(self, status: int = 200, **kwargs: Any) -> None:
        self.handler = lambda request: httpx.Response(status, **kwargs)

    def raise_error(self, exc_type: type[httpx.TransportError], message: str) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc_type(message, request=request)

        self.handler = handler

    @property
    def payloads(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def webhook() -> WebhookStub:
    return WebhookStub()


@pytest.fixture
def http_client(webhook: WebhookStub) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(webhook))


# ---------------------------------------------------------------------------
# App wiring
# ---------------------------------------------------------------------------


def make_config(**third_party: Any) -> AppConfig:
    """Default config with ``third_party`` fields replaced."""
    config = AppConfig()
    return config.model_copy(
        update={"third_party": config.third_party.model_copy(update=third_party)}
    )


@pytest.fixture
def config_factory() -> Callable[..., AppConfig]:
    return make_config


@pytest.fixture
def mongo_client() -> MagicMock:
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1.0})
    return client


@pytest.fixture
def app_config() -> AppConfig:
    return make_config(mongodb_uri="mongodb://store.test:27017", webhook_url=WEBHOOK_URL)


@pytest.fixture
def app(
    app_config: AppConfig,
    collection: FakeCollection,
    mongo_client: MagicMock,
    webhook: WebhookStub,
) -> Iterator[FastAPI]:
    from chatrelay.app import app as relay_app

    async def fake_build_mongo(
        app: Annotated[FastAPI, Depends(get_app)],
    ) -> AsyncGenerator[None, None]:
        app.state.mongo_client = mongo_client
        app.state.chat_turn_collection = collection
        yield

    async def fake_build_relay_client(
        app: Annotated[FastAPI, Depends(get_app)],
    ) -> AsyncGenerator[None, None]:
        client = httpx.AsyncClient(transport=httpx.MockTransport(webhook))
        app.state.http_client = client
        yield
        await client.aclose()

    relay_app.dependency_overrides[get_app_config] = lambda: app_config
    relay_app.dependency_overrides[build_mongo] = fake_build_mongo
    relay_app.dependency_overrides[build_relay_client] = fake_build_relay_client
    yield relay_app
    relay_app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
