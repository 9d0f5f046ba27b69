"""HTTP-level tests: endpoints, status mapping and lifespan wiring."""

import asyncio
from datetime import timedelta

import httpx
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import AutoReconnect, ServerSelectionTimeoutError

from chatrelay.api.exceptions import (
    ERROR_HISTORY,
    ERROR_NOT_CONFIGURED,
    ERROR_PROCESSING,
    ERROR_TIMEOUT,
)
from chatrelay.configs.config import ConfigError, get_app_config
from chatrelay.core.exceptions import ChatValidationError, RelayError, StoreError
from chatrelay.infra.db import build_mongo


class TestChatEndpoint:
    def test_success(self, client, webhook, collection):
        webhook.reply_with(json={"output": "hello"})

        resp = client.post("/api/chat", json={"message": "hi", "sessionId": "s1"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["response"] == "hello"
        assert body["timestamp"].endswith("Z")
        assert collection.docs[0]["botResponse"] == "hello"
        assert webhook.payloads[0]["message"] == "hi"
        assert webhook.payloads[0]["sessionId"] == "s1"

    @pytest.mark.parametrize("payload", [{}, {"message": ""}, {"sessionId": "s1"}])
    def test_missing_message_is_400(self, client, webhook, collection, payload):
        resp = client.post("/api/chat", json=payload)

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Message is required"}
        assert webhook.requests == []
        assert collection.docs == []

    def test_whitespace_message_is_accepted(self, client, webhook, collection):
        resp = client.post("/api/chat", json={"message": "   ", "sessionId": "s1"})

        assert resp.status_code == 200
        assert resp.json()["response"] == "pong"
        assert len(webhook.requests) == 1
        assert collection.docs[0]["userMessage"] == "   "

    def test_malformed_body_is_400(self, client, webhook):
        resp = client.post(
            "/api/chat", content="not json", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400
        assert resp.json()["success"] is False
        assert webhook.requests == []

    def test_timeout_is_504(self, client, webhook, collection):
        webhook.raise_error(httpx.ReadTimeout, "timed out")

        resp = client.post("/api/chat", json={"message": "hi"})

        assert resp.status_code == 504
        assert resp.json() == {"success": False, "error": ERROR_TIMEOUT}
        assert collection.docs == []

    def test_upstream_error_is_500_with_details(self, client, webhook, collection):
        webhook.reply_with(status=404, text="no such webhook")

        resp = client.post("/api/chat", json={"message": "hi"})

        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == ERROR_PROCESSING
        assert "404" in body["details"]
        assert collection.docs == []

    def test_unreachable_is_500(self, client, webhook):
        webhook.raise_error(httpx.ConnectError, "name resolution failed")
        resp = client.post("/api/chat", json={"message": "hi"})
        assert resp.status_code == 500
        assert "name resolution failed" in resp.json()["details"]

    def test_store_failure_is_500(self, client, webhook, collection):
        collection.fail_with = AutoReconnect("down")
        resp = client.post("/api/chat", json={"message": "hi"})
        assert resp.status_code == 500
        assert resp.json()["error"] == ERROR_PROCESSING


class TestUnconfiguredWebhook:
    @pytest.fixture
    def app_config(self, config_factory):
        return config_factory(mongodb_uri="mongodb://store.test:27017", webhook_url="")

    def test_chat_reports_config_error(self, client, webhook, collection):
        resp = client.post("/api/chat", json={"message": "hi"})
        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": ERROR_NOT_CONFIGURED}
        assert webhook.requests == []
        assert collection.docs == []

    def test_health_reports_not_configured(self, client):
        body = client.get("/api/health").json()
        assert body["relay"] == "not configured"
        assert body["status"] == "ok"


class TestHistoryEndpoint:
    def _chat(self, client, webhook, text, session_id="s1"):
        webhook.reply_with(json={"response": f"re: {text}"})
        assert client.post(
            "/api/chat", json={"message": text, "sessionId": session_id}
        ).status_code == 200

    def test_returns_turns_oldest_first(self, client, webhook):
        for text in ("one", "two", "three"):
            self._chat(client, webhook, text)

        resp = client.get("/api/history", params={"sessionId": "s1"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert [m["userMessage"] for m in body["messages"]] == ["one", "two", "three"]
        first = body["messages"][0]
        assert set(first) == {"userMessage", "botResponse", "timestamp", "sessionId"}
        assert first["botResponse"] == "re: one"
        assert first["sessionId"] == "s1"

    def test_limit_keeps_latest(self, client, webhook):
        for text in ("one", "two", "three"):
            self._chat(client, webhook, text)
        body = client.get("/api/history", params={"sessionId": "s1", "limit": "2"}).json()
        assert [m["userMessage"] for m in body["messages"]] == ["two", "three"]

    def test_zero_limit_is_empty(self, client, webhook):
        self._chat(client, webhook, "one")
        body = client.get("/api/history", params={"sessionId": "s1", "limit": "0"}).json()
        assert body == {"success": True, "messages": []}

    @pytest.mark.parametrize("limit", ["abc", "-5", "99999999999999999999"])
    def test_bad_limit_falls_back(self, client, webhook, limit):
        self._chat(client, webhook, "one")
        resp = client.get("/api/history", params={"sessionId": "s1", "limit": limit})
        assert resp.status_code == 200
        assert len(resp.json()["messages"]) == 1

    def test_sessions_are_separate(self, client, webhook):
        self._chat(client, webhook, "mine", session_id="a")
        self._chat(client, webhook, "theirs", session_id="b")
        body = client.get("/api/history", params={"sessionId": "a"}).json()
        assert [m["userMessage"] for m in body["messages"]] == ["mine"]

    def test_no_session_returns_all(self, client, webhook):
        self._chat(client, webhook, "mine", session_id="a")
        self._chat(client, webhook, "theirs", session_id="b")
        body = client.get("/api/history").json()
        assert len(body["messages"]) == 2

    def test_empty_history_is_not_an_error(self, client):
        resp = client.get("/api/history", params={"sessionId": "fresh"})
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "messages": []}

    def test_repeated_calls_are_identical(self, client, webhook):
        for text in ("one", "two"):
            self._chat(client, webhook, text)
        params = {"sessionId": "s1", "limit": "10"}
        assert client.get("/api/history", params=params).json() == client.get(
            "/api/history", params=params
        ).json()

    def test_store_failure_is_500(self, client, collection):
        collection.fail_with = AutoReconnect("down")
        resp = client.get("/api/history", params={"sessionId": "s1"})
        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": ERROR_HISTORY}


class TestHealthEndpoint:
    def test_connected(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["store"] == "connected"
        assert body["relay"] == "configured"
        assert body["timestamp"].endswith("Z")

    def test_disconnected_store_still_200(self, client, mongo_client):
        mongo_client.admin.command.side_effect = ServerSelectionTimeoutError("down")
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["store"] == "disconnected"

    def test_hanging_ping_reports_disconnected(
        self, app, client, mongo_client, config_factory
    ):
        async def never_answers(*args, **kwargs):
            await asyncio.sleep(3600)

        mongo_client.admin.command.side_effect = never_answers
        app.dependency_overrides[get_app_config] = lambda: config_factory(
            mongodb_uri="mongodb://store.test:27017",
            webhook_url="http://webhook.test/hook",
            mongodb_ping_timeout=timedelta(milliseconds=50),
        )

        resp = client.get("/api/health")

        assert resp.status_code == 200
        assert resp.json()["store"] == "disconnected"


class TestStaticAndLifespan:
    def test_handlers_and_metrics_wired_at_build_time(self, app):
        # Nothing has started yet: no TestClient has entered the lifespan.
        for exc_type in (ChatValidationError, RelayError, StoreError):
            assert exc_type in app.exception_handlers
        assert "/metrics" in {getattr(route, "path", None) for route in app.routes}

    def test_root_serves_entry_page(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert "text/html" in resp.headers["content-type"]
        assert "/api/chat" in resp.text
        assert "/api/history?sessionId=" in resp.text
        assert "/api/health" in resp.text

    def test_metrics_exposed(self, client):
        client.get("/api/history")
        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert "chatrelay_relay_requests_total" in resp.text

    def test_missing_mongodb_uri_aborts_startup(self, app, config_factory):
        app.dependency_overrides.pop(build_mongo)
        app.dependency_overrides[get_app_config] = lambda: config_factory(
            mongodb_uri="", webhook_url="http://webhook.test/hook"
        )
        with pytest.raises(ConfigError, match="MongoDB URI"):
            with TestClient(app):
                pass
