"""WebhookRelayClient -- one bounded POST to the automation webhook."""

import json
import logging
from datetime import timedelta

import httpx

from chatrelay.configs.system import DEFAULT_FALLBACK_REPLY
from chatrelay.core.exceptions import RelayError, RelayErrorKind
from chatrelay.infra.metrics import RELAY_LATENCY_SECONDS, RELAY_REQUESTS_TOTAL
from chatrelay.infra.telemetry import (
    ATTR_MESSAGE_LEN,
    ATTR_RELAY_REPLY_KEY,
    ATTR_RELAY_STATUS,
    ATTR_SESSION_ID,
    SPAN_RELAY_CALL,
    tracer,
)
from chatrelay.infra.time_utils import to_iso, utc_now

from .reply import NoReply, ReplyFound, WebhookReply, extract_reply, reply_text

logger = logging.getLogger(__name__)

DEFAULT_RELAY_TIMEOUT = timedelta(seconds=30)
_JSON_HEADERS = {"Content-Type": "application/json"}
_BODY_PREVIEW_CHARS = 500


class WebhookRelayClient:
    """Relays a chat message to the webhook and returns the reply text.

    The ``httpx.AsyncClient`` is shared across requests and owned by the
    application lifespan; this object only borrows it.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        webhook_url: str,
        timeout: timedelta = DEFAULT_RELAY_TIMEOUT,
        fallback_reply: str = DEFAULT_FALLBACK_REPLY,
    ) -> None:
        self._http = http_client
        self._webhook_url = webhook_url
        self._timeout = timeout
        self._fallback_reply = fallback_reply

    @property
    def configured(self) -> bool:
        return bool(self._webhook_url)

    async def relay(self, message: str, session_id: str) -> str:
        """POST ``{message, sessionId, timestamp}`` and extract the reply.

        Raises:
            RelayError: ``NOT_CONFIGURED`` without a URL, ``TIMEOUT`` past
                the deadline, ``UNREACHABLE`` on transport failure,
                ``UPSTREAM`` on a non-2xx status.
        """
        if not self.configured:
            RELAY_REQUESTS_TOTAL.labels(outcome=RelayErrorKind.NOT_CONFIGURED.value).inc()
            raise RelayError(
                "Webhook URL is not configured", kind=RelayErrorKind.NOT_CONFIGURED
            )

        payload = {
            "message": message,
            "sessionId": session_id,
            "timestamp": to_iso(utc_now()),
        }

        with tracer.start_as_current_span(SPAN_RELAY_CALL) as span:
            span.set_attribute(ATTR_SESSION_ID, session_id)
            span.set_attribute(ATTR_MESSAGE_LEN, len(message))
            with RELAY_LATENCY_SECONDS.time():
                response = await self._post(payload)
            span.set_attribute(ATTR_RELAY_STATUS, response.status_code)

            if not response.is_success:
                RELAY_REQUESTS_TOTAL.labels(outcome=RelayErrorKind.UPSTREAM.value).inc()
                raise RelayError(
                    "Webhook returned an error",
                    kind=RelayErrorKind.UPSTREAM,
                    status=response.status_code,
                    body=response.text[:_BODY_PREVIEW_CHARS],
                )

            reply = self._parse(response)
            if isinstance(reply, ReplyFound):
                span.set_attribute(ATTR_RELAY_REPLY_KEY, reply.key)

        RELAY_REQUESTS_TOTAL.labels(outcome="ok").inc()
        return reply_text(reply, self._fallback_reply)

    async def _post(self, payload: dict[str, str]) -> httpx.Response:
        seconds = self._timeout.total_seconds()
        try:
            return await self._http.post(
                self._webhook_url,
                json=payload,
                headers=_JSON_HEADERS,
                timeout=seconds,
            )
        except httpx.TimeoutException as exc:
            RELAY_REQUESTS_TOTAL.labels(outcome=RelayErrorKind.TIMEOUT.value).inc()
            raise RelayError(
                f"Webhook did not answer within {seconds:g}s",
                kind=RelayErrorKind.TIMEOUT,
            ) from exc
        except httpx.TransportError as exc:
            RELAY_REQUESTS_TOTAL.labels(outcome=RelayErrorKind.UNREACHABLE.value).inc()
            raise RelayError(
                f"Webhook unreachable: {exc}", kind=RelayErrorKind.UNREACHABLE
            ) from exc

    @staticmethod
    def _parse(response: httpx.Response) -> WebhookReply:
        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning(
                "Webhook answered with a non-JSON body (%d bytes)", len(response.content)
            )
            return NoReply()
        reply = extract_reply(body)
        if isinstance(reply, NoReply):
            logger.warning("Webhook body has none of the reply fields; using fallback")
        return reply
