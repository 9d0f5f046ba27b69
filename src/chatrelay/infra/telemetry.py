"""OpenTelemetry bootstrap -- tracing initialisation and span names.

Configures a ``TracerProvider`` with an OTLP HTTP exporter when tracing is
enabled via ``TracingConfig``.  When disabled the module is a no-op and
``tracer`` hands out non-recording spans.

Auto-instrumentations wired here:

- **FastAPI** (inbound HTTP spans)
- **httpx** (outbound webhook spans)
- **PyMongo** (store spans; motor drives pymongo underneath)

Usage::

    from chatrelay.infra.telemetry import SPAN_RELAY_CALL, tracer

    with tracer.start_as_current_span(SPAN_RELAY_CALL) as span:
        ...
"""

from __future__ import annotations

import base64
import logging

from fastapi import FastAPI
from opentelemetry import trace

from chatrelay.configs.system import TracingConfig

logger = logging.getLogger(__name__)

tracer = trace.get_tracer("chatrelay")

# ---------------------------------------------------------------------------
# Span names
# ---------------------------------------------------------------------------

SPAN_RELAY_CALL = "relay.call"
SPAN_STORE_INSERT = "store.insert"
SPAN_STORE_FIND_RECENT = "store.find_recent"

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_SESSION_ID = "chat.session_id"
ATTR_MESSAGE_LEN = "chat.message_len"
ATTR_RELAY_STATUS = "relay.status_code"
ATTR_RELAY_REPLY_KEY = "relay.reply_key"
ATTR_STORE_LIMIT = "store.limit"
ATTR_STORE_RESULT_COUNT = "store.result_count"


def init_telemetry(
    app: FastAPI | None = None,
    settings: TracingConfig | None = None,
) -> bool:
    """Initialise the OTEL ``TracerProvider`` and auto-instrumentations.

    Must run while the app is being built: the FastAPI instrumentor
    adds ASGI middleware, which Starlette refuses once serving starts.
    Returns ``True`` when tracing was switched on.
    """
    if settings is None or not settings.enabled:
        logger.info("OpenTelemetry tracing disabled.")
        return False

    if not settings.endpoint:
        logger.warning(
            "Tracing enabled but no OTLP endpoint configured -- "
            "skipping OpenTelemetry setup."
        )
        return False

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
        OTLPSpanExporter,
    )
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

    resource = Resource.create({"service.name": settings.service_name})
    sampler = ParentBased(root=TraceIdRatioBased(settings.sample_rate))
    provider = TracerProvider(resource=resource, sampler=sampler)

    headers: dict[str, str] = {}
    if settings.username and settings.password:
        credentials = f"{settings.username}:{settings.password}"
        encoded = base64.b64encode(credentials.encode()).decode()
        headers["Authorization"] = f"Basic {encoded}"

    exporter = OTLPSpanExporter(endpoint=settings.endpoint, headers=headers)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    if app is not None:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        excluded = ",".join(settings.excluded_urls)
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded)

    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
    from opentelemetry.instrumentation.pymongo import PymongoInstrumentor

    HTTPXClientInstrumentor().instrument()
    PymongoInstrumentor().instrument()

    logger.info(
        "OpenTelemetry tracing initialised (service=%s).", settings.service_name
    )
    return True
