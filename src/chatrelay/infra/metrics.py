"""Prometheus metrics for the chat relay.

Business metrics that complement the auto-instrumented HTTP metrics
provided by ``prometheus-fastapi-instrumentator``.

All metrics use the ``chatrelay_`` prefix.
"""

import logging

from fastapi import FastAPI
from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from chatrelay.configs.config import AppConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Webhook relay metrics
# ---------------------------------------------------------------------------

RELAY_REQUESTS_TOTAL = Counter(
    "chatrelay_relay_requests_total",
    "Total webhook relay calls, by outcome",
    ["outcome"],  # ok | timeout | unreachable | upstream | not_configured
)

RELAY_LATENCY_SECONDS = Histogram(
    "chatrelay_relay_latency_seconds",
    "Latency of outbound webhook calls",
    buckets=(0.25, 0.5, 1, 2, 5, 10, 20, 30),
)

# ---------------------------------------------------------------------------
# Store metrics
# ---------------------------------------------------------------------------

TURNS_PERSISTED_TOTAL = Counter(
    "chatrelay_turns_persisted_total",
    "Chat turns written to the document store",
)

STORE_ERRORS_TOTAL = Counter(
    "chatrelay_store_errors_total",
    "Document store failures, by operation",
    ["operation"],  # insert | find_recent
)


def setup_metrics(app: FastAPI, config: AppConfig) -> None:
    """Attach HTTP instrumentation and the ``/metrics`` endpoint to *app*.

    Called while the app is being built; the instrumentator adds
    middleware, which cannot happen after startup.
    """
    Instrumentator(
        should_instrument_requests_inprogress=True,
        excluded_handlers=config.tracing.excluded_urls,
    ).instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    logger.info("Prometheus metrics initialised")
