"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from chatrelay import __version__
from chatrelay.api.chat import router as chat_router
from chatrelay.api.exceptions import register_exception_handlers
from chatrelay.api.health import router as health_router
from chatrelay.api.history import router as history_router
from chatrelay.configs.config import AppConfig, get_app_config
from chatrelay.core.relay import build_relay_client
from chatrelay.infra.db import build_mongo
from chatrelay.infra.lifespan import inject
from chatrelay.infra.logging import setup_logging
from chatrelay.infra.metrics import setup_metrics
from chatrelay.infra.telemetry import init_telemetry

logger = logging.getLogger(__name__)

BUNDLED_STATIC_DIR = Path(__file__).resolve().parent / "static"


@inject
async def lifespan(
    app: FastAPI,
    _mongo: Annotated[None, Depends(build_mongo)],
    _relay: Annotated[None, Depends(build_relay_client)],
) -> AsyncGenerator[None, None]:
    """Open the shared store and HTTP clients before serving."""
    logger.info("Chat relay ready")
    yield
    logger.info("Shutting down chat relay")


def get_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if config is None:
        config = get_app_config()
    setup_logging(config.logging)

    app = FastAPI(
        title="Chat Relay",
        description="Relays chat messages to an automation webhook and keeps history",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    init_telemetry(app, config.tracing)
    setup_metrics(app, config)
    register_exception_handlers(app)

    app.include_router(chat_router)
    app.include_router(history_router)
    app.include_router(health_router)

    # Mounted last so it only sees paths no router claimed.
    static_dir = Path(config.api.static_dir) if config.api.static_dir else BUNDLED_STATIC_DIR
    app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


app = get_app()
