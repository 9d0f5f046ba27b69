"""Global exception handlers -- domain errors to status codes.

=======================  ======  ======================================
Exception                Status  Body
=======================  ======  ======================================
ChatValidationError      400     ``{success: false, error}``
RequestValidationError   400     ``{success: false, error, details}``
RelayError TIMEOUT       504     ``{success: false, error}``
RelayError NOT_CONFIG..  500     ``{success: false, error}``
RelayError (other)       500     ``{success: false, error, details}``
StoreError insert        500     ``{success: false, error, details}``
StoreError find_recent   500     ``{success: false, error}``
=======================  ======  ======================================
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from chatrelay.core.exceptions import (
    ChatValidationError,
    RelayError,
    RelayErrorKind,
    StoreError,
)
from chatrelay.infra.db.repository import OP_FIND_RECENT

from .models import ErrorResponse

logger = logging.getLogger(__name__)

ERROR_INVALID_BODY = "Invalid request body"
ERROR_TIMEOUT = "Request timeout. Please try again."
ERROR_NOT_CONFIGURED = (
    "Webhook URL is not configured. Set CHATRELAY_THIRD_PARTY__WEBHOOK_URL."
)
ERROR_PROCESSING = (
    "Failed to process message. Please check your webhook configuration."
)
ERROR_HISTORY = "Failed to fetch chat history"


def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register the relay's exception handlers on ``app``.

    Must run before the app starts serving; Starlette snapshots the
    handler table when it builds the middleware stack.
    """

    @app.exception_handler(ChatValidationError)
    async def handle_chat_validation(
        request: Request, exc: ChatValidationError
    ) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        return _error(400, ERROR_INVALID_BODY, details or None)

    @app.exception_handler(RelayError)
    async def handle_relay_error(request: Request, exc: RelayError) -> JSONResponse:
        if exc.kind is RelayErrorKind.TIMEOUT:
            return _error(504, ERROR_TIMEOUT)
        if exc.kind is RelayErrorKind.NOT_CONFIGURED:
            return _error(500, ERROR_NOT_CONFIGURED)
        return _error(500, ERROR_PROCESSING, exc.details)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("Store failure during %s: %s", exc.operation, exc)
        if exc.operation == OP_FIND_RECENT:
            return _error(500, ERROR_HISTORY)
        return _error(500, ERROR_PROCESSING, str(exc))
