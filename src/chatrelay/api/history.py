"""Chat history endpoint."""

from typing import Annotated

from fastapi import APIRouter, Query

from chatrelay.infra.db import coerce_limit

from .deps import AppConfigDep, HistoryServiceDep
from .models import ErrorResponse, HistoryMessage, HistoryResponse

router = APIRouter(prefix="/api", tags=["history"])


@router.get(
    "/history",
    response_model=HistoryResponse,
    responses={500: {"model": ErrorResponse}},
)
async def history(
    history_service: HistoryServiceDep,
    config: AppConfigDep,
    session_id: Annotated[str | None, Query(alias="sessionId")] = None,
    limit: Annotated[str | None, Query()] = None,
) -> HistoryResponse:
    """Most recent turns for ``sessionId`` (all sessions if omitted), oldest first.

    ``limit`` is taken as a raw string so malformed values fall back to
    the default instead of failing validation.
    """
    turns = await history_service.get_history(
        session_id or None,
        coerce_limit(limit, config.history.default_limit),
    )
    return HistoryResponse(messages=[HistoryMessage.from_turn(t) for t in turns])
