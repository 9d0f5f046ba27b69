"""Chat API endpoint implementation."""

from fastapi import APIRouter

from chatrelay.infra.time_utils import to_iso

from .deps import ChatServiceDep
from .models import ChatRequest, ChatResponse, ErrorResponse

router = APIRouter(prefix="/api", tags=["chat"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
async def chat(
    chat_request: ChatRequest,
    chat_service: ChatServiceDep,
) -> ChatResponse:
    """Relay one message to the webhook and return its reply.

    Error statuses are produced by the handlers in ``api.exceptions``.
    """
    result = await chat_service.handle_chat(
        chat_request.message, chat_request.session_id
    )
    return ChatResponse(response=result.reply, timestamp=to_iso(result.timestamp))
