"""Chat relay service: validate, relay, persist, reply.

A request either succeeds end to end (webhook answered and the turn was
saved) or fails as a whole.  Nothing is persisted when the relay step
fails, and a save failure after a successful relay is reported as a
failure even though a reply exists.
"""

import logging

from chatrelay.core.exceptions import ChatValidationError, RelayError, StoreError
from chatrelay.core.relay import WebhookRelayClient
from chatrelay.infra.db import DEFAULT_SESSION_ID, ChatTurn, ChatTurnRepository
from chatrelay.infra.time_utils import utc_now

from .models import ChatReply

logger = logging.getLogger(__name__)

MESSAGE_REQUIRED = "Message is required"


class ChatRelayService:
    """Orchestrates one chat turn over the relay client and the repository."""

    def __init__(
        self, relay_client: WebhookRelayClient, repository: ChatTurnRepository
    ) -> None:
        self._relay = relay_client
        self._repo = repository

    async def handle_chat(
        self, message: str | None, session_id: str | None = None
    ) -> ChatReply:
        """Relay *message* and persist the resulting turn.

        Raises:
            ChatValidationError: *message* is empty or missing.
            RelayError: the webhook call failed; nothing was saved.
            StoreError: the reply was obtained but could not be saved.
        """
        if not message:
            raise ChatValidationError(MESSAGE_REQUIRED)
        session_id = session_id or DEFAULT_SESSION_ID

        try:
            reply = await self._relay.relay(message, session_id)
        except RelayError as exc:
            logger.error(
                "Relay failed for session %s (%s): %s",
                session_id,
                exc.kind.value,
                exc.details,
            )
            raise

        turn = ChatTurn(user_message=message, bot_response=reply, session_id=session_id)
        try:
            stored = await self._repo.insert(turn)
        except StoreError:
            logger.warning(
                "Dropping reply for session %s after save failure: %r",
                session_id,
                reply,
            )
            raise

        logger.info("Chat turn %s saved for session %s", stored.id, session_id)
        return ChatReply(reply=reply, timestamp=utc_now())
