"""History service: read-through to the chat turn repository."""

from chatrelay.infra.db import ChatTurn, ChatTurnRepository


class HistoryService:
    def __init__(self, repository: ChatTurnRepository) -> None:
        self._repo = repository

    async def get_history(self, session_id: str | None, limit: int) -> list[ChatTurn]:
        """Most recent *limit* turns for *session_id*, oldest first.

        An empty list means the session has no turns yet.
        """
        return await self._repo.find_recent(session_id, limit)
