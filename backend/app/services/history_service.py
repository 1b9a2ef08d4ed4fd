"""
Chat history service.

Combines the history repository with the save debouncer.
"""

from __future__ import annotations

from typing import Optional

from app.core.exceptions import ValidationError
from app.core.logger import logger
from app.interfaces.chat_history_repository import IChatHistoryRepository
from app.models.chat_history import (
    ChatHistorySave,
    ChatHistorySaveResult,
    ChatSession,
    ChatSessionSummary,
)
from app.services.save_debouncer import DebounceDecision, SaveDebouncer


class HistoryService:
    """Save, load, list and delete a user's chat sessions."""

    def __init__(
        self,
        repo: IChatHistoryRepository,
        debouncer: SaveDebouncer,
        list_limit: int = 15,
    ):
        self._repo = repo
        self._debouncer = debouncer
        self._list_limit = list_limit

    async def save(
        self,
        user_id: str,
        payload: ChatHistorySave,
        now_ms: Optional[float] = None,
    ) -> ChatHistorySaveResult:
        if not payload.chat_id or not payload.title:
            raise ValidationError("Missing required fields: chatId and title")

        decision = self._debouncer.should_persist((user_id, payload.chat_id), now_ms)
        if decision is DebounceDecision.DEBOUNCED:
            logger.info(f"Debounced save for chat {payload.chat_id}")
            return ChatHistorySaveResult(success=True, debounced=True)

        await self._repo.upsert(
            user_id,
            ChatSession(
                id=payload.chat_id,
                title=payload.title,
                timestamp=payload.timestamp or "",
                messages=payload.messages,
                user_id=user_id,
            ),
        )
        return ChatHistorySaveResult(success=True)

    async def get(self, user_id: str, chat_id: str) -> Optional[ChatSession]:
        return await self._repo.get(user_id, chat_id)

    async def list_recent(self, user_id: str) -> list[ChatSessionSummary]:
        return await self._repo.list_recent(user_id, limit=self._list_limit)

    async def delete(self, user_id: str, chat_id: str) -> None:
        removed = await self._repo.delete(user_id, chat_id)
        self._debouncer.forget((user_id, chat_id))
        if removed:
            logger.info(f"Deleted chat {chat_id} for {user_id}")
