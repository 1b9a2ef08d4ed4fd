"""
Chat history repository interface.

Defines the contract for per-user chat session persistence.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from app.models.chat_history import ChatSession, ChatSessionSummary


class IChatHistoryRepository(ABC):
    """Abstract interface for a bounded per-user chat history."""

    @abstractmethod
    async def upsert(self, user_id: str, session: ChatSession) -> ChatSession:
        """
        Create or replace a chat session.

        An existing session with the same id has its title, timestamp and
        messages replaced. A new session is appended; when the user's history
        then exceeds capacity the oldest inserted session is evicted.

        Args:
            user_id: Owner user ID
            session: Full session payload

        Returns:
            The stored session
        """
        pass

    @abstractmethod
    async def get(self, user_id: str, chat_id: str) -> Optional[ChatSession]:
        """
        Get a chat session by ID.

        Args:
            user_id: Owner user ID
            chat_id: Chat session ID

        Returns:
            ChatSession or None if not found
        """
        pass

    @abstractmethod
    async def list_recent(self, user_id: str, limit: int = 15) -> list[ChatSessionSummary]:
        """
        List a user's chat sessions, most recently touched first.

        Each chat id appears at most once and message bodies are excluded.

        Args:
            user_id: Owner user ID
            limit: Max sessions

        Returns:
            List of session summaries
        """
        pass

    @abstractmethod
    async def delete(self, user_id: str, chat_id: str) -> bool:
        """
        Delete a chat session. Deleting an absent session is not an error.

        Returns:
            True if a session was removed
        """
        pass
