"""
Vote repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from app.models.vote import VoteRecord


class IVoteRepository(ABC):
    """Abstract interface for vote persistence keyed by (user, message)."""

    @abstractmethod
    async def get(self, user_id: str, message_id: str) -> Optional[VoteRecord]:
        """Get the vote a user cast on a message."""
        pass

    @abstractmethod
    async def put(self, record: VoteRecord) -> VoteRecord:
        """Create or overwrite the vote for (record.user_id, record.message_id)."""
        pass

    @abstractmethod
    async def delete(self, user_id: str, message_id: str) -> bool:
        """Remove a vote entirely. Returns True if one existed."""
        pass

    @abstractmethod
    async def list_for_chat(self, user_id: str, chat_id: str) -> list[VoteRecord]:
        """List a user's votes within one chat."""
        pass
