"""
User repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from app.models.user import UserAccount, UserCreate


class IUserRepository(ABC):
    """Abstract interface for user persistence."""

    @abstractmethod
    async def get(self, user_id: str) -> Optional[UserAccount]:
        """Get a user by ID."""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[UserAccount]:
        """Get a user by normalized email."""
        pass

    @abstractmethod
    async def create(self, data: UserCreate) -> UserAccount:
        """Create a new user. Raises DuplicateError if the email is taken."""
        pass
