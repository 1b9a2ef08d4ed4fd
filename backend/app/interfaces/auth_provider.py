"""
Authentication provider interface.

Resolves a bearer token to a user identity.
"""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    """Authenticated user identity."""

    id: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = None

    @property
    def owner_id(self) -> str:
        """Key under which the user's chats and votes are stored."""
        return self.id or self.email or "default-user"


class IAuthProvider(ABC):
    """Abstract interface for authentication."""

    @abstractmethod
    async def verify_token(self, token: str) -> User:
        """
        Verify a token and return the user it identifies.

        Raises:
            Exception: if the token is invalid
        """
        pass
