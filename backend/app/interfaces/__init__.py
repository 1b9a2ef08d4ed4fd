"""Abstract interfaces for infrastructure abstraction."""

from app.interfaces.auth_provider import IAuthProvider
from app.interfaces.chat_history_repository import IChatHistoryRepository
from app.interfaces.llm_provider import ILLMProvider
from app.interfaces.storage_provider import IStorageProvider
from app.interfaces.user_repository import IUserRepository
from app.interfaces.vote_repository import IVoteRepository

__all__ = [
    "IAuthProvider",
    "IChatHistoryRepository",
    "ILLMProvider",
    "IStorageProvider",
    "IUserRepository",
    "IVoteRepository",
]
