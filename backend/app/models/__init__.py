"""Pydantic models (schemas) for the application."""

from app.models.enums import MessageRole, ProviderKind, VoteAction, VoteValue
from app.models.chat import ChatRequest, ChatResponse, ChatTurn, ModelCatalog, ModelOption
from app.models.chat_history import (
    ChatHistorySave,
    ChatHistorySaveResult,
    ChatSession,
    ChatSessionSummary,
    Message,
)
from app.models.upload import UploadResult
from app.models.user import UserAccount, UserCreate, UserSummary
from app.models.vote import ChatVotes, VoteCreate, VoteLookup, VoteRecord, VoteResult

__all__ = [
    # Enums
    "MessageRole",
    "ProviderKind",
    "VoteAction",
    "VoteValue",
    # Chat
    "ChatRequest",
    "ChatResponse",
    "ChatTurn",
    "ModelCatalog",
    "ModelOption",
    # History
    "ChatHistorySave",
    "ChatHistorySaveResult",
    "ChatSession",
    "ChatSessionSummary",
    "Message",
    # Upload
    "UploadResult",
    # User
    "UserAccount",
    "UserCreate",
    "UserSummary",
    # Vote
    "ChatVotes",
    "VoteCreate",
    "VoteLookup",
    "VoteRecord",
    "VoteResult",
]
