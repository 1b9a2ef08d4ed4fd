"""
Chat history models.

A chat session is saved as a whole: title, timestamp and the full message list
are replaced on every save.
"""

from typing import Optional

from pydantic import Field

from app.models.base import CamelModel
from app.models.enums import MessageRole, VoteValue


class Message(CamelModel):
    """A single transcript entry."""

    id: str = Field(..., min_length=1, max_length=100)
    role: MessageRole
    content: str = Field("", max_length=100000)
    timestamp: str = Field(..., description="ISO-8601 creation time")
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    vote: Optional[VoteValue] = None
    model: Optional[str] = None


class ChatSessionSummary(CamelModel):
    """Listing projection of a chat session (no message bodies)."""

    id: str
    title: str
    timestamp: str


class ChatSession(ChatSessionSummary):
    """A stored chat session owned by one user."""

    messages: list[Message] = Field(default_factory=list)
    user_id: str

    def summary(self) -> ChatSessionSummary:
        return ChatSessionSummary(id=self.id, title=self.title, timestamp=self.timestamp)


class ChatHistorySave(CamelModel):
    """Request body for saving a chat session."""

    chat_id: Optional[str] = Field(None, max_length=100)
    title: Optional[str] = Field(None, max_length=500)
    timestamp: Optional[str] = None
    messages: list[Message] = Field(default_factory=list)


class ChatHistorySaveResult(CamelModel):
    """Outcome of a save request."""

    success: bool = True
    debounced: Optional[bool] = None
