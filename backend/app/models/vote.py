"""
Vote models.

At most one live vote exists per (user, message).
"""

from typing import Optional

from pydantic import Field

from app.models.base import CamelModel
from app.models.enums import VoteAction, VoteValue


class VoteRecord(CamelModel):
    """A stored vote."""

    message_id: str
    chat_id: str
    user_id: str
    vote: VoteValue
    timestamp: str
    message_content: Optional[str] = None
    model: Optional[str] = None


class VoteCreate(CamelModel):
    """Request body for casting a vote."""

    message_id: Optional[str] = Field(None, max_length=100)
    chat_id: Optional[str] = Field(None, max_length=100)
    vote: Optional[str] = None
    message_content: Optional[str] = None
    model: Optional[str] = None


class VoteResult(CamelModel):
    """Outcome of casting a vote."""

    success: bool = True
    action: VoteAction
    vote: Optional[VoteValue] = None


class VoteLookup(CamelModel):
    """Current vote on one message."""

    vote: Optional[VoteValue] = None


class ChatVotes(CamelModel):
    """All of a user's votes within a chat."""

    votes: list[VoteRecord] = Field(default_factory=list)
