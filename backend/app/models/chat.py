"""
Chat completion model definitions.
"""

from typing import Optional

from pydantic import ConfigDict, Field

from app.models.base import CamelModel
from app.models.enums import MessageRole


class ChatTurn(CamelModel):
    """A conversation entry as sent by the client."""

    model_config = ConfigDict(extra="ignore")

    role: MessageRole = MessageRole.USER
    content: str = ""


class ChatRequest(CamelModel):
    """Request model for chat endpoint."""

    messages: list[ChatTurn] = Field(default_factory=list)
    model: Optional[str] = Field(None, max_length=200, description="Requested model identifier")
    web_search: bool = False
    chat_id: Optional[str] = Field(None, max_length=100)


class ChatResponse(CamelModel):
    """Response model for chat endpoint."""

    role: MessageRole = MessageRole.ASSISTANT
    content: str
    model: str = Field(..., description="Identifier of the model that actually answered")


class ModelOption(CamelModel):
    """A selectable model."""

    id: str
    name: str
    provider: str
    available: bool


class ModelCatalog(CamelModel):
    """Available models endpoint response."""

    default_model_id: str
    models: list[ModelOption] = Field(default_factory=list)
