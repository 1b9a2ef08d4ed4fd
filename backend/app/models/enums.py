"""
Enum definitions for the application.

These enums are used across models and provide type-safe values for roles,
votes and model providers.
"""

from enum import Enum


class MessageRole(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class VoteValue(str, Enum):
    """Preference recorded for an assistant message."""

    UP = "up"
    DOWN = "down"


class VoteAction(str, Enum):
    """Outcome of casting a vote."""

    CREATED = "created"
    UPDATED = "updated"
    REMOVED = "removed"


class ProviderKind(str, Enum):
    """
    Upstream text-generation provider.

    GEMINI = Google Gemini generateContent API
    OPENROUTER = DeepSeek served through OpenRouter
    """

    GEMINI = "gemini"
    OPENROUTER = "openrouter"

    @property
    def fallback(self) -> "ProviderKind":
        """The provider tried when this one fails."""
        if self is ProviderKind.GEMINI:
            return ProviderKind.OPENROUTER
        return ProviderKind.GEMINI
