"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class ChatbotError(Exception):
    """Base exception for the chatbot backend."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(ChatbotError):
    """Resource not found."""

    pass


class DuplicateError(ChatbotError):
    """Duplicate resource detected."""

    pass


class ValidationError(ChatbotError):
    """Validation error."""

    pass


class AuthenticationError(ChatbotError):
    """Authentication failed."""

    pass


class LLMError(ChatbotError):
    """LLM-related error."""

    pass


class UpstreamProviderError(LLMError):
    """A model provider call failed or returned an unusable response."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        super().__init__(message, details={"provider": provider, "status_code": status_code})
        self.provider = provider
        self.status_code = status_code


class ProvidersUnavailableError(LLMError):
    """Both the requested provider and its fallback failed."""

    pass


class InfrastructureError(ChatbotError):
    """Infrastructure-related error (DB, storage, etc.)."""

    pass
