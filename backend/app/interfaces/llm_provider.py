"""
LLM provider interface.

Defines the contract for upstream text generation.
Implementations: Gemini API, OpenRouter (DeepSeek).
"""

from abc import ABC, abstractmethod

from app.models.enums import ProviderKind


class ILLMProvider(ABC):
    """Abstract interface for LLM providers."""

    @property
    @abstractmethod
    def kind(self) -> ProviderKind:
        """Provider this implementation talks to."""
        pass

    @abstractmethod
    def get_model_id(self) -> str:
        """
        Get the upstream model identifier this provider sends.

        Reported back to the client when this provider answers as a fallback.
        """
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """
        Get the human-readable model name.

        Returns:
            Model name string for logging/display
        """
        pass

    @abstractmethod
    def is_configured(self) -> bool:
        """Check whether the provider credential is present."""
        pass

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """
        Generate a reply for a single prompt.

        Args:
            prompt: User prompt text

        Returns:
            Generated text

        Raises:
            UpstreamProviderError: on missing credential, transport failure,
                non-2xx status or a malformed success body
        """
        pass
