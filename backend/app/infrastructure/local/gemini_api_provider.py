"""
Gemini API provider.

Calls the Gemini generateContent REST endpoint with an API key.
"""

from typing import Any, Optional

import httpx

from app.core.config import Settings, get_settings
from app.core.exceptions import UpstreamProviderError
from app.core.logger import logger
from app.interfaces.llm_provider import ILLMProvider
from app.models.enums import ProviderKind
from app.services.llm_utils import post_json

_LABEL = "Gemini"


class GeminiAPIProvider(ILLMProvider):
    """Gemini API provider using API Key."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Gemini API provider.

        Args:
            settings: Application settings (default: cached settings)
            transport: Optional httpx transport, used by tests
        """
        self._settings = settings or get_settings()
        self._model_name = self._settings.GEMINI_MODEL
        self._transport = transport

    @property
    def kind(self) -> ProviderKind:
        return ProviderKind.GEMINI

    def get_model_id(self) -> str:
        return self._model_name

    def get_model_name(self) -> str:
        """Get human-readable model name."""
        return f"Gemini API ({self._model_name})"

    def is_configured(self) -> bool:
        return bool(self._settings.gemini_api_key)

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self._settings.LLM_TEMPERATURE,
                "topK": 40,
                "topP": 0.95,
                "maxOutputTokens": self._settings.GEMINI_MAX_OUTPUT_TOKENS,
            },
        }

    async def generate(self, prompt: str) -> str:
        api_key = self._settings.gemini_api_key
        if not api_key:
            raise UpstreamProviderError(
                _LABEL, "Gemini API key not configured. Set GOOGLE_API_KEY."
            )

        base = self._settings.GEMINI_API_BASE.rstrip("/")
        data = await post_json(
            _LABEL,
            f"{base}/models/{self._model_name}:generateContent",
            self._build_payload(prompt),
            params={"key": api_key},
            timeout=self._settings.LLM_REQUEST_TIMEOUT_SECONDS,
            transport=self._transport,
        )

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = None
        if not isinstance(text, str) or not text:
            logger.error(f"Invalid Gemini response: {str(data)[:500]}")
            raise UpstreamProviderError(_LABEL, "Invalid Gemini API response format")
        return text
