"""
OpenRouter provider for DeepSeek models.

Uses the OpenAI-compatible chat completions endpoint.
"""

from typing import Any, Optional

import httpx

from app.core.config import Settings, get_settings
from app.core.exceptions import UpstreamProviderError
from app.core.logger import logger
from app.interfaces.llm_provider import ILLMProvider
from app.models.enums import ProviderKind
from app.services.llm_utils import post_json

_LABEL = "DeepSeek"


class OpenRouterProvider(ILLMProvider):
    """DeepSeek via OpenRouter, authenticated with a bearer key."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings or get_settings()
        self._model_name = self._settings.OPENROUTER_MODEL
        self._transport = transport

    @property
    def kind(self) -> ProviderKind:
        return ProviderKind.OPENROUTER

    def get_model_id(self) -> str:
        return self._model_name

    def get_model_name(self) -> str:
        return f"OpenRouter ({self._model_name})"

    def is_configured(self) -> bool:
        return bool(self._settings.OPENROUTER_API_KEY)

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self._model_name,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self._settings.LLM_TEMPERATURE,
            "max_tokens": self._settings.OPENROUTER_MAX_TOKENS,
        }

    async def generate(self, prompt: str) -> str:
        api_key = self._settings.OPENROUTER_API_KEY
        if not api_key:
            raise UpstreamProviderError(
                _LABEL, "OpenRouter API key not configured. Set OPENROUTER_API_KEY."
            )

        headers = {
            "Authorization": f"Bearer {api_key}",
            "HTTP-Referer": self._settings.OPENROUTER_REFERER,
            "X-Title": self._settings.OPENROUTER_APP_TITLE,
        }
        base = self._settings.OPENROUTER_API_BASE.rstrip("/")
        data = await post_json(
            _LABEL,
            f"{base}/chat/completions",
            self._build_payload(prompt),
            headers=headers,
            timeout=self._settings.LLM_REQUEST_TIMEOUT_SECONDS,
            transport=self._transport,
        )

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            text = None
        if not isinstance(text, str) or not text:
            logger.error(f"Invalid DeepSeek response: {str(data)[:500]}")
            raise UpstreamProviderError(_LABEL, "Invalid DeepSeek API response format")
        return text
