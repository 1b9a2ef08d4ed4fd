"""
Model dispatcher: route a chat prompt to a provider, with one fallback.

Select -> invoke primary -> on failure, invoke the other provider if its
credential is configured -> otherwise fail with ProvidersUnavailableError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from app.core.exceptions import ProvidersUnavailableError, UpstreamProviderError
from app.core.logger import logger
from app.interfaces.llm_provider import ILLMProvider
from app.models.enums import ProviderKind

UNAVAILABLE_MESSAGE = "Both AI models are unavailable. Please try again later."

# Identifiers offered to the client, with display names.
MODEL_CATALOG: dict[str, tuple[str, ProviderKind]] = {
    "gemini": ("Gemini 2.0 Flash", ProviderKind.GEMINI),
    "gemini-2.0-flash-exp": ("Gemini 2.0 Flash (experimental)", ProviderKind.GEMINI),
    "deepseek/deepseek-v3-free": ("DeepSeek V3 (Free)", ProviderKind.OPENROUTER),
    "deepseek/deepseek-chat": ("DeepSeek Chat", ProviderKind.OPENROUTER),
}

# Vendor families for identifiers not listed in the catalog.
_FAMILY_PREFIXES: tuple[tuple[str, ProviderKind], ...] = (
    ("deepseek/", ProviderKind.OPENROUTER),
    ("gemini", ProviderKind.GEMINI),
)


def resolve_provider(model_id: str) -> ProviderKind:
    """Map a requested model identifier to the provider that serves it."""
    entry = MODEL_CATALOG.get(model_id)
    if entry:
        return entry[1]
    for prefix, kind in _FAMILY_PREFIXES:
        if model_id.startswith(prefix):
            return kind
    logger.warning(f"Unknown model '{model_id}', routing to {ProviderKind.GEMINI.value}")
    return ProviderKind.GEMINI


@dataclass(frozen=True)
class CompletionResult:
    content: str
    model: str


class ModelDispatcher:
    """Chat completion across providers with a single fallback attempt."""

    def __init__(self, providers: Mapping[ProviderKind, ILLMProvider]):
        missing = [kind.value for kind in ProviderKind if kind not in providers]
        if missing:
            raise ValueError(f"Missing providers: {', '.join(missing)}")
        self._providers = dict(providers)

    def provider(self, kind: ProviderKind) -> ILLMProvider:
        return self._providers[kind]

    async def complete(self, model_id: str, prompt: str) -> CompletionResult:
        primary = self._providers[resolve_provider(model_id)]
        try:
            content = await primary.generate(prompt)
            logger.info(f"{primary.get_model_name()} response received")
            return CompletionResult(content=content, model=model_id)
        except UpstreamProviderError as e:
            logger.error(f"{model_id} failed: {e.message}")

        fallback = self._providers[primary.kind.fallback]
        if not fallback.is_configured():
            logger.error(f"No fallback model available for {model_id}")
            raise ProvidersUnavailableError(UNAVAILABLE_MESSAGE)

        logger.info(f"Falling back to {fallback.get_model_name()}")
        try:
            content = await fallback.generate(prompt)
        except UpstreamProviderError as e:
            logger.error(f"Fallback also failed: {e.message}")
            raise ProvidersUnavailableError(UNAVAILABLE_MESSAGE) from e

        logger.info(f"{fallback.get_model_name()} fallback successful")
        return CompletionResult(content=content, model=fallback.get_model_id())
