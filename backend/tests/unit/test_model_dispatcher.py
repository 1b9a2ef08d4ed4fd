"""
Unit tests for model routing and provider fallback.
"""

import pytest

from app.core.exceptions import ProvidersUnavailableError
from app.models.enums import ProviderKind
from app.services.model_dispatcher import (
    UNAVAILABLE_MESSAGE,
    ModelDispatcher,
    resolve_provider,
)


@pytest.mark.parametrize(
    "model_id,expected",
    [
        ("gemini", ProviderKind.GEMINI),
        ("gemini-2.0-flash-exp", ProviderKind.GEMINI),
        ("gemini-1.5-pro", ProviderKind.GEMINI),
        ("deepseek/deepseek-v3-free", ProviderKind.OPENROUTER),
        ("deepseek/deepseek-chat", ProviderKind.OPENROUTER),
        ("deepseek/deepseek-r1", ProviderKind.OPENROUTER),
        ("gpt-4o", ProviderKind.GEMINI),
    ],
)
def test_resolve_provider(model_id, expected):
    assert resolve_provider(model_id) is expected


def test_fallback_is_the_other_provider():
    assert ProviderKind.GEMINI.fallback is ProviderKind.OPENROUTER
    assert ProviderKind.OPENROUTER.fallback is ProviderKind.GEMINI


def test_dispatcher_requires_both_providers(gemini_provider):
    with pytest.raises(ValueError):
        ModelDispatcher({ProviderKind.GEMINI: gemini_provider})


@pytest.mark.asyncio
async def test_primary_success_reports_requested_model(dispatcher, gemini_provider, deepseek_provider):
    result = await dispatcher.complete("gemini", "Hello")

    assert result.content == "Hello from Gemini"
    assert result.model == "gemini"
    assert gemini_provider.prompts == ["Hello"]
    assert deepseek_provider.prompts == []


@pytest.mark.asyncio
async def test_deepseek_request_routes_to_openrouter(dispatcher, gemini_provider):
    result = await dispatcher.complete("deepseek/deepseek-v3-free", "Hello")

    assert result.content == "Hello from DeepSeek"
    assert result.model == "deepseek/deepseek-v3-free"
    assert gemini_provider.prompts == []


@pytest.mark.asyncio
async def test_deepseek_without_key_falls_back_to_gemini(dispatcher, deepseek_provider):
    deepseek_provider.configured = False

    result = await dispatcher.complete("deepseek/deepseek-v3-free", "Hello")

    assert result.content == "Hello from Gemini"
    assert result.model == "gemini-2.0-flash-exp"


@pytest.mark.asyncio
async def test_gemini_failure_falls_back_to_deepseek(dispatcher, gemini_provider, deepseek_provider):
    gemini_provider.fail = True

    result = await dispatcher.complete("gemini", "Hello")

    assert result.content == "Hello from DeepSeek"
    assert result.model == "deepseek/deepseek-chat"
    assert gemini_provider.prompts == ["Hello"]
    assert deepseek_provider.prompts == ["Hello"]


@pytest.mark.asyncio
async def test_no_credentials_is_unavailable(dispatcher, gemini_provider, deepseek_provider):
    gemini_provider.configured = False
    deepseek_provider.configured = False

    with pytest.raises(ProvidersUnavailableError) as exc_info:
        await dispatcher.complete("gemini", "Hello")

    assert exc_info.value.message == UNAVAILABLE_MESSAGE
    # The unconfigured fallback is never invoked
    assert deepseek_provider.prompts == []


@pytest.mark.asyncio
async def test_both_failing_is_unavailable_after_one_fallback(dispatcher, gemini_provider, deepseek_provider):
    gemini_provider.fail = True
    deepseek_provider.fail = True

    with pytest.raises(ProvidersUnavailableError, match="Both AI models are unavailable"):
        await dispatcher.complete("deepseek/deepseek-chat", "Hello")

    assert len(deepseek_provider.prompts) == 1
    assert len(gemini_provider.prompts) == 1
