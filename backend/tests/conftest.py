"""
Shared pytest fixtures.
"""

from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.api import deps
from app.core.exceptions import UpstreamProviderError
from app.infrastructure.local.chat_history_repository import InMemoryChatHistoryRepository
from app.infrastructure.local.database import Base
from app.infrastructure.local.mock_auth import MockAuthProvider
from app.infrastructure.local.storage_provider import LocalStorageProvider
from app.infrastructure.local.user_repository import InMemoryUserRepository
from app.infrastructure.local.vote_repository import InMemoryVoteRepository
from app.interfaces.llm_provider import ILLMProvider
from app.models.enums import ProviderKind
from app.services.model_dispatcher import ModelDispatcher
from app.services.save_debouncer import SaveDebouncer


class FakeProvider(ILLMProvider):
    """Scripted provider: returns ``reply`` or raises UpstreamProviderError."""

    def __init__(
        self,
        kind: ProviderKind,
        model_id: str,
        reply: Optional[str] = "ok",
        configured: bool = True,
        fail: bool = False,
    ):
        self._kind = kind
        self._model_id = model_id
        self.reply = reply
        self.configured = configured
        self.fail = fail
        self.prompts: list[str] = []

    @property
    def kind(self) -> ProviderKind:
        return self._kind

    def get_model_id(self) -> str:
        return self._model_id

    def get_model_name(self) -> str:
        return f"Fake ({self._model_id})"

    def is_configured(self) -> bool:
        return self.configured

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail or not self.configured:
            raise UpstreamProviderError(self._kind.value, f"{self._model_id} failed", status_code=503)
        return self.reply


@pytest.fixture
def test_user_id() -> str:
    return "test_user"


@pytest.fixture
async def session_factory():
    """In-memory SQLite session factory with all tables created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def gemini_provider() -> FakeProvider:
    return FakeProvider(ProviderKind.GEMINI, "gemini-2.0-flash-exp", reply="Hello from Gemini")


@pytest.fixture
def deepseek_provider() -> FakeProvider:
    return FakeProvider(ProviderKind.OPENROUTER, "deepseek/deepseek-chat", reply="Hello from DeepSeek")


@pytest.fixture
def dispatcher(gemini_provider, deepseek_provider) -> ModelDispatcher:
    return ModelDispatcher(
        {
            ProviderKind.GEMINI: gemini_provider,
            ProviderKind.OPENROUTER: deepseek_provider,
        }
    )


@pytest.fixture
def stores(tmp_path):
    """Fresh in-memory stores and storage for one test."""
    return {
        "history": InMemoryChatHistoryRepository(),
        "votes": InMemoryVoteRepository(),
        "users": InMemoryUserRepository(),
        "debouncer": SaveDebouncer(),
        "storage": LocalStorageProvider(str(tmp_path / "storage"), "http://testserver"),
    }


@pytest.fixture
def app(stores, dispatcher):
    """FastAPI app wired to in-memory stores and fake model providers."""
    from main import create_app

    application = create_app()
    application.dependency_overrides[deps.get_chat_history_repository] = lambda: stores["history"]
    application.dependency_overrides[deps.get_vote_repository] = lambda: stores["votes"]
    application.dependency_overrides[deps.get_user_repository] = lambda: stores["users"]
    application.dependency_overrides[deps.get_save_debouncer] = lambda: stores["debouncer"]
    application.dependency_overrides[deps.get_storage_provider] = lambda: stores["storage"]
    application.dependency_overrides[deps.get_model_dispatcher] = lambda: dispatcher
    application.dependency_overrides[deps.get_auth_provider] = lambda: MockAuthProvider()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(test_user_id) -> dict[str, str]:
    return {"Authorization": f"Bearer {test_user_id}"}
