"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the correct
infrastructure implementations based on environment configuration.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from app.core.config import get_settings
from app.core.logger import logger
from app.interfaces.auth_provider import IAuthProvider, User
from app.interfaces.chat_history_repository import IChatHistoryRepository
from app.interfaces.storage_provider import IStorageProvider
from app.interfaces.user_repository import IUserRepository
from app.interfaces.vote_repository import IVoteRepository
from app.models.enums import ProviderKind
from app.services.history_service import HistoryService
from app.services.model_dispatcher import ModelDispatcher
from app.services.save_debouncer import SaveDebouncer
from app.services.vote_service import VoteService


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_chat_history_repository() -> IChatHistoryRepository:
    """Get chat history repository instance."""
    settings = get_settings()
    if settings.is_sqlite:
        from app.infrastructure.local.chat_history_repository import SqliteChatHistoryRepository
        return SqliteChatHistoryRepository(capacity=settings.HISTORY_MAX_SESSIONS)
    else:
        from app.infrastructure.local.chat_history_repository import InMemoryChatHistoryRepository
        return InMemoryChatHistoryRepository(capacity=settings.HISTORY_MAX_SESSIONS)


@lru_cache()
def get_vote_repository() -> IVoteRepository:
    """Get vote repository instance."""
    settings = get_settings()
    if settings.is_sqlite:
        from app.infrastructure.local.vote_repository import SqliteVoteRepository
        return SqliteVoteRepository()
    else:
        from app.infrastructure.local.vote_repository import InMemoryVoteRepository
        return InMemoryVoteRepository()


@lru_cache()
def get_user_repository() -> IUserRepository:
    """Get user repository instance."""
    settings = get_settings()
    if settings.is_sqlite:
        from app.infrastructure.local.user_repository import SqliteUserRepository
        return SqliteUserRepository()
    else:
        from app.infrastructure.local.user_repository import InMemoryUserRepository
        return InMemoryUserRepository()


# ===========================================
# Service Dependencies
# ===========================================


@lru_cache()
def get_save_debouncer() -> SaveDebouncer:
    """Get the process-wide history save debouncer."""
    settings = get_settings()
    return SaveDebouncer(
        window_ms=settings.HISTORY_SAVE_DEBOUNCE_MS,
        retention_factor=settings.HISTORY_DEBOUNCE_RETENTION_FACTOR,
    )


def get_history_service(
    repo: IChatHistoryRepository = Depends(get_chat_history_repository),
    debouncer: SaveDebouncer = Depends(get_save_debouncer),
) -> HistoryService:
    """Get history service bound to the configured store."""
    return HistoryService(repo, debouncer, list_limit=get_settings().HISTORY_MAX_SESSIONS)


@lru_cache()
def _vote_service_for(repo: IVoteRepository) -> VoteService:
    # One service (and lock) per store, so toggles stay atomic across requests
    return VoteService(repo)


def get_vote_service(
    repo: IVoteRepository = Depends(get_vote_repository),
) -> VoteService:
    """Get vote service bound to the configured store."""
    return _vote_service_for(repo)


# ===========================================
# Provider Dependencies
# ===========================================


@lru_cache()
def get_model_dispatcher() -> ModelDispatcher:
    """
    Get the model dispatcher over both upstream providers.

    - gemini: Gemini API (GOOGLE_API_KEY)
    - openrouter: DeepSeek via OpenRouter (OPENROUTER_API_KEY)
    """
    from app.infrastructure.local.gemini_api_provider import GeminiAPIProvider
    from app.infrastructure.local.openrouter_provider import OpenRouterProvider

    settings = get_settings()
    providers = {
        ProviderKind.GEMINI: GeminiAPIProvider(settings),
        ProviderKind.OPENROUTER: OpenRouterProvider(settings),
    }
    if not any(provider.is_configured() for provider in providers.values()):
        logger.warning("No AI API keys configured. Set GOOGLE_API_KEY or OPENROUTER_API_KEY.")
    return ModelDispatcher(providers)


@lru_cache()
def get_auth_provider() -> IAuthProvider:
    """Get auth provider instance."""
    settings = get_settings()
    if settings.AUTH_PROVIDER == "local":
        from app.infrastructure.auth.local_auth import LocalAuthProvider

        return LocalAuthProvider(settings, get_user_repository())

    from app.infrastructure.local.mock_auth import MockAuthProvider
    return MockAuthProvider()


@lru_cache()
def get_storage_provider() -> IStorageProvider:
    """Get storage provider instance."""
    from app.infrastructure.local.storage_provider import LocalStorageProvider

    settings = get_settings()
    return LocalStorageProvider(settings.STORAGE_BASE_PATH, settings.BASE_URL)


# ===========================================
# User Authentication
# ===========================================


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> User:
    """
    Get current authenticated user.

    With the mock provider the bearer token is the user id; with local auth
    it is a JWT issued by /api/auth/login.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    # Extract token from "Bearer <token>"
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid scheme")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    try:
        return await auth_provider.verify_token(token)
    except Exception as e:
        logger.warning(f"Token verification failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )


# ===========================================
# Type Aliases for Dependency Injection
# ===========================================

ChatHistoryRepo = Annotated[IChatHistoryRepository, Depends(get_chat_history_repository)]
VoteRepo = Annotated[IVoteRepository, Depends(get_vote_repository)]
UserRepo = Annotated[IUserRepository, Depends(get_user_repository)]
History = Annotated[HistoryService, Depends(get_history_service)]
Votes = Annotated[VoteService, Depends(get_vote_service)]
Dispatcher = Annotated[ModelDispatcher, Depends(get_model_dispatcher)]
StorageProvider = Annotated[IStorageProvider, Depends(get_storage_provider)]
CurrentUser = Annotated[User, Depends(get_current_user)]
