"""
Application configuration using Pydantic Settings.

Store and provider switching is controlled by STORE_BACKEND, AUTH_PROVIDER
and the presence of upstream API keys.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # ===========================================
    # Stores
    # ===========================================
    # "memory": process-lifetime dictionaries (lost on restart)
    # "sqlite": SQLAlchemy async engine at DATABASE_URL
    STORE_BACKEND: Literal["memory", "sqlite"] = "memory"
    DATABASE_URL: str = "sqlite+aiosqlite:///./chatbot.db"

    # ===========================================
    # LLM Configuration
    # ===========================================
    # Model identifier used when a chat request omits one
    DEFAULT_CHAT_MODEL: str = "gemini"
    LLM_TEMPERATURE: float = 0.7
    LLM_REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Google Gemini (generateContent REST API)
    GOOGLE_API_KEY: str = ""
    # Alternate variable name accepted for the Gemini key
    GOOGLE_GENERATIVE_AI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash-exp"
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MAX_OUTPUT_TOKENS: int = 2048

    # DeepSeek through OpenRouter (OpenAI-compatible chat completions)
    OPENROUTER_API_KEY: str = ""
    OPENROUTER_MODEL: str = "deepseek/deepseek-chat"
    OPENROUTER_API_BASE: str = "https://openrouter.ai/api/v1"
    OPENROUTER_REFERER: str = "http://localhost:3001"
    OPENROUTER_APP_TITLE: str = "AI Chatbot"
    OPENROUTER_MAX_TOKENS: int = 2000

    # ===========================================
    # Auth
    # ===========================================
    # "mock": bearer token is treated as the user id
    # "local": HS256 JWT issued by /api/auth/login
    AUTH_PROVIDER: Literal["mock", "local"] = "mock"
    LOCAL_JWT_SECRET: str = ""
    LOCAL_JWT_ISSUER: str = "chatbot-local"
    LOCAL_JWT_EXPIRE_MINUTES: int = 60 * 24 * 7
    SIGNUP_MIN_PASSWORD_LENGTH: int = 6

    # ===========================================
    # Chat history
    # ===========================================
    HISTORY_MAX_SESSIONS: int = 15
    HISTORY_SAVE_DEBOUNCE_MS: int = 1000
    HISTORY_DEBOUNCE_RETENTION_FACTOR: int = 5

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )

    # URL for accessing the backend (for storage links)
    BASE_URL: str = "http://localhost:8000"

    # ===========================================
    # Storage
    # ===========================================
    STORAGE_BASE_PATH: str = "./storage"

    @property
    def gemini_api_key(self) -> str:
        """Gemini key, accepting either supported variable name."""
        return self.GOOGLE_API_KEY or self.GOOGLE_GENERATIVE_AI_API_KEY

    @property
    def is_sqlite(self) -> bool:
        """Check if stores are backed by SQLite."""
        return self.STORE_BACKEND == "sqlite"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
