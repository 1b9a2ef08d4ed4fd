from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass
class ClientConfig:
    api_base_url: str
    token: str
    model: str
    web_search: bool
    request_timeout_seconds: float
    save_delay_seconds: float

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "ClientConfig":
        load_dotenv(env_file)
        base_url = os.getenv("CHAT_API_BASE_URL", "http://localhost:8000/api").strip().rstrip("/")
        return cls(
            api_base_url=base_url,
            token=os.getenv("CHAT_API_TOKEN", "").strip(),
            model=os.getenv("CHAT_MODEL", "gemini").strip() or "gemini",
            web_search=os.getenv("CHAT_WEB_SEARCH", "false").strip().lower() in {"1", "true", "yes"},
            request_timeout_seconds=max(3.0, float(os.getenv("CHAT_REQUEST_TIMEOUT_SECONDS", "35"))),
            save_delay_seconds=max(0.0, float(os.getenv("CHAT_SAVE_DELAY_SECONDS", "1.0"))),
        )
