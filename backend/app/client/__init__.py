"""Python client for the chatbot API."""

from app.client.api_client import ApiClientError, ChatApiClient
from app.client.config import ClientConfig
from app.client.session_state import ChatSessionState

__all__ = [
    "ApiClientError",
    "ChatApiClient",
    "ChatSessionState",
    "ClientConfig",
]
