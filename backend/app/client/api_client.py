"""
HTTP client for the chatbot API.
"""

from __future__ import annotations

from typing import Any

import requests

from app.client.config import ClientConfig


class ApiClientError(RuntimeError):
    """A request failed; ``message`` is what the server reported."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ChatApiClient:
    def __init__(self, config: ClientConfig, session: requests.Session | None = None):
        self._config = config
        self._session = session or requests.Session()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def has_token(self) -> bool:
        return bool((self._config.token or "").strip())

    def set_token(self, token: str) -> None:
        self._config.token = token.strip()

    # -- chat ---------------------------------------------------------------

    def send_chat(
        self,
        messages: list[dict[str, Any]],
        *,
        model: str,
        web_search: bool = False,
        chat_id: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "messages": messages,
            "model": model,
            "webSearch": web_search,
        }
        if chat_id:
            payload["chatId"] = chat_id
        return self._request("POST", "/chat", json=payload)

    def list_models(self) -> dict[str, Any]:
        return self._request("GET", "/models")

    # -- history ------------------------------------------------------------

    def save_history(
        self,
        chat_id: str,
        title: str,
        timestamp: str,
        messages: list[dict[str, Any]],
    ) -> dict[str, Any]:
        payload = {
            "chatId": chat_id,
            "title": title,
            "timestamp": timestamp,
            "messages": messages,
        }
        return self._request("POST", "/history", json=payload)

    def get_history(self, chat_id: str) -> dict[str, Any]:
        return self._request("GET", "/history", params={"chatId": chat_id})

    def list_history(self) -> list[dict[str, Any]]:
        data = self._request("GET", "/history")
        if not isinstance(data, list):
            raise ApiClientError("History listing is not a JSON array.")
        return data

    def delete_history(self, chat_id: str) -> dict[str, Any]:
        return self._request("DELETE", "/history", params={"chatId": chat_id})

    # -- votes and files ----------------------------------------------------

    def cast_vote(
        self,
        message_id: str,
        chat_id: str,
        vote: str,
        *,
        message_content: str | None = None,
        model: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"messageId": message_id, "chatId": chat_id, "vote": vote}
        if message_content is not None:
            payload["messageContent"] = message_content
        if model:
            payload["model"] = model
        return self._request("POST", "/vote", json=payload)

    def get_votes(self, chat_id: str) -> list[dict[str, Any]]:
        data = self._request("GET", "/vote", params={"chatId": chat_id})
        return list(data.get("votes") or [])

    def upload_file(
        self,
        filename: str,
        data: bytes,
        content_type: str | None = None,
    ) -> dict[str, Any]:
        headers = {"Content-Type": content_type} if content_type else {}
        return self._request(
            "POST", "/upload", params={"filename": filename}, data=data, headers=headers
        )

    # -- accounts -----------------------------------------------------------

    def signup(self, email: str, password: str, name: str = "") -> dict[str, Any]:
        payload = {"name": name, "email": email, "password": password}
        return self._request("POST", "/auth/signup", json=payload, auth=False)

    def login(self, email: str, password: str) -> dict[str, Any]:
        data = self._request(
            "POST", "/auth/login", json={"email": email, "password": password}, auth=False
        )
        token = str(data.get("accessToken") or "")
        if token:
            self.set_token(token)
        return data

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
        auth: bool = True,
    ) -> Any:
        request_headers = dict(headers or {})
        if auth:
            token = (self._config.token or "").strip()
            if not token:
                raise ApiClientError("Not authenticated. Set CHAT_API_TOKEN or log in first.")
            request_headers["Authorization"] = f"Bearer {token}"

        url = f"{self._config.api_base_url}{path}"
        try:
            response = self._session.request(
                method,
                url,
                json=json,
                params=params,
                data=data,
                headers=request_headers,
                timeout=self._config.request_timeout_seconds,
            )
        except requests.RequestException as exc:
            raise ApiClientError(f"Backend request failed: {exc}") from exc

        if response.status_code >= 400:
            detail = None
            try:
                body = response.json()
                if isinstance(body, dict):
                    detail = body.get("error")
            except ValueError:
                detail = None
            message = detail or f"HTTP {response.status_code} {response.reason}"
            raise ApiClientError(str(message), status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise ApiClientError("Backend returned invalid JSON") from exc
