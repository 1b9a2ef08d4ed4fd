"""
Shared HTTP utilities for upstream LLM providers.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from app.core.exceptions import UpstreamProviderError
from app.core.logger import logger


def describe_error_response(label: str, response: httpx.Response) -> str:
    """
    Build an error message for a non-2xx provider response.

    Uses the provider error envelope ``{"error": {"message": ...}}`` when the
    body carries one, otherwise the HTTP status line.
    """
    message: Optional[str] = None
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError):
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            message = str(error["message"])
        elif isinstance(error, str) and error:
            message = error
    if message:
        return f"{label} API error: {message}"
    return f"{label} API error: {response.status_code} {response.reason_phrase}".rstrip()


async def post_json(
    label: str,
    url: str,
    payload: dict[str, Any],
    *,
    headers: Optional[dict[str, str]] = None,
    params: Optional[dict[str, str]] = None,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> dict[str, Any]:
    """
    POST a JSON payload to a provider and return the decoded JSON object.

    Raises:
        UpstreamProviderError: transport failure, non-2xx status, or a body
            that is not a JSON object
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.post(url, json=payload, headers=headers, params=params)
    except httpx.HTTPError as e:
        logger.error(f"{label} API request failed: {e}")
        raise UpstreamProviderError(label, f"{label} API request failed: {e}") from e

    if response.is_error:
        message = describe_error_response(label, response)
        logger.error(f"{label} API error response ({response.status_code}): {response.text[:500]}")
        raise UpstreamProviderError(label, message, status_code=response.status_code)

    try:
        data = response.json()
    except (json.JSONDecodeError, ValueError) as e:
        raise UpstreamProviderError(
            label, f"Invalid {label} API response format", status_code=response.status_code
        ) from e
    if not isinstance(data, dict):
        raise UpstreamProviderError(
            label, f"Invalid {label} API response format", status_code=response.status_code
        )
    return data
