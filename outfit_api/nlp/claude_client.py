"""Async wrapper around the Anthropic Messages API."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from outfit_api.config.settings import Settings

logger = logging.getLogger(__name__)


class ClaudeRequestError(RuntimeError):
    """Raised when the Messages API responds with an error or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class ClaudeTimeoutError(ClaudeRequestError):
    """Raised when the Messages API does not answer within the client timeout."""


class ClaudeClient:
    """Thin client that sends single-turn prompts to the Messages API."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not settings.anthropic_api_key:
            raise RuntimeError("Anthropic API key is not configured.")

        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.anthropic_base_url.rstrip("/"),
            timeout=settings.request_timeout,
            transport=transport,
            headers={
                "x-api-key": settings.anthropic_api_key,
                "anthropic-version": settings.anthropic_version,
                "Content-Type": "application/json",
            },
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()

    async def _request_json(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(method, endpoint, json=json_body)
            response.raise_for_status()
            if not response.content:
                return {}
            return response.json()
        except httpx.TimeoutException as exc:
            raise ClaudeTimeoutError("Timed out waiting for the Messages API.") from exc
        except httpx.HTTPStatusError as exc:
            raise ClaudeRequestError(
                f"Messages API returned {exc.response.status_code}",
                status_code=exc.response.status_code,
                body=exc.response.text,
            ) from exc
        except httpx.TransportError as exc:
            raise ClaudeRequestError(f"Messages API is unreachable: {exc}") from exc

    async def create_message(self, prompt: str) -> dict[str, Any]:
        """Send ``prompt`` as a single user message and return the raw envelope."""

        payload = {
            "model": self._settings.anthropic_model,
            "max_tokens": self._settings.max_tokens,
            "temperature": self._settings.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        return await self._request_json("POST", "/messages", json_body=payload)

    async def ping(self) -> bool:
        """Return ``True`` if the upstream service responds to a model listing call."""

        try:
            await self._request_json("GET", "/models")
        except ClaudeRequestError as exc:
            logger.warning("Messages API ping failed: %s", exc)
            return False
        return True

    @staticmethod
    def first_text(envelope: Any) -> str | None:
        """Extract the text of the first content block, if any."""

        if not isinstance(envelope, Mapping):
            return None
        content = envelope.get("content") or []
        if not isinstance(content, list) or not content:
            return None
        first = content[0]
        if not isinstance(first, Mapping):
            return None
        text = first.get("text")
        return text if isinstance(text, str) and text else None
