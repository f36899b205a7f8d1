"""Connectivity checks for the external text-generation service."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from outfit_api.config.settings import Settings, get_settings
from outfit_api.nlp.claude_client import ClaudeClient


@dataclass(slots=True)
class IntegrationCheckResult:
    """Structured result describing the integration check outcome."""

    name: str
    success: bool
    message: str


async def _run_check(
    name: str,
    factory: Callable[[], Awaitable[bool]],
    success_message: str,
) -> IntegrationCheckResult:
    try:
        result = await factory()
    except Exception as exc:  # pragma: no cover - reported, not raised
        return IntegrationCheckResult(name=name, success=False, message=str(exc))

    if result:
        return IntegrationCheckResult(name=name, success=True, message=success_message)
    return IntegrationCheckResult(
        name=name,
        success=False,
        message="Service responded with non-success status.",
    )


async def check_anthropic(settings: Settings | None = None) -> IntegrationCheckResult:
    """Ping the Messages API with the configured key and return the result."""

    settings = settings or get_settings()
    if not settings.anthropic_api_key:
        return IntegrationCheckResult(
            name="Anthropic",
            success=False,
            message="ANTHROPIC_API_KEY is not configured.",
        )

    client = ClaudeClient(settings)

    async def _ping() -> bool:
        try:
            return await client.ping()
        finally:
            await client.close()

    return await _run_check(
        name="Anthropic",
        factory=_ping,
        success_message="Anthropic Messages API is reachable.",
    )


async def run_all_checks() -> list[IntegrationCheckResult]:
    """Execute all integration checks concurrently."""

    return list(await asyncio.gather(check_anthropic()))
