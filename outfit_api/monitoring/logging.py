"""Logging configuration and event loop supervision."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from outfit_api.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logger according to project conventions."""

    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def log_unhandled_loop_error(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    """Log faults that escaped every task so the server keeps running."""

    exc = context.get("exception")
    message = context.get("message", "Unhandled error in event loop")
    if exc is not None:
        logger.error("%s: %r", message, exc, exc_info=exc)
    else:
        logger.error("%s", message)


def install_loop_supervisor() -> None:
    """Attach :func:`log_unhandled_loop_error` to the running event loop."""

    asyncio.get_running_loop().set_exception_handler(log_unhandled_loop_error)
