"""Errors raised by the outfit service and their HTTP rendering."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class OutfitServiceError(RuntimeError):
    """Base class for failures reported to the caller as a JSON error body."""

    status_code = 500

    def __init__(self, error: str, **details: Any) -> None:
        self.message = error
        self.details = details
        super().__init__(error)

    def payload(self) -> dict[str, Any]:
        return {"error": self.message, **self.details, "timestamp": utc_timestamp()}


class InvalidInput(OutfitServiceError):
    status_code = 400


class PayloadTooLarge(OutfitServiceError):
    status_code = 413


class ConfigurationError(OutfitServiceError):
    status_code = 500


class UpstreamError(OutfitServiceError):
    """The Messages API answered with a non-success status or could not be reached."""

    status_code = 500


class EmptyUpstreamResponse(OutfitServiceError):
    status_code = 500


class UpstreamTimeout(OutfitServiceError):
    status_code = 408


class InternalError(OutfitServiceError):
    status_code = 500
