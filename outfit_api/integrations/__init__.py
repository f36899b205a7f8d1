"""Integration check helpers."""

from .checks import (
    IntegrationCheckResult,
    check_anthropic,
    run_all_checks,
)

__all__ = [
    "IntegrationCheckResult",
    "check_anthropic",
    "run_all_checks",
]
