"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest


outfit_generation_total = Counter(
    "outfit_generation_total",
    "Total number of outfits returned, by selection source.",
    ["source"],
)

outfit_generation_failures_total = Counter(
    "outfit_generation_failures_total",
    "Total number of failed outfit generation requests, by error kind.",
    ["error"],
)


def render_latest() -> tuple[bytes, str]:
    """Return the current exposition payload and its content type."""

    return generate_latest(), CONTENT_TYPE_LATEST
