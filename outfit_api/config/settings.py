"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    """Process-wide settings, read once at startup and never mutated."""

    environment: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 3000

    anthropic_api_key: str = ""
    anthropic_base_url: str = "https://api.anthropic.com/v1"
    anthropic_version: str = "2023-06-01"
    anthropic_model: str = "claude-3-haiku-20240307"
    max_tokens: int = 400
    temperature: float = 0.7
    request_timeout: float = 25.0

    prompt_item_limit: int = 8
    max_body_bytes: int = 10 * 1024 * 1024
    source_tag: str = "fastapi"


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
        anthropic_base_url=os.getenv("ANTHROPIC_BASE_URL", "https://api.anthropic.com/v1"),
        anthropic_version=os.getenv("ANTHROPIC_VERSION", "2023-06-01"),
        anthropic_model=os.getenv("ANTHROPIC_MODEL", "claude-3-haiku-20240307"),
        max_tokens=int(os.getenv("ANTHROPIC_MAX_TOKENS", "400")),
        temperature=float(os.getenv("ANTHROPIC_TEMPERATURE", "0.7")),
        request_timeout=float(os.getenv("REQUEST_TIMEOUT", "25")),
        prompt_item_limit=int(os.getenv("PROMPT_ITEM_LIMIT", "8")),
        max_body_bytes=int(os.getenv("MAX_BODY_BYTES", str(10 * 1024 * 1024))),
        source_tag=os.getenv("SOURCE_TAG", "fastapi"),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()
