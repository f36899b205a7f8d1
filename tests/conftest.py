"""Shared fixtures for the outfit API tests."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from outfit_api.config.settings import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(anthropic_api_key="test-key", request_timeout=0.5)


@pytest.fixture
def wardrobe() -> list[dict[str, Any]]:
    # Types deliberately out of slot order.
    return [
        {"id": "z1", "tipo": "shoes", "nombre": "Zapatillas blancas", "color": "blanco", "talla": 42},
        {"id": "p1", "tipo": "bottom", "nombre": "Vaquero recto", "color": "azul"},
        {"id": "c1", "tipo": "top", "nombre": "Camisa de lino", "color": "beige"},
    ]


def claude_reply(text: str | None) -> httpx.Response:
    content = [] if text is None else [{"type": "text", "text": text}]
    return httpx.Response(200, json={"id": "msg_1", "type": "message", "content": content})


def outfit_json(top: str, bottom: str, shoes: str, **extra: Any) -> str:
    return json.dumps(
        {
            "outfit": {
                "top": {"id": top, "razon": "fresca", **extra},
                "bottom": {"id": bottom, "razon": "cómodo"},
                "shoes": {"id": shoes, "razon": "versátiles"},
            },
            "descripcion": "Look relajado de verano",
            "tips": ["Remanga la camisa"],
        },
        ensure_ascii=False,
    )

