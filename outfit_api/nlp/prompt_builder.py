"""Prompt construction for the outfit selection request."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

DEFAULT_DAY = "hoy"
DEFAULT_TEMPERATURE = 22
DEFAULT_WEATHER = "agradable"

RESPONSE_TEMPLATE = """{
  "outfit": {
    "top": {"id": "ID_de_prenda", "razon": "breve razón"},
    "bottom": {"id": "ID_de_prenda", "razon": "breve razón"},
    "shoes": {"id": "ID_de_prenda", "razon": "breve razón"}
  },
  "descripcion": "descripción breve del look",
  "tips": ["consejo 1", "consejo 2"]
}"""


@dataclass(slots=True)
class OutfitPromptContext:
    """Occasion and weather information shown to the stylist model."""

    occasion: str | None = None
    day_name: str | None = None
    temperature: float | int | None = None
    weather_description: str | None = None

    def day(self) -> str:
        return self.day_name or DEFAULT_DAY

    def climate(self) -> str:
        temp = self.temperature if self.temperature else DEFAULT_TEMPERATURE
        if isinstance(temp, float) and temp.is_integer():
            temp = int(temp)
        description = self.weather_description or DEFAULT_WEATHER
        return f"{temp}°C, {description}"


class PromptBuilder:
    """Builds the instruction that asks the model for a single JSON outfit."""

    def __init__(self, item_limit: int = 8) -> None:
        self._item_limit = item_limit

    @staticmethod
    def describe_item(item: Mapping[str, Any]) -> str:
        return f"{item.get('id')}: {item.get('tipo')} - {item.get('nombre')} ({item.get('color')})"

    def build(self, wardrobe: Sequence[Mapping[str, Any]], context: OutfitPromptContext) -> str:
        """Return the full prompt for ``wardrobe`` under ``context``."""

        item_lines = "\n".join(self.describe_item(item) for item in wardrobe[: self._item_limit])
        return (
            f"Eres un estilista profesional. Selecciona 3 prendas para un outfit "
            f"{context.occasion} para {context.day()}.\n\n"
            f"PRENDAS DISPONIBLES:\n{item_lines}\n\n"
            f"CLIMA: {context.climate()}\n\n"
            f"Responde SOLO este JSON sin texto adicional:\n{RESPONSE_TEMPLATE}"
        )
