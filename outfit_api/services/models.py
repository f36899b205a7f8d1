"""Pydantic models for outfit requests and model replies."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

SLOTS = ("top", "bottom", "shoes")
DEFAULT_OCCASION = "casual"


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _as_list(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(item) for item in value]
    if isinstance(value, str) and value:
        return [value]
    return []


class Weather(BaseModel):
    """Weather context supplied by the caller. Unusable values are dropped."""

    model_config = ConfigDict(extra="allow")

    temp: int | float | None = None
    description: str | None = None

    @field_validator("temp", mode="before")
    @classmethod
    def _numeric_temp(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _text_description(cls, value: Any) -> str | None:
        return _as_text(value)


class GenerationRequest(BaseModel):
    """Body of ``POST /api/claude``. Only the wardrobe size is enforced."""

    model_config = ConfigDict(populate_by_name=True)

    wardrobe: list[dict[str, Any]] = Field(min_length=3)
    weather: Weather | None = None
    occasion: str = DEFAULT_OCCASION
    day_name: str | None = Field(default=None, alias="dayName")

    @field_validator("wardrobe", mode="before")
    @classmethod
    def _items_as_records(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [dict(item) if isinstance(item, Mapping) else {} for item in value]

    @field_validator("weather", mode="before")
    @classmethod
    def _weather_object(cls, value: Any) -> Any:
        return value if isinstance(value, Mapping) else None

    @field_validator("occasion", mode="before")
    @classmethod
    def _text_occasion(cls, value: Any) -> str:
        return _as_text(value) or DEFAULT_OCCASION

    @field_validator("day_name", mode="before")
    @classmethod
    def _text_day(cls, value: Any) -> str | None:
        return _as_text(value)


class SlotSelection(BaseModel):
    """One chosen garment: a wardrobe id plus a short justification."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    razon: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("razon", mode="before")
    @classmethod
    def _text_razon(cls, value: Any) -> str:
        return _as_text(value) or ""


class OutfitSelection(BaseModel):
    top: SlotSelection
    bottom: SlotSelection
    shoes: SlotSelection


class OutfitPlan(BaseModel):
    """Structured reply expected from the stylist model.

    Only the three slots are required; descriptive fields of the wrong type
    are coerced instead of discarding the model's picks.
    """

    model_config = ConfigDict(extra="allow")

    outfit: OutfitSelection
    descripcion: str = ""
    tips: list[str] = Field(default_factory=list)

    @field_validator("descripcion", mode="before")
    @classmethod
    def _text_descripcion(cls, value: Any) -> str:
        return _as_text(value) or ""

    @field_validator("tips", mode="before")
    @classmethod
    def _tips_list(cls, value: Any) -> list[str]:
        return _as_list(value)
