"""Outfit generation: prompt the stylist model, parse its pick, enrich it."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Mapping, Sequence

import httpx
from pydantic import ValidationError

from outfit_api.config.settings import Settings
from outfit_api.metrics.prometheus_exporter import outfit_generation_total
from outfit_api.nlp.claude_client import ClaudeClient, ClaudeRequestError, ClaudeTimeoutError
from outfit_api.nlp.prompt_builder import DEFAULT_DAY, OutfitPromptContext, PromptBuilder
from outfit_api.services.errors import (
    ConfigurationError,
    EmptyUpstreamResponse,
    InvalidInput,
    UpstreamError,
    UpstreamTimeout,
    utc_timestamp,
)
from outfit_api.services.models import SLOTS, GenerationRequest, OutfitPlan

logger = logging.getLogger(__name__)

UPSTREAM_DETAILS_LIMIT = 200
FALLBACK_TIPS = ["Outfit generado automáticamente", "Colores perfectamente coordinados"]


def timeout_error(settings: Settings) -> UpstreamTimeout:
    return UpstreamTimeout(
        f"Timeout: Claude API tardó más de {settings.request_timeout:g} segundos",
    )


def validate_request(body: Any) -> GenerationRequest:
    """Check the wardrobe size first, then the rest of the body."""

    wardrobe = body.get("wardrobe") if isinstance(body, Mapping) else None
    if not isinstance(wardrobe, list) or len(wardrobe) < 3:
        raise InvalidInput(
            "Se requieren al menos 3 prendas",
            received=len(wardrobe) if isinstance(wardrobe, list) else 0,
        )
    try:
        return GenerationRequest.model_validate(body)
    except ValidationError as exc:
        raise InvalidInput(
            "Solicitud inválida",
            received=len(wardrobe),
            details=exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc


def extract_json_block(text: str) -> str:
    """Strip Markdown fences and keep the span between the first ``{`` and last ``}``."""

    cleaned = text.strip().replace("```json", "").replace("```", "")
    start = cleaned.find("{")
    end = cleaned.rfind("}") + 1
    if start >= 0 and end > start:
        cleaned = cleaned[start:end]
    return cleaned.strip()


def parse_plan(text: str) -> OutfitPlan | None:
    """Return the model's outfit, or ``None`` when the reply is unusable."""

    try:
        return OutfitPlan.model_validate(json.loads(extract_json_block(text)))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Could not parse outfit reply: %s", exc)
        return None


def _first_of_type(wardrobe: Sequence[Mapping[str, Any]], tipo: str, index: int) -> Any:
    for item in wardrobe:
        if item.get("tipo") == tipo:
            return item.get("id")
    return wardrobe[index].get("id")


def fallback_plan(wardrobe: Sequence[Mapping[str, Any]], occasion: str, day_name: str | None) -> OutfitPlan:
    """Pick the first garment of each slot type, or positions 0/1/2 when a type is missing."""

    return OutfitPlan.model_validate(
        {
            "outfit": {
                "top": {"id": _first_of_type(wardrobe, "top", 0), "razon": f"Perfecto para {occasion}"},
                "bottom": {"id": _first_of_type(wardrobe, "bottom", 1), "razon": "Combina perfectamente"},
                "shoes": {"id": _first_of_type(wardrobe, "shoes", 2), "razon": "Completa el look ideal"},
            },
            "descripcion": f"Look {occasion} perfecto para {day_name or DEFAULT_DAY}",
            "tips": list(FALLBACK_TIPS),
        },
    )


def find_item(wardrobe: Sequence[Mapping[str, Any]], item_id: str | None) -> Mapping[str, Any] | None:
    if item_id is None:
        return None
    for item in wardrobe:
        if "id" in item and str(item["id"]) == item_id:
            return item
    return None


def enrich_outfit(plan: OutfitPlan, wardrobe: Sequence[Mapping[str, Any]]) -> dict[str, dict[str, Any]]:
    """Overlay each selection with its wardrobe record; the record wins on shared keys."""

    enriched: dict[str, dict[str, Any]] = {}
    for slot in SLOTS:
        selection = getattr(plan.outfit, slot).model_dump()
        item = find_item(wardrobe, selection["id"])
        enriched[slot] = {**selection, **(item or {})}
    return enriched


class OutfitService:
    """Runs one outfit generation request end to end."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._prompt_builder = PromptBuilder(item_limit=settings.prompt_item_limit)

    async def _ask_model(self, prompt: str) -> str:
        client = ClaudeClient(self._settings, transport=self._transport)
        try:
            envelope = await asyncio.wait_for(
                client.create_message(prompt),
                timeout=self._settings.request_timeout,
            )
        except (asyncio.TimeoutError, ClaudeTimeoutError) as exc:
            logger.error("Messages API did not answer within %ss", self._settings.request_timeout)
            raise timeout_error(self._settings) from exc
        except ClaudeRequestError as exc:
            logger.error("Messages API error: %s %s", exc.status_code, exc.body)
            raise UpstreamError(
                "Error en Claude API",
                status=exc.status_code,
                details=(exc.body or str(exc))[:UPSTREAM_DETAILS_LIMIT],
            ) from exc
        finally:
            await client.close()

        text = ClaudeClient.first_text(envelope)
        if not text:
            logger.error("Messages API returned no text content")
            raise EmptyUpstreamResponse("Respuesta vacía de Claude")
        return text

    async def generate(self, body: Any) -> dict[str, Any]:
        """Validate ``body``, ask the model for an outfit and return the response envelope."""

        logger.info("Starting outfit generation")
        request = validate_request(body)

        if not self._settings.anthropic_api_key:
            logger.error("ANTHROPIC_API_KEY is not configured")
            raise ConfigurationError(
                "API key no configurada",
                hint="Configura ANTHROPIC_API_KEY en las variables de entorno del servicio",
            )

        weather = request.weather
        prompt = self._prompt_builder.build(
            request.wardrobe,
            OutfitPromptContext(
                occasion=request.occasion,
                day_name=request.day_name,
                temperature=weather.temp if weather else None,
                weather_description=weather.description if weather else None,
            ),
        )
        logger.info("Prompt built with %d wardrobe items, calling Messages API", len(request.wardrobe))

        text = await self._ask_model(prompt)
        plan = parse_plan(text)
        used_fallback = plan is None
        if plan is None:
            logger.warning("Using rule-based fallback outfit")
            plan = fallback_plan(request.wardrobe, request.occasion, request.day_name)

        result: dict[str, Any] = {
            **plan.model_dump(),
            "outfit": enrich_outfit(plan, request.wardrobe),
            "success": True,
            "fallback": used_fallback,
            "generatedAt": utc_timestamp(),
            "day": request.day_name,
            "weather": body.get("weather"),
            "source": self._settings.source_tag,
            "port": self._settings.port,
        }
        outfit_generation_total.labels(source="fallback" if used_fallback else "model").inc()
        logger.info("Outfit generated successfully")
        return result
