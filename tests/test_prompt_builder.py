"""Tests for the stylist prompt builder."""

from outfit_api.nlp.prompt_builder import OutfitPromptContext, PromptBuilder


def test_prompt_builder_includes_context() -> None:
    builder = PromptBuilder()
    context = OutfitPromptContext(
        occasion="boda",
        day_name="viernes",
        temperature=15,
        weather_description="lluvioso",
    )
    wardrobe = [
        {"id": "a1", "tipo": "top", "nombre": "Blusa de seda", "color": "verde"},
        {"id": "b1", "tipo": "bottom", "nombre": "Falda midi", "color": "negro"},
    ]

    prompt = builder.build(wardrobe, context)

    assert "outfit boda para viernes" in prompt
    assert "a1: top - Blusa de seda (verde)" in prompt
    assert "b1: bottom - Falda midi (negro)" in prompt
    assert "CLIMA: 15°C, lluvioso" in prompt
    assert '"outfit"' in prompt and '"tips"' in prompt


def test_prompt_builder_defaults_day_and_weather() -> None:
    prompt = PromptBuilder().build([], OutfitPromptContext(occasion="casual"))

    assert "para hoy" in prompt
    assert "CLIMA: 22°C, agradable" in prompt


def test_prompt_builder_limits_items() -> None:
    wardrobe = [{"id": f"x{i}", "tipo": "top", "nombre": "n", "color": "c"} for i in range(5)]

    prompt = PromptBuilder(item_limit=2).build(wardrobe, OutfitPromptContext(occasion="casual"))

    assert "x1: top" in prompt
    assert "x2: top" not in prompt


def test_prompt_builder_prints_whole_degrees_without_decimals() -> None:
    assert OutfitPromptContext(temperature=20.0, weather_description="nublado").climate() == "20°C, nublado"
    assert OutfitPromptContext(temperature=20.5).climate() == "20.5°C, agradable"
