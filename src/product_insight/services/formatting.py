"""Formatting helpers for product display."""

import math
from datetime import UTC, datetime

from product_insight.domain.products import NormalizedNutriments
from product_insight.services.coercion import format_allergen_tag, format_amount

MISSING_VALUE = "—"
NOT_AVAILABLE = "Not available"

NUTRIENT_ROWS = (
    ("Energy", "energy_kcal_100g", "kcal"),
    ("Fat", "fat_100g", "g"),
    ("Saturated fat", "saturated_fat_100g", "g"),
    ("Carbohydrates", "carbohydrates_100g", "g"),
    ("Sugars", "sugars_100g", "g"),
    ("Fiber", "fiber_100g", "g"),
    ("Proteins", "proteins_100g", "g"),
    ("Salt", "salt_100g", "g"),
)


def format_nutrient(value: float | None, unit: str | None = None) -> str:
    """Render a nutrient value with its unit, or a dash when missing."""
    if value is None or isinstance(value, bool) or not isinstance(value, int | float):
        return MISSING_VALUE
    if not math.isfinite(value):
        return MISSING_VALUE
    if not unit:
        return format_amount(value)
    if unit in {"g", "kcal"}:
        return f"{format_amount(value)} {unit}"
    return f"{format_amount(value)}{unit}"


def nutrient_table(nutriments: NormalizedNutriments) -> list[dict[str, str]]:
    """Return label/value rows for the nutrition table."""
    return [
        {"label": label, "value": format_nutrient(getattr(nutriments, field), unit)}
        for label, field, unit in NUTRIENT_ROWS
    ]


def format_allergens(allergens: str | None, allergens_tags: list[str] | None) -> str:
    """Prefer the allergens text, then the formatted tags."""
    if allergens and allergens.strip():
        return allergens.strip()
    if allergens_tags:
        return ", ".join(format_allergen_tag(tag) for tag in allergens_tags)
    return NOT_AVAILABLE


def format_relative_time(moment: datetime, now: datetime | None = None) -> str:
    """Human-readable age such as ``2h ago``."""
    current = now or datetime.now(tz=UTC)
    seconds = math.floor((current - moment).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24
    if days >= 1:
        return f"{days}d ago"
    if hours >= 1:
        return f"{hours}h ago"
    if minutes >= 1:
        return f"{minutes}m ago"
    if seconds >= 10:  # noqa: PLR2004
        return f"{seconds}s ago"
    return "Just now"
