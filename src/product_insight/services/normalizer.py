"""Normalization of raw catalog product records.

Catalog payloads are inconsistent: fields go missing, arrive as ``null``,
carry the wrong type or hold blank strings. ``normalize_product`` resolves
every field to a defined default so downstream code never has to.
"""

import math
from collections.abc import Mapping

from product_insight.domain.products import (
    Ingredient,
    NormalizedNutriments,
    NormalizedProduct,
)
from product_insight.services.coercion import (
    format_allergen_tag,
    format_amount,
    non_blank,
    to_number,
)

UNKNOWN_PRODUCT_NAME = "Unknown product"

_NAME_FIELDS = ("product_name", "product_name_en", "product_name_fr", "product_name_de")

_NUTRIENT_KEYS = {
    "energy_kcal_100g": "energy-kcal_100g",
    "fat_100g": "fat_100g",
    "saturated_fat_100g": "saturated-fat_100g",
    "carbohydrates_100g": "carbohydrates_100g",
    "sugars_100g": "sugars_100g",
    "fiber_100g": "fiber_100g",
    "proteins_100g": "proteins_100g",
    "salt_100g": "salt_100g",
}


def normalize_product(raw: object) -> NormalizedProduct:
    """Build a NormalizedProduct from an untrusted catalog record.

    Never raises: any input, including non-mappings, yields a product with
    default values. ``raw`` is kept as-is on the result.
    """
    fields: Mapping[str, object] = raw if isinstance(raw, Mapping) else {}
    entries = fields.get("ingredients")
    entries = entries if isinstance(entries, list) else []
    tags = fields.get("allergens_tags")
    tags = tags if isinstance(tags, list) else []

    return NormalizedProduct(
        name=_pick_name(fields),
        brand=non_blank(fields.get("brands")) or "",
        image_url=non_blank(fields.get("image_front_url")),
        nutriscore_grade=_pick_grade(fields),
        ingredients_text=_pick_ingredients_text(fields, entries),
        ingredients=[_parse_ingredient(entry) for entry in entries],
        allergens_display=_pick_allergens(fields, tags),
        allergens_tags=[tag for tag in tags if isinstance(tag, str)],
        nutriments=_parse_nutriments(fields.get("nutriments")),
        additives_n=_parse_additives(fields.get("additives_n")),
        raw=raw,
    )


def _pick_name(fields: Mapping[str, object]) -> str:
    for key in _NAME_FIELDS:
        name = non_blank(fields.get(key))
        if name:
            return name
    return UNKNOWN_PRODUCT_NAME


def _pick_grade(fields: Mapping[str, object]) -> str | None:
    """Return the Nutri-Score letter A-E, or None."""
    grade = non_blank(fields.get("nutriscore_grade")) or non_blank(
        fields.get("nutrition_grades")
    )
    if not grade:
        return None
    letter = grade[0].upper()
    # Range check on a single character; anything outside A-E is dropped.
    if len(letter) == 1 and "A" <= letter <= "E":
        return letter
    return None


def _pick_ingredients_text(fields: Mapping[str, object], entries: list[object]) -> str:
    text = non_blank(fields.get("ingredients_text"))
    if text:
        return text
    parts = [_ingredient_text(entry) for entry in entries]
    return ", ".join(part for part in parts if part)


def _ingredient_text(entry: object) -> str:
    if not isinstance(entry, Mapping):
        return ""
    value = entry.get("text")
    if isinstance(value, str):
        return value
    number = to_number(value)
    if number is not None:
        return format_amount(number)
    return ""


def _parse_ingredient(entry: object) -> Ingredient:
    if not isinstance(entry, Mapping):
        return Ingredient(text="", percent=None)
    percent = to_number(entry.get("percent_estimate"))
    if percent is None:
        percent = to_number(entry.get("percent"))
    return Ingredient(text=_ingredient_text(entry), percent=percent)


def _pick_allergens(fields: Mapping[str, object], tags: list[object]) -> str:
    text = non_blank(fields.get("allergens"))
    if text:
        return text
    return ", ".join(format_allergen_tag(tag) for tag in tags if isinstance(tag, str))


def _parse_nutriments(value: object) -> NormalizedNutriments:
    source: Mapping[str, object] = value if isinstance(value, Mapping) else {}
    return NormalizedNutriments(
        **{field: to_number(source.get(key)) for field, key in _NUTRIENT_KEYS.items()}
    )


def _parse_additives(value: object) -> int:
    count = to_number(value) or 0.0
    return max(0, math.floor(count))
