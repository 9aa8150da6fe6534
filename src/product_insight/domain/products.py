"""Product domain models."""

from dataclasses import dataclass
from enum import StrEnum


class ProductSource(StrEnum):
    """Catalog a product was found in."""

    FOOD = "food"
    BEAUTY = "beauty"


@dataclass(frozen=True)
class Ingredient:
    """Single ingredient entry."""

    text: str
    percent: float | None = None


@dataclass(frozen=True)
class NormalizedNutriments:
    """Nutrient values per 100g/ml; None when unknown."""

    energy_kcal_100g: float | None = None
    fat_100g: float | None = None
    saturated_fat_100g: float | None = None
    carbohydrates_100g: float | None = None
    sugars_100g: float | None = None
    fiber_100g: float | None = None
    proteins_100g: float | None = None
    salt_100g: float | None = None


@dataclass(frozen=True)
class NormalizedProduct:
    """Product record with every field resolved to a safe default."""

    name: str
    brand: str
    image_url: str | None
    nutriscore_grade: str | None
    ingredients_text: str
    ingredients: list[Ingredient]
    allergens_display: str
    allergens_tags: list[str]
    nutriments: NormalizedNutriments
    additives_n: int
    raw: object


@dataclass(frozen=True)
class ProductLookup:
    """Result of a barcode lookup."""

    barcode: str
    product: NormalizedProduct
    source: ProductSource


@dataclass(frozen=True)
class NameSearchHit:
    """One product row from a name search."""

    barcode: str
    name: str
    brand: str
    image_url: str | None
    source: ProductSource
