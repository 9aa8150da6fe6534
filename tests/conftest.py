"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from product_insight.adapters.catalog_client import ProductCatalogClient
from product_insight.adapters.memory_repositories import (
    InMemoryFavoritesRepository,
    InMemoryHistoryRepository,
)
from product_insight.config import Settings
from product_insight.containers import AppContainer
from product_insight.errors import ProductLookupError, ProductNotFoundError
from product_insight.services.cache import InMemoryCache
from product_insight.services.favorites import FavoritesService
from product_insight.services.history import HistoryService
from product_insight.services.products import ProductService

NUTELLA_BARCODE = "3017620422003"
SHAMPOO_BARCODE = "3600541234567"


def nutella_product() -> dict[str, object]:
    return {
        "code": NUTELLA_BARCODE,
        "product_name": "Nutella",
        "brands": "Ferrero",
        "image_front_url": "https://images.example/nutella.jpg",
        "nutriscore_grade": "e",
        "ingredients_text": "Sugar, palm oil, hazelnuts 13%",
        "ingredients": [
            {"id": "en:sugar", "text": "Sugar", "percent_estimate": 56.3},
            {"id": "en:palm-oil", "text": "palm oil", "percent_estimate": 20.1},
            {"id": "en:hazelnut", "text": "hazelnuts", "percent": 13},
        ],
        "allergens_tags": ["en:milk", "en:nuts", "en:soybeans"],
        "nutriments": {
            "energy-kcal_100g": 539,
            "fat_100g": 30.9,
            "saturated-fat_100g": 10.6,
            "carbohydrates_100g": 57.5,
            "sugars_100g": 56.3,
            "fiber_100g": 0,
            "proteins_100g": 6.3,
            "salt_100g": 0.107,
        },
        "additives_n": 1,
    }


def shampoo_product() -> dict[str, object]:
    return {
        "code": SHAMPOO_BARCODE,
        "product_name": "Gentle Shampoo",
        "brands": "Acme Care",
        "ingredients_text": "Aqua, sodium laureth sulfate",
        "nutriments": {},
    }


@dataclass
class FakeCatalogClient(ProductCatalogClient):
    """Fake catalog client with in-memory products."""

    products: dict[str, dict[str, object]] = field(default_factory=dict)
    search_rows: list[dict[str, object]] = field(default_factory=list)
    error: ProductLookupError | None = None
    product_calls: list[str] = field(default_factory=list)
    search_calls: list[tuple[str, int]] = field(default_factory=list)

    async def get_product(self, barcode: str) -> dict[str, object]:
        self.product_calls.append(barcode)
        if self.error is not None:
            raise self.error
        product = self.products.get(barcode)
        if product is None:
            raise ProductNotFoundError
        return {"status": 1, "code": barcode, "product": product}

    async def search_products(
        self, query: str, page_size: int = 10
    ) -> dict[str, object]:
        self.search_calls.append((query, page_size))
        if self.error is not None:
            raise self.error
        return {"count": len(self.search_rows), "products": self.search_rows}


@pytest.fixture
def settings() -> Settings:
    return Settings(public_base_url="https://scanner.example/")


@pytest.fixture
def food_client() -> FakeCatalogClient:
    return FakeCatalogClient(
        products={NUTELLA_BARCODE: nutella_product()},
        search_rows=[
            {"code": NUTELLA_BARCODE, "product_name": "Nutella", "brands": "Ferrero"},
            {"product_name": "No barcode"},
        ],
    )


@pytest.fixture
def beauty_client() -> FakeCatalogClient:
    return FakeCatalogClient(
        products={SHAMPOO_BARCODE: shampoo_product()},
        search_rows=[{"code": SHAMPOO_BARCODE, "product_name": " ", "brands": None}],
    )


@pytest.fixture
def product_service(
    food_client: FakeCatalogClient, beauty_client: FakeCatalogClient
) -> ProductService:
    return ProductService(
        food_client=food_client,
        beauty_client=beauty_client,
        barcode_cache=InMemoryCache(max_entries=100),
        search_cache=InMemoryCache(max_entries=50),
        retry_delay_seconds=0,
    )


@pytest.fixture
def container(settings: Settings, product_service: ProductService) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        product_service=product_service,
        history_service=HistoryService(InMemoryHistoryRepository()),
        favorites_service=FavoritesService(InMemoryFavoritesRepository()),
        close_resources=close_resources,
    )
