"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from product_insight.adapters.catalog_client import HttpxProductCatalogClient
from product_insight.adapters.memory_repositories import (
    InMemoryFavoritesRepository,
    InMemoryHistoryRepository,
)
from product_insight.adapters.supabase_favorites_repository import (
    SupabaseFavoritesRepository,
)
from product_insight.adapters.supabase_history_repository import (
    SupabaseHistoryRepository,
)
from product_insight.config import Settings
from product_insight.services.cache import InMemoryCache
from product_insight.services.favorites import FavoritesRepository, FavoritesService
from product_insight.services.history import HistoryRepository, HistoryService
from product_insight.services.products import ProductService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    product_service: ProductService
    history_service: HistoryService
    favorites_service: FavoritesService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    history_repository: HistoryRepository
    favorites_repository: FavoritesRepository
    if resolved_settings.uses_supabase:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        history_repository = SupabaseHistoryRepository(supabase_client)
        favorites_repository = SupabaseFavoritesRepository(supabase_client)
    else:
        history_repository = InMemoryHistoryRepository()
        favorites_repository = InMemoryFavoritesRepository()

    food_client = HttpxProductCatalogClient.create(
        base_url=resolved_settings.food_catalog_url,
        user_agent=resolved_settings.user_agent,
        timeout_seconds=resolved_settings.request_timeout_seconds,
    )
    beauty_client = HttpxProductCatalogClient.create(
        base_url=resolved_settings.beauty_catalog_url,
        user_agent=resolved_settings.user_agent,
        timeout_seconds=resolved_settings.request_timeout_seconds,
    )
    product_service = ProductService(
        food_client=food_client,
        beauty_client=beauty_client,
        barcode_cache=InMemoryCache(
            max_entries=resolved_settings.barcode_cache_max_entries
        ),
        search_cache=InMemoryCache(
            max_entries=resolved_settings.search_cache_max_entries
        ),
        barcode_ttl_seconds=resolved_settings.barcode_cache_ttl_seconds,
        search_ttl_seconds=resolved_settings.search_cache_ttl_seconds,
        debug=resolved_settings.debug,
    )
    history_service = HistoryService(
        history_repository, max_items=resolved_settings.history_max_items
    )
    favorites_service = FavoritesService(favorites_repository)

    async def close_resources() -> None:
        await food_client.close()
        await beauty_client.close()

    return AppContainer(
        settings=resolved_settings,
        product_service=product_service,
        history_service=history_service,
        favorites_service=favorites_service,
        close_resources=close_resources,
    )
