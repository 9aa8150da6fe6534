"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from product_insight.adapters.catalog_client import (
    OPEN_BEAUTY_FACTS_URL,
    OPEN_FOOD_FACTS_URL,
)

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    food_catalog_url: str = OPEN_FOOD_FACTS_URL
    beauty_catalog_url: str = OPEN_BEAUTY_FACTS_URL
    user_agent: str = (
        "ProductInsightScanner/1.0 (https://github.com/product-insight-scanner)"
    )
    request_timeout_seconds: float = 15.0
    barcode_cache_max_entries: int = 100
    barcode_cache_ttl_seconds: int = 3600
    search_cache_max_entries: int = 50
    search_cache_ttl_seconds: int = 600
    history_max_items: int = 50
    public_base_url: str = ""
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def uses_supabase(self) -> bool:
        """Return True when Supabase credentials are configured."""
        return bool(self.supabase_url and self.supabase_service_key)


def parse_client_id(raw: str | None) -> str:
    """Normalize the client identifier used to scope history and favorites."""
    if raw is None:
        return "anonymous"
    cleaned = raw.strip()
    return cleaned[:128] or "anonymous"
