"""Tests for container wiring."""

import asyncio
import importlib

from fastapi import FastAPI

from product_insight.adapters.memory_repositories import (
    InMemoryFavoritesRepository,
    InMemoryHistoryRepository,
)
from product_insight.config import Settings
from product_insight.containers import build_container


def test_build_container_creates_services() -> None:
    settings = Settings(_env_file=None, supabase_url=None, supabase_service_key=None)
    container = build_container(settings)

    assert container.product_service is not None
    assert container.product_service.food_client.base_url == (
        "https://world.openfoodfacts.org"
    )
    assert isinstance(container.history_service.repository, InMemoryHistoryRepository)
    assert isinstance(
        container.favorites_service.repository, InMemoryFavoritesRepository
    )
    asyncio.run(container.close_resources())


def test_asgi_entrypoint_builds_app(monkeypatch) -> None:
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_SERVICE_KEY", raising=False)

    module = importlib.import_module("product_insight.api.asgi")

    assert isinstance(module.app, FastAPI)
    asyncio.run(module.app.state.container.close_resources())
