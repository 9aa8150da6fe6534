"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, Header, Request, status
from fastapi.responses import JSONResponse

from product_insight.adapters.catalog_client import is_valid_barcode
from product_insight.api.models import FavoriteToggleRequest
from product_insight.app_logging import configure_logging
from product_insight.config import parse_client_id
from product_insight.containers import AppContainer
from product_insight.domain.collections import FavoriteItem, HistoryEntry
from product_insight.domain.products import NameSearchHit, ProductLookup, ProductSource
from product_insight.domain.scoring import HealthScoreResult
from product_insight.errors import (
    CatalogTimeoutError,
    InvalidBarcodeError,
    ProductLookupError,
    ProductNotFoundError,
    RateLimitedError,
)
from product_insight.services.formatting import (
    format_allergens,
    format_relative_time,
    nutrient_table,
)
from product_insight.services.links import get_product_url, initial_search_value
from product_insight.services.scoring import get_score_band

_ERROR_STATUS = (
    (InvalidBarcodeError, status.HTTP_400_BAD_REQUEST),
    (ProductNotFoundError, status.HTTP_404_NOT_FOUND),
    (RateLimitedError, status.HTTP_429_TOO_MANY_REQUESTS),
    (CatalogTimeoutError, status.HTTP_504_GATEWAY_TIMEOUT),
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ProductLookupError)
    async def lookup_error_handler(
        request: Request, exc: ProductLookupError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning("Catalog request failed: %s %s", request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"detail": exc.message})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/products/{barcode}")
    async def get_product(
        barcode: str, request: Request, x_client_id: str | None = Header(default=None)
    ) -> dict[str, object]:
        """Look up a product by barcode and record it in the caller's history."""
        state_container: AppContainer = request.app.state.container
        owner = parse_client_id(x_client_id)
        lookup = await state_container.product_service.lookup_barcode(barcode)
        state_container.history_service.record_lookup(owner, lookup)
        return _product_view(state_container, owner, lookup)

    @app.get("/search")
    async def search(
        request: Request,
        source: ProductSource | None = None,
        x_client_id: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Resolve a deep link: ``barcode`` wins over ``q``.

        Barcode values return a product; other text searches by name.
        """
        state_container: AppContainer = request.app.state.container
        query = initial_search_value(request.url.query)
        if is_valid_barcode(query):
            owner = parse_client_id(x_client_id)
            lookup = await state_container.product_service.lookup_barcode(query)
            state_container.history_service.record_lookup(owner, lookup)
            return {
                "kind": "product",
                "product": _product_view(state_container, owner, lookup),
            }
        hits = await state_container.product_service.search_by_name(query, source)
        return {"kind": "name", "hits": [_hit_view(hit) for hit in hits]}

    @app.get("/history")
    async def list_history(
        request: Request, x_client_id: str | None = Header(default=None)
    ) -> dict[str, object]:
        """Return the caller's lookup history, newest first."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.history_service.list_entries(
            parse_client_id(x_client_id)
        )
        return {"history": [_history_view(entry) for entry in entries]}

    @app.delete("/history")
    async def clear_history(
        request: Request, x_client_id: str | None = Header(default=None)
    ) -> dict[str, str]:
        """Remove the caller's lookup history."""
        state_container: AppContainer = request.app.state.container
        state_container.history_service.clear(parse_client_id(x_client_id))
        return {"status": "ok"}

    @app.get("/favorites")
    async def list_favorites(
        request: Request, x_client_id: str | None = Header(default=None)
    ) -> dict[str, object]:
        """Return the caller's favorites."""
        state_container: AppContainer = request.app.state.container
        items = state_container.favorites_service.list_items(
            parse_client_id(x_client_id)
        )
        return {"favorites": [_favorite_view(item) for item in items]}

    @app.post("/favorites/{barcode}/toggle")
    async def toggle_favorite(
        barcode: str,
        request: Request,
        payload: FavoriteToggleRequest | None = None,
        x_client_id: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Add or remove a favorite."""
        state_container: AppContainer = request.app.state.container
        code = barcode.strip()
        if not is_valid_barcode(code):
            raise InvalidBarcodeError
        item = None
        if payload is not None:
            item = FavoriteItem(
                barcode=code,
                name=payload.name,
                brand=payload.brand,
                image_url=payload.image_url,
                source=payload.source,
            )
        is_favorite = state_container.favorites_service.toggle(
            parse_client_id(x_client_id), code, item
        )
        return {"barcode": code, "is_favorite": is_favorite}

    @app.delete("/favorites")
    async def clear_favorites(
        request: Request, x_client_id: str | None = Header(default=None)
    ) -> dict[str, str]:
        """Remove all of the caller's favorites."""
        state_container: AppContainer = request.app.state.container
        state_container.favorites_service.clear(parse_client_id(x_client_id))
        return {"status": "ok"}

    return app


def _status_for(exc: ProductLookupError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_502_BAD_GATEWAY


def _product_view(
    container: AppContainer, owner: str, lookup: ProductLookup
) -> dict[str, object]:
    """Serialize a lookup for the product card."""
    product = lookup.product
    return {
        "barcode": lookup.barcode,
        "source": str(lookup.source),
        "name": product.name,
        "brand": product.brand,
        "image_url": product.image_url,
        "nutriscore_grade": product.nutriscore_grade,
        "ingredients_text": product.ingredients_text,
        "ingredients": [asdict(ingredient) for ingredient in product.ingredients],
        "allergens_display": product.allergens_display,
        "allergens_tags": product.allergens_tags,
        "nutriments": asdict(product.nutriments),
        "additives_n": product.additives_n,
        "health_score": _score_view(container.product_service.evaluate(lookup)),
        "display": {
            "nutrition": nutrient_table(product.nutriments),
            "allergens": format_allergens(
                product.allergens_display, product.allergens_tags
            ),
        },
        "is_favorite": container.favorites_service.is_favorite(owner, lookup.barcode),
        "product_url": get_product_url(
            container.settings.public_base_url, lookup.barcode
        ),
    }


def _score_view(result: HealthScoreResult | None) -> dict[str, object] | None:
    if result is None:
        return None
    return {
        "score": result.score,
        "band": str(get_score_band(result.score)),
        "breakdown": [asdict(item) for item in result.breakdown],
    }


def _hit_view(hit: NameSearchHit) -> dict[str, object]:
    return {**asdict(hit), "source": str(hit.source)}


def _history_view(entry: HistoryEntry) -> dict[str, object]:
    return {
        "barcode": entry.barcode,
        "name": entry.name,
        "brand": entry.brand,
        "image_url": entry.image_url,
        "source": str(entry.source),
        "searched_at": entry.searched_at.isoformat(),
        "searched_ago": format_relative_time(entry.searched_at),
    }


def _favorite_view(item: FavoriteItem) -> dict[str, object]:
    return {**asdict(item), "source": str(item.source) if item.source else None}
