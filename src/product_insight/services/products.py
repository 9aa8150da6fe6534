"""Product lookup service over the food and beauty catalogs."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from product_insight.adapters.catalog_client import (
    ProductCatalogClient,
    is_valid_barcode,
)
from product_insight.domain.products import NameSearchHit, ProductLookup, ProductSource
from product_insight.domain.scoring import HealthScoreResult
from product_insight.errors import (
    CatalogTimeoutError,
    CatalogUnavailableError,
    InvalidBarcodeError,
    ProductLookupError,
    ProductNotFoundError,
)
from product_insight.services.cache import Cache
from product_insight.services.coercion import non_blank
from product_insight.services.normalizer import UNKNOWN_PRODUCT_NAME, normalize_product
from product_insight.services.scoring import compute_health_score

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class ProductService:
    """Looks products up by barcode or name, with caching."""

    food_client: ProductCatalogClient
    beauty_client: ProductCatalogClient
    barcode_cache: Cache
    search_cache: Cache
    barcode_ttl_seconds: int = 3600
    search_ttl_seconds: int = 600
    food_page_size: int = 10
    beauty_page_size: int = 6
    debug: bool = False
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def lookup_barcode(self, barcode: str) -> ProductLookup:
        """Find a product in the food catalog, falling back to the beauty one."""
        code = barcode.strip()
        if not is_valid_barcode(code):
            raise InvalidBarcodeError

        cache_key = f"barcode:{code}"
        cached = self.barcode_cache.get(cache_key)
        if isinstance(cached, tuple):
            raw, source = cached
            _logger.info("Barcode cache hit: %s (%s)", code, source)
            return ProductLookup(code, normalize_product(raw), source)

        try:
            raw = await self._fetch_product(self.food_client, code, ProductSource.FOOD)
            source = ProductSource.FOOD
        except ProductLookupError as food_error:
            _logger.info(
                "Food catalog lookup failed for %s (%s); trying beauty catalog",
                code,
                type(food_error).__name__,
            )
            try:
                raw = await self._fetch_product(
                    self.beauty_client, code, ProductSource.BEAUTY
                )
            except ProductLookupError as beauty_error:
                if isinstance(food_error, ProductNotFoundError):
                    raise beauty_error from food_error
                raise food_error from beauty_error
            source = ProductSource.BEAUTY

        self.barcode_cache.set(
            cache_key, (raw, source), ttl_seconds=self.barcode_ttl_seconds
        )
        return ProductLookup(code, normalize_product(raw), source)

    async def search_by_name(
        self, query: str, source: ProductSource | None = None
    ) -> list[NameSearchHit]:
        """Search both catalogs by name; food hits come first."""
        terms = query.strip()
        if not terms:
            return []

        cache_key = f"search:{terms.lower()}"
        cached = self.search_cache.get(cache_key)
        if isinstance(cached, list):
            _logger.info("Search cache hit: %s", terms)
            hits = cached
        else:
            food_payload, beauty_payload = await self._search_both(terms)
            hits = _parse_hits(food_payload, ProductSource.FOOD) + _parse_hits(
                beauty_payload, ProductSource.BEAUTY
            )
            self.search_cache.set(cache_key, hits, ttl_seconds=self.search_ttl_seconds)
            if self.debug:
                _logger.info("Name search: query=%s results=%s", terms, len(hits))

        if source is None:
            return list(hits)
        return [hit for hit in hits if hit.source == source]

    async def _search_both(
        self, terms: str
    ) -> tuple[dict[str, object], dict[str, object]]:
        """Query both catalogs; the first failure cancels the other request."""
        try:
            async with asyncio.TaskGroup() as group:
                food_task = group.create_task(
                    self._call_with_retry(
                        lambda: self.food_client.search_products(
                            terms, self.food_page_size
                        ),
                        action="search:food",
                    )
                )
                beauty_task = group.create_task(
                    self._call_with_retry(
                        lambda: self.beauty_client.search_products(
                            terms, self.beauty_page_size
                        ),
                        action="search:beauty",
                    )
                )
        except ExceptionGroup as errors:
            raise errors.exceptions[0] from None
        return food_task.result(), beauty_task.result()

    @staticmethod
    def evaluate(lookup: ProductLookup) -> HealthScoreResult | None:
        """Score food products; beauty products have no health score."""
        if lookup.source != ProductSource.FOOD:
            return None
        return compute_health_score(lookup.product)

    async def _fetch_product(
        self, client: ProductCatalogClient, barcode: str, source: ProductSource
    ) -> dict[str, object]:
        payload = await self._call_with_retry(
            lambda: client.get_product(barcode), action=f"get_product:{source}"
        )
        return payload["product"]

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call a catalog coroutine, retrying transport failures once."""
        attempt = 0
        while True:
            try:
                return await func()
            except (CatalogTimeoutError, CatalogUnavailableError) as exc:
                attempt += 1
                status_code = getattr(exc, "status_code", None)
                if self.debug:
                    _logger.warning(
                        "Catalog %s failed (attempt %s/%s, status=%s): %s",
                        action,
                        attempt,
                        self.retry_attempts + 1,
                        status_code or "n/a",
                        exc,
                    )
                if status_code is not None or attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _parse_hits(
    payload: dict[str, object], source: ProductSource
) -> list[NameSearchHit]:
    """Convert a search payload into hits, skipping rows without a barcode."""
    products = payload.get("products")
    if not isinstance(products, list):
        return []
    hits = []
    for row in products:
        if not isinstance(row, dict) or not row.get("code"):
            continue
        hits.append(
            NameSearchHit(
                barcode=str(row["code"]),
                name=non_blank(row.get("product_name")) or UNKNOWN_PRODUCT_NAME,
                brand=non_blank(row.get("brands")) or "",
                image_url=non_blank(row.get("image_front_url")),
                source=source,
            )
        )
    return hits
