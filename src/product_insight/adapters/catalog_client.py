"""Open Food Facts / Open Beauty Facts API client."""

import re
from dataclasses import dataclass
from typing import Protocol

import httpx

from product_insight.errors import (
    CatalogTimeoutError,
    CatalogUnavailableError,
    InvalidBarcodeError,
    ProductNotFoundError,
    RateLimitedError,
)

OPEN_FOOD_FACTS_URL = "https://world.openfoodfacts.org"
OPEN_BEAUTY_FACTS_URL = "https://world.openbeautyfacts.org"

_BARCODE_PATTERN = re.compile(r"^[0-9]{8,14}$")


def is_valid_barcode(value: str) -> bool:
    """Return True for EAN/UPC codes of 8 to 14 digits."""
    return bool(_BARCODE_PATTERN.match(value.strip()))


class ProductCatalogClient(Protocol):
    """Interface for product catalog API interactions."""

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product envelope by barcode."""

    async def search_products(
        self, query: str, page_size: int = 10
    ) -> dict[str, object]:
        """Full-text search by product name."""


@dataclass
class HttpxProductCatalogClient(ProductCatalogClient):
    """HTTPX-backed client for the Open*Facts family of catalogs."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15.0

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout_seconds: float = 15.0
    ) -> "HttpxProductCatalogClient":
        """Create a catalog client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            user_agent=user_agent,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode; raises ProductNotFoundError when absent."""
        code = barcode.strip()
        if not is_valid_barcode(code):
            raise InvalidBarcodeError
        try:
            payload = await self._get_json(
                f"{self.base_url}/api/v0/product/{code}.json"
            )
        except CatalogUnavailableError as exc:
            if exc.status_code == httpx.codes.NOT_FOUND:
                raise ProductNotFoundError from exc
            raise
        if payload.get("status") == 0 or not isinstance(payload.get("product"), dict):
            raise ProductNotFoundError
        return payload

    async def search_products(
        self, query: str, page_size: int = 10
    ) -> dict[str, object]:
        """Search products by name."""
        terms = query.strip()
        if not terms:
            return {"count": 0, "products": []}
        return await self._get_json(
            f"{self.base_url}/cgi/search.pl",
            params={
                "search_terms": terms,
                "search_simple": "1",
                "action": "process",
                "json": "1",
                "page_size": str(page_size),
            },
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _get_json(
        self, url: str, params: dict[str, str] | None = None
    ) -> dict[str, object]:
        try:
            response = await self.http_client.get(
                url,
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            raise CatalogTimeoutError from exc
        except httpx.TransportError as exc:
            raise CatalogUnavailableError(str(exc) or None) from exc

        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            raise RateLimitedError
        if response.is_error:
            raise CatalogUnavailableError(
                f"Network error: {response.status_code} {response.reason_phrase}. "
                "Try again later.",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise CatalogUnavailableError(
                "Invalid response from server. Please try again.",
                status_code=response.status_code,
            ) from exc
        if not isinstance(payload, dict):
            raise CatalogUnavailableError(
                "Invalid response from server. Please try again.",
                status_code=response.status_code,
            )
        return payload
