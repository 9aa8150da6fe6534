"""Pydantic models for API request payloads."""

from pydantic import BaseModel

from product_insight.domain.products import ProductSource


class FavoriteToggleRequest(BaseModel):
    """Product details stored alongside a new favorite."""

    name: str | None = None
    brand: str | None = None
    image_url: str | None = None
    source: ProductSource | None = None
