"""Domain models for lookup history and favorites."""

from dataclasses import dataclass
from datetime import datetime

from product_insight.domain.products import ProductSource


@dataclass(frozen=True)
class HistoryEntry:
    """A product the user looked up."""

    barcode: str
    name: str
    searched_at: datetime
    source: ProductSource
    image_url: str | None = None
    brand: str = ""


@dataclass(frozen=True)
class FavoriteItem:
    """A product the user marked as favorite."""

    barcode: str
    name: str | None = None
    brand: str | None = None
    image_url: str | None = None
    source: ProductSource | None = None
