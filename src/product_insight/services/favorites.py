"""Favorites service."""

from dataclasses import dataclass
from typing import Protocol

from product_insight.domain.collections import FavoriteItem


class FavoritesRepository(Protocol):
    """Persistence interface for favorites, unique per barcode."""

    def list_items(self, owner: str) -> list[FavoriteItem]:
        """Return favorites in the order they were added."""

    def add_item(self, owner: str, item: FavoriteItem) -> None:
        """Store a favorite, replacing any with the same barcode."""

    def remove_item(self, owner: str, barcode: str) -> None:
        """Remove the favorite with the given barcode."""

    def clear(self, owner: str) -> None:
        """Remove all favorites."""


@dataclass
class FavoritesService:
    """Application service for favorites."""

    repository: FavoritesRepository

    def list_items(self, owner: str) -> list[FavoriteItem]:
        """Return the owner's favorites."""
        return self.repository.list_items(owner)

    def is_favorite(self, owner: str, barcode: str) -> bool:
        """Return True when the barcode is a favorite."""
        items = self.repository.list_items(owner)
        return any(item.barcode == barcode for item in items)

    def toggle(
        self, owner: str, barcode: str, product: FavoriteItem | None = None
    ) -> bool:
        """Flip a barcode's favorite state and return the new state."""
        if self.is_favorite(owner, barcode):
            self.repository.remove_item(owner, barcode)
            return False
        item = product or FavoriteItem(barcode=barcode)
        if item.barcode != barcode:
            item = FavoriteItem(
                barcode=barcode,
                name=item.name,
                brand=item.brand,
                image_url=item.image_url,
                source=item.source,
            )
        self.repository.add_item(owner, item)
        return True

    def clear(self, owner: str) -> None:
        """Remove all favorites."""
        self.repository.clear(owner)
