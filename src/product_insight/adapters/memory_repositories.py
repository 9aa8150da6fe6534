"""In-process repositories used when no database is configured."""

from dataclasses import dataclass, field

from product_insight.domain.collections import FavoriteItem, HistoryEntry
from product_insight.services.favorites import FavoritesRepository
from product_insight.services.history import HistoryRepository


@dataclass
class InMemoryHistoryRepository(HistoryRepository):
    """History kept in a dict keyed by owner."""

    entries: dict[str, list[HistoryEntry]] = field(default_factory=dict)

    def list_entries(self, owner: str) -> list[HistoryEntry]:
        return list(self.entries.get(owner, []))

    def save_entries(self, owner: str, entries: list[HistoryEntry]) -> None:
        self.entries[owner] = list(entries)


@dataclass
class InMemoryFavoritesRepository(FavoritesRepository):
    """Favorites kept in a dict keyed by owner."""

    items: dict[str, list[FavoriteItem]] = field(default_factory=dict)

    def list_items(self, owner: str) -> list[FavoriteItem]:
        return list(self.items.get(owner, []))

    def add_item(self, owner: str, item: FavoriteItem) -> None:
        current = [
            fav for fav in self.items.get(owner, []) if fav.barcode != item.barcode
        ]
        self.items[owner] = [*current, item]

    def remove_item(self, owner: str, barcode: str) -> None:
        self.items[owner] = [
            fav for fav in self.items.get(owner, []) if fav.barcode != barcode
        ]

    def clear(self, owner: str) -> None:
        self.items.pop(owner, None)
