"""Lookup history service."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from product_insight.domain.collections import HistoryEntry
from product_insight.domain.products import ProductLookup


class HistoryRepository(Protocol):
    """Persistence interface for lookup history."""

    def list_entries(self, owner: str) -> list[HistoryEntry]:
        """Return history entries, newest first."""

    def save_entries(self, owner: str, entries: list[HistoryEntry]) -> None:
        """Replace the stored history for an owner."""


@dataclass
class HistoryService:
    """Keeps a bounded, de-duplicated list of recent lookups."""

    repository: HistoryRepository
    max_items: int = 50

    def add(self, owner: str, entry: HistoryEntry) -> list[HistoryEntry]:
        """Put an entry first, dropping older entries for the same barcode."""
        current = self.repository.list_entries(owner)
        entries = [entry, *(item for item in current if item.barcode != entry.barcode)]
        entries = entries[: self.max_items]
        self.repository.save_entries(owner, entries)
        return entries

    def record_lookup(
        self, owner: str, lookup: ProductLookup, searched_at: datetime | None = None
    ) -> list[HistoryEntry]:
        """Add a history entry for a completed barcode lookup."""
        return self.add(
            owner,
            HistoryEntry(
                barcode=lookup.barcode,
                name=lookup.product.name,
                searched_at=searched_at or datetime.now(tz=UTC),
                source=lookup.source,
                image_url=lookup.product.image_url,
                brand=lookup.product.brand,
            ),
        )

    def list_entries(self, owner: str) -> list[HistoryEntry]:
        """Return the owner's history, newest first."""
        return self.repository.list_entries(owner)[: self.max_items]

    def clear(self, owner: str) -> None:
        """Remove all history entries."""
        self.repository.save_entries(owner, [])
