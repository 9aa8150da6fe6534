"""Supabase repository for favorites."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from product_insight.domain.collections import FavoriteItem
from product_insight.domain.products import ProductSource
from product_insight.services.favorites import FavoritesRepository

_SOURCES = {source.value for source in ProductSource}


@dataclass
class SupabaseFavoritesRepository(FavoritesRepository):
    """Supabase implementation for favorites."""

    client: Client

    def list_items(self, owner: str) -> list[FavoriteItem]:
        """Return favorites in the order they were added."""
        response = (
            self.client.table("favorites")
            .select("*")
            .eq("owner", owner)
            .order("created_at")
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def add_item(self, owner: str, item: FavoriteItem) -> None:
        """Store a favorite, replacing any existing row for the barcode."""
        self.client.table("favorites").upsert(
            {
                "owner": owner,
                "barcode": item.barcode,
                "name": item.name,
                "brand": item.brand,
                "image_url": item.image_url,
                "source": str(item.source) if item.source else None,
                "created_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="owner,barcode",
        ).execute()

    def remove_item(self, owner: str, barcode: str) -> None:
        """Delete the favorite with the given barcode."""
        (
            self.client.table("favorites")
            .delete()
            .eq("owner", owner)
            .eq("barcode", barcode)
            .execute()
        )

    def clear(self, owner: str) -> None:
        """Delete all favorites for an owner."""
        self.client.table("favorites").delete().eq("owner", owner).execute()


def _parse_item(row: dict[str, object]) -> FavoriteItem:
    """Parse a favorites row into a domain model."""
    source = row.get("source")
    return FavoriteItem(
        barcode=str(row["barcode"]),
        name=row.get("name"),
        brand=row.get("brand"),
        image_url=row.get("image_url"),
        source=ProductSource(source) if source in _SOURCES else None,
    )
