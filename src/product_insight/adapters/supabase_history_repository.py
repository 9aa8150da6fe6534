"""Supabase repository for lookup history."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from product_insight.domain.collections import HistoryEntry
from product_insight.domain.products import ProductSource
from product_insight.services.history import HistoryRepository


@dataclass
class SupabaseHistoryRepository(HistoryRepository):
    """Supabase implementation for lookup history."""

    client: Client

    def list_entries(self, owner: str) -> list[HistoryEntry]:
        """Return history entries, newest first."""
        response = (
            self.client.table("lookup_history")
            .select("*")
            .eq("owner", owner)
            .order("searched_at", desc=True)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def save_entries(self, owner: str, entries: list[HistoryEntry]) -> None:
        """Upsert the owner's entries, then drop rows no longer listed.

        Rows are keyed by ``(owner, barcode)``; a failed write leaves the
        previous history in place.
        """
        if not entries:
            self.client.table("lookup_history").delete().eq("owner", owner).execute()
            return
        self.client.table("lookup_history").upsert(
            [
                {
                    "owner": owner,
                    "barcode": entry.barcode,
                    "name": entry.name,
                    "searched_at": entry.searched_at.isoformat(),
                    "source": str(entry.source),
                    "image_url": entry.image_url,
                    "brand": entry.brand,
                }
                for entry in entries
            ],
            on_conflict="owner,barcode",
        ).execute()
        (
            self.client.table("lookup_history")
            .delete()
            .eq("owner", owner)
            .not_.in_("barcode", [entry.barcode for entry in entries])
            .execute()
        )


def _parse_entry(row: dict[str, object]) -> HistoryEntry:
    """Parse a history row into a domain model."""
    return HistoryEntry(
        barcode=str(row["barcode"]),
        name=str(row.get("name") or ""),
        searched_at=datetime.fromisoformat(str(row["searched_at"])),
        source=(
            ProductSource.BEAUTY
            if row.get("source") == ProductSource.BEAUTY
            else ProductSource.FOOD
        ),
        image_url=row.get("image_url"),
        brand=str(row.get("brand") or ""),
    )
