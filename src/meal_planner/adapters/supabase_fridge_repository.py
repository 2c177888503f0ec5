"""Supabase repository for fridge items."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from meal_planner.domain.fridge import FridgeEntry
from meal_planner.services.fridge import FridgeRepository

_TABLE = "fridge_items"


@dataclass
class SupabaseFridgeRepository(FridgeRepository):
    """Supabase-backed fridge inventory."""

    client: Client

    def create_item(self, user_id: UUID, payload: dict[str, object]) -> FridgeEntry:
        """Insert a fridge item and return it."""
        response = (
            self.client.table(_TABLE)
            .insert({"user_id": str(user_id), **_serialize_payload(payload)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create fridge item")
        return _parse_item(response.data[0])

    def get_item(self, item_id: int) -> FridgeEntry | None:
        """Return a fridge item by id."""
        response = (
            self.client.table(_TABLE).select("*").eq("id", item_id).limit(1).execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def find_by_ingredient(
        self, user_id: UUID, ingredient_id: int
    ) -> FridgeEntry | None:
        """Return the user's item for an ingredient."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .eq("ingredient_id", ingredient_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def update_item(self, item_id: int, payload: dict[str, object]) -> FridgeEntry:
        """Update a fridge item and return it."""
        response = (
            self.client.table(_TABLE)
            .update(_serialize_payload(payload))
            .eq("id", item_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update fridge item")
        return _parse_item(response.data[0])

    def delete_item(self, item_id: int) -> bool:
        """Delete a fridge item."""
        response = self.client.table(_TABLE).delete().eq("id", item_id).execute()
        return bool(response.data)

    def list_items(self, user_id: UUID) -> list[FridgeEntry]:
        """Return a user's fridge items, newest first."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def delete_expired(self, user_id: UUID, now: datetime) -> int:
        """Delete items that expired before now."""
        response = (
            self.client.table(_TABLE)
            .delete()
            .eq("user_id", str(user_id))
            .lt("expiry_date", now.isoformat())
            .execute()
        )
        return len(response.data or [])

    def delete_all(self, user_id: UUID) -> int:
        """Delete every item of a user."""
        response = (
            self.client.table(_TABLE).delete().eq("user_id", str(user_id)).execute()
        )
        return len(response.data or [])


def _serialize_payload(payload: dict[str, object]) -> dict[str, object]:
    return {
        key: value.isoformat() if isinstance(value, datetime) else value
        for key, value in payload.items()
    }


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _parse_item(row: dict[str, object]) -> FridgeEntry:
    """Parse a fridge item row into a domain model."""
    quantity = row.get("quantity")
    return FridgeEntry(
        id=int(row["id"]),
        user_id=UUID(str(row["user_id"])),
        ingredient_id=int(row["ingredient_id"]),
        quantity=float(quantity) if quantity is not None else None,
        unit=row.get("unit"),
        expiry_date=_parse_timestamp(row.get("expiry_date")),
        notes=row.get("notes"),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )
