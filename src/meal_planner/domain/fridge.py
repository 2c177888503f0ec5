"""Domain models for the fridge inventory."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class FridgeEntry:
    """Ingredient a user currently has at home."""

    id: int
    user_id: UUID
    ingredient_id: int
    quantity: float | None
    unit: str | None
    expiry_date: datetime | None
    notes: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class FridgeStats:
    """Summary counters for a user's fridge."""

    total_items: int
    expiring_soon: int
    expired: int
    categories_count: int
    categories: list[str]
