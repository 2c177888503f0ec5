"""Fridge inventory service."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from meal_planner.domain.errors import InvalidInputError, NotFoundError
from meal_planner.domain.fridge import FridgeEntry, FridgeStats
from meal_planner.services.catalog import RecipeCatalog

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = {"quantity", "unit", "expiry_date", "notes"}


class FridgeRepository(Protocol):
    """Persistence interface for fridge entries."""

    def create_item(self, user_id: UUID, payload: dict[str, object]) -> FridgeEntry:
        """Create a fridge entry and return it."""

    def get_item(self, item_id: int) -> FridgeEntry | None:
        """Return a fridge entry by id, if present."""

    def find_by_ingredient(
        self, user_id: UUID, ingredient_id: int
    ) -> FridgeEntry | None:
        """Return the user's entry for an ingredient, if present."""

    def update_item(self, item_id: int, payload: dict[str, object]) -> FridgeEntry:
        """Apply a partial update and return the stored entry."""

    def delete_item(self, item_id: int) -> bool:
        """Delete an entry, returning whether a row was removed."""

    def list_items(self, user_id: UUID) -> list[FridgeEntry]:
        """Return all of a user's entries, newest first."""

    def delete_expired(self, user_id: UUID, now: datetime) -> int:
        """Delete entries with expiry_date < now and return the count."""

    def delete_all(self, user_id: UUID) -> int:
        """Delete every entry of a user and return the count."""


@dataclass
class FridgeService:
    """Keeps track of what a user has at home."""

    repository: FridgeRepository
    catalog: RecipeCatalog
    expiring_soon_days: int = 3

    def list_items(self, user_id: UUID) -> list[FridgeEntry]:
        """Return the user's fridge, newest first."""
        return self.repository.list_items(user_id)

    def ingredient_ids(self, user_id: UUID) -> set[int]:
        """Return the ids of every ingredient the user has."""
        return {item.ingredient_id for item in self.repository.list_items(user_id)}

    def add_item(  # noqa: PLR0913
        self,
        user_id: UUID,
        ingredient_id: int,
        quantity: float | None = None,
        unit: str | None = None,
        expiry_date: datetime | None = None,
        notes: str | None = None,
    ) -> FridgeEntry:
        """Stock an ingredient, updating the existing entry if there is one."""
        _validate_quantity(quantity)
        expiry_date = _as_utc(expiry_date)
        if ingredient_id not in self.catalog.get_ingredients([ingredient_id]):
            raise NotFoundError("ingredient", ingredient_id)
        payload: dict[str, object] = {
            "quantity": quantity,
            "unit": unit,
            "expiry_date": expiry_date,
            "notes": notes,
        }
        existing = self.repository.find_by_ingredient(user_id, ingredient_id)
        if existing is not None:
            return self.repository.update_item(existing.id, payload)
        return self.repository.create_item(
            user_id, {"ingredient_id": ingredient_id, **payload}
        )

    def update_item(
        self, user_id: UUID, item_id: int, fields: dict[str, object]
    ) -> FridgeEntry:
        """Apply a partial update to one of the user's entries."""
        item = self._get_owned(user_id, item_id)
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise InvalidInputError(f"Unknown fields: {', '.join(sorted(unknown))}")
        payload = {key: value for key, value in fields.items() if value is not None}
        if "quantity" in payload:
            _validate_quantity(payload["quantity"])
        if "expiry_date" in payload:
            payload["expiry_date"] = _as_utc(payload["expiry_date"])
        if not payload:
            return item
        return self.repository.update_item(item_id, payload)

    def remove_item(self, user_id: UUID, item_id: int) -> None:
        """Remove one entry from the user's fridge."""
        self._get_owned(user_id, item_id)
        if not self.repository.delete_item(item_id):
            raise NotFoundError("fridge item", item_id)

    def remove_expired(self, user_id: UUID, now: datetime | None = None) -> int:
        """Delete every expired entry and return how many were removed."""
        removed = self.repository.delete_expired(user_id, now or datetime.now(tz=UTC))
        logger.info(
            "Expired fridge items removed",
            extra={"user_id": str(user_id), "removed": removed},
        )
        return removed

    def clear(self, user_id: UUID) -> int:
        """Empty the user's fridge and return how many entries were removed."""
        return self.repository.delete_all(user_id)

    def stats(self, user_id: UUID, now: datetime | None = None) -> FridgeStats:
        """Return expiry and category counters for the user's fridge."""
        current = now or datetime.now(tz=UTC)
        soon = current + timedelta(days=self.expiring_soon_days)
        items = self.repository.list_items(user_id)
        ingredients = self.catalog.get_ingredients(
            {item.ingredient_id for item in items}
        )
        expired = 0
        expiring_soon = 0
        categories: set[str] = set()
        for item in items:
            ingredient = ingredients.get(item.ingredient_id)
            if ingredient and ingredient.category:
                categories.add(ingredient.category)
            expiry = _as_utc(item.expiry_date)
            if expiry is None:
                continue
            if expiry < current:
                expired += 1
            elif expiry < soon:
                expiring_soon += 1
        return FridgeStats(
            total_items=len(items),
            expiring_soon=expiring_soon,
            expired=expired,
            categories_count=len(categories),
            categories=sorted(categories),
        )

    def _get_owned(self, user_id: UUID, item_id: int) -> FridgeEntry:
        item = self.repository.get_item(item_id)
        if item is None or item.user_id != user_id:
            raise NotFoundError("fridge item", item_id)
        return item


def _as_utc(value: object) -> datetime | None:
    """Return an aware datetime, reading naive values as UTC."""
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            raise InvalidInputError(f"Invalid expiry date: {value!r}") from None
    if not isinstance(value, datetime):
        raise InvalidInputError(f"Invalid expiry date: {value!r}")
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _validate_quantity(quantity: object) -> None:
    if quantity is None:
        return
    if not isinstance(quantity, int | float) or quantity < 0:
        raise InvalidInputError("quantity must be a non-negative number")
