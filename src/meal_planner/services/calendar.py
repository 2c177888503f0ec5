"""Meal calendar service."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from meal_planner.domain.calendar import MealCalendarEntry, MealSlot
from meal_planner.domain.errors import InvalidInputError, NotFoundError
from meal_planner.services.catalog import RecipeCatalog

logger = logging.getLogger(__name__)

DAYS_IN_WEEK = 7
MAX_UPCOMING_DAYS = 30
_UPDATABLE_FIELDS = {
    "recipe_id",
    "planned_date",
    "meal_slot",
    "servings",
    "notes",
    "is_completed",
}


class MealCalendarRepository(Protocol):
    """Persistence interface for calendar entries."""

    def create_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        recipe_id: int,
        planned_date: date,
        meal_slot: MealSlot,
        servings: int,
        notes: str,
    ) -> MealCalendarEntry:
        """Create an entry and return it."""

    def get_entry(self, entry_id: int) -> MealCalendarEntry | None:
        """Return an entry by id, if present."""

    def update_entry(
        self, entry_id: int, payload: dict[str, object]
    ) -> MealCalendarEntry:
        """Apply a partial update and return the stored entry."""

    def delete_entry(self, entry_id: int) -> bool:
        """Delete an entry, returning whether a row was removed."""

    def list_entries(
        self, user_id: UUID, start: date, end: date
    ) -> list[MealCalendarEntry]:
        """Return a user's entries with start <= planned_date <= end."""


@dataclass
class MealCalendarService:
    """Places recipes on a user's calendar and reads it back."""

    repository: MealCalendarRepository
    catalog: RecipeCatalog

    def place_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        recipe_id: int,
        planned_date: date,
        meal_slot: MealSlot | str,
        servings: int,
        notes: str = "",
    ) -> MealCalendarEntry:
        """Place a recipe into a calendar cell."""
        slot = MealSlot.parse(meal_slot)
        _validate_servings(servings)
        self._require_recipe(recipe_id)
        entry = self.repository.create_entry(
            user_id=user_id,
            recipe_id=recipe_id,
            planned_date=planned_date,
            meal_slot=slot,
            servings=servings,
            notes=notes,
        )
        logger.info(
            "Meal placed",
            extra={"user_id": str(user_id), "entry_id": entry.id},
        )
        return entry

    def get_meal(self, user_id: UUID, entry_id: int) -> MealCalendarEntry:
        """Return one of the user's entries."""
        entry = self.repository.get_entry(entry_id)
        if entry is None or entry.user_id != user_id:
            raise NotFoundError("meal plan", entry_id)
        return entry

    def update_meal(
        self, user_id: UUID, entry_id: int, fields: dict[str, object]
    ) -> MealCalendarEntry:
        """Apply a partial update to one of the user's entries."""
        entry = self.get_meal(user_id, entry_id)
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise InvalidInputError(f"Unknown fields: {', '.join(sorted(unknown))}")

        payload: dict[str, object] = {}
        if fields.get("recipe_id") is not None:
            recipe_id = fields["recipe_id"]
            _validate_recipe_id(recipe_id)
            self._require_recipe(recipe_id)
            payload["recipe_id"] = recipe_id
        if fields.get("planned_date") is not None:
            payload["planned_date"] = _to_date(fields["planned_date"])
        if fields.get("meal_slot") is not None:
            payload["meal_slot"] = MealSlot.parse(fields["meal_slot"])
        if fields.get("servings") is not None:
            servings = fields["servings"]
            _validate_servings(servings)
            payload["servings"] = servings
        if fields.get("notes") is not None:
            payload["notes"] = str(fields["notes"])
        if fields.get("is_completed") is not None:
            completed = fields["is_completed"]
            if not isinstance(completed, bool):
                raise InvalidInputError("is_completed must be a boolean")
            if completed and not entry.is_completed:
                payload["is_completed"] = True
                payload["completed_at"] = datetime.now(tz=UTC)
            elif not completed and entry.is_completed:
                payload["is_completed"] = False
                payload["completed_at"] = None

        if not payload:
            return entry
        return self.repository.update_entry(entry_id, payload)

    def complete_meal(self, user_id: UUID, entry_id: int) -> MealCalendarEntry:
        """Mark an entry as cooked, keeping the first completion time."""
        entry = self.get_meal(user_id, entry_id)
        if entry.is_completed:
            return entry
        return self.repository.update_entry(
            entry_id,
            {"is_completed": True, "completed_at": datetime.now(tz=UTC)},
        )

    def delete_meal(self, user_id: UUID, entry_id: int) -> None:
        """Remove an entry from the calendar."""
        self.get_meal(user_id, entry_id)
        if not self.repository.delete_entry(entry_id):
            raise NotFoundError("meal plan", entry_id)
        logger.info(
            "Meal deleted",
            extra={"user_id": str(user_id), "entry_id": entry_id},
        )

    def list_week(
        self, user_id: UUID, week_start: date
    ) -> dict[str, list[MealCalendarEntry]]:
        """Return the seven days starting at week_start keyed by ISO date."""
        week_end = week_start + timedelta(days=DAYS_IN_WEEK - 1)
        week: dict[str, list[MealCalendarEntry]] = {
            (week_start + timedelta(days=offset)).isoformat(): []
            for offset in range(DAYS_IN_WEEK)
        }
        entries = self.repository.list_entries(user_id, week_start, week_end)
        for entry in _sorted(entries):
            key = entry.planned_date.isoformat()
            if key in week:
                week[key].append(entry)
        return week

    def list_day(
        self, user_id: UUID, day: date
    ) -> dict[MealSlot, list[MealCalendarEntry]]:
        """Return one day's entries grouped by meal slot."""
        grouped: dict[MealSlot, list[MealCalendarEntry]] = {
            slot: [] for slot in MealSlot
        }
        for entry in _sorted(self.repository.list_entries(user_id, day, day)):
            grouped[entry.meal_slot].append(entry)
        return grouped

    def list_upcoming(
        self, user_id: UUID, days: int = 7, today: date | None = None
    ) -> list[MealCalendarEntry]:
        """Return open entries from today through today + days."""
        if not 1 <= days <= MAX_UPCOMING_DAYS:
            raise InvalidInputError(f"days must be between 1 and {MAX_UPCOMING_DAYS}")
        start = today or datetime.now(tz=UTC).date()
        entries = self.repository.list_entries(
            user_id, start, start + timedelta(days=days)
        )
        return _sorted([entry for entry in entries if not entry.is_completed])

    @staticmethod
    def current_week_start(today: date | None = None) -> date:
        """Return the Monday of the week containing today."""
        reference = today or datetime.now(tz=UTC).date()
        return reference - timedelta(days=reference.weekday())

    def _require_recipe(self, recipe_id: int) -> None:
        if self.catalog.get_recipe(recipe_id) is None:
            raise NotFoundError("recipe", recipe_id)


def _validate_recipe_id(recipe_id: object) -> None:
    if isinstance(recipe_id, bool) or not isinstance(recipe_id, int) or recipe_id < 1:
        raise InvalidInputError("recipe_id must be a positive integer")


def _validate_servings(servings: object) -> None:
    if isinstance(servings, bool) or not isinstance(servings, int) or servings < 1:
        raise InvalidInputError("servings must be a positive integer")


def _to_date(value: object) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            pass
    raise InvalidInputError(f"Invalid date: {value!r}")


def _sorted(entries: list[MealCalendarEntry]) -> list[MealCalendarEntry]:
    return sorted(
        entries,
        key=lambda entry: (entry.planned_date, entry.meal_slot.order, entry.id),
    )
