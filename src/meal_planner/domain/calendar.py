"""Domain models for the meal calendar."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from meal_planner.domain.errors import InvalidInputError


class MealSlot(StrEnum):
    """Meal slot of a calendar cell, in display order."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"

    @classmethod
    def parse(cls, value: object) -> "MealSlot":
        """Return the slot for a raw value or raise InvalidInputError."""
        if isinstance(value, MealSlot):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidInputError(f"Unknown meal slot: {value!r}") from None

    @property
    def order(self) -> int:
        return list(MealSlot).index(self)


@dataclass(frozen=True)
class MealCalendarEntry:
    """Recipe placed into a (date, meal slot) cell of a user's calendar."""

    id: int
    user_id: UUID
    recipe_id: int
    planned_date: date
    meal_slot: MealSlot
    servings: int
    notes: str
    is_completed: bool
    completed_at: datetime | None
    created_at: datetime | None = None
    updated_at: datetime | None = None
