"""Supabase repository for meal calendar entries."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from meal_planner.domain.calendar import MealCalendarEntry, MealSlot
from meal_planner.domain.errors import DataIntegrityError, InvalidInputError
from meal_planner.services.calendar import MealCalendarRepository

_TABLE = "meal_plans"


@dataclass
class SupabaseMealCalendarRepository(MealCalendarRepository):
    """Supabase implementation of the meal calendar."""

    client: Client

    def create_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        recipe_id: int,
        planned_date: date,
        meal_slot: MealSlot,
        servings: int,
        notes: str,
    ) -> MealCalendarEntry:
        """Insert an entry row and return it."""
        response = (
            self.client.table(_TABLE)
            .insert(
                {
                    "user_id": str(user_id),
                    "recipe_id": recipe_id,
                    "planned_date": planned_date.isoformat(),
                    "meal_type": meal_slot.value,
                    "servings": servings,
                    "notes": notes,
                    "is_completed": False,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal plan")
        return _parse_entry(response.data[0])

    def get_entry(self, entry_id: int) -> MealCalendarEntry | None:
        """Return an entry by id."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("id", entry_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def update_entry(
        self, entry_id: int, payload: dict[str, object]
    ) -> MealCalendarEntry:
        """Update an entry row and return it."""
        response = (
            self.client.table(_TABLE)
            .update(_serialize_payload(payload))
            .eq("id", entry_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update meal plan")
        return _parse_entry(response.data[0])

    def delete_entry(self, entry_id: int) -> bool:
        """Delete an entry row."""
        response = self.client.table(_TABLE).delete().eq("id", entry_id).execute()
        return bool(response.data)

    def list_entries(
        self, user_id: UUID, start: date, end: date
    ) -> list[MealCalendarEntry]:
        """Return a user's entries planned within [start, end]."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .gte("planned_date", start.isoformat())
            .lte("planned_date", end.isoformat())
            .order("planned_date", desc=False)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]


def _serialize_payload(payload: dict[str, object]) -> dict[str, object]:
    row: dict[str, object] = {}
    for key, value in payload.items():
        if key == "meal_slot":
            row["meal_type"] = MealSlot.parse(value).value
        elif isinstance(value, date | datetime):
            row[key] = value.isoformat()
        else:
            row[key] = value
    return row


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _parse_slot(row: dict[str, object]) -> MealSlot:
    raw = row.get("meal_type")
    if not raw:
        raise DataIntegrityError(f"Meal plan {row.get('id')} has no meal_type")
    try:
        return MealSlot.parse(raw)
    except InvalidInputError as exc:
        raise DataIntegrityError(
            f"Meal plan {row.get('id')} has an unknown meal_type: {raw!r}"
        ) from exc


def _parse_entry(row: dict[str, object]) -> MealCalendarEntry:
    """Parse a meal plan row into a domain model."""
    return MealCalendarEntry(
        id=int(row["id"]),
        user_id=UUID(str(row["user_id"])),
        recipe_id=int(row["recipe_id"]),
        planned_date=date.fromisoformat(str(row["planned_date"])[:10]),
        meal_slot=_parse_slot(row),
        servings=int(row.get("servings") or 1),
        notes=str(row.get("notes") or ""),
        is_completed=bool(row.get("is_completed", False)),
        completed_at=_parse_timestamp(row.get("completed_at")),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )
