"""Meal calendar endpoints."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from meal_planner.api.dependencies import get_container, require_user
from meal_planner.api.schemas import MealPlanCreate, MealPlanUpdate
from meal_planner.api.serializers import serialize_entry
from meal_planner.services.calendar import DAYS_IN_WEEK

if TYPE_CHECKING:
    from meal_planner.containers import AppContainer

router = APIRouter(prefix="/meal-plans", tags=["meal-plans"])


@router.get("/week")
async def weekly_meal_plans(
    request: Request,
    start_date: date | None = None,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Return a week of entries, starting on Monday unless a date is given."""
    container: AppContainer = get_container(request)
    service = container.calendar_service
    week_start = start_date or service.current_week_start()
    week = service.list_week(user_id, week_start)
    return {
        "start_date": week_start.isoformat(),
        "end_date": (week_start + timedelta(days=DAYS_IN_WEEK - 1)).isoformat(),
        "meal_plans": {
            day: [serialize_entry(entry) for entry in entries]
            for day, entries in week.items()
        },
    }


@router.get("/daily")
async def daily_meal_plans(
    request: Request,
    day: date | None = Query(default=None, alias="date"),
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Return one day's entries grouped by slot."""
    container: AppContainer = get_container(request)
    service = container.calendar_service
    day = day or datetime.now(tz=UTC).date()
    grouped = service.list_day(user_id, day)
    response: dict[str, object] = {"date": day.isoformat()}
    for slot, entries in grouped.items():
        response[slot.value] = [serialize_entry(entry) for entry in entries]
    return response


@router.get("/upcoming")
async def upcoming_meal_plans(
    request: Request,
    days: int | None = None,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Return entries that are not cooked yet within the next few days."""
    container: AppContainer = get_container(request)
    days_ahead = days if days is not None else container.settings.upcoming_days
    entries = container.calendar_service.list_upcoming(user_id, days_ahead)
    return {
        "upcoming_meals": [serialize_entry(entry) for entry in entries],
        "days_ahead": days_ahead,
        "total_count": len(entries),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_meal_plan(
    payload: MealPlanCreate,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Place a recipe on the calendar."""
    container: AppContainer = get_container(request)
    entry = container.calendar_service.place_meal(
        user_id=user_id,
        recipe_id=payload.recipe_id,
        planned_date=payload.planned_date,
        meal_slot=payload.meal_slot,
        servings=payload.servings,
        notes=payload.notes,
    )
    return serialize_entry(entry)


@router.get("/{entry_id}")
async def get_meal_plan(
    entry_id: int, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return serialize_entry(container.calendar_service.get_meal(user_id, entry_id))


@router.put("/{entry_id}")
async def update_meal_plan(
    entry_id: int,
    payload: MealPlanUpdate,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Apply the fields present in the body to an entry."""
    container: AppContainer = get_container(request)
    entry = container.calendar_service.update_meal(
        user_id, entry_id, payload.model_dump(exclude_unset=True)
    )
    return serialize_entry(entry)


@router.delete("/{entry_id}")
async def delete_meal_plan(
    entry_id: int, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    container: AppContainer = get_container(request)
    container.calendar_service.delete_meal(user_id, entry_id)
    return {"status": "deleted"}


@router.post("/{entry_id}/complete")
async def complete_meal_plan(
    entry_id: int, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Mark an entry as cooked."""
    container: AppContainer = get_container(request)
    entry = container.calendar_service.complete_meal(user_id, entry_id)
    return serialize_entry(entry)
