"""Shopping list endpoint."""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request

from meal_planner.api.dependencies import get_container, require_user
from meal_planner.api.serializers import serialize_shopping_list

if TYPE_CHECKING:
    from meal_planner.containers import AppContainer

router = APIRouter(prefix="/shopping-list", tags=["shopping-list"])

DEFAULT_RANGE_DAYS = 6


@router.get("")
async def shopping_list(
    request: Request,
    start_date: date,
    end_date: date | None = None,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Aggregate ingredients for every meal planned in the date range.

    Without an end date the list covers a week starting at start_date.
    """
    container: AppContainer = get_container(request)
    result = container.shopping_list_service.build(
        user_id,
        start_date,
        end_date or start_date + timedelta(days=DEFAULT_RANGE_DAYS),
    )
    return serialize_shopping_list(result)
