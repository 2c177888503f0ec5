"""Fridge inventory and recipe suggestion endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from meal_planner.api.dependencies import get_container, require_user
from meal_planner.api.schemas import (
    FridgeItemCreate,
    FridgeItemUpdate,
    SuggestionRequest,
)
from meal_planner.api.serializers import (
    serialize_fridge_item,
    serialize_fridge_stats,
    serialize_suggestions,
)
from meal_planner.config import parse_categories
from meal_planner.domain.matching import MatchPolicy

if TYPE_CHECKING:
    from meal_planner.containers import AppContainer

router = APIRouter(prefix="/fridge", tags=["fridge"])


@router.get("")
async def list_fridge(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return the caller's fridge, newest first."""
    container: AppContainer = get_container(request)
    items = container.fridge_service.list_items(user_id)
    return {"items": [serialize_fridge_item(item) for item in items]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_fridge_item(
    payload: FridgeItemCreate,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Stock an ingredient; an existing entry for it is updated."""
    container: AppContainer = get_container(request)
    item = container.fridge_service.add_item(
        user_id,
        payload.ingredient_id,
        quantity=payload.quantity,
        unit=payload.unit,
        expiry_date=payload.expiry_date,
        notes=payload.notes,
    )
    return serialize_fridge_item(item)


@router.get("/stats")
async def fridge_stats(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    return serialize_fridge_stats(container.fridge_service.stats(user_id))


@router.delete("/clear")
async def clear_fridge(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, int]:
    """Remove every item from the caller's fridge."""
    container: AppContainer = get_container(request)
    return {"removed": container.fridge_service.clear(user_id)}


@router.delete("/expired")
async def remove_expired_items(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, int]:
    container: AppContainer = get_container(request)
    return {"removed": container.fridge_service.remove_expired(user_id)}


@router.post("/suggestions")
async def recipe_suggestions(
    payload: SuggestionRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Suggest recipes the caller can cook, or almost cook, from the fridge."""
    container: AppContainer = get_container(request)
    settings = container.settings
    policy = MatchPolicy.create(
        match_type=payload.match_type,
        max_missing_ingredients=payload.max_missing_ingredients,
        exclude_categories=(
            payload.exclude_categories
            if payload.exclude_categories is not None
            else parse_categories(settings.suggestion_excluded_categories)
        ),
        limit=payload.limit if payload.limit is not None else settings.suggestion_limit,
    )
    result = container.recipe_matcher.suggest(user_id, policy)
    return serialize_suggestions(result)


@router.put("/{item_id}")
async def update_fridge_item(
    item_id: int,
    payload: FridgeItemUpdate,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    item = container.fridge_service.update_item(
        user_id, item_id, payload.model_dump(exclude_unset=True)
    )
    return serialize_fridge_item(item)


@router.delete("/{item_id}")
async def remove_fridge_item(
    item_id: int, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    container: AppContainer = get_container(request)
    container.fridge_service.remove_item(user_id, item_id)
    return {"status": "deleted"}
