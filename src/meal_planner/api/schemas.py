"""Pydantic models for API request bodies."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class MealPlanCreate(BaseModel):
    """Placement of a recipe into a calendar cell."""

    recipe_id: int
    planned_date: date
    meal_slot: str
    servings: int = 1
    notes: str = Field(default="", max_length=500)


class MealPlanUpdate(BaseModel):
    """Partial update of a calendar entry."""

    recipe_id: int | None = None
    planned_date: date | None = None
    meal_slot: str | None = None
    servings: int | None = None
    notes: str | None = Field(default=None, max_length=500)
    is_completed: bool | None = None


class FridgeItemCreate(BaseModel):
    """Ingredient added to the fridge."""

    ingredient_id: int
    quantity: float | None = None
    unit: str | None = None
    expiry_date: datetime | None = None
    notes: str | None = None


class FridgeItemUpdate(BaseModel):
    """Partial update of a fridge item."""

    quantity: float | None = None
    unit: str | None = None
    expiry_date: datetime | None = None
    notes: str | None = None


class SuggestionRequest(BaseModel):
    """Recipe suggestion policy; omitted fields use server defaults."""

    match_type: str = "any"
    max_missing_ingredients: int = 3
    exclude_categories: list[str] | None = None
    limit: int | None = None
