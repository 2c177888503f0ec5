"""Domain models for aggregated shopping lists."""

from dataclasses import dataclass
from datetime import date

from meal_planner.domain.calendar import MealSlot


@dataclass(frozen=True)
class ContributingRecipe:
    """One recipe placement's share of a shopping list item."""

    recipe_id: int
    recipe_name: str
    date: date
    meal_slot: MealSlot
    quantity: float


@dataclass(frozen=True)
class ShoppingListItem:
    """Total quantity of one ingredient in one unit."""

    ingredient_id: int
    ingredient_name: str
    total_quantity: float
    unit: str
    contributing_recipes: list[ContributingRecipe]
    is_resolved: bool = True


@dataclass(frozen=True)
class ShoppingList:
    """Shopping list for every calendar entry in a date range."""

    start_date: date
    end_date: date
    items: list[ShoppingListItem]
    total_recipes: int
    unresolved_entry_ids: list[int]
