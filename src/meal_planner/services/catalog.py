"""Access to the read-only recipe catalog."""

from collections.abc import Collection
from typing import Protocol

from meal_planner.domain.recipes import Ingredient, Recipe


class RecipeCatalog(Protocol):
    """Read interface for recipes and ingredients."""

    def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Return a recipe by id, if present."""

    def get_recipes(self, recipe_ids: Collection[int]) -> dict[int, Recipe]:
        """Return the recipes found for the given ids in one lookup."""

    def list_recipes(self, exclude_categories: Collection[str]) -> list[Recipe]:
        """Return recipes that are in none of the excluded categories."""

    def get_ingredients(self, ingredient_ids: Collection[int]) -> dict[int, Ingredient]:
        """Return the ingredients found for the given ids in one lookup."""
