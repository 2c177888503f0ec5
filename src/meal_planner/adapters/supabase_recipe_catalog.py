"""Supabase implementation of the recipe catalog."""

import logging
from collections.abc import Collection
from dataclasses import dataclass

from supabase import Client

from meal_planner.domain.errors import DataIntegrityError
from meal_planner.domain.recipes import Ingredient, Recipe, RecipeIngredientRequirement
from meal_planner.services.catalog import RecipeCatalog
from meal_planner.services.reconciliation import category_key

logger = logging.getLogger(__name__)

_RECIPE_COLUMNS = (
    "id, title, description, servings, instructions, "
    "recipe_ingredients(ingredient_id, quantity, unit, is_optional), "
    "categories(name)"
)


@dataclass
class SupabaseRecipeCatalog(RecipeCatalog):
    """Reads recipes with their ingredients and categories from Supabase."""

    client: Client

    def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Return a recipe by id, if present."""
        response = (
            self.client.table("recipes")
            .select(_RECIPE_COLUMNS)
            .eq("id", recipe_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def get_recipes(self, recipe_ids: Collection[int]) -> dict[int, Recipe]:
        """Return recipes for the given ids in a single query."""
        if not recipe_ids:
            return {}
        response = (
            self.client.table("recipes")
            .select(_RECIPE_COLUMNS)
            .in_("id", sorted(recipe_ids))
            .execute()
        )
        recipes = _parse_rows(response.data or [])
        return {recipe.id: recipe for recipe in recipes}

    def list_recipes(self, exclude_categories: Collection[str]) -> list[Recipe]:
        """Return public recipes outside the excluded categories."""
        excluded = {category_key(category) for category in exclude_categories}
        response = (
            self.client.table("recipes")
            .select(_RECIPE_COLUMNS)
            .eq("is_public", True)
            .order("id", desc=False)
            .execute()
        )
        recipes = _parse_rows(response.data or [])
        return [
            recipe
            for recipe in recipes
            if not any(category_key(name) in excluded for name in recipe.categories)
        ]

    def get_ingredients(self, ingredient_ids: Collection[int]) -> dict[int, Ingredient]:
        """Return ingredients for the given ids in a single query."""
        if not ingredient_ids:
            return {}
        response = (
            self.client.table("ingredients")
            .select("id, name, category")
            .in_("id", sorted(ingredient_ids))
            .execute()
        )
        return {
            int(row["id"]): Ingredient(
                id=int(row["id"]),
                name=str(row.get("name") or ""),
                category=str(row.get("category") or ""),
            )
            for row in response.data or []
        }


def _parse_rows(rows: list[dict[str, object]]) -> list[Recipe]:
    """Parse recipe rows, skipping the ones that cannot be parsed."""
    recipes = []
    for row in rows:
        try:
            recipes.append(_parse_recipe(row))
        except DataIntegrityError:
            logger.warning(
                "Skipping malformed recipe row",
                extra={"recipe_id": row.get("id")},
            )
    return recipes


def _parse_recipe(row: dict[str, object]) -> Recipe:
    """Parse a recipe row with embedded relations into a domain model."""
    try:
        recipe_id = int(row["id"])
        base_servings = max(int(row.get("servings") or 1), 1)
        requirements = tuple(
            RecipeIngredientRequirement(
                recipe_id=recipe_id,
                ingredient_id=int(item["ingredient_id"]),
                quantity=float(item.get("quantity") or 0.0),
                unit=str(item.get("unit") or ""),
                is_optional=bool(item.get("is_optional", False)),
            )
            for item in row.get("recipe_ingredients") or []
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise DataIntegrityError(f"Malformed recipe row: {exc}") from exc
    categories = tuple(
        str(category["name"])
        for category in row.get("categories") or []
        if isinstance(category, dict) and category.get("name")
    )
    return Recipe(
        id=recipe_id,
        title=str(row.get("title") or ""),
        description=row.get("description") or None,
        base_servings=base_servings,
        categories=categories,
        requirements=requirements,
        referenced_recipe_ids=_referenced_recipe_ids(row.get("instructions")),
    )


def _referenced_recipe_ids(instructions: object) -> tuple[int, ...]:
    """Collect sub-recipe ids referenced from instruction steps, in order."""
    if not isinstance(instructions, list):
        return ()
    seen: list[int] = []
    for step in instructions:
        if not isinstance(step, dict):
            continue
        ref_id = step.get("referenced_recipe_id")
        if isinstance(ref_id, int) and ref_id > 0 and ref_id not in seen:
            seen.append(ref_id)
    return tuple(seen)
