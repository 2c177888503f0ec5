"""Shopping list aggregation over the meal calendar."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from meal_planner.domain.calendar import MealCalendarEntry
from meal_planner.domain.errors import InvalidInputError
from meal_planner.domain.recipes import Ingredient, Recipe, RecipeIngredientRequirement
from meal_planner.domain.shopping import (
    ContributingRecipe,
    ShoppingList,
    ShoppingListItem,
)
from meal_planner.services.calendar import MealCalendarRepository
from meal_planner.services.catalog import RecipeCatalog
from meal_planner.services.reconciliation import (
    round_quantity,
    serving_scale,
    unit_key,
)

logger = logging.getLogger(__name__)


@dataclass
class _Bucket:
    """Running total for one (ingredient, unit) pair."""

    ingredient_id: int
    unit: str
    total: float = 0.0
    contributors: list[ContributingRecipe] = field(default_factory=list)

    def add(
        self, entry: MealCalendarEntry, source: Recipe, quantity: float
    ) -> None:
        self.total += quantity
        self.contributors.append(
            ContributingRecipe(
                recipe_id=source.id,
                recipe_name=source.title,
                date=entry.planned_date,
                meal_slot=entry.meal_slot,
                quantity=quantity,
            )
        )

    def to_item(self, ingredient: Ingredient | None) -> ShoppingListItem:
        return ShoppingListItem(
            ingredient_id=self.ingredient_id,
            ingredient_name=(
                ingredient.name if ingredient else f"ingredient #{self.ingredient_id}"
            ),
            total_quantity=round_quantity(self.total),
            unit=self.unit,
            contributing_recipes=[
                ContributingRecipe(
                    recipe_id=row.recipe_id,
                    recipe_name=row.recipe_name,
                    date=row.date,
                    meal_slot=row.meal_slot,
                    quantity=round_quantity(row.quantity),
                )
                for row in self.contributors
            ],
            is_resolved=ingredient is not None,
        )


@dataclass
class ShoppingListService:
    """Builds a merged ingredient list for a range of planned meals.

    Quantities are authored against a recipe's base servings, so every
    requirement is scaled by ``entry.servings / recipe.base_servings``
    before it is added. Sub-recipes referenced from a recipe's steps are
    bought along with it at the same scale, down to ``max_nested_depth``
    levels. Units are never converted: one ingredient listed in grams and
    in millilitres yields two rows.
    """

    repository: MealCalendarRepository
    catalog: RecipeCatalog
    max_nested_depth: int = 3

    def build(self, user_id: UUID, start_date: date, end_date: date) -> ShoppingList:
        """Aggregate every entry planned in [start_date, end_date]."""
        if end_date < start_date:
            raise InvalidInputError("end_date must be on or after start_date")

        entries = sorted(
            self.repository.list_entries(user_id, start_date, end_date),
            key=lambda entry: (entry.planned_date, entry.meal_slot.order, entry.id),
        )
        recipes = self._load_recipes(entry.recipe_id for entry in entries)

        buckets: dict[tuple[int, str], _Bucket] = {}
        used_recipe_ids: set[int] = set()
        unresolved_entry_ids: list[int] = []
        for entry in entries:
            recipe = recipes.get(entry.recipe_id)
            if recipe is None:
                logger.warning(
                    "Calendar entry references a missing recipe",
                    extra={"entry_id": entry.id, "recipe_id": entry.recipe_id},
                )
                unresolved_entry_ids.append(entry.id)
                continue
            scale = serving_scale(entry.servings, recipe.base_servings)
            for source, requirement in self._expand(recipe, recipes, used_recipe_ids):
                key = (requirement.ingredient_id, unit_key(requirement.unit))
                bucket = buckets.get(key)
                if bucket is None:
                    bucket = _Bucket(
                        ingredient_id=requirement.ingredient_id,
                        unit=requirement.unit.strip(),
                    )
                    buckets[key] = bucket
                bucket.add(entry, source, requirement.quantity * scale)

        ingredients = self.catalog.get_ingredients(
            {bucket.ingredient_id for bucket in buckets.values()}
        )
        items = []
        for bucket in buckets.values():
            ingredient = ingredients.get(bucket.ingredient_id)
            if ingredient is None:
                logger.warning(
                    "Recipe requirement references a missing ingredient",
                    extra={"ingredient_id": bucket.ingredient_id},
                )
            items.append(bucket.to_item(ingredient))
        items.sort(
            key=lambda item: (
                item.ingredient_name.casefold(),
                unit_key(item.unit),
                item.ingredient_id,
            )
        )
        return ShoppingList(
            start_date=start_date,
            end_date=end_date,
            items=items,
            total_recipes=len(used_recipe_ids),
            unresolved_entry_ids=unresolved_entry_ids,
        )

    def _load_recipes(self, recipe_ids: Iterable[int]) -> dict[int, Recipe]:
        """Fetch recipes and their sub-recipes, one batch per nesting level."""
        loaded: dict[int, Recipe] = {}
        missing: set[int] = set()
        pending = set(recipe_ids)
        for _ in range(self.max_nested_depth + 1):
            pending -= loaded.keys() | missing
            if not pending:
                break
            found = self.catalog.get_recipes(pending)
            loaded.update(found)
            missing |= pending - found.keys()
            pending = {
                ref_id
                for recipe in found.values()
                for ref_id in recipe.referenced_recipe_ids
            }
        return loaded

    def _expand(
        self,
        recipe: Recipe,
        recipes: dict[int, Recipe],
        used_recipe_ids: set[int],
    ) -> list[tuple[Recipe, RecipeIngredientRequirement]]:
        """Return (source recipe, requirement) pairs including sub-recipes."""
        collected: list[tuple[Recipe, RecipeIngredientRequirement]] = []
        path: set[int] = set()

        def visit(current: Recipe, depth: int) -> None:
            if current.id in path:
                return
            path.add(current.id)
            used_recipe_ids.add(current.id)
            collected.extend((current, req) for req in current.requirements)
            if depth >= self.max_nested_depth:
                path.discard(current.id)
                return
            for ref_id in current.referenced_recipe_ids:
                referenced = recipes.get(ref_id)
                if referenced is None:
                    logger.warning(
                        "Recipe references a missing sub-recipe",
                        extra={
                            "recipe_id": current.id,
                            "referenced_recipe_id": ref_id,
                        },
                    )
                    continue
                visit(referenced, depth + 1)
            path.discard(current.id)

        visit(recipe, 0)
        return collected
