"""Fridge-based recipe suggestions."""

import logging
from collections.abc import Collection
from dataclasses import dataclass
from uuid import UUID

from meal_planner.domain.matching import (
    IngredientRef,
    MatchPolicy,
    MatchType,
    RecipeMatchResult,
    SuggestionResult,
)
from meal_planner.domain.recipes import Ingredient, Recipe
from meal_planner.services.catalog import RecipeCatalog
from meal_planner.services.fridge import FridgeService
from meal_planner.services.reconciliation import category_key, percentage

logger = logging.getLogger(__name__)


@dataclass
class RecipeMatcher:
    """Ranks catalog recipes by how much of them the user's fridge covers."""

    fridge_service: FridgeService
    catalog: RecipeCatalog

    def suggest(self, user_id: UUID, policy: MatchPolicy) -> SuggestionResult:
        """Return recipes selected and ranked under the given policy."""
        fridge_ids = self.fridge_service.ingredient_ids(user_id)
        recipes = self.catalog.list_recipes(policy.exclude_categories)
        ingredients = self.catalog.get_ingredients(
            {
                requirement.ingredient_id
                for recipe in recipes
                for requirement in recipe.requirements
            }
        )
        suggestions = rank_recipes(recipes, ingredients, fridge_ids, policy)
        logger.info(
            "Recipe suggestions computed",
            extra={
                "user_id": str(user_id),
                "candidates": len(recipes),
                "suggestions": len(suggestions),
            },
        )
        return SuggestionResult(
            suggestions=suggestions,
            total_fridge_items=len(fridge_ids),
            policy=policy,
        )


def rank_recipes(
    recipes: list[Recipe],
    ingredients: dict[int, Ingredient],
    fridge_ids: Collection[int],
    policy: MatchPolicy,
) -> list[RecipeMatchResult]:
    """Score, filter, sort and truncate candidate recipes."""
    owned = set(fridge_ids)
    results = []
    for recipe in recipes:
        if _in_excluded_category(recipe.categories, policy.exclude_categories):
            continue
        result = match_recipe(recipe, ingredients, owned, policy.exclude_categories)
        if _is_selected(result, policy):
            results.append(result)
    results.sort(
        key=lambda result: (
            -result.match_percentage,
            len(result.missing_ingredients),
            result.recipe_id,
        )
    )
    return results[: policy.limit]


def match_recipe(
    recipe: Recipe,
    ingredients: dict[int, Ingredient],
    fridge_ids: set[int],
    exclude_categories: Collection[str] = (),
) -> RecipeMatchResult:
    """Compare one recipe's trackable ingredients against the fridge.

    Optional requirements and ingredients in an excluded category are left
    out of both the matched count and the total, so they never count as
    missing.
    """
    tracked: dict[int, Ingredient | None] = {}
    for requirement in recipe.requirements:
        if requirement.is_optional:
            continue
        ingredient = ingredients.get(requirement.ingredient_id)
        if ingredient is not None and category_key(ingredient.category) in (
            exclude_categories
        ):
            continue
        tracked[requirement.ingredient_id] = ingredient

    unresolved = sorted(
        ingredient_id
        for ingredient_id, ingredient in tracked.items()
        if ingredient is None
    )
    if unresolved:
        logger.warning(
            "Recipe requirement references a missing ingredient",
            extra={"recipe_id": recipe.id, "ingredient_ids": unresolved},
        )

    matching = [item_id for item_id in tracked if item_id in fridge_ids]
    missing = [
        _ref(ingredient_id, ingredient)
        for ingredient_id, ingredient in tracked.items()
        if ingredient_id not in fridge_ids
    ]
    return RecipeMatchResult(
        recipe_id=recipe.id,
        recipe_title=recipe.title,
        recipe_description=recipe.description,
        categories=list(recipe.categories),
        matching_ingredient_count=len(matching),
        total_ingredient_count=len(tracked),
        match_percentage=percentage(len(matching), len(tracked)),
        missing_ingredients=missing,
        can_cook=not missing,
        unresolved_ingredient_ids=unresolved,
    )


def _is_selected(result: RecipeMatchResult, policy: MatchPolicy) -> bool:
    within_budget = len(result.missing_ingredients) <= policy.max_missing_ingredients
    if policy.match_type is MatchType.ANY:
        return result.matching_ingredient_count >= 1 and within_budget
    return within_budget


def _in_excluded_category(
    categories: Collection[str], exclude_categories: Collection[str]
) -> bool:
    return any(category_key(category) in exclude_categories for category in categories)


def _ref(ingredient_id: int, ingredient: Ingredient | None) -> IngredientRef:
    if ingredient is None:
        return IngredientRef(
            id=ingredient_id, name=f"ingredient #{ingredient_id}", category=None
        )
    return IngredientRef(
        id=ingredient.id, name=ingredient.name, category=ingredient.category
    )
