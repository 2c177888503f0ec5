"""JSON serialization of domain models for API responses."""

from meal_planner.domain.calendar import MealCalendarEntry
from meal_planner.domain.fridge import FridgeEntry, FridgeStats
from meal_planner.domain.matching import RecipeMatchResult, SuggestionResult
from meal_planner.domain.shopping import ShoppingList, ShoppingListItem


def serialize_entry(entry: MealCalendarEntry) -> dict[str, object]:
    return {
        "id": entry.id,
        "recipe_id": entry.recipe_id,
        "planned_date": entry.planned_date.isoformat(),
        "meal_slot": entry.meal_slot.value,
        "servings": entry.servings,
        "notes": entry.notes,
        "is_completed": entry.is_completed,
        "completed_at": _isoformat(entry.completed_at),
        "created_at": _isoformat(entry.created_at),
        "updated_at": _isoformat(entry.updated_at),
    }


def serialize_shopping_list(shopping_list: ShoppingList) -> dict[str, object]:
    return {
        "start_date": shopping_list.start_date.isoformat(),
        "end_date": shopping_list.end_date.isoformat(),
        "items": [_serialize_item(item) for item in shopping_list.items],
        "total_recipes": shopping_list.total_recipes,
        "unresolved_entry_ids": shopping_list.unresolved_entry_ids,
    }


def serialize_fridge_item(item: FridgeEntry) -> dict[str, object]:
    return {
        "id": item.id,
        "ingredient_id": item.ingredient_id,
        "quantity": item.quantity,
        "unit": item.unit,
        "expiry_date": _isoformat(item.expiry_date),
        "notes": item.notes,
        "created_at": _isoformat(item.created_at),
        "updated_at": _isoformat(item.updated_at),
    }


def serialize_fridge_stats(stats: FridgeStats) -> dict[str, object]:
    return {
        "total_items": stats.total_items,
        "expiring_soon": stats.expiring_soon,
        "expired": stats.expired,
        "categories_count": stats.categories_count,
        "categories": stats.categories,
    }


def serialize_suggestions(result: SuggestionResult) -> dict[str, object]:
    policy = result.policy
    return {
        "suggestions": [_serialize_match(match) for match in result.suggestions],
        "total_fridge_items": result.total_fridge_items,
        "search_parameters": {
            "match_type": policy.match_type.value,
            "max_missing_ingredients": policy.max_missing_ingredients,
            "exclude_categories": sorted(policy.exclude_categories),
            "limit": policy.limit,
        },
    }


def _serialize_item(item: ShoppingListItem) -> dict[str, object]:
    return {
        "ingredient_id": item.ingredient_id,
        "ingredient_name": item.ingredient_name,
        "total_quantity": item.total_quantity,
        "unit": item.unit,
        "is_resolved": item.is_resolved,
        "recipes": [
            {
                "recipe_id": row.recipe_id,
                "recipe_name": row.recipe_name,
                "quantity": row.quantity,
                "date": row.date.isoformat(),
                "meal_slot": row.meal_slot.value,
            }
            for row in item.contributing_recipes
        ],
    }


def _serialize_match(match: RecipeMatchResult) -> dict[str, object]:
    return {
        "recipe": {
            "id": match.recipe_id,
            "title": match.recipe_title,
            "description": match.recipe_description,
            "categories": match.categories,
        },
        "matching_ingredients": match.matching_ingredient_count,
        "total_ingredients": match.total_ingredient_count,
        "missing_ingredients": [
            {"id": ref.id, "name": ref.name, "category": ref.category}
            for ref in match.missing_ingredients
        ],
        "match_percentage": match.match_percentage,
        "can_cook": match.can_cook,
        "unresolved_ingredient_ids": match.unresolved_ingredient_ids,
    }


def _isoformat(value: object) -> str | None:
    return value.isoformat() if value is not None else None
