"""Domain models for fridge-based recipe suggestions."""

from dataclasses import dataclass, field
from enum import StrEnum

from meal_planner.domain.errors import InvalidInputError


class MatchType(StrEnum):
    """How fridge overlap selects candidate recipes."""

    ANY = "any"
    ALL = "all"


@dataclass(frozen=True)
class MatchPolicy:
    """Selection and ranking parameters for recipe suggestions."""

    match_type: MatchType
    max_missing_ingredients: int
    exclude_categories: frozenset[str] = frozenset()
    limit: int = 20

    @classmethod
    def create(
        cls,
        match_type: object,
        max_missing_ingredients: int,
        exclude_categories: list[str] | None = None,
        limit: int = 20,
    ) -> "MatchPolicy":
        """Validate raw values and build a policy."""
        try:
            parsed_type = MatchType(str(match_type).strip().lower())
        except ValueError:
            raise InvalidInputError(f"Unknown match type: {match_type!r}") from None
        if max_missing_ingredients < 0:
            raise InvalidInputError("max_missing_ingredients must be >= 0")
        if limit < 1:
            raise InvalidInputError("limit must be >= 1")
        categories = frozenset(
            category.strip().casefold()
            for category in exclude_categories or []
            if category.strip()
        )
        return cls(
            match_type=parsed_type,
            max_missing_ingredients=max_missing_ingredients,
            exclude_categories=categories,
            limit=limit,
        )


@dataclass(frozen=True)
class IngredientRef:
    """Reference to a catalog ingredient in a match result."""

    id: int
    name: str
    category: str | None


@dataclass(frozen=True)
class RecipeMatchResult:
    """How well a recipe is covered by a user's fridge."""

    recipe_id: int
    recipe_title: str
    recipe_description: str | None
    categories: list[str]
    matching_ingredient_count: int
    total_ingredient_count: int
    match_percentage: int
    missing_ingredients: list[IngredientRef]
    can_cook: bool
    unresolved_ingredient_ids: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class SuggestionResult:
    """Ranked suggestions with the inputs that produced them."""

    suggestions: list[RecipeMatchResult]
    total_fridge_items: int
    policy: MatchPolicy
