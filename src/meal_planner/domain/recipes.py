"""Domain models for the read-only recipe catalog."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Ingredient:
    """Catalog ingredient."""

    id: int
    name: str
    category: str


@dataclass(frozen=True)
class RecipeIngredientRequirement:
    """Quantity of an ingredient needed for a recipe's base servings."""

    recipe_id: int
    ingredient_id: int
    quantity: float
    unit: str
    is_optional: bool = False


@dataclass(frozen=True)
class Recipe:
    """Catalog recipe with its ingredient requirements."""

    id: int
    title: str
    description: str | None
    base_servings: int
    categories: tuple[str, ...] = ()
    requirements: tuple[RecipeIngredientRequirement, ...] = ()
    referenced_recipe_ids: tuple[int, ...] = field(default=())
