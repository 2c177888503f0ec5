"""Quantity helpers shared by the shopping list and the matcher."""

import math

DISPLAY_PRECISION = 2


def unit_key(unit: str | None) -> str:
    """Return the comparison key for a unit label."""
    return (unit or "").strip().casefold()


def category_key(category: str | None) -> str:
    """Return the comparison key for a category label."""
    return (category or "").strip().casefold()


def serving_scale(servings: int, base_servings: int) -> float:
    """Return the factor that scales base-serving quantities to a placement."""
    return servings / max(base_servings, 1)


def round_quantity(value: float) -> float:
    """Round a quantity for display."""
    return round(value, DISPLAY_PRECISION)


def percentage(part: int, whole: int) -> int:
    """Return part/whole as a whole percentage, rounding halves up."""
    if whole <= 0:
        return 100
    return math.floor(100 * part / whole + 0.5)
