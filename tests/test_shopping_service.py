"""Tests for shopping list aggregation."""

from datetime import date
from uuid import uuid4

import pytest

from meal_planner.domain.calendar import MealSlot
from meal_planner.domain.errors import InvalidInputError
from meal_planner.services.shopping import ShoppingListService
from tests.conftest import make_recipe

FLOUR = 1
MILK = 2
EGG = 3
SUGAR = 4

MONDAY = date(2025, 3, 10)


@pytest.fixture(autouse=True)
def pantry(catalog) -> None:
    catalog.add_ingredient(FLOUR, "Flour", "Baking")
    catalog.add_ingredient(MILK, "Milk", "Dairy")
    catalog.add_ingredient(EGG, "egg", "Dairy")
    catalog.add_ingredient(SUGAR, "Sugar", "Baking")


def _flour_items(shopping_list):
    return [item for item in shopping_list.items if item.ingredient_id == FLOUR]


def test_serving_scale_assumption_flour_scenario(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    """Quantities are authored for base servings and scaled per placement.

    This scaling rule is an assumption about the stored data, kept visible
    here so it can be confirmed against real recipes.
    """
    catalog.add_recipe(make_recipe(1, "X", [(FLOUR, 200, "g")], base_servings=4))
    catalog.add_recipe(make_recipe(2, "Y", [(FLOUR, 100, "g")], base_servings=2))
    calendar_service.place_meal(user_id, 1, MONDAY, "dinner", 2)
    calendar_service.place_meal(user_id, 2, MONDAY, "dinner", 2)

    result = shopping_list_service.build(user_id, MONDAY, MONDAY)

    (flour,) = _flour_items(result)
    assert flour.total_quantity == 200
    assert flour.unit == "g"
    assert [row.quantity for row in flour.contributing_recipes] == [100, 100]
    assert {row.recipe_name for row in flour.contributing_recipes} == {"X", "Y"}
    assert result.total_recipes == 2


def test_total_equals_sum_of_contributors(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(make_recipe(1, "Cake", [(FLOUR, 250, "g"), (EGG, 3, "pcs")]))
    catalog.add_recipe(make_recipe(2, "Crepes", [(FLOUR, 125, "g"), (MILK, 0.5, "l")]))
    calendar_service.place_meal(user_id, 1, MONDAY, "snack", 1)
    calendar_service.place_meal(user_id, 2, date(2025, 3, 11), "breakfast", 3)

    result = shopping_list_service.build(user_id, MONDAY, date(2025, 3, 16))

    for item in result.items:
        contributed = sum(row.quantity for row in item.contributing_recipes)
        assert item.total_quantity == pytest.approx(contributed)
    assert _flour_items(result)[0].total_quantity == 625


def test_units_are_not_merged(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(make_recipe(1, "Bread", [(FLOUR, 500, "g")]))
    catalog.add_recipe(make_recipe(2, "Batter", [(FLOUR, 2, "cups")]))
    catalog.add_recipe(make_recipe(3, "Roux", [(FLOUR, 50, " G ")]))
    for recipe_id in (1, 2, 3):
        calendar_service.place_meal(user_id, recipe_id, MONDAY, "lunch", 1)

    result = shopping_list_service.build(user_id, MONDAY, MONDAY)

    flour = _flour_items(result)
    assert [(item.unit, item.total_quantity) for item in flour] == [
        ("cups", 2),
        ("g", 550),
    ]


def test_optional_requirements_are_listed(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(
        make_recipe(
            1, "Pancakes", [(FLOUR, 200, "g"), (SUGAR, 20, "g")], optional=[SUGAR]
        )
    )
    calendar_service.place_meal(user_id, 1, MONDAY, "breakfast", 1)

    result = shopping_list_service.build(user_id, MONDAY, MONDAY)

    assert {item.ingredient_id for item in result.items} == {FLOUR, SUGAR}


def test_items_sorted_by_name_case_insensitively(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(
        make_recipe(1, "Omelette", [(MILK, 1, "dl"), (EGG, 2, "pcs"), (FLOUR, 1, "g")])
    )
    calendar_service.place_meal(user_id, 1, MONDAY, "breakfast", 1)

    result = shopping_list_service.build(user_id, MONDAY, MONDAY)

    assert [item.ingredient_name for item in result.items] == ["egg", "Flour", "Milk"]


def test_empty_range_yields_empty_list(shopping_list_service, user_id) -> None:
    result = shopping_list_service.build(user_id, MONDAY, date(2025, 3, 16))

    assert result.items == []
    assert result.total_recipes == 0
    assert result.unresolved_entry_ids == []


def test_inverted_range_is_rejected(shopping_list_service, user_id) -> None:
    with pytest.raises(InvalidInputError):
        shopping_list_service.build(user_id, date(2025, 3, 16), MONDAY)


def test_sub_range_never_increases_totals(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(make_recipe(1, "Bread", [(FLOUR, 500, "g")]))
    for offset in range(5):
        calendar_service.place_meal(
            user_id, 1, date(2025, 3, 10 + offset), "dinner", 1 + offset
        )

    full = shopping_list_service.build(user_id, MONDAY, date(2025, 3, 16))
    start, end = date(2025, 3, 11), date(2025, 3, 12)
    partial = shopping_list_service.build(user_id, start, end)

    full_totals = {
        (item.ingredient_id, item.unit): item.total_quantity for item in full.items
    }
    for item in partial.items:
        assert item.total_quantity <= full_totals[(item.ingredient_id, item.unit)]
        assert all(start <= row.date <= end for row in item.contributing_recipes)


def test_other_users_entries_are_ignored(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(make_recipe(1, "Bread", [(FLOUR, 500, "g")]))
    calendar_service.place_meal(user_id, 1, MONDAY, "dinner", 1)

    other = shopping_list_service.build(uuid4(), MONDAY, MONDAY)

    assert other.items == []


def test_deleting_entry_removes_its_contribution(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(make_recipe(1, "Bread", [(FLOUR, 500, "g")]))
    catalog.add_recipe(make_recipe(2, "Pie", [(FLOUR, 300, "g"), (SUGAR, 80, "g")]))
    calendar_service.place_meal(user_id, 1, MONDAY, "lunch", 1)
    pie = calendar_service.place_meal(user_id, 2, MONDAY, "dinner", 2)

    before = shopping_list_service.build(user_id, MONDAY, MONDAY)
    calendar_service.delete_meal(user_id, pie.id)
    after = shopping_list_service.build(user_id, MONDAY, MONDAY)

    assert _flour_items(before)[0].total_quantity == 1100
    assert _flour_items(after)[0].total_quantity == 500
    assert SUGAR not in {item.ingredient_id for item in after.items}


def test_contributors_follow_calendar_order(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(make_recipe(1, "Bread", [(FLOUR, 100, "g")]))
    calendar_service.place_meal(user_id, 1, date(2025, 3, 11), "breakfast", 1)
    calendar_service.place_meal(user_id, 1, MONDAY, "dinner", 1)
    calendar_service.place_meal(user_id, 1, MONDAY, "lunch", 1)

    result = shopping_list_service.build(user_id, MONDAY, date(2025, 3, 11))

    rows = _flour_items(result)[0].contributing_recipes
    assert [(row.date, row.meal_slot) for row in rows] == [
        (MONDAY, MealSlot.LUNCH),
        (MONDAY, MealSlot.DINNER),
        (date(2025, 3, 11), MealSlot.BREAKFAST),
    ]


def test_rebuilding_same_range_is_stable(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(make_recipe(1, "Bread", [(FLOUR, 100, "g"), (MILK, 1, "cup")]))
    catalog.add_recipe(
        make_recipe(2, "Pancakes", [(FLOUR, 50, "g"), (MILK, 200, "ml"), (EGG, 2, "")])
    )
    calendar_service.place_meal(user_id, 2, date(2025, 3, 11), "breakfast", 2)
    calendar_service.place_meal(user_id, 1, MONDAY, "dinner", 1)
    calendar_service.place_meal(user_id, 2, MONDAY, "lunch", 1)

    first = shopping_list_service.build(user_id, MONDAY, date(2025, 3, 11))
    second = shopping_list_service.build(user_id, MONDAY, date(2025, 3, 11))

    assert first == second
    assert second.total_recipes == 2
    assert [
        [(row.recipe_id, row.date) for row in item.contributing_recipes]
        for item in first.items
    ] == [
        [(row.recipe_id, row.date) for row in item.contributing_recipes]
        for item in second.items
    ]


def test_fractional_quantities_are_rounded(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(make_recipe(1, "Sauce", [(MILK, 1, "l")], base_servings=3))
    calendar_service.place_meal(user_id, 1, MONDAY, "dinner", 1)

    result = shopping_list_service.build(user_id, MONDAY, MONDAY)

    assert result.items[0].total_quantity == 0.33


def test_missing_recipe_is_reported(
    catalog, calendar_service, calendar_repository, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(make_recipe(1, "Bread", [(FLOUR, 500, "g")]))
    entry = calendar_service.place_meal(user_id, 1, MONDAY, "dinner", 1)
    del catalog.recipes[1]

    result = shopping_list_service.build(user_id, MONDAY, MONDAY)

    assert result.items == []
    assert result.unresolved_entry_ids == [entry.id]
    assert entry.id in calendar_repository.entries


def test_missing_ingredient_is_flagged(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(make_recipe(1, "Mystery", [(404, 3, "pcs")]))
    calendar_service.place_meal(user_id, 1, MONDAY, "dinner", 1)

    result = shopping_list_service.build(user_id, MONDAY, MONDAY)

    (item,) = result.items
    assert item.is_resolved is False
    assert item.ingredient_name == "ingredient #404"
    assert item.total_quantity == 3


def test_sub_recipes_are_bought_at_parent_scale(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(make_recipe(5, "Dough", [(FLOUR, 300, "g")]))
    catalog.add_recipe(
        make_recipe(
            1, "Pizza", [(MILK, 1, "dl")], base_servings=2, referenced_recipe_ids=(5,)
        )
    )
    calendar_service.place_meal(user_id, 1, MONDAY, "dinner", 4)

    result = shopping_list_service.build(user_id, MONDAY, MONDAY)

    (flour,) = _flour_items(result)
    assert flour.total_quantity == 600
    assert flour.contributing_recipes[0].recipe_name == "Dough"
    assert result.total_recipes == 2


def test_sub_recipe_depth_is_bounded(
    catalog, calendar_service, calendar_repository, user_id
) -> None:
    for recipe_id in range(1, 7):
        catalog.add_recipe(
            make_recipe(
                recipe_id,
                f"Level {recipe_id}",
                [(FLOUR, 1, "g")],
                referenced_recipe_ids=(recipe_id + 1,),
            )
        )
    calendar_service.place_meal(user_id, 1, MONDAY, "dinner", 1)
    service = ShoppingListService(
        repository=calendar_repository, catalog=catalog, max_nested_depth=2
    )

    result = service.build(user_id, MONDAY, MONDAY)

    assert _flour_items(result)[0].total_quantity == 3
    assert result.total_recipes == 3


def test_sub_recipe_cycles_terminate(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(
        make_recipe(1, "A", [(FLOUR, 10, "g")], referenced_recipe_ids=(2,))
    )
    catalog.add_recipe(
        make_recipe(2, "B", [(SUGAR, 5, "g")], referenced_recipe_ids=(1,))
    )
    calendar_service.place_meal(user_id, 1, MONDAY, "dinner", 1)

    result = shopping_list_service.build(user_id, MONDAY, MONDAY)

    totals = {item.ingredient_id: item.total_quantity for item in result.items}
    assert totals == {FLOUR: 10, SUGAR: 5}


def test_recipes_are_loaded_in_batches(
    catalog, calendar_service, shopping_list_service, user_id
) -> None:
    catalog.add_recipe(make_recipe(1, "Bread", [(FLOUR, 500, "g")]))
    catalog.add_recipe(make_recipe(2, "Pie", [(SUGAR, 80, "g")]))
    for offset in range(4):
        calendar_service.place_meal(user_id, 1 + offset % 2, MONDAY, "dinner", 1)

    shopping_list_service.build(user_id, MONDAY, MONDAY)

    assert catalog.batch_calls == [{1, 2}]
