from __future__ import annotations

import pytest

from models.inventory import InventoryItem
from models.recipe import Recipe, RecipeIngredient
from models.units import Unit
from services.reconciliation import (
    RecipeRequest,
    find_inventory_item,
    plan_deduction,
    synthesize_shopping_items,
    validate_preparation,
)


def make_recipe(name="Pancakes", servings=4, *ingredients):
    return Recipe(
        id=f"recipe-{name.lower()}",
        name=name,
        default_servings=servings,
        ingredients=[
            RecipeIngredient(ingredient_name=n, quantity=q, unit=u, is_optional=optional)
            for n, q, u, optional in ingredients
        ],
    )


def stock(name, quantity, unit, item_id=None, store_id=None):
    return InventoryItem(
        id=item_id or f"inv-{name}",
        ingredient_name=name,
        quantity=quantity,
        unit=unit,
        default_store_id=store_id,
    )


@pytest.fixture
def pancakes():
    return make_recipe("Pancakes", 4, ("flour", 2, Unit.CUP, False))


def test_pancakes_missing_flour(pancakes):
    check = validate_preparation(pancakes, 4, [stock("flour", 1, Unit.CUP)])
    assert check.can_prepare is False
    assert [m.model_dump() for m in check.missing] == [
        {"name": "flour", "needed": 2, "available": 1, "unit": "cup"}
    ]


def test_pancakes_at_two_servings_can_be_prepared(pancakes):
    check = validate_preparation(pancakes, 2, [stock("flour", 1, Unit.CUP)])
    assert check.can_prepare is True
    assert check.missing == []


def test_pancakes_shopping_list_from_empty_inventory(pancakes):
    result = synthesize_shopping_items([RecipeRequest(recipe=pancakes, servings=4)], [])
    assert len(result.items) == 1
    line = result.items[0]
    assert (line.ingredient_name, line.needed_quantity, line.unit) == ("flour", 2, Unit.CUP)
    assert [s.model_dump() for s in line.recipe_sources] == [{"recipe_name": "Pancakes", "quantity": 2}]


def test_validation_converts_inventory_into_recipe_unit():
    recipe = make_recipe("Latte", 1, ("milk", 1, Unit.CUP, False))
    check = validate_preparation(recipe, 1, [stock("milk", 0.5, Unit.LITER)])
    assert check.can_prepare is True


def test_validation_warns_on_incompatible_units(pancakes):
    check = validate_preparation(pancakes, 4, [stock("flour", 500, Unit.GRAM)])
    assert check.can_prepare is False
    assert check.warnings == ["Cannot convert g to cup for flour"]
    assert check.missing[0].available == 0


def test_validation_ignores_optional_ingredients():
    recipe = make_recipe("Pancakes", 4, ("flour", 2, Unit.CUP, False), ("blueberries", 100, Unit.GRAM, True))
    check = validate_preparation(recipe, 4, [stock("flour", 2, Unit.CUP)])
    assert check.can_prepare is True


def test_inventory_lookup_uses_normalized_names():
    inventory = [stock("cherry tomato", 3, Unit.PIECE)]
    assert find_inventory_item(inventory, "  Cherry Tomatoes") is inventory[0]
    assert find_inventory_item(inventory, "tomato") is None


def test_deduction_converts_and_reports_remaining_in_inventory_unit():
    recipe = make_recipe("Bread", 1, ("flour", 250, Unit.GRAM, False), ("egg", 1, Unit.PIECE, False))
    plan = plan_deduction(recipe, 1, [stock("flour", 1, Unit.KILOGRAM), stock("egg", 1, Unit.PIECE)])
    assert plan.result.success is True
    assert plan.result.errors == []
    flour, egg = plan.result.deducted
    assert (flour.name, flour.amount_deducted, flour.unit) == ("flour", 250, "g")
    assert flour.remaining == pytest.approx(0.75)
    assert egg.remaining == 0
    assert plan.new_quantities == {"inv-flour": pytest.approx(0.75), "inv-egg": 0}


def test_deduction_is_a_no_op_when_validation_fails(pancakes):
    plan = plan_deduction(pancakes, 4, [stock("flour", 1, Unit.CUP)])
    assert plan.result.success is False
    assert plan.result.deducted == []
    assert plan.result.errors == ["Cannot prepare recipe: missing ingredients - flour"]
    assert plan.new_quantities == {}


def test_repeated_ingredient_is_checked_against_what_is_left():
    recipe = make_recipe("Double", 1, ("flour", 1, Unit.CUP, False), ("flour", 1, Unit.CUP, False))
    inventory = [stock("flour", 1.5, Unit.CUP)]

    check = validate_preparation(recipe, 1, inventory)
    assert check.can_prepare is False
    assert [m.model_dump() for m in check.missing] == [
        {"name": "flour", "needed": 1, "available": 0.5, "unit": "cup"}
    ]

    plan = plan_deduction(recipe, 1, inventory)
    assert plan.result.success is False
    assert plan.result.deducted == []
    assert plan.new_quantities == {}


def test_repeated_ingredient_in_mixed_units_fits_when_total_is_covered():
    recipe = make_recipe("Bread", 1, ("flour", 500, Unit.GRAM, False), ("flour", 0.5, Unit.KILOGRAM, False))
    inventory = [stock("flour", 1, Unit.KILOGRAM)]
    assert validate_preparation(recipe, 1, inventory).can_prepare is True
    plan = plan_deduction(recipe, 1, inventory)
    assert plan.result.success is True
    assert plan.new_quantities == {"inv-flour": pytest.approx(0)}


def test_synthesis_merges_convertible_units_and_subtracts_inventory():
    first = make_recipe("Pancakes", 4, ("flour", 1, Unit.CUP, False))
    second = make_recipe("Waffles", 2, ("Flour", 236.588, Unit.MILLILITER, False))
    inventory = [stock("flour", 0.5, Unit.CUP, store_id="store-1")]
    result = synthesize_shopping_items(
        [RecipeRequest(recipe=first), RecipeRequest(recipe=second)],
        inventory,
    )
    assert len(result.items) == 1
    line = result.items[0]
    assert line.unit == Unit.CUP
    assert line.needed_quantity == 1.5
    assert line.store_id == "store-1"
    assert [s.recipe_name for s in line.recipe_sources] == ["Pancakes", "Waffles"]


def test_synthesis_skips_unconvertible_contribution_with_warning():
    first = make_recipe("Soup", 1, ("salt", 1, Unit.PINCH, False))
    second = make_recipe("Brine", 1, ("salt", 5, Unit.GRAM, False))
    result = synthesize_shopping_items([RecipeRequest(recipe=first), RecipeRequest(recipe=second)], [])
    assert len(result.items) == 1
    assert (result.items[0].needed_quantity, result.items[0].unit) == (1, Unit.PINCH)
    assert len(result.warnings) == 1
    assert "salt" in result.warnings[0]


def test_synthesis_adopts_new_unit_while_total_is_zero():
    first = make_recipe("Garnish", 1, ("salt", 0, Unit.PINCH, False))
    second = make_recipe("Brine", 1, ("salt", 5, Unit.GRAM, False))
    result = synthesize_shopping_items([RecipeRequest(recipe=first), RecipeRequest(recipe=second)], [])
    assert (result.items[0].needed_quantity, result.items[0].unit) == (5, Unit.GRAM)
    assert result.warnings == []


def test_synthesis_drops_lines_covered_by_inventory():
    recipe = make_recipe("Omelette", 1, ("egg", 3, Unit.PIECE, False), ("milk", 100, Unit.MILLILITER, False))
    inventory = [stock("egg", 3, Unit.PIECE), stock("milk", 99.995, Unit.MILLILITER)]
    result = synthesize_shopping_items([RecipeRequest(recipe=recipe)], inventory)
    assert result.items == []


def test_synthesis_includes_optional_only_when_requested():
    recipe = make_recipe("Pancakes", 4, ("flour", 2, Unit.CUP, False), ("Blueberries", 100, Unit.GRAM, True))
    without = synthesize_shopping_items([RecipeRequest(recipe=recipe)], [])
    with_berries = synthesize_shopping_items([RecipeRequest(recipe=recipe, include_optional=["blueberry"])], [])
    assert [i.ingredient_name for i in without.items] == ["flour"]
    assert [i.ingredient_name for i in with_berries.items] == ["flour", "blueberry"]
