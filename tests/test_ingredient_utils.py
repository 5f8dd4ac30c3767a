from __future__ import annotations

import pytest

from models.recipe import RecipeIngredient
from models.units import Unit
from services.ingredient_utils import format_quantity, normalize_ingredient_name, scale_ingredients, scaling_factor


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  Cherry   Tomatoes ", "cherry tomato"),
        ("Eggs", "egg"),
        ("berries", "berry"),
        ("potatoes", "potato"),
        ("peaches", "peach"),
        ("radishes", "radish"),
        ("glasses", "glass"),
        ("boxes", "box"),
        ("asparagus", "asparagus"),
        ("Oats", "oats"),
        ("hummus", "hummus"),
        ("swiss cheese", "swiss cheese"),
        ("gas", "gas"),
        ("", ""),
    ],
)
def test_normalize_ingredient_name(raw, expected):
    assert normalize_ingredient_name(raw) == expected


@pytest.mark.parametrize("raw", ["Tomatoes", "cherries", "dishes", "lentils", "Brown  Sugar", "peas", "bus stops"])
def test_normalize_is_idempotent(raw):
    once = normalize_ingredient_name(raw)
    assert normalize_ingredient_name(once) == once


def test_scaling_factor():
    assert scaling_factor(2, 4) == 0.5
    assert scaling_factor(4, 4) == 1
    with pytest.raises(ValueError):
        scaling_factor(2, 0)


def test_scale_ingredients_identity_at_default_servings():
    ingredients = [
        RecipeIngredient(ingredient_name="flour", quantity=2, unit=Unit.CUP),
        RecipeIngredient(ingredient_name="egg", quantity=3, unit=Unit.PIECE),
    ]
    scaled = scale_ingredients(ingredients, 4, 4)
    assert [s.scaled_quantity for s in scaled] == [2, 3]
    assert [s.quantity for s in scaled] == [2, 3]


def test_scale_ingredients_halves_and_formats():
    ingredients = [
        RecipeIngredient(ingredient_name="flour", quantity=2, unit=Unit.CUP),
        RecipeIngredient(ingredient_name="egg", quantity=3, unit=Unit.PIECE),
    ]
    flour, egg = scale_ingredients(ingredients, 2, 4)
    assert flour.scaled_quantity == 1
    assert flour.display_quantity == "1"
    assert egg.scaled_quantity == 1.5
    assert egg.display_quantity == "2"


@pytest.mark.parametrize(
    "quantity, unit, expected",
    [
        (0.0001, Unit.GRAM, "0"),
        (0.0333, Unit.CUP, "0.033"),
        (0.5, Unit.CUP, "0.5"),
        (2.34, Unit.TABLESPOON, "2.3"),
        (12.3456, Unit.GRAM, "12.35"),
        (150, Unit.GRAM, "150"),
        (2.6, Unit.PIECE, "3"),
        (1.2, Unit.NONE, "1"),
    ],
)
def test_format_quantity(quantity, unit, expected):
    assert format_quantity(quantity, unit) == expected
