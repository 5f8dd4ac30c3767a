from __future__ import annotations

import re
from typing import Iterable, List

from models.recipe import RecipeIngredient, ScaledIngredient
from models.units import Unit

_WHITESPACE = re.compile(r"\s+")

# Ord som slutar på s men inte är plural
_INVARIANT_WORDS = {
    "asparagus",
    "couscous",
    "molasses",
    "hummus",
    "swiss",
    "citrus",
    "watercress",
    "grits",
    "oats",
    "series",
    "species",
}

_DISCRETE_UNITS = {Unit.PIECE, Unit.NONE}


def _singularize(word: str) -> str:
    if len(word) <= 3 or word in _INVARIANT_WORDS:
        return word
    if word.endswith("ies") and len(word) > 4:
        return word[:-3] + "y"
    if word.endswith("oes"):
        return word[:-2]
    if word.endswith(("ches", "shes", "sses", "xes", "zes")):
        return word[:-2]
    if word.endswith("s") and not word.endswith(("ss", "us", "is")):
        return word[:-1]
    return word


def normalize_ingredient_name(name: str) -> str:
    """Kanonisk nyckel för matchning mellan recept, lager och inköpslistor.

    "  Cherry   Tomatoes " och "cherry tomato" ger samma nyckel. Bara sista
    ordet görs singular, så "eggs of quail" lämnas i fred.
    """
    collapsed = _WHITESPACE.sub(" ", name.strip().lower())
    if not collapsed:
        return ""
    words = collapsed.split(" ")
    words[-1] = _singularize(words[-1])
    return " ".join(words)


def scaling_factor(requested_servings: float, default_servings: float) -> float:
    if default_servings <= 0:
        raise ValueError("default_servings must be positive")
    return requested_servings / default_servings


def format_quantity(quantity: float, unit: Unit | str | None = None) -> str:
    """Visningsvänlig mängd; styckvaror avrundas till heltal."""
    if quantity < 0.001:
        return "0"
    unit_value = unit.value if isinstance(unit, Unit) else (unit or "")
    if unit_value in {u.value for u in _DISCRETE_UNITS}:
        return str(int(round(quantity)))
    if quantity < 0.1:
        text = f"{quantity:.3f}"
    elif quantity < 1:
        text = f"{quantity:.2f}"
    elif quantity < 10:
        text = f"{quantity:.1f}"
    else:
        text = f"{round(quantity, 2):.2f}"
    return text.rstrip("0").rstrip(".") if "." in text else text


def scale_ingredients(
    ingredients: Iterable[RecipeIngredient],
    requested_servings: float,
    default_servings: float,
) -> List[ScaledIngredient]:
    """Skala varje ingrediens med requested/default portioner."""
    factor = scaling_factor(requested_servings, default_servings)
    scaled: List[ScaledIngredient] = []
    for ingredient in ingredients:
        quantity = ingredient.quantity * factor
        scaled.append(
            ScaledIngredient(
                **ingredient.model_dump(),
                scaled_quantity=quantity,
                display_quantity=format_quantity(quantity, ingredient.unit),
            )
        )
    return scaled


__all__ = ["format_quantity", "normalize_ingredient_name", "scale_ingredients", "scaling_factor"]
