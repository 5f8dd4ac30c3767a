"""Avstämning mellan recept och lager.

Rena funktioner utan databas: kontroll av om lagret räcker, planering av
avdrag när ett recept lagas och beräkning av vad som behöver köpas. Tjänsterna
i preparation_service och shopping_service läser/skriver databasen runt dessa.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Collection, Dict, Iterable, List, Optional, Sequence

from models.inventory import InventoryItem
from models.preparation import DeductedIngredient, DeductionResult, MissingIngredient, PreparationCheck
from models.recipe import Recipe
from models.shopping_list import RecipeSource, ShoppingItem
from models.units import Unit, convert_quantity
from services.ingredient_utils import normalize_ingredient_name, scaling_factor

# Rester under detta blir aldrig en inköpsrad (flyttalsbrus efter omräkning)
SHOPPING_EPSILON = 0.01


def _covers(available: float, needed: float) -> bool:
    return available >= needed or math.isclose(available, needed, rel_tol=1e-9, abs_tol=1e-9)


def _unit_label(unit: Unit) -> str:
    return unit.value or "none"


def _item_key(item: InventoryItem) -> str:
    return item.id or item.ingredient_name


def find_inventory_item(inventory: Iterable[InventoryItem], name: str) -> Optional[InventoryItem]:
    """Första lagerpost vars normaliserade namn matchar."""
    key = normalize_ingredient_name(name)
    for item in inventory:
        if normalize_ingredient_name(item.ingredient_name) == key:
            return item
    return None


def validate_preparation(recipe: Recipe, servings: int, inventory: Sequence[InventoryItem]) -> PreparationCheck:
    """Kontrollera att lagret täcker alla obligatoriska ingredienser.

    Förekommer samma ingrediens flera gånger räknas den mot det som återstår
    efter tidigare rader, på samma sätt som avdraget gör.
    """
    factor = scaling_factor(servings, recipe.default_servings)
    missing: List[MissingIngredient] = []
    warnings: List[str] = []
    # Redan intecknad mängd per lagerpost, i lagerpostens enhet
    claimed: Dict[str, float] = {}

    for ingredient in recipe.ingredients:
        if ingredient.is_optional:
            continue
        needed = ingredient.quantity * factor
        item = find_inventory_item(inventory, ingredient.ingredient_name)
        if item is None:
            missing.append(
                MissingIngredient(name=ingredient.ingredient_name, needed=needed, available=0, unit=ingredient.unit.value)
            )
            continue

        key = _item_key(item)
        on_hand = max(0.0, item.quantity - claimed.get(key, 0.0))
        available = convert_quantity(on_hand, item.unit, ingredient.unit)
        if available is None:
            warnings.append(
                f"Cannot convert {_unit_label(item.unit)} to {_unit_label(ingredient.unit)} for {ingredient.ingredient_name}"
            )
            available = 0.0
        elif _covers(available, needed):
            claimed[key] = claimed.get(key, 0.0) + (convert_quantity(needed, ingredient.unit, item.unit) or 0.0)

        if not _covers(available, needed):
            missing.append(
                MissingIngredient(
                    name=ingredient.ingredient_name,
                    needed=needed,
                    available=available,
                    unit=ingredient.unit.value,
                )
            )

    return PreparationCheck(can_prepare=not missing, missing=missing, warnings=warnings)


@dataclass
class DeductionPlan:
    result: DeductionResult
    # Nya saldon per lagerpost-ID, bara för poster som berörs
    new_quantities: Dict[str, float] = field(default_factory=dict)


def plan_deduction(recipe: Recipe, servings: int, inventory: Sequence[InventoryItem]) -> DeductionPlan:
    """Räkna ut avdragen för att laga receptet, i ingredienslistans ordning.

    Validerar först; om något saknas görs inga avdrag alls. Fel per ingrediens
    (omräkning, otillräckligt saldo) samlas i errors och ingrediensen hoppas
    över. Planen skrivs aldrig själv till databasen.
    """
    check = validate_preparation(recipe, servings, inventory)
    if not check.can_prepare:
        names = ", ".join(m.name for m in check.missing)
        return DeductionPlan(
            result=DeductionResult(success=False, errors=[f"Cannot prepare recipe: missing ingredients - {names}"])
        )

    factor = scaling_factor(servings, recipe.default_servings)
    remaining = {_item_key(item): item.quantity for item in inventory}
    touched: Dict[str, float] = {}
    deducted: List[DeductedIngredient] = []
    errors: List[str] = []

    for ingredient in recipe.ingredients:
        if ingredient.is_optional:
            continue
        needed = ingredient.quantity * factor
        item = find_inventory_item(inventory, ingredient.ingredient_name)
        if item is None:
            errors.append(f"Ingredient not found in inventory: {ingredient.ingredient_name}")
            continue

        amount = convert_quantity(needed, ingredient.unit, item.unit)
        if amount is None:
            errors.append(f"Cannot convert units for {ingredient.ingredient_name} to perform deduction.")
            continue

        key = _item_key(item)
        current = remaining[key]
        if not _covers(current, amount):
            errors.append(f"Insufficient quantity for {ingredient.ingredient_name} after unit conversion.")
            continue

        new_quantity = max(0.0, current - amount)
        remaining[key] = new_quantity
        touched[key] = new_quantity
        deducted.append(
            DeductedIngredient(
                name=ingredient.ingredient_name,
                amount_deducted=needed,
                unit=ingredient.unit.value,
                remaining=new_quantity,
            )
        )

    return DeductionPlan(
        result=DeductionResult(success=not errors, deducted=deducted, errors=errors),
        new_quantities=touched,
    )


@dataclass
class RecipeRequest:
    recipe: Recipe
    servings: Optional[int] = None
    include_optional: Collection[str] = ()


@dataclass
class _Need:
    unit: Unit
    total: float = 0.0
    store_id: Optional[str] = None
    sources: List[RecipeSource] = field(default_factory=list)


@dataclass
class SynthesisResult:
    items: List[ShoppingItem]
    warnings: List[str] = field(default_factory=list)


def synthesize_shopping_items(
    requests: Sequence[RecipeRequest],
    inventory: Sequence[InventoryItem],
) -> SynthesisResult:
    """Summera behov per normaliserat namn och dra av det som redan finns hemma.

    Mängder summeras i den först sedda enheten för namnet. Går en senare post
    inte att räkna om tar den över bara om summan fortfarande är noll, annars
    hoppas den över med en varning.
    """
    needs: Dict[str, _Need] = {}
    warnings: List[str] = []

    for request in requests:
        recipe = request.recipe
        servings = request.servings or recipe.default_servings
        factor = scaling_factor(servings, recipe.default_servings)
        optional_keys = {normalize_ingredient_name(n) for n in request.include_optional}

        for ingredient in recipe.ingredients:
            key = normalize_ingredient_name(ingredient.ingredient_name)
            if ingredient.is_optional and key not in optional_keys:
                continue
            scaled = ingredient.quantity * factor
            stocked = find_inventory_item(inventory, key)

            entry = needs.get(key)
            if entry is None:
                entry = needs[key] = _Need(unit=ingredient.unit)

            converted = convert_quantity(scaled, ingredient.unit, entry.unit)
            if converted is not None:
                entry.total += converted
            elif entry.total == 0:
                entry.unit = ingredient.unit
                entry.total = scaled
            else:
                warnings.append(
                    f"Could not convert {_unit_label(ingredient.unit)} to {_unit_label(entry.unit)} "
                    f"for {key} in {recipe.name}; amount left out"
                )
                continue

            entry.sources.append(RecipeSource(recipe_name=recipe.name, quantity=scaled))
            if not entry.store_id and stocked is not None and stocked.default_store_id:
                entry.store_id = stocked.default_store_id

    items: List[ShoppingItem] = []
    for key, entry in needs.items():
        to_buy = entry.total
        stocked = find_inventory_item(inventory, key)
        if stocked is not None:
            on_hand = convert_quantity(stocked.quantity, stocked.unit, entry.unit)
            if on_hand is not None:
                to_buy -= on_hand

        rounded = round(to_buy, 2)
        if rounded > SHOPPING_EPSILON:
            items.append(
                ShoppingItem(
                    ingredient_name=key,
                    needed_quantity=rounded,
                    unit=entry.unit,
                    store_id=entry.store_id,
                    recipe_sources=entry.sources,
                )
            )

    return SynthesisResult(items=items, warnings=warnings)


__all__ = [
    "SHOPPING_EPSILON",
    "DeductionPlan",
    "RecipeRequest",
    "SynthesisResult",
    "find_inventory_item",
    "plan_deduction",
    "synthesize_shopping_items",
    "validate_preparation",
]
