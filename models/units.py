from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, List, Optional


class UnitCategory:
    """Tillåtna kategorier för köksmått."""

    WEIGHT = "weight"
    VOLUME = "volume"
    COUNT = "count"
    OTHER = "other"


class Unit(str, Enum):
    GRAM = "g"
    KILOGRAM = "kg"
    OUNCE = "oz"
    POUND = "lb"
    MILLILITER = "ml"
    LITER = "l"
    TEASPOON = "tsp"
    TABLESPOON = "tbsp"
    CUP = "cup"
    PIECE = "piece"
    PINCH = "pinch"
    DASH = "dash"
    NONE = ""


@dataclass(frozen=True)
class UnitDefinition:
    code: str
    name: str
    plural: str
    category: str
    # Faktor mot kategorins basenhet (g för vikt, ml för volym); None = ej konverterbar
    factor: Optional[float]

    def to_dict(self) -> Dict[str, str | float | None]:
        """Enkel serialisering till JSON-vänlig dict."""
        return asdict(self)


_UNITS: List[UnitDefinition] = [
    # Vikt
    UnitDefinition(Unit.GRAM.value, "gram", "grams", UnitCategory.WEIGHT, 1.0),
    UnitDefinition(Unit.KILOGRAM.value, "kilogram", "kilograms", UnitCategory.WEIGHT, 1000.0),
    UnitDefinition(Unit.OUNCE.value, "ounce", "ounces", UnitCategory.WEIGHT, 28.3495),
    UnitDefinition(Unit.POUND.value, "pound", "pounds", UnitCategory.WEIGHT, 453.592),
    # Volym (US-mått för tsk/msk/kopp)
    UnitDefinition(Unit.MILLILITER.value, "milliliter", "milliliters", UnitCategory.VOLUME, 1.0),
    UnitDefinition(Unit.LITER.value, "liter", "liters", UnitCategory.VOLUME, 1000.0),
    UnitDefinition(Unit.TEASPOON.value, "teaspoon", "teaspoons", UnitCategory.VOLUME, 4.92892),
    UnitDefinition(Unit.TABLESPOON.value, "tablespoon", "tablespoons", UnitCategory.VOLUME, 14.7868),
    UnitDefinition(Unit.CUP.value, "cup", "cups", UnitCategory.VOLUME, 236.588),
    # Styck
    UnitDefinition(Unit.PIECE.value, "piece", "pieces", UnitCategory.COUNT, None),
    # Övrigt – textuella mått utan omräkning
    UnitDefinition(Unit.PINCH.value, "pinch", "pinches", UnitCategory.OTHER, None),
    UnitDefinition(Unit.DASH.value, "dash", "dashes", UnitCategory.OTHER, None),
    UnitDefinition(Unit.NONE.value, "none", "none", UnitCategory.OTHER, None),
]

_UNITS_BY_CODE: Dict[str, UnitDefinition] = {unit.code: unit for unit in _UNITS}

_ALIASES: Dict[str, Unit] = {
    "gr": Unit.GRAM,
    "gramme": Unit.GRAM,
    "grammes": Unit.GRAM,
    "kgs": Unit.KILOGRAM,
    "kilo": Unit.KILOGRAM,
    "kilos": Unit.KILOGRAM,
    "ozs": Unit.OUNCE,
    "lbs": Unit.POUND,
    "ltr": Unit.LITER,
    "litre": Unit.LITER,
    "litres": Unit.LITER,
    "millilitre": Unit.MILLILITER,
    "millilitres": Unit.MILLILITER,
    "t": Unit.TEASPOON,
    "tsps": Unit.TEASPOON,
    "tbs": Unit.TABLESPOON,
    "tbl": Unit.TABLESPOON,
    "tbsps": Unit.TABLESPOON,
    "c": Unit.CUP,
    "pc": Unit.PIECE,
    "pcs": Unit.PIECE,
    "each": Unit.PIECE,
    "whole": Unit.PIECE,
}
for _unit in _UNITS:
    if _unit.code:
        _ALIASES.setdefault(_unit.code, Unit(_unit.code))
        _ALIASES.setdefault(_unit.name, Unit(_unit.code))
        _ALIASES.setdefault(_unit.plural, Unit(_unit.code))


def get_all_units() -> List[UnitDefinition]:
    """Returnera alla enheter i definierad ordning."""
    return list(_UNITS)


def get_units_by_category(category: str) -> List[UnitDefinition]:
    """Filtrera enheter per kategori (ex. UnitCategory.WEIGHT)."""
    return [u for u in _UNITS if u.category == category]


def get_unit(code: str | Unit) -> Optional[UnitDefinition]:
    """Hämta en enhet på kod, eller None om den inte finns."""
    key = code.value if isinstance(code, Unit) else code
    return _UNITS_BY_CODE.get(key)


def parse_unit(text: str | None) -> Optional[Unit]:
    """Tolka fritext ("Cups", "grams", "pcs") till en Unit.

    Tom text blir Unit.NONE, okänd text None.
    """
    if text is None:
        return Unit.NONE
    key = text.strip().lower().rstrip(".")
    if not key:
        return Unit.NONE
    return _ALIASES.get(key)


def can_convert(from_unit: str | Unit, to_unit: str | Unit) -> bool:
    return convert_quantity(1.0, from_unit, to_unit) is not None


def convert_quantity(quantity: float, from_unit: str | Unit, to_unit: str | Unit) -> Optional[float]:
    """Räkna om en mängd mellan två enheter i samma kategori.

    Samma enhet returnerar mängden oförändrad. Styck- och övriga mått går bara
    att "konvertera" till sig själva. Returnerar None när omräkning inte går;
    anroparen väljer själv hur det ska hanteras.
    """
    source = get_unit(from_unit)
    target = get_unit(to_unit)
    if source is None or target is None:
        return None
    if source.code == target.code:
        return quantity
    if source.factor is None or target.factor is None or source.category != target.category:
        return None
    return quantity * source.factor / target.factor


__all__ = [
    "Unit",
    "UnitCategory",
    "UnitDefinition",
    "can_convert",
    "convert_quantity",
    "get_all_units",
    "get_units_by_category",
    "get_unit",
    "parse_unit",
]
