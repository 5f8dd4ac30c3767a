from __future__ import annotations

import pytest

from models.units import Unit, UnitCategory, can_convert, convert_quantity, get_unit, get_units_by_category, parse_unit


def test_same_unit_returns_quantity_unchanged():
    assert convert_quantity(3.5, Unit.CUP, Unit.CUP) == 3.5
    assert convert_quantity(2, Unit.PIECE, Unit.PIECE) == 2
    assert convert_quantity(1, Unit.NONE, Unit.NONE) == 1


@pytest.mark.parametrize(
    "quantity, source, target, expected",
    [
        (1, Unit.KILOGRAM, Unit.GRAM, 1000),
        (500, Unit.GRAM, Unit.KILOGRAM, 0.5),
        (1, Unit.POUND, Unit.OUNCE, 453.592 / 28.3495),
        (1, Unit.CUP, Unit.MILLILITER, 236.588),
        (3, Unit.TEASPOON, Unit.TABLESPOON, 3 * 4.92892 / 14.7868),
        (2, Unit.LITER, Unit.MILLILITER, 2000),
    ],
)
def test_converts_within_family(quantity, source, target, expected):
    assert convert_quantity(quantity, source, target) == pytest.approx(expected)


@pytest.mark.parametrize(
    "source, target",
    [
        (Unit.GRAM, Unit.CUP),
        (Unit.PIECE, Unit.GRAM),
        (Unit.PINCH, Unit.DASH),
        (Unit.NONE, Unit.PIECE),
        ("furlong", Unit.GRAM),
    ],
)
def test_incompatible_units_cannot_convert(source, target):
    assert convert_quantity(1, source, target) is None
    assert not can_convert(source, target)


def test_accepts_plain_codes():
    assert convert_quantity(1, "kg", "g") == 1000


def test_parse_unit_aliases():
    assert parse_unit("Cups") is Unit.CUP
    assert parse_unit("tablespoons") is Unit.TABLESPOON
    assert parse_unit(" grams ") is Unit.GRAM
    assert parse_unit("pcs") is Unit.PIECE
    assert parse_unit("tsp.") is Unit.TEASPOON
    assert parse_unit("") is Unit.NONE
    assert parse_unit(None) is Unit.NONE
    assert parse_unit("handful") is None


def test_unit_table_grouping():
    weight_codes = [u.code for u in get_units_by_category(UnitCategory.WEIGHT)]
    assert weight_codes == ["g", "kg", "oz", "lb"]
    assert get_unit(Unit.PIECE).category == UnitCategory.COUNT
    assert get_unit("nope") is None


def _same_family_pairs():
    pairs = []
    for category in (UnitCategory.WEIGHT, UnitCategory.VOLUME):
        codes = [u.code for u in get_units_by_category(category)]
        pairs.extend((a, b) for a in codes for b in codes)
    # Styck och övriga mått går bara mot sig själva
    for category in (UnitCategory.COUNT, UnitCategory.OTHER):
        pairs.extend((u.code, u.code) for u in get_units_by_category(category))
    return pairs


@pytest.mark.parametrize("source, target", _same_family_pairs())
@pytest.mark.parametrize("quantity", [0.25, 3, 1234.5])
def test_round_trip_returns_original_quantity(quantity, source, target):
    there = convert_quantity(quantity, source, target)
    assert there is not None
    assert convert_quantity(there, target, source) == pytest.approx(quantity)
