from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter

from models.units import UnitCategory, get_units_by_category

router = APIRouter()

_CATEGORIES = [UnitCategory.WEIGHT, UnitCategory.VOLUME, UnitCategory.COUNT, UnitCategory.OTHER]


@router.get("")
async def list_units() -> Dict[str, List[dict]]:
    """Måttenheter grupperade per kategori, för formulär i klienten."""
    return {category: [unit.to_dict() for unit in get_units_by_category(category)] for category in _CATEGORIES}
