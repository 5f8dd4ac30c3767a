from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class MissingIngredient(BaseModel):
    name: str
    needed: float
    available: float
    unit: str


class PreparationCheck(BaseModel):
    can_prepare: bool
    missing: List[MissingIngredient] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class DeductedIngredient(BaseModel):
    name: str
    amount_deducted: float = Field(..., description="Avdragen mängd i receptets enhet")
    unit: str = Field(..., description="Receptets enhet")
    remaining: float = Field(..., description="Kvar i lagret, i lagerpostens enhet")


class DeductionResult(BaseModel):
    success: bool
    deducted: List[DeductedIngredient] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
