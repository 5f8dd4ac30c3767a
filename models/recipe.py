from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from models.units import Unit

MAX_SERVINGS = 50


class RecipeIngredient(BaseModel):
    id: Optional[str] = Field(None, description="Primärnyckel för ingrediensraden")
    ingredient_name: str = Field(..., min_length=1, max_length=255, description="Ingrediensnamn")
    quantity: float = Field(0, ge=0, description="Mängd för receptets standardportioner")
    unit: Unit = Field(Unit.NONE, description="Måttenhet")
    is_optional: bool = Field(False, description="Valfri ingrediens, räknas inte vid avdrag/inköp")
    notes: Optional[str] = Field(None, description="Tillagningsnotering, t.ex. 'hackad'")


class ScaledIngredient(RecipeIngredient):
    scaled_quantity: float
    display_quantity: str


class Recipe(BaseModel):
    id: Optional[str] = Field(None, description="Primärnyckel")
    name: str = Field(..., description="Receptets namn")
    description: Optional[str] = None
    instructions: str = Field("", description="Instruktioner, en rad per steg")
    default_servings: int = Field(..., ge=1, description="Antal portioner som mängderna avser")
    ingredients: List[RecipeIngredient] = Field(default_factory=list)
    prep_time: Optional[str] = Field(None, description="Förberedelsetid, t.ex. '15 minutes'")
    cook_time: Optional[str] = Field(None, description="Tillagningstid")
    tags: List[str] = Field(default_factory=list)
    image_url: Optional[str] = Field(None, description="Länk till bild")
    source_name: Optional[str] = None
    source_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RecipeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    instructions: str = ""
    default_servings: int = Field(..., ge=1, le=MAX_SERVINGS)
    ingredients: List[RecipeIngredient] = Field(default_factory=list)
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None
    source_name: Optional[str] = None
    source_url: Optional[str] = None


class RecipeUpdate(BaseModel):
    """Partiell uppdatering: bara fält som faktiskt skickats sätts."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    instructions: Optional[str] = None
    default_servings: Optional[int] = Field(None, ge=1, le=MAX_SERVINGS)
    ingredients: Optional[List[RecipeIngredient]] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    tags: Optional[List[str]] = None
    image_url: Optional[str] = None
    source_name: Optional[str] = None
    source_url: Optional[str] = None


class RecipeIngredientUpdate(BaseModel):
    ingredient_name: Optional[str] = Field(None, min_length=1, max_length=255)
    quantity: Optional[float] = Field(None, ge=0)
    unit: Optional[Unit] = None
    is_optional: Optional[bool] = None
    notes: Optional[str] = None


class ScaledRecipe(BaseModel):
    recipe_id: str
    name: str
    default_servings: int
    servings: int
    scaling_factor: float
    ingredients: List[ScaledIngredient]


class ServingsRequest(BaseModel):
    servings: int = Field(..., ge=1, le=MAX_SERVINGS, description="Antal portioner som lagas")


class RecipeImportResult(BaseModel):
    imported: int
    total: int
    skipped: List[str] = Field(default_factory=list)
