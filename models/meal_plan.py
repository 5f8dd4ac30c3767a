from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from models.recipe import MAX_SERVINGS


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class PlannedRecipe(BaseModel):
    id: Optional[str] = None
    recipe_id: str = Field(..., description="ID för receptet")
    recipe_name: Optional[str] = None
    meal_date: date = Field(..., description="Dag för måltiden")
    meal_type: MealType = MealType.DINNER
    servings: int = Field(1, ge=1)


class MealPlan(BaseModel):
    id: Optional[str] = None
    name: str
    start_date: date
    end_date: date
    recipes: List[PlannedRecipe] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MealPlanCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    start_date: date
    end_date: date


class MealPlanUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class PlannedRecipeCreate(BaseModel):
    recipe_id: str
    meal_date: date
    meal_type: MealType = MealType.DINNER
    servings: int = Field(1, ge=1, le=MAX_SERVINGS)
