from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from models.inventory import BatchFailure
from models.recipe import MAX_SERVINGS
from models.units import Unit


class ShoppingListStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class RecipeSource(BaseModel):
    recipe_name: str
    quantity: float


class ShoppingItem(BaseModel):
    id: Optional[str] = None
    ingredient_name: str = Field(..., description="Normaliserat ingrediensnamn")
    needed_quantity: float = Field(0, ge=0)
    unit: Unit = Unit.NONE
    purchased: bool = False
    store_id: Optional[str] = None
    recipe_sources: List[RecipeSource] = Field(default_factory=list)
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ShoppingList(BaseModel):
    id: Optional[str] = None
    name: str
    notes: Optional[str] = None
    status: ShoppingListStatus = ShoppingListStatus.ACTIVE
    items: List[ShoppingItem] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None


class ShoppingListCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    notes: Optional[str] = None


class ShoppingListUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    notes: Optional[str] = None


class ShoppingItemCreate(BaseModel):
    ingredient_name: str = Field(..., min_length=1, max_length=255)
    needed_quantity: float = Field(1, gt=0)
    unit: Unit = Unit.NONE
    store_id: Optional[str] = None
    notes: Optional[str] = None


class ShoppingItemUpdate(BaseModel):
    ingredient_name: Optional[str] = Field(None, min_length=1, max_length=255)
    needed_quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[Unit] = None
    purchased: Optional[bool] = None
    store_id: Optional[str] = None
    notes: Optional[str] = None


class BulkItemChange(BaseModel):
    id: str
    purchased: bool


class BulkItemUpdateRequest(BaseModel):
    items: List[BulkItemChange] = Field(..., min_length=1, max_length=500)


class BulkItemUpdateResult(BaseModel):
    succeeded: List[str] = Field(default_factory=list)
    failed: List[BatchFailure] = Field(default_factory=list)
    shopping_list: ShoppingList


class RecipeSelection(BaseModel):
    recipe_id: str
    servings: Optional[int] = Field(None, ge=1, le=MAX_SERVINGS, description="Standardportioner om utelämnat")
    include_optional: List[str] = Field(default_factory=list, description="Valfria ingredienser som ska med")


class GenerateShoppingListRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    recipes: List[RecipeSelection] = Field(..., min_length=1)


class GenerateShoppingListResponse(BaseModel):
    created: bool
    message: str
    shopping_list: Optional[ShoppingList] = None
    warnings: List[str] = Field(default_factory=list)
