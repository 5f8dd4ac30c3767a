from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from models.units import Unit


class FrequencyOfUse(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    OCCASIONAL = "occasional"
    RARELY = "rarely"
    OTHER = "other"


class InventoryItem(BaseModel):
    id: Optional[str] = Field(None, description="Primärnyckel")
    ingredient_name: str = Field(..., description="Normaliserat ingrediensnamn")
    quantity: float = Field(0, ge=0, description="Aktuellt saldo")
    unit: Unit = Unit.NONE
    low_stock_threshold: Optional[float] = Field(None, ge=0)
    expiration_date: Optional[date] = None
    location: Optional[str] = Field(None, description="Förvaringsplats, t.ex. 'kyl'")
    frequency_of_use: Optional[FrequencyOfUse] = None
    default_store_id: Optional[str] = Field(None, description="Butik där varan brukar köpas")
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_low_stock: bool = False
    is_expired: bool = False
    is_expiring_soon: bool = False
    days_until_expiry: Optional[int] = None


class InventoryItemCreate(BaseModel):
    ingredient_name: str = Field(..., min_length=1, max_length=255)
    quantity: float = Field(0, ge=0)
    unit: Unit = Unit.NONE
    low_stock_threshold: Optional[float] = Field(None, ge=0)
    expiration_date: Optional[date] = None
    location: Optional[str] = Field(None, max_length=100)
    frequency_of_use: Optional[FrequencyOfUse] = None
    default_store_id: Optional[str] = None
    notes: Optional[str] = None


class InventoryItemUpdate(BaseModel):
    """Partiell uppdatering; explicit null nollställer valfria fält."""

    ingredient_name: Optional[str] = Field(None, min_length=1, max_length=255)
    quantity: Optional[float] = Field(None, ge=0)
    unit: Optional[Unit] = None
    low_stock_threshold: Optional[float] = Field(None, ge=0)
    expiration_date: Optional[date] = None
    location: Optional[str] = Field(None, max_length=100)
    frequency_of_use: Optional[FrequencyOfUse] = None
    default_store_id: Optional[str] = None
    notes: Optional[str] = None


class BatchIdsRequest(BaseModel):
    ids: List[str] = Field(..., min_length=1, max_length=500)


class BatchFailure(BaseModel):
    id: str
    reason: str


class BatchResult(BaseModel):
    succeeded: List[str] = Field(default_factory=list)
    failed: List[BatchFailure] = Field(default_factory=list)
