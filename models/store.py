from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Store(BaseModel):
    id: Optional[str] = Field(None, description="Primärnyckel")
    name: str = Field(..., description="Butikens namn")
    location: Optional[str] = Field(None, description="Adress eller område")
    website: Optional[str] = Field(None, description="Webbplats")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StoreCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    location: Optional[str] = Field(None, max_length=500)
    website: Optional[str] = Field(None, max_length=500)


class StoreUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, max_length=500)
    website: Optional[str] = Field(None, max_length=500)
