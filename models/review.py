from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class Review(BaseModel):
    """Betyg och kommentar på ett recept; en per användare och recept."""

    id: str
    recipe_id: str
    recipe_name: Optional[str] = None
    user_id: str
    reviewer_name: Optional[str] = None
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5, description="Betyg 1-5")
    comment: Optional[str] = Field(None, max_length=1000)


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)


class RecipeReviews(BaseModel):
    recipe_id: str
    recipe_name: str
    total_reviews: int
    average_rating: Optional[float] = None
    reviews: List[Review] = Field(default_factory=list)
