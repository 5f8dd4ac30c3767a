from __future__ import annotations

from typing import List, Literal

from fastapi import APIRouter, Depends, Query, Response

from models.review import RecipeReviews, Review, ReviewCreate, ReviewUpdate
from models.user import User
from routes.deps import get_current_user
from services.review_service import review_service

router = APIRouter()

SortBy = Literal["created_at", "rating"]
SortOrder = Literal["asc", "desc"]


@router.get("/recipes/{recipe_id}/reviews", response_model=RecipeReviews)
async def list_recipe_reviews(
    recipe_id: str,
    sort_by: SortBy = Query("created_at"),
    sort_order: SortOrder = Query("desc"),
    user: User = Depends(get_current_user),
) -> RecipeReviews:
    """Betyg för ett recept med snittbetyg."""
    return review_service.list_for_recipe(user.id, recipe_id, sort_by, sort_order)


@router.post("/recipes/{recipe_id}/reviews", response_model=Review, status_code=201)
async def add_recipe_review(recipe_id: str, payload: ReviewCreate, user: User = Depends(get_current_user)) -> Review:
    return review_service.add_review(user.id, recipe_id, payload)


@router.get("/reviews/my-reviews", response_model=List[Review])
async def my_reviews(
    sort_by: SortBy = Query("created_at"),
    sort_order: SortOrder = Query("desc"),
    user: User = Depends(get_current_user),
) -> List[Review]:
    return review_service.list_mine(user.id, sort_by, sort_order)


@router.put("/reviews/{review_id}", response_model=Review)
async def update_review(review_id: str, payload: ReviewUpdate, user: User = Depends(get_current_user)) -> Review:
    return review_service.update_review(user.id, review_id, payload)


@router.delete("/reviews/{review_id}", status_code=204)
async def delete_review(review_id: str, user: User = Depends(get_current_user)) -> Response:
    review_service.delete_review(user.id, review_id)
    return Response(status_code=204)
