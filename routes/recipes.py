from __future__ import annotations

import json
from typing import List

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile

from core.errors import BadRequestError
from models.preparation import DeductionResult, PreparationCheck
from models.recipe import (
    MAX_SERVINGS,
    Recipe,
    RecipeCreate,
    RecipeImportResult,
    RecipeIngredient,
    RecipeIngredientUpdate,
    RecipeUpdate,
    ScaledRecipe,
    ServingsRequest,
)
from models.user import User
from routes.deps import get_current_user
from services.preparation_service import preparation_service
from services.recipe_import_service import recipe_import_service
from services.recipe_service import recipe_service

router = APIRouter()


@router.get("", response_model=List[Recipe])
async def list_recipes(
    q: str | None = None,
    tag: str | None = None,
    user: User = Depends(get_current_user),
) -> List[Recipe]:
    return recipe_service.list_recipes(user.id, query=q, tag=tag)


@router.post("", response_model=Recipe, status_code=201)
async def create_recipe(payload: RecipeCreate, user: User = Depends(get_current_user)) -> Recipe:
    return recipe_service.add_recipe(user.id, payload)


@router.post("/import", response_model=RecipeImportResult)
async def import_recipes(file: UploadFile = File(...), user: User = Depends(get_current_user)) -> RecipeImportResult:
    """Läs JSON med {"recipes": [...]} eller en ren lista och skapa recepten."""
    content = await file.read()
    try:
        payload = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise BadRequestError("Invalid JSON file")
    return recipe_import_service.import_payload(user.id, payload)


@router.put("/ingredients/{ingredient_id}", response_model=Recipe)
async def update_ingredient(
    ingredient_id: str, payload: RecipeIngredientUpdate, user: User = Depends(get_current_user)
) -> Recipe:
    return recipe_service.update_ingredient(user.id, ingredient_id, payload)


@router.delete("/ingredients/{ingredient_id}", response_model=Recipe)
async def delete_ingredient(ingredient_id: str, user: User = Depends(get_current_user)) -> Recipe:
    return recipe_service.delete_ingredient(user.id, ingredient_id)


@router.get("/{recipe_id}", response_model=Recipe)
async def get_recipe(recipe_id: str, user: User = Depends(get_current_user)) -> Recipe:
    return recipe_service.get_recipe(user.id, recipe_id)


@router.put("/{recipe_id}", response_model=Recipe)
async def update_recipe(recipe_id: str, payload: RecipeUpdate, user: User = Depends(get_current_user)) -> Recipe:
    return recipe_service.update_recipe(user.id, recipe_id, payload)


@router.delete("/{recipe_id}", status_code=204)
async def delete_recipe(recipe_id: str, user: User = Depends(get_current_user)) -> Response:
    recipe_service.delete_recipe(user.id, recipe_id)
    return Response(status_code=204)


@router.post("/{recipe_id}/ingredients", response_model=Recipe, status_code=201)
async def add_ingredient(
    recipe_id: str, payload: RecipeIngredient, user: User = Depends(get_current_user)
) -> Recipe:
    return recipe_service.add_ingredient(user.id, recipe_id, payload)


@router.get("/{recipe_id}/scaled", response_model=ScaledRecipe)
async def scaled_recipe(
    recipe_id: str,
    servings: int = Query(..., ge=1, le=MAX_SERVINGS),
    user: User = Depends(get_current_user),
) -> ScaledRecipe:
    return preparation_service.scale(user.id, recipe_id, servings)


@router.get("/{recipe_id}/availability", response_model=PreparationCheck)
async def availability(
    recipe_id: str,
    servings: int | None = Query(None, ge=1, le=MAX_SERVINGS),
    user: User = Depends(get_current_user),
) -> PreparationCheck:
    return preparation_service.check(user.id, recipe_id, servings)


@router.post("/{recipe_id}/prepare", response_model=DeductionResult)
async def prepare_recipe(
    recipe_id: str, payload: ServingsRequest, user: User = Depends(get_current_user)
) -> DeductionResult:
    return preparation_service.prepare(user.id, recipe_id, payload.servings)
