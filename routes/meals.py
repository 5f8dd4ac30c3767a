from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, Response

from models.meal_plan import MealPlan, MealPlanCreate, MealPlanUpdate, PlannedRecipeCreate
from models.shopping_list import GenerateShoppingListResponse
from models.user import User
from routes.deps import get_current_user
from services.meal_service import meal_service

router = APIRouter()


@router.get("/plans", response_model=List[MealPlan])
async def list_plans(
    start: date | None = Query(None, alias="from"),
    end: date | None = Query(None, alias="to"),
    user: User = Depends(get_current_user),
) -> List[MealPlan]:
    return meal_service.list_plans(user.id, start=start, end=end)


@router.post("/plans", response_model=MealPlan, status_code=201)
async def create_plan(payload: MealPlanCreate, user: User = Depends(get_current_user)) -> MealPlan:
    return meal_service.create_plan(user.id, payload)


@router.get("/plans/{plan_id}", response_model=MealPlan)
async def get_plan(plan_id: str, user: User = Depends(get_current_user)) -> MealPlan:
    return meal_service.get_plan(user.id, plan_id)


@router.put("/plans/{plan_id}", response_model=MealPlan)
async def update_plan(plan_id: str, payload: MealPlanUpdate, user: User = Depends(get_current_user)) -> MealPlan:
    return meal_service.update_plan(user.id, plan_id, payload)


@router.delete("/plans/{plan_id}", status_code=204)
async def delete_plan(plan_id: str, user: User = Depends(get_current_user)) -> Response:
    meal_service.delete_plan(user.id, plan_id)
    return Response(status_code=204)


@router.post("/plans/{plan_id}/recipes", response_model=MealPlan, status_code=201)
async def add_planned_recipe(
    plan_id: str, payload: PlannedRecipeCreate, user: User = Depends(get_current_user)
) -> MealPlan:
    return meal_service.add_recipe(user.id, plan_id, payload)


@router.delete("/plan-recipes/{planned_recipe_id}", response_model=MealPlan)
async def remove_planned_recipe(planned_recipe_id: str, user: User = Depends(get_current_user)) -> MealPlan:
    return meal_service.remove_recipe(user.id, planned_recipe_id)


@router.post("/plans/{plan_id}/shopping-list", response_model=GenerateShoppingListResponse)
async def plan_shopping_list(plan_id: str, user: User = Depends(get_current_user)) -> GenerateShoppingListResponse:
    return meal_service.generate_shopping_list(user.id, plan_id)
