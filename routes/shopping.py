from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response

from models.shopping_list import (
    BulkItemUpdateRequest,
    BulkItemUpdateResult,
    GenerateShoppingListRequest,
    GenerateShoppingListResponse,
    ShoppingItem,
    ShoppingItemCreate,
    ShoppingItemUpdate,
    ShoppingList,
    ShoppingListCreate,
    ShoppingListStatus,
    ShoppingListUpdate,
)
from models.user import User
from routes.deps import get_current_user
from services.shopping_service import shopping_service

router = APIRouter()


@router.get("/lists", response_model=List[ShoppingList])
async def list_lists(
    status: ShoppingListStatus | None = None, user: User = Depends(get_current_user)
) -> List[ShoppingList]:
    return shopping_service.list_lists(user.id, status=status)


@router.post("/lists", response_model=ShoppingList, status_code=201)
async def create_list(payload: ShoppingListCreate, user: User = Depends(get_current_user)) -> ShoppingList:
    return shopping_service.create_list(user.id, payload)


@router.get("/lists/{list_id}", response_model=ShoppingList)
async def get_list(list_id: str, user: User = Depends(get_current_user)) -> ShoppingList:
    return shopping_service.get_list(user.id, list_id)


@router.put("/lists/{list_id}", response_model=ShoppingList)
async def update_list(
    list_id: str, payload: ShoppingListUpdate, user: User = Depends(get_current_user)
) -> ShoppingList:
    return shopping_service.update_list(user.id, list_id, payload)


@router.delete("/lists/{list_id}", status_code=204)
async def delete_list(list_id: str, user: User = Depends(get_current_user)) -> Response:
    shopping_service.delete_list(user.id, list_id)
    return Response(status_code=204)


@router.post("/lists/{list_id}/archive", response_model=ShoppingList)
async def archive_list(list_id: str, user: User = Depends(get_current_user)) -> ShoppingList:
    return shopping_service.archive_list(user.id, list_id)


@router.post("/lists/{list_id}/unarchive", response_model=ShoppingList)
async def unarchive_list(list_id: str, user: User = Depends(get_current_user)) -> ShoppingList:
    return shopping_service.unarchive_list(user.id, list_id)


@router.get("/lists/{list_id}/items", response_model=List[ShoppingItem])
async def list_items(list_id: str, user: User = Depends(get_current_user)) -> List[ShoppingItem]:
    return shopping_service.list_items(user.id, list_id)


@router.post("/lists/{list_id}/items", response_model=ShoppingItem, status_code=201)
async def add_item(
    list_id: str, payload: ShoppingItemCreate, user: User = Depends(get_current_user)
) -> ShoppingItem:
    return shopping_service.add_item(user.id, list_id, payload)


@router.post("/lists/{list_id}/items/bulk-update", response_model=BulkItemUpdateResult)
async def bulk_update(
    list_id: str, payload: BulkItemUpdateRequest, user: User = Depends(get_current_user)
) -> BulkItemUpdateResult:
    return shopping_service.bulk_update(user.id, list_id, payload.items)


@router.delete("/lists/{list_id}/items/clear-checked", response_model=ShoppingList)
async def clear_checked(list_id: str, user: User = Depends(get_current_user)) -> ShoppingList:
    return shopping_service.clear_checked(user.id, list_id)


@router.put("/items/{item_id}", response_model=ShoppingItem)
async def update_item(
    item_id: str, payload: ShoppingItemUpdate, user: User = Depends(get_current_user)
) -> ShoppingItem:
    return shopping_service.update_item(user.id, item_id, payload)


@router.delete("/items/{item_id}", status_code=204)
async def delete_item(item_id: str, user: User = Depends(get_current_user)) -> Response:
    shopping_service.delete_item(user.id, item_id)
    return Response(status_code=204)


@router.post("/generate", response_model=GenerateShoppingListResponse)
async def generate(
    payload: GenerateShoppingListRequest, user: User = Depends(get_current_user)
) -> GenerateShoppingListResponse:
    return shopping_service.generate_from_recipes(user.id, payload.recipes, name=payload.name)
