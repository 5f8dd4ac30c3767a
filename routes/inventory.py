from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, Response

from models.inventory import BatchIdsRequest, BatchResult, InventoryItem, InventoryItemCreate, InventoryItemUpdate
from models.user import User
from routes.deps import get_current_user
from services.inventory_service import inventory_service

router = APIRouter()


@router.get("", response_model=List[InventoryItem])
async def list_inventory(
    q: str | None = None,
    location: str | None = None,
    low_stock: bool = False,
    user: User = Depends(get_current_user),
) -> List[InventoryItem]:
    return inventory_service.list_items(user.id, query=q, location=location, low_stock=low_stock)


@router.get("/low-stock", response_model=List[InventoryItem])
async def low_stock(
    threshold: float | None = Query(None, ge=0),
    user: User = Depends(get_current_user),
) -> List[InventoryItem]:
    return inventory_service.low_stock_items(user.id, threshold=threshold)


@router.get("/expiring", response_model=List[InventoryItem])
async def expiring(
    days: int | None = Query(None, ge=0, le=365),
    user: User = Depends(get_current_user),
) -> List[InventoryItem]:
    return inventory_service.expiring_items(user.id, days=days)


# Batch-vägarna före /{item_id} så att "batch" inte tolkas som ett ID
@router.put("/batch/empty", response_model=BatchResult)
async def batch_empty(payload: BatchIdsRequest, user: User = Depends(get_current_user)) -> BatchResult:
    return inventory_service.batch_empty(user.id, payload.ids)


@router.delete("/batch", response_model=BatchResult)
async def batch_delete(payload: BatchIdsRequest, user: User = Depends(get_current_user)) -> BatchResult:
    return inventory_service.batch_delete(user.id, payload.ids)


@router.get("/{item_id}", response_model=InventoryItem)
async def get_item(item_id: str, user: User = Depends(get_current_user)) -> InventoryItem:
    return inventory_service.get_item(user.id, item_id)


@router.post("", response_model=InventoryItem, status_code=201)
async def create_item(payload: InventoryItemCreate, user: User = Depends(get_current_user)) -> InventoryItem:
    return inventory_service.create_item(user.id, payload)


@router.put("/{item_id}", response_model=InventoryItem)
async def update_item(
    item_id: str, payload: InventoryItemUpdate, user: User = Depends(get_current_user)
) -> InventoryItem:
    return inventory_service.update_item(user.id, item_id, payload)


@router.delete("/{item_id}", status_code=204)
async def delete_item(item_id: str, user: User = Depends(get_current_user)) -> Response:
    inventory_service.delete_item(user.id, item_id)
    return Response(status_code=204)
