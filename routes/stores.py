from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response

from models.store import Store, StoreCreate, StoreUpdate
from models.user import User
from routes.deps import get_current_user
from services.store_service import store_service

router = APIRouter()


@router.get("", response_model=List[Store])
async def list_stores(q: str | None = None, user: User = Depends(get_current_user)) -> List[Store]:
    return store_service.list_stores(user.id, query=q)


@router.get("/{store_id}", response_model=Store)
async def get_store(store_id: str, user: User = Depends(get_current_user)) -> Store:
    return store_service.get_store(user.id, store_id)


@router.post("", response_model=Store, status_code=201)
async def create_store(payload: StoreCreate, user: User = Depends(get_current_user)) -> Store:
    return store_service.create_store(user.id, payload)


@router.put("/{store_id}", response_model=Store)
async def update_store(store_id: str, payload: StoreUpdate, user: User = Depends(get_current_user)) -> Store:
    return store_service.update_store(user.id, store_id, payload)


@router.delete("/{store_id}", status_code=204)
async def delete_store(store_id: str, user: User = Depends(get_current_user)) -> Response:
    store_service.delete_store(user.id, store_id)
    return Response(status_code=204)
