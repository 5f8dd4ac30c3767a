from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from models.user import PasswordChangeRequest, User, UserUpdate
from routes.deps import get_current_user
from services.user_service import user_service

router = APIRouter()


@router.get("/me", response_model=User)
async def get_profile(user: User = Depends(get_current_user)) -> User:
    return user


@router.put("/me", response_model=User)
async def update_profile(payload: UserUpdate, user: User = Depends(get_current_user)) -> User:
    return user_service.update_user(user.id, payload)


@router.put("/me/password")
async def change_password(payload: PasswordChangeRequest, user: User = Depends(get_current_user)) -> dict[str, str]:
    user_service.change_password(user.id, payload.current_password, payload.new_password)
    return {"message": "Password updated"}


@router.delete("/me", status_code=204)
async def delete_account(user: User = Depends(get_current_user)) -> Response:
    user_service.delete_user(user.id)
    return Response(status_code=204)
