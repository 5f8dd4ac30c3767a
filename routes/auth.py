from __future__ import annotations

from fastapi import APIRouter, Depends

from core.security import create_access_token
from models.user import AuthResponse, LoginRequest, RegisterRequest, User
from routes.deps import get_current_user
from services.user_service import user_service

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(payload: RegisterRequest) -> AuthResponse:
    user = user_service.register(
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    return AuthResponse(user=user, token=create_access_token(user.id))


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest) -> AuthResponse:
    user = user_service.authenticate(payload.email, payload.password)
    return AuthResponse(user=user, token=create_access_token(user.id))


@router.get("/me", response_model=User)
async def me(user: User = Depends(get_current_user)) -> User:
    return user
