from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from core.errors import PermissionDeniedError
from models.admin import AdminDashboard, AdminUser, AdminUserPage
from models.user import User
from routes.deps import get_current_user
from services.admin_service import admin_service

router = APIRouter()


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not admin_service.is_admin(user):
        raise PermissionDeniedError("Admin access required")
    return user


@router.get("/dashboard", response_model=AdminDashboard)
async def admin_dashboard(admin: User = Depends(require_admin)) -> AdminDashboard:
    """Antal poster per tabell och de senast registrerade användarna."""
    return admin_service.dashboard()


@router.get("/users", response_model=AdminUserPage)
async def admin_users(
    q: str | None = Query(None, description="Sök i e-post och namn"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: User = Depends(require_admin),
) -> AdminUserPage:
    return admin_service.list_users(q, page, limit)


@router.get("/users/{user_id}", response_model=AdminUser)
async def admin_user_details(user_id: str, admin: User = Depends(require_admin)) -> AdminUser:
    return admin_service.get_user(user_id)
