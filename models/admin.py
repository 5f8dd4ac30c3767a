from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from models.user import User


class SystemCounts(BaseModel):
    users: int = 0
    recipes: int = 0
    inventory_items: int = 0
    shopping_lists: int = 0
    stores: int = 0
    meal_plans: int = 0
    reviews: int = 0
    feedback: int = 0


class AdminDashboard(BaseModel):
    stats: SystemCounts
    recent_users: List[User] = Field(default_factory=list)


class UserCounts(BaseModel):
    recipes: int = 0
    inventory_items: int = 0
    shopping_lists: int = 0
    stores: int = 0
    meal_plans: int = 0


class AdminUser(User):
    """Användare med antal ägda poster, för adminlistan."""

    counts: UserCounts


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class AdminUserPage(BaseModel):
    users: List[AdminUser]
    pagination: Pagination
