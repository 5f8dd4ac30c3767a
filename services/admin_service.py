"""Läsande rapporter över hela installationen, för administratörer."""

from __future__ import annotations

import math
import sqlite3

from core.config import settings
from core.database import connection_scope
from core.errors import NotFoundError
from models.admin import AdminDashboard, AdminUser, AdminUserPage, Pagination, SystemCounts, UserCounts
from models.user import User
from services.user_service import user_service

_SYSTEM_TABLES = {
    "users": "users",
    "recipes": "recipes",
    "inventory_items": "inventory_items",
    "shopping_lists": "shopping_lists",
    "stores": "stores",
    "meal_plans": "meal_plans",
    "reviews": "recipe_reviews",
    "feedback": "feedback",
}

_OWNED_TABLES = {
    "recipes": "recipes",
    "inventory_items": "inventory_items",
    "shopping_lists": "shopping_lists",
    "stores": "stores",
    "meal_plans": "meal_plans",
}


def _user_counts(conn: sqlite3.Connection, user_id: str) -> UserCounts:
    return UserCounts(
        **{
            key: conn.execute(f"SELECT COUNT(*) FROM {table} WHERE user_id = ?", (user_id,)).fetchone()[0]
            for key, table in _OWNED_TABLES.items()
        }
    )


class AdminService:
    def is_admin(self, user: User) -> bool:
        return user.email.lower() in settings.admin_emails

    def dashboard(self, recent: int = 5) -> AdminDashboard:
        with connection_scope() as conn:
            counts = {
                key: conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
                for key, table in _SYSTEM_TABLES.items()
            }
            recent_ids = [
                row["id"]
                for row in conn.execute(
                    "SELECT id FROM users ORDER BY created_at DESC, id LIMIT ?", (recent,)
                ).fetchall()
            ]
        return AdminDashboard(
            stats=SystemCounts(**counts),
            recent_users=[user_service.require_user(user_id) for user_id in recent_ids],
        )

    def list_users(self, query: str | None = None, page: int = 1, limit: int = 20) -> AdminUserPage:
        where = ""
        params: list = []
        if query:
            # Sök i e-post och namn, skiftlägesokänsligt
            like = f"%{query.strip().lower()}%"
            where = "WHERE lower(email) LIKE ? OR lower(COALESCE(first_name, '')) LIKE ? OR lower(COALESCE(last_name, '')) LIKE ?"
            params = [like, like, like]
        with connection_scope() as conn:
            total = conn.execute(f"SELECT COUNT(*) FROM users {where}", params).fetchone()[0]
            rows = conn.execute(
                f"SELECT id FROM users {where} ORDER BY created_at DESC, id LIMIT ? OFFSET ?",
                [*params, limit, (page - 1) * limit],
            ).fetchall()
            users = [
                AdminUser(**user_service.require_user(row["id"]).model_dump(), counts=_user_counts(conn, row["id"]))
                for row in rows
            ]
        return AdminUserPage(
            users=users,
            pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
        )

    def get_user(self, user_id: str) -> AdminUser:
        user = user_service.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        with connection_scope() as conn:
            counts = _user_counts(conn, user_id)
        return AdminUser(**user.model_dump(), counts=counts)


admin_service = AdminService()

__all__ = ["AdminService", "admin_service"]
