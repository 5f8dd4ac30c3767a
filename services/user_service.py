from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from core.database import connection_scope, new_id, utcnow
from core.errors import AuthenticationError, ConflictError, NotFoundError
from core.security import hash_password, verify_password
from models.user import User, UserUpdate

log = logging.getLogger("kitchen_pal.users")

_COLUMNS = "id, email, first_name, last_name, last_login, created_at, updated_at"


def _to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        email=row["email"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        last_login=row["last_login"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class UserService:
    """Användare persisteras i SQLite; e-post är unik (skiftlägesokänsligt)."""

    def get_user(self, user_id: str) -> Optional[User]:
        with connection_scope() as conn:
            row = conn.execute(f"SELECT {_COLUMNS} FROM users WHERE id = ?", (user_id,)).fetchone()
        return _to_user(row) if row else None

    def require_user(self, user_id: str) -> User:
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def register(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        email = email.strip().lower()
        now = utcnow()
        user_id = new_id()
        with connection_scope() as conn:
            if conn.execute("SELECT 1 FROM users WHERE email = ?", (email,)).fetchone():
                raise ConflictError("A user with this email already exists")
            conn.execute(
                "INSERT INTO users (id, email, password_hash, first_name, last_name, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (user_id, email, hash_password(password), first_name or None, last_name or None, now, now),
            )
            conn.commit()
        log.info("Registered user %s", user_id)
        return self.require_user(user_id)

    def authenticate(self, email: str, password: str) -> User:
        with connection_scope() as conn:
            row = conn.execute(
                "SELECT id, password_hash FROM users WHERE email = ?", (email.strip().lower(),)
            ).fetchone()
            if not row or not verify_password(row["password_hash"], password):
                raise AuthenticationError("Invalid email or password")
            now = utcnow()
            conn.execute("UPDATE users SET last_login = ?, updated_at = ? WHERE id = ?", (now, now, row["id"]))
            conn.commit()
        return self.require_user(row["id"])

    def update_user(self, user_id: str, changes: UserUpdate) -> User:
        fields = changes.model_dump(exclude_unset=True)
        if "email" in fields:
            if fields["email"] is None:
                del fields["email"]
            else:
                fields["email"] = str(fields["email"]).strip().lower()
        if not fields:
            return self.require_user(user_id)
        with connection_scope() as conn:
            if "email" in fields:
                clash = conn.execute(
                    "SELECT 1 FROM users WHERE email = ? AND id != ?", (fields["email"], user_id)
                ).fetchone()
                if clash:
                    raise ConflictError("A user with this email already exists")
            assignments = ", ".join(f"{name} = ?" for name in fields)
            conn.execute(
                f"UPDATE users SET {assignments}, updated_at = ? WHERE id = ?",
                (*fields.values(), utcnow(), user_id),
            )
            conn.commit()
        return self.require_user(user_id)

    def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        with connection_scope() as conn:
            row = conn.execute("SELECT password_hash FROM users WHERE id = ?", (user_id,)).fetchone()
            if not row:
                raise NotFoundError("User not found")
            if not verify_password(row["password_hash"], current_password):
                raise AuthenticationError("Current password is incorrect")
            conn.execute(
                "UPDATE users SET password_hash = ?, updated_at = ? WHERE id = ?",
                (hash_password(new_password), utcnow(), user_id),
            )
            conn.commit()

    def delete_user(self, user_id: str) -> None:
        """Radera användaren; ägd data försvinner via ON DELETE CASCADE."""
        with connection_scope() as conn:
            cur = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            conn.commit()
        if cur.rowcount == 0:
            raise NotFoundError("User not found")
        log.info("Deleted user %s", user_id)


# Delad instans
user_service = UserService()

__all__ = ["UserService", "user_service"]
