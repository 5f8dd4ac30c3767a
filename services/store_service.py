from __future__ import annotations

import sqlite3
from typing import List

from core.database import connection_scope, new_id, utcnow
from core.errors import BadRequestError, ConflictError, NotFoundError
from models.store import Store, StoreCreate, StoreUpdate

_COLUMNS = "id, name, location, website, created_at, updated_at"


def _to_store(row: sqlite3.Row) -> Store:
    return Store(
        id=row["id"],
        name=row["name"],
        location=row["location"],
        website=row["website"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class StoreService:
    def list_stores(self, user_id: str, query: str | None = None) -> List[Store]:
        sql = f"SELECT {_COLUMNS} FROM stores WHERE user_id = ?"
        params: list = [user_id]
        if query:
            sql += " AND (LOWER(name) LIKE ? OR LOWER(COALESCE(location, '')) LIKE ?)"
            pattern = f"%{query.strip().lower()}%"
            params.extend([pattern, pattern])
        with connection_scope() as conn:
            rows = conn.execute(sql + " ORDER BY name COLLATE NOCASE", tuple(params)).fetchall()
        return [_to_store(row) for row in rows]

    def get_store(self, user_id: str, store_id: str) -> Store:
        with connection_scope() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM stores WHERE id = ? AND user_id = ?", (store_id, user_id)
            ).fetchone()
        if not row:
            raise NotFoundError("Store not found")
        return _to_store(row)

    def ensure_owned(self, conn: sqlite3.Connection, user_id: str, store_id: str | None) -> None:
        """Avvisa butiks-ID som inte tillhör användaren."""
        if store_id is None:
            return
        row = conn.execute("SELECT 1 FROM stores WHERE id = ? AND user_id = ?", (store_id, user_id)).fetchone()
        if not row:
            raise NotFoundError("Store not found")

    def create_store(self, user_id: str, data: StoreCreate) -> Store:
        store_id = new_id()
        now = utcnow()
        with connection_scope() as conn:
            self._check_unique_name(conn, user_id, data.name)
            conn.execute(
                "INSERT INTO stores (id, user_id, name, location, website, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (store_id, user_id, data.name.strip(), data.location, data.website, now, now),
            )
            conn.commit()
        return self.get_store(user_id, store_id)

    def update_store(self, user_id: str, store_id: str, changes: StoreUpdate) -> Store:
        self.get_store(user_id, store_id)
        fields = changes.model_dump(exclude_unset=True)
        if "name" in fields:
            if fields["name"] is None:
                raise BadRequestError("Store name cannot be empty")
            fields["name"] = fields["name"].strip()
        if not fields:
            return self.get_store(user_id, store_id)
        with connection_scope() as conn:
            if "name" in fields:
                self._check_unique_name(conn, user_id, fields["name"], exclude_id=store_id)
            assignments = ", ".join(f"{name} = ?" for name in fields)
            conn.execute(
                f"UPDATE stores SET {assignments}, updated_at = ? WHERE id = ? AND user_id = ?",
                (*fields.values(), utcnow(), store_id, user_id),
            )
            conn.commit()
        return self.get_store(user_id, store_id)

    def delete_store(self, user_id: str, store_id: str) -> None:
        # Referenser från lager och inköpsrader nollas via ON DELETE SET NULL
        with connection_scope() as conn:
            cur = conn.execute("DELETE FROM stores WHERE id = ? AND user_id = ?", (store_id, user_id))
            conn.commit()
        if cur.rowcount == 0:
            raise NotFoundError("Store not found")

    def _check_unique_name(self, conn: sqlite3.Connection, user_id: str, name: str, exclude_id: str | None = None) -> None:
        row = conn.execute(
            "SELECT id FROM stores WHERE user_id = ? AND LOWER(name) = LOWER(?) AND id != COALESCE(?, '')",
            (user_id, name.strip(), exclude_id),
        ).fetchone()
        if row:
            raise ConflictError("A store with this name already exists", {"existing_store_id": row["id"]})


# Delad instans
store_service = StoreService()

__all__ = ["StoreService", "store_service"]
