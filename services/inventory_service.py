from __future__ import annotations

import logging
import sqlite3
from datetime import date
from typing import Dict, List, Optional

from core.config import settings
from core.database import connection_scope, new_id, transaction_scope, utcnow
from core.errors import BadRequestError, ConflictError, NotFoundError
from models.inventory import BatchFailure, BatchResult, InventoryItem, InventoryItemCreate, InventoryItemUpdate
from services.ingredient_utils import normalize_ingredient_name
from services.store_service import store_service

log = logging.getLogger("kitchen_pal.inventory")

_COLUMNS = (
    "id, ingredient_name, quantity, unit, low_stock_threshold, expiration_date, location, "
    "frequency_of_use, default_store_id, notes, created_at, updated_at"
)


def _to_item(row: sqlite3.Row, today: date | None = None) -> InventoryItem:
    today = today or date.today()
    expiration = date.fromisoformat(row["expiration_date"]) if row["expiration_date"] else None
    days_left = (expiration - today).days if expiration else None
    quantity = row["quantity"] or 0.0
    threshold = row["low_stock_threshold"]
    return InventoryItem(
        id=row["id"],
        ingredient_name=row["ingredient_name"],
        quantity=quantity,
        unit=row["unit"],
        low_stock_threshold=threshold,
        expiration_date=expiration,
        location=row["location"],
        frequency_of_use=row["frequency_of_use"],
        default_store_id=row["default_store_id"],
        notes=row["notes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        is_low_stock=threshold is not None and quantity <= threshold,
        is_expired=days_left is not None and days_left < 0,
        is_expiring_soon=days_left is not None and 0 <= days_left <= settings.expiring_soon_days,
        days_until_expiry=days_left,
    )


class InventoryService:
    """Lagret: en logisk post per normaliserat namn och förvaringsplats."""

    def list_items(
        self,
        user_id: str,
        query: str | None = None,
        location: str | None = None,
        low_stock: bool = False,
    ) -> List[InventoryItem]:
        sql = f"SELECT {_COLUMNS} FROM inventory_items WHERE user_id = ?"
        params: list = [user_id]
        if query:
            sql += " AND ingredient_name LIKE ?"
            params.append(f"%{normalize_ingredient_name(query)}%")
        if location:
            sql += " AND LOWER(COALESCE(location, '')) = LOWER(?)"
            params.append(location.strip())
        with connection_scope() as conn:
            rows = conn.execute(sql + " ORDER BY ingredient_name, created_at", tuple(params)).fetchall()
        items = [_to_item(row) for row in rows]
        if low_stock:
            items = [item for item in items if item.is_low_stock]
        return items

    def load_inventory(self, conn: sqlite3.Connection, user_id: str) -> List[InventoryItem]:
        """Hela lagret i stabil ordning, inom en befintlig anslutning/transaktion."""
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM inventory_items WHERE user_id = ? ORDER BY created_at, id", (user_id,)
        ).fetchall()
        return [_to_item(row) for row in rows]

    def get_item(self, user_id: str, item_id: str) -> InventoryItem:
        with connection_scope() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM inventory_items WHERE id = ? AND user_id = ?", (item_id, user_id)
            ).fetchone()
        if not row:
            raise NotFoundError("Inventory item not found")
        return _to_item(row)

    def create_item(self, user_id: str, data: InventoryItemCreate) -> InventoryItem:
        name = normalize_ingredient_name(data.ingredient_name)
        if not name:
            raise BadRequestError("Ingredient name cannot be empty")
        item_id = new_id()
        now = utcnow()
        with connection_scope() as conn:
            store_service.ensure_owned(conn, user_id, data.default_store_id)
            self._check_unique(conn, user_id, name, data.location)
            conn.execute(
                "INSERT INTO inventory_items (id, user_id, ingredient_name, quantity, unit, low_stock_threshold, "
                "expiration_date, location, frequency_of_use, default_store_id, notes, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    item_id,
                    user_id,
                    name,
                    data.quantity,
                    data.unit.value,
                    data.low_stock_threshold,
                    data.expiration_date.isoformat() if data.expiration_date else None,
                    data.location or None,
                    data.frequency_of_use.value if data.frequency_of_use else None,
                    data.default_store_id,
                    data.notes,
                    now,
                    now,
                ),
            )
            conn.commit()
        return self.get_item(user_id, item_id)

    def update_item(self, user_id: str, item_id: str, changes: InventoryItemUpdate) -> InventoryItem:
        current = self.get_item(user_id, item_id)
        fields = changes.model_dump(exclude_unset=True)
        for required in ("ingredient_name", "quantity", "unit"):
            if required in fields and fields[required] is None:
                raise BadRequestError(f"{required} cannot be null")
        if "ingredient_name" in fields:
            fields["ingredient_name"] = normalize_ingredient_name(fields["ingredient_name"])
        if "unit" in fields:
            fields["unit"] = fields["unit"].value
        if fields.get("frequency_of_use") is not None:
            fields["frequency_of_use"] = fields["frequency_of_use"].value
        if fields.get("expiration_date") is not None:
            fields["expiration_date"] = fields["expiration_date"].isoformat()
        if not fields:
            return current

        with connection_scope() as conn:
            if "default_store_id" in fields:
                store_service.ensure_owned(conn, user_id, fields["default_store_id"])
            if "ingredient_name" in fields or "location" in fields:
                self._check_unique(
                    conn,
                    user_id,
                    fields.get("ingredient_name", current.ingredient_name),
                    fields.get("location", current.location),
                    exclude_id=item_id,
                )
            assignments = ", ".join(f"{name} = ?" for name in fields)
            conn.execute(
                f"UPDATE inventory_items SET {assignments}, updated_at = ? WHERE id = ? AND user_id = ?",
                (*fields.values(), utcnow(), item_id, user_id),
            )
            conn.commit()
        return self.get_item(user_id, item_id)

    def delete_item(self, user_id: str, item_id: str) -> None:
        with connection_scope() as conn:
            cur = conn.execute("DELETE FROM inventory_items WHERE id = ? AND user_id = ?", (item_id, user_id))
            conn.commit()
        if cur.rowcount == 0:
            raise NotFoundError("Inventory item not found")

    def low_stock_items(self, user_id: str, threshold: float | None = None) -> List[InventoryItem]:
        """Poster vid eller under sin egen gräns, annars under given/standardgräns."""
        fallback = threshold if threshold is not None else settings.low_stock_default_threshold
        items = self.list_items(user_id)
        low = [
            item
            for item in items
            if item.quantity <= (item.low_stock_threshold if item.low_stock_threshold is not None else fallback)
        ]
        return sorted(low, key=lambda item: item.quantity)

    def expiring_items(self, user_id: str, days: int | None = None) -> List[InventoryItem]:
        window = days if days is not None else settings.expiring_soon_days
        items = [
            item
            for item in self.list_items(user_id)
            if item.days_until_expiry is not None and 0 <= item.days_until_expiry <= window
        ]
        return sorted(items, key=lambda item: item.days_until_expiry or 0)

    def batch_delete(self, user_id: str, ids: List[str]) -> BatchResult:
        return self._batch(user_id, ids, "DELETE FROM inventory_items WHERE id = ? AND user_id = ?", ())

    def batch_empty(self, user_id: str, ids: List[str]) -> BatchResult:
        return self._batch(
            user_id,
            ids,
            "UPDATE inventory_items SET quantity = 0, updated_at = ? WHERE id = ? AND user_id = ?",
            (utcnow(),),
        )

    def set_quantities(self, conn: sqlite3.Connection, user_id: str, quantities: Dict[str, float]) -> None:
        """Skriv nya saldon inom anroparens transaktion."""
        now = utcnow()
        conn.executemany(
            "UPDATE inventory_items SET quantity = ?, updated_at = ? WHERE id = ? AND user_id = ?",
            [(quantity, now, item_id, user_id) for item_id, quantity in quantities.items()],
        )

    def _batch(self, user_id: str, ids: List[str], statement: str, leading: tuple) -> BatchResult:
        result = BatchResult()
        unique_ids = list(dict.fromkeys(ids))
        with transaction_scope() as conn:
            for item_id in unique_ids:
                cur = conn.execute(statement, (*leading, item_id, user_id))
                if cur.rowcount:
                    result.succeeded.append(item_id)
                else:
                    result.failed.append(BatchFailure(id=item_id, reason="Inventory item not found"))
        if result.failed:
            log.info("Batch inventory change for %s: %d ok, %d failed", user_id, len(result.succeeded), len(result.failed))
        return result

    def _check_unique(
        self,
        conn: sqlite3.Connection,
        user_id: str,
        name: str,
        location: Optional[str],
        exclude_id: str | None = None,
    ) -> None:
        row = conn.execute(
            "SELECT id FROM inventory_items WHERE user_id = ? AND ingredient_name = ? "
            "AND LOWER(COALESCE(location, '')) = LOWER(COALESCE(?, '')) AND id != COALESCE(?, '')",
            (user_id, name, location, exclude_id),
        ).fetchone()
        if row:
            raise ConflictError(
                "An inventory item with this name and location already exists",
                {"existing_item_id": row["id"]},
            )


# Delad instans
inventory_service = InventoryService()

__all__ = ["InventoryService", "inventory_service"]
