from __future__ import annotations

import json
import logging
import sqlite3
from datetime import date
from typing import List, Optional, Sequence

from core.database import connection_scope, new_id, transaction_scope, utcnow
from core.errors import BadRequestError, ConflictError, NotFoundError
from models.shopping_list import (
    BulkItemChange,
    BulkItemUpdateResult,
    GenerateShoppingListResponse,
    RecipeSelection,
    RecipeSource,
    ShoppingItem,
    ShoppingItemCreate,
    ShoppingItemUpdate,
    ShoppingList,
    ShoppingListCreate,
    ShoppingListStatus,
    ShoppingListUpdate,
)
from models.inventory import BatchFailure
from models.units import convert_quantity
from services.ingredient_utils import normalize_ingredient_name
from services.inventory_service import inventory_service
from services.reconciliation import RecipeRequest, synthesize_shopping_items
from services.recipe_service import recipe_service
from services.store_service import store_service

log = logging.getLogger("kitchen_pal.shopping")

_LIST_COLUMNS = "id, name, notes, status, completed_at, archived_at, created_at, updated_at"
_ITEM_COLUMNS = (
    "id, ingredient_name, needed_quantity, unit, purchased, store_id, recipe_sources, notes, created_at, updated_at"
)

NOTHING_NEEDED = "All ingredients are already in your inventory; no shopping list was created"


def _to_item(row: sqlite3.Row) -> ShoppingItem:
    return ShoppingItem(
        id=row["id"],
        ingredient_name=row["ingredient_name"],
        needed_quantity=row["needed_quantity"],
        unit=row["unit"],
        purchased=bool(row["purchased"]),
        store_id=row["store_id"],
        recipe_sources=[RecipeSource(**source) for source in json.loads(row["recipe_sources"] or "[]")],
        notes=row["notes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _dump_sources(sources: Sequence[RecipeSource]) -> str:
    return json.dumps([source.model_dump() for source in sources])


class ShoppingService:
    """Inköpslistor: active -> completed när allt är köpt, archived manuellt."""

    # listor
    def list_lists(self, user_id: str, status: ShoppingListStatus | None = None) -> List[ShoppingList]:
        sql = f"SELECT {_LIST_COLUMNS} FROM shopping_lists WHERE user_id = ?"
        params: list = [user_id]
        if status:
            sql += " AND status = ?"
            params.append(status.value)
        with connection_scope() as conn:
            rows = conn.execute(sql + " ORDER BY created_at DESC", tuple(params)).fetchall()
            return [self._to_list(conn, row) for row in rows]

    def get_list(self, user_id: str, list_id: str) -> ShoppingList:
        with connection_scope() as conn:
            return self._to_list(conn, self._list_row(conn, user_id, list_id))

    def create_list(self, user_id: str, data: ShoppingListCreate) -> ShoppingList:
        list_id = new_id()
        now = utcnow()
        with connection_scope() as conn:
            conn.execute(
                "INSERT INTO shopping_lists (id, user_id, name, notes, status, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (list_id, user_id, data.name.strip(), data.notes, ShoppingListStatus.ACTIVE.value, now, now),
            )
            conn.commit()
        return self.get_list(user_id, list_id)

    def update_list(self, user_id: str, list_id: str, changes: ShoppingListUpdate) -> ShoppingList:
        fields = changes.model_dump(exclude_unset=True)
        if "name" in fields:
            if fields["name"] is None:
                raise BadRequestError("Shopping list name cannot be empty")
            fields["name"] = fields["name"].strip()
        with connection_scope() as conn:
            self._list_row(conn, user_id, list_id)
            if fields:
                assignments = "".join(f"{name} = ?, " for name in fields)
                conn.execute(
                    f"UPDATE shopping_lists SET {assignments}updated_at = ? WHERE id = ?",
                    (*fields.values(), utcnow(), list_id),
                )
                conn.commit()
        return self.get_list(user_id, list_id)

    def delete_list(self, user_id: str, list_id: str) -> None:
        with connection_scope() as conn:
            cur = conn.execute("DELETE FROM shopping_lists WHERE id = ? AND user_id = ?", (list_id, user_id))
            conn.commit()
        if cur.rowcount == 0:
            raise NotFoundError("Shopping list not found")

    def archive_list(self, user_id: str, list_id: str) -> ShoppingList:
        with transaction_scope() as conn:
            row = self._list_row(conn, user_id, list_id)
            if row["status"] != ShoppingListStatus.ARCHIVED.value:
                now = utcnow()
                conn.execute(
                    "UPDATE shopping_lists SET status = ?, archived_at = ?, updated_at = ? WHERE id = ?",
                    (ShoppingListStatus.ARCHIVED.value, now, now, list_id),
                )
        return self.get_list(user_id, list_id)

    def unarchive_list(self, user_id: str, list_id: str) -> ShoppingList:
        """Återställ till completed om allt är köpt, annars active."""
        with transaction_scope() as conn:
            row = self._list_row(conn, user_id, list_id)
            if row["status"] != ShoppingListStatus.ARCHIVED.value:
                raise BadRequestError("Shopping list is not archived")
            all_done = self._all_purchased(conn, list_id)
            status = ShoppingListStatus.COMPLETED if all_done else ShoppingListStatus.ACTIVE
            now = utcnow()
            conn.execute(
                "UPDATE shopping_lists SET status = ?, archived_at = NULL, completed_at = ?, updated_at = ? WHERE id = ?",
                (status.value, (row["completed_at"] or now) if all_done else None, now, list_id),
            )
        return self.get_list(user_id, list_id)

    # rader
    def list_items(self, user_id: str, list_id: str) -> List[ShoppingItem]:
        return self.get_list(user_id, list_id).items

    def add_item(self, user_id: str, list_id: str, data: ShoppingItemCreate) -> ShoppingItem:
        """Lägg till en rad; en oköpt rad med samma namn och omräkningsbar enhet slås ihop."""
        name = normalize_ingredient_name(data.ingredient_name)
        if not name:
            raise BadRequestError("Ingredient name cannot be empty")
        with transaction_scope() as conn:
            self._writable_list(conn, user_id, list_id)
            store_service.ensure_owned(conn, user_id, data.store_id)
            item_id = self._merge_into_existing(conn, list_id, name, data)
            if item_id is None:
                item_id = new_id()
                now = utcnow()
                conn.execute(
                    "INSERT INTO shopping_list_items (id, shopping_list_id, ingredient_name, needed_quantity, unit, "
                    "purchased, store_id, recipe_sources, notes, created_at, updated_at) "
                    "VALUES (?, ?, ?, ?, ?, 0, ?, '[]', ?, ?, ?)",
                    (item_id, list_id, name, data.needed_quantity, data.unit.value, data.store_id, data.notes, now, now),
                )
            self._refresh_status(conn, list_id)
            row = conn.execute(f"SELECT {_ITEM_COLUMNS} FROM shopping_list_items WHERE id = ?", (item_id,)).fetchone()
        return _to_item(row)

    def update_item(self, user_id: str, item_id: str, changes: ShoppingItemUpdate) -> ShoppingItem:
        fields = changes.model_dump(exclude_unset=True)
        for required in ("ingredient_name", "needed_quantity", "unit", "purchased"):
            if required in fields and fields[required] is None:
                raise BadRequestError(f"{required} cannot be null")
        if "ingredient_name" in fields:
            fields["ingredient_name"] = normalize_ingredient_name(fields["ingredient_name"])
        if "unit" in fields:
            fields["unit"] = fields["unit"].value
        if "purchased" in fields:
            fields["purchased"] = 1 if fields["purchased"] else 0
        with transaction_scope() as conn:
            list_id = self._item_list_id(conn, user_id, item_id)
            self._writable_list(conn, user_id, list_id)
            if "store_id" in fields:
                store_service.ensure_owned(conn, user_id, fields["store_id"])
            if fields:
                assignments = "".join(f"{name} = ?, " for name in fields)
                conn.execute(
                    f"UPDATE shopping_list_items SET {assignments}updated_at = ? WHERE id = ?",
                    (*fields.values(), utcnow(), item_id),
                )
                self._refresh_status(conn, list_id)
            row = conn.execute(f"SELECT {_ITEM_COLUMNS} FROM shopping_list_items WHERE id = ?", (item_id,)).fetchone()
        return _to_item(row)

    def delete_item(self, user_id: str, item_id: str) -> None:
        with transaction_scope() as conn:
            list_id = self._item_list_id(conn, user_id, item_id)
            self._writable_list(conn, user_id, list_id)
            conn.execute("DELETE FROM shopping_list_items WHERE id = ?", (item_id,))
            self._refresh_status(conn, list_id)

    def bulk_update(self, user_id: str, list_id: str, changes: Sequence[BulkItemChange]) -> BulkItemUpdateResult:
        succeeded: List[str] = []
        failed: List[BatchFailure] = []
        with transaction_scope() as conn:
            self._writable_list(conn, user_id, list_id)
            now = utcnow()
            for change in changes:
                cur = conn.execute(
                    "UPDATE shopping_list_items SET purchased = ?, updated_at = ? WHERE id = ? AND shopping_list_id = ?",
                    (1 if change.purchased else 0, now, change.id, list_id),
                )
                if cur.rowcount:
                    succeeded.append(change.id)
                else:
                    failed.append(BatchFailure(id=change.id, reason="Item not found in this shopping list"))
            self._refresh_status(conn, list_id)
        if failed:
            log.info("Bulk update on list %s: %d ok, %d failed", list_id, len(succeeded), len(failed))
        return BulkItemUpdateResult(succeeded=succeeded, failed=failed, shopping_list=self.get_list(user_id, list_id))

    def clear_checked(self, user_id: str, list_id: str) -> ShoppingList:
        with transaction_scope() as conn:
            self._writable_list(conn, user_id, list_id)
            conn.execute("DELETE FROM shopping_list_items WHERE shopping_list_id = ? AND purchased = 1", (list_id,))
            self._refresh_status(conn, list_id)
        return self.get_list(user_id, list_id)

    # generering
    def generate_from_recipes(
        self, user_id: str, selections: Sequence[RecipeSelection], name: str | None = None
    ) -> GenerateShoppingListResponse:
        requests = [
            RecipeRequest(
                recipe=recipe_service.get_recipe(user_id, selection.recipe_id),
                servings=selection.servings,
                include_optional=selection.include_optional,
            )
            for selection in selections
        ]
        return self.generate_from_requests(user_id, requests, name)

    def generate_from_requests(
        self, user_id: str, requests: Sequence[RecipeRequest], name: str | None = None
    ) -> GenerateShoppingListResponse:
        """Syntetisera och spara en lista; skapas inte alls om inget behöver köpas."""
        if not requests:
            raise BadRequestError("At least one recipe is required")
        list_name = (name or "").strip() or f"Shopping list {date.today().isoformat()}"
        with transaction_scope() as conn:
            inventory = inventory_service.load_inventory(conn, user_id)
            synthesis = synthesize_shopping_items(requests, inventory)
            for warning in synthesis.warnings:
                log.warning("Shopping list synthesis: %s", warning)
            if not synthesis.items:
                return GenerateShoppingListResponse(created=False, message=NOTHING_NEEDED, warnings=synthesis.warnings)

            list_id = new_id()
            now = utcnow()
            conn.execute(
                "INSERT INTO shopping_lists (id, user_id, name, status, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?)",
                (list_id, user_id, list_name, ShoppingListStatus.ACTIVE.value, now, now),
            )
            conn.executemany(
                "INSERT INTO shopping_list_items (id, shopping_list_id, ingredient_name, needed_quantity, unit, "
                "purchased, store_id, recipe_sources, created_at, updated_at) VALUES (?, ?, ?, ?, ?, 0, ?, ?, ?, ?)",
                [
                    (
                        new_id(),
                        list_id,
                        item.ingredient_name,
                        item.needed_quantity,
                        item.unit.value,
                        item.store_id,
                        _dump_sources(item.recipe_sources),
                        now,
                        now,
                    )
                    for item in synthesis.items
                ],
            )
        log.info("Generated shopping list %s with %d items", list_id, len(synthesis.items))
        return GenerateShoppingListResponse(
            created=True,
            message=f"Shopping list created with {len(synthesis.items)} items",
            shopping_list=self.get_list(user_id, list_id),
            warnings=synthesis.warnings,
        )

    # helpers
    def _list_row(self, conn: sqlite3.Connection, user_id: str, list_id: str) -> sqlite3.Row:
        row = conn.execute(
            f"SELECT {_LIST_COLUMNS} FROM shopping_lists WHERE id = ? AND user_id = ?", (list_id, user_id)
        ).fetchone()
        if not row:
            raise NotFoundError("Shopping list not found")
        return row

    def _writable_list(self, conn: sqlite3.Connection, user_id: str, list_id: str) -> sqlite3.Row:
        row = self._list_row(conn, user_id, list_id)
        if row["status"] == ShoppingListStatus.ARCHIVED.value:
            raise ConflictError("Archived shopping lists cannot be modified")
        return row

    def _item_list_id(self, conn: sqlite3.Connection, user_id: str, item_id: str) -> str:
        row = conn.execute(
            "SELECT i.shopping_list_id FROM shopping_list_items i JOIN shopping_lists l ON l.id = i.shopping_list_id "
            "WHERE i.id = ? AND l.user_id = ?",
            (item_id, user_id),
        ).fetchone()
        if not row:
            raise NotFoundError("Shopping list item not found")
        return row["shopping_list_id"]

    def _merge_into_existing(
        self, conn: sqlite3.Connection, list_id: str, name: str, data: ShoppingItemCreate
    ) -> Optional[str]:
        rows = conn.execute(
            "SELECT id, needed_quantity, unit, store_id FROM shopping_list_items "
            "WHERE shopping_list_id = ? AND ingredient_name = ? AND purchased = 0 ORDER BY created_at",
            (list_id, name),
        ).fetchall()
        for row in rows:
            extra = convert_quantity(data.needed_quantity, data.unit, row["unit"])
            if extra is None:
                continue
            conn.execute(
                "UPDATE shopping_list_items SET needed_quantity = ?, store_id = COALESCE(store_id, ?), updated_at = ? WHERE id = ?",
                (round(row["needed_quantity"] + extra, 2), data.store_id, utcnow(), row["id"]),
            )
            return row["id"]
        return None

    def _all_purchased(self, conn: sqlite3.Connection, list_id: str) -> bool:
        total, purchased = conn.execute(
            "SELECT COUNT(*), COALESCE(SUM(purchased), 0) FROM shopping_list_items WHERE shopping_list_id = ?",
            (list_id,),
        ).fetchone()
        return total > 0 and purchased == total

    def _refresh_status(self, conn: sqlite3.Connection, list_id: str) -> None:
        """Räkna om active/completed efter ändrade rader. Arkiverade listor lämnas i fred."""
        status = conn.execute("SELECT status FROM shopping_lists WHERE id = ?", (list_id,)).fetchone()["status"]
        if status == ShoppingListStatus.ARCHIVED.value:
            return
        now = utcnow()
        all_done = self._all_purchased(conn, list_id)
        if all_done and status != ShoppingListStatus.COMPLETED.value:
            conn.execute(
                "UPDATE shopping_lists SET status = ?, completed_at = ?, updated_at = ? WHERE id = ?",
                (ShoppingListStatus.COMPLETED.value, now, now, list_id),
            )
        elif not all_done and status == ShoppingListStatus.COMPLETED.value:
            conn.execute(
                "UPDATE shopping_lists SET status = ?, completed_at = NULL, updated_at = ? WHERE id = ?",
                (ShoppingListStatus.ACTIVE.value, now, list_id),
            )
        else:
            conn.execute("UPDATE shopping_lists SET updated_at = ? WHERE id = ?", (now, list_id))

    def _to_list(self, conn: sqlite3.Connection, row: sqlite3.Row) -> ShoppingList:
        items = conn.execute(
            f"SELECT {_ITEM_COLUMNS} FROM shopping_list_items WHERE shopping_list_id = ? ORDER BY purchased, created_at, rowid",
            (row["id"],),
        ).fetchall()
        return ShoppingList(
            id=row["id"],
            name=row["name"],
            notes=row["notes"],
            status=row["status"],
            items=[_to_item(item) for item in items],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            completed_at=row["completed_at"],
            archived_at=row["archived_at"],
        )


# Delad instans
shopping_service = ShoppingService()

__all__ = ["NOTHING_NEEDED", "ShoppingService", "shopping_service"]
