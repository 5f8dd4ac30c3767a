from __future__ import annotations

import logging
import sqlite3
from datetime import date
from typing import List

from core.database import connection_scope, new_id, utcnow
from core.errors import BadRequestError, NotFoundError
from models.meal_plan import MealPlan, MealPlanCreate, MealPlanUpdate, PlannedRecipe, PlannedRecipeCreate
from models.shopping_list import GenerateShoppingListResponse
from services.reconciliation import RecipeRequest
from services.recipe_service import recipe_service
from services.shopping_service import shopping_service

log = logging.getLogger("kitchen_pal.meals")

_PLAN_COLUMNS = "id, name, start_date, end_date, created_at, updated_at"


class MealService:
    """Måltidsplaner över ett datumintervall med recept per dag och måltid."""

    def list_plans(self, user_id: str, start: date | None = None, end: date | None = None) -> List[MealPlan]:
        sql = f"SELECT {_PLAN_COLUMNS} FROM meal_plans WHERE user_id = ?"
        params: list = [user_id]
        # Planer som överlappar intervallet
        if start:
            sql += " AND end_date >= ?"
            params.append(start.isoformat())
        if end:
            sql += " AND start_date <= ?"
            params.append(end.isoformat())
        with connection_scope() as conn:
            rows = conn.execute(sql + " ORDER BY start_date DESC", tuple(params)).fetchall()
            return [self._to_plan(conn, row) for row in rows]

    def get_plan(self, user_id: str, plan_id: str) -> MealPlan:
        with connection_scope() as conn:
            return self._to_plan(conn, self._plan_row(conn, user_id, plan_id))

    def create_plan(self, user_id: str, data: MealPlanCreate) -> MealPlan:
        self._check_range(data.start_date, data.end_date)
        plan_id = new_id()
        now = utcnow()
        with connection_scope() as conn:
            conn.execute(
                "INSERT INTO meal_plans (id, user_id, name, start_date, end_date, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (plan_id, user_id, data.name.strip(), data.start_date.isoformat(), data.end_date.isoformat(), now, now),
            )
            conn.commit()
        return self.get_plan(user_id, plan_id)

    def update_plan(self, user_id: str, plan_id: str, changes: MealPlanUpdate) -> MealPlan:
        current = self.get_plan(user_id, plan_id)
        fields = changes.model_dump(exclude_unset=True)
        for required in ("name", "start_date", "end_date"):
            if required in fields and fields[required] is None:
                raise BadRequestError(f"{required} cannot be null")
        start = fields.get("start_date", current.start_date)
        end = fields.get("end_date", current.end_date)
        self._check_range(start, end)
        outside = [r for r in current.recipes if not start <= r.meal_date <= end]
        if outside:
            raise BadRequestError(
                "Planned recipes fall outside the new date range",
                {"planned_recipe_ids": [r.id for r in outside]},
            )
        if not fields:
            return current
        if "name" in fields:
            fields["name"] = fields["name"].strip()
        for key in ("start_date", "end_date"):
            if key in fields:
                fields[key] = fields[key].isoformat()
        with connection_scope() as conn:
            assignments = "".join(f"{name} = ?, " for name in fields)
            conn.execute(
                f"UPDATE meal_plans SET {assignments}updated_at = ? WHERE id = ?",
                (*fields.values(), utcnow(), plan_id),
            )
            conn.commit()
        return self.get_plan(user_id, plan_id)

    def delete_plan(self, user_id: str, plan_id: str) -> None:
        with connection_scope() as conn:
            cur = conn.execute("DELETE FROM meal_plans WHERE id = ? AND user_id = ?", (plan_id, user_id))
            conn.commit()
        if cur.rowcount == 0:
            raise NotFoundError("Meal plan not found")

    def add_recipe(self, user_id: str, plan_id: str, data: PlannedRecipeCreate) -> MealPlan:
        plan = self.get_plan(user_id, plan_id)
        recipe_service.get_recipe(user_id, data.recipe_id)
        if not plan.start_date <= data.meal_date <= plan.end_date:
            raise BadRequestError("Meal date must fall within the meal plan")
        now = utcnow()
        with connection_scope() as conn:
            conn.execute(
                "INSERT INTO meal_plan_recipes (id, meal_plan_id, recipe_id, meal_date, meal_type, servings, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (new_id(), plan_id, data.recipe_id, data.meal_date.isoformat(), data.meal_type.value, data.servings, now, now),
            )
            conn.execute("UPDATE meal_plans SET updated_at = ? WHERE id = ?", (now, plan_id))
            conn.commit()
        return self.get_plan(user_id, plan_id)

    def remove_recipe(self, user_id: str, planned_recipe_id: str) -> MealPlan:
        with connection_scope() as conn:
            row = conn.execute(
                "SELECT p.id FROM meal_plan_recipes r JOIN meal_plans p ON p.id = r.meal_plan_id "
                "WHERE r.id = ? AND p.user_id = ?",
                (planned_recipe_id, user_id),
            ).fetchone()
            if not row:
                raise NotFoundError("Planned recipe not found")
            conn.execute("DELETE FROM meal_plan_recipes WHERE id = ?", (planned_recipe_id,))
            conn.execute("UPDATE meal_plans SET updated_at = ? WHERE id = ?", (utcnow(), row["id"]))
            conn.commit()
        return self.get_plan(user_id, row["id"])

    def generate_shopping_list(self, user_id: str, plan_id: str, name: str | None = None) -> GenerateShoppingListResponse:
        """Inköpslista för alla planerade recept, med planerade portioner."""
        plan = self.get_plan(user_id, plan_id)
        if not plan.recipes:
            raise BadRequestError("Meal plan has no recipes")
        requests = [
            RecipeRequest(recipe=recipe_service.get_recipe(user_id, planned.recipe_id), servings=planned.servings)
            for planned in plan.recipes
        ]
        return shopping_service.generate_from_requests(user_id, requests, name or f"Shopping for {plan.name}")

    def _check_range(self, start: date, end: date) -> None:
        if start > end:
            raise BadRequestError("start_date must be on or before end_date")

    def _plan_row(self, conn: sqlite3.Connection, user_id: str, plan_id: str) -> sqlite3.Row:
        row = conn.execute(
            f"SELECT {_PLAN_COLUMNS} FROM meal_plans WHERE id = ? AND user_id = ?", (plan_id, user_id)
        ).fetchone()
        if not row:
            raise NotFoundError("Meal plan not found")
        return row

    def _to_plan(self, conn: sqlite3.Connection, row: sqlite3.Row) -> MealPlan:
        planned = conn.execute(
            "SELECT m.id, m.recipe_id, r.name AS recipe_name, m.meal_date, m.meal_type, m.servings "
            "FROM meal_plan_recipes m JOIN recipes r ON r.id = m.recipe_id "
            "WHERE m.meal_plan_id = ? ORDER BY m.meal_date, m.meal_type, m.created_at",
            (row["id"],),
        ).fetchall()
        return MealPlan(
            id=row["id"],
            name=row["name"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            recipes=[
                PlannedRecipe(
                    id=p["id"],
                    recipe_id=p["recipe_id"],
                    recipe_name=p["recipe_name"],
                    meal_date=p["meal_date"],
                    meal_type=p["meal_type"],
                    servings=p["servings"],
                )
                for p in planned
            ],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


meal_service = MealService()

__all__ = ["MealService", "meal_service"]
