from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional, Tuple

from core.database import connection_scope, new_id, transaction_scope, utcnow
from models.recipe import Recipe, RecipeCreate, RecipeIngredient

_COLUMNS = (
    "id, name, description, instructions, default_servings, prep_time, cook_time, image_url, "
    "source_name, source_url, created_at, updated_at"
)


class RecipeRepository:
    """DB-åtkomst för recept, ingredienser och taggar. Allt är ägt av en användare."""

    def list_recipes(self, user_id: str) -> List[Recipe]:
        with connection_scope() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM recipes WHERE user_id = ? ORDER BY name COLLATE NOCASE", (user_id,)
            ).fetchall()
            return [self._to_recipe(conn, row) for row in rows]

    def get_recipe(self, user_id: str, recipe_id: str) -> Optional[Recipe]:
        with connection_scope() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM recipes WHERE id = ? AND user_id = ?", (recipe_id, user_id)
            ).fetchone()
            return self._to_recipe(conn, row) if row else None

    def find_id_by_name(self, user_id: str, name: str, exclude_id: str | None = None) -> Optional[str]:
        with connection_scope() as conn:
            row = conn.execute(
                "SELECT id FROM recipes WHERE user_id = ? AND LOWER(name) = LOWER(?) AND id != COALESCE(?, '')",
                (user_id, name.strip(), exclude_id),
            ).fetchone()
        return row["id"] if row else None

    def add_recipe(self, user_id: str, data: RecipeCreate) -> Recipe:
        recipe_id = new_id()
        now = utcnow()
        with transaction_scope() as conn:
            conn.execute(
                "INSERT INTO recipes (id, user_id, name, description, instructions, default_servings, prep_time, "
                "cook_time, image_url, source_name, source_url, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    recipe_id,
                    user_id,
                    data.name.strip(),
                    data.description,
                    data.instructions,
                    data.default_servings,
                    data.prep_time,
                    data.cook_time,
                    data.image_url,
                    data.source_name,
                    data.source_url,
                    now,
                    now,
                ),
            )
            self._replace_ingredients(conn, recipe_id, data.ingredients)
            self._replace_tags(conn, recipe_id, data.tags)
        return self.get_recipe(user_id, recipe_id)  # type: ignore

    def update_recipe(self, user_id: str, recipe_id: str, fields: Dict[str, Any]) -> Optional[Recipe]:
        """Uppdatera skickade fält; ingredienser och taggar ersätts i sin helhet."""
        ingredients = fields.pop("ingredients", None)
        tags = fields.pop("tags", None)
        with transaction_scope() as conn:
            exists = conn.execute(
                "SELECT 1 FROM recipes WHERE id = ? AND user_id = ?", (recipe_id, user_id)
            ).fetchone()
            if not exists:
                return None
            assignments = "".join(f"{name} = ?, " for name in fields)
            conn.execute(
                f"UPDATE recipes SET {assignments}updated_at = ? WHERE id = ?",
                (*fields.values(), utcnow(), recipe_id),
            )
            if ingredients is not None:
                self._replace_ingredients(conn, recipe_id, ingredients)
            if tags is not None:
                self._replace_tags(conn, recipe_id, tags)
        return self.get_recipe(user_id, recipe_id)

    def delete_recipe(self, user_id: str, recipe_id: str) -> bool:
        with connection_scope() as conn:
            cur = conn.execute("DELETE FROM recipes WHERE id = ? AND user_id = ?", (recipe_id, user_id))
            conn.commit()
        return cur.rowcount > 0

    def search_recipes(self, user_id: str, query: str | None = None, tag: str | None = None) -> List[Recipe]:
        q = (query or "").lower().strip()
        wanted_tag = (tag or "").lower().strip()
        results: List[Recipe] = []
        for recipe in self.list_recipes(user_id):
            tags = [t.lower() for t in recipe.tags]
            if wanted_tag and wanted_tag not in tags:
                continue
            if q:
                ingredient_names = " ".join(ing.ingredient_name.lower() for ing in recipe.ingredients)
                haystack = " ".join([recipe.name.lower(), ingredient_names, " ".join(tags)])
                if q not in haystack:
                    continue
            results.append(recipe)
        return results

    # ingredienser var för sig
    def get_ingredient(self, user_id: str, ingredient_id: str) -> Optional[Tuple[str, RecipeIngredient]]:
        """(recept-ID, ingrediens) om ingrediensraden tillhör användarens recept."""
        with connection_scope() as conn:
            row = conn.execute(
                "SELECT i.id, i.recipe_id, i.ingredient_name, i.quantity, i.unit, i.is_optional, i.notes "
                "FROM recipe_ingredients i JOIN recipes r ON r.id = i.recipe_id "
                "WHERE i.id = ? AND r.user_id = ?",
                (ingredient_id, user_id),
            ).fetchone()
        if not row:
            return None
        return row["recipe_id"], self._to_ingredient(row)

    def add_ingredient(self, recipe_id: str, ingredient: RecipeIngredient) -> RecipeIngredient:
        with transaction_scope() as conn:
            position = conn.execute(
                "SELECT COALESCE(MAX(position), 0) + 1 FROM recipe_ingredients WHERE recipe_id = ?", (recipe_id,)
            ).fetchone()[0]
            ingredient_id = self._insert_ingredient(conn, recipe_id, position, ingredient)
            self._touch(conn, recipe_id)
        return ingredient.model_copy(update={"id": ingredient_id})

    def update_ingredient(self, recipe_id: str, ingredient_id: str, fields: Dict[str, Any]) -> None:
        if "unit" in fields:
            fields["unit"] = fields["unit"].value
        if "is_optional" in fields:
            fields["is_optional"] = 1 if fields["is_optional"] else 0
        with transaction_scope() as conn:
            assignments = "".join(f"{name} = ?, " for name in fields)
            conn.execute(
                f"UPDATE recipe_ingredients SET {assignments}updated_at = ? WHERE id = ?",
                (*fields.values(), utcnow(), ingredient_id),
            )
            self._touch(conn, recipe_id)

    def delete_ingredient(self, recipe_id: str, ingredient_id: str) -> None:
        with transaction_scope() as conn:
            conn.execute("DELETE FROM recipe_ingredients WHERE id = ?", (ingredient_id,))
            self._touch(conn, recipe_id)

    # helpers
    def _replace_ingredients(self, conn: sqlite3.Connection, recipe_id: str, ingredients: List[Any]) -> None:
        conn.execute("DELETE FROM recipe_ingredients WHERE recipe_id = ?", (recipe_id,))
        for position, ingredient in enumerate(ingredients, start=1):
            if isinstance(ingredient, dict):
                ingredient = RecipeIngredient(**ingredient)
            self._insert_ingredient(conn, recipe_id, position, ingredient)

    def _insert_ingredient(
        self, conn: sqlite3.Connection, recipe_id: str, position: int, ingredient: RecipeIngredient
    ) -> str:
        ingredient_id = new_id()
        now = utcnow()
        conn.execute(
            "INSERT INTO recipe_ingredients (id, recipe_id, position, ingredient_name, quantity, unit, is_optional, "
            "notes, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                ingredient_id,
                recipe_id,
                position,
                ingredient.ingredient_name.strip(),
                ingredient.quantity,
                ingredient.unit.value,
                1 if ingredient.is_optional else 0,
                ingredient.notes,
                now,
                now,
            ),
        )
        return ingredient_id

    def _replace_tags(self, conn: sqlite3.Connection, recipe_id: str, tags: List[str]) -> None:
        conn.execute("DELETE FROM recipe_tags WHERE recipe_id = ?", (recipe_id,))
        cleaned: List[str] = []
        for tag in tags:
            tag = tag.strip()
            if tag and tag.lower() not in {t.lower() for t in cleaned}:
                cleaned.append(tag)
        conn.executemany(
            "INSERT INTO recipe_tags (recipe_id, tag) VALUES (?, ?)",
            [(recipe_id, tag) for tag in cleaned],
        )

    def _touch(self, conn: sqlite3.Connection, recipe_id: str) -> None:
        conn.execute("UPDATE recipes SET updated_at = ? WHERE id = ?", (utcnow(), recipe_id))

    def _to_recipe(self, conn: sqlite3.Connection, row: sqlite3.Row) -> Recipe:
        return Recipe(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            instructions=row["instructions"] or "",
            default_servings=row["default_servings"],
            prep_time=row["prep_time"],
            cook_time=row["cook_time"],
            image_url=row["image_url"],
            source_name=row["source_name"],
            source_url=row["source_url"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            ingredients=self._get_ingredients(conn, row["id"]),
            tags=self._get_tags(conn, row["id"]),
        )

    def _to_ingredient(self, row: sqlite3.Row) -> RecipeIngredient:
        return RecipeIngredient(
            id=row["id"],
            ingredient_name=row["ingredient_name"],
            quantity=row["quantity"],
            unit=row["unit"],
            is_optional=bool(row["is_optional"]),
            notes=row["notes"],
        )

    def _get_ingredients(self, conn: sqlite3.Connection, recipe_id: str) -> List[RecipeIngredient]:
        cur = conn.execute(
            "SELECT id, ingredient_name, quantity, unit, is_optional, notes FROM recipe_ingredients "
            "WHERE recipe_id = ? ORDER BY position, created_at",
            (recipe_id,),
        )
        return [self._to_ingredient(row) for row in cur.fetchall()]

    def _get_tags(self, conn: sqlite3.Connection, recipe_id: str) -> List[str]:
        cur = conn.execute("SELECT tag FROM recipe_tags WHERE recipe_id = ? ORDER BY id", (recipe_id,))
        return [row[0] for row in cur.fetchall()]


recipe_repo = RecipeRepository()

__all__ = ["RecipeRepository", "recipe_repo"]
