from __future__ import annotations

import logging
import sqlite3
from typing import List

from core.database import connection_scope, new_id, transaction_scope, utcnow
from core.errors import BadRequestError, ConflictError, NotFoundError
from models.review import RecipeReviews, Review, ReviewCreate, ReviewUpdate
from services.recipe_service import recipe_service

log = logging.getLogger("kitchen_pal.reviews")

_SELECT = (
    "SELECT v.id, v.recipe_id, r.name AS recipe_name, v.user_id, v.rating, v.comment, v.created_at, v.updated_at, "
    "TRIM(COALESCE(u.first_name, '') || ' ' || COALESCE(u.last_name, '')) AS reviewer_name "
    "FROM recipe_reviews v "
    "JOIN recipes r ON r.id = v.recipe_id "
    "JOIN users u ON u.id = v.user_id "
)

# Tillåtna sorteringar; värdena går rakt in i ORDER BY
_ORDER_COLUMNS = {"created_at": "v.created_at", "rating": "v.rating"}


def _to_review(row: sqlite3.Row) -> Review:
    data = {key: row[key] for key in row.keys()}
    data["reviewer_name"] = data["reviewer_name"] or None
    return Review(**data)


def _order_by(sort_by: str, sort_order: str) -> str:
    column = _ORDER_COLUMNS.get(sort_by)
    if column is None or sort_order not in ("asc", "desc"):
        raise BadRequestError("Unsupported sort order", {"sort_by": sort_by, "sort_order": sort_order})
    return f"ORDER BY {column} {sort_order.upper()}, v.id"


class ReviewService:
    def list_for_recipe(
        self, user_id: str, recipe_id: str, sort_by: str = "created_at", sort_order: str = "desc"
    ) -> RecipeReviews:
        recipe = recipe_service.get_recipe(user_id, recipe_id)
        with connection_scope() as conn:
            rows = conn.execute(
                _SELECT + "WHERE v.recipe_id = ? " + _order_by(sort_by, sort_order), (recipe_id,)
            ).fetchall()
        reviews = [_to_review(row) for row in rows]
        average = round(sum(r.rating for r in reviews) / len(reviews), 2) if reviews else None
        return RecipeReviews(
            recipe_id=recipe_id,
            recipe_name=recipe.name,
            total_reviews=len(reviews),
            average_rating=average,
            reviews=reviews,
        )

    def list_mine(self, user_id: str, sort_by: str = "created_at", sort_order: str = "desc") -> List[Review]:
        with connection_scope() as conn:
            rows = conn.execute(_SELECT + "WHERE v.user_id = ? " + _order_by(sort_by, sort_order), (user_id,)).fetchall()
        return [_to_review(row) for row in rows]

    def get_review(self, user_id: str, review_id: str) -> Review:
        with connection_scope() as conn:
            row = conn.execute(_SELECT + "WHERE v.id = ? AND v.user_id = ?", (review_id, user_id)).fetchone()
        if not row:
            raise NotFoundError("Review not found")
        return _to_review(row)

    def add_review(self, user_id: str, recipe_id: str, data: ReviewCreate) -> Review:
        recipe_service.get_recipe(user_id, recipe_id)
        review_id = new_id()
        now = utcnow()
        with transaction_scope() as conn:
            existing = conn.execute(
                "SELECT id FROM recipe_reviews WHERE recipe_id = ? AND user_id = ?", (recipe_id, user_id)
            ).fetchone()
            if existing:
                raise ConflictError("You have already reviewed this recipe", {"existing_review_id": existing["id"]})
            conn.execute(
                "INSERT INTO recipe_reviews (id, recipe_id, user_id, rating, comment, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (review_id, recipe_id, user_id, data.rating, data.comment, now, now),
            )
        log.info("Review %s added to recipe %s", review_id, recipe_id)
        return self.get_review(user_id, review_id)

    def update_review(self, user_id: str, review_id: str, data: ReviewUpdate) -> Review:
        self.get_review(user_id, review_id)
        fields = data.model_dump(exclude_unset=True)
        if fields.get("rating", 0) is None:
            raise BadRequestError("rating cannot be null")
        if fields:
            assignments = ", ".join(f"{key} = ?" for key in fields)
            with connection_scope() as conn:
                conn.execute(
                    f"UPDATE recipe_reviews SET {assignments}, updated_at = ? WHERE id = ? AND user_id = ?",
                    (*fields.values(), utcnow(), review_id, user_id),
                )
                conn.commit()
        return self.get_review(user_id, review_id)

    def delete_review(self, user_id: str, review_id: str) -> None:
        with connection_scope() as conn:
            cur = conn.execute("DELETE FROM recipe_reviews WHERE id = ? AND user_id = ?", (review_id, user_id))
            conn.commit()
        if cur.rowcount == 0:
            raise NotFoundError("Review not found")


# Delad instans
review_service = ReviewService()

__all__ = ["ReviewService", "review_service"]
