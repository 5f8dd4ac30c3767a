from __future__ import annotations

import logging
import sqlite3
from typing import List

from core.database import connection_scope, new_id, utcnow
from core.errors import NotFoundError
from models.feedback import Feedback, FeedbackCreate

log = logging.getLogger("kitchen_pal.feedback")

_COLUMNS = "id, feedback_type, category, subject, message, priority, status, created_at, updated_at"


def _to_feedback(row: sqlite3.Row) -> Feedback:
    return Feedback(**{key: row[key] for key in row.keys()})


class FeedbackService:
    def submit(self, user_id: str, data: FeedbackCreate) -> Feedback:
        feedback_id = new_id()
        now = utcnow()
        with connection_scope() as conn:
            conn.execute(
                "INSERT INTO feedback (id, user_id, feedback_type, category, subject, message, priority, status, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, 'pending', ?, ?)",
                (
                    feedback_id,
                    user_id,
                    data.feedback_type.value,
                    data.category,
                    data.subject,
                    data.message.strip(),
                    data.priority.value,
                    now,
                    now,
                ),
            )
            conn.commit()
        log.info("Feedback %s (%s) submitted", feedback_id, data.feedback_type.value)
        return self.get_feedback(user_id, feedback_id)

    def list_feedback(self, user_id: str) -> List[Feedback]:
        with connection_scope() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM feedback WHERE user_id = ? ORDER BY created_at DESC", (user_id,)
            ).fetchall()
        return [_to_feedback(row) for row in rows]

    def get_feedback(self, user_id: str, feedback_id: str) -> Feedback:
        with connection_scope() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM feedback WHERE id = ? AND user_id = ?", (feedback_id, user_id)
            ).fetchone()
        if not row:
            raise NotFoundError("Feedback not found")
        return _to_feedback(row)


feedback_service = FeedbackService()

__all__ = ["FeedbackService", "feedback_service"]
