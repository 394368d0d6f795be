"""DB-persisted admin settings (site name, maintenance mode, theme, ...).

Each row is a string key/value pair with a description and the user who
last changed it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pulseboard.storage.database import Database

logger = logging.getLogger(__name__)

_SELECT = """
    SELECT s.id, s.key, s.value, s.description, s.updated_at,
           u.id AS updated_by_id, u.name AS updated_by_name, u.email AS updated_by_email
    FROM settings s
    LEFT JOIN users u ON u.id = s.updated_by
"""


def _to_dict(row: dict) -> dict:
    updated_by = None
    if row["updated_by_id"] is not None:
        updated_by = {
            "id": row["updated_by_id"],
            "name": row["updated_by_name"],
            "email": row["updated_by_email"],
        }
    return {
        "id": row["id"],
        "key": row["key"],
        "value": row["value"],
        "description": row["description"],
        "updatedAt": row["updated_at"].isoformat() if row["updated_at"] else None,
        "updatedBy": updated_by,
    }


def load_all(db: Database) -> list[dict]:
    """All settings ordered by key."""
    try:
        rows = db.execute(_SELECT + " ORDER BY s.key ASC")
    finally:
        db.release_if_held()
    return [_to_dict(r) for r in rows]


def get(db: Database, setting_id: int) -> dict | None:
    try:
        row = db.execute_one(_SELECT + " WHERE s.id = %s", (setting_id,))
    finally:
        db.release_if_held()
    return _to_dict(row) if row else None


def update(db: Database, setting_id: int, value: str, user_id: int) -> dict | None:
    """Set a value and record who changed it. Returns None if the id is unknown."""
    try:
        row = db.execute_one(
            """
            UPDATE settings SET value = %s, updated_by = %s, updated_at = NOW()
            WHERE id = %s
            RETURNING id
            """,
            (value, user_id, setting_id),
        )
        if row is None:
            db.rollback()
            return None
        db.commit()
    finally:
        db.release_if_held()
    logger.info("Setting #%d updated by user #%d", setting_id, user_id)
    return get(db, setting_id)
