"""Read-side data access for analytics.

Queries return plain dict rows (psycopg dict_row); the helpers here map
them onto the record types in pulseboard.core.models so the aggregation
code never sees a query-shaped row.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pulseboard.core.models import EventRecord, PageViewRecord, SessionRecord, VisitorRecord
from pulseboard.core.window import Window
from pulseboard.storage.database import Database, releases_connection

logger = logging.getLogger(__name__)


def window_clause(column: str, window: Window) -> tuple[str, list[Any]]:
    """SQL predicate restricting `column` to the window."""
    op = "<=" if window.end_inclusive else "<"
    return f"{column} >= %s AND {column} {op} %s", [window.start, window.end]


# ============================================================
# Row adapters
# ============================================================

def session_from_row(row: dict) -> SessionRecord:
    visitor = None
    if row.get("device") is not None:
        visitor = VisitorRecord(
            id=row["visitor_id"],
            country=row["country"],
            browser=row["browser"],
            device=row["device"],
            os=row.get("os") or "",
        )
    return SessionRecord(
        id=row["id"],
        visitor_id=row["visitor_id"],
        started_at=row["started_at"],
        ended_at=row.get("ended_at"),
        duration=row.get("duration") or 0,
        page_view_count=row.get("page_view_count") or 0,
        visitor=visitor,
    )


def page_view_from_row(row: dict) -> PageViewRecord:
    return PageViewRecord(
        id=row["id"],
        session_id=row["session_id"],
        path=row["path"],
        referrer=row.get("referrer"),
        created_at=row["created_at"],
        visitor_id=row.get("visitor_id"),
    )


def event_from_row(row: dict) -> EventRecord:
    return EventRecord(
        id=row["id"],
        name=row["name"],
        category=row["category"],
        count=row["count"],
        date=row["date"],
    )


# ============================================================
# Repositories
# ============================================================

class AnalyticsRepository:
    """Visitor/session/page-view queries scoped to a window."""

    def __init__(self, db: Database):
        self.db = db

    @releases_connection
    def sessions(self, window: Window) -> list[SessionRecord]:
        """Sessions started in the window, with visitor attributes and page view counts."""
        where, params = window_clause("s.started_at", window)
        rows = self.db.execute(
            f"""
            SELECT s.id, s.visitor_id, s.started_at, s.ended_at, s.duration,
                   v.country, v.browser, v.device, v.os,
                   (SELECT COUNT(*) FROM page_views pv WHERE pv.session_id = s.id) AS page_view_count
            FROM sessions s
            JOIN visitors v ON v.id = s.visitor_id
            WHERE {where}
            ORDER BY s.started_at ASC, s.id ASC
            """,
            tuple(params),
        )
        return [session_from_row(r) for r in rows]

    @releases_connection
    def page_views(self, window: Window) -> list[PageViewRecord]:
        """Page views created in the window, joined to their session's visitor."""
        where, params = window_clause("pv.created_at", window)
        rows = self.db.execute(
            f"""
            SELECT pv.id, pv.session_id, pv.path, pv.referrer, pv.created_at,
                   s.visitor_id
            FROM page_views pv
            JOIN sessions s ON s.id = pv.session_id
            WHERE {where}
            ORDER BY pv.created_at ASC, pv.id ASC
            """,
            tuple(params),
        )
        return [page_view_from_row(r) for r in rows]

    @releases_connection
    def page_view_count(self, window: Window) -> int:
        where, params = window_clause("created_at", window)
        row = self.db.execute_one(
            f"SELECT COUNT(*) AS cnt FROM page_views WHERE {where}",
            tuple(params),
        )
        return row["cnt"] if row else 0


class EventRepository:
    """Pre-counted analytics events (the event-log explorer)."""

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _filters(
        category: str | None, start: datetime | None = None, end: datetime | None = None,
    ) -> tuple[str, list[Any]]:
        where: list[str] = []
        params: list[Any] = []
        if category:
            where.append("category = %s")
            params.append(category)
        if start is not None:
            where.append("date >= %s")
            params.append(start)
        if end is not None:
            where.append("date <= %s")
            params.append(end)
        return (" AND ".join(where) if where else "TRUE"), params

    @releases_connection
    def page(
        self, category: str | None = None,
        start: datetime | None = None, end: datetime | None = None,
        limit: int = 20, offset: int = 0,
    ) -> tuple[list[EventRecord], int]:
        """One page of events (newest first) and the total matching count."""
        where, params = self._filters(category, start, end)

        count_row = self.db.execute_one(
            f"SELECT COUNT(*) AS total FROM analytics_events WHERE {where}",
            tuple(params),
        )
        total = count_row["total"] if count_row else 0

        rows = self.db.execute(
            f"""
            SELECT id, name, category, count, date
            FROM analytics_events
            WHERE {where}
            ORDER BY date DESC, id DESC
            LIMIT %s OFFSET %s
            """,
            tuple(params + [limit, offset]),
        )
        return [event_from_row(r) for r in rows], total

    @releases_connection
    def all(self, category: str | None = None) -> list[EventRecord]:
        """Every matching event, oldest first."""
        where, params = self._filters(category)
        rows = self.db.execute(
            f"""
            SELECT id, name, category, count, date
            FROM analytics_events
            WHERE {where}
            ORDER BY date ASC, id ASC
            """,
            tuple(params),
        )
        return [event_from_row(r) for r in rows]
