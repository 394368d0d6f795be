"""Shared test helpers for PulseBoard tests."""

import threading
from datetime import datetime, timezone
from unittest.mock import MagicMock

from psycopg.pq import TransactionStatus

from pulseboard.config import DatabaseConfig
from pulseboard.core.models import EventRecord, PageViewRecord, SessionRecord, VisitorRecord
from pulseboard.storage.database import Database

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def ts(day: int, hour: int = 12, month: int = 3) -> datetime:
    return datetime(2024, month, day, hour, 0, tzinfo=timezone.utc)


def visitor(vid: int, device="desktop", browser="Chrome", country="US") -> VisitorRecord:
    return VisitorRecord(id=vid, country=country, browser=browser, device=device)


def session(sid: int, vid: int, started_at=None, duration=0, page_views=1, **visitor_kw) -> SessionRecord:
    return SessionRecord(
        id=sid,
        visitor_id=vid,
        started_at=started_at or NOW,
        duration=duration,
        page_view_count=page_views,
        visitor=visitor(vid, **visitor_kw),
    )


def page_view(pid: int, path="/", created_at=None, referrer=None, visitor_id=None, session_id=1) -> PageViewRecord:
    return PageViewRecord(
        id=pid,
        session_id=session_id,
        path=path,
        created_at=created_at or NOW,
        referrer=referrer,
        visitor_id=visitor_id,
    )


def event(eid: int, name="signup", category="conversion", count=1, date=None) -> EventRecord:
    return EventRecord(id=eid, name=name, category=category, count=count, date=date or NOW)


class CountingPool:
    """Stands in for psycopg_pool.ConnectionPool; tracks connections checked out."""

    def __init__(self):
        self._lock = threading.Lock()
        self.checked_out = 0
        self.borrowed = 0

    def getconn(self):
        with self._lock:
            self.checked_out += 1
            self.borrowed += 1
        conn = MagicMock()
        conn.closed = False
        conn.info.transaction_status = TransactionStatus.INTRANS
        conn.cursor.return_value.__enter__.return_value.description = None
        return conn

    def putconn(self, conn):
        with self._lock:
            self.checked_out -= 1


def pooled_database() -> tuple[Database, CountingPool]:
    db = Database(DatabaseConfig())
    pool = CountingPool()
    db._pool = pool
    return db, pool
