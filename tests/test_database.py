"""Tests for pulseboard.storage.database.Database connection handling."""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest
from psycopg.pq import TransactionStatus

from pulseboard.config import DatabaseConfig
from pulseboard.core.users import UserManager
from pulseboard.core.utils import NotFoundError
from pulseboard.core.window import trailing_window
from pulseboard.storage.database import MIGRATIONS_DIR, Database
from pulseboard.storage.repository import AnalyticsRepository, EventRepository
from tests.helpers import NOW, pooled_database


def _db_with_conn(status=TransactionStatus.IDLE):
    db = Database(DatabaseConfig())
    conn = MagicMock()
    conn.closed = False
    conn.info.transaction_status = status
    db._pool = MagicMock()
    db._pool.getconn = MagicMock(return_value=conn)
    return db, conn


class TestConnections:
    def test_requires_connect(self):
        with pytest.raises(RuntimeError):
            Database(DatabaseConfig()).conn

    def test_connection_reused_on_thread(self):
        db, conn = _db_with_conn()
        assert db.conn is db.conn
        db._pool.getconn.assert_called_once()

    def test_commit_returns_connection(self):
        db, conn = _db_with_conn()
        db.conn
        db.commit()
        conn.commit.assert_called_once()
        db._pool.putconn.assert_called_once_with(conn)

    def test_release_rolls_back_open_transaction(self):
        db, conn = _db_with_conn(TransactionStatus.INTRANS)
        db.conn
        db.release_if_held()
        conn.rollback.assert_called_once()
        db._pool.putconn.assert_called_once_with(conn)

    def test_release_without_connection_is_noop(self):
        db, _ = _db_with_conn()
        db.release_if_held()
        db._pool.putconn.assert_not_called()

    def test_aborted_transaction_rolled_back_before_reuse(self):
        db, conn = _db_with_conn()
        db.conn
        conn.info.transaction_status = TransactionStatus.INERROR
        db.conn
        conn.rollback.assert_called_once()


class TestMigrations:
    def test_pending_applied_in_order(self):
        db = Database(DatabaseConfig())
        db.execute = MagicMock(side_effect=lambda sql, params=None: [])
        db.commit = MagicMock()
        applied = db.run_migrations()

        files = sorted(p.name for p in MIGRATIONS_DIR.glob("*.sql"))
        assert applied == len(files) >= 1
        recorded = [c.args[1][0] for c in db.execute.call_args_list if c.args[0].startswith("INSERT INTO schema_migrations")]
        assert recorded == files

    def test_already_applied_skipped(self):
        db = Database(DatabaseConfig())
        files = [{"filename": p.name} for p in MIGRATIONS_DIR.glob("*.sql")]
        db.execute = MagicMock(side_effect=lambda sql, params=None: files if sql.startswith("SELECT") else [])
        db.commit = MagicMock()
        assert db.run_migrations() == 0


class TestReleasesConnection:
    def test_repository_reads_return_connection(self):
        db, pool = pooled_database()
        repo = AnalyticsRepository(db)
        window = trailing_window(30, now=NOW)
        repo.sessions(window)
        repo.page_view_count(window)
        assert pool.borrowed == 2
        assert pool.checked_out == 0

    def test_released_on_error(self):
        db, pool = pooled_database()
        with pytest.raises(NotFoundError):
            UserManager(db).get(5)
        assert pool.checked_out == 0

    def test_concurrent_reads_leave_nothing_checked_out(self):
        db, pool = pooled_database()
        repo = AnalyticsRepository(db)
        events = EventRepository(db)
        window = trailing_window(30, now=NOW)

        def read(i):
            if i % 2:
                return len(repo.page_views(window))
            return events.page(limit=10)[1]

        with ThreadPoolExecutor(max_workers=16) as executor:
            list(executor.map(read, range(400)))

        assert pool.borrowed == 400
        assert pool.checked_out == 0
