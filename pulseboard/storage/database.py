"""PostgreSQL access: a psycopg_pool pool with one checked-out connection per thread.

Sync FastAPI handlers run on a threadpool. A thread borrows a connection on
its first query and keeps it until commit(), rollback() or release_if_held().
Repository and account operations are wrapped in @releases_connection so the
borrowing thread always hands its connection back before returning.
"""

from __future__ import annotations

import functools
import logging
import threading
from contextlib import contextmanager
from pathlib import Path

import psycopg
from psycopg.pq import TransactionStatus
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from pulseboard.config import DatabaseConfig

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"

_OPEN_TX = (TransactionStatus.INTRANS, TransactionStatus.INERROR)


def releases_connection(func):
    """Return the calling thread's connection to the pool when `func` exits.

    For methods of objects holding a `db`. The release runs on the thread
    that borrowed the connection; request teardown may run elsewhere. A
    transaction still open at exit (read-only work, or an error before
    commit) is rolled back.
    """
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        finally:
            self.db.release_if_held()
    return wrapper


class Database:
    """Pooled connections, dict rows, explicit commit."""

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._pool: ConnectionPool | None = None
        self._held = threading.local()

    # --- lifecycle ---

    def connect(self) -> None:
        self._pool = ConnectionPool(
            self.config.dsn,
            min_size=self.config.pool_min,
            max_size=self.config.pool_max,
            kwargs={"row_factory": dict_row, "autocommit": False},
            open=True,
        )
        self._pool.wait()
        logger.info(
            "Database pool open on %s:%s/%s (%d..%d connections)",
            self.config.host, self.config.port, self.config.name,
            self.config.pool_min, self.config.pool_max,
        )

    def close(self) -> None:
        self._give_back()
        if self._pool is not None:
            self._pool.close()
            self._pool = None
            logger.info("Database pool closed")

    # --- per-thread connection ---

    def _borrowed(self) -> psycopg.Connection | None:
        conn = getattr(self._held, "conn", None)
        if conn is None or conn.closed:
            return None
        return conn

    @property
    def conn(self) -> psycopg.Connection:
        conn = self._borrowed()
        if conn is not None:
            if conn.info.transaction_status == TransactionStatus.INERROR:
                logger.warning("Discarding aborted transaction left on thread connection")
                conn.rollback()
            return conn
        if self._pool is None:
            raise RuntimeError("Database.connect() has not been called")
        self._held.conn = self._pool.getconn()
        return self._held.conn

    def _give_back(self) -> None:
        conn = getattr(self._held, "conn", None)
        self._held.conn = None
        if conn is None or self._pool is None:
            return
        try:
            self._pool.putconn(conn)
        except psycopg.Error:
            logger.warning("Could not return connection to pool", exc_info=True)

    # --- queries ---

    @contextmanager
    def _cursor(self, query: str, params):
        with self.conn.cursor() as cur:
            cur.execute(query, params)
            yield cur

    def execute(self, query: str, params: tuple | list | None = None) -> list[dict]:
        """Run a statement; rows if it produced any, else []."""
        with self._cursor(query, params) as cur:
            return cur.fetchall() if cur.description else []

    def execute_one(self, query: str, params: tuple | list | None = None) -> dict | None:
        with self._cursor(query, params) as cur:
            return cur.fetchone() if cur.description else None

    def commit(self) -> None:
        self.conn.commit()
        self._give_back()

    def rollback(self) -> None:
        self.conn.rollback()
        self._give_back()

    def release_if_held(self) -> None:
        """End-of-request cleanup: roll back any open transaction and free the connection."""
        conn = self._borrowed()
        if conn is None:
            return
        if conn.info.transaction_status in _OPEN_TX:
            try:
                conn.rollback()
            except psycopg.Error:
                logger.warning("Rollback during release failed", exc_info=True)
        self._give_back()

    # --- schema ---

    def _applied_migrations(self) -> set[str]:
        self.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                filename TEXT PRIMARY KEY,
                applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
            """
        )
        self.commit()
        return {row["filename"] for row in self.execute("SELECT filename FROM schema_migrations")}

    def run_migrations(self) -> int:
        """Apply migrations/*.sql not yet recorded, in filename order. Returns how many ran."""
        done = self._applied_migrations()
        pending = [p for p in sorted(MIGRATIONS_DIR.glob("*.sql")) if p.name not in done]

        for path in pending:
            logger.info("Applying migration %s", path.name)
            try:
                self.execute(path.read_text())
                self.execute("INSERT INTO schema_migrations (filename) VALUES (%s)", (path.name,))
                self.commit()
            except psycopg.Error:
                self.rollback()
                logger.exception("Migration %s failed", path.name)
                raise

        self.release_if_held()
        logger.info("Schema up to date (%d applied now, %d before)", len(pending), len(done))
        return len(pending)
