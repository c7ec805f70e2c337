"""SQLite implementation of DatabaseService."""

import sqlite3
import threading
from contextlib import contextmanager
from queue import Empty, Queue
from typing import Any, Iterator

from csvseed.database.service import DatabaseService, quote_identifier
from csvseed.database.types import Params, ParamsList


class SQLiteDatabaseService(DatabaseService):
    """SQLite backend using stdlib sqlite3.

    Connections live in a Queue-based pool. Each transaction() call acquires
    a dedicated connection, binds it to the current thread and returns it on
    exit.
    """

    def __init__(self, db_path: str, pool_size: int = 4):
        self._db_path = db_path
        # every :memory: connection is its own database, so share a single one
        self._pool_size = 1 if db_path == ":memory:" else pool_size
        self._pool: Queue[sqlite3.Connection] = Queue(maxsize=pool_size)
        self._local = threading.local()

    def connect(self) -> None:
        for _ in range(self._pool_size):
            conn = sqlite3.connect(self._db_path, check_same_thread=False)
            conn.execute("PRAGMA foreign_keys=ON")
            if self._db_path != ":memory:":
                conn.execute("PRAGMA journal_mode=WAL")
            self._pool.put(conn)

    def close(self) -> None:
        while not self._pool.empty():
            try:
                conn = self._pool.get_nowait()
                conn.close()
            except Empty:
                break

    def _acquire(self) -> sqlite3.Connection:
        return self._pool.get(timeout=30)

    def _release(self, conn: sqlite3.Connection) -> None:
        self._pool.put(conn)

    def _get_conn(self) -> sqlite3.Connection:
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            return conn
        raise RuntimeError(
            "No active transaction. Wrap calls in a `with service.transaction():` block."
        )

    @contextmanager
    def transaction(self) -> Iterator[None]:
        conn = self._acquire()
        self._local.conn = conn
        try:
            yield
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            self._release(conn)

    def execute(self, sql: str, params: Params | None = None) -> list[dict[str, Any]]:
        cursor = self._get_conn().execute(sql, params or ())
        if cursor.description is None:
            return []
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def execute_many(self, sql: str, params_list: ParamsList) -> None:
        self._get_conn().executemany(sql, params_list)

    def execute_ddl(self, sql: str) -> None:
        conn = self._acquire()
        try:
            conn.executescript(sql)
            conn.commit()
        finally:
            self._release(conn)

    def batch_insert(self, table: str, columns: list[str], rows: list[tuple]) -> None:
        if not rows:
            return
        cols = ", ".join(quote_identifier(c) for c in columns)
        placeholders = ", ".join("?" for _ in columns)
        sql = f"INSERT INTO {quote_identifier(table)} ({cols}) VALUES ({placeholders})"
        self.execute_many(sql, rows)

    def column_name(self, table: str, column: str) -> str | None:
        sql = f"PRAGMA table_info({quote_identifier(table)})"
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            rows = conn.execute(sql).fetchall()
        else:
            conn = self._acquire()
            try:
                rows = conn.execute(sql).fetchall()
            finally:
                self._release(conn)
        # table_info yields no rows for a missing table
        names = [info[1] for info in rows]
        if column in names:
            return column
        wanted = column.lower()
        return next((name for name in names if name.lower() == wanted), None)
