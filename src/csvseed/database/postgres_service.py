"""PostgreSQL implementation of DatabaseService."""

import threading
from contextlib import contextmanager
from queue import Empty, Queue
from typing import Any, Iterator

import psycopg2
import psycopg2.extras

from csvseed.database.service import DatabaseService, quote_identifier
from csvseed.database.types import Params, ParamsList

COLUMN_NAME_SQL = """
SELECT column_name
FROM information_schema.columns
WHERE table_schema = current_schema()
  AND table_name = %s
  AND lower(column_name) = lower(%s)
ORDER BY (column_name = %s) DESC
LIMIT 1
"""


class PostgresDatabaseService(DatabaseService):
    """PostgreSQL backend using psycopg2.

    Same pooling model as the SQLite backend: a Queue of connections, one
    bound to the current thread per transaction().
    """

    def __init__(self, dsn: str, pool_size: int = 4):
        self._dsn = dsn
        self._pool_size = pool_size
        self._pool: Queue = Queue(maxsize=pool_size)
        self._local = threading.local()

    def connect(self) -> None:
        for _ in range(self._pool_size):
            conn = psycopg2.connect(self._dsn)
            conn.autocommit = False
            self._pool.put(conn)

    def close(self) -> None:
        while not self._pool.empty():
            try:
                conn = self._pool.get_nowait()
                conn.close()
            except Empty:
                break

    def _acquire(self):
        return self._pool.get(timeout=30)

    def _release(self, conn) -> None:
        self._pool.put(conn)

    def _get_conn(self):
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
        with self._get_conn().cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
            cur.execute(sql, params or ())
            if cur.description is None:
                return []
            return [dict(row) for row in cur.fetchall()]

    def execute_many(self, sql: str, params_list: ParamsList) -> None:
        with self._get_conn().cursor() as cur:
            psycopg2.extras.execute_batch(cur, sql, params_list)

    def execute_ddl(self, sql: str) -> None:
        conn = self._acquire()
        try:
            with conn.cursor() as cur:
                for statement in sql.split(";"):
                    statement = statement.strip()
                    if statement:
                        cur.execute(statement)
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._release(conn)

    def batch_insert(self, table: str, columns: list[str], rows: list[tuple]) -> None:
        if not rows:
            return
        cols = ", ".join(quote_identifier(c) for c in columns)
        placeholders = ", ".join("%s" for _ in columns)
        sql = f"INSERT INTO {quote_identifier(table)} ({cols}) VALUES ({placeholders})"
        self.execute_many(sql, rows)

    def column_name(self, table: str, column: str) -> str | None:
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            return self._lookup_column(conn, table, column)
        conn = self._acquire()
        try:
            name = self._lookup_column(conn, table, column)
            conn.commit()
            return name
        except Exception:
            conn.rollback()
            raise
        finally:
            self._release(conn)

    @staticmethod
    def _lookup_column(conn, table: str, column: str) -> str | None:
        with conn.cursor() as cur:
            cur.execute(COLUMN_NAME_SQL, (table, column, column))
            row = cur.fetchone()
        return row[0] if row is not None else None
