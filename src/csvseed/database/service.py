"""Abstract DatabaseService interface."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator

from csvseed.database.types import Params, ParamsList, Record


def quote_identifier(name: str) -> str:
    """Double-quote a table or column name for use in generated SQL."""
    return '"' + name.replace('"', '""') + '"'


class DatabaseService(ABC):
    """Database-agnostic interface used as the seeding target.

    Backends answer schema-membership queries (has_column) and take bulk
    inserts of mapped records (insert_records). They never create or alter
    the destination schema on their own.
    """

    @abstractmethod
    def connect(self) -> None:
        """Initialize the connection pool."""

    @abstractmethod
    def close(self) -> None:
        """Close all connections and release resources."""

    @abstractmethod
    def execute(self, sql: str, params: Params | None = None) -> list[dict[str, Any]]:
        """Execute a single SQL statement and return rows as dicts."""

    @abstractmethod
    def execute_many(self, sql: str, params_list: ParamsList) -> None:
        """Execute a SQL statement for each parameter set."""

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Context manager: acquires a connection, commits on success, rolls back on error."""

    @abstractmethod
    def execute_ddl(self, sql: str) -> None:
        """Execute DDL statements (CREATE TABLE, DROP TABLE, etc.)."""

    @abstractmethod
    def batch_insert(self, table: str, columns: list[str], rows: list[tuple]) -> None:
        """Insert multiple rows into a table inside the active transaction."""

    @abstractmethod
    def column_name(self, table: str, column: str) -> str | None:
        """Return the table's own spelling of `column`, matched case-insensitively.

        An exact match wins over a case-insensitive one. None if the table or
        the column does not exist.
        """

    def has_column(self, table: str, column: str) -> bool:
        """Return True if `table` exists and has a column named `column` (any case)."""
        return self.column_name(table, column) is not None

    def insert_records(self, table: str, records: list[Record]) -> None:
        """Bulk insert mapped records in a single transaction.

        The column list is the union of the record keys in first-seen order;
        a record lacking one of those keys inserts NULL there.
        """
        if not records:
            return
        columns = list(dict.fromkeys(col for record in records for col in record))
        rows = [tuple(record.get(col) for col in columns) for record in records]
        with self.transaction():
            self.batch_insert(table, columns, rows)
