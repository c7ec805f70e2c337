"""Shared test fixtures."""

import gzip
from pathlib import Path

import pytest

from csvseed import create_service


class RecordingSink:
    """In-memory table sink: a fixed schema plus a log of insert calls."""

    def __init__(self, schema: dict[str, set[str]] | None = None, fail_on: set[int] = frozenset()):
        self.schema = schema or {}
        self.fail_on = fail_on
        self.calls: list[list[dict]] = []
        self.rows: list[dict] = []

    def column_name(self, table: str, column: str) -> str | None:
        columns = self.schema.get(table, set())
        if column in columns:
            return column
        return next((c for c in columns if c.lower() == column.lower()), None)

    def has_column(self, table: str, column: str) -> bool:
        return self.column_name(table, column) is not None

    def insert_records(self, table: str, records: list[dict]) -> None:
        self.calls.append(list(records))
        if len(self.calls) in self.fail_on:
            raise RuntimeError(f"insert #{len(self.calls)} rejected")
        self.rows.extend(records)


class ReversingHasher:
    """Deterministic stand-in for the password hasher."""

    def hash(self, plaintext: str) -> str:
        return "hashed:" + plaintext[::-1]


@pytest.fixture
def db_service(tmp_path):
    """Provide a fresh SQLite DatabaseService for each test."""
    db_path = tmp_path / "test.db"
    service = create_service(f"sqlite:///{db_path}")
    service.connect()
    yield service
    service.close()


@pytest.fixture
def users_sink():
    return RecordingSink({"users": {"id", "name", "password"}})


@pytest.fixture
def hasher():
    return ReversingHasher()


@pytest.fixture
def write_csv(tmp_path):
    """Write text to a CSV file, optionally gzipped, and return its path."""

    def _write(text: str, name: str = "users.csv", gzipped: bool = False, encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        data = text.encode(encoding)
        path.write_bytes(gzip.compress(data) if gzipped else data)
        return path

    return _write


@pytest.fixture
def make_sink():
    return RecordingSink
