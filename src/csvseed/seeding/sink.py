"""Chunked insertion of mapped records."""

import logging
from typing import Protocol

from csvseed.database.types import Record

logger = logging.getLogger(__name__)


class TableSink(Protocol):
    """Destination capability: schema membership and bulk insert.

    DatabaseService implements it; tests use an in-memory fake.
    """

    def column_name(self, table: str, column: str) -> str | None: ...

    def insert_records(self, table: str, records: list[Record]) -> None: ...


class BatchSink:
    """Accumulates records and inserts them `chunk_size` at a time.

    Each flush hands off the current batch and starts a new one before the
    insert is attempted, so a chunk that fails to insert is dropped and can
    never be inserted twice.
    """

    def __init__(
        self,
        sink: TableSink,
        table: str,
        chunk_size: int,
        source_name: str = "",
        logger: logging.Logger = logger,
    ):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
        self._sink = sink
        self._table = table
        self._chunk_size = chunk_size
        self._source_name = source_name
        self._logger = logger
        self._batch: list[Record] = []
        self.chunks = 0
        self.failed_chunks = 0
        self.inserted = 0
        self.dropped = 0

    @property
    def pending(self) -> int:
        return len(self._batch)

    def add(self, record: Record) -> None:
        self._batch.append(record)
        if len(self._batch) == self._chunk_size:
            self.flush()

    def flush(self) -> bool:
        """Insert the pending batch. Returns False if the insert failed."""
        if not self._batch:
            return True
        batch, self._batch = self._batch, []
        self.chunks += 1
        try:
            self._sink.insert_records(self._table, batch)
        except Exception as e:
            self.failed_chunks += 1
            self.dropped += len(batch)
            self._logger.error("CSV insert failed: %s - file: %s", e, self._source_name)
            return False
        self.inserted += len(batch)
        self._logger.debug(
            "Chunk %d: inserted %d rows into %s (total: %d)",
            self.chunks,
            len(batch),
            self._table,
            self.inserted,
        )
        return True

    def close(self) -> bool:
        """Flush whatever is left over."""
        return self.flush()
