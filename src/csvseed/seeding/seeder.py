"""Seed a database table from a (possibly gzipped) delimited file."""

import csv
import logging
import zlib
from dataclasses import dataclass

from csvseed.seeding.config import SeedConfig
from csvseed.seeding.hashing import PasswordHasher, Pbkdf2Hasher
from csvseed.seeding.mapping import RowMapper
from csvseed.seeding.sink import BatchSink, TableSink
from csvseed.seeding.source import open_source, read_rows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedResult:
    source_available: bool = False
    records: int = 0
    inserted: int = 0
    chunks: int = 0
    failed_chunks: int = 0
    # set when reading or resolving the header stopped the run early
    error: str | None = None

    def __bool__(self) -> bool:
        return self.source_available and self.failed_chunks == 0 and self.error is None


class CsvSeeder:
    """Streams one CSV file into one table.

    The file is read a row at a time and never held in memory as a whole.
    Records are inserted in chunks of `config.insert_chunk_size`; a chunk
    that fails is logged and skipped, and the run carries on with the rest
    of the file.
    """

    def __init__(
        self,
        service: TableSink,
        config: SeedConfig,
        hasher: PasswordHasher | None = None,
        logger: logging.Logger = logger,
    ):
        self.service = service
        self.config = config
        self.hasher = hasher or Pbkdf2Hasher()
        self.logger = logger

    def run(self) -> SeedResult:
        return self.seed_from_csv()

    def seed_from_csv(
        self, filename: str | None = None, delimiter: str | None = None
    ) -> SeedResult:
        config = self.config.with_source(filename, delimiter)

        stream = open_source(config.filename, config.encoding, logger=self.logger)
        if stream is None:
            return SeedResult()

        mapper = RowMapper(
            config.table,
            self.service,
            offset_rows=config.offset_rows,
            column_mapping=config.column_mapping,
            trim_whitespace=config.trim_whitespace,
            hashable=config.hashable,
            hasher=self.hasher,
        )
        sink = BatchSink(
            self.service,
            config.table,
            config.insert_chunk_size,
            source_name=config.filename,
            logger=self.logger,
        )

        records = 0
        error = None
        with stream:
            # rows mapped before an error are still flushed below
            try:
                for record in mapper.map(read_rows(stream, config.delimiter)):
                    records += 1
                    sink.add(record)
            except (OSError, EOFError, UnicodeDecodeError, csv.Error, zlib.error) as e:
                error = str(e)
                self.logger.error("CSV read failed: %s - file: %s", e, config.filename)
            except Exception as e:
                # schema lookups while resolving the header; insert errors never get here
                error = str(e)
                self.logger.error("CSV insert failed: %s - file: %s", e, config.filename)
            sink.close()

        self.logger.info(
            "Seeded %s from %s: %d of %d rows inserted in %d chunks (%d failed)",
            config.table,
            config.filename,
            sink.inserted,
            records,
            sink.chunks,
            sink.failed_chunks,
        )
        return SeedResult(
            source_available=True,
            records=records,
            inserted=sink.inserted,
            chunks=sink.chunks,
            failed_chunks=sink.failed_chunks,
            error=error,
        )


def seed_from_csv(
    service: TableSink,
    config: SeedConfig,
    hasher: PasswordHasher | None = None,
) -> SeedResult:
    """Convenience wrapper around CsvSeeder(...).run()."""
    return CsvSeeder(service, config, hasher).run()
