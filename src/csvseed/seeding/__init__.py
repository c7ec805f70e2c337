"""CSV seeding: open, map and insert delimited files chunk by chunk."""

from csvseed.seeding.config import SeedConfig, parse_column_mapping, seeder_basename
from csvseed.seeding.hashing import PasswordHasher, Pbkdf2Hasher
from csvseed.seeding.mapping import ColumnMapping, RowMapper, strip_utf8_bom
from csvseed.seeding.seeder import CsvSeeder, SeedResult, seed_from_csv
from csvseed.seeding.sink import BatchSink, TableSink
from csvseed.seeding.source import detect_mime_type, open_source, read_rows

__all__ = [
    "BatchSink",
    "ColumnMapping",
    "CsvSeeder",
    "PasswordHasher",
    "Pbkdf2Hasher",
    "RowMapper",
    "SeedConfig",
    "SeedResult",
    "TableSink",
    "detect_mime_type",
    "open_source",
    "parse_column_mapping",
    "read_rows",
    "seed_from_csv",
    "seeder_basename",
    "strip_utf8_bom",
]
