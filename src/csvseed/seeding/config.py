"""Run configuration for a CSV seed."""

import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

SEEDER_SUFFIX = "TableSeeder"
SEED_DIR = Path("database") / "seeds" / "csvs"

DEFAULT_DELIMITER = ";"
DEFAULT_CHUNK_SIZE = 50
DEFAULT_HASHABLE = "password"


def snake_case(name: str) -> str:
    """UserProfiles and 'user profiles' -> user_profiles.

    Names made only of lowercase letters pass through untouched.
    """
    if re.fullmatch(r"[a-z]+", name):
        return name
    # capitalise each whitespace-separated word, then drop the whitespace
    name = re.sub(r"(^|\s)(\S)", lambda m: m.group(1) + m.group(2).upper(), name)
    name = re.sub(r"\s+", "", name)
    return re.sub(r"(.)(?=[A-Z])", r"\1_", name).lower()


def seeder_basename(seeder_name: str) -> str:
    """Derive the table/file base name from a seeder's name.

    >>> seeder_basename("UserProfilesTableSeeder")
    'user_profiles'
    """
    return snake_case(seeder_name.replace(SEEDER_SUFFIX, ""))


def parse_column_mapping(text: str) -> dict[int, str]:
    """Parse '0=id,2=name' into {0: 'id', 2: 'name'}."""
    mapping: dict[int, str] = {}
    for item in filter(None, (part.strip() for part in text.split(","))):
        index, sep, column = item.partition("=")
        if not sep or not column.strip():
            raise ValueError(f"Invalid column mapping entry {item!r}, expected INDEX=COLUMN")
        try:
            position = int(index)
        except ValueError:
            raise ValueError(f"Invalid column index {index!r} in {item!r}") from None
        if position < 0:
            raise ValueError(f"Column index must not be negative: {item!r}")
        mapping[position] = column.strip()
    return mapping


@dataclass(frozen=True)
class SeedConfig:
    """Everything one seed run needs to know. Immutable for the run."""

    table: str
    filename: str
    delimiter: str = DEFAULT_DELIMITER
    offset_rows: int = 0
    insert_chunk_size: int = DEFAULT_CHUNK_SIZE
    trim_whitespace: bool = True
    # column whose values are one-way hashed; None disables hashing
    hashable: str | None = DEFAULT_HASHABLE
    # {csv index: db column}; empty or None reads the header row
    column_mapping: Mapping[int, str] | None = field(default=None)
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if not self.table:
            raise ValueError("table must not be empty")
        if not self.filename:
            raise ValueError("filename must not be empty")
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {self.delimiter!r}")
        if self.offset_rows < 0:
            raise ValueError(f"offset_rows must not be negative, got {self.offset_rows}")
        if self.insert_chunk_size < 1:
            raise ValueError(
                f"insert_chunk_size must be at least 1, got {self.insert_chunk_size}"
            )
        if self.column_mapping is not None:
            object.__setattr__(self, "column_mapping", dict(self.column_mapping))

    @classmethod
    def for_seeder(
        cls, seeder_name: str, base_path: str | Path = ".", **overrides: Any
    ) -> "SeedConfig":
        """Build a config whose table and file default from the seeder's name.

        UsersTableSeeder seeds table `users` from
        `<base_path>/database/seeds/csvs/users.csv`.
        """
        basename = seeder_basename(seeder_name)
        overrides.setdefault("table", basename)
        overrides.setdefault("filename", str(Path(base_path) / SEED_DIR / f"{basename}.csv"))
        return cls(**overrides)

    def with_source(self, filename: str | None = None, delimiter: str | None = None) -> "SeedConfig":
        changes = {}
        if filename is not None:
            changes["filename"] = str(filename)
        if delimiter is not None:
            changes["delimiter"] = delimiter
        return replace(self, **changes) if changes else self
