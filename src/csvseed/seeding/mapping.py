"""Turn raw CSV rows into column -> value records for a destination table."""

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Protocol

from csvseed.database.types import Record
from csvseed.seeding.hashing import PasswordHasher, Pbkdf2Hasher

UTF8_BOM = "\ufeff"
# BOM bytes that survived a non-UTF-8 decode (e.g. latin-1)
UTF8_BOM_MOJIBAKE = "\xef\xbb\xbf"


class SchemaOracle(Protocol):
    def column_name(self, table: str, column: str) -> str | None: ...


def strip_utf8_bom(text: str) -> str:
    """Strip a UTF-8 byte-order mark from the start of a string."""
    for bom in (UTF8_BOM, UTF8_BOM_MOJIBAKE):
        if text.startswith(bom):
            return text[len(bom):]
    return text


@dataclass(frozen=True)
class ColumnMapping:
    """Ordered (source index, destination column) pairs.

    Indices always refer to positions in the physical row, so dropping a
    column from the mapping never shifts the others.
    """

    columns: tuple[tuple[int, str], ...]

    @classmethod
    def explicit(cls, mapping: Mapping[int, str]) -> "ColumnMapping":
        return cls(tuple((int(index), column) for index, column in mapping.items()))

    @classmethod
    def from_header(
        cls, header: list[str], table: str, schema: SchemaOracle
    ) -> "ColumnMapping":
        """Build a mapping from a header row, skipping columns the table lacks.

        Header names match columns case-insensitively; the mapping carries
        the column name as the table spells it.
        """
        names = list(header)
        if names:
            names[0] = strip_utf8_bom(names[0])
        columns = []
        for index, name in enumerate(names):
            column = schema.column_name(table, name)
            if column is not None:
                columns.append((index, column))
        return cls(tuple(columns))

    def __iter__(self) -> Iterator[tuple[int, str]]:
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self.columns)

    def as_dict(self) -> dict[int, str]:
        return dict(self.columns)


class RowMapper:
    """Lazily maps a row stream to records.

    The first `offset_rows` rows are discarded. Unless an explicit mapping is
    given, the next row is read as the header and resolved against the
    table schema. Every row after that becomes a record; rows that come out
    empty or all-null are dropped.
    """

    def __init__(
        self,
        table: str,
        schema: SchemaOracle,
        *,
        offset_rows: int = 0,
        column_mapping: Mapping[int, str] | None = None,
        trim_whitespace: bool = True,
        hashable: str | None = "password",
        hasher: PasswordHasher | None = None,
    ):
        self.table = table
        self.schema = schema
        self.offset_rows = offset_rows
        self.trim_whitespace = trim_whitespace
        self.hashable = hashable
        self.hasher = hasher or Pbkdf2Hasher()
        self._explicit = ColumnMapping.explicit(column_mapping) if column_mapping else None
        self.mapping: ColumnMapping | None = self._explicit

    def map(self, rows: Iterable[list[str]]) -> Iterator[Record]:
        offset = self.offset_rows
        mapping = self._explicit
        for row in rows:
            if offset > 0:
                offset -= 1
                continue

            if mapping is None:
                if not row:
                    continue
                mapping = ColumnMapping.from_header(row, self.table, self.schema)
                self.mapping = mapping
                continue

            record = self.read_row(row, mapping)
            if not any(value is not None for value in record.values()):
                continue
            yield record

    def read_row(self, row: list[str], mapping: ColumnMapping) -> Record:
        """Project one raw row onto the mapped destination columns."""
        values: Record = {}
        for index, column in mapping:
            raw = row[index] if 0 <= index < len(row) else None
            if raw is None or raw == "":
                values[column] = None
            else:
                values[column] = raw.strip() if self.trim_whitespace else raw

        if self.hashable and values.get(self.hashable) is not None:
            values[self.hashable] = self.hasher.hash(values[self.hashable])

        return values
