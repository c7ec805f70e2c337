"""Open seed files, transparently decompressing gzip input."""

import csv
import gzip
import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, TextIO

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"
GZIP_MIME_TYPE = "application/x-gzip"
TEXT_MIME_TYPE = "text/plain"


def detect_mime_type(path: str | Path) -> str:
    """Guess the MIME type of a seed file from its leading bytes.

    Only the distinction the loader cares about is made: gzip or plain text.
    The file extension is never consulted.
    """
    with open(path, "rb") as f:
        signature = f.read(len(GZIP_MAGIC))
    return GZIP_MIME_TYPE if signature == GZIP_MAGIC else TEXT_MIME_TYPE


def open_source(
    path: str | Path,
    encoding: str = "utf-8",
    logger: logging.Logger = logger,
) -> TextIO | None:
    """Open `path` for reading as text, or return None if it is unavailable.

    Gzip input is decompressed on the fly so callers never see the
    difference. A missing or unreadable file is logged as an error rather
    than raised.
    """
    path = Path(path)
    if not path.is_file() or not os.access(path, os.R_OK):
        logger.error("CSV insert failed: %s does not exist or is not readable.", path)
        return None

    try:
        if detect_mime_type(path) == GZIP_MIME_TYPE:
            return gzip.open(path, "rt", encoding=encoding, newline="")
        return open(path, encoding=encoding, newline="")
    except OSError as e:
        logger.error("CSV insert failed: %s could not be opened: %s", path, e)
        return None


def read_rows(stream: Iterable[str], delimiter: str = ";") -> Iterator[list[str]]:
    """Yield raw rows (lists of text fields) from an open text stream."""
    yield from csv.reader(stream, delimiter=delimiter)
