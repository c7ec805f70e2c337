"""Database layer: abstract service, backends and shared types."""

from csvseed.database.service import DatabaseService, quote_identifier
from csvseed.database.types import Params, ParamsList, Record

__all__ = ["DatabaseService", "quote_identifier", "Record", "Params", "ParamsList"]
