"""Shared types for the database layer."""

Record = dict[str, str | None]
Params = tuple | list | dict
ParamsList = list[tuple] | list[list]
