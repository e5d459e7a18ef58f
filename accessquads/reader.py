"""Table readers feeding the quad generator.

The generator only needs ``table_names()`` and ``get_table(name)``; any
object providing both can stand in for the readers defined here.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, Mapping, Protocol

from .coercion import ColumnType

Row = Mapping[str, object]


class DatabaseError(Exception):
    """Raised when a database snapshot cannot be opened or read."""


@dataclass(frozen=True)
class Column:
    """Column definition: name and declared type tag."""
    name: str
    type: ColumnType | str | int


@dataclass
class Table:
    """Read-only table snapshot with ordered columns and rows."""
    name: str
    columns: list[Column] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)

    def get_column(self, name: str) -> Column:
        """Return the definition of column ``name``."""
        for column in self.columns:
            if column.name == name:
                return column
        raise DatabaseError(f"table {self.name!r} has no column {name!r}")

    def get_column_names(self) -> list[str]:
        """Return column names in declaration order."""
        return [column.name for column in self.columns]

    def get_rows(self) -> Iterator[Row]:
        """Yield rows in stored order; every call starts from the first row."""
        return iter(self.rows)


class TableReader(Protocol):
    def table_names(self) -> list[str]: ...

    def get_table(self, name: str) -> Table: ...


class MemoryDatabase:
    """Database held in memory as a list of ``Table`` objects."""

    def __init__(self, tables: Iterable[Table]):
        self._tables: dict[str, Table] = {}
        for table in tables:
            if table.name in self._tables:
                raise DatabaseError(f"duplicate table name: {table.name!r}")
            self._tables[table.name] = table

    def table_names(self) -> list[str]:
        """Return table names in insertion order."""
        return list(self._tables)

    def get_table(self, name: str) -> Table:
        """Return table ``name`` or raise ``DatabaseError``."""
        try:
            return self._tables[name]
        except KeyError:
            raise DatabaseError(f"no such table: {name!r}") from None


def decode_cell(value: object, column_type: object) -> object:
    """Turn a JSON cell into the Python value a database reader would return.

    Date-time cells are ISO-8601 strings and binary cells base64 strings in
    the JSON snapshot. Cells that do not decode are kept as they are.
    """
    if not isinstance(value, str):
        return value
    kind = ColumnType.parse(column_type)
    if kind is ColumnType.DATE_TIME:
        text = value[:-1] + "+00:00" if value.endswith("Z") else value
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return value
    if kind in (ColumnType.BINARY, ColumnType.OLE):
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error:
            return value
    return value


class JsonDatabase(MemoryDatabase):
    """Database snapshot exported to a JSON document.

    Expected layout::

        {"tables": [{"name": "T1",
                     "columns": [{"name": "flag", "type": "boolean"}],
                     "rows": [{"flag": true}]}]}
    """

    @classmethod
    def load(cls, path: str | Path) -> JsonDatabase:
        """Read a JSON snapshot from ``path``."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise DatabaseError(f"cannot read database {path}: {exc}") from exc
        return cls.from_text(text, source=str(path))

    @classmethod
    def from_text(cls, text: str, source: str = "<string>") -> JsonDatabase:
        """Parse a JSON snapshot held in a string."""
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DatabaseError(f"{source}: invalid JSON: {exc}") from exc
        return cls.from_document(document, source=source)

    @classmethod
    def from_document(cls, document: object, source: str = "<document>") -> JsonDatabase:
        """Build a database from an already decoded JSON document."""
        if not isinstance(document, dict) or not isinstance(document.get("tables"), list):
            raise DatabaseError(f"{source}: expected an object with a 'tables' list")
        return cls(_table_from_json(raw, source) for raw in document["tables"])


def _table_from_json(raw: object, source: str) -> Table:
    """Validate one JSON table entry and decode its rows."""
    if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
        raise DatabaseError(f"{source}: every table needs a string 'name'")
    name = raw["name"]
    columns: list[Column] = []
    for raw_column in raw.get("columns", []):
        if not isinstance(raw_column, dict) or "name" not in raw_column:
            raise DatabaseError(f"{source}: table {name!r} has a malformed column")
        columns.append(Column(str(raw_column["name"]), raw_column.get("type", "")))
    types = {column.name: column.type for column in columns}

    rows: list[Row] = []
    for index, raw_row in enumerate(raw.get("rows", []), start=1):
        if not isinstance(raw_row, dict):
            raise DatabaseError(f"{source}: table {name!r} row {index} is not an object")
        unknown = [key for key in raw_row if key not in types]
        if unknown:
            raise DatabaseError(
                f"{source}: table {name!r} row {index} has undeclared columns: {unknown}"
            )
        rows.append(
            {key: decode_cell(value, types[key]) for key, value in raw_row.items()}
        )
    return Table(name=name, columns=columns, rows=rows)
