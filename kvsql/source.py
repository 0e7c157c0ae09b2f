"""Row source executors: table scans, key and index lookups."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from kvsql.query import _value_key
from kvsql.results import Column, Executor, QueryResult, ResultSet


def _columns(table: Any) -> list[Column]:
    return [Column(column.name) for column in table.columns]


@dataclass
class Scan(Executor):
    """Scans all rows of a table, optionally filtered."""

    table: str
    filter: Optional[Any] = None

    def execute(self, txn: Any) -> ResultSet:
        table = txn.must_read_table(self.table)
        return QueryResult(_columns(table), txn.scan(table.name, self.filter))


@dataclass
class KeyLookup(Executor):
    """Reads rows by primary key, skipping keys that do not exist."""

    table: str
    keys: list[Any] = field(default_factory=list)

    def execute(self, txn: Any) -> ResultSet:
        table = txn.must_read_table(self.table)
        rows = [row for key in self.keys if (row := txn.read(table.name, key)) is not None]
        return QueryResult(_columns(table), rows)


@dataclass
class IndexLookup(Executor):
    """Reads the rows whose indexed column holds one of the given values."""

    table: str
    column: str
    values: list[Any] = field(default_factory=list)

    def execute(self, txn: Any) -> ResultSet:
        table = txn.must_read_table(self.table)
        keys: dict[tuple, Any] = {}
        for value in self.values:
            for key in txn.read_index(self.table, self.column, value):
                keys.setdefault(_value_key(key), key)
        rows = [row for key in keys.values() if (row := txn.read(table.name, key)) is not None]
        return QueryResult(_columns(table), rows)


class Nothing(Executor):
    """Produces a single empty row with no columns."""

    def execute(self, txn: Any) -> ResultSet:
        return QueryResult([], [[]])

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Nothing)

    def __hash__(self) -> int:
        return hash(Nothing)

    def __repr__(self) -> str:
        return "Nothing()"