"""INSERT, UPDATE and DELETE executors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from kvsql.query import _evaluate, _query_result, _value_key
from kvsql.results import (
    CreateResult,
    DeleteResult,
    Executor,
    ResultSet,
    SqlValueError,
    UpdateResult,
)


@dataclass
class Insert(Executor):
    """Inserts rows built from constant expressions.

    A column's ``default`` of None means the column has no default value.
    """

    table: str
    columns: list[str] = field(default_factory=list)
    rows: list[list[Any]] = field(default_factory=list)

    @staticmethod
    def make_row(table: Any, columns: list[str], values: list[Any]) -> list:
        """Builds a row from column names and values, filling in defaults."""
        if len(columns) != len(values):
            raise SqlValueError("Column and value counts do not match")
        inputs: dict[str, Any] = {}
        for column, value in zip(columns, values):
            table.get_column(column)
            if column in inputs:
                raise SqlValueError(f"Column {column} given multiple times")
            inputs[column] = value
        row = []
        for column in table.columns:
            if column.name in inputs:
                row.append(inputs[column.name])
            elif column.default is not None:
                row.append(column.default)
            else:
                raise SqlValueError(f"No value given for column {column.name}")
        return row

    @staticmethod
    def pad_row(table: Any, row: list) -> list:
        """Pads a row with the default values of its missing trailing columns."""
        padded = list(row)
        for column in table.columns[len(padded):]:
            if column.default is None:
                raise SqlValueError(f"No default value for column {column.name}")
            padded.append(column.default)
        return padded

    def execute(self, txn: Any) -> ResultSet:
        table = txn.must_read_table(self.table)
        count = 0
        for expressions in self.rows:
            values = [_evaluate(expression, None) for expression in expressions]
            if self.columns:
                row = self.make_row(table, self.columns, values)
            else:
                row = self.pad_row(table, values)
            txn.create(table.name, row)
            count += 1
        return CreateResult(count)


@dataclass
class Update(Executor):
    """Updates source rows by assigning (field index, expression) pairs."""

    table: str
    source: Executor
    expressions: list[tuple[int, Any]] = field(default_factory=list)

    def execute(self, txn: Any) -> ResultSet:
        result = _query_result(self.source, txn, "Unexpected response {!r}")
        table = txn.must_read_table(self.table)
        # The source may see our own changes, so skip keys already updated.
        updated: set = set()
        for row in result.rows:
            id = table.get_row_key(row)
            key = _value_key(id)
            if key in updated:
                continue
            new = list(row)
            for index, expression in self.expressions:
                new[index] = _evaluate(expression, row)
            txn.update(table.name, id, new)
            updated.add(key)
        return UpdateResult(len(updated))


@dataclass
class Delete(Executor):
    """Deletes every row produced by the source."""

    table: str
    source: Executor

    def execute(self, txn: Any) -> ResultSet:
        table = txn.must_read_table(self.table)
        result = _query_result(self.source, txn, "Unexpected result {!r}")
        count = 0
        for row in result.rows:
            txn.delete(table.name, table.get_row_key(row))
            count += 1
        return DeleteResult(count)