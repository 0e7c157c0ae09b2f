"""Filtering, projection, ordering, LIMIT and OFFSET executors."""

from __future__ import annotations

import enum
import functools
import itertools
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional

from kvsql.ast import ColumnRef, Literal
from kvsql.results import (
    Column,
    Executor,
    InternalError,
    QueryResult,
    ResultSet,
    SqlValueError,
)


class Direction(enum.Enum):
    """Sort direction of an ORDER BY item."""

    ASCENDING = "asc"
    DESCENDING = "desc"


def _query_result(source: Executor, txn: Any, message: str = "Unexpected result") -> QueryResult:
    """Executes a source that must produce rows.

    ``message`` is formatted with the unexpected result set when it is not a
    query result.
    """
    result = source.execute(txn)
    if not isinstance(result, QueryResult):
        raise InternalError(message.format(result))
    return result


def _evaluate(expression: Any, row: Optional[list]) -> Any:
    """Evaluates an expression against a row.

    Positional column references and literals are handled directly; any other
    expression must provide an ``evaluate(row)`` method.
    """
    if isinstance(expression, ColumnRef):
        if row is None or not 0 <= expression.index < len(row):
            raise SqlValueError(f"Field {expression.index} is out of bounds")
        return row[expression.index]
    if isinstance(expression, Literal):
        return expression.value
    return expression.evaluate(row)


def _kind(value: Any) -> Optional[str]:
    """Returns the SQL data type name of a value, or None for NULL."""
    if value is None:
        return None
    for python_type, name in ((bool, "boolean"), (int, "integer"), (float, "float"), (str, "string")):
        if isinstance(value, python_type):
            return name
    return type(value).__name__


def _display(value: Any) -> str:
    """Formats a value the way SQL output shows it."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


def _value_key(value: Any) -> tuple[Optional[str], Any]:
    """A hash key that keeps values of different data types apart."""
    return (_kind(value), value)


def _compare(a: Any, b: Any) -> Optional[int]:
    """Partially orders two values: -1, 0 or 1, or None if incomparable.

    NULL sorts before everything else; integers and floats compare
    numerically; other types only compare with their own type.
    """
    if a is None or b is None:
        return (a is not None) - (b is not None)
    kind_a, kind_b = _kind(a), _kind(b)
    numeric = {"integer", "float"}
    if kind_a in numeric and kind_b in numeric:
        if kind_a != kind_b:
            a, b = float(a), float(b)
    elif kind_a != kind_b:
        return None
    if a < b:
        return -1
    if a > b:
        return 1
    return 0 if a == b else None


def _filter_rows(predicate: Any, rows: Iterable[list]) -> Iterator[list]:
    for row in rows:
        value = _evaluate(predicate, row)
        if value is True:
            yield row
        elif value is not False and value is not None:
            raise SqlValueError(f"Filter returned {_display(value)}, expected boolean")


@dataclass
class Filter(Executor):
    """Keeps only the rows for which the predicate is true."""

    source: Executor
    predicate: Any

    def execute(self, txn: Any) -> ResultSet:
        result = _query_result(self.source, txn)
        return QueryResult(result.columns, _filter_rows(self.predicate, result.rows))


@dataclass
class Projection(Executor):
    """Evaluates a list of (expression, label) pairs for every row."""

    source: Executor
    expressions: list[tuple[Any, Optional[str]]] = field(default_factory=list)

    def execute(self, txn: Any) -> ResultSet:
        result = _query_result(self.source, txn)
        expressions = [expr for expr, _ in self.expressions]
        columns = [
            self._column(expr, label, result.columns) for expr, label in self.expressions
        ]
        rows = ([_evaluate(expr, row) for expr in expressions] for row in result.rows)
        return QueryResult(columns, rows)

    @staticmethod
    def _column(expression: Any, label: Optional[str], columns: list[Column]) -> Column:
        if label is not None:
            return Column(label)
        if isinstance(expression, ColumnRef) and 0 <= expression.index < len(columns):
            return Column(columns[expression.index].name)
        return Column()


@dataclass
class Order(Executor):
    """Sorts rows by a list of (expression, direction) pairs."""

    source: Executor
    orders: list[tuple[Any, Direction]] = field(default_factory=list)

    def execute(self, txn: Any) -> ResultSet:
        result = _query_result(self.source, txn, "Unexpected result {!r}")
        items = [
            (row, [_evaluate(expr, row) for expr, _ in self.orders]) for row in result.rows
        ]
        directions = [direction for _, direction in self.orders]

        def compare(a: tuple[list, list], b: tuple[list, list]) -> int:
            for direction, value_a, value_b in zip(directions, a[1], b[1]):
                ordering = _compare(value_a, value_b)
                if ordering:
                    return ordering if direction is Direction.ASCENDING else -ordering
            return 0

        items.sort(key=functools.cmp_to_key(compare))
        return QueryResult(result.columns, (row for row, _ in items))


def _window(source: Executor, txn: Any, start: int, stop: Optional[int]) -> QueryResult:
    """Passes on the source rows from ``start`` up to ``stop``."""
    result = _query_result(source, txn)
    return QueryResult(result.columns, itertools.islice(result.rows, start, stop))


@dataclass
class Limit(Executor):
    """Passes on at most the given number of rows."""

    source: Executor
    limit: int

    def execute(self, txn: Any) -> ResultSet:
        return _window(self.source, txn, 0, self.limit)


@dataclass
class Offset(Executor):
    """Skips the given number of rows."""

    source: Executor
    offset: int

    def execute(self, txn: Any) -> ResultSet:
        return _window(self.source, txn, self.offset, None)