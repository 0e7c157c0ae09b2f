"""Nested loop and hash join executors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from kvsql.query import _display, _evaluate, _value_key
from kvsql.results import Executor, InternalError, QueryResult, ResultSet, SqlValueError


def _query_pair(left: ResultSet, right_executor: Executor, txn: Any) -> tuple[QueryResult, QueryResult]:
    if isinstance(left, QueryResult):
        right = right_executor.execute(txn)
        if isinstance(right, QueryResult):
            return left, right
    raise InternalError("Unexpected result set")


@dataclass
class NestedLoopJoin(Executor):
    """Checks each left row against every right row using the predicate."""

    left: Executor
    right: Executor
    predicate: Optional[Any] = None
    outer: bool = False

    def execute(self, txn: Any) -> ResultSet:
        left, right = _query_pair(self.left.execute(txn), self.right, txn)
        right_rows = list(right.rows)
        columns = [*left.columns, *right.columns]
        return QueryResult(columns, self._rows(left.rows, right_rows, len(right.columns)))

    def _rows(
        self, left_rows: Iterable[list], right_rows: list[list], right_width: int
    ) -> Iterator[list]:
        empty = [None] * right_width
        for left_row in left_rows:
            hit = False
            for right_row in right_rows:
                row = [*left_row, *right_row]
                if self.predicate is not None and not self._matches(row):
                    continue
                hit = True
                yield row
            if self.outer and not hit:
                yield [*left_row, *empty]

    def _matches(self, row: list) -> bool:
        value = _evaluate(self.predicate, row)
        if value is True:
            return True
        if value is False or value is None:
            return False
        raise SqlValueError(f"Join predicate returned {_display(value)}, expected boolean")


@dataclass
class HashJoin(Executor):
    """Joins rows whose left and right fields hold equal values."""

    left: Executor
    left_field: int
    right: Executor
    right_field: int
    outer: bool = False

    def execute(self, txn: Any) -> ResultSet:
        left, right = _query_pair(self.left.execute(txn), self.right, txn)
        index: dict[tuple, list] = {}
        for row in right.rows:
            if len(row) <= self.right_field:
                raise InternalError(f"Right index {self.right_field} out of bounds")
            index[_value_key(row[self.right_field])] = row
        empty = [None] * len(right.columns)
        columns = [*left.columns, *right.columns]
        return QueryResult(columns, self._rows(left.rows, index, empty))

    def _rows(
        self, left_rows: Iterable[list], index: dict[tuple, list], empty: list
    ) -> Iterator[list]:
        for row in left_rows:
            if len(row) <= self.left_field:
                raise SqlValueError(f"Left index {self.left_field} out of bounds")
            hit = index.get(_value_key(row[self.left_field]))
            if hit is not None:
                yield [*row, *hit]
            elif self.outer:
                yield [*row, *empty]