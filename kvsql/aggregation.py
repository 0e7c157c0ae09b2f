"""Aggregate accumulators and the aggregation executor."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from typing import Any

from kvsql.query import _compare, _kind, _query_result, _value_key
from kvsql.results import Column, Executor, QueryResult, ResultSet


class Aggregate(enum.Enum):
    """An aggregate function."""

    AVERAGE = "avg"
    COUNT = "count"
    MAX = "max"
    MIN = "min"
    SUM = "sum"


class Accumulator(abc.ABC):
    """Accumulates values into a final aggregate."""

    @abc.abstractmethod
    def accumulate(self, value: Any) -> None:
        """Adds a value."""

    @abc.abstractmethod
    def aggregate(self) -> Any:
        """Returns the aggregate of the values seen so far."""


class Count(Accumulator):
    """Counts non-NULL values."""

    def __init__(self) -> None:
        self._count = 0

    def accumulate(self, value: Any) -> None:
        if value is not None:
            self._count += 1

    def aggregate(self) -> Any:
        return self._count


class Sum(Accumulator):
    """Sums integers or floats; any other value or a type mix gives NULL."""

    def __init__(self) -> None:
        self._seen = False
        self._sum: Any = None

    def accumulate(self, value: Any) -> None:
        kind = _kind(value)
        numeric = kind in ("integer", "float")
        if not self._seen:
            self._seen = True
            self._sum = value if numeric else None
        elif numeric and _kind(self._sum) == kind:
            self._sum += value
        else:
            self._sum = None

    def aggregate(self) -> Any:
        return self._sum


class Average(Accumulator):
    """Averages values; integer averages truncate toward zero."""

    def __init__(self) -> None:
        self._count = Count()
        self._sum = Sum()

    def accumulate(self, value: Any) -> None:
        self._count.accumulate(value)
        self._sum.accumulate(value)

    def aggregate(self) -> Any:
        total, count = self._sum.aggregate(), self._count.aggregate()
        kind = _kind(total)
        if kind == "integer":
            quotient = abs(total) // count
            return -quotient if total < 0 else quotient
        if kind == "float":
            return total / count
        return None


class _Extreme(Accumulator):
    """Tracks the value that wins comparisons in one direction."""

    _wins = 1

    def __init__(self) -> None:
        self._seen = False
        self._value: Any = None

    def accumulate(self, value: Any) -> None:
        if not self._seen:
            self._seen = True
            self._value = value
            return
        if _kind(self._value) != _kind(value):
            self._value = None
            return
        ordering = _compare(value, self._value)
        if ordering is None:
            self._value = None
        elif ordering == self._wins:
            self._value = value

    def aggregate(self) -> Any:
        return self._value


class Max(_Extreme):
    """Maximum value; values of differing types give NULL."""

    _wins = 1


class Min(_Extreme):
    """Minimum value; values of differing types give NULL."""

    _wins = -1


_ACCUMULATORS: dict[Aggregate, type[Accumulator]] = {
    Aggregate.AVERAGE: Average,
    Aggregate.COUNT: Count,
    Aggregate.MAX: Max,
    Aggregate.MIN: Min,
    Aggregate.SUM: Sum,
}


def accumulator_for(aggregate: Aggregate) -> Accumulator:
    """Creates a fresh accumulator for an aggregate function."""
    return _ACCUMULATORS[aggregate]()


@dataclass
class Aggregation(Executor):
    """Groups rows by their trailing values and aggregates the leading ones.

    Each source row holds one value per aggregate, followed by the group-by
    values.
    """

    source: Executor
    aggregates: list[Aggregate] = field(default_factory=list)

    def execute(self, txn: Any) -> ResultSet:
        result = _query_result(self.source, txn, "Unexpected result {!r}")
        width = len(self.aggregates)
        buckets: dict[tuple, tuple[list, list[Accumulator]]] = {}
        for row in result.rows:
            values, bucket = row[:width], row[width:]
            key = tuple(_value_key(value) for value in bucket)
            if key not in buckets:
                buckets[key] = (list(bucket), self._accumulators())
            for accumulator, value in zip(buckets[key][1], values):
                accumulator.accumulate(value)

        # No rows and no group-by columns still give one row of empty aggregates.
        if not buckets and width == len(result.columns):
            buckets[()] = ([], self._accumulators())

        columns = [
            Column() if i < width else column for i, column in enumerate(result.columns)
        ]
        rows = (
            [accumulator.aggregate() for accumulator in accumulators] + bucket
            for bucket, accumulators in buckets.values()
        )
        return QueryResult(columns, rows)

    def _accumulators(self) -> list[Accumulator]:
        return [accumulator_for(aggregate) for aggregate in self.aggregates]