"""Result sets, errors and the executor interface."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator, Optional

if TYPE_CHECKING:
    from kvsql.engine import Transaction


class SqlError(Exception):
    """Base class of SQL errors."""


class SqlValueError(SqlError):
    """An error caused by invalid user input or data."""


class InternalError(SqlError):
    """An unexpected internal error."""


@dataclass
class Column:
    """A result column, optionally named."""

    name: Optional[str] = None


class ResultSet:
    """Base class of executor results."""

    def into_row(self) -> list:
        """Returns the first row of a query result."""
        raise SqlValueError(f"Not a query result: {self!r}")

    def into_value(self) -> Any:
        """Returns the first value of the first row of a query result."""
        row = self.into_row()
        if not row:
            raise SqlValueError("No value returned")
        return row[0]


@dataclass
class BeginResult(ResultSet):
    """Transaction started."""

    version: int
    read_only: bool


@dataclass
class CommitResult(ResultSet):
    """Transaction committed."""

    version: int


@dataclass
class RollbackResult(ResultSet):
    """Transaction rolled back."""

    version: int


@dataclass
class CreateResult(ResultSet):
    """Rows created."""

    count: int


@dataclass
class DeleteResult(ResultSet):
    """Rows deleted."""

    count: int


@dataclass
class UpdateResult(ResultSet):
    """Rows updated."""

    count: int


@dataclass
class CreateTableResult(ResultSet):
    """Table created."""

    name: str


@dataclass
class DropTableResult(ResultSet):
    """Table dropped."""

    name: str


@dataclass
class QueryResult(ResultSet):
    """Query result: columns and a lazy row iterator, ignored in comparisons."""

    columns: list[Column] = field(default_factory=list)
    rows: Iterator[list] = field(default_factory=lambda: iter(()), compare=False, repr=False)

    def __post_init__(self) -> None:
        self.rows = iter(self.rows)

    def into_row(self) -> list:
        for row in self.rows:
            return row
        raise SqlValueError("No rows returned")


@dataclass
class ExplainResult(ResultSet):
    """Explain result holding a plan node."""

    node: Any


class Executor(abc.ABC):
    """A plan executor."""

    @abc.abstractmethod
    def execute(self, txn: Transaction) -> ResultSet:
        """Executes against the transaction and returns a result set."""