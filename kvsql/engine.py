"""The SQL transaction interface providing CRUD storage operations."""

from __future__ import annotations

import abc
from typing import Any, Iterator, Optional

from kvsql.results import SqlValueError


class Transaction(abc.ABC):
    """An SQL transaction over table rows, indexes and the schema catalog."""

    @property
    @abc.abstractmethod
    def version(self) -> int:
        """The transaction's version."""

    @property
    @abc.abstractmethod
    def read_only(self) -> bool:
        """Whether the transaction is read-only."""

    @abc.abstractmethod
    def commit(self) -> None:
        """Commits the transaction."""

    @abc.abstractmethod
    def rollback(self) -> None:
        """Rolls back the transaction."""

    @abc.abstractmethod
    def create(self, table: str, row: list) -> None:
        """Creates a new table row."""

    @abc.abstractmethod
    def delete(self, table: str, id: Any) -> None:
        """Deletes a table row."""

    @abc.abstractmethod
    def read(self, table: str, id: Any) -> Optional[list]:
        """Reads a table row, or returns None if it does not exist."""

    @abc.abstractmethod
    def read_index(self, table: str, column: str, value: Any) -> set:
        """Reads the primary keys stored under an index entry."""

    @abc.abstractmethod
    def scan(self, table: str, filter: Any = None) -> Iterator[list]:
        """Scans a table's rows, optionally filtered."""

    @abc.abstractmethod
    def scan_index(self, table: str, column: str) -> Iterator[tuple[Any, set]]:
        """Scans a column's index entries as (value, primary keys) pairs."""

    @abc.abstractmethod
    def update(self, table: str, id: Any, row: list) -> None:
        """Updates a table row."""

    @abc.abstractmethod
    def create_table(self, table: Any) -> None:
        """Creates a table."""

    @abc.abstractmethod
    def delete_table(self, table: str) -> None:
        """Deletes a table."""

    @abc.abstractmethod
    def read_table(self, table: str) -> Optional[Any]:
        """Reads a table schema, or returns None if it does not exist."""

    @abc.abstractmethod
    def scan_tables(self) -> Iterator[Any]:
        """Iterates over all table schemas."""

    def must_read_table(self, table: str) -> Any:
        """Reads a table schema, raising SqlValueError if it does not exist."""
        schema = self.read_table(table)
        if schema is None:
            raise SqlValueError(f"Table {table} does not exist")
        return schema