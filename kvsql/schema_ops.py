"""CREATE TABLE and DROP TABLE executors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from kvsql.results import CreateTableResult, DropTableResult, Executor, ResultSet


@dataclass
class CreateTable(Executor):
    """Creates a table from a schema."""

    table: Any

    def execute(self, txn: Any) -> ResultSet:
        name = self.table.name
        txn.create_table(self.table)
        return CreateTableResult(name)


@dataclass
class DropTable(Executor):
    """Drops a table by name."""

    table: str

    def execute(self, txn: Any) -> ResultSet:
        txn.delete_table(self.table)
        return DropTableResult(self.table)