from dataclasses import dataclass

import pytest

from kvsql.engine import Transaction
from kvsql.results import CreateTableResult, DropTableResult, SqlValueError
from kvsql.schema_ops import CreateTable, DropTable


@dataclass
class FakeTable:
    name: str


class FakeTxn(Transaction):
    def __init__(self):
        self.tables = {}

    @property
    def version(self):
        return 1

    @property
    def read_only(self):
        return False

    def commit(self):
        pass

    def rollback(self):
        pass

    def create(self, table, row):
        pass

    def delete(self, table, id):
        pass

    def read(self, table, id):
        return None

    def read_index(self, table, column, value):
        return set()

    def scan(self, table, filter=None):
        return iter(())

    def scan_index(self, table, column):
        return iter(())

    def update(self, table, id, row):
        pass

    def create_table(self, table):
        if table.name in self.tables:
            raise SqlValueError(f"Table {table.name} already exists")
        self.tables[table.name] = table

    def delete_table(self, table):
        self.must_read_table(table)
        del self.tables[table]

    def read_table(self, table):
        return self.tables.get(table)

    def scan_tables(self):
        return iter(self.tables.values())


def test_create_table():
    txn = FakeTxn()
    schema = FakeTable("movies")
    result = CreateTable(schema).execute(txn)
    assert result == CreateTableResult("movies")
    assert txn.read_table("movies") is schema


def test_create_table_error_propagates():
    txn = FakeTxn()
    CreateTable(FakeTable("movies")).execute(txn)
    with pytest.raises(SqlValueError, match="already exists"):
        CreateTable(FakeTable("movies")).execute(txn)


def test_drop_table():
    txn = FakeTxn()
    CreateTable(FakeTable("movies")).execute(txn)
    result = DropTable("movies").execute(txn)
    assert result == DropTableResult("movies")
    assert list(txn.scan_tables()) == []


def test_drop_missing_table():
    with pytest.raises(SqlValueError, match="Table movies does not exist"):
        DropTable("movies").execute(FakeTxn())