import pytest

from kvsql.results import (
    BeginResult,
    Column,
    CommitResult,
    Executor,
    QueryResult,
    SqlError,
    SqlValueError,
)


def _broken_rows():
    yield [1]
    raise SqlValueError("broken")


def test_into_row_returns_first_row():
    result = QueryResult([Column("a"), Column("b")], iter([[1, 2], [3, 4]]))
    assert result.into_row() == [1, 2]


def test_into_value_returns_first_value():
    result = QueryResult([Column("a")], [["x", "y"]])
    assert result.into_value() == "x"


def test_into_row_without_rows_raises():
    with pytest.raises(SqlValueError, match="No rows returned"):
        QueryResult([Column("a")]).into_row()


def test_into_value_on_empty_row_raises():
    with pytest.raises(SqlValueError, match="No value returned"):
        QueryResult([], [[]]).into_value()


def test_non_query_result_raises():
    with pytest.raises(SqlError, match="Not a query result"):
        CommitResult(version=3).into_row()


def test_rows_ignored_in_equality():
    left = QueryResult([Column("a")], [[1]])
    right = QueryResult([Column("a")], [[2], [3]])
    assert left == right
    assert left != QueryResult([Column("b")], [[1]])


def test_rows_propagate_errors_lazily():
    result = QueryResult([Column(None)], _broken_rows())
    assert next(result.rows) == [1]
    with pytest.raises(SqlValueError, match="broken"):
        next(result.rows)


def test_executor_subclass_execute():
    class Fixed(Executor):
        def execute(self, txn):
            return BeginResult(version=txn, read_only=True)

    assert Fixed().execute(7) == BeginResult(version=7, read_only=True)
    with pytest.raises(TypeError):
        Executor()