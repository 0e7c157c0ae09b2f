from dataclasses import dataclass

import pytest

from kvsql.ast import ColumnRef, Literal
from kvsql.join import HashJoin, NestedLoopJoin
from kvsql.results import (
    Column,
    CreateResult,
    Executor,
    InternalError,
    QueryResult,
    SqlValueError,
)


@dataclass
class Rows(Executor):
    names: list
    rows: list

    def execute(self, txn):
        return QueryResult([Column(n) for n in self.names], iter([list(r) for r in self.rows]))


class NotQuery(Executor):
    def execute(self, txn):
        return CreateResult(1)


class Equals:
    def __init__(self, left, right):
        self.left = left
        self.right = right

    def evaluate(self, row):
        if row[self.left] is None or row[self.right] is None:
            return None
        return row[self.left] == row[self.right]


def test_cross_join_without_predicate():
    left = Rows(["l"], [[1], [2]])
    right = Rows(["r"], [["a"], ["b"]])
    result = NestedLoopJoin(left, right).execute(None)
    assert result.columns == [Column("l"), Column("r")]
    assert list(result.rows) == [[1, "a"], [1, "b"], [2, "a"], [2, "b"]]


def test_inner_join_with_predicate():
    left = Rows(["id"], [[1], [2], [3]])
    right = Rows(["ref", "name"], [[2, "x"], [3, "y"], [3, "z"]])
    result = NestedLoopJoin(left, right, Equals(0, 1)).execute(None)
    assert list(result.rows) == [[2, 2, "x"], [3, 3, "y"], [3, 3, "z"]]


def test_outer_join_pads_with_nulls():
    left = Rows(["id"], [[1], [2]])
    right = Rows(["ref", "name"], [[2, "x"]])
    result = NestedLoopJoin(left, right, Equals(0, 1), outer=True).execute(None)
    assert list(result.rows) == [[1, None, None], [2, 2, "x"]]


def test_null_predicate_is_no_match():
    left = Rows(["id"], [[None]])
    right = Rows(["ref"], [[1]])
    assert list(NestedLoopJoin(left, right, Equals(0, 1)).execute(None).rows) == []


def test_non_boolean_predicate_raises():
    result = NestedLoopJoin(Rows(["a"], [[1]]), Rows(["b"], [[2]]), Literal(3)).execute(None)
    assert result.columns == [Column("a"), Column("b")]
    with pytest.raises(SqlValueError, match="Join predicate returned 3, expected boolean"):
        list(result.rows)


def test_nested_loop_with_empty_right_and_outer():
    result = NestedLoopJoin(Rows(["a"], [[1]]), Rows(["b", "c"], []), outer=True).execute(None)
    assert list(result.rows) == [[1, None, None]]


@pytest.mark.parametrize("side", ["left", "right"])
def test_nested_loop_non_query_source(side):
    sources = {"left": Rows(["a"], [[1]]), "right": Rows(["b"], [[1]])}
    sources[side] = NotQuery()
    with pytest.raises(InternalError, match="Unexpected result set"):
        NestedLoopJoin(sources["left"], sources["right"]).execute(None)


def test_hash_join_matches_fields():
    left = Rows(["id", "name"], [[1, "a"], [2, "b"], [3, "c"]])
    right = Rows(["ref", "value"], [[3, "z"], [1, "x"]])
    result = HashJoin(left, 0, right, 0).execute(None)
    assert result.columns == [Column("id"), Column("name"), Column("ref"), Column("value")]
    assert list(result.rows) == [[1, "a", 1, "x"], [3, "c", 3, "z"]]


def test_hash_join_outer_pads_with_nulls():
    left = Rows(["id"], [[1], [2]])
    right = Rows(["ref", "value"], [[2, "y"]])
    result = HashJoin(left, 0, right, 0, outer=True).execute(None)
    assert list(result.rows) == [[1, None, None], [2, 2, "y"]]


def test_hash_join_later_right_row_wins():
    left = Rows(["id"], [[1]])
    right = Rows(["ref", "value"], [[1, "first"], [1, "second"]])
    assert list(HashJoin(left, 0, right, 0).execute(None).rows) == [[1, 1, "second"]]


def test_hash_join_keeps_types_apart():
    left = Rows(["id"], [[1]])
    right = Rows(["ref"], [[True]])
    assert list(HashJoin(left, 0, right, 0).execute(None).rows) == []


def test_hash_join_null_keys_match():
    left = Rows(["id"], [[None]])
    right = Rows(["ref", "v"], [[None, "n"]])
    assert list(HashJoin(left, 0, right, 0).execute(None).rows) == [[None, None, "n"]]


def test_hash_join_right_index_out_of_bounds():
    with pytest.raises(InternalError, match="Right index 4 out of bounds"):
        HashJoin(Rows(["a"], [[1]]), 0, Rows(["b"], [[1]]), 4).execute(None)


def test_hash_join_left_index_out_of_bounds():
    result = HashJoin(Rows(["a"], [[1]]), 4, Rows(["b"], [[1]]), 0).execute(None)
    assert result.columns == [Column("a"), Column("b")]
    with pytest.raises(SqlValueError, match="Left index 4 out of bounds"):
        list(result.rows)


def test_hash_join_non_query_source():
    with pytest.raises(InternalError, match="Unexpected result set"):
        HashJoin(NotQuery(), 0, Rows(["b"], [[1]]), 0).execute(None)


def test_nested_loop_with_column_ref_predicate():
    left = Rows(["flag"], [[True], [False]])
    right = Rows(["v"], [["x"]])
    result = NestedLoopJoin(left, right, ColumnRef(0)).execute(None)
    assert list(result.rows) == [[True, "x"]]