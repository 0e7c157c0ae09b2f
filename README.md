# kvsql

Building blocks for a small SQL engine: statement and expression trees,
executors for query plans, and the result sets those executors return.
The executors run against any object that implements the
`kvsql.engine.Transaction` interface. You choose the storage layer underneath.

## Installation

```
pip install .
```

To install the test dependencies and run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `kvsql.ast` holds the statement trees and the expression trees.
  - Statements: `Begin`, `Commit`, `Rollback`, `Explain`, `CreateTable`,
    `DropTable`, `Delete`, `Insert`, `Update`, `Select`.
  - FROM items: `FromTable` and `FromJoin`, with `JoinType`.
  - Column definitions: `ColumnSpec`.
  - Sort order: `Order`.
  - Expressions: `Field`, `ColumnRef`, `Literal`, `Function`, and
    `Operation`, which takes an `Operator`. `Operation` checks that the
    operator gets the right number of operands and raises `ValueError` if not.
  - Every expression has these methods:
    - `children()` returns the direct sub-expressions.
    - `walk(visitor)` visits nodes depth first and stops as soon as the visitor
      returns `False`.
    - `contains(visitor)` returns `True` as soon as the visitor returns `True`
      for some node.
    - `transform(before, after)` rebuilds the tree, applying `before` on the way
      down and `after` on the way up.
- `kvsql.engine` holds `Transaction`, an abstract base class.
  - Properties: `version` and `read_only`.
  - Row operations: `create`, `read`, `update`, `delete`, `scan`,
    `read_index`, `scan_index`.
  - Catalog operations: `create_table`, `delete_table`, `read_table`,
    `scan_tables`.
  - Transaction control: `commit` and `rollback`.
  - `must_read_table` raises `SqlValueError` when the table does not exist.
- `kvsql.results` holds the result sets, the executor base class and the
  errors.
  - Result sets: `BeginResult`, `CommitResult`, `RollbackResult`,
    `CreateResult`, `DeleteResult`, `UpdateResult`, `CreateTableResult`,
    `DropTableResult`, `QueryResult` and `ExplainResult`.
  - `Column` is a result column.
  - `Executor` is the abstract base class for all executors.
  - Errors: `SqlError` and its subclasses `SqlValueError` and `InternalError`.
- `kvsql.source` holds the row sources.
  - `Scan` reads a table through `txn.scan`.
  - `KeyLookup` reads rows by primary key and skips missing keys.
  - `IndexLookup` reads rows through `txn.read_index`.
  - `Nothing` yields one empty row with no columns.
- `kvsql.query` holds `Filter`, `Projection`, `Order` (with `Direction`),
  `Limit` and `Offset`.
- `kvsql.join` holds `NestedLoopJoin` and `HashJoin`. Both can run as outer
  joins. In an outer join, a left row with no match is padded with `None`.
- `kvsql.aggregation` holds the `Aggregation` executor.
  - Accumulators: `Count`, `Average`, `Max`, `Min` and `Sum`.
  - `accumulator_for(aggregate)` creates an accumulator for an `Aggregate`.
  - Each source row holds one value per aggregate, followed by the group-by
    values.
- `kvsql.mutation` holds `Insert`, `Update` and `Delete`.
  - `Insert.make_row` and `Insert.pad_row` fill missing columns with their
    defaults.
- `kvsql.schema_ops` holds `CreateTable` and `DropTable`.

## Values and table schemas

SQL values are plain Python values:

| SQL value | Python value |
| --- | --- |
| NULL | `None` |
| booleans | `bool` |
| integers | `int` |
| floats | `float` |
| strings | `str` |

A table schema can be any object that has:

- a `name`;
- `columns`, each column having a `name` and a `default` (`None` means the
  column has no default);
- `get_column(name)`;
- `get_row_key(row)`, which returns the row's primary key.

The executors evaluate expressions in these ways:

- A `Literal` gives its value.
- A `ColumnRef` gives the value at that position in the row.
- Any other expression object must provide its own `evaluate(row)` method.

## Running a plan

Executors nest. Each one takes its source executors, and `execute(txn)`
returns a result set:

```python
from kvsql.source import Scan
from kvsql.query import Limit

plan = Limit(Scan("movies", None), 10)
result = plan.execute(txn)
for row in result.rows:
    print(row)
```

`QueryResult.into_row()` returns the first row. `into_value()` returns the
first value of that row. Both raise `SqlValueError` when there is nothing to
return. On any other result set, `into_row()` raises `SqlValueError`.

## What this package does not do

The package does not include:

- a SQL text parser: statement trees are built by hand;
- a query planner or optimizer: plans are built by nesting executors by hand;
- a session or connection layer;
- a storage engine or a concrete `Transaction` implementation;
- a table schema class;
- evaluation of `Field`, `Function` or `Operation` expressions.

You supply these yourself.