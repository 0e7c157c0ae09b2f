"""Abstract syntax tree for parsed SQL statements and expressions."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Optional


class JoinType(enum.Enum):
    """The kind of a JOIN clause."""

    CROSS = "cross"
    INNER = "inner"
    LEFT = "left"
    RIGHT = "right"


class Order(enum.Enum):
    """Sort order of an ORDER BY item."""

    ASCENDING = "asc"
    DESCENDING = "desc"


class Operator(enum.Enum):
    """Operators usable in an Operation expression."""

    # Logical operators
    AND = "and"
    NOT = "not"
    OR = "or"
    # Comparison operators
    EQUAL = "="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    IS_NULL = "is null"
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    NOT_EQUAL = "!="
    # Mathematical operators
    ADD = "+"
    ASSERT = "assert"
    DIVIDE = "/"
    EXPONENTIATE = "^"
    FACTORIAL = "!"
    MODULO = "%"
    MULTIPLY = "*"
    NEGATE = "negate"
    SUBTRACT = "-"
    # String operators
    LIKE = "like"


_UNARY = frozenset(
    {Operator.NOT, Operator.IS_NULL, Operator.ASSERT, Operator.FACTORIAL, Operator.NEGATE}
)


class Expression:
    """Base class of all expression nodes."""

    def children(self) -> tuple[Expression, ...]:
        """Returns the direct sub-expressions of this node."""
        return ()

    def _with_children(self, children: tuple[Expression, ...]) -> Expression:
        return self

    def walk(self, visitor: Callable[[Expression], bool]) -> bool:
        """Calls visitor for every node, depth first; stops and returns False
        as soon as the visitor returns False."""
        if not visitor(self):
            return False
        return all(child.walk(visitor) for child in self.children())

    def contains(self, visitor: Callable[[Expression], bool]) -> bool:
        """Returns True as soon as the visitor returns True for some node."""
        return not self.walk(lambda expr: not visitor(expr))

    def transform(
        self,
        before: Callable[[Expression], Expression],
        after: Callable[[Expression], Expression],
    ) -> Expression:
        """Rebuilds the tree, applying before on the way down and after on the
        way up. Exceptions raised by either callable propagate."""
        node = before(self)
        children = node.children()
        if children:
            node = node._with_children(
                tuple(child.transform(before, after) for child in children)
            )
        return after(node)


@dataclass(frozen=True)
class Field(Expression):
    """A column reference by optional table qualifier and name."""

    table: Optional[str]
    name: str


@dataclass(frozen=True)
class ColumnRef(Expression):
    """A column reference by position, used while building plans."""

    index: int


@dataclass(frozen=True)
class Literal(Expression):
    """A constant: None, bool, int, float or str."""

    value: Any = None


@dataclass(frozen=True)
class Function(Expression):
    """A function call."""

    name: str
    args: tuple[Expression, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))

    def children(self) -> tuple[Expression, ...]:
        return self.args

    def _with_children(self, children: tuple[Expression, ...]) -> Expression:
        return dataclasses.replace(self, args=children)


@dataclass(frozen=True)
class Operation(Expression):
    """An operator applied to one or two operands."""

    operator: Operator
    operands: tuple[Expression, ...]

    def __post_init__(self) -> None:
        operands = tuple(self.operands)
        expected = 1 if self.operator in _UNARY else 2
        if len(operands) != expected:
            raise ValueError(
                f"Operator {self.operator.name} takes {expected} operand(s), got {len(operands)}"
            )
        object.__setattr__(self, "operands", operands)

    def children(self) -> tuple[Expression, ...]:
        return self.operands

    def _with_children(self, children: tuple[Expression, ...]) -> Expression:
        return dataclasses.replace(self, operands=children)


@dataclass
class ColumnSpec:
    """A column definition in CREATE TABLE."""

    name: str
    datatype: Any
    primary_key: bool = False
    nullable: Optional[bool] = None
    default: Optional[Expression] = None
    unique: bool = False
    index: bool = False
    references: Optional[str] = None


@dataclass
class FromTable:
    """A table in a FROM clause."""

    name: str
    alias: Optional[str] = None


@dataclass
class FromJoin:
    """A join of two FROM items."""

    left: FromTable | FromJoin
    right: FromTable | FromJoin
    type: JoinType
    predicate: Optional[Expression] = None


@dataclass
class Begin:
    """BEGIN statement."""

    read_only: bool = False
    as_of: Optional[int] = None


@dataclass
class Commit:
    """COMMIT statement."""


@dataclass
class Rollback:
    """ROLLBACK statement."""


@dataclass
class Explain:
    """EXPLAIN of another statement."""

    statement: Any


@dataclass
class CreateTable:
    """CREATE TABLE statement."""

    name: str
    columns: list[ColumnSpec] = field(default_factory=list)


@dataclass
class DropTable:
    """DROP TABLE statement."""

    name: str


@dataclass
class Delete:
    """DELETE statement."""

    table: str
    where: Optional[Expression] = None


@dataclass
class Insert:
    """INSERT statement."""

    table: str
    columns: Optional[list[str]] = None
    values: list[list[Expression]] = field(default_factory=list)


@dataclass
class Update:
    """UPDATE statement."""

    table: str
    set: dict[str, Expression] = field(default_factory=dict)
    where: Optional[Expression] = None


@dataclass
class Select:
    """SELECT statement."""

    select: list[tuple[Expression, Optional[str]]] = field(default_factory=list)
    from_: list[FromTable | FromJoin] = field(default_factory=list)
    where: Optional[Expression] = None
    group_by: list[Expression] = field(default_factory=list)
    having: Optional[Expression] = None
    order: list[tuple[Expression, Order]] = field(default_factory=list)
    offset: Optional[Expression] = None
    limit: Optional[Expression] = None