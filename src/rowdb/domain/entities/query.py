"""Pre-parsed query records.

Queries reach the engine as structured records rather than SQL text.
Literal payloads are untyped (whatever the transport decoded); the
engine normalizes and type-checks them against the schema.

Example:
    >>> SelectQuery(
    ...     table_name="planets",
    ...     where=[WhereExpression.eq(Operand.column("id"), Operand.literal(3))],
    ... )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from rowdb.domain.value_objects import OperandKind, Operation, QueryType


@dataclass(frozen=True)
class Operand:
    """A literal value or a column reference.

    Attributes:
        kind: OperandKind (or its case-insensitive string form).
        payload: The literal for VALUE, the column name for IDENTIFIER.
    """

    kind: OperandKind | str
    payload: Any

    @classmethod
    def literal(cls, value: Any) -> Operand:
        return cls(kind=OperandKind.VALUE, payload=value)

    @classmethod
    def column(cls, name: str) -> Operand:
        return cls(kind=OperandKind.IDENTIFIER, payload=name)


@dataclass(frozen=True)
class WhereExpression:
    """A single comparison; a list of them is a conjunction."""

    left: Operand
    operation: Operation | str
    right: Operand

    @classmethod
    def eq(cls, left: Operand, right: Operand) -> WhereExpression:
        return cls(left=left, operation=Operation.EQ, right=right)


@dataclass(frozen=True)
class SetExpression:
    """Assignment of a literal to a column (UPDATE ... SET)."""

    column_name: str
    value: Any


@dataclass(frozen=True)
class ColumnSpec:
    """Column as requested by CREATE TABLE (name and type are not yet validated)."""

    name: str
    type: str


@dataclass
class CreateTableQuery:
    """CREATE TABLE table_name (columns...)."""

    table_name: str
    columns: list[ColumnSpec] = field(default_factory=list)

    query_type: ClassVar[QueryType] = QueryType.CREATE_TABLE


@dataclass
class InsertQuery:
    """INSERT INTO table_name (columns...) VALUES (values...), ..."""

    table_name: str
    columns: list[str] = field(default_factory=list)
    values: list[list[Any]] = field(default_factory=list)

    query_type: ClassVar[QueryType] = QueryType.INSERT


@dataclass
class SelectQuery:
    """SELECT * FROM table_name WHERE where..."""

    table_name: str
    where: list[WhereExpression] = field(default_factory=list)

    query_type: ClassVar[QueryType] = QueryType.SELECT


@dataclass
class UpdateQuery:
    """UPDATE table_name SET assignments... WHERE where..."""

    table_name: str
    assignments: list[SetExpression] = field(default_factory=list)
    where: list[WhereExpression] = field(default_factory=list)

    query_type: ClassVar[QueryType] = QueryType.UPDATE


@dataclass
class DeleteQuery:
    """DELETE FROM table_name WHERE where..."""

    table_name: str
    where: list[WhereExpression] = field(default_factory=list)

    query_type: ClassVar[QueryType] = QueryType.DELETE


Query = Union[CreateTableQuery, InsertQuery, SelectQuery, UpdateQuery, DeleteQuery]
