"""Type checking and evaluation of WHERE and SET expressions.

All functions here are pure: they read a schema (and a row) and either
return a result or raise a DatabaseError. Validation is always run
before evaluation, so the evaluation functions assume well-typed input.

Type rules:
    - A VALUE operand has the type inferred from its literal
      (integral numbers are integers, see value_objects.values).
    - An IDENTIFIER operand has the type of the referenced column.
    - Both sides of a comparison must have the same type.
    - Only equality is supported.
"""

from __future__ import annotations

from typing import Any, Sequence

from rowdb.domain.entities import ColumnDef, Operand, Schema, SetExpression, WhereExpression
from rowdb.domain.errors import (
    DuplicateColumnError,
    TypeMismatchError,
    UnknownColumnError,
    UnsupportedOperationError,
)
from rowdb.domain.value_objects import (
    OperandKind,
    Operation,
    Value,
    ValueType,
    fold_name,
    is_assignable,
    normalize_literal,
    value_type,
)


def _resolve_kind(operand: Operand) -> OperandKind:
    kind = OperandKind.parse(operand.kind)
    if kind is None:
        raise UnsupportedOperationError(f"unsupported operand type {operand.kind!r}")
    return kind


def _resolve_column(schema: Schema, name: Any) -> ColumnDef:
    if not isinstance(name, str):
        raise UnknownColumnError(f"identifier {name!r} is not a string")
    column = schema.column(name)
    if column is None:
        raise UnknownColumnError(f"column {fold_name(name)} does not exist in table {schema.name}")
    return column


def operand_type(schema: Schema, operand: Operand) -> ValueType:
    """Resolve the type of an operand.

    Raises:
        UnsupportedOperationError: If the operand kind is unknown.
        UnknownColumnError: If an identifier does not name a column.
    """
    if _resolve_kind(operand) is OperandKind.VALUE:
        return value_type(operand.payload)
    return _resolve_column(schema, operand.payload).type.value_type()


def validate_where(schema: Schema, expressions: Sequence[WhereExpression]) -> None:
    """Type-check a conjunction of WHERE expressions.

    Raises:
        UnknownColumnError, TypeMismatchError, UnsupportedOperationError
    """
    for i, expr in enumerate(expressions):
        left = operand_type(schema, expr.left)
        right = operand_type(schema, expr.right)
        if left is not right:
            raise TypeMismatchError(
                f"operand types do not match at {i}: {left.value} != {right.value}"
            )
        if Operation.parse(expr.operation) is None:
            raise UnsupportedOperationError(f"unsupported operation at {i}: {expr.operation!r}")


def _operand_value(schema: Schema, row: Sequence[Value], operand: Operand) -> Any:
    if _resolve_kind(operand) is OperandKind.VALUE:
        return normalize_literal(operand.payload)
    return row[_resolve_column(schema, operand.payload).position]


def matches(schema: Schema, row: Sequence[Value], expressions: Sequence[WhereExpression]) -> bool:
    """Evaluate a validated conjunction against a row.

    An empty expression list matches every row.
    """
    for expr in expressions:
        if _operand_value(schema, row, expr.left) != _operand_value(schema, row, expr.right):
            return False
    return True


def validate_value(column: ColumnDef, literal: Any) -> None:
    """Check that literal can be stored in column.

    Raises:
        TypeMismatchError: If the literal's type differs from the column's.
    """
    if not is_assignable(literal, column.type):
        raise TypeMismatchError(
            f"types do not match: column {column.name} is {column.type.value}, "
            f"value {literal!r} is {value_type(literal).value}"
        )


def validate_set(schema: Schema, set_expressions: Sequence[SetExpression]) -> None:
    """Type-check the assignments of an UPDATE.

    Raises:
        DuplicateColumnError: If a column is assigned more than once.
        UnknownColumnError, TypeMismatchError
    """
    assigned: set[str] = set()
    for expr in set_expressions:
        column = _resolve_column(schema, expr.column_name)
        if column.name in assigned:
            raise DuplicateColumnError(f"column {column.name} is assigned more than once")
        validate_value(column, expr.value)
        assigned.add(column.name)


def apply_set(
    schema: Schema, set_expressions: Sequence[SetExpression], row: Sequence[Value]
) -> list[Value]:
    """Return a copy of row with the assigned positions overwritten.

    The input row is never modified.
    """
    new_row = list(row)
    for expr in set_expressions:
        new_row[_resolve_column(schema, expr.column_name).position] = normalize_literal(expr.value)
    return new_row
