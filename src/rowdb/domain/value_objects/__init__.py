"""Value objects for the rowdb domain.

Value objects are immutable types that represent domain concepts.

Exports:
    Values:
        - ColumnType: Primitive column types (integer, string)
        - ValueType: Inferred type of a literal
        - Value: Normalized cell value (int | str)
        - value_type, normalize_literal, is_assignable

    Names:
        - normalize_name: Fold and validate table/column names
        - fold_name: Fold without validating (for lookups)

    Query types:
        - QueryType, OperandKind, Operation
"""

from rowdb.domain.value_objects.names import NAME_PATTERN, fold_name, normalize_name
from rowdb.domain.value_objects.query_types import OperandKind, Operation, QueryType
from rowdb.domain.value_objects.values import (
    INT64_MAX,
    INT64_MIN,
    ColumnType,
    Value,
    ValueType,
    is_assignable,
    normalize_literal,
    value_type,
)

__all__ = [
    # Values
    "ColumnType",
    "ValueType",
    "Value",
    "INT64_MIN",
    "INT64_MAX",
    "value_type",
    "normalize_literal",
    "is_assignable",
    # Names
    "NAME_PATTERN",
    "fold_name",
    "normalize_name",
    # Query types
    "QueryType",
    "OperandKind",
    "Operation",
]
