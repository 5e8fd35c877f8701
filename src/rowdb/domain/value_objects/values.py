"""Column types and literal values.

Cells arrive as untyped data (typically decoded JSON). They are mapped
onto a closed value variant at ingestion time:

    Integer  - int in the signed 64-bit range, or a float with no fractional part
    Text     - str

Anything else (fractional floats, booleans, None, containers) is still
accepted as an operand, but its ValueType never equals a column type, so
comparisons against columns and assignments to columns fail type checking.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Union

Value = Union[int, str]
"""A normalized cell value stored in a row."""

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ColumnType(Enum):
    """Primitive column types supported by the catalog."""

    INTEGER = "integer"
    STRING = "string"

    @classmethod
    def parse(cls, raw: str) -> ColumnType | None:
        """Return the type named by raw (case-insensitive), or None."""
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None

    def value_type(self) -> ValueType:
        """The ValueType a literal must have to be stored in this column."""
        if self is ColumnType.INTEGER:
            return ValueType.INTEGER
        return ValueType.STRING


class ValueType(Enum):
    """Inferred type of a literal operand."""

    INTEGER = "integer"
    STRING = "string"
    REAL = "real"
    BOOLEAN = "boolean"
    NULL = "null"
    OTHER = "other"


def value_type(literal: Any) -> ValueType:
    """Infer the type of a literal.

    Numbers with no fractional part are integers, so 1 and 1.0 are the
    same type. bool is checked before int since it subclasses it.
    """
    if literal is None:
        return ValueType.NULL
    if isinstance(literal, bool):
        return ValueType.BOOLEAN
    if isinstance(literal, int):
        return ValueType.INTEGER if INT64_MIN <= literal <= INT64_MAX else ValueType.OTHER
    if isinstance(literal, float):
        if math.isfinite(literal) and math.trunc(literal) == literal:
            return value_type(int(literal))
        return ValueType.REAL
    if isinstance(literal, str):
        return ValueType.STRING
    return ValueType.OTHER


def normalize_literal(literal: Any) -> Any:
    """Map integral floats to int; every other literal is returned as is."""
    if value_type(literal) is ValueType.INTEGER and isinstance(literal, float):
        return int(literal)
    return literal


def is_assignable(literal: Any, column_type: ColumnType) -> bool:
    """Check whether literal can be stored in a column of column_type."""
    return value_type(literal) is column_type.value_type()
