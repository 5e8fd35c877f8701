"""Enumerations used by query records."""

from __future__ import annotations

from enum import Enum


class QueryType(Enum):
    """Kinds of operations the engine executes."""

    CREATE_TABLE = "create_table"
    INSERT = "insert"
    SELECT = "select"
    UPDATE = "update"
    DELETE = "delete"


class OperandKind(Enum):
    """Whether an operand is a literal or a column reference."""

    VALUE = "value"
    IDENTIFIER = "identifier"

    @classmethod
    def parse(cls, raw: str | OperandKind) -> OperandKind | None:
        """Resolve a kind given as enum member or case-insensitive string."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class Operation(Enum):
    """Comparison operations allowed in WHERE expressions.

    Only equality is supported.
    """

    EQ = "eq"

    @classmethod
    def parse(cls, raw: str | Operation) -> Operation | None:
        """Resolve an operation given as enum member or case-insensitive string."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None
