"""Domain entities for rowdb.

Exports:
    Schema:
        - ColumnDef: Column name, type and on-disk position
        - Schema: Table name plus column definitions

    Query records:
        - Operand, WhereExpression, SetExpression, ColumnSpec
        - CreateTableQuery, InsertQuery, SelectQuery, UpdateQuery, DeleteQuery
        - Query: Union of all query records
"""

from rowdb.domain.entities.query import (
    ColumnSpec,
    CreateTableQuery,
    DeleteQuery,
    InsertQuery,
    Operand,
    Query,
    SelectQuery,
    SetExpression,
    UpdateQuery,
    WhereExpression,
)
from rowdb.domain.entities.schema import ColumnDef, Schema

__all__ = [
    # Schema
    "ColumnDef",
    "Schema",
    # Query records
    "Operand",
    "WhereExpression",
    "SetExpression",
    "ColumnSpec",
    "CreateTableQuery",
    "InsertQuery",
    "SelectQuery",
    "UpdateQuery",
    "DeleteQuery",
    "Query",
]
