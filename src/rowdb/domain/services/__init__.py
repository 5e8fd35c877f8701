"""Domain services for schema management and expression evaluation."""

from rowdb.domain.services.expression_evaluator import (
    apply_set,
    matches,
    operand_type,
    validate_set,
    validate_value,
    validate_where,
)
from rowdb.domain.services.schema_catalog import SchemaCatalog, build_schema

__all__ = [
    "SchemaCatalog",
    "build_schema",
    "operand_type",
    "validate_where",
    "matches",
    "validate_set",
    "validate_value",
    "apply_set",
]
