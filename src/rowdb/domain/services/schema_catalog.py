"""Schema Catalog - the authoritative table name -> Schema mapping.

All schema changes go through the catalog. A new table becomes visible
only after the complete catalog (every table, not just the new one) has
been persisted; if persistence fails the in-memory mapping is unchanged.

Thread Safety:
    Not thread-safe. The table engine holds its catalog lock around
    every call.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence, Union

from rowdb.domain.entities import ColumnDef, ColumnSpec, Schema
from rowdb.domain.errors import (
    CorruptCatalogError,
    DuplicateColumnError,
    EmptyColumnListError,
    TableExistsError,
    UnknownTypeError,
)
from rowdb.domain.value_objects import ColumnType, fold_name, normalize_name
from rowdb.infrastructure.logging import get_logger
from rowdb.ports.outbound import CatalogStore

logger = get_logger(__name__)

ColumnSpecLike = Union[ColumnSpec, Mapping[str, Any]]


def _spec_fields(spec: ColumnSpecLike) -> tuple[Any, Any]:
    if isinstance(spec, ColumnSpec):
        return spec.name, spec.type
    return spec.get("name"), spec.get("type")


def build_schema(table_name: str, column_specs: Sequence[ColumnSpecLike]) -> Schema:
    """Validate a CREATE TABLE request and build its schema.

    Positions follow input order.

    Raises:
        InvalidNameError, EmptyColumnListError, DuplicateColumnError,
        UnknownTypeError
    """
    name = normalize_name(table_name, "table name")
    if not column_specs:
        raise EmptyColumnListError(f"failed to create {name}: table must have at least one column")

    columns: dict[str, ColumnDef] = {}
    for position, spec in enumerate(column_specs):
        raw_name, raw_type = _spec_fields(spec)
        column_name = normalize_name(raw_name, f"column name for table {name}")
        if column_name in columns:
            raise DuplicateColumnError(
                f"{raw_name} definition is repeated (column names are case-insensitive)"
            )

        column_type = ColumnType.parse(raw_type) if isinstance(raw_type, str) else None
        if column_type is None:
            raise UnknownTypeError(f"{raw_type!r} type is not supported for column {raw_name}")

        columns[column_name] = ColumnDef(name=column_name, type=column_type, position=position)

    return Schema(name=name, columns=columns)


class SchemaCatalog:
    """In-memory view of the persisted catalog."""

    def __init__(self, store: CatalogStore) -> None:
        self._store = store
        self._tables: dict[str, Schema] = {}

    def initialize(self) -> bool:
        """Create an empty catalog document if none exists.

        Returns:
            True if a new catalog was written, False if one already existed.
        """
        if self._store.exists():
            logger.info("catalog_already_initialized", path=str(self._store.path))
            return False

        logger.info("catalog_created", path=str(self._store.path))
        self._store.write({})
        return True

    def load(self) -> dict[str, Schema]:
        """Read and decode every schema from the store.

        Raises:
            CorruptCatalogError: If any entry is malformed.
            StorageIOError: If the document cannot be read.
        """
        document = self._store.read()
        tables: dict[str, Schema] = {}
        for key, entry in document.items():
            try:
                schema = Schema.from_dict(entry)
            except ValueError as e:
                raise CorruptCatalogError(f"invalid catalog entry {key!r}: {e}") from e
            if schema.name != key:
                raise CorruptCatalogError(
                    f"catalog entry {key!r} describes table {schema.name!r}"
                )
            tables[key] = schema

        self._tables = tables
        return dict(tables)

    def get(self, table_name: str) -> Schema | None:
        """Look up a schema by (case-insensitive) name."""
        if not isinstance(table_name, str):
            return None
        return self._tables.get(fold_name(table_name))

    def __contains__(self, table_name: object) -> bool:
        return isinstance(table_name, str) and fold_name(table_name) in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def table_names(self) -> list[str]:
        """Sorted list of table names."""
        return sorted(self._tables)

    def create_table(self, table_name: str, column_specs: Sequence[ColumnSpecLike]) -> Schema:
        """Validate, persist and register a new table.

        Raises:
            InvalidNameError, TableExistsError, EmptyColumnListError,
            DuplicateColumnError, UnknownTypeError, StorageIOError
        """
        name = normalize_name(table_name, "table name")
        if name in self._tables:
            raise TableExistsError(f"table {table_name} exists (table names are case-insensitive)")

        schema = build_schema(name, column_specs)

        tables = {**self._tables, schema.name: schema}
        self._store.write({key: value.to_dict() for key, value in tables.items()})
        self._tables = tables

        logger.info("table_created", table=schema.name, columns=schema.column_names())
        return schema
