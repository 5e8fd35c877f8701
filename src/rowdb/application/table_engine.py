"""Table Engine - the single entry point for executing queries.

The engine owns the schema catalog and the in-memory mirror of every
table's rows. Each mutation follows the same protocol:

    1. Resolve the table and validate the whole request (no I/O yet).
    2. Under the table lock, compute the new rows from the mirror.
    3. Persist through the row store (read-modify-write of the file).
    4. Only if persistence succeeded, apply the same change to the mirror.

So every call either fully succeeds (file and mirror hold the new state)
or fully fails (both hold the old state).

Usage:
    from rowdb.application import TableEngine
    from rowdb.domain.entities import ColumnSpec, Operand, WhereExpression

    with TableEngine(data_dir="/path/to/data") as engine:
        engine.create_table("planets", [ColumnSpec("id", "integer"), ColumnSpec("name", "string")])
        engine.insert("planets", ["id", "name"], [[1, "Mercury"], [2, "Venus"]])
        rows = engine.select(
            "planets", [WhereExpression.eq(Operand.column("id"), Operand.literal(2))]
        )

Concurrency:
    - catalog_lock (RLock) guards the catalog and name resolution.
    - One Lock per table guards that table's mirror and row file; every
      operation on the table, reads included, holds it.
    - The catalog lock is never held while waiting for a table lock.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from rowdb.adapters.outbound import AtomicJsonWriter, JsonCatalogStore, JsonRowStore
from rowdb.domain.entities import (
    CreateTableQuery,
    DeleteQuery,
    InsertQuery,
    Query,
    Schema,
    SelectQuery,
    SetExpression,
    UpdateQuery,
    WhereExpression,
)
from rowdb.domain.errors import (
    DatabaseError,
    DuplicateColumnError,
    EmptyValuesError,
    MissingColumnError,
    RowArityMismatchError,
    StorageIOError,
    UnknownColumnError,
    UnknownTableError,
    UnsupportedOperationError,
)
from rowdb.domain.services import (
    SchemaCatalog,
    apply_set,
    matches,
    validate_set,
    validate_value,
    validate_where,
)
from rowdb.domain.services.schema_catalog import ColumnSpecLike
from rowdb.domain.value_objects import QueryType, Value, fold_name, normalize_literal
from rowdb.infrastructure.config import Config, StorageConfig
from rowdb.infrastructure.logging import get_logger
from rowdb.infrastructure.metrics import MetricsRegistry, get_metrics
from rowdb.infrastructure.tracing import trace_span
from rowdb.ports.inbound import ExecutionResult
from rowdb.ports.outbound import CatalogStore, RowStore, SyncMode

logger = get_logger(__name__)

_MUTATION_EVENTS = {
    QueryType.INSERT: "rows_inserted",
    QueryType.UPDATE: "rows_updated",
    QueryType.DELETE: "rows_deleted",
}


@dataclass
class EngineContext:
    """Mutable state owned by one engine instance.

    Attributes:
        catalog: Table schemas.
        rows: Mirror of each table's persisted rows, by table name.
        table_locks: One lock per table, by table name.
        catalog_lock: Guards catalog, rows and table_locks membership.
    """

    catalog: SchemaCatalog
    rows: dict[str, list[list[Value]]] = field(default_factory=dict)
    table_locks: dict[str, threading.Lock] = field(default_factory=dict)
    catalog_lock: threading.RLock = field(default_factory=threading.RLock)

    def register_table(self, name: str, rows: list[list[Value]]) -> None:
        self.rows[name] = rows
        self.table_locks[name] = threading.Lock()


class TableEngine:
    """Catalog plus file-backed row store behind one query interface.

    Thread Safety:
        One engine instance may be shared by many threads. Two engine
        instances must not share a data directory.
    """

    def __init__(
        self,
        data_dir: str | Path | None = None,
        sync_mode: SyncMode | str | None = None,
        metrics: MetricsRegistry | None = None,
        config: Config | None = None,
        catalog_store: CatalogStore | None = None,
        row_store: RowStore | None = None,
    ) -> None:
        """Initialize the engine (no I/O happens until open()).

        Args:
            data_dir: Directory for the catalog and table files.
                Defaults to the configured storage.data_dir.
            sync_mode: 'fsync' or 'none'. Defaults to the configured value.
            metrics: Metrics registry. Defaults to the global registry.
            config: Configuration. Defaults to Config() (environment).
            catalog_store: Catalog storage override.
            row_store: Row storage override.
        """
        storage: StorageConfig = (config or Config()).storage

        self._data_dir = Path(data_dir) if data_dir is not None else storage.data_dir
        self._sync_mode = SyncMode(sync_mode or storage.sync_mode)
        self._metrics = metrics or get_metrics()

        writer = AtomicJsonWriter(
            sync_mode=self._sync_mode,
            indent=storage.json_indent,
            metrics=self._metrics,
        )
        self._catalog_store = catalog_store or JsonCatalogStore(
            self._data_dir, storage.catalog_file, writer
        )
        self._row_store = row_store or JsonRowStore(
            self._data_dir, storage.table_file_suffix, writer
        )
        self._context = EngineContext(catalog=SchemaCatalog(self._catalog_store))
        self._opened = False

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def is_open(self) -> bool:
        return self._opened

    @property
    def context(self) -> EngineContext:
        return self._context

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> TableEngine:
        """Initialize the catalog and load every table into memory.

        Raises:
            RuntimeError: If already open.
            CorruptCatalogError: If the catalog cannot be decoded.
            StorageIOError: If the data directory or a file cannot be used.
        """
        if self._opened:
            raise RuntimeError("Table engine already open")

        self._prepare_data_dir()

        with self._context.catalog_lock:
            catalog = self._context.catalog
            catalog.initialize()
            schemas = catalog.load()
            for name, schema in schemas.items():
                self._context.register_table(name, self._row_store.load(schema))
                self._metrics.rows_stored.labels(table=name).set(len(self._context.rows[name]))
            self._metrics.tables.set(len(schemas))

        self._opened = True
        logger.info(
            "table_engine_opened",
            data_dir=str(self._data_dir),
            tables=len(schemas),
            rows=sum(len(rows) for rows in self._context.rows.values()),
        )
        return self

    def close(self) -> None:
        """Release the engine. Every write is already durable, so nothing is flushed."""
        if not self._opened:
            return
        self._opened = False
        logger.info("table_engine_closed", data_dir=str(self._data_dir))

    def _prepare_data_dir(self) -> None:
        if self._data_dir.exists() and not self._data_dir.is_dir():
            raise StorageIOError(f"{self._data_dir} is not a directory")
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"failed to create data directory {self._data_dir}: {e}") from e

    def _require_open(self) -> None:
        if not self._opened:
            raise RuntimeError("Table engine not open")

    def __enter__(self) -> TableEngine:
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Query boundary
    # ------------------------------------------------------------------

    def execute(self, query: Query) -> ExecutionResult:
        """Execute a query record.

        DatabaseErrors are returned in ExecutionResult.error rather than
        raised.
        """
        self._require_open()

        query_type: QueryType | None = getattr(query, "query_type", None)
        label = query_type.value if isinstance(query_type, QueryType) else "unknown"
        table = str(getattr(query, "table_name", ""))

        start = time.perf_counter()
        with trace_span(f"rowdb.{label}", {"rowdb.table": table}) as span:
            try:
                result = self._dispatch(query)
            except DatabaseError as e:
                span.set_attribute("rowdb.error_kind", e.kind.value)
                self._metrics.queries_total.labels(query_type=label, status="error").inc()
                logger.warning(
                    "query_failed",
                    query_type=label,
                    table=table,
                    error_kind=e.kind.value,
                    error=e.message,
                )
                return ExecutionResult(message=f"Error: {e.message}", error=e)

        self._metrics.queries_total.labels(query_type=label, status="success").inc()
        self._metrics.query_latency_seconds.labels(query_type=label).observe(
            time.perf_counter() - start
        )
        return result

    def _dispatch(self, query: Query) -> ExecutionResult:
        """One handler per query record type."""
        if isinstance(query, CreateTableQuery):
            schema = self.create_table(query.table_name, query.columns)
            return ExecutionResult(
                columns=schema.column_names(), message=f"OK: Table '{schema.name}' created"
            )
        elif isinstance(query, InsertQuery):
            count = self.insert(query.table_name, query.columns, query.values)
            return ExecutionResult(affected_rows=count, message=f"OK: {count} row(s) inserted")
        elif isinstance(query, SelectQuery):
            rows = self.select(query.table_name, query.where)
            return ExecutionResult(
                rows=rows,
                columns=self._schema(query.table_name).column_names(),
                message="OK",
            )
        elif isinstance(query, UpdateQuery):
            count = self.update(query.table_name, query.assignments, query.where)
            return ExecutionResult(affected_rows=count, message=f"OK: {count} row(s) updated")
        elif isinstance(query, DeleteQuery):
            count = self.delete(query.table_name, query.where)
            return ExecutionResult(affected_rows=count, message=f"OK: {count} row(s) deleted")
        raise UnsupportedOperationError(f"unsupported query type: {type(query).__name__}")

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create_table(self, table_name: str, columns: Sequence[ColumnSpecLike]) -> Schema:
        """Create a table and seed its empty mirror.

        Raises:
            InvalidNameError, TableExistsError, EmptyColumnListError,
            DuplicateColumnError, UnknownTypeError, StorageIOError
        """
        self._require_open()
        with self._context.catalog_lock:
            schema = self._context.catalog.create_table(table_name, columns)
            self._context.register_table(schema.name, [])
            self._metrics.tables.set(len(self._context.catalog))
        self._metrics.rows_stored.labels(table=schema.name).set(0)
        return schema

    def insert(
        self, table_name: str, columns: Sequence[str], values: Sequence[Sequence[Any]]
    ) -> int:
        """Insert rows given in the caller's column order.

        Raises:
            UnknownTableError, EmptyValuesError, UnknownColumnError,
            DuplicateColumnError, MissingColumnError, RowArityMismatchError,
            TypeMismatchError, StorageIOError
        """
        self._require_open()
        schema, lock = self._resolve(table_name)
        new_rows = self._project_rows(schema, columns, values)

        with lock:
            self._row_store.append(schema.name, new_rows)
            mirror = self._context.rows[schema.name]
            mirror.extend(new_rows)
            stored = len(mirror)

        self._record_mutation(QueryType.INSERT, schema.name, len(new_rows), stored)
        return len(new_rows)

    def select(
        self, table_name: str, where: Sequence[WhereExpression] = ()
    ) -> list[list[Value]]:
        """Return copies of the rows matching every WHERE expression.

        Raises:
            UnknownTableError, UnknownColumnError, TypeMismatchError,
            UnsupportedOperationError
        """
        self._require_open()
        schema, lock = self._resolve(table_name)
        validate_where(schema, where)

        with lock:
            return [
                list(row) for row in self._context.rows[schema.name] if matches(schema, row, where)
            ]

    def update(
        self,
        table_name: str,
        assignments: Sequence[SetExpression],
        where: Sequence[WhereExpression] = (),
    ) -> int:
        """Apply assignments to every matching row.

        Matching no rows is a success with a count of 0.

        Raises:
            UnknownTableError, UnknownColumnError, TypeMismatchError,
            UnsupportedOperationError, DuplicateColumnError, StorageIOError
        """
        self._require_open()
        schema, lock = self._resolve(table_name)
        validate_where(schema, where)
        validate_set(schema, assignments)

        with lock:
            mirror = self._context.rows[schema.name]
            updates = {
                index: apply_set(schema, assignments, row)
                for index, row in enumerate(mirror)
                if matches(schema, row, where)
            }
            if updates:
                self._row_store.replace_at(schema.name, updates)
                for index, new_row in updates.items():
                    mirror[index] = new_row
            stored = len(mirror)

        self._record_mutation(QueryType.UPDATE, schema.name, len(updates), stored)
        return len(updates)

    def delete(self, table_name: str, where: Sequence[WhereExpression] = ()) -> int:
        """Remove every matching row.

        Survivors keep their relative order but are renumbered: any index
        held from before the delete no longer identifies the same row.

        Raises:
            UnknownTableError, UnknownColumnError, TypeMismatchError,
            UnsupportedOperationError, StorageIOError
        """
        self._require_open()
        schema, lock = self._resolve(table_name)
        validate_where(schema, where)

        with lock:
            mirror = self._context.rows[schema.name]
            doomed = {index for index, row in enumerate(mirror) if matches(schema, row, where)}
            if doomed:
                self._row_store.remove_at(schema.name, doomed)
                self._context.rows[schema.name] = [
                    row for index, row in enumerate(mirror) if index not in doomed
                ]
            stored = len(self._context.rows[schema.name])

        self._record_mutation(QueryType.DELETE, schema.name, len(doomed), stored)
        return len(doomed)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def list_tables(self) -> list[str]:
        """Sorted table names."""
        self._require_open()
        with self._context.catalog_lock:
            return self._context.catalog.table_names()

    def get_schema(self, table_name: str) -> Schema:
        """Schema of a table.

        Raises:
            UnknownTableError: If the table does not exist.
        """
        self._require_open()
        return self._schema(table_name)

    def row_count(self, table_name: str) -> int:
        """Number of rows currently stored in a table."""
        self._require_open()
        schema, lock = self._resolve(table_name)
        with lock:
            return len(self._context.rows[schema.name])

    def get_stats(self) -> dict:
        """Engine statistics.

        Returns:
            Dictionary with data directory, sync mode and per-table row counts.
        """
        stats: dict[str, Any] = {
            "open": self._opened,
            "data_dir": str(self._data_dir),
            "sync_mode": self._sync_mode.value,
        }
        if self._opened:
            tables = {name: self.row_count(name) for name in self.list_tables()}
            stats["table_count"] = len(tables)
            stats["tables"] = tables
        return stats

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _schema(self, table_name: str) -> Schema:
        return self._resolve(table_name)[0]

    def _resolve(self, table_name: str) -> tuple[Schema, threading.Lock]:
        """Find a table's schema and lock."""
        with self._context.catalog_lock:
            schema = self._context.catalog.get(table_name)
            if schema is None:
                shown = fold_name(table_name) if isinstance(table_name, str) else table_name
                raise UnknownTableError(f"table {shown} does not exist")
            return schema, self._context.table_locks[schema.name]

    def _project_rows(
        self, schema: Schema, columns: Sequence[str], values: Sequence[Sequence[Any]]
    ) -> list[list[Value]]:
        """Validate insert input and reorder each row into column positions."""
        if not values:
            raise EmptyValuesError("empty values, at least one row is required")

        input_index: dict[str, int] = {}
        for index, column_name in enumerate(columns):
            if not isinstance(column_name, str) or not schema.has_column(column_name):
                raise UnknownColumnError(
                    f"column {column_name} does not exist in table {schema.name}"
                )
            folded = fold_name(column_name)
            if folded in input_index:
                raise DuplicateColumnError(f"column {folded} is listed more than once")
            input_index[folded] = index

        for column in schema:
            if column.name not in input_index:
                raise MissingColumnError(f"{column.name} column value is not provided")

        ordered = schema.ordered_columns()
        new_rows: list[list[Value]] = []
        for row_number, value_row in enumerate(values):
            if len(value_row) != len(columns):
                raise RowArityMismatchError(
                    f"row {row_number} has {len(value_row)} values, expected {len(columns)}"
                )
            new_row: list[Value] = []
            for column in ordered:
                literal = value_row[input_index[column.name]]
                validate_value(column, literal)
                new_row.append(normalize_literal(literal))
            new_rows.append(new_row)
        return new_rows

    def _record_mutation(
        self, query_type: QueryType, table: str, affected: int, stored: int
    ) -> None:
        self._metrics.rows_affected_total.labels(query_type=query_type.value).inc(affected)
        self._metrics.rows_stored.labels(table=table).set(stored)
        logger.info(_MUTATION_EVENTS[query_type], table=table, count=affected)
