"""JSON file implementation of the RowStore port.

Each table lives in "<data_dir>/<table_name><suffix>" as a JSON array
of rows, each row an array of values in column-position order:

    [
      [1, "Mercury"],
      [2, "Venus"]
    ]

Every mutation re-reads the whole file, applies the change to the
decoded rows and rewrites the file through AtomicJsonWriter.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Collection, Mapping, Sequence

from rowdb.adapters.outbound.atomic_file import AtomicJsonWriter, read_json
from rowdb.domain.entities import Schema
from rowdb.domain.errors import StorageIOError
from rowdb.domain.value_objects import Value, is_assignable, normalize_literal
from rowdb.infrastructure.logging import get_logger

DEFAULT_TABLE_SUFFIX = ".table.json"

logger = get_logger(__name__)

RowTransform = Callable[[list[list[Value]]], list[list[Value]]]


class JsonRowStore:
    """Per-table JSON row files in a data directory.

    Thread Safety:
        Not thread-safe; the table engine holds the table lock around
        every call.
    """

    def __init__(
        self,
        data_dir: str | Path,
        suffix: str = DEFAULT_TABLE_SUFFIX,
        writer: AtomicJsonWriter | None = None,
    ) -> None:
        self._data_dir = Path(data_dir)
        self._suffix = suffix
        self._writer = writer or AtomicJsonWriter()

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def table_path(self, table_name: str) -> Path:
        return self._data_dir / f"{table_name}{self._suffix}"

    def load(self, schema: Schema) -> list[list[Value]]:
        """Read all rows of a table, checking them against the schema.

        Every row must have the schema width and every cell the type of
        its column. Integral floats are stored as ints.
        """
        path = self.table_path(schema.name)
        columns = schema.ordered_columns()
        rows = self._read_rows(schema.name)
        for index, row in enumerate(rows):
            if len(row) != schema.width:
                raise StorageIOError(
                    f"row {index} in {path} has {len(row)} values, "
                    f"table {schema.name} has {schema.width} columns"
                )
            for column, cell in zip(columns, row):
                if not is_assignable(cell, column.type):
                    raise StorageIOError(
                        f"row {index} in {path} holds {cell!r} in {column.type.value} "
                        f"column {column.name}"
                    )
            rows[index] = [normalize_literal(cell) for cell in row]
        return rows

    def append(self, table_name: str, new_rows: Sequence[Sequence[Value]]) -> None:
        added = [list(row) for row in new_rows]
        self._rewrite(table_name, lambda rows: rows + added)

    def replace_at(self, table_name: str, updates: Mapping[int, Sequence[Value]]) -> None:
        def transform(rows: list[list[Value]]) -> list[list[Value]]:
            for index, new_row in updates.items():
                if not 0 <= index < len(rows):
                    raise StorageIOError(
                        f"row {index} does not exist in {self.table_path(table_name)} "
                        f"({len(rows)} rows)"
                    )
                rows[index] = list(new_row)
            return rows

        self._rewrite(table_name, transform)

    def remove_at(self, table_name: str, indices: Collection[int]) -> None:
        doomed = set(indices)
        self._rewrite(
            table_name,
            lambda rows: [row for index, row in enumerate(rows) if index not in doomed],
        )

    def _read_rows(self, table_name: str) -> list[list[Value]]:
        path = self.table_path(table_name)
        try:
            document: Any = read_json(path)
        except ValueError as e:
            raise StorageIOError(f"failed to decode JSON from {path}: {e}") from e

        if document is None:
            return []
        if not isinstance(document, list) or not all(isinstance(row, list) for row in document):
            raise StorageIOError(f"{path} does not hold a list of rows")
        return document

    def _rewrite(self, table_name: str, transform: RowTransform) -> None:
        """Read-modify-write the whole table file."""
        rows = self._read_rows(table_name)
        new_rows = transform(rows)
        self._writer.write(self.table_path(table_name), new_rows, file_kind="table")
        logger.debug("table_file_rewritten", table=table_name, rows=len(new_rows))
