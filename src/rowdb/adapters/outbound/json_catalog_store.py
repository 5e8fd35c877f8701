"""JSON file implementation of the CatalogStore port.

File format (one object keyed by table name):

    {
      "planets": {
        "name": "planets",
        "columns": {
          "id":   {"name": "id",   "type": "integer", "position": 0},
          "name": {"name": "name", "type": "string",  "position": 1}
        }
      }
    }
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from rowdb.adapters.outbound.atomic_file import AtomicJsonWriter, read_json
from rowdb.domain.errors import CorruptCatalogError, StorageIOError

DEFAULT_CATALOG_FILE = "rowdb.meta.json"


class JsonCatalogStore:
    """Stores the catalog as a single JSON document in the data directory."""

    def __init__(
        self,
        data_dir: str | Path,
        file_name: str = DEFAULT_CATALOG_FILE,
        writer: AtomicJsonWriter | None = None,
    ) -> None:
        self._path = Path(data_dir) / file_name
        self._writer = writer or AtomicJsonWriter()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def read(self) -> dict[str, Any]:
        try:
            document = read_json(self._path)
        except ValueError as e:
            raise CorruptCatalogError(f"failed to decode JSON from {self._path}: {e}") from e

        if document is None:
            raise StorageIOError(f"catalog file {self._path} does not exist")
        if not isinstance(document, dict):
            raise CorruptCatalogError(
                f"catalog {self._path} must hold an object, got {type(document).__name__}"
            )
        return document

    def write(self, document: dict[str, Any]) -> None:
        self._writer.write(self._path, document, file_kind="catalog")
