"""Catalog Store port for persisting table schemas.

The catalog store holds the encoded form of every schema in a single
document (table name -> schema entry). It knows nothing about schema
validation; decoding into Schema objects is done by the SchemaCatalog.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Any, Protocol


class CatalogStore(Protocol):
    """Protocol for durable catalog storage.

    Thread Safety:
        Not thread-safe. The table engine serializes catalog access.
    """

    @property
    @abstractmethod
    def path(self) -> Path:
        """Location of the catalog document."""
        ...

    @abstractmethod
    def exists(self) -> bool:
        """Return True if a catalog document has been written."""
        ...

    @abstractmethod
    def read(self) -> dict[str, Any]:
        """Read the catalog document.

        Returns:
            Mapping of table name to encoded schema.

        Raises:
            CorruptCatalogError: If the document cannot be parsed.
            StorageIOError: If the document cannot be read.
        """
        ...

    @abstractmethod
    def write(self, document: dict[str, Any]) -> None:
        """Replace the catalog document.

        The write is atomic: on failure the previous document is left intact.

        Raises:
            StorageIOError: If encoding or writing fails.
        """
        ...
