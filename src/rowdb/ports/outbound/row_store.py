"""Row Store port for per-table row files.

Each table's rows are persisted as one file holding the complete,
ordered row sequence. Every mutation is a read-modify-write of the whole
file: the current rows are read, the change is applied, and the new
sequence replaces the old one atomically.

Rows carry no identity beyond their index. remove_at renumbers every
row after a removed one, so indices taken before a delete are invalid
afterwards.
"""

from __future__ import annotations

from abc import abstractmethod
from enum import Enum
from pathlib import Path
from typing import Collection, Mapping, Protocol, Sequence

from rowdb.domain.entities import Schema
from rowdb.domain.value_objects import Value


class SyncMode(Enum):
    """Sync modes for file rewrites.

    FSYNC: The new file content is fsynced before it replaces the old file
    NONE: Rely on OS buffering (fast, for tests)
    """

    FSYNC = "fsync"
    NONE = "none"


class RowStore(Protocol):
    """Protocol for durable row storage.

    Guarantees:
        - A failed mutation leaves the file with its previous complete content.
        - A successful mutation leaves the file with its new complete content.

    Thread Safety:
        Not thread-safe. Callers must serialize mutations per table.
    """

    @abstractmethod
    def table_path(self, table_name: str) -> Path:
        """Return the row file path for a table."""
        ...

    @abstractmethod
    def load(self, schema: Schema) -> list[list[Value]]:
        """Read all rows of a table.

        A missing file is the normal state of a new table and yields [].

        Raises:
            StorageIOError: If the file cannot be read or does not hold rows
                of the schema's width.
        """
        ...

    @abstractmethod
    def append(self, table_name: str, new_rows: Sequence[Sequence[Value]]) -> None:
        """Append rows to the end of the table file.

        Raises:
            StorageIOError: If the rewrite fails.
        """
        ...

    @abstractmethod
    def replace_at(self, table_name: str, updates: Mapping[int, Sequence[Value]]) -> None:
        """Overwrite the rows at the given indices.

        Raises:
            StorageIOError: If an index is out of range or the rewrite fails.
        """
        ...

    @abstractmethod
    def remove_at(self, table_name: str, indices: Collection[int]) -> None:
        """Drop the rows at the given indices, keeping survivors in order.

        Raises:
            StorageIOError: If the rewrite fails.
        """
        ...
