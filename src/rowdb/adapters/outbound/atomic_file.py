"""Atomic JSON file rewrites.

A rewrite never touches the destination until the new content is fully
encoded and written:

    1. Encode the document to UTF-8 bytes (encode errors abort before any I/O).
    2. Write it to "<name>.tmp" next to the destination, flush, fsync.
    3. Close the temp file; a close error aborts the rewrite.
    4. os.replace() the temp file over the destination.

A reader therefore always sees either the complete old document or the
complete new one.
"""

from __future__ import annotations

import contextlib
import json
import os
import time
from pathlib import Path
from typing import Any

from rowdb.domain.errors import StorageIOError
from rowdb.infrastructure.logging import get_logger
from rowdb.infrastructure.metrics import MetricsRegistry
from rowdb.ports.outbound import SyncMode

TEMP_SUFFIX = ".tmp"

logger = get_logger(__name__)


def read_json(path: Path) -> Any | None:
    """Read and decode a JSON file.

    Returns:
        The decoded document, or None if the file does not exist.

    Raises:
        StorageIOError: If the file exists but cannot be read.
        ValueError: If the content is not valid JSON (json.JSONDecodeError
            and UnicodeDecodeError are both ValueErrors).
    """
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except OSError as e:
        raise StorageIOError(f"failed to read file {path}: {e}") from e


class AtomicJsonWriter:
    """Writes JSON documents with replace-on-success semantics."""

    def __init__(
        self,
        sync_mode: SyncMode = SyncMode.FSYNC,
        indent: int = 2,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the writer.

        Args:
            sync_mode: Whether to fsync the new content before replacing.
            indent: JSON indentation; 0 writes compact JSON.
            metrics: Optional metrics registry for write counters.
        """
        self._sync_mode = sync_mode
        self._indent = indent or None
        self._metrics = metrics

    @property
    def sync_mode(self) -> SyncMode:
        return self._sync_mode

    def encode(self, document: Any) -> bytes:
        """Encode a document, raising StorageIOError on unencodable values.

        Lone surrogates survive json.dumps but not UTF-8, so both steps
        happen here.
        """
        try:
            text = json.dumps(document, indent=self._indent, ensure_ascii=False, allow_nan=False)
            return (text + "\n").encode("utf-8")
        except (TypeError, ValueError) as e:
            raise StorageIOError(f"failed to encode JSON: {e}") from e

    def write(self, path: Path, document: Any, file_kind: str = "table") -> None:
        """Atomically replace path with the encoded document.

        Args:
            path: Destination file.
            document: JSON-serializable document.
            file_kind: Label for metrics ("catalog" or "table").

        Raises:
            StorageIOError: If encoding, writing, syncing, closing or
                replacing fails. The destination is left unchanged.
        """
        start = time.perf_counter()
        try:
            payload = self.encode(document)
            tmp_path = path.with_name(path.name + TEMP_SUFFIX)
            try:
                self._write_temp(tmp_path, payload)
                os.replace(tmp_path, path)
            except OSError as e:
                with contextlib.suppress(OSError):
                    tmp_path.unlink(missing_ok=True)
                raise StorageIOError(f"failed to write file {path}: {e}") from e
        except StorageIOError as e:
            logger.error("file_write_failed", path=str(path), file_kind=file_kind, error=str(e))
            if self._metrics is not None:
                self._metrics.storage_write_failures_total.labels(file_kind=file_kind).inc()
            raise

        if self._metrics is not None:
            self._metrics.storage_writes_total.labels(file_kind=file_kind).inc()
            self._metrics.storage_write_latency_seconds.observe(time.perf_counter() - start)

    def _write_temp(self, tmp_path: Path, payload: bytes) -> None:
        # Leaving the with-block closes the file; a close error propagates.
        with open(tmp_path, "wb") as f:
            f.write(payload)
            f.flush()
            if self._sync_mode is SyncMode.FSYNC:
                os.fsync(f.fileno())
