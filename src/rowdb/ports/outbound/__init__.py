"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for the durable storage the table
engine depends on: the catalog document and per-table row files.
"""

from rowdb.ports.outbound.catalog_store import CatalogStore
from rowdb.ports.outbound.row_store import RowStore, SyncMode

__all__ = [
    "CatalogStore",
    "RowStore",
    "SyncMode",
]
