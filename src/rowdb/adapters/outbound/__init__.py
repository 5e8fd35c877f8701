"""Outbound adapters - implementations of outbound ports.

These adapters persist the catalog and table rows as JSON files.
"""

from rowdb.adapters.outbound.atomic_file import AtomicJsonWriter, read_json
from rowdb.adapters.outbound.json_catalog_store import JsonCatalogStore
from rowdb.adapters.outbound.json_row_store import JsonRowStore

__all__ = [
    "AtomicJsonWriter",
    "JsonCatalogStore",
    "JsonRowStore",
    "read_json",
]
