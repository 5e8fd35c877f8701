"""rowdb - Single-node, file-backed relational row store.

A schema catalog plus a row-oriented table engine that executes
CREATE TABLE, INSERT, SELECT, UPDATE and DELETE over pre-parsed
query records. Every table is mirrored in memory and persisted as one
JSON file; the catalog is a single JSON document.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
