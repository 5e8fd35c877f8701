"""Application layer - the table engine that callers invoke."""

from rowdb.application.table_engine import EngineContext, TableEngine
from rowdb.ports.inbound import ExecutionResult

__all__ = [
    "EngineContext",
    "ExecutionResult",
    "TableEngine",
]
