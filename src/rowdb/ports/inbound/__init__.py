"""Inbound ports - API contracts for the table engine."""

from rowdb.ports.inbound.query_engine import ExecutionResult, QueryEngine

__all__ = [
    "ExecutionResult",
    "QueryEngine",
]
