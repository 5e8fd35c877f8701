"""Query Engine port - the operation boundary callers use.

A transport (HTTP handler, CLI, test) decodes requests into query
records and hands them to the engine. Two styles are offered:

    - Typed methods (create_table, insert, select, update, delete) that
      return their result or raise a DatabaseError.
    - execute(query) which never raises a DatabaseError and instead
      returns an ExecutionResult carrying either rows/counts or the error.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, Sequence

from rowdb.domain.value_objects import Value

if TYPE_CHECKING:
    from rowdb.domain.entities import Query, Schema, SetExpression, WhereExpression
    from rowdb.domain.errors import DatabaseError
    from rowdb.domain.services.schema_catalog import ColumnSpecLike


@dataclass
class ExecutionResult:
    """Result of executing one query record."""

    rows: list[list[Value]] = field(default_factory=list)
    affected_rows: int = 0
    message: str = ""
    columns: list[str] = field(default_factory=list)
    error: DatabaseError | None = None

    @property
    def success(self) -> bool:
        return self.error is None


class QueryEngine(Protocol):
    """Protocol for the table engine's external interface.

    Thread Safety:
        All methods may be called concurrently from multiple threads.
    """

    @abstractmethod
    def execute(self, query: Query) -> ExecutionResult:
        """Dispatch a query record to its handler."""
        ...

    @abstractmethod
    def create_table(self, table_name: str, columns: Sequence[ColumnSpecLike]) -> Schema:
        """Create a table; column order fixes on-disk positions."""
        ...

    @abstractmethod
    def insert(
        self, table_name: str, columns: Sequence[str], values: Sequence[Sequence[Any]]
    ) -> int:
        """Insert rows and return how many were inserted."""
        ...

    @abstractmethod
    def select(
        self, table_name: str, where: Sequence[WhereExpression] = ()
    ) -> list[list[Value]]:
        """Return copies of the matching rows in stored order."""
        ...

    @abstractmethod
    def update(
        self,
        table_name: str,
        assignments: Sequence[SetExpression],
        where: Sequence[WhereExpression] = (),
    ) -> int:
        """Apply assignments to matching rows and return how many matched."""
        ...

    @abstractmethod
    def delete(self, table_name: str, where: Sequence[WhereExpression] = ()) -> int:
        """Remove matching rows and return how many were removed."""
        ...
