"""Table schemas.

A Schema maps case-folded column names to ColumnDefs. Column positions
form a dense permutation of range(len(columns)) and define the order of
values in every stored row.

Catalog encoding (one entry per table):

    {
        "name": "planets",
        "columns": {
            "id":   {"name": "id",   "type": "integer", "position": 0},
            "name": {"name": "name", "type": "string",  "position": 1}
        }
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from rowdb.domain.value_objects import NAME_PATTERN, ColumnType, fold_name


@dataclass(frozen=True, slots=True)
class ColumnDef:
    """Column definition.

    Attributes:
        name: Lower-case column name.
        type: Column type.
        position: Index of the column's value in every row.
    """

    name: str
    type: ColumnType
    position: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.type.value, "position": self.position}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ColumnDef:
        """Decode a catalog column entry.

        Raises:
            ValueError: If a field is missing or malformed.
        """
        if not isinstance(data, dict):
            raise ValueError(f"column entry must be an object, got {type(data).__name__}")

        name = data.get("name")
        if not isinstance(name, str) or not NAME_PATTERN.fullmatch(name) or name != name.lower():
            raise ValueError(f"invalid column name {name!r}")

        raw_type = data.get("type")
        column_type = ColumnType.parse(raw_type) if isinstance(raw_type, str) else None
        if column_type is None:
            raise ValueError(f"column {name} has unknown type {raw_type!r}")

        position = data.get("position")
        if not isinstance(position, int) or isinstance(position, bool) or position < 0:
            raise ValueError(f"column {name} has invalid position {position!r}")

        return cls(name=name, type=column_type, position=position)


@dataclass(frozen=True)
class Schema:
    """Name and column definitions of one table."""

    name: str
    columns: dict[str, ColumnDef] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate that positions form a dense permutation."""
        positions = sorted(col.position for col in self.columns.values())
        if positions != list(range(len(self.columns))):
            raise ValueError(
                f"column positions of table {self.name} are not dense: {positions}"
            )
        for key, col in self.columns.items():
            if key != col.name:
                raise ValueError(f"column key {key!r} does not match name {col.name!r}")

    @property
    def width(self) -> int:
        """Number of values in every row of this table."""
        return len(self.columns)

    def column(self, name: str) -> ColumnDef | None:
        """Look up a column by (case-insensitive) name."""
        return self.columns.get(fold_name(name))

    def has_column(self, name: str) -> bool:
        return fold_name(name) in self.columns

    def ordered_columns(self) -> list[ColumnDef]:
        """Columns sorted by position (on-disk order)."""
        return sorted(self.columns.values(), key=lambda col: col.position)

    def column_names(self) -> list[str]:
        """Column names in position order."""
        return [col.name for col in self.ordered_columns()]

    def __iter__(self) -> Iterator[ColumnDef]:
        return iter(self.ordered_columns())

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "columns": {name: col.to_dict() for name, col in self.columns.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Schema:
        """Decode a catalog table entry.

        Raises:
            ValueError: If the entry is malformed.
        """
        if not isinstance(data, dict):
            raise ValueError(f"table entry must be an object, got {type(data).__name__}")

        name = data.get("name")
        if not isinstance(name, str) or not NAME_PATTERN.fullmatch(name) or name != name.lower():
            raise ValueError(f"invalid table name {name!r}")

        raw_columns = data.get("columns")
        if not isinstance(raw_columns, dict) or not raw_columns:
            raise ValueError(f"table {name} has no columns")

        columns = {key: ColumnDef.from_dict(entry) for key, entry in raw_columns.items()}
        return cls(name=name, columns=columns)
