"""Error kinds raised by the table engine.

Every failure the engine reports carries an ErrorKind so callers can
branch on the category without parsing messages. Validation errors are
raised before any mutation is attempted; StorageIOError is the only kind
that can originate after validation, and it guarantees that neither the
row file nor the in-memory mirror changed.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Categories of engine failures."""

    INVALID_NAME = "InvalidName"
    TABLE_EXISTS = "TableExists"
    UNKNOWN_TABLE = "UnknownTable"
    EMPTY_COLUMN_LIST = "EmptyColumnList"
    DUPLICATE_COLUMN = "DuplicateColumn"
    UNKNOWN_TYPE = "UnknownType"
    UNKNOWN_COLUMN = "UnknownColumn"
    TYPE_MISMATCH = "TypeMismatch"
    UNSUPPORTED_OPERATION = "UnsupportedOperation"
    EMPTY_VALUES = "EmptyValues"
    MISSING_COLUMN = "MissingColumn"
    ROW_ARITY_MISMATCH = "RowArityMismatch"
    CORRUPT_CATALOG = "CorruptCatalog"
    STORAGE_IO = "StorageIO"


class DatabaseError(Exception):
    """Base class for all engine errors."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value}: {self.message})"


class InvalidNameError(DatabaseError):
    """Table or column name is empty or has an invalid format."""

    kind = ErrorKind.INVALID_NAME


class TableExistsError(DatabaseError):
    """A table with the same (case-folded) name already exists."""

    kind = ErrorKind.TABLE_EXISTS


class UnknownTableError(DatabaseError):
    """The referenced table is not in the catalog."""

    kind = ErrorKind.UNKNOWN_TABLE


class EmptyColumnListError(DatabaseError):
    kind = ErrorKind.EMPTY_COLUMN_LIST


class DuplicateColumnError(DatabaseError):
    """A column is defined, inserted or assigned more than once."""

    kind = ErrorKind.DUPLICATE_COLUMN


class UnknownTypeError(DatabaseError):
    kind = ErrorKind.UNKNOWN_TYPE


class UnknownColumnError(DatabaseError):
    kind = ErrorKind.UNKNOWN_COLUMN


class TypeMismatchError(DatabaseError):
    """Operand or value type does not match the other side."""

    kind = ErrorKind.TYPE_MISMATCH


class UnsupportedOperationError(DatabaseError):
    kind = ErrorKind.UNSUPPORTED_OPERATION


class EmptyValuesError(DatabaseError):
    kind = ErrorKind.EMPTY_VALUES


class MissingColumnError(DatabaseError):
    """An insert does not supply a value for every schema column."""

    kind = ErrorKind.MISSING_COLUMN


class RowArityMismatchError(DatabaseError):
    kind = ErrorKind.ROW_ARITY_MISMATCH


class CorruptCatalogError(DatabaseError):
    """The catalog file cannot be parsed into valid schemas."""

    kind = ErrorKind.CORRUPT_CATALOG


class StorageIOError(DatabaseError):
    """Reading, encoding, writing or closing a data file failed."""

    kind = ErrorKind.STORAGE_IO
