"""Table and column name rules.

Names are case-insensitive: they are folded to lower case before being
validated, stored or looked up.
"""

from __future__ import annotations

import re

from rowdb.domain.errors import InvalidNameError

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")


def fold_name(raw: str) -> str:
    """Case-fold a name for lookup without validating it."""
    return raw.lower()


def normalize_name(raw: object, what: str = "name") -> str:
    """Fold and validate a table or column name.

    Args:
        raw: The name as supplied by the caller.
        what: Description used in the error message ("table name", ...).

    Returns:
        The lower-case name.

    Raises:
        InvalidNameError: If the name is not a string, is empty or
            contains characters outside [A-Za-z0-9_].
    """
    if not isinstance(raw, str):
        raise InvalidNameError(f"{what} must be a string, got {type(raw).__name__}")

    name = fold_name(raw)
    if not name:
        raise InvalidNameError(f"{what} is empty")
    if not NAME_PATTERN.fullmatch(name):
        raise InvalidNameError(
            f"{what} {raw!r} is not valid, expected format: {NAME_PATTERN.pattern}"
        )
    return name
