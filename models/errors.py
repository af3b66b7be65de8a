"""
models/errors.py
----------------
Exceptions raised by the activist data-access layer.
Each one records the operation that failed and the key it was called with.
"""

from typing import Any, Optional


class ActivistError(Exception):
    """Base class for every error raised by the activist layer."""

    def __init__(self, operation: str, key: Any = None, detail: Optional[str] = None):
        self.operation = operation
        self.key = key
        self.detail = detail
        message = f"{operation} failed for {key!r}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class NotFoundError(ActivistError):
    """Lookup by id or name matched no activist."""


class AmbiguousResultError(ActivistError):
    """Lookup by name matched more than one activist."""


class ValidationError(ActivistError):
    """Caller input was rejected before reaching the store."""


class StoreError(ActivistError):
    """The database failed; the psycopg2 error is chained as ``__cause__``."""
