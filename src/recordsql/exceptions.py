"""Error taxonomy for recordsql.

Three kinds of failure are distinguished:

- ConfigurationError: invalid record declarations, unknown clause references,
  unsupported dialects. Raised at setup or construction time.
- ConstraintError: the caller asked for something that would target an
  unintended row (unset primary key, UPDATE/DELETE without WHERE).
- ExecutionError: the executor collaborator reported a failure. The engine
  error is kept on ``original_error`` and chained as ``__cause__``.

A lookup that matches no row is not an error; it returns ``None``.
"""

from typing import Any, Dict, Optional


class RecordSQLError(Exception):
    """Base class for all recordsql errors."""


class ConfigurationError(RecordSQLError):
    """Raised when a schema, clause, dialect or query is misconfigured."""


class ConstraintError(RecordSQLError):
    """Raised when an operation would target no row or an unintended row."""

    def __init__(self, message: str, table_name: Optional[str] = None):
        self.table_name = table_name
        super().__init__(message)


class ExecutionError(RecordSQLError):
    """Opaque failure surfaced from the executor collaborator."""

    def __init__(
        self,
        message: str,
        original_error: Optional[BaseException] = None,
        sql: Optional[str] = None,
    ):
        self.original_error = original_error
        self.sql = sql
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to structured dict for logging."""
        return {
            "error_type": "ExecutionError",
            "message": str(self),
            "sql": self.sql,
            "original_error_type": (
                type(self.original_error).__name__ if self.original_error else None
            ),
            "original_error_message": (
                str(self.original_error) if self.original_error else None
            ),
        }


__all__ = [
    "RecordSQLError",
    "ConfigurationError",
    "ConstraintError",
    "ExecutionError",
]
