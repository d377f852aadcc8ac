"""
SQLite-specific SQL dialect implementation.

The sqlite3 driver uses ``?`` placeholders (qmark). The named style
(``:p1``) is also accepted by the driver and available on request.
"""

from typing import Optional

from .base import Dialect


class SQLiteDialect(Dialect):
    """SQLite SQL dialect implementation."""

    name = "sqlite"
    default_paramstyle = "qmark"
    paramstyles = ("qmark", "named")
    supports_returning = False

    def auto_increment_column(self, column: str) -> str:
        return f"{self.quote(column)} INTEGER PRIMARY KEY AUTOINCREMENT"

    def limit_clause(self, limit: Optional[int], offset: Optional[int]) -> str:
        # SQLite only accepts OFFSET after a LIMIT; -1 means no limit.
        if limit is None and offset is not None:
            return f"LIMIT -1 OFFSET {int(offset)}"
        return super().limit_clause(limit, offset)
