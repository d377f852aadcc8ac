"""
MySQL-specific SQL dialect implementation.

MySQL drivers (PyMySQL, mysqlclient) use ``%s`` placeholders and identifiers
are quoted with backticks.
"""

from typing import Optional

from .base import Dialect

# Largest LIMIT MySQL accepts; used when only an OFFSET is requested.
_MAX_LIMIT = 18446744073709551615


class MySQLDialect(Dialect):
    """MySQL SQL dialect implementation."""

    name = "mysql"
    default_paramstyle = "format"
    paramstyles = ("format",)
    supports_returning = False

    def auto_increment_column(self, column: str) -> str:
        return f"{self.quote(column)} BIGINT NOT NULL AUTO_INCREMENT PRIMARY KEY"

    def limit_clause(self, limit: Optional[int], offset: Optional[int]) -> str:
        if limit is None and offset is not None:
            return f"LIMIT {_MAX_LIMIT} OFFSET {int(offset)}"
        return super().limit_clause(limit, offset)

    def insert_default_values(self, qualified_table: str) -> str:
        return f"INSERT INTO {qualified_table} () VALUES ()"
