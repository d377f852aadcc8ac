"""
PostgreSQL-specific SQL dialect implementation.

Provides numbered ``$1, $2, ...`` placeholders (asyncpg and other
numeric-style drivers) or ``%s`` for psycopg, double-quoted identifiers, and
``RETURNING`` for reading back generated keys.
"""

from .base import Dialect


class PostgreSQLDialect(Dialect):
    """PostgreSQL SQL dialect implementation."""

    name = "postgresql"
    default_paramstyle = "numeric"
    paramstyles = ("numeric", "format")
    supports_returning = True

    def auto_increment_column(self, column: str) -> str:
        return f"{self.quote(column)} BIGINT GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY"
