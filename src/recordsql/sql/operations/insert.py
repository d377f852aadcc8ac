"""
SQL INSERT statement builder.

Example:
    >>> from recordsql.sql.dialects import PostgreSQLDialect
    >>> builder = InsertBuilder(PostgreSQLDialect())
    >>> builder.insert("users", {"name": "foo", "enable": 1}, returning=["id"])
    ('INSERT INTO "users" ("name", "enable") VALUES ($1, $2) RETURNING "id"', ['foo', 1])
"""

from typing import Any, Dict, List, Optional, Tuple

from ..core.parameters import ParameterBinder
from ..dialects.base import Dialect


class InsertBuilder:
    """High-level builder for single-row INSERT statements."""

    def __init__(self, dialect: Dialect):
        """
        Initialize the InsertBuilder.

        Args:
            dialect: SQL dialect to use for statement generation
        """
        self.dialect = dialect

    def insert(
        self,
        table: str,
        values: Dict[str, Any],
        returning: Optional[List[str]] = None,
        schema: Optional[str] = None,
    ) -> Tuple[str, List[Any]]:
        """
        Build a parameterized INSERT statement.

        Args:
            table: Table name
            values: Column name to value, in insert order
            returning: Columns to return; ignored by dialects without RETURNING
            schema: Schema name (optional)

        Returns:
            Tuple of (sql_string, ordered_parameters)
        """
        binder = ParameterBinder(self.dialect)
        columns = list(values.keys())
        placeholders = binder.bind_many(values[c] for c in columns)
        if returning and not self.dialect.supports_returning:
            returning = None
        sql = self.dialect.build_insert(table, columns, placeholders, returning, schema)
        return sql, binder.params
