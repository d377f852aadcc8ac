"""
Dialect base class.

A dialect encapsulates every per-engine difference recordsql cares about:
placeholder tokens, identifier quoting, auto-increment DDL, LIMIT/OFFSET
syntax and whether INSERT can return the generated key. Statement assembly
(INSERT/UPDATE/DELETE/SELECT text) lives here too so call sites never branch
on the engine name.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from recordsql.exceptions import ConfigurationError

from ..core.identifier import qualify_table, quote_identifier
from ..core.parameters import param_name


class Dialect(ABC):
    """Base SQL dialect. Subclasses set ``name`` and the paramstyle policy."""

    name: str = ""
    default_paramstyle: str = "qmark"
    paramstyles: Tuple[str, ...] = ("qmark",)
    supports_returning: bool = False

    def __init__(self, paramstyle: Optional[str] = None):
        paramstyle = paramstyle or self.default_paramstyle
        if paramstyle not in self.paramstyles:
            raise ConfigurationError(
                f"Paramstyle '{paramstyle}' is not supported by the {self.name} "
                f"dialect. Available: {list(self.paramstyles)}"
            )
        self.paramstyle = paramstyle

    def __repr__(self) -> str:
        return f"{type(self).__name__}(paramstyle={self.paramstyle!r})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Dialect)
            and other.name == self.name
            and other.paramstyle == self.paramstyle
        )

    def __hash__(self) -> int:
        return hash((self.name, self.paramstyle))

    # -- tokens ---------------------------------------------------------

    def placeholder(self, position: int) -> str:
        """Return the placeholder for a 1-based parameter position."""
        if position < 1:
            raise ValueError(f"Parameter position must be >= 1, got {position}")
        if self.paramstyle == "qmark":
            return "?"
        if self.paramstyle == "format":
            return "%s"
        if self.paramstyle == "numeric":
            return f"${position}"
        return f":{param_name(position)}"

    def escape_literal(self, text: str) -> str:
        """Escape literal SQL text so the driver does not read it as a placeholder."""
        if self.paramstyle == "format":
            return text.replace("%", "%%")
        return text

    def quote(self, identifier: str) -> str:
        return quote_identifier(identifier, dialect=self.name)

    def qualify(self, table: str, schema: Optional[str] = None) -> str:
        return qualify_table(table, schema, dialect=self.name)

    def quote_columns(self, columns: Sequence[str]) -> str:
        return ", ".join(self.quote(c) for c in columns)

    @abstractmethod
    def auto_increment_column(self, column: str) -> str:
        """Column definition for an auto-increment primary key (DDL only)."""

    def limit_clause(self, limit: Optional[int], offset: Optional[int]) -> str:
        """Render LIMIT/OFFSET, or an empty string when neither is set."""
        parts = []
        if limit is not None:
            parts.append(f"LIMIT {int(limit)}")
        if offset is not None:
            parts.append(f"OFFSET {int(offset)}")
        return " ".join(parts)

    def returning_clause(self, columns: Sequence[str]) -> str:
        if not self.supports_returning:
            raise ConfigurationError(f"The {self.name} dialect does not support RETURNING")
        return f"RETURNING {self.quote_columns(columns)}"

    # -- statements -----------------------------------------------------

    def build_insert(
        self,
        table: str,
        columns: List[str],
        placeholders: List[str],
        returning: Optional[List[str]] = None,
        schema: Optional[str] = None,
    ) -> str:
        """
        Build a single-row INSERT statement.

        Args:
            table: Table name
            columns: Column names, in insert order
            placeholders: One placeholder per column
            returning: Columns to return (dialects with RETURNING only)
            schema: Optional schema name

        Returns:
            INSERT SQL statement
        """
        qualified_table = self.qualify(table, schema)
        if columns:
            values = ", ".join(placeholders)
            sql = (
                f"INSERT INTO {qualified_table} ({self.quote_columns(columns)}) "
                f"VALUES ({values})"
            )
        else:
            sql = self.insert_default_values(qualified_table)
        if returning:
            sql = f"{sql} {self.returning_clause(returning)}"
        return sql

    def insert_default_values(self, qualified_table: str) -> str:
        return f"INSERT INTO {qualified_table} DEFAULT VALUES"

    def build_update(
        self,
        table: str,
        assignments: List[str],
        where: str,
        schema: Optional[str] = None,
    ) -> str:
        """Build ``UPDATE <table> SET <assignments> WHERE <where>``."""
        qualified_table = self.qualify(table, schema)
        return f"UPDATE {qualified_table} SET {', '.join(assignments)} WHERE {where}"

    def build_delete(self, table: str, where: str, schema: Optional[str] = None) -> str:
        """Build ``DELETE FROM <table> WHERE <where>``."""
        return f"DELETE FROM {self.qualify(table, schema)} WHERE {where}"

    def build_select(
        self,
        table: str,
        projection: str,
        where: Optional[str] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        schema: Optional[str] = None,
        group_by: Optional[str] = None,
        having: Optional[str] = None,
    ) -> str:
        """Build a SELECT statement from already rendered fragments."""
        sql = f"SELECT {projection} FROM {self.qualify(table, schema)}"
        if where:
            sql += f" WHERE {where}"
        if group_by:
            sql += f" GROUP BY {group_by}"
        if having:
            sql += f" HAVING {having}"
        if order_by:
            sql += f" ORDER BY {order_by}"
        limit_sql = self.limit_clause(limit, offset)
        if limit_sql:
            sql += f" {limit_sql}"
        return sql
