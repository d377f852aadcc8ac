"""
SQL UPDATE statement builder.

``Assignments`` describes the SET list. Bound values are numbered before the
WHERE clause's values, matching their position in the statement text.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from recordsql.exceptions import ConstraintError

from ..core.parameters import ParameterBinder
from ..dialects.base import Dialect

if TYPE_CHECKING:
    from recordsql.clause import CompiledClause


class Assignments:
    """
    The columns and values to update.

    Example:
        >>> Assignments().set("name", "foo").set_raw("updated_at", "CURRENT_TIMESTAMP")
        Assignments(['name', 'updated_at'])
    """

    def __init__(self) -> None:
        self._items: List[Tuple[str, bool, Any]] = []

    @classmethod
    def from_mapping(cls, values: Dict[str, Any]) -> "Assignments":
        assignments = cls()
        for column, value in values.items():
            assignments.set(column, value)
        return assignments

    def set(self, column: str, value: Any) -> "Assignments":
        """Set a column to a bound value."""
        self._items.append((column, False, value))
        return self

    def set_raw(self, column: str, expr: str) -> "Assignments":
        """Set a column to trusted raw SQL, e.g. ``CURRENT_TIMESTAMP``."""
        self._items.append((column, True, expr))
        return self

    @property
    def columns(self) -> List[str]:
        return [column for column, _, _ in self._items]

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Assignments({self.columns!r})"

    def render_into(self, binder: ParameterBinder) -> List[str]:
        dialect = binder.dialect
        parts = []
        for column, raw, value in self._items:
            rhs = dialect.escape_literal(value) if raw else binder.bind(value)
            parts.append(f"{dialect.quote(column)} = {rhs}")
        return parts


class UpdateBuilder:
    """Builder for UPDATE statements filtered by a compiled clause."""

    def __init__(self, dialect: Dialect):
        self.dialect = dialect

    def update(
        self,
        table: str,
        assignments: Assignments,
        where: "CompiledClause",
        schema: Optional[str] = None,
    ) -> Tuple[str, List[Any]]:
        """
        Build ``UPDATE <table> SET ... WHERE ...``.

        Raises:
            ConstraintError: If there is nothing to set or no WHERE clause
        """
        if assignments.is_empty():
            raise ConstraintError(f"UPDATE of '{table}' has no columns to set", table)
        if where.is_empty:
            raise ConstraintError(f"UPDATE of '{table}' requires a WHERE clause", table)

        binder = ParameterBinder(self.dialect)
        set_parts = assignments.render_into(binder)
        where_sql = where.render_into(binder)
        sql = self.dialect.build_update(table, set_parts, where_sql, schema)
        return sql, binder.params
