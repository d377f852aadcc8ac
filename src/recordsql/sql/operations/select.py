"""SQL SELECT statement builder."""

from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple

from ..core.parameters import ParameterBinder
from ..dialects.base import Dialect

if TYPE_CHECKING:
    from recordsql.clause import CompiledClause


class OrderBy:
    """One ORDER BY term: a column (quoted) or trusted raw SQL."""

    __slots__ = ("column", "descending", "raw")

    def __init__(self, column: str, descending: bool = False, raw: bool = False):
        self.column = column
        self.descending = descending
        self.raw = raw

    def render(self, dialect: Dialect) -> str:
        if self.raw:
            return dialect.escape_literal(self.column)
        sql = dialect.quote(self.column)
        return f"{sql} DESC" if self.descending else sql


class GroupBy:
    """One GROUP BY term: a column (quoted) or trusted raw SQL."""

    __slots__ = ("column", "raw")

    def __init__(self, column: str, raw: bool = False):
        self.column = column
        self.raw = raw

    def render(self, dialect: Dialect) -> str:
        if self.raw:
            return dialect.escape_literal(self.column)
        return dialect.quote(self.column)


class SelectBuilder:
    """Builder for SELECT statements."""

    def __init__(self, dialect: Dialect):
        self.dialect = dialect

    def projection(self, columns: Optional[Sequence[str]]) -> str:
        """Quoted column list, or ``*`` when no columns are given."""
        if not columns:
            return "*"
        return self.dialect.quote_columns(columns)

    def select(
        self,
        table: str,
        projection: str,
        where: Optional["CompiledClause"] = None,
        order_by: Sequence[OrderBy] = (),
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        schema: Optional[str] = None,
        group_by: Sequence[GroupBy] = (),
        having: Optional["CompiledClause"] = None,
    ) -> Tuple[str, List[Any]]:
        """
        Build a SELECT statement.

        WHERE values are bound before HAVING values, matching their position
        in the statement text.

        Args:
            table: Table name
            projection: Rendered projection (see ``projection``) or raw SQL
            where: Optional compiled clause; empty clauses emit no WHERE
            order_by: ORDER BY terms
            limit: Optional LIMIT
            offset: Optional OFFSET
            schema: Optional schema name
            group_by: GROUP BY terms
            having: Optional compiled clause; empty clauses emit no HAVING

        Returns:
            Tuple of (sql_string, ordered_parameters)
        """
        binder = ParameterBinder(self.dialect)
        where_sql = where.render_into(binder) if where else None
        group_sql = ", ".join(g.render(self.dialect) for g in group_by) or None
        having_sql = having.render_into(binder) if having else None
        order_sql = ", ".join(o.render(self.dialect) for o in order_by) or None
        sql = self.dialect.build_select(
            table,
            projection,
            where=where_sql,
            order_by=order_sql,
            limit=limit,
            offset=offset,
            schema=schema,
            group_by=group_sql,
            having=having_sql,
        )
        return sql, binder.params
