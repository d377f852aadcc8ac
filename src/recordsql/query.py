"""
Ad-hoc query builder.

A ``Query`` accumulates a projection, one where clause, grouping, ordering
and paging, then is consumed by exactly one terminal operation (``find``, ``get``,
``pluck``, ``value``, ``update`` or ``delete``). Reusing a consumed query
raises ConfigurationError; build a new one instead.

Usage:
    >>> name = "foo"
    >>> user = (
    ...     User.query()
    ...     .select(["id", "name"])
    ...     .where(clause("name={&name}"))
    ...     .find(executor)
    ... )

Calling ``where`` twice replaces the first clause. Combine conditions inside
one template instead: ``clause("name={&name} AND enable={enable}")``.
"""

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, Union

from recordsql.clause import ClauseLike, CompiledClause, ensure_clause, equals
from recordsql.exceptions import ConfigurationError
from recordsql.schema import TableSchema, get_schema
from recordsql.sql.dialects import Dialect
from recordsql.sql.operations import (
    Assignments,
    DeleteBuilder,
    GroupBy,
    OrderBy,
    SelectBuilder,
    UpdateBuilder,
)
from recordsql.utils.logging import get_logger

logger = get_logger(__name__)

WhereFactory = Callable[[Dialect], CompiledClause]


def _check_count(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")
    return value


class Query:
    """
    Single-shot SELECT/UPDATE/DELETE builder for one table.

    Args:
        table: Table name
        record_type: Optional record class; rows are decoded into it and
            column names are checked against its schema. Without it rows come
            back as dicts.
    """

    def __init__(self, table: str, record_type: Optional[type] = None):
        if not table:
            raise ConfigurationError("Query table name must be non-empty")
        self.table_name = table
        self.record_type = record_type
        self.schema: Optional[TableSchema] = (
            get_schema(record_type) if record_type is not None else None
        )
        self._columns: Optional[List[str]] = None
        self._raw_projection: Optional[str] = None
        self._where: Optional[WhereFactory] = None
        self._order_by: List[OrderBy] = []
        self._group_by: List[GroupBy] = []
        self._having: Optional[CompiledClause] = None
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None
        self._consumed = False

    @classmethod
    def table(cls, name: str) -> "Query":
        """Untyped query; rows are returned as dicts."""
        return cls(name)

    def __repr__(self) -> str:
        return f"Query(table={self.table_name!r}, consumed={self._consumed})"

    # -- state ------------------------------------------------------------

    def _check_open(self) -> None:
        if self._consumed:
            raise ConfigurationError(
                f"Query on '{self.table_name}' was already executed; build a new query"
            )

    def _consume(self) -> None:
        self._check_open()
        self._consumed = True

    def _check_columns(self, columns: Sequence[str]) -> None:
        if self.schema is None:
            return
        unknown = [c for c in columns if not self.schema.has_column(c)]
        if unknown:
            raise ConfigurationError(
                f"Unknown column(s) {unknown} for table '{self.table_name}'. "
                f"Available: {self.schema.column_names}"
            )

    # -- builders ---------------------------------------------------------

    def select(self, columns: Union[str, Sequence[str]]) -> "Query":
        """Restrict the projection to ``columns``."""
        self._check_open()
        names = [columns] if isinstance(columns, str) else list(columns)
        if not names:
            raise ConfigurationError("select() needs at least one column")
        self._check_columns(names)
        self._columns = names
        self._raw_projection = None
        return self

    def select_raw(self, expr: str) -> "Query":
        """Use trusted raw SQL as the projection, e.g. ``COUNT(*)``."""
        self._check_open()
        if not expr or not expr.strip():
            raise ConfigurationError("select_raw() needs a non-empty expression")
        self._raw_projection = expr
        self._columns = None
        return self

    def omit(self, columns: Union[str, Sequence[str]]) -> "Query":
        """Project every schema column except ``columns``."""
        self._check_open()
        if self.schema is None:
            raise ConfigurationError("omit() needs a record type to know the columns")
        names = [columns] if isinstance(columns, str) else list(columns)
        self._check_columns(names)
        remaining = [c for c in self.schema.column_names if c not in names]
        if not remaining:
            raise ConfigurationError(f"omit() would leave '{self.table_name}' with no columns")
        self._columns = remaining
        self._raw_projection = None
        return self

    def where(self, condition: ClauseLike, **values: Any) -> "Query":
        """
        Attach the filter, replacing any previous one.

        ``condition`` is a CompiledClause or a template string compiled with
        exactly ``values``. An empty template removes the filter.
        """
        self._check_open()
        compiled = ensure_clause(condition, **values)
        self._where = None if compiled.is_empty else (lambda dialect: compiled)
        return self

    def where_key(self, key: Any) -> "Query":
        """Filter on ``<primary key> = key``, replacing any previous filter."""
        self._check_open()
        if self.schema is None:
            raise ConfigurationError("where_key() needs a record type")
        pk = self.schema.require_primary_key()
        self._where = lambda dialect: equals(dialect, pk, key)
        return self

    def order_by(self, column: str) -> "Query":
        self._check_open()
        self._check_columns([column])
        self._order_by.append(OrderBy(column))
        return self

    def order_by_desc(self, column: str) -> "Query":
        self._check_open()
        self._check_columns([column])
        self._order_by.append(OrderBy(column, descending=True))
        return self

    def order_by_raw(self, expr: str) -> "Query":
        """Append trusted raw SQL to ORDER BY."""
        self._check_open()
        self._order_by.append(OrderBy(expr, raw=True))
        return self

    def group_by(self, columns: Union[str, Sequence[str]]) -> "Query":
        """Append ``columns`` to GROUP BY."""
        self._check_open()
        names = [columns] if isinstance(columns, str) else list(columns)
        if not names:
            raise ConfigurationError("group_by() needs at least one column")
        self._check_columns(names)
        self._group_by.extend(GroupBy(name) for name in names)
        return self

    def group_by_raw(self, expr: str) -> "Query":
        """Append trusted raw SQL to GROUP BY."""
        self._check_open()
        self._group_by.append(GroupBy(expr, raw=True))
        return self

    def having(self, condition: ClauseLike, **values: Any) -> "Query":
        """
        Attach the HAVING filter, replacing any previous one.

        Takes the same arguments as ``where``. Its values are bound after the
        where clause's values.
        """
        self._check_open()
        compiled = ensure_clause(condition, **values)
        self._having = None if compiled.is_empty else compiled
        return self

    def limit(self, count: int) -> "Query":
        self._check_open()
        self._limit = _check_count("limit", count)
        return self

    def offset(self, count: int) -> "Query":
        self._check_open()
        self._offset = _check_count("offset", count)
        return self

    # -- rendering --------------------------------------------------------

    def _projection(self, builder: SelectBuilder) -> str:
        if self._raw_projection is not None:
            return builder.dialect.escape_literal(self._raw_projection)
        if self._columns is not None:
            return builder.projection(self._columns)
        if self.schema is not None:
            return builder.projection(self.schema.column_names)
        return builder.projection(None)

    def _where_clause(self, dialect: Dialect) -> CompiledClause:
        return self._where(dialect) if self._where is not None else CompiledClause()

    def _select_sql(self, dialect: Dialect, limit: Optional[int]) -> Tuple[str, List[Any]]:
        builder = SelectBuilder(dialect)
        return builder.select(
            self.table_name,
            self._projection(builder),
            where=self._where_clause(dialect),
            order_by=self._order_by,
            limit=limit,
            offset=self._offset,
            group_by=self._group_by,
            having=self._having,
        )

    def to_sql(self, dialect: Dialect) -> Tuple[str, List[Any]]:
        """Render the SELECT this query would run, without consuming it."""
        self._check_open()
        return self._select_sql(dialect, self._limit)

    def _decode(self, row: Mapping[str, Any]) -> Any:
        if self.record_type is None:
            return dict(row)
        return self.record_type.model_validate(dict(row))

    # -- terminals --------------------------------------------------------

    def find(self, executor: Any) -> Optional[Any]:
        """
        Point lookup: at most one record, or None when nothing matches.

        The statement always carries ``LIMIT 1``; if the executor still
        returns several rows only the first is decoded.
        """
        self._consume()
        sql, params = self._select_sql(executor.dialect, 1)
        rows = executor.fetch_all(sql, params)
        if not rows:
            return None
        return self._decode(rows[0])

    def get(self, executor: Any) -> List[Any]:
        """All matching records."""
        self._consume()
        sql, params = self._select_sql(executor.dialect, self._limit)
        return [self._decode(row) for row in executor.fetch_all(sql, params)]

    def pluck(self, executor: Any) -> List[Any]:
        """The first projected column of every matching row."""
        self._consume()
        sql, params = self._select_sql(executor.dialect, self._limit)
        return [next(iter(row.values())) for row in executor.fetch_all(sql, params)]

    def value(self, executor: Any) -> Optional[Any]:
        """The first projected column of the first matching row, or None."""
        self._consume()
        sql, params = self._select_sql(executor.dialect, 1)
        rows = executor.fetch_all(sql, params)
        if not rows:
            return None
        return next(iter(rows[0].values()))

    def update(
        self, executor: Any, assignments: Union[Assignments, Mapping[str, Any]]
    ) -> int:
        """
        UPDATE the rows matched by the where clause.

        Grouping, ordering and paging do not apply. Returns the affected row
        count.

        Raises:
            ConstraintError: If there is no where clause or nothing to set
        """
        self._consume()
        if not isinstance(assignments, Assignments):
            assignments = Assignments.from_mapping(dict(assignments))
        self._check_columns(assignments.columns)
        dialect = executor.dialect
        sql, params = UpdateBuilder(dialect).update(
            self.table_name, assignments, self._where_clause(dialect)
        )
        result = executor.execute(sql, params)
        logger.debug("query.updated", table=self.table_name, rowcount=result.rowcount)
        return result.rowcount

    def delete(self, executor: Any) -> int:
        """
        DELETE the rows matched by the where clause.

        Returns the affected row count.

        Raises:
            ConstraintError: If there is no where clause
        """
        self._consume()
        dialect = executor.dialect
        sql, params = DeleteBuilder(dialect).delete(self.table_name, self._where_clause(dialect))
        result = executor.execute(sql, params)
        logger.debug("query.deleted", table=self.table_name, rowcount=result.rowcount)
        return result.rowcount


__all__ = ["Query"]
