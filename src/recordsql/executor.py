"""
Executor collaborator.

recordsql produces SQL text and ordered bound values; running them is the
executor's job. Anything with a ``dialect`` attribute and the two methods of
``Executor`` can be used. ``SQLAlchemyExecutor`` runs statements on a
SQLAlchemy ``Connection``; the caller owns the connection and its
transaction.

Usage:
    >>> from sqlalchemy import create_engine
    >>> engine = create_engine("sqlite://")
    >>> with engine.begin() as conn:
    ...     executor = SQLAlchemyExecutor(conn)
    ...     user = User.find(executor, 1)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union, runtime_checkable

from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from recordsql.config import get_settings
from recordsql.exceptions import ConfigurationError, ExecutionError
from recordsql.sql.core.parameters import build_bound_params
from recordsql.sql.dialects import Dialect, get_dialect
from recordsql.utils.logging import get_logger

logger = get_logger(__name__)

# DB-API paramstyle reported by the driver -> placeholder style we emit.
_DRIVER_PARAMSTYLES = {
    "qmark": "qmark",
    "format": "format",
    "pyformat": "format",
    "numeric_dollar": "numeric",
    "named": "named",
}


@dataclass(frozen=True)
class ExecuteResult:
    """Outcome of a write statement."""

    rowcount: int
    last_insert_id: Optional[Any] = None


@runtime_checkable
class Executor(Protocol):
    """The single request/response step recordsql delegates to."""

    dialect: Dialect

    def execute(
        self, sql: str, params: Sequence[Any], want_key: bool = False
    ) -> ExecuteResult:
        """
        Run a write statement and report the affected rows.

        With ``want_key`` the generated key of an INSERT is reported too, or
        None when the engine does not expose one.
        """
        ...

    def fetch_all(self, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        """Run a read statement; return every row as a column-name mapping."""
        ...


def resolve_paramstyle(driver_paramstyle: Optional[str]) -> Optional[str]:
    """
    Map a DB-API paramstyle onto one recordsql can emit.

    Raises:
        ConfigurationError: If the driver uses a style recordsql cannot emit
    """
    if driver_paramstyle is None:
        return None
    try:
        return _DRIVER_PARAMSTYLES[driver_paramstyle]
    except KeyError:
        raise ConfigurationError(
            f"Driver paramstyle '{driver_paramstyle}' is not supported. "
            f"Available: {sorted(_DRIVER_PARAMSTYLES)}"
        ) from None


class SQLAlchemyExecutor:
    """
    Executor backed by a SQLAlchemy Connection.

    Statements are sent with ``Connection.exec_driver_sql`` so the driver sees
    exactly the text and placeholders the dialect produced.

    Args:
        connection: An open SQLAlchemy Connection
        dialect: A Dialect, a dialect name, or None to use the
            RECORDSQL_DIALECT setting and then the connection's own dialect
    """

    def __init__(self, connection: Connection, dialect: Union[Dialect, str, None] = None):
        self.connection = connection
        self.dialect = self._resolve_dialect(connection, dialect)

    @staticmethod
    def _resolve_dialect(connection: Connection, dialect: Union[Dialect, str, None]) -> Dialect:
        if isinstance(dialect, Dialect):
            return dialect
        settings = get_settings()
        name = dialect or settings.dialect or connection.dialect.name
        paramstyle = settings.paramstyle or resolve_paramstyle(
            getattr(connection.dialect, "paramstyle", None)
        )
        return get_dialect(name, paramstyle)

    def _log_statement(self, event: str, sql: str, params: Sequence[Any]) -> None:
        fields: Dict[str, Any] = {
            "sql": sql,
            "param_count": len(params),
            "dialect": self.dialect.name,
        }
        if get_settings().log_params:
            fields["params"] = list(params)
        logger.debug(event, **fields)

    def _run(self, sql: str, params: Sequence[Any]) -> Any:
        bound = build_bound_params(params, self.dialect.paramstyle)
        try:
            return self.connection.exec_driver_sql(sql, bound)
        except SQLAlchemyError as e:
            error = ExecutionError(f"Statement failed: {e}", original_error=e, sql=sql)
            logger.error("sql.failed", **error.to_dict())
            raise error from e

    @staticmethod
    def _lastrowid(result: Any) -> Optional[Any]:
        # psycopg 3 cursors have no lastrowid; keys come from RETURNING there.
        try:
            return result.lastrowid
        except AttributeError:
            return None

    def execute(
        self, sql: str, params: Sequence[Any], want_key: bool = False
    ) -> ExecuteResult:
        self._log_statement("sql.execute", sql, params)
        result = self._run(sql, params)
        try:
            last_insert_id = None
            if result.returns_rows:
                row = result.fetchone()
                last_insert_id = row[0] if row is not None else None
            elif want_key:
                last_insert_id = self._lastrowid(result)
            return ExecuteResult(rowcount=result.rowcount, last_insert_id=last_insert_id)
        finally:
            result.close()

    def fetch_all(self, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        self._log_statement("sql.fetch", sql, params)
        result = self._run(sql, params)
        try:
            return [dict(row) for row in result.mappings()]
        finally:
            result.close()


__all__ = [
    "ExecuteResult",
    "Executor",
    "SQLAlchemyExecutor",
    "resolve_paramstyle",
]
