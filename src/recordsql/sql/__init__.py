"""
SQL module for dialect-correct statement generation.

Provides identifier quoting, ordered parameter binding, the per-engine
dialects and the statement builders used by records and queries.
"""

from .core.identifier import qualify_table, quote_identifier
from .core.parameters import ParameterBinder, build_bound_params
from .dialects import (
    Dialect,
    MySQLDialect,
    PostgreSQLDialect,
    SQLiteDialect,
    available_dialects,
    get_dialect,
)
from .operations import (
    Assignments,
    DeleteBuilder,
    GroupBy,
    InsertBuilder,
    OrderBy,
    SelectBuilder,
    UpdateBuilder,
)

__all__ = [
    "quote_identifier",
    "qualify_table",
    "ParameterBinder",
    "build_bound_params",
    "Dialect",
    "SQLiteDialect",
    "MySQLDialect",
    "PostgreSQLDialect",
    "get_dialect",
    "available_dialects",
    "InsertBuilder",
    "UpdateBuilder",
    "Assignments",
    "DeleteBuilder",
    "SelectBuilder",
    "OrderBy",
    "GroupBy",
]
