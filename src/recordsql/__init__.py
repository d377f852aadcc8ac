"""
recordsql - Lightweight record-to-table mapping.

Typed records declared as pydantic models, CRUD by primary key, a single-shot
query builder and a small where-clause template language that keeps values
out of the SQL text. Statements are generated for SQLite, MySQL and
PostgreSQL and run through an executor collaborator.
"""

from recordsql.clause import CompiledClause, clause
from recordsql.exceptions import (
    ConfigurationError,
    ConstraintError,
    ExecutionError,
    RecordSQLError,
)
from recordsql.executor import ExecuteResult, Executor, SQLAlchemyExecutor
from recordsql.model import Record
from recordsql.query import Query
from recordsql.schema import CreateTime, Default, PrimaryKey, UpdateTime
from recordsql.sql import Assignments, get_dialect

__version__ = "0.1.0"

__all__ = [
    "Record",
    "Query",
    "clause",
    "CompiledClause",
    "Assignments",
    "PrimaryKey",
    "Default",
    "CreateTime",
    "UpdateTime",
    "Executor",
    "ExecuteResult",
    "SQLAlchemyExecutor",
    "get_dialect",
    "RecordSQLError",
    "ConfigurationError",
    "ConstraintError",
    "ExecutionError",
]
