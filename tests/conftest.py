"""Shared pytest fixtures for recordsql.

Unit tests never touch a database: the executor collaborator is a MagicMock
carrying a real dialect, so tests assert on the exact SQL text and bound
values handed to it. Integration tests use in-memory SQLite through
SQLAlchemy.
"""

from __future__ import annotations

from typing import Iterator
from unittest.mock import MagicMock

import pytest

from recordsql.config import get_settings
from recordsql.executor import ExecuteResult
from recordsql.sql.dialects import MySQLDialect, PostgreSQLDialect, SQLiteDialect


def make_executor(dialect, rowcount: int = 1, last_insert_id=None, rows=None) -> MagicMock:
    """Executor double: records calls, returns canned results."""
    executor = MagicMock()
    executor.dialect = dialect
    executor.execute.return_value = ExecuteResult(rowcount=rowcount, last_insert_id=last_insert_id)
    executor.fetch_all.return_value = list(rows or [])
    return executor


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Iterator[None]:
    """Settings are lru_cached; keep env changes local to one test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sqlite_executor() -> MagicMock:
    return make_executor(SQLiteDialect(), last_insert_id=7)


@pytest.fixture
def mysql_executor() -> MagicMock:
    return make_executor(MySQLDialect(), last_insert_id=7)


@pytest.fixture
def pg_executor() -> MagicMock:
    return make_executor(PostgreSQLDialect(), last_insert_id=7)


@pytest.fixture(params=["sqlite", "mysql", "postgresql"])
def any_executor(request) -> MagicMock:
    dialects = {
        "sqlite": SQLiteDialect,
        "mysql": MySQLDialect,
        "postgresql": PostgreSQLDialect,
    }
    return make_executor(dialects[request.param](), last_insert_id=7)


@pytest.fixture
def executor_factory():
    """Build an executor double with custom canned results."""
    return make_executor
