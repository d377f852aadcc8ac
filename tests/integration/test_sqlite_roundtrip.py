"""
Integration tests: records against an in-memory SQLite database through
SQLAlchemy.
"""

from typing import Annotated, Iterator, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from recordsql import (
    ConstraintError,
    CreateTime,
    Default,
    ExecutionError,
    PrimaryKey,
    Query,
    Record,
    SQLAlchemyExecutor,
    UpdateTime,
    clause,
)
from recordsql.sql.dialects import SQLiteDialect

pytestmark = pytest.mark.integration


class Account(Record):
    __table__ = "accounts"

    id: Annotated[Optional[int], PrimaryKey(increment=True)] = None
    name: Optional[str] = None
    enable: Annotated[Optional[int], Default("1")] = None
    updated_at: Annotated[Optional[int], UpdateTime()] = None
    created_at: Annotated[Optional[int], CreateTime()] = None


class Option(Record):
    __table__ = "options"

    key: Annotated[str, PrimaryKey()] = ""
    value: Optional[str] = None
    updated_at: Annotated[Optional[int], UpdateTime()] = None


def _create_tables(conn: Connection) -> None:
    dialect = SQLiteDialect()
    conn.exec_driver_sql(
        f'CREATE TABLE "accounts" ({dialect.auto_increment_column("id")}, '
        '"name" TEXT, "enable" INTEGER, "updated_at" INTEGER, "created_at" INTEGER)'
    )
    conn.exec_driver_sql(
        'CREATE TABLE "options" ("key" TEXT PRIMARY KEY, "value" TEXT, "updated_at" INTEGER)'
    )


@pytest.fixture
def connection() -> Iterator[Connection]:
    engine = create_engine("sqlite://")
    with engine.connect() as conn:
        _create_tables(conn)
        yield conn
    engine.dispose()


@pytest.fixture
def executor(connection) -> SQLAlchemyExecutor:
    return SQLAlchemyExecutor(connection)


class TestRecordRoundTrip:
    def test_executor_infers_sqlite(self, executor):
        assert executor.dialect == SQLiteDialect("qmark")

    def test_create_assigns_key_and_defaults(self, executor):
        account = Account(name="foo")
        account.create(executor)

        assert account.id == 1
        assert account.enable == 1
        assert account.created_at == account.updated_at
        assert Account.find(executor, 1) == account

    def test_natural_key_create_then_find(self, executor):
        option = Option(key="theme", value="dark", updated_at=0)
        before = option.updated_at

        option.create(executor)
        found = Option.find(executor, "theme")

        assert found.key == "theme"
        assert found.value == "dark"
        assert found.updated_at >= before
        assert found == option

    def test_update_persists(self, executor):
        account = Account(name="foo")
        account.create(executor)
        created_at = account.created_at

        account.enable = 0
        assert account.update(executor) == 1

        stored = Account.find(executor, account.id)
        assert stored.enable == 0
        assert stored.created_at == created_at
        assert stored.updated_at >= created_at

    def test_update_missing_row_reports_zero(self, executor):
        assert Account(id=99, name="ghost").update(executor) == 0

    def test_destroy_twice(self, executor):
        account = Account(name="foo")
        account.create(executor)

        assert Account.destroy(executor, account.id) == 1
        assert Account.destroy(executor, account.id) == 0
        assert Account.find(executor, account.id) is None

    def test_duplicate_key_is_execution_error(self, executor):
        Option(key="theme", value="dark").create(executor)

        with pytest.raises(ExecutionError) as exc_info:
            Option(key="theme", value="light").create(executor)

        assert isinstance(exc_info.value.original_error, IntegrityError)


class TestQueries:
    @pytest.fixture(autouse=True)
    def seed(self, executor):
        for name, enable in [("a", 1), ("b", 0), ("c", 1), ("d", 1)]:
            Account(name=name, enable=enable).create(executor)

    def test_find_with_template(self, executor):
        name = "c"
        account = (
            Account.query().select(["id", "name"]).where(clause("name = {&name}")).find(executor)
        )
        assert account.id == 3
        assert account.name == "c"
        assert account.enable is None

    def test_get_ordered_and_paged(self, executor):
        accounts = (
            Account.query()
            .where("enable = {e}", e=1)
            .order_by_desc("id")
            .limit(2)
            .get(executor)
        )
        assert [a.name for a in accounts] == ["d", "c"]

    def test_offset_without_limit(self, executor):
        names = Account.query().select("name").order_by("id").offset(2).pluck(executor)
        assert names == ["c", "d"]

    def test_in_list(self, executor):
        wanted = ["a", "d", "zzz"]
        names = (
            Account.query()
            .select("name")
            .where(clause("name IN ({#wanted})"))
            .order_by("name")
            .pluck(executor)
        )
        assert names == ["a", "d"]

    def test_group_by_having(self, executor):
        rows = (
            Query.table("accounts")
            .select_raw("enable, COUNT(*) AS n")
            .group_by("enable")
            .having("COUNT(*) > {n}", n=1)
            .get(executor)
        )
        assert rows == [{"enable": 1, "n": 3}]

    def test_value_count(self, executor):
        assert Account.query().select_raw("COUNT(*)").where("enable = 0").value(executor) == 1

    def test_bulk_update_and_delete(self, executor):
        updated = Account.query().where("enable = {e}", e=1).update(executor, {"enable": 0})
        assert updated == 3

        deleted = Query.table("accounts").where("enable = {e}", e=0).delete(executor)
        assert deleted == 4
        assert Query.table("accounts").select_raw("COUNT(*)").value(executor) == 0

    def test_delete_requires_where(self, executor):
        with pytest.raises(ConstraintError):
            Account.query().delete(executor)

    def test_untyped_rows(self, executor):
        rows = Query.table("accounts").select(["id", "name"]).order_by("id").limit(1).get(executor)
        assert rows == [{"id": 1, "name": "a"}]

    def test_named_paramstyle(self, connection):
        executor = SQLAlchemyExecutor(connection, dialect=SQLiteDialect("named"))
        account = Account.query().where("name = {n}", n="b").find(executor)
        assert account.enable == 0
