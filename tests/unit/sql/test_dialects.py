"""
Unit tests for the SQLite, MySQL and PostgreSQL dialects.
"""

import pytest

from recordsql.exceptions import ConfigurationError
from recordsql.sql.dialects import (
    Dialect,
    MySQLDialect,
    PostgreSQLDialect,
    SQLiteDialect,
    available_dialects,
    get_dialect,
    normalize_dialect_name,
)


class TestGetDialect:
    """Tests for dialect resolution."""

    def test_available(self):
        assert available_dialects() == ["mysql", "postgresql", "sqlite"]

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("sqlite", SQLiteDialect),
            ("SQLite3", SQLiteDialect),
            ("mysql", MySQLDialect),
            ("mariadb", MySQLDialect),
            ("postgresql", PostgreSQLDialect),
            ("postgres", PostgreSQLDialect),
        ],
    )
    def test_names_and_aliases(self, name, expected):
        assert isinstance(get_dialect(name), expected)

    def test_normalize_dialect_name(self):
        assert normalize_dialect_name(" PG ") == "postgresql"
        assert normalize_dialect_name("oracle") == "oracle"

    def test_base_dialect_is_abstract(self):
        with pytest.raises(TypeError):
            Dialect()

    def test_unknown_dialect_fails_fast(self):
        with pytest.raises(ConfigurationError, match="Available"):
            get_dialect("oracle")

    def test_unsupported_paramstyle_fails_fast(self):
        with pytest.raises(ConfigurationError, match="qmark"):
            get_dialect("mysql", "qmark")

    def test_equality_includes_paramstyle(self):
        assert get_dialect("postgresql") == PostgreSQLDialect("numeric")
        assert get_dialect("postgresql", "format") != PostgreSQLDialect()


class TestSQLiteDialect:
    @pytest.fixture
    def dialect(self):
        return SQLiteDialect()

    def test_placeholder(self, dialect):
        assert dialect.placeholder(1) == "?"
        assert dialect.placeholder(5) == "?"

    def test_placeholder_position_is_one_based(self, dialect):
        with pytest.raises(ValueError):
            dialect.placeholder(0)

    def test_quote(self, dialect):
        assert dialect.quote("name") == '"name"'

    def test_auto_increment_column(self, dialect):
        assert dialect.auto_increment_column("id") == '"id" INTEGER PRIMARY KEY AUTOINCREMENT'

    def test_offset_without_limit(self, dialect):
        assert dialect.limit_clause(None, 10) == "LIMIT -1 OFFSET 10"

    def test_insert_default_values(self, dialect):
        assert dialect.build_insert("t", [], []) == 'INSERT INTO "t" DEFAULT VALUES'

    def test_no_returning(self, dialect):
        with pytest.raises(ConfigurationError):
            dialect.returning_clause(["id"])


class TestMySQLDialect:
    @pytest.fixture
    def dialect(self):
        return MySQLDialect()

    def test_placeholder(self, dialect):
        assert dialect.placeholder(3) == "%s"

    def test_quote(self, dialect):
        assert dialect.quote("name") == "`name`"

    def test_auto_increment_column(self, dialect):
        assert (
            dialect.auto_increment_column("id")
            == "`id` BIGINT NOT NULL AUTO_INCREMENT PRIMARY KEY"
        )

    def test_percent_escaped_in_literal_sql(self, dialect):
        assert dialect.escape_literal("name LIKE 'a%'") == "name LIKE 'a%%'"

    def test_offset_without_limit(self, dialect):
        assert dialect.limit_clause(None, 5) == "LIMIT 18446744073709551615 OFFSET 5"

    def test_insert_default_values(self, dialect):
        assert dialect.build_insert("t", [], []) == "INSERT INTO `t` () VALUES ()"


class TestPostgreSQLDialect:
    @pytest.fixture
    def dialect(self):
        return PostgreSQLDialect()

    def test_dialect_name(self, dialect):
        assert dialect.name == "postgresql"

    def test_numbered_placeholder(self, dialect):
        assert dialect.placeholder(1) == "$1"
        assert dialect.placeholder(12) == "$12"

    def test_format_paramstyle(self):
        dialect = PostgreSQLDialect("format")
        assert dialect.placeholder(2) == "%s"
        assert dialect.escape_literal("100%") == "100%%"

    def test_auto_increment_column(self, dialect):
        assert (
            dialect.auto_increment_column("id")
            == '"id" BIGINT GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY'
        )

    def test_build_insert_with_returning(self, dialect):
        sql = dialect.build_insert(
            table="users",
            columns=["name", "enable"],
            placeholders=["$1", "$2"],
            returning=["id"],
            schema="app",
        )
        assert sql == (
            'INSERT INTO "app"."users" ("name", "enable") VALUES ($1, $2) RETURNING "id"'
        )

    def test_build_select(self, dialect):
        sql = dialect.build_select(
            "users", '"id"', where='"id" = $1', order_by='"id" DESC', limit=10, offset=20
        )
        assert sql == (
            'SELECT "id" FROM "users" WHERE "id" = $1 ORDER BY "id" DESC LIMIT 10 OFFSET 20'
        )

    def test_build_select_grouped(self, dialect):
        sql = dialect.build_select(
            "users", '"enable", COUNT(*)', group_by='"enable"', having="COUNT(*) > $1"
        )
        assert sql == 'SELECT "enable", COUNT(*) FROM "users" GROUP BY "enable" HAVING COUNT(*) > $1'

    def test_build_update_and_delete(self, dialect):
        assert (
            dialect.build_update("users", ['"name" = $1'], '"id" = $2')
            == 'UPDATE "users" SET "name" = $1 WHERE "id" = $2'
        )
        assert dialect.build_delete("users", '"id" = $1') == 'DELETE FROM "users" WHERE "id" = $1'
