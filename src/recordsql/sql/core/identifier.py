"""
SQL identifier handling utilities.

Provides functions for quoting and qualifying SQL identifiers (table names,
column names) per engine. Identifiers are always quoted so reserved words and
non-ASCII names are safe to use as column names.
"""

from typing import Optional

from recordsql.exceptions import ConfigurationError

# Quote character per engine; the escape is the doubled quote character.
_QUOTE_CHARS = {
    "postgresql": '"',
    "sqlite": '"',
    "mysql": "`",
}


def quote_identifier(name: str, dialect: str = "postgresql") -> str:
    """
    Quote a SQL identifier (table or column name).

    Args:
        name: The identifier to quote
        dialect: Database dialect ("postgresql", "sqlite", "mysql")

    Returns:
        Properly quoted identifier

    Raises:
        ConfigurationError: If the name is empty or the dialect is unknown

    Examples:
        >>> quote_identifier("created_at")
        '"created_at"'
        >>> quote_identifier("order", dialect="mysql")
        '`order`'
        >>> quote_identifier('odd"name', dialect="sqlite")
        '"odd""name"'
    """
    if not name or not isinstance(name, str):
        raise ConfigurationError("Identifier name must be non-empty string")
    try:
        quote = _QUOTE_CHARS[dialect]
    except KeyError:
        raise ConfigurationError(
            f"Unknown dialect '{dialect}' for identifier quoting. "
            f"Available: {sorted(_QUOTE_CHARS)}"
        ) from None

    escaped = name.replace(quote, quote * 2)
    return f"{quote}{escaped}{quote}"


def qualify_table(
    table: str, schema: Optional[str] = None, dialect: str = "postgresql"
) -> str:
    """
    Create a table reference with an optional schema prefix.

    Both parts are quoted individually.

    Examples:
        >>> qualify_table("users")
        '"users"'
        >>> qualify_table("users", schema="public")
        '"public"."users"'
        >>> qualify_table("users", schema="app", dialect="mysql")
        '`app`.`users`'
    """
    quoted_table = quote_identifier(table, dialect)
    if schema and schema.strip():
        return f"{quote_identifier(schema.strip(), dialect)}.{quoted_table}"
    return quoted_table
