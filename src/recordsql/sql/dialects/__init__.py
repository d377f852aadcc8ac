"""Dialect registry.

Dialects are selected once, by name, when an executor is configured. An
unknown name is a setup error.
"""

from typing import Dict, List, Optional, Type

from recordsql.exceptions import ConfigurationError

from .base import Dialect
from .mysql import MySQLDialect
from .postgresql import PostgreSQLDialect
from .sqlite import SQLiteDialect

_DIALECT_REGISTRY: Dict[str, Type[Dialect]] = {
    SQLiteDialect.name: SQLiteDialect,
    MySQLDialect.name: MySQLDialect,
    PostgreSQLDialect.name: PostgreSQLDialect,
}

_ALIASES = {
    "postgres": "postgresql",
    "psycopg": "postgresql",
    "psycopg2": "postgresql",
    "asyncpg": "postgresql",
    "pg": "postgresql",
    "mariadb": "mysql",
    "sqlite3": "sqlite",
}


def normalize_dialect_name(name: Optional[str]) -> str:
    """Lower-case ``name`` and resolve aliases such as ``pg`` or ``mariadb``."""
    key = (name or "").strip().lower()
    return _ALIASES.get(key, key)


def get_dialect(name: str, paramstyle: Optional[str] = None) -> Dialect:
    """
    Resolve a dialect by name.

    Args:
        name: Engine name ("sqlite", "mysql", "postgresql" or an alias)
        paramstyle: Optional placeholder style override

    Raises:
        ConfigurationError: If the dialect or paramstyle is not supported
    """
    key = normalize_dialect_name(name)
    if key not in _DIALECT_REGISTRY:
        raise ConfigurationError(
            f"Dialect '{name}' is not supported. Available: {available_dialects()}"
        )
    return _DIALECT_REGISTRY[key](paramstyle)


def available_dialects() -> List[str]:
    """List all registered dialect names."""
    return sorted(_DIALECT_REGISTRY.keys())


__all__ = [
    "Dialect",
    "SQLiteDialect",
    "MySQLDialect",
    "PostgreSQLDialect",
    "get_dialect",
    "available_dialects",
    "normalize_dialect_name",
]
