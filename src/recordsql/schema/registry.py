"""Schema registry for record types.

Schemas are keyed by record class identity, so two classes mapped to the same
table keep separate descriptors.
"""

from __future__ import annotations

from typing import Dict, List

from recordsql.exceptions import ConfigurationError

from .core import TableSchema


_SCHEMA_REGISTRY: Dict[type, TableSchema] = {}


def register_schema(record_cls: type, schema: TableSchema) -> None:
    """Register the schema of a record class in the global registry."""
    if record_cls in _SCHEMA_REGISTRY:
        raise ConfigurationError(
            f"Record class '{record_cls.__qualname__}' is already registered."
        )
    _SCHEMA_REGISTRY[record_cls] = schema


def get_schema(record_cls: type) -> TableSchema:
    """Retrieve the schema of a record class from the registry."""
    try:
        return _SCHEMA_REGISTRY[record_cls]
    except KeyError:
        raise ConfigurationError(
            f"'{getattr(record_cls, '__qualname__', record_cls)}' is not a registered "
            "record class. Abstract records have no table."
        ) from None


def list_schemas() -> List[TableSchema]:
    """List all registered schemas, ordered by table name."""
    return sorted(_SCHEMA_REGISTRY.values(), key=lambda s: s.table_name)


__all__ = [
    "register_schema",
    "get_schema",
    "list_schemas",
]
