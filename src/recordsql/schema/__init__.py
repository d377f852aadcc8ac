"""
Record schema descriptors.

Column behaviors are declared with ``Annotated`` markers; ``derive_schema``
turns a record class into an immutable ``TableSchema``.
"""

from .columns import UNSET, ColumnMarker, CreateTime, Default, PrimaryKey, UpdateTime, current_timestamp
from .core import ColumnBehavior, ColumnDef, TableSchema, derive_schema, table_name_for
from .registry import get_schema, list_schemas, register_schema

__all__ = [
    "UNSET",
    "ColumnMarker",
    "PrimaryKey",
    "Default",
    "CreateTime",
    "UpdateTime",
    "current_timestamp",
    "ColumnBehavior",
    "ColumnDef",
    "TableSchema",
    "derive_schema",
    "table_name_for",
    "get_schema",
    "list_schemas",
    "register_schema",
]
