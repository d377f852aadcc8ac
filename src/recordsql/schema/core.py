"""Schema descriptors for record types.

A ``TableSchema`` is derived once per record class from its pydantic fields
and the behavior markers in ``recordsql.schema.columns``. Derivation is pure:
deriving twice from the same class yields equal descriptors.
"""

from __future__ import annotations

import re
import types
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union, get_args, get_origin

from pydantic import TypeAdapter, ValidationError

from recordsql.exceptions import ConfigurationError

from .columns import UNSET, ColumnMarker, CreateTime, Default, PrimaryKey, UpdateTime


class ColumnBehavior(Enum):
    """Persistence role of a column."""

    PLAIN = "plain"
    PRIMARY_KEY = "primary_key"
    DEFAULT = "default"
    CREATE_TIME = "create_time"
    UPDATE_TIME = "update_time"


TIMESTAMP_BEHAVIORS = (ColumnBehavior.CREATE_TIME, ColumnBehavior.UPDATE_TIME)


@dataclass(frozen=True)
class ColumnDef:
    """Definition of a single column of a record type."""

    name: str
    behavior: ColumnBehavior = ColumnBehavior.PLAIN
    python_type: Any = Any
    increment: bool = False
    default: Any = None
    clock: Optional[Callable[[], int]] = field(default=None, compare=False)

    @property
    def is_primary_key(self) -> bool:
        return self.behavior is ColumnBehavior.PRIMARY_KEY

    @property
    def is_auto_increment(self) -> bool:
        return self.is_primary_key and self.increment

    @property
    def is_timestamp(self) -> bool:
        return self.behavior in TIMESTAMP_BEHAVIORS


@dataclass(frozen=True)
class TableSchema:
    """Complete mapping of one record type to one table."""

    table_name: str
    columns: Tuple[ColumnDef, ...]
    primary_key: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.table_name:
            raise ConfigurationError("Table name must be non-empty")
        if not self.columns:
            raise ConfigurationError(f"Table '{self.table_name}' has no columns")
        names = [c.name for c in self.columns]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Table '{self.table_name}' has duplicate columns")
        if self.primary_key is not None and self.primary_key not in names:
            raise ConfigurationError(
                f"Primary key '{self.primary_key}' is not a column of '{self.table_name}'"
            )

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    @property
    def increment(self) -> bool:
        """True when the primary key is assigned by the engine."""
        pk = self.primary_key_column
        return pk is not None and pk.increment

    @property
    def primary_key_column(self) -> Optional[ColumnDef]:
        if self.primary_key is None:
            return None
        return self.get_column(self.primary_key)

    def has_column(self, name: str) -> bool:
        return any(c.name == name for c in self.columns)

    def get_column(self, name: str) -> ColumnDef:
        for column in self.columns:
            if column.name == name:
                return column
        raise ConfigurationError(f"Column '{name}' not found in table '{self.table_name}'")

    def require_primary_key(self) -> str:
        """Name of the primary key, or ConfigurationError when there is none."""
        if self.primary_key is None:
            raise ConfigurationError(f"Table '{self.table_name}' has no primary key")
        return self.primary_key


def table_name_for(class_name: str) -> str:
    """
    Default table name for a record class.

    Examples:
        >>> table_name_for("User")
        'user'
        >>> table_name_for("UserProfile")
        'user_profile'
    """
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", class_name).lower()


def unwrap_optional(annotation: Any) -> Any:
    """Strip ``Optional[...]`` / ``X | None`` from an annotation."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_int_type(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, int) and not issubclass(tp, bool)


def _parse_default(owner: str, name: str, annotation: Any, marker: Default) -> Any:
    if marker.literal is UNSET:
        base = unwrap_optional(annotation)
        try:
            return (get_origin(base) or base)()
        except TypeError:
            raise ConfigurationError(
                f"{owner}.{name}: Default() needs a literal for type {base!r}"
            ) from None
    try:
        return TypeAdapter(annotation).validate_python(marker.literal)
    except ValidationError as e:
        raise ConfigurationError(
            f"{owner}.{name}: default {marker.literal!r} is not valid for the "
            f"declared type: {e.errors()[0]['msg']}"
        ) from e


def _column_from_field(owner: str, name: str, annotation: Any, metadata: List[Any]) -> ColumnDef:
    markers = [m for m in metadata if isinstance(m, ColumnMarker)]
    if len(markers) > 1:
        raise ConfigurationError(
            f"{owner}.{name} has more than one column behavior: {markers}"
        )
    base = unwrap_optional(annotation)
    if not markers:
        return ColumnDef(name=name, python_type=base)

    marker = markers[0]
    if isinstance(marker, PrimaryKey):
        if marker.increment and not _is_int_type(base):
            raise ConfigurationError(
                f"{owner}.{name}: auto-increment primary key must be an int, got {base!r}"
            )
        return ColumnDef(
            name=name,
            behavior=ColumnBehavior.PRIMARY_KEY,
            python_type=base,
            increment=marker.increment,
        )
    if isinstance(marker, Default):
        return ColumnDef(
            name=name,
            behavior=ColumnBehavior.DEFAULT,
            python_type=base,
            default=_parse_default(owner, name, annotation, marker),
        )

    behavior = (
        ColumnBehavior.CREATE_TIME if isinstance(marker, CreateTime) else ColumnBehavior.UPDATE_TIME
    )
    if not _is_int_type(base):
        raise ConfigurationError(
            f"{owner}.{name}: {behavior.value} column must hold int epoch seconds, got {base!r}"
        )
    return ColumnDef(name=name, behavior=behavior, python_type=base, clock=marker.clock)


def derive_schema(record_cls: type, table_name: Optional[str] = None) -> TableSchema:
    """
    Derive the TableSchema for a pydantic record class.

    Args:
        record_cls: A pydantic model class whose fields are the columns
        table_name: Table name; defaults to ``__table__`` declared on the class
            itself, then to the snake_cased class name

    Raises:
        ConfigurationError: If the declaration is invalid or ambiguous
    """
    owner = record_cls.__name__
    table_name = table_name or record_cls.__dict__.get("__table__") or table_name_for(owner)

    fields: Dict[str, Any] = getattr(record_cls, "model_fields", {})
    columns = tuple(
        _column_from_field(owner, name, info.annotation, list(info.metadata))
        for name, info in fields.items()
    )

    for behavior in (ColumnBehavior.PRIMARY_KEY, *TIMESTAMP_BEHAVIORS):
        found = [c.name for c in columns if c.behavior is behavior]
        if len(found) > 1:
            raise ConfigurationError(
                f"{owner} declares more than one {behavior.value} column: {found}"
            )

    primary_key = next((c.name for c in columns if c.is_primary_key), None)
    return TableSchema(table_name=table_name, columns=columns, primary_key=primary_key)


__all__ = [
    "ColumnBehavior",
    "ColumnDef",
    "TableSchema",
    "derive_schema",
    "table_name_for",
    "unwrap_optional",
]
