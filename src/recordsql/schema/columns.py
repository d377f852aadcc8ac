"""Column behavior markers.

Markers are attached to record fields with ``typing.Annotated``::

    class User(Record):
        __table__ = "users"

        id: Annotated[Optional[int], PrimaryKey(increment=True)] = None
        name: Optional[str] = None
        enable: Annotated[Optional[int], Default("1")] = None
        updated_at: Annotated[Optional[int], UpdateTime()] = None
        created_at: Annotated[Optional[int], CreateTime()] = None

A field without a marker is a plain column.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def current_timestamp() -> int:
    """Current time in epoch seconds."""
    return int(time.time())


class ColumnMarker:
    """Base class for column behavior markers."""


@dataclass(frozen=True)
class PrimaryKey(ColumnMarker):
    """The table's primary key; ``increment`` when the engine assigns it."""

    increment: bool = False


@dataclass(frozen=True)
class Default(ColumnMarker):
    """
    Value supplied on create when the field was never set.

    ``literal`` is validated against the field's type when the record class
    is created, so ``Default("1")`` on an ``int`` field yields ``1``. Without
    a literal the type's zero value is used (``0``, ``""``, ...).
    """

    literal: Any = UNSET


@dataclass(frozen=True)
class CreateTime(ColumnMarker):
    """Epoch-seconds timestamp set once, on create."""

    clock: Optional[Callable[[], int]] = None


@dataclass(frozen=True)
class UpdateTime(ColumnMarker):
    """Epoch-seconds timestamp set on create and on every update."""

    clock: Optional[Callable[[], int]] = None
