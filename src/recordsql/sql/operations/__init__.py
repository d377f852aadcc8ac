"""Statement builders: INSERT, UPDATE, DELETE and SELECT."""

from .delete import DeleteBuilder
from .insert import InsertBuilder
from .select import GroupBy, OrderBy, SelectBuilder
from .update import Assignments, UpdateBuilder

__all__ = [
    "InsertBuilder",
    "UpdateBuilder",
    "Assignments",
    "DeleteBuilder",
    "SelectBuilder",
    "OrderBy",
    "GroupBy",
]
