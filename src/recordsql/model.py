"""
Record base class and CRUD operations.

A record is a pydantic model whose fields are the table's columns. Subclassing
``Record`` derives the class's TableSchema once and registers it; invalid
declarations fail at class creation with ConfigurationError.

Example:
    >>> from typing import Annotated, Optional
    >>> class User(Record):
    ...     __table__ = "users"
    ...
    ...     id: Annotated[Optional[int], PrimaryKey(increment=True)] = None
    ...     name: Optional[str] = None
    ...     enable: Annotated[Optional[int], Default("1")] = None
    ...     updated_at: Annotated[Optional[int], UpdateTime()] = None
    ...     created_at: Annotated[Optional[int], CreateTime()] = None
    >>> user = User(name="foo")
    >>> user.create(executor)  # doctest: +SKIP
    >>> user.id, user.enable  # doctest: +SKIP
    (1, 1)

Model operations change the in-memory record only after the executor call
returned successfully, and only the fields they document: the generated key,
the timestamps and unset defaults.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from recordsql.clause import equals
from recordsql.exceptions import ConfigurationError, ConstraintError, ExecutionError
from recordsql.query import Query
from recordsql.schema import (
    ColumnBehavior,
    ColumnDef,
    TableSchema,
    current_timestamp,
    derive_schema,
    get_schema,
    register_schema,
)
from recordsql.sql.operations import Assignments, DeleteBuilder, InsertBuilder, UpdateBuilder
from recordsql.utils.logging import get_logger

logger = get_logger(__name__)


def _timestamp(column: ColumnDef, now: int) -> int:
    return column.clock() if column.clock is not None else now


class Record(BaseModel):
    """
    Base class for table-backed records.

    Class attributes:
        __table__: Table name; defaults to the snake_cased class name
        __abstract__: Set to True on intermediate base classes that map to
            no table. Not inherited.
    """

    model_config = ConfigDict(validate_assignment=True)

    __table__: ClassVar[Optional[str]] = None
    __abstract__: ClassVar[bool] = True

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        if cls.__dict__.get("__abstract__", False):
            return
        register_schema(cls, derive_schema(cls))

    @classmethod
    def table_schema(cls) -> TableSchema:
        """The registered TableSchema of this record class."""
        return get_schema(cls)

    @classmethod
    def query(cls) -> Query:
        """A new single-shot query over this record's table."""
        return Query(cls.table_schema().table_name, cls)

    # -- in-memory defaults -------------------------------------------------

    def _create_values(self, schema: TableSchema) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Column values for INSERT, and the subset to write back on success."""
        now = current_timestamp()
        values: Dict[str, Any] = {}
        changes: Dict[str, Any] = {}
        for column in schema.columns:
            if column.is_auto_increment:
                continue
            if column.is_timestamp:
                changes[column.name] = _timestamp(column, now)
            elif (
                column.behavior is ColumnBehavior.DEFAULT
                and column.name not in self.model_fields_set
            ):
                changes[column.name] = deepcopy(column.default)
            values[column.name] = changes.get(column.name, getattr(self, column.name))
        return values, changes

    def _update_values(self, schema: TableSchema) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Column values for UPDATE, and the refreshed timestamps to write back."""
        now = current_timestamp()
        values: Dict[str, Any] = {}
        changes: Dict[str, Any] = {}
        for column in schema.columns:
            if column.is_primary_key:
                continue
            if column.behavior is ColumnBehavior.UPDATE_TIME:
                changes[column.name] = _timestamp(column, now)
            values[column.name] = changes.get(column.name, getattr(self, column.name))
        return values, changes

    def _apply(self, changes: Dict[str, Any]) -> None:
        for name, value in changes.items():
            setattr(self, name, value)

    def fill_create_defaults(self) -> None:
        """Set timestamps and unset defaults as ``create`` would, without I/O."""
        self._apply(self._create_values(self.table_schema())[1])

    def fill_update_defaults(self) -> None:
        """Refresh update timestamps as ``update`` would, without I/O."""
        self._apply(self._update_values(self.table_schema())[1])

    def _require_key(self, schema: TableSchema, operation: str) -> Any:
        pk = schema.require_primary_key()
        key = getattr(self, pk)
        if pk not in self.model_fields_set or key is None:
            raise ConstraintError(
                f"Cannot {operation} '{schema.table_name}' record: primary key '{pk}' is unset",
                schema.table_name,
            )
        return key

    # -- CRUD -----------------------------------------------------------------

    def create(self, executor: Any) -> None:
        """
        INSERT this record.

        Every column except an auto-increment key is written. Create and
        update timestamps get the current epoch seconds and unset defaults
        get their default. After the statement succeeds those values and the
        engine-assigned key are written back to this instance.

        Raises:
            ExecutionError: If the statement fails, or the engine did not
                report the generated key
        """
        schema = self.table_schema()
        dialect = executor.dialect
        values, changes = self._create_values(schema)
        returning = [schema.primary_key] if schema.increment else None
        sql, params = InsertBuilder(dialect).insert(schema.table_name, values, returning=returning)
        result = executor.execute(sql, params, want_key=schema.increment)

        if schema.increment:
            if result.last_insert_id is None:
                raise ExecutionError(
                    f"INSERT into '{schema.table_name}' did not report a generated key",
                    sql=sql,
                )
            changes[schema.primary_key] = result.last_insert_id
        self._apply(changes)
        logger.info(
            "record.created",
            table=schema.table_name,
            primary_key=getattr(self, schema.primary_key) if schema.primary_key else None,
        )

    def update(self, executor: Any) -> int:
        """
        UPDATE every non-key column, filtered on the primary key.

        Update timestamps are refreshed and written back on success; create
        timestamps are left alone.

        Returns:
            Number of affected rows

        Raises:
            ConfigurationError: If the record type has no primary key, or no
                column besides it
            ConstraintError: If the primary key is unset
        """
        schema = self.table_schema()
        pk = schema.require_primary_key()
        if len(schema.columns) == 1:
            raise ConfigurationError(
                f"Cannot update '{schema.table_name}' record: it has no column "
                f"besides primary key '{pk}'"
            )
        key = self._require_key(schema, "update")
        dialect = executor.dialect
        values, changes = self._update_values(schema)
        sql, params = UpdateBuilder(dialect).update(
            schema.table_name,
            Assignments.from_mapping(values),
            equals(dialect, schema.primary_key, key),
        )
        result = executor.execute(sql, params)
        self._apply(changes)
        logger.info(
            "record.updated", table=schema.table_name, primary_key=key, rowcount=result.rowcount
        )
        return result.rowcount

    def delete(self, executor: Any) -> int:
        """DELETE this record by its primary key. Returns the affected row count."""
        schema = self.table_schema()
        return type(self).destroy(executor, self._require_key(schema, "delete"))

    @classmethod
    def destroy(cls, executor: Any, key: Any) -> int:
        """
        DELETE the row whose primary key is ``key``.

        Deleting an absent row is not an error; the count is then 0.
        """
        schema = cls.table_schema()
        pk = schema.require_primary_key()
        if key is None:
            raise ConstraintError(
                f"Cannot delete from '{schema.table_name}': primary key value is None",
                schema.table_name,
            )
        dialect = executor.dialect
        sql, params = DeleteBuilder(dialect).delete(schema.table_name, equals(dialect, pk, key))
        result = executor.execute(sql, params)
        logger.info(
            "record.deleted", table=schema.table_name, primary_key=key, rowcount=result.rowcount
        )
        return result.rowcount

    @classmethod
    def find(cls, executor: Any, key: Any) -> Optional["Record"]:
        """The record whose primary key is ``key``, or None."""
        return cls.query().where_key(key).find(executor)


__all__ = ["Record"]
