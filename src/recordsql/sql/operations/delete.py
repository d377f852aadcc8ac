"""SQL DELETE statement builder."""

from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from recordsql.exceptions import ConstraintError

from ..core.parameters import ParameterBinder
from ..dialects.base import Dialect

if TYPE_CHECKING:
    from recordsql.clause import CompiledClause


class DeleteBuilder:
    """Builder for DELETE statements filtered by a compiled clause."""

    def __init__(self, dialect: Dialect):
        self.dialect = dialect

    def delete(
        self,
        table: str,
        where: "CompiledClause",
        schema: Optional[str] = None,
    ) -> Tuple[str, List[Any]]:
        """
        Build ``DELETE FROM <table> WHERE ...``.

        Raises:
            ConstraintError: If the clause is empty; a DELETE without WHERE
                would empty the table
        """
        if where.is_empty:
            raise ConstraintError(f"DELETE from '{table}' requires a WHERE clause", table)
        binder = ParameterBinder(self.dialect)
        where_sql = where.render_into(binder)
        return self.dialect.build_delete(table, where_sql, schema), binder.params
