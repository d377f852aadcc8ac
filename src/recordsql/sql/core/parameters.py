"""
SQL parameter binding utilities.

Every statement recordsql emits is assembled left to right through a
``ParameterBinder``: each bound value gets the next 1-based position and the
dialect renders the placeholder for that position. This keeps the placeholder
numbering and the order of the bound values in lock step no matter how many
fragments (SET list, WHERE clause, ...) a statement is built from.
"""

from typing import Any, Dict, Iterable, List, Sequence, Tuple, Union

PARAM_NAME_PREFIX = "p"


def param_name(position: int) -> str:
    """
    Name used for a positional parameter under the named paramstyle.

    Examples:
        >>> param_name(1)
        'p1'
    """
    return f"{PARAM_NAME_PREFIX}{position}"


class ParameterBinder:
    """
    Collects bound values and hands out dialect placeholders in order.

    Example:
        >>> from recordsql.sql.dialects import PostgreSQLDialect
        >>> binder = ParameterBinder(PostgreSQLDialect())
        >>> binder.bind("foo"), binder.bind(1)
        ('$1', '$2')
        >>> binder.params
        ['foo', 1]
    """

    def __init__(self, dialect: Any, start: int = 1):
        self.dialect = dialect
        self._next = start
        self.params: List[Any] = []

    @property
    def next_position(self) -> int:
        return self._next

    def bind(self, value: Any) -> str:
        """Record ``value`` and return the placeholder for its position."""
        placeholder = self.dialect.placeholder(self._next)
        self.params.append(value)
        self._next += 1
        return placeholder

    def bind_many(self, values: Iterable[Any]) -> List[str]:
        return [self.bind(v) for v in values]


def build_bound_params(
    params: Sequence[Any], paramstyle: str
) -> Union[Tuple[Any, ...], Dict[str, Any]]:
    """
    Convert an ordered parameter list into what the DB-API driver expects.

    Positional paramstyles take a tuple; the named paramstyle takes a mapping
    keyed by ``p1``, ``p2``, ... matching the placeholders emitted by the
    dialect.

    Examples:
        >>> build_bound_params(["a", 1], "qmark")
        ('a', 1)
        >>> build_bound_params(["a", 1], "named")
        {'p1': 'a', 'p2': 1}
    """
    if paramstyle == "named":
        return {param_name(i): v for i, v in enumerate(params, start=1)}
    return tuple(params)
