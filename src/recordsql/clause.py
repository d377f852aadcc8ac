"""
Condition templates compiled into parameterized SQL fragments.

A template is literal SQL with embedded references::

    clause("name={&name} AND size>{size} AND status IN ({#statuses})")

- ``{name}`` / ``{&name}``: one bound value.
- ``{#name}``: a sequence; expands to one placeholder per element, comma
  separated.
- ``{user.name}``: dotted attribute access on a referenced object.
- ``{{`` and ``}}``: literal braces.

Literal text is copied verbatim, operators included. Only values travel out of
band, so a value can never change the shape of the SQL. References are
resolved when the clause is built; a name that cannot be resolved raises
ConfigurationError instead of being dropped.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from recordsql.exceptions import ConfigurationError
from recordsql.sql.core.parameters import ParameterBinder

_MISSING = object()


@dataclass(frozen=True)
class _Reference:
    path: Tuple[str, ...]
    expand: bool
    position: int

    @property
    def dotted(self) -> str:
        return ".".join(self.path)


@dataclass(frozen=True)
class CompiledClause:
    """
    SQL text segments interleaved with parameter slots.

    ``segments[i]`` is the literal text before the i-th bound value and the
    last segment is the text after the final one, so
    ``len(segments) == len(params) + 1`` always holds.
    """

    segments: Tuple[str, ...] = ("",)
    params: Tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        if len(self.segments) != len(self.params) + 1:
            raise ValueError(
                f"CompiledClause needs {len(self.params) + 1} segments for "
                f"{len(self.params)} params, got {len(self.segments)}"
            )

    @classmethod
    def raw(cls, sql: str) -> "CompiledClause":
        """A clause made of trusted literal SQL with no bound values."""
        return cls((sql,), ())

    @property
    def is_empty(self) -> bool:
        return not self.params and not self.segments[0].strip()

    def __bool__(self) -> bool:
        return not self.is_empty

    def render_into(self, binder: ParameterBinder) -> str:
        """Render against ``binder``, appending this clause's values to it."""
        dialect = binder.dialect
        parts: List[str] = []
        for segment, value in zip(self.segments, self.params):
            parts.append(dialect.escape_literal(segment))
            parts.append(binder.bind(value))
        parts.append(dialect.escape_literal(self.segments[-1]))
        return "".join(parts)

    def render(self, dialect: Any, start: int = 1) -> Tuple[str, List[Any]]:
        """
        Render to ``(sql, params)`` with placeholders numbered from ``start``.

        Example:
            >>> from recordsql.sql.dialects import PostgreSQLDialect
            >>> name = "foo"
            >>> clause("name={&name}").render(PostgreSQLDialect())
            ('name=$1', ['foo'])
        """
        binder = ParameterBinder(dialect, start=start)
        sql = self.render_into(binder)
        return sql, binder.params

    def __str__(self) -> str:
        return "?".join(self.segments)


ClauseLike = Union[CompiledClause, str]


def clause(
    template: str,
    namespace: Optional[Mapping[str, Any]] = None,
    /,
    **values: Any,
) -> CompiledClause:
    """
    Compile a condition template into a CompiledClause.

    References are looked up in ``values`` first, then in ``namespace``. When
    neither is supplied the caller's local and global variables are used, the
    way an f-string would resolve them.

    Args:
        template: Literal SQL with ``{name}``, ``{&name}`` or ``{#names}``
            references
        namespace: Optional mapping to resolve references from
        **values: Values to resolve references from

    Returns:
        The compiled clause; an empty template gives an empty clause

    Raises:
        ConfigurationError: On malformed templates or unresolvable references

    Examples:
        >>> clause("id={id} AND name={&name}", id=1, name="foo").params
        (1, 'foo')
        >>> str(clause("status IN ({#status})", status=[1, 2, 3]))
        'status IN (?,?,?)'
    """
    template = (template or "").strip()
    if not template:
        return CompiledClause()

    parts = _scan(template)
    if not any(isinstance(p, _Reference) for p in parts):
        return CompiledClause.raw("".join(parts))

    frame = None
    if namespace is None and not values:
        current = inspect.currentframe()
        frame = current.f_back if current is not None else None
        del current
    try:
        return _compile(template, parts, values, namespace, frame)
    finally:
        del frame


def ensure_clause(value: ClauseLike, **values: Any) -> CompiledClause:
    """
    Coerce a clause argument.

    Strings are compiled with exactly ``values``; they never read the
    caller's scope.
    """
    if isinstance(value, CompiledClause):
        if values:
            raise ConfigurationError("Values cannot be supplied with a compiled clause")
        return value
    if isinstance(value, str):
        return clause(value, {}, **values)
    raise ConfigurationError(
        f"Expected a clause or template string, got {type(value).__name__}"
    )


def equals(dialect: Any, column: str, value: Any) -> CompiledClause:
    """
    ``<quoted column> = <value>`` as a compiled clause.

    The column is quoted for ``dialect``, which makes this the one place a
    clause carries a generated identifier; primary-key lookups use it.
    """
    return CompiledClause((f"{dialect.quote(column)} = ", ""), (value,))


def _scan(template: str) -> List[Union[str, _Reference]]:
    """Split a template into literal text and references."""
    parts: List[Union[str, _Reference]] = []
    buf: List[str] = []
    i = 0
    n = len(template)
    while i < n:
        ch = template[i]
        if ch == "{":
            if template.startswith("{{", i):
                buf.append("{")
                i += 2
                continue
            end = template.find("}", i + 1)
            if end == -1:
                raise ConfigurationError(f"Unclosed '{{' at position {i} in {template!r}")
            body = template[i + 1 : end]
            nested = body.find("{")
            if nested != -1:
                raise ConfigurationError(
                    f"Unexpected '{{' at position {i + 1 + nested} in {template!r}"
                )
            if buf:
                parts.append("".join(buf))
                buf = []
            parts.append(_parse_reference(body, i, template))
            i = end + 1
        elif ch == "}":
            if template.startswith("}}", i):
                buf.append("}")
                i += 2
                continue
            raise ConfigurationError(f"Unexpected '}}' at position {i} in {template!r}")
        else:
            buf.append(ch)
            i += 1
    if buf:
        parts.append("".join(buf))
    return parts


def _parse_reference(body: str, position: int, template: str) -> _Reference:
    text = body.strip()
    expand = False
    if text[:1] == "#":
        expand = True
        text = text[1:].strip()
    elif text[:1] == "&":
        text = text[1:].strip()

    if not text:
        raise ConfigurationError(f"Empty reference at position {position} in {template!r}")

    path = tuple(p.strip() for p in text.split("."))
    if not all(p.isidentifier() for p in path):
        raise ConfigurationError(
            f"Invalid reference {{{body}}} at position {position}: only names "
            f"and dotted attribute paths are allowed"
        )
    return _Reference(path=path, expand=expand, position=position)


def _lookup(
    name: str,
    values: Mapping[str, Any],
    namespace: Optional[Mapping[str, Any]],
    frame: Any,
) -> Any:
    if name in values:
        return values[name]
    if namespace is not None and name in namespace:
        return namespace[name]
    if frame is not None:
        if name in frame.f_locals:
            return frame.f_locals[name]
        if name in frame.f_globals:
            return frame.f_globals[name]
    return _MISSING


def _resolve(
    ref: _Reference,
    values: Mapping[str, Any],
    namespace: Optional[Mapping[str, Any]],
    frame: Any,
) -> Any:
    value = _lookup(ref.path[0], values, namespace, frame)
    if value is _MISSING:
        raise ConfigurationError(
            f"Clause reference '{ref.path[0]}' at position {ref.position} is not defined"
        )
    for attr in ref.path[1:]:
        try:
            value = getattr(value, attr)
        except AttributeError:
            raise ConfigurationError(
                f"Clause reference '{ref.dotted}' at position {ref.position}: "
                f"{type(value).__name__} has no attribute '{attr}'"
            ) from None
    return value


def _as_sequence(value: Any, ref: _Reference) -> Sequence[Any]:
    if isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(
        value, Iterable
    ):
        raise ConfigurationError(
            f"Clause reference '{{#{ref.dotted}}}' expects a sequence, "
            f"got {type(value).__name__}"
        )
    items = list(value)
    if not items:
        raise ConfigurationError(
            f"Clause reference '{{#{ref.dotted}}}' is bound to an empty sequence"
        )
    return items


def _compile(
    template: str,
    parts: List[Union[str, _Reference]],
    values: Mapping[str, Any],
    namespace: Optional[Mapping[str, Any]],
    frame: Any,
) -> CompiledClause:
    segments: List[str] = [""]
    params: List[Any] = []
    for part in parts:
        if isinstance(part, str):
            segments[-1] += part
            continue
        value = _resolve(part, values, namespace, frame)
        if part.expand:
            for index, item in enumerate(_as_sequence(value, part)):
                if index:
                    segments[-1] += ","
                params.append(item)
                segments.append("")
        else:
            params.append(value)
            segments.append("")
    return CompiledClause(tuple(segments), tuple(params))
