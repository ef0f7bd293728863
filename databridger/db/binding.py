"""Positional parameter binding.

Statements use ``?`` placeholders. Each bound value gets a storage type
inferred from its Python type, and the statement is rewritten to the
``%s`` paramstyle PyMySQL expects.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, NamedTuple

PLACEHOLDER = "?"
DRIVER_PLACEHOLDER = "%s"

_QUOTES = ("'", '"', "`")


class BindType(Enum):
    """Storage type used for a bound value."""

    INTEGER = "i"
    DOUBLE = "d"
    TEXT = "s"


class BoundParam(NamedTuple):
    type: BindType
    value: Any


def infer_bind_type(value: Any) -> BindType:
    """Integers (bool included) bind as INTEGER, floats as DOUBLE, anything else as TEXT."""
    if isinstance(value, int):
        return BindType.INTEGER
    if isinstance(value, float):
        return BindType.DOUBLE
    return BindType.TEXT


def bind(value: Any) -> BoundParam:
    """Coerce a value to the representation of its inferred type.

    None stays None so it reaches the server as NULL.
    """
    bind_type = infer_bind_type(value)
    if value is None:
        return BoundParam(bind_type, None)
    if bind_type is BindType.INTEGER:
        return BoundParam(bind_type, int(value))
    if bind_type is BindType.DOUBLE:
        return BoundParam(bind_type, float(value))
    if isinstance(value, (str, bytes, bytearray)):
        return BoundParam(bind_type, value)
    return BoundParam(bind_type, str(value))


def bind_all(params: Iterable[Any]) -> list[BoundParam]:
    return [bind(p) for p in params]


def _comment_end(sql: str, i: int) -> int:
    """Index just past the comment starting at i, or -1 if none starts there."""
    ch = sql[i]
    nxt = sql[i + 1] if i + 1 < len(sql) else ""
    # MySQL only treats "--" as a comment when followed by whitespace
    dash_comment = ch == "-" and nxt == "-" and sql[i + 2 : i + 3].isspace()
    if ch == "#" or dash_comment or (ch == "-" and nxt == "-" and i + 2 == len(sql)):
        end = sql.find("\n", i)
        return len(sql) if end == -1 else end
    if ch == "/" and nxt == "*":
        end = sql.find("*/", i + 2)
        return len(sql) if end == -1 else end + 2
    return -1


def _split_on_placeholders(sql: str) -> list[str]:
    """Split sql on placeholders outside quoted literals, identifiers and comments."""
    parts: list[str] = []
    buf: list[str] = []
    quote = None
    escaped = False
    i = 0

    while i < len(sql):
        ch = sql[i]
        if quote:
            buf.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\" and quote != "`":
                escaped = True
            elif ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
            buf.append(ch)
        elif ch == PLACEHOLDER:
            parts.append("".join(buf))
            buf = []
        else:
            end = _comment_end(sql, i)
            if end != -1:
                buf.append(sql[i:end])
                i = end
                continue
            buf.append(ch)
        i += 1

    parts.append("".join(buf))
    return parts


def count_placeholders(sql: str) -> int:
    return len(_split_on_placeholders(sql)) - 1


def to_driver_sql(sql: str) -> str:
    """Rewrite ``?`` placeholders as ``%s`` and escape literal percent signs.

    Only meaningful when parameters are passed; without them PyMySQL sends
    the statement untouched.
    """
    parts = _split_on_placeholders(sql)
    return DRIVER_PLACEHOLDER.join(part.replace("%", "%%") for part in parts)
