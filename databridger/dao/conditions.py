"""WHERE clause conditions.

Condition always binds its value as a parameter. RawCondition inserts a
caller-written fragment verbatim and is NOT injection safe; plain strings
passed as conditions are treated as raw fragments.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from databridger.errors import EmptyInput, InvalidCondition

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*(\.[A-Za-z_][A-Za-z0-9_$]*)?$")

COMPARISON_OPERATORS = {"=", "!=", "<>", "<", "<=", ">", ">=", "LIKE", "NOT LIKE"}
LIST_OPERATORS = {"IN", "NOT IN"}
NULL_OPERATORS = {"IS NULL", "IS NOT NULL"}


def _normalize_operator(operator: str) -> str:
    return " ".join(operator.split()).upper()


@dataclass(frozen=True)
class Condition:
    """A ``column <operator> value`` test with the value bound as a parameter."""

    column: str
    operator: str = "="
    value: Any = None

    def render(self) -> tuple[str, tuple]:
        if not _IDENTIFIER.match(self.column):
            raise InvalidCondition(f"Invalid column name in condition: {self.column!r}")

        op = _normalize_operator(self.operator)
        if op in COMPARISON_OPERATORS:
            return f"{self.column} {op} ?", (self.value,)
        if op in NULL_OPERATORS:
            return f"{self.column} {op}", ()
        if op in LIST_OPERATORS:
            if isinstance(self.value, (str, bytes)) or not isinstance(
                self.value, Iterable
            ):
                raise InvalidCondition(f"{op} needs a sequence of values")
            values = tuple(self.value)
            if not values:
                raise EmptyInput(f"{op} condition on '{self.column}' has no values")
            placeholders = ", ".join("?" for _ in values)
            return f"{self.column} {op} ({placeholders})", values

        raise InvalidCondition(f"Unsupported operator in condition: {self.operator!r}")


@dataclass(frozen=True)
class RawCondition:
    """UNSAFE: a literal boolean expression inserted into the WHERE clause as-is."""

    fragment: str

    def render(self) -> tuple[str, tuple]:
        if not self.fragment.strip():
            raise InvalidCondition("Empty raw condition fragment")
        return self.fragment, ()


def raw(fragment: str) -> RawCondition:
    """Mark a pre-formatted fragment as intentionally unparameterized."""
    return RawCondition(fragment)


ConditionLike = Union[Condition, RawCondition, str]


def where_clause(conditions: Optional[Sequence[ConditionLike]]) -> tuple[str, tuple]:
    """Join conditions with AND.

    Returns:
        (" WHERE ...", params), or ("", ()) when there are no conditions.
    """
    if not conditions:
        return "", ()

    fragments: list[str] = []
    params: list[Any] = []
    for condition in conditions:
        if isinstance(condition, str):
            condition = RawCondition(condition)
        if not isinstance(condition, (Condition, RawCondition)):
            raise InvalidCondition(
                f"Conditions must be Condition, RawCondition or str, "
                f"got {type(condition).__name__}"
            )
        sql, values = condition.render()
        fragments.append(sql)
        params.extend(values)

    return " WHERE " + " AND ".join(fragments), tuple(params)
