"""SQL statement assembly for the CRUD operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from databridger.dao.conditions import ConditionLike, where_clause
from databridger.errors import EmptyInput


@dataclass(frozen=True)
class Statement:
    """SQL text plus one parameter per ``?`` placeholder, left to right."""

    sql: str
    params: tuple = ()


def build_insert(table: str, values: Mapping[str, Any]) -> Statement:
    if not values:
        raise EmptyInput("Values map is empty. You must provide values to insert.")

    columns = ", ".join(values.keys())
    placeholders = ", ".join("?" for _ in values)
    return Statement(
        f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
        tuple(values.values()),
    )


def build_select(
    table: str, conditions: Optional[Sequence[ConditionLike]] = None
) -> Statement:
    where, params = where_clause(conditions)
    return Statement(f"SELECT * FROM {table}{where}", params)


def build_update(
    table: str,
    values: Mapping[str, Any],
    conditions: Optional[Sequence[ConditionLike]] = None,
) -> Statement:
    if not values:
        raise EmptyInput("Values map is empty. You must provide values to update.")

    set_clause = ", ".join(f"{column} = ?" for column in values)
    where, where_params = where_clause(conditions)
    # SET parameters come first, matching placeholder order
    return Statement(
        f"UPDATE {table} SET {set_clause}{where}",
        tuple(values.values()) + where_params,
    )


def build_delete(
    table: str, conditions: Optional[Sequence[ConditionLike]] = None
) -> Statement:
    where, params = where_clause(conditions)
    return Statement(f"DELETE FROM {table}{where}", params)
