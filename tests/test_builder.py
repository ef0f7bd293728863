"""Tests for statement assembly and WHERE conditions."""

import pytest

from databridger.dao.builder import (
    Statement,
    build_delete,
    build_insert,
    build_select,
    build_update,
)
from databridger.dao.conditions import Condition, RawCondition, raw, where_clause
from databridger.db.binding import count_placeholders
from databridger.errors import EmptyInput, InvalidCondition


class TestBuildInsert:
    """INSERT assembly."""

    def test_insert(self):
        """Columns and parameters should follow the mapping order."""
        stmt = build_insert("users", {"name": "victor", "age": 30})
        assert stmt == Statement(
            "INSERT INTO users (name, age) VALUES (?, ?)", ("victor", 30)
        )

    def test_insert_empty(self):
        with pytest.raises(EmptyInput):
            build_insert("users", {})


class TestBuildSelect:
    """SELECT assembly."""

    def test_no_conditions(self):
        assert build_select("users").sql == "SELECT * FROM users"
        assert build_select("users", []).sql == "SELECT * FROM users"

    def test_raw_fragment(self):
        stmt = build_select("users", ["age > 18"])
        assert stmt.sql == "SELECT * FROM users WHERE age > 18"
        assert stmt.params == ()

    def test_fragments_joined_with_and(self):
        stmt = build_select("users", ["age > 18", "name LIKE 'v%'"])
        assert stmt.sql == "SELECT * FROM users WHERE age > 18 AND name LIKE 'v%'"

    def test_structured_condition(self):
        stmt = build_select("users", [Condition("age", ">", 18)])
        assert stmt.sql == "SELECT * FROM users WHERE age > ?"
        assert stmt.params == (18,)


class TestBuildUpdate:
    """UPDATE assembly."""

    def test_update_with_fragment(self):
        stmt = build_update("users", {"age": 31}, ["name = 'victor'"])
        assert stmt.sql == "UPDATE users SET age = ? WHERE name = 'victor'"
        assert stmt.params == (31,)

    def test_set_params_before_condition_params(self):
        stmt = build_update(
            "users", {"age": 31, "city": "Lisbon"}, [Condition("name", "=", "victor")]
        )
        assert stmt.sql == "UPDATE users SET age = ?, city = ? WHERE name = ?"
        assert stmt.params == (31, "Lisbon", "victor")

    def test_update_empty(self):
        with pytest.raises(EmptyInput):
            build_update("users", {}, ["id = 1"])


class TestBuildDelete:
    """DELETE assembly."""

    def test_delete(self):
        stmt = build_delete("users", ["age < 18"])
        assert stmt == Statement("DELETE FROM users WHERE age < 18")

    def test_delete_all(self):
        assert build_delete("users").sql == "DELETE FROM users"


class TestConditions:
    """Structured and raw conditions."""

    def test_in_expands(self):
        sql, params = Condition("id", "in", [1, 2, 3]).render()
        assert sql == "id IN (?, ?, ?)"
        assert params == (1, 2, 3)

    def test_in_empty(self):
        with pytest.raises(EmptyInput):
            Condition("id", "IN", []).render()

    def test_in_rejects_string(self):
        with pytest.raises(InvalidCondition):
            Condition("id", "IN", "123").render()

    def test_null_operators(self):
        assert Condition("deleted_at", "is null").render() == ("deleted_at IS NULL", ())
        assert Condition("deleted_at", "IS NOT NULL").render() == (
            "deleted_at IS NOT NULL",
            (),
        )

    def test_operator_normalized(self):
        sql, _ = Condition("name", "not   like", "v%").render()
        assert sql == "name NOT LIKE ?"

    def test_qualified_column(self):
        sql, _ = Condition("u.age", ">=", 18).render()
        assert sql == "u.age >= ?"

    def test_bad_column(self):
        with pytest.raises(InvalidCondition):
            Condition("age; DROP TABLE users", "=", 1).render()

    def test_bad_operator(self):
        with pytest.raises(InvalidCondition):
            Condition("age", "=>", 1).render()

    def test_raw_helper(self):
        assert raw("age > 18") == RawCondition("age > 18")
        assert raw("age > 18").render() == ("age > 18", ())

    def test_empty_raw_fragment(self):
        with pytest.raises(InvalidCondition):
            where_clause(["  "])

    def test_rejects_other_types(self):
        with pytest.raises(InvalidCondition):
            where_clause([42])

    def test_mixed_conditions_placeholder_count(self):
        """Parameter count always matches placeholder count."""
        where, params = where_clause(
            [raw("active = 1"), Condition("age", ">", 18), Condition("id", "IN", (4, 5))]
        )
        assert where == " WHERE active = 1 AND age > ? AND id IN (?, ?)"
        assert count_placeholders(where) == len(params) == 3
