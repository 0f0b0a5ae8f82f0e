"""Tests for dialect strategies and the dialect registry."""

from __future__ import annotations

import pytest

import sqlweave
from sqlweave.compile.base import SQLDialect
from sqlweave.compile.builder import QueryCompiler
from sqlweave.compile.expression_builder import ParameterBinder
from sqlweave.compile.mysql import MySQLDialect
from sqlweave.compile.registry import CompilerFactory
from sqlweave.compile.sqlite import SQLiteDialect
from sqlweave.compile.sqlserver import SqlServerDialect
from sqlweave.errors import CompilationError
from sqlweave.schema import (
    AggregateClause,
    BasicCondition,
    Column,
    FromClause,
    LimitOffset,
    OrderBy,
    Query,
)
from tests.fixtures import users_query


def _paged(limit=None, offset=None) -> Query:
    return Query(
        clauses=[FromClause(table="users"), LimitOffset(limit=limit, offset=offset)]
    )


class TestIdentifierQuoting:
    def test_mysql_backticks(self, mysql):
        r = mysql.compile(users_query())
        assert r.sql == (
            "SELECT `id`, `name` FROM `users` WHERE `age` > %s ORDER BY `name` DESC"
        )

    def test_sqlserver_brackets(self, sqlserver):
        query = Query(clauses=[FromClause(table="dbo.users as u"), Column(name="u.id")])
        assert sqlserver.compile(query).sql == "SELECT [u].[id] FROM [dbo].[users] AS [u]"

    def test_closing_quote_is_doubled(self, sqlite, mysql):
        query = Query(clauses=[FromClause(table='we"ird')])
        assert sqlite.compile(query).sql == 'SELECT * FROM "we""ird"'
        query = Query(clauses=[FromClause(table="we`ird")])
        assert mysql.compile(query).sql == "SELECT * FROM `we``ird`"


class TestPlaceholders:
    @pytest.mark.parametrize(
        ("fixture", "placeholder"),
        [("sqlite", "?"), ("postgres", "%s"), ("mysql", "%s"), ("sqlserver", "?")],
    )
    def test_placeholder_style(self, request, fixture, placeholder):
        compiler = request.getfixturevalue(fixture)
        query = Query(clauses=[FromClause(table="t"), BasicCondition(column="a", value=1)])
        assert compiler.compile(query).sql.endswith(f"= {placeholder}")


class TestPagination:
    def test_sqlite_offset_only(self, sqlite):
        r = sqlite.compile(_paged(offset=20))
        assert r.sql == 'SELECT * FROM "users" LIMIT -1 OFFSET ?'
        assert r.bindings == (20,)

    def test_mysql_offset_only(self, mysql):
        r = mysql.compile(_paged(offset=20))
        assert r.sql == "SELECT * FROM `users` LIMIT 18446744073709551615 OFFSET %s"
        assert r.bindings == (20,)

    def test_postgres_offset_only(self, postgres):
        r = postgres.compile(_paged(offset=20))
        assert r.sql == 'SELECT * FROM "users" OFFSET %s'

    def test_sqlserver_top(self, sqlserver):
        r = sqlserver.compile(_paged(limit=10))
        assert r.sql == "SELECT TOP (?) * FROM [users]"
        assert r.bindings == (10,)

    def test_sqlserver_top_after_distinct(self, sqlserver):
        query = Query(
            is_distinct=True,
            clauses=[FromClause(table="users"), Column(name="city"), LimitOffset(limit=3)],
        )
        assert sqlserver.compile(query).sql == "SELECT DISTINCT TOP (?) [city] FROM [users]"

    def test_sqlserver_offset_fetch(self, sqlserver):
        query = Query(
            clauses=[
                FromClause(table="users"),
                OrderBy(column="id"),
                LimitOffset(limit=10, offset=20),
            ]
        )
        r = sqlserver.compile(query)
        assert r.sql == (
            "SELECT * FROM [users] ORDER BY [id] OFFSET ? ROWS FETCH NEXT ? ROWS ONLY"
        )
        assert r.bindings == (20, 10)

    def test_sqlserver_offset_without_limit(self, sqlserver):
        r = sqlserver.compile(_paged(offset=5))
        assert r.sql == "SELECT * FROM [users] OFFSET ? ROWS"
        assert r.bindings == (5,)


class TestBaseDialect:
    def test_ansi_defaults(self):
        class AnsiDialect(SQLDialect):
            @property
            def dialect_name(self) -> str:
                return "ansi"

        dialect = AnsiDialect()
        assert dialect.quote_identifier("a") == '"a"'
        assert dialect.quote_identifier("*") == "*"
        assert dialect.compile_upper('"a"') == 'UPPER("a")'
        assert dialect.compile_lower('"a"') == 'LOWER("a")'
        assert dialect.compile_date_part("year", '"d"') == 'YEAR("d")'
        assert dialect.compile_bool(True) == "true"
        assert dialect.compile_top(LimitOffset(limit=1), ParameterBinder()) is None

    def test_dialect_name_required(self):
        with pytest.raises(TypeError):
            SQLDialect()  # type: ignore[abstract]


class TestRegistry:
    def test_builtins_registered(self):
        assert {"sqlite", "postgres", "mysql", "sqlserver"} <= set(
            CompilerFactory.registered_dialects()
        )

    def test_unknown_dialect(self):
        with pytest.raises(CompilationError, match="Unsupported dialect: 'oracle'"):
            sqlweave.compile_query(Query(clauses=[FromClause(table="t")]), "oracle")

    def test_custom_dialect_via_decorator(self):
        @CompilerFactory.register("test_colon")
        class ColonDialect(SQLDialect):
            opening_identifier = "<"
            closing_identifier = ">"

            @property
            def dialect_name(self) -> str:
                return "test_colon"

            def param_placeholder(self) -> str:
                return ":p"

        query = Query(
            clauses=[
                FromClause(table="t"),
                BasicCondition(column="a", value=1),
                BasicCondition(column="b", value=2, engine="test_colon"),
            ]
        )
        r = sqlweave.compile_query(query, "test_colon")
        assert r.sql == "SELECT * FROM <t> WHERE <a> = :p AND <b> = :p"
        assert r.bindings == (1, 2)
        assert r.dialect == "test_colon"
        assert isinstance(CompilerFactory.create("test_colon"), ColonDialect)

    def test_compiler_exposes_dialect(self, sqlite):
        assert isinstance(sqlite, QueryCompiler)
        assert sqlite.dialect.dialect_name == "sqlite"


class TestSqlServerAggregateTop:
    def test_limit_reaches_aggregate_select(self, sqlserver):
        query = Query(
            clauses=[
                FromClause(table="users"),
                Column(name="city", component="group"),
                AggregateClause(type="count"),
                LimitOffset(limit=5),
            ]
        )
        r = sqlserver.compile(query)
        assert r.sql == "SELECT TOP (?) COUNT(*) AS [count] FROM [users] GROUP BY [city]"
        assert r.bindings == (5,)

    def test_top_binds_before_where(self, sqlserver):
        query = Query(
            clauses=[
                FromClause(table="users"),
                AggregateClause(type="max", columns=["age"]),
                BasicCondition(column="active", value=1),
                LimitOffset(limit=3),
            ]
        )
        r = sqlserver.compile(query)
        assert r.sql == (
            "SELECT TOP (?) MAX([age]) AS [count] FROM [users] WHERE [active] = ?"
        )
        assert r.bindings == (3, 1)

    def test_other_dialects_keep_trailing_limit(self, sqlite):
        query = Query(
            clauses=[FromClause(table="users"), AggregateClause(type="count"), LimitOffset(limit=5)]
        )
        r = sqlite.compile(query)
        assert r.sql == 'SELECT COUNT(*) AS "count" FROM "users" LIMIT ?'
        assert r.bindings == (5,)


class TestRegistryLookup:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("postgresql", "postgres"),
            ("PG", "postgres"),
            ("mssql", "sqlserver"),
            ("mariadb", "mysql"),
            (" SQLite ", "sqlite"),
        ],
    )
    def test_aliases_and_case(self, name, expected):
        assert CompilerFactory.create(name).dialect_name == expected

    def test_aliases_are_not_listed(self):
        assert "pg" not in CompilerFactory.registered_dialects()

    def test_resolve_passes_instances_through(self):
        dialect = SqlServerDialect()
        assert CompilerFactory.resolve(dialect) is dialect

    def test_compile_query_accepts_instance_or_alias(self):
        query = Query(clauses=[FromClause(table="t")])
        assert sqlweave.compile_query(query, MySQLDialect()).sql == "SELECT * FROM `t`"
        r = sqlweave.compile_query(query, "postgresql")
        assert r.dialect == "postgres"

    def test_alias_cannot_shadow_a_dialect_name(self):
        with pytest.raises(CompilationError, match="already a registered dialect name"):
            CompilerFactory.register_class("test_shadow", SQLiteDialect, "mysql")
