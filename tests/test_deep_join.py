"""Unit tests for deep join expansion."""

from __future__ import annotations

import pytest

from sqlweave.compile.builder import QueryCompiler
from sqlweave.compile.context import CompilationContext
from sqlweave.compile.deep_join import DeepJoinResolver
from sqlweave.compile.sqlite import SQLiteDialect
from sqlweave.errors import MissingBaseAliasError
from sqlweave.schema import (
    BasicCondition,
    CompilerOptions,
    DeepJoinClause,
    FromClause,
    Join,
    JoinClause,
    Query,
    TwoColumnsCondition,
)


def _resolver(options: CompilerOptions | None = None) -> DeepJoinResolver:
    return DeepJoinResolver(
        CompilationContext(dialect=SQLiteDialect(), options=options or CompilerOptions())
    )


def test_two_level_path(sqlite):
    query = Query(
        clauses=[FromClause(table="Posts as A"), DeepJoinClause(expression="Author.Books")]
    )
    assert sqlite.compile(query).sql == (
        'SELECT * FROM "Posts" AS "A" '
        'INNER JOIN "Author" ON "A"."AuthorId" = "Author"."Id" '
        'INNER JOIN "Books" ON "Author"."BookId" = "Books"."Id"'
    )


def test_unaliased_base_uses_table_name(sqlite):
    query = Query(
        clauses=[FromClause(table="Books"), DeepJoinClause(expression="Publishers", type="LEFT")]
    )
    assert sqlite.compile(query).sql == (
        'SELECT * FROM "Books" '
        'LEFT JOIN "Publishers" ON "Books"."PublisherId" = "Publishers"."Id"'
    )


def test_position_among_joins_is_preserved():
    explicit_before = JoinClause(
        join=Join(
            table=FromClause(table="Tags"),
            conditions=[TwoColumnsCondition(first="P.TagId", second="Tags.Id")],
        )
    )
    explicit_after = JoinClause(join=Join(type="CROSS", table=FromClause(table="Misc")))
    query = Query(
        clauses=[
            FromClause(table="Posts as P"),
            explicit_before,
            DeepJoinClause(expression="Author"),
            explicit_after,
        ]
    )
    expanded = _resolver().expand(query)
    joins = expanded.get("join")
    assert joins[0] is explicit_before
    assert isinstance(joins[1], JoinClause)
    assert joins[1].join.table.table == "Author"
    assert joins[2] is explicit_after


def test_input_query_is_not_mutated():
    marker = DeepJoinClause(expression="Author.Books")
    query = Query(clauses=[FromClause(table="Posts as A"), marker])
    expanded = _resolver().expand(query)
    assert query.clauses[1] is marker
    assert len(query.clauses) == 2
    assert len(expanded.clauses) == 3
    assert not any(isinstance(c, DeepJoinClause) for c in expanded.clauses)


def test_nothing_to_expand_returns_same_query():
    query = Query(clauses=[FromClause(table="Posts")])
    assert _resolver().expand(query) is query


def test_marker_for_other_engine_is_kept(sqlite):
    marker = DeepJoinClause(expression="Author", engine="postgres")
    query = Query(clauses=[FromClause(table="Posts"), marker])
    assert _resolver().expand(query) is query
    assert sqlite.compile(query).sql == 'SELECT * FROM "Posts"'


def test_generated_joins_keep_marker_engine():
    query = Query(
        clauses=[FromClause(table="Posts"), DeepJoinClause(expression="Author", engine="sqlite")]
    )
    (join,) = _resolver().expand(query).get("join", "sqlite")
    assert join.engine == "sqlite"


def test_empty_path_produces_no_joins(sqlite):
    query = Query(clauses=[FromClause(table="Posts"), DeepJoinClause(expression="")])
    assert sqlite.compile(query).sql == 'SELECT * FROM "Posts"'


def test_marker_overrides():
    query = Query(
        clauses=[
            FromClause(table="Posts as P"),
            DeepJoinClause(expression="Authors", source_key_suffix="_id", target_key="pk"),
        ]
    )
    (join,) = _resolver().expand(query).get("join")
    (condition,) = join.join.conditions
    assert condition.first == "P.Author_id"
    assert condition.second == "Authors.pk"


def test_key_generators():
    query = Query(
        clauses=[
            FromClause(table="posts as p"),
            DeepJoinClause(
                expression="author.country",
                source_key_generator=lambda target: f"{target}_fk",
                target_key_generator=lambda target: f"{target}_pk",
            ),
        ]
    )
    first, second = _resolver().expand(query).get("join")
    assert first.join.conditions[0].first == "p.author_fk"
    assert first.join.conditions[0].second == "author.author_pk"
    assert second.join.conditions[0].first == "author.country_fk"
    assert second.join.conditions[0].second == "country.country_pk"


def test_source_generator_without_target_generator_uses_options():
    query = Query(
        clauses=[
            FromClause(table="posts"),
            DeepJoinClause(expression="author", source_key_generator=str.upper),
        ]
    )
    (join,) = _resolver(CompilerOptions(deep_join_target_key="key")).expand(query).get("join")
    assert join.join.conditions[0].first == "posts.AUTHOR"
    assert join.join.conditions[0].second == "author.key"


def test_compiler_options_change_convention():
    compiler = QueryCompiler(
        SQLiteDialect(),
        CompilerOptions(deep_join_source_key_suffix="_id", deep_join_target_key="id"),
    )
    query = Query(
        clauses=[FromClause(table="posts"), DeepJoinClause(expression="categories")]
    )
    assert compiler.compile(query).sql == (
        'SELECT * FROM "posts" INNER JOIN "categories" '
        'ON "posts"."category_id" = "categories"."id"'
    )


def test_where_bindings_unaffected(sqlite):
    query = Query(
        clauses=[
            FromClause(table="Posts as A"),
            DeepJoinClause(expression="Author"),
            BasicCondition(column="Author.Name", value="Amr"),
        ]
    )
    r = sqlite.compile(query)
    assert r.sql.endswith('WHERE "Author"."Name" = ?')
    assert r.bindings == ("Amr",)


def test_missing_base_raises():
    query = Query(clauses=[DeepJoinClause(expression="Author")])
    with pytest.raises(MissingBaseAliasError) as exc:
        _resolver().expand(query)
    assert exc.value.expression == "Author"
