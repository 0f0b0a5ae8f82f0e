"""Test fixtures: sample DDL and reusable queries."""

from __future__ import annotations

from pathlib import Path

from sqlweave.schema import BasicCondition, Column, FromClause, OrderBy, Query

_FIXTURES_DIR = Path(__file__).parent


def load_ddl() -> str:
    """Return the sample SQLite DDL used by the integration tests."""
    return (_FIXTURES_DIR / "ddl_sqlite.sql").read_text()


def users_query(*extra) -> Query:
    """``SELECT "id", "name" FROM "users" WHERE "age" > 18 ORDER BY "name" DESC`` plus ``extra``."""
    return Query(
        clauses=[
            FromClause(table="users"),
            Column(name="id"),
            Column(name="name"),
            BasicCondition(column="age", operator=">", value=18),
            OrderBy(column="name", ascending=False),
            *extra,
        ]
    )
