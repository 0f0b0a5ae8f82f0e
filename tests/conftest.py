"""Shared pytest fixtures for sqlweave unit and integration tests."""
from __future__ import annotations

import pytest

from sqlweave.compile.builder import QueryCompiler
from sqlweave.compile.mysql import MySQLDialect
from sqlweave.compile.postgres import PostgresDialect
from sqlweave.compile.sqlite import SQLiteDialect
from sqlweave.compile.sqlserver import SqlServerDialect


@pytest.fixture(scope="session")
def sqlite() -> QueryCompiler:
    """Compiler for the SQLite dialect (``?`` placeholders, ``"`` quotes)."""
    return QueryCompiler(SQLiteDialect())


@pytest.fixture(scope="session")
def postgres() -> QueryCompiler:
    return QueryCompiler(PostgresDialect())


@pytest.fixture(scope="session")
def mysql() -> QueryCompiler:
    return QueryCompiler(MySQLDialect())


@pytest.fixture(scope="session")
def sqlserver() -> QueryCompiler:
    return QueryCompiler(SqlServerDialect())
