"""sqlweave – the compilation engine of a fluent SQL query builder.

Turns an engine-agnostic ``Query`` (an ordered list of typed clauses) into
dialect-specific SQL text plus the ordered list of bound values.

Public API
----------
``compile_query``
    Compile a Query for a registered dialect name.

``QueryCompiler``
    The compilation pipeline, parameterized by a ``SQLDialect`` strategy.

Extensibility
-------------
New dialects can be registered via::

    from sqlweave.compile.registry import CompilerFactory

    @CompilerFactory.register("oracle", "ora")
    class OracleDialect(SQLDialect):
        ...

After registration, ``compile_query(query, "oracle")`` (or ``"ora"``) picks it up.
"""

from __future__ import annotations

from sqlweave.compile.base import CompiledSQL, SQLDialect
from sqlweave.compile.builder import QueryCompiler
from sqlweave.compile.mysql import MySQLDialect
from sqlweave.compile.postgres import PostgresDialect
from sqlweave.compile.registry import CompilerFactory
from sqlweave.compile.sqlite import SQLiteDialect
from sqlweave.compile.sqlserver import SqlServerDialect
from sqlweave.errors import (
    CompilationError,
    InvalidTableExpressionError,
    MissingBaseAliasError,
    MissingTargetTableError,
    SQLWeaveError,
    UnrecognizedClauseError,
)
from sqlweave.schema.options import CompilerOptions
from sqlweave.schema.query import Query


# ---------------------------------------------------------------------------
# Register built-in dialects with CompilerFactory
# ---------------------------------------------------------------------------

CompilerFactory.register_class("sqlite", SQLiteDialect, "sqlite3")
CompilerFactory.register_class("postgres", PostgresDialect, "postgresql", "pg")
CompilerFactory.register_class("mysql", MySQLDialect, "mariadb")
CompilerFactory.register_class("sqlserver", SqlServerDialect, "mssql")

__all__ = [
    # Core pipeline
    "compile_query",
    "QueryCompiler",
    "CompiledSQL",
    "Query",
    "CompilerOptions",
    # Dialects
    "SQLDialect",
    "CompilerFactory",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "SqlServerDialect",
    # Errors
    "SQLWeaveError",
    "CompilationError",
    "MissingTargetTableError",
    "InvalidTableExpressionError",
    "UnrecognizedClauseError",
    "MissingBaseAliasError",
]


def compile_query(
    query: Query,
    dialect: str | SQLDialect = "sqlite",
    options: CompilerOptions | None = None,
) -> CompiledSQL:
    """Compile ``query`` for ``dialect``, a registered name or alias or an instance.

    This is the main entry point::

        compiled = sqlweave.compile_query(query, "postgres")
        cursor.execute(compiled.sql, compiled.bindings)

    Args:
        query: A fully built Query.
        dialect: Registered dialect name or alias, or a ``SQLDialect`` instance.
        options: Optional naming-convention defaults.

    Returns:
        ``CompiledSQL`` with ``sql``, ``bindings`` and ``dialect``.

    Raises:
        CompilationError: (or subclass) if the dialect is unknown or the query
            cannot be compiled.
    """
    return QueryCompiler(CompilerFactory.resolve(dialect), options).compile(query)
