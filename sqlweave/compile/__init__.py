"""sqlweave compilation layer: Query → parameterized SQL."""
from sqlweave.compile.base import CompiledSQL, SQLDialect
from sqlweave.compile.builder import QueryCompiler
from sqlweave.compile.mysql import MySQLDialect
from sqlweave.compile.postgres import PostgresDialect
from sqlweave.compile.sqlite import SQLiteDialect
from sqlweave.compile.sqlserver import SqlServerDialect

__all__ = [
    "CompiledSQL",
    "SQLDialect",
    "QueryCompiler",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "SqlServerDialect",
]
