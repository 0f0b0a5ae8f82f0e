"""SQL Server dialect."""

from __future__ import annotations

from sqlweave.compile.base import SQLDialect
from sqlweave.compile.expression_builder import ParameterBinder
from sqlweave.schema.clauses import LimitOffset


class SqlServerDialect(SQLDialect):
    """SQL Server (T-SQL) flavoured SQL.

    Parameter style: ``?`` – compatible with ``pyodbc``.

    Pagination: a limit without an offset becomes ``SELECT TOP (?)``; with an
    offset it becomes ``OFFSET ? ROWS FETCH NEXT ? ROWS ONLY``, which SQL
    Server only accepts after an ``ORDER BY``.
    """

    opening_identifier = "["
    closing_identifier = "]"

    @property
    def dialect_name(self) -> str:
        return "sqlserver"

    def compile_top(self, limit: LimitOffset | None, binder: ParameterBinder) -> str | None:
        if limit is None or not limit.has_limit() or limit.has_offset():
            return None
        return f"TOP ({binder.parameter(limit.limit)})"

    def compile_limit(self, limit: LimitOffset | None, binder: ParameterBinder) -> str | None:
        # Rendered by compile_top or compile_offset.
        return None

    def compile_offset(self, limit: LimitOffset | None, binder: ParameterBinder) -> str | None:
        if limit is None or not limit.has_offset():
            return None
        sql = f"OFFSET {binder.parameter(limit.offset)} ROWS"
        if limit.has_limit():
            sql += f" FETCH NEXT {binder.parameter(limit.limit)} ROWS ONLY"
        return sql

    def compile_random(self, seed: str) -> str:
        return "NEWID()"

    def compile_date_part(self, part: str, column: str) -> str:
        lowered = part.lower()
        if lowered in ("date", "time"):
            return f"CAST({column} AS {lowered.upper()})"
        return f"DATEPART({lowered.upper()}, {column})"

    def compile_bool(self, value: bool) -> str:
        return "cast(1 as bit)" if value else "cast(0 as bit)"
