"""SQLite dialect."""
from __future__ import annotations

from sqlweave.compile.base import SQLDialect
from sqlweave.compile.expression_builder import ParameterBinder
from sqlweave.schema.clauses import LimitOffset

# strftime() formats for the date parts SQLite can extract.
_DATE_FORMATS: dict[str, str] = {
    "date": "%Y-%m-%d",
    "time": "%H:%M:%S",
    "year": "%Y",
    "month": "%m",
    "day": "%d",
    "hour": "%H",
    "minute": "%M",
}

_NUMERIC_PARTS = frozenset({"year", "month", "day", "hour", "minute"})


class SQLiteDialect(SQLDialect):
    """SQLite-flavoured SQL.

    Parameter style: ``?`` – compatible with Python's built-in ``sqlite3``
    positional execution (``cursor.execute(sql, bindings)``).

    Note: SQLite has no row locking and no boolean type; lock clauses render
    nothing and booleans render as ``1`` / ``0``.
    """

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    def compile_limit(self, limit: LimitOffset | None, binder: ParameterBinder) -> str | None:
        # SQLite only accepts OFFSET after a LIMIT; -1 means "no limit".
        if limit is not None and limit.has_offset() and not limit.has_limit():
            return "LIMIT -1"
        return super().compile_limit(limit, binder)

    def compile_date_part(self, part: str, column: str) -> str:
        fmt = _DATE_FORMATS.get(part.lower())
        if fmt is None:
            return super().compile_date_part(part, column)
        sql = f"strftime('{fmt}', {column})"
        if part.lower() in _NUMERIC_PARTS:
            return f"CAST({sql} AS INTEGER)"
        return sql

    def compile_bool(self, value: bool) -> str:
        return "1" if value else "0"
