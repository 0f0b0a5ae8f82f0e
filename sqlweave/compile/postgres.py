"""PostgreSQL dialect."""

from __future__ import annotations

from sqlweave.compile.base import SQLDialect
from sqlweave.schema.clauses import LockClause


class PostgresDialect(SQLDialect):
    """PostgreSQL-flavoured SQL.

    Parameter style: ``%s`` – compatible with ``psycopg2`` and ``psycopg``
    positional execution.
    """

    @property
    def dialect_name(self) -> str:
        return "postgres"

    def param_placeholder(self) -> str:
        return "%s"

    def compile_lock(self, lock: LockClause) -> str | None:
        return f"FOR {lock.mode.upper()}"

    def compile_date_part(self, part: str, column: str) -> str:
        """Compile with ``DATE_PART`` and an explicit ``::TIMESTAMP`` cast.

        The field name must be an inline string literal: a bound parameter
        leaves its type as ``unknown``, which PostgreSQL cannot resolve to a
        ``date_part`` overload.  The cast lets TEXT columns holding ISO-8601
        strings resolve as well.
        """
        lowered = part.lower()
        if lowered == "date":
            return f"{column}::DATE"
        if lowered == "time":
            return f"{column}::TIME"
        safe = lowered.replace("'", "''")
        return f"DATE_PART('{safe}', {column}::TIMESTAMP)"
