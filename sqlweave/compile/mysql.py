"""MySQL dialect."""

from __future__ import annotations

from sqlweave.compile.base import SQLDialect
from sqlweave.compile.expression_builder import ParameterBinder
from sqlweave.schema.clauses import LimitOffset, LockClause


class MySQLDialect(SQLDialect):
    """MySQL-flavoured SQL.

    Parameter style: ``%s`` – compatible with ``PyMySQL`` and
    ``mysql-connector-python`` positional execution.

    Identifiers are quoted with backticks (`` ` ``) rather than double-quotes.
    """

    opening_identifier = "`"
    closing_identifier = "`"

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def param_placeholder(self) -> str:
        return "%s"

    def compile_limit(self, limit: LimitOffset | None, binder: ParameterBinder) -> str | None:
        # MySQL only accepts OFFSET after a LIMIT; use the largest row count.
        if limit is not None and limit.has_offset() and not limit.has_limit():
            return "LIMIT 18446744073709551615"
        return super().compile_limit(limit, binder)

    def compile_random(self, seed: str) -> str:
        return f"RAND({seed})" if seed else "RAND()"

    def compile_lock(self, lock: LockClause) -> str | None:
        return f"FOR {lock.mode.upper()}"

    def compile_date_part(self, part: str, column: str) -> str:
        """Translate to ``EXTRACT(unit FROM col)``; ``date`` / ``time`` use casts.

        MySQL has no ``DATE_PART``; the unit is an unquoted keyword.
        """
        lowered = part.lower()
        if lowered in ("date", "time"):
            return f"{lowered.upper()}({column})"
        return f"EXTRACT({part.upper()} FROM {column})"
