"""Compiler abstractions: CompiledSQL and the SQLDialect strategy.

The Strategy pattern is used:
- ``QueryCompiler`` owns the one compilation pipeline.
- ``SQLDialect`` subclasses supply the dialect-specific steps (identifier
  quoting, placeholder style, pagination, locking, built-in function
  spellings).  The defaults render ANSI-flavoured SQL.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sqlweave.compile.expression_builder import ParameterBinder
    from sqlweave.schema.clauses import LimitOffset, LockClause


@dataclass(frozen=True)
class CompiledSQL:
    """The output of a successful compilation.

    Attributes:
        sql: The compiled SQL string with positional placeholders.
        bindings: Values for the placeholders, in the order they appear in
            ``sql``.  Only clauses visible to ``dialect`` contribute.
        dialect: The dialect the query was compiled for.
    """

    sql: str
    bindings: tuple[Any, ...]
    dialect: str


class SQLDialect(ABC):
    """Abstract base for dialect strategies.

    Subclasses must name the dialect; every other hook has an ANSI default
    that can be overridden individually.
    """

    #: Opening identifier quote.
    opening_identifier: str = '"'
    #: Closing identifier quote.
    closing_identifier: str = '"'

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name, also used as the engine scope."""

    def quote_identifier(self, name: str) -> str:
        """Return a properly-quoted SQL identifier.

        Args:
            name: Unquoted identifier (a single segment, no dots).

        Returns:
            Quoted identifier; ``*`` is returned unchanged.
        """
        if name == "*":
            return name
        closing = self.closing_identifier
        escaped = name.replace(closing, closing + closing)
        return f"{self.opening_identifier}{escaped}{closing}"

    def param_placeholder(self) -> str:
        """Return the positional placeholder token."""
        return "?"

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def compile_top(self, limit: LimitOffset | None, binder: ParameterBinder) -> str | None:
        """Return a ``TOP``-style prefix placed right after ``SELECT``, or None."""
        return None

    def compile_limit(self, limit: LimitOffset | None, binder: ParameterBinder) -> str | None:
        """Return the trailing ``LIMIT`` fragment, binding its value."""
        if limit is None or not limit.has_limit():
            return None
        return f"LIMIT {binder.parameter(limit.limit)}"

    def compile_offset(self, limit: LimitOffset | None, binder: ParameterBinder) -> str | None:
        """Return the trailing ``OFFSET`` fragment, binding its value."""
        if limit is None or not limit.has_offset():
            return None
        return f"OFFSET {binder.parameter(limit.offset)}"

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    def compile_lock(self, lock: LockClause) -> str | None:
        """Return the row-locking fragment; the ANSI default renders nothing."""
        return None

    # ------------------------------------------------------------------
    # Built-in functions and literals
    # ------------------------------------------------------------------

    def compile_random(self, seed: str) -> str:
        return "RANDOM()"

    def compile_lower(self, value: str) -> str:
        return f"LOWER({value})"

    def compile_upper(self, value: str) -> str:
        return f"UPPER({value})"

    def compile_date_part(self, part: str, column: str) -> str:
        """Return the expression extracting ``part`` from ``column``."""
        return f"{part.upper()}({column})"

    def compile_bool(self, value: bool) -> str:
        return "true" if value else "false"
