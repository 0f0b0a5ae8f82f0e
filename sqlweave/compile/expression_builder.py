"""Identifier, parameter and condition compilers.

``IdentifierWrapper`` and ``ParameterBinder`` are the leaves every other
builder calls.  ``ConditionBuilder`` flattens a condition list into one
boolean expression; sub-query conditions are compiled through an injected
``select_fn`` so they share the outer binder.

A single :class:`ParameterBinder` is created per ``compile()`` call and
threaded through every sub-builder and nested sub-query, so the bindings list
follows the left-to-right order of placeholders in the final text.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from sqlweave.compile.context import CompilationContext
from sqlweave.errors import CompilationError, UnrecognizedClauseError
from sqlweave.schema.base import Raw
from sqlweave.schema.clauses import AbstractColumn, Column, QueryColumn, RawColumn
from sqlweave.schema.conditions import (
    LIKE_OPERATORS,
    AbstractCondition,
    BasicCondition,
    BasicDateCondition,
    BasicStringCondition,
    BetweenCondition,
    BooleanCondition,
    ExistsCondition,
    InCondition,
    InQueryCondition,
    NestedCondition,
    NullCondition,
    RawCondition,
    SubQueryCondition,
    TwoColumnsCondition,
)

if TYPE_CHECKING:
    from sqlweave.schema.query import Query

_AS_SPLIT = re.compile(r"\s+as\s+", re.IGNORECASE)
_IDENTIFIER_MARKER = re.compile(r"\[([^\[\]]+)\]")
_BINDING_MARKER = re.compile(r"\?")


# ---------------------------------------------------------------------------
# Parameter binder (shared across all sub-builders in one run)
# ---------------------------------------------------------------------------


@dataclass
class ParameterBinder:
    """Accumulates bound values during a single compilation run.

    Attributes:
        placeholder: Dialect placeholder token emitted for every value.
        bindings: Values in emission order.
    """

    placeholder: str = "?"
    bindings: list[Any] = field(default_factory=list)

    def parameter(self, value: Any) -> str:
        """Bind ``value`` and return its placeholder; ``Raw`` is emitted verbatim."""
        if isinstance(value, Raw):
            return value.value
        self.bindings.append(value)
        return self.placeholder

    def parametrize(self, values: list[Any]) -> str:
        """Bind every value and return the comma-joined placeholders."""
        return ", ".join(self.parameter(v) for v in values)

    def raw(self, expression: str, bindings: list[Any]) -> str:
        """Bind ``bindings`` to the ``?`` markers of ``expression`` in order."""
        if len(_BINDING_MARKER.findall(expression)) != len(bindings):
            raise CompilationError(
                f"Raw expression {expression!r} expects a different number of "
                f"bindings than the {len(bindings)} supplied."
            )
        values = iter(bindings)
        return _BINDING_MARKER.sub(lambda _: self.parameter(next(values)), expression)


# ---------------------------------------------------------------------------
# Identifier wrapper
# ---------------------------------------------------------------------------


class IdentifierWrapper:
    """Quotes identifiers with the dialect's quote pair.

    Args:
        ctx: Compilation context (only the dialect is used).
    """

    def __init__(self, ctx: CompilationContext) -> None:
        self._dialect = ctx.dialect

    def wrap_value(self, value: str) -> str:
        """Quote a single identifier segment."""
        return self._dialect.quote_identifier(value)

    def wrap(self, value: str) -> str:
        """Quote a possibly qualified and aliased identifier.

        ``users.name as n`` becomes ``"users"."name" AS "n"``; expressions in
        parentheses are returned unchanged.
        """
        value = value.strip()
        if value.startswith("(") and value.endswith(")"):
            return value
        segments = _AS_SPLIT.split(value)
        if len(segments) > 1:
            return f"{self.wrap(segments[0])} AS {self.wrap_value(segments[-1])}"
        return ".".join(self.wrap_value(part.strip()) for part in value.split("."))

    def wrap_table(self, table: str) -> str:
        return self.wrap(table)

    def wrap_array(self, values: list[str]) -> list[str]:
        return [self.wrap(v) for v in values]

    def columnize(self, columns: list[str]) -> str:
        """Comma-join the wrapped ``columns``."""
        return ", ".join(self.wrap_array(columns))

    def wrap_identifiers(self, expression: str) -> str:
        """Raw mode: quote ``[ident]`` markers, pass everything else through."""
        return _IDENTIFIER_MARKER.sub(lambda m: self.wrap(m.group(1)), expression)


# ---------------------------------------------------------------------------
# Column list builder
# ---------------------------------------------------------------------------


class ColumnListBuilder:
    """Renders a comma-separated column list (SELECT and GROUP BY).

    Args:
        wrapper: Identifier wrapper.
        binder: Shared binder for raw column bindings.
        select_fn: Compiles a nested query as a SELECT statement.
    """

    def __init__(
        self,
        wrapper: IdentifierWrapper,
        binder: ParameterBinder,
        select_fn: Callable[[Query], str],
    ) -> None:
        self._wrap = wrapper
        self._binder = binder
        self._select_fn = select_fn

    def build(self, columns: list[AbstractColumn]) -> str:
        return ", ".join(self._build_column(c) for c in columns)

    def _build_column(self, column: AbstractColumn) -> str:
        if isinstance(column, Column):
            return self._wrap.wrap(column.name)
        if isinstance(column, RawColumn):
            return self._binder.raw(
                self._wrap.wrap_identifiers(column.expression), column.bindings
            )
        if isinstance(column, QueryColumn):
            sql = f"({self._select_fn(column.query)})"
            if column.query.alias:
                sql += f" AS {self._wrap.wrap_value(column.query.alias)}"
            return sql
        raise UnrecognizedClauseError(type(column).__name__, "Column")


# ---------------------------------------------------------------------------
# Condition builder
# ---------------------------------------------------------------------------


class ConditionBuilder:
    """Compiles condition lists (WHERE / HAVING / JOIN ON) to SQL.

    Args:
        ctx: Compilation context.
        binder: Shared binder.
        wrapper: Identifier wrapper.
        select_fn: Compiles a nested query as a SELECT statement.
    """

    def __init__(
        self,
        ctx: CompilationContext,
        binder: ParameterBinder,
        wrapper: IdentifierWrapper,
        select_fn: Callable[[Query], str],
    ) -> None:
        self._ctx = ctx
        self._binder = binder
        self._wrap = wrapper
        self._select_fn = select_fn

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, conditions: list[AbstractCondition]) -> str:
        """Flatten ``conditions`` into one boolean expression.

        Conditions scoped to another engine are dropped, at every nesting
        level.  The first non-empty fragment carries no connector; every later
        one is prefixed with ``AND`` or ``OR`` according to its own ``is_or``
        flag.  Blank fragments are skipped.
        """
        engine = self._ctx.engine
        parts: list[str] = []
        for condition in conditions:
            if not condition.applies_to(engine):
                continue
            compiled = self.build_one(condition).strip()
            if not compiled:
                continue
            if parts:
                compiled = ("OR " if condition.is_or else "AND ") + compiled
            parts.append(compiled)
        return " ".join(parts)

    def build_one(self, condition: AbstractCondition) -> str:
        """Compile a single condition, without any connector."""
        if isinstance(condition, RawCondition):
            return self._binder.raw(
                self._wrap.wrap_identifiers(condition.expression), condition.bindings
            )
        if isinstance(condition, BasicStringCondition):
            return self._build_string(condition)
        if isinstance(condition, BasicDateCondition):
            column = self._ctx.dialect.compile_date_part(
                condition.part, self._wrap.wrap(condition.column)
            )
            value = self._binder.parameter(condition.value)
            return self._negate(condition, f"{column} {condition.operator} {value}")
        if isinstance(condition, BasicCondition):
            column = self._wrap.wrap(condition.column)
            value = self._binder.parameter(condition.value)
            return self._negate(condition, f"{column} {condition.operator} {value}")
        if isinstance(condition, TwoColumnsCondition):
            prefix = "NOT " if condition.is_not else ""
            first = self._wrap.wrap(condition.first)
            second = self._wrap.wrap(condition.second)
            return f"{prefix}{first} {condition.operator} {second}"
        if isinstance(condition, NestedCondition):
            inner = self.build(condition.conditions)
            if not inner:
                return ""
            prefix = "NOT " if condition.is_not else ""
            return f"{prefix}({inner})"
        if isinstance(condition, SubQueryCondition):
            column = self._wrap.wrap(condition.column)
            sub_sql = self._select_fn(condition.query)
            return self._negate(condition, f"{column} {condition.operator} ({sub_sql})")
        if isinstance(condition, InCondition):
            return self._build_in(condition)
        if isinstance(condition, InQueryCondition):
            keyword = "NOT IN" if condition.is_not else "IN"
            sub_sql = self._select_fn(condition.query)
            return f"{self._wrap.wrap(condition.column)} {keyword} ({sub_sql})"
        if isinstance(condition, BetweenCondition):
            keyword = "NOT BETWEEN" if condition.is_not else "BETWEEN"
            lower = self._binder.parameter(condition.lower)
            higher = self._binder.parameter(condition.higher)
            return f"{self._wrap.wrap(condition.column)} {keyword} {lower} AND {higher}"
        if isinstance(condition, NullCondition):
            keyword = "IS NOT NULL" if condition.is_not else "IS NULL"
            return f"{self._wrap.wrap(condition.column)} {keyword}"
        if isinstance(condition, ExistsCondition):
            keyword = "NOT EXISTS" if condition.is_not else "EXISTS"
            return f"{keyword} ({self._select_fn(condition.query)})"
        if isinstance(condition, BooleanCondition):
            operator = "!=" if condition.is_not else "="
            value = self._ctx.dialect.compile_bool(condition.value)
            return f"{self._wrap.wrap(condition.column)} {operator} {value}"
        raise UnrecognizedClauseError(type(condition).__name__, "Condition")

    # ------------------------------------------------------------------
    # Variant helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _negate(condition: AbstractCondition, sql: str) -> str:
        return f"NOT ({sql})" if condition.is_not else sql

    def _build_string(self, condition: BasicStringCondition) -> str:
        column = self._wrap.wrap(condition.column)
        value = condition.value
        operator = condition.operator.lower()
        if operator in LIKE_OPERATORS:
            if operator == "starts":
                value = f"{value}%"
            elif operator == "ends":
                value = f"%{value}"
            elif operator == "contains":
                value = f"%{value}%"
            operator = "LIKE"
        else:
            operator = condition.operator
        if not condition.case_sensitive:
            column = self._ctx.dialect.compile_lower(column)
            value = value.lower()
        sql = f"{column} {operator} {self._binder.parameter(value)}"
        return self._negate(condition, sql)

    def _build_in(self, condition: InCondition) -> str:
        if not condition.values:
            # IN () is invalid SQL; an empty set matches nothing.
            return "1 = 1" if condition.is_not else "1 = 0"
        keyword = "NOT IN" if condition.is_not else "IN"
        values = self._binder.parametrize(condition.values)
        return f"{self._wrap.wrap(condition.column)} {keyword} ({values})"
