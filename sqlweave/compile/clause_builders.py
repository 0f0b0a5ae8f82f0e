"""Clause-level SQL builders.

Each class handles exactly one SQL component and returns either a fragment or
``None`` when the component is absent, so the assembler can skip it without
leaving stray whitespace.  Builders that embed nested queries receive a
*shared select function* (``Callable[[Query], str]``) that compiles with the
same :class:`~sqlweave.compile.expression_builder.ParameterBinder` as the
outer query.

Classes
-------
TableExpressionBuilder — ``<table> | (<select>) AS alias | <raw>``
SelectClauseBuilder    — ``SELECT [DISTINCT] <columns>``
AggregateClauseBuilder — ``SELECT <FUNC>(<columns>) AS alias``
JoinClauseBuilder      — ``<TYPE> JOIN <table> ON …``
HavingClauseBuilder    — ``HAVING …`` (keyword repeated per condition)
OrderClauseBuilder     — ``ORDER BY …``
UnionClauseBuilder     — ``UNION [ALL] …`` / ``INTERSECT`` / ``EXCEPT``
CteBuilder             — ``WITH <alias> AS (…), … ``
"""
from __future__ import annotations

from typing import Callable

from sqlweave.compile.context import CompilationContext
from sqlweave.compile.expression_builder import (
    ColumnListBuilder,
    ConditionBuilder,
    IdentifierWrapper,
    ParameterBinder,
)
from sqlweave.errors import CompilationError, UnrecognizedClauseError
from sqlweave.schema.clauses import (
    AbstractFrom,
    AggregateClause,
    FromClause,
    JoinClause,
    LimitOffset,
    OrderBy,
    QueryFromClause,
    RandomOrderBy,
    RawFromClause,
    RawOrderBy,
    RawUnionClause,
    UnionClause,
)
from sqlweave.schema.query import Query


class TableExpressionBuilder:
    """Resolves a FROM / JOIN / CTE target into SQL text."""

    def __init__(
        self,
        wrapper: IdentifierWrapper,
        binder: ParameterBinder,
        select_fn: Callable[[Query], str],
    ) -> None:
        self._wrap = wrapper
        self._binder = binder
        self._select_fn = select_fn

    def build(self, clause: AbstractFrom) -> str:
        if isinstance(clause, RawFromClause):
            return self._binder.raw(
                self._wrap.wrap_identifiers(clause.expression), clause.bindings
            )
        if isinstance(clause, QueryFromClause):
            sql = f"({self._select_fn(clause.query)})"
            alias = clause.alias_name
            if alias:
                sql += f" AS {self._wrap.wrap_value(alias)}"
            return sql
        if isinstance(clause, FromClause):
            return self._wrap.wrap_table(clause.table)
        raise UnrecognizedClauseError(type(clause).__name__, "TableExpression")


def _compile_top(
    ctx: CompilationContext, binder: ParameterBinder, query: Query
) -> str | None:
    """Ask the dialect for a ``TOP``-style prefix; binds the limit if one is emitted."""
    limit = query.get_one("limit", ctx.engine)
    return ctx.dialect.compile_top(limit if isinstance(limit, LimitOffset) else None, binder)


class SelectClauseBuilder:
    """Builds ``SELECT [DISTINCT] [TOP (?)] <columns>``.

    Returns ``None`` when the query aggregates (the aggregate builder renders
    the SELECT) or declares no columns.
    """

    def __init__(
        self,
        ctx: CompilationContext,
        binder: ParameterBinder,
        columns: ColumnListBuilder,
    ) -> None:
        self._ctx = ctx
        self._binder = binder
        self._columns = columns

    def build(self, query: Query) -> str | None:
        engine = self._ctx.engine
        if query.has("aggregate", engine) or not query.has("select", engine):
            return None
        parts = ["SELECT"]
        if query.is_distinct:
            parts.append("DISTINCT")
        top = _compile_top(self._ctx, self._binder, query)
        if top:
            parts.append(top)
        parts.append(self._columns.build(query.get("select", engine)) or "*")
        return " ".join(parts)


class AggregateClauseBuilder:
    """Builds ``SELECT [TOP (?) ]<FUNC>([DISTINCT ]<columns>) AS <alias>``."""

    def __init__(
        self,
        ctx: CompilationContext,
        wrapper: IdentifierWrapper,
        binder: ParameterBinder,
    ) -> None:
        self._ctx = ctx
        self._wrap = wrapper
        self._binder = binder

    def build(self, query: Query) -> str | None:
        clause = query.get_one("aggregate", self._ctx.engine)
        if clause is None:
            return None
        if not isinstance(clause, AggregateClause):
            raise UnrecognizedClauseError(type(clause).__name__, "Aggregate")
        columns = self._wrap.columnize(clause.columns or ["*"])
        if query.is_distinct and columns != "*":
            columns = f"DISTINCT {columns}"
        alias = clause.alias or self._ctx.options.aggregate_alias
        top = _compile_top(self._ctx, self._binder, query)
        prefix = f"SELECT {top} " if top else "SELECT "
        return f"{prefix}{clause.type.upper()}({columns}) AS {self._wrap.wrap_value(alias)}"


class JoinClauseBuilder:
    """Builds the space-joined ``<TYPE> JOIN <table>[ ON <conditions>]`` list.

    Deep join markers must already be expanded by
    :class:`~sqlweave.compile.deep_join.DeepJoinResolver`.
    """

    def __init__(
        self,
        ctx: CompilationContext,
        tables: TableExpressionBuilder,
        conditions: ConditionBuilder,
    ) -> None:
        self._ctx = ctx
        self._tables = tables
        self._conditions = conditions

    def build(self, query: Query) -> str | None:
        joins = query.get("join", self._ctx.engine)
        if not joins:
            return None
        return " ".join(self._build_join(j) for j in joins)

    def _build_join(self, clause: object) -> str:
        if not isinstance(clause, JoinClause):
            raise UnrecognizedClauseError(type(clause).__name__, "Join")
        join = clause.join
        table_sql = self._tables.build(join.table)
        on_sql = self._conditions.build(join.conditions)
        on_clause = f" ON {on_sql}" if on_sql else ""
        return f"{join.type} JOIN {table_sql}{on_clause}"


class HavingClauseBuilder:
    """Builds the HAVING fragment.

    Each compiled condition gets its own ``HAVING`` keyword, preceded by its
    connector from the second condition on:
    ``HAVING a > ? AND HAVING b < ?``.
    """

    def __init__(self, ctx: CompilationContext, conditions: ConditionBuilder) -> None:
        self._ctx = ctx
        self._conditions = conditions

    def build(self, query: Query) -> str | None:
        havings = query.get("having", self._ctx.engine)
        parts: list[str] = []
        for condition in havings:
            compiled = self._conditions.build_one(condition).strip()
            if not compiled:
                continue
            connector = ("OR " if condition.is_or else "AND ") if parts else ""
            parts.append(f"{connector}HAVING {compiled}")
        return " ".join(parts) or None


class OrderClauseBuilder:
    """Builds ``ORDER BY <items>``; only descending items get a suffix."""

    def __init__(
        self,
        ctx: CompilationContext,
        wrapper: IdentifierWrapper,
        binder: ParameterBinder,
    ) -> None:
        self._ctx = ctx
        self._wrap = wrapper
        self._binder = binder

    def build(self, query: Query) -> str | None:
        orders = query.get("order", self._ctx.engine)
        if not orders:
            return None
        return "ORDER BY " + ", ".join(self._build_item(o) for o in orders)

    def _build_item(self, item: object) -> str:
        if isinstance(item, RawOrderBy):
            return self._binder.raw(self._wrap.wrap_identifiers(item.expression), item.bindings)
        if isinstance(item, RandomOrderBy):
            return self._ctx.dialect.compile_random(item.seed)
        if isinstance(item, OrderBy):
            column = self._wrap.wrap(item.column)
            return column if item.ascending else f"{column} DESC"
        raise UnrecognizedClauseError(type(item).__name__, "Order")


class UnionClauseBuilder:
    """Builds ``UNION [ALL] <select>`` fragments (also INTERSECT / EXCEPT)."""

    def __init__(
        self,
        ctx: CompilationContext,
        wrapper: IdentifierWrapper,
        binder: ParameterBinder,
        select_fn: Callable[[Query], str],
    ) -> None:
        self._ctx = ctx
        self._wrap = wrapper
        self._binder = binder
        self._select_fn = select_fn

    def build(self, query: Query) -> str | None:
        unions = query.get("union", self._ctx.engine)
        if not unions:
            return None
        return " ".join(self._build_union(u) for u in unions)

    def _build_union(self, clause: object) -> str:
        if isinstance(clause, RawUnionClause):
            return self._binder.raw(self._wrap.wrap_identifiers(clause.expression), clause.bindings)
        if isinstance(clause, UnionClause):
            keyword = clause.operation.upper()
            if clause.all:
                keyword += " ALL"
            return f"{keyword} {self._select_fn(clause.query)}"
        raise UnrecognizedClauseError(type(clause).__name__, "Union")


class CteBuilder:
    """Builds the ``WITH <alias> AS (<body>)[, …] `` prefix.

    Every CTE must carry an alias.  Raw bodies go through raw mode; sub-query
    bodies are compiled as SELECT statements with the shared binder.
    """

    def __init__(
        self,
        ctx: CompilationContext,
        wrapper: IdentifierWrapper,
        binder: ParameterBinder,
        select_fn: Callable[[Query], str],
    ) -> None:
        self._ctx = ctx
        self._wrap = wrapper
        self._binder = binder
        self._select_fn = select_fn

    def build(self, query: Query) -> str:
        ctes = query.get("cte", self._ctx.engine)
        if not ctes:
            return ""
        parts = [self._build_cte(c) for c in ctes]
        return f"WITH {', '.join(parts)} "

    def _build_cte(self, clause: object) -> str:
        if isinstance(clause, (RawFromClause, QueryFromClause)):
            alias = clause.alias_name
            if not alias:
                raise CompilationError("Every CTE requires an alias.", clause="cte")
            if isinstance(clause, RawFromClause):
                body = self._binder.raw(
                    self._wrap.wrap_identifiers(clause.expression), clause.bindings
                )
            else:
                body = self._select_fn(clause.query)
            return f"{self._wrap.wrap_value(alias)} AS ({body})"
        raise UnrecognizedClauseError(type(clause).__name__, "Cte")
