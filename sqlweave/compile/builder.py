"""Core Query → SQL compilation logic.

``QueryCompiler`` is the top-level orchestrator.  It wires together focused
clause-level and expression-level sub-builders, then assembles one of four
statement shapes.  All dialect-specific behaviour is delegated to the injected
``SQLDialect``; clause rendering is delegated to the sub-builder hierarchy.

Sub-builder hierarchy
---------------------
QueryCompiler
  ├── DeepJoinResolver        (deep_join.py)
  ├── IdentifierWrapper       (expression_builder.py)
  ├── ColumnListBuilder       (expression_builder.py)
  ├── ConditionBuilder        (expression_builder.py)
  ├── TableExpressionBuilder  (clause_builders.py)
  ├── SelectClauseBuilder     (clause_builders.py)
  ├── AggregateClauseBuilder  (clause_builders.py)
  ├── JoinClauseBuilder       (clause_builders.py)
  ├── HavingClauseBuilder     (clause_builders.py)
  ├── OrderClauseBuilder      (clause_builders.py)
  ├── UnionClauseBuilder      (clause_builders.py)
  └── CteBuilder              (clause_builders.py)

Runtime binder sharing
----------------------
A single :class:`~sqlweave.compile.expression_builder.ParameterBinder` is
created per ``compile()`` call and threaded through every sub-builder and
every nested query (CTEs, unions, derived tables, sub-query conditions).
Fragments are compiled in the order they appear in the output, so the
bindings list matches the placeholders left to right.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from sqlweave.compile.base import CompiledSQL, SQLDialect
from sqlweave.compile.clause_builders import (
    AggregateClauseBuilder,
    CteBuilder,
    HavingClauseBuilder,
    JoinClauseBuilder,
    OrderClauseBuilder,
    SelectClauseBuilder,
    TableExpressionBuilder,
    UnionClauseBuilder,
)
from sqlweave.compile.context import CompilationContext
from sqlweave.compile.deep_join import DeepJoinResolver
from sqlweave.compile.expression_builder import (
    ColumnListBuilder,
    ConditionBuilder,
    IdentifierWrapper,
    ParameterBinder,
)
from sqlweave.errors import (
    CompilationError,
    InvalidTableExpressionError,
    MissingTargetTableError,
    UnrecognizedClauseError,
)
from sqlweave.schema.clauses import (
    Column,
    FromClause,
    InsertClause,
    InsertQueryClause,
    LimitOffset,
    LockClause,
)
from sqlweave.schema.options import CompilerOptions
from sqlweave.schema.query import Query

logger = logging.getLogger(__name__)


@dataclass
class _SubBuilders:
    """The sub-builder graph for one compilation run."""

    binder: ParameterBinder
    wrap: IdentifierWrapper
    columns: ColumnListBuilder
    conditions: ConditionBuilder
    tables: TableExpressionBuilder
    select: SelectClauseBuilder
    aggregate: AggregateClauseBuilder
    join: JoinClauseBuilder
    having: HavingClauseBuilder
    order: OrderClauseBuilder
    union: UnionClauseBuilder
    cte: CteBuilder


def _check_pairs(clause: InsertClause, statement: str) -> None:
    if len(clause.columns) != len(clause.values):
        raise CompilationError(
            f"Got {len(clause.columns)} columns but {len(clause.values)} values to {statement}.",
            clause=statement,
        )


class QueryCompiler:
    """Compiles a fully built Query to dialect-specific parameterized SQL.

    The compiler holds only immutable configuration, so one instance can be
    shared between threads.

    Args:
        dialect: Dialect strategy instance.
        options: Naming-convention defaults; ``CompilerOptions()`` if omitted.
    """

    def __init__(
        self,
        dialect: SQLDialect,
        options: CompilerOptions | None = None,
    ) -> None:
        self._ctx = CompilationContext(dialect=dialect, options=options or CompilerOptions())
        self._deep_joins = DeepJoinResolver(self._ctx)

    @property
    def dialect(self) -> SQLDialect:
        return self._ctx.dialect

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compile(self, query: Query) -> CompiledSQL:
        """Compile ``query`` to parameterized SQL.

        Args:
            query: A fully built Query.

        Returns:
            :class:`~sqlweave.compile.base.CompiledSQL` with the ``sql``
            string and the ordered ``bindings``.

        Raises:
            CompilationError: (or subclass) if the query is structurally
                incomplete or contains a clause variant with no compiler.
        """
        engine = self._ctx.engine
        logger.debug("Compiling %s query for engine '%s'", query.method, engine)

        binder = ParameterBinder(placeholder=self._ctx.dialect.param_placeholder())
        sub = self._make_sub_builders(binder)

        # The WITH block precedes the statement, so it binds first.
        cte_sql = sub.cte.build(query)

        if query.method == "insert":
            sql = self._compile_insert(query, sub)
        elif query.method == "update":
            sql = self._compile_update(query, sub)
        elif query.method == "delete":
            sql = self._compile_delete(query, sub)
        else:
            sql = self._compile_select(query, sub)

        return CompiledSQL(
            sql=cte_sql + sql,
            bindings=tuple(binder.bindings),
            dialect=engine,
        )

    # ------------------------------------------------------------------
    # SELECT
    # ------------------------------------------------------------------

    def _compile_select(self, query: Query, sub: _SubBuilders) -> str:
        engine = self._ctx.engine
        query = self._deep_joins.expand(query)
        if not query.has("select", engine):
            query = query.model_copy(update={"clauses": [*query.clauses, Column(name="*")]})

        limit = query.get_one("limit", engine)
        if limit is not None and not isinstance(limit, LimitOffset):
            raise UnrecognizedClauseError(type(limit).__name__, "Limit")
        lock = query.get_one("lock", engine)
        if lock is not None and not isinstance(lock, LockClause):
            raise UnrecognizedClauseError(type(lock).__name__, "Lock")

        # Fixed component order; each entry is evaluated in turn so bindings
        # follow the output order.
        components: list[Callable[[], str | None]] = [
            lambda: sub.aggregate.build(query),
            lambda: sub.select.build(query),
            lambda: self._compile_from(query, sub),
            lambda: sub.join.build(query),
            lambda: self._compile_wheres(query, sub),
            lambda: self._compile_groups(query, sub),
            lambda: sub.having.build(query),
            lambda: sub.order.build(query),
            lambda: self._ctx.dialect.compile_limit(limit, sub.binder),
            lambda: self._ctx.dialect.compile_offset(limit, sub.binder),
            lambda: sub.union.build(query),
            lambda: self._ctx.dialect.compile_lock(lock) if lock is not None else None,
        ]
        parts = []
        for component in components:
            fragment = component()
            if fragment is not None and fragment.strip():
                parts.append(fragment.strip())
        return " ".join(parts)

    def _compile_from(self, query: Query, sub: _SubBuilders) -> str | None:
        clause = query.get_one("from", self._ctx.engine)
        if clause is None:
            return None
        return f"FROM {sub.tables.build(clause)}"

    def _compile_wheres(self, query: Query, sub: _SubBuilders) -> str | None:
        engine = self._ctx.engine
        if not query.has("from", engine) or not query.has("where", engine):
            return None
        sql = sub.conditions.build(query.get("where", engine))
        return f"WHERE {sql}" if sql else None

    def _compile_groups(self, query: Query, sub: _SubBuilders) -> str | None:
        groups = query.get("group", self._ctx.engine)
        if not groups:
            return None
        return f"GROUP BY {sub.columns.build(groups)}"

    # ------------------------------------------------------------------
    # INSERT / UPDATE / DELETE
    # ------------------------------------------------------------------

    def _target_table(self, query: Query, statement: str) -> FromClause:
        clause = query.get_one("from", self._ctx.engine)
        if clause is None:
            raise MissingTargetTableError(statement)
        if not isinstance(clause, FromClause):
            raise InvalidTableExpressionError(statement, type(clause).__name__)
        return clause

    def _compile_insert(self, query: Query, sub: _SubBuilders) -> str:
        table = sub.tables.build(self._target_table(query, "insert"))
        insert = query.get_one("insert", self._ctx.engine)

        if isinstance(insert, InsertClause):
            _check_pairs(insert, "insert")
            columns = sub.wrap.columnize(insert.columns)
            values = sub.binder.parametrize(insert.values)
            return f"INSERT INTO {table} ({columns}) VALUES ({values})"

        if isinstance(insert, InsertQueryClause):
            sql = f"INSERT INTO {table} "
            if insert.columns:
                sql += f"({sub.wrap.columnize(insert.columns)}) "
            return sql + self._compile_select(insert.query, sub)

        raise CompilationError("No values set to insert.", clause="insert")

    def _compile_update(self, query: Query, sub: _SubBuilders) -> str:
        table = sub.tables.build(self._target_table(query, "update"))
        update = query.get_one("update", self._ctx.engine)
        if not isinstance(update, InsertClause):
            raise CompilationError("No values set to update.", clause="update")
        _check_pairs(update, "update")

        assignments = ", ".join(
            f"{sub.wrap.wrap(column)} = {sub.binder.parameter(value)}"
            for column, value in zip(update.columns, update.values)
        )
        where = self._compile_wheres(query, sub)
        where = f" {where}" if where else ""
        return f"UPDATE {table} SET {assignments}{where}"

    def _compile_delete(self, query: Query, sub: _SubBuilders) -> str:
        table = sub.tables.build(self._target_table(query, "delete"))
        where = self._compile_wheres(query, sub)
        where = f" {where}" if where else ""
        return f"DELETE FROM {table}{where}"

    # ------------------------------------------------------------------
    # Sub-builder wiring
    # ------------------------------------------------------------------

    def _make_sub_builders(self, binder: ParameterBinder) -> _SubBuilders:
        """Construct and wire the sub-builder graph for one compilation run.

        All nested queries share ``binder`` via the ``select_fn`` closure so
        bindings are collected in output order across the whole statement.
        """
        ctx = self._ctx
        holder: dict[str, _SubBuilders] = {}

        def select_fn(nested: Query) -> str:
            return self._compile_select(nested, holder["sub"])

        wrap = IdentifierWrapper(ctx)
        columns = ColumnListBuilder(wrap, binder, select_fn)
        conditions = ConditionBuilder(ctx, binder, wrap, select_fn)
        tables = TableExpressionBuilder(wrap, binder, select_fn)

        sub = _SubBuilders(
            binder=binder,
            wrap=wrap,
            columns=columns,
            conditions=conditions,
            tables=tables,
            select=SelectClauseBuilder(ctx, binder, columns),
            aggregate=AggregateClauseBuilder(ctx, wrap, binder),
            join=JoinClauseBuilder(ctx, tables, conditions),
            having=HavingClauseBuilder(ctx, conditions),
            order=OrderClauseBuilder(ctx, wrap, binder),
            union=UnionClauseBuilder(ctx, wrap, binder, select_fn),
            cte=CteBuilder(ctx, wrap, binder, select_fn),
        )
        holder["sub"] = sub
        return sub
