"""Deep join expansion.

A :class:`~sqlweave.schema.clauses.DeepJoinClause` marker names a dotted
relationship path (``"Author.Books"``).  :class:`DeepJoinResolver` rewrites
the query so each marker is replaced, at the same position, by one explicit
join per path segment, inferring the join keys from a naming convention:

    source.<Singular(target)><suffix> = target.<target_key>

The rewrite returns a new :class:`~sqlweave.schema.query.Query`; the input
query is left untouched.
"""
from __future__ import annotations

import logging

import inflection

from sqlweave.compile.context import CompilationContext
from sqlweave.errors import MissingBaseAliasError
from sqlweave.schema.base import AbstractClause
from sqlweave.schema.clauses import (
    AbstractFrom,
    DeepJoinClause,
    FromClause,
    Join,
    JoinClause,
)
from sqlweave.schema.conditions import TwoColumnsCondition
from sqlweave.schema.query import Query

logger = logging.getLogger(__name__)


class DeepJoinResolver:
    """Expands deep join markers visible to the compiling engine."""

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def expand(self, query: Query) -> Query:
        """Return ``query`` with every visible deep join marker expanded.

        Markers scoped to other engines are kept as they are.  When nothing
        needs expanding the same instance is returned.

        Raises:
            MissingBaseAliasError: If a marker is present but the query has no
                FROM clause with an alias to anchor the chain.
        """
        engine = self._ctx.engine
        if not any(
            isinstance(c, DeepJoinClause) and c.applies_to(engine) for c in query.clauses
        ):
            return query

        clauses: list[AbstractClause] = []
        for clause in query.clauses:
            if isinstance(clause, DeepJoinClause) and clause.applies_to(engine):
                clauses.extend(self._transform(query, clause))
            else:
                clauses.append(clause)
        return query.model_copy(update={"clauses": clauses})

    def _transform(self, query: Query, marker: DeepJoinClause) -> list[JoinClause]:
        tokens = [t for t in marker.expression.split(".") if t]
        if not tokens:
            return []

        base = query.get_one("from", self._ctx.engine)
        base_alias = base.alias_name if isinstance(base, AbstractFrom) else None
        if not base_alias:
            raise MissingBaseAliasError(marker.expression)

        options = self._ctx.options
        joins: list[JoinClause] = []
        for index, target in enumerate(tokens):
            source = base_alias if index == 0 else tokens[index - 1]
            if marker.source_key_generator is not None:
                source_key = marker.source_key_generator(target)
                target_key = (
                    marker.target_key_generator(target)
                    if marker.target_key_generator is not None
                    else options.deep_join_target_key
                )
            else:
                suffix = (
                    marker.source_key_suffix
                    if marker.source_key_suffix is not None
                    else options.deep_join_source_key_suffix
                )
                source_key = inflection.singularize(target) + suffix
                target_key = (
                    marker.target_key
                    if marker.target_key is not None
                    else options.deep_join_target_key
                )

            joins.append(
                JoinClause(
                    engine=marker.engine,
                    join=Join(
                        type=marker.type,
                        table=FromClause(table=target),
                        conditions=[
                            TwoColumnsCondition(
                                first=f"{source}.{source_key}",
                                operator="=",
                                second=f"{target}.{target_key}",
                            )
                        ],
                    ),
                )
            )

        logger.debug(
            "Expanded deep join '%s' from '%s' into %d joins",
            marker.expression,
            base_alias,
            len(joins),
        )
        return joins
