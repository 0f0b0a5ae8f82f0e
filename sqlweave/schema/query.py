"""The Query model handed to the compiler.

A Query is an ordered list of clauses plus the statement intent.  It is built
and mutated by the fluent builder layer; the compiler only reads it (the deep
join pass returns a rewritten copy).
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from sqlweave.schema.base import WILDCARD_ENGINE, AbstractClause
from sqlweave.schema.clauses import (
    InsertQueryClause,
    Join,
    JoinClause,
    QueryColumn,
    QueryFromClause,
    UnionClause,
)
from sqlweave.schema.conditions import (
    ExistsCondition,
    InQueryCondition,
    NestedCondition,
    SubQueryCondition,
)

StatementMethod = Literal["select", "insert", "update", "delete"]


class Query(BaseModel):
    """An engine-agnostic query.

    Attributes:
        clauses: Ordered clause sequence.  Order within a component is the
            order in which fragments are rendered.
        method: Statement intent.
        is_distinct: Emit ``SELECT DISTINCT`` (or ``COUNT(DISTINCT ...)``).
        alias: Alias used when this query is a sub-query source.
    """

    model_config = ConfigDict(extra="forbid")

    clauses: list[AbstractClause] = Field(default_factory=list)
    method: StatementMethod = "select"
    is_distinct: bool = False
    alias: str | None = None

    def get(self, component: str, engine: str = WILDCARD_ENGINE) -> list[AbstractClause]:
        """Return the ``component`` clauses visible to ``engine``, in order."""
        return [
            c for c in self.clauses
            if c.component == component and c.applies_to(engine)
        ]

    def get_one(self, component: str, engine: str = WILDCARD_ENGINE) -> AbstractClause | None:
        """Return the effective single clause for ``component``.

        A clause scoped to ``engine`` wins over a wildcard one.
        """
        clauses = self.get(component, engine)
        for clause in clauses:
            if clause.engine == engine:
                return clause
        return clauses[0] if clauses else None

    def has(self, component: str, engine: str = WILDCARD_ENGINE) -> bool:
        return any(
            c.component == component and c.applies_to(engine) for c in self.clauses
        )


# Resolve forward references created by the recursive Query type.
QueryFromClause.model_rebuild()
Join.model_rebuild()
JoinClause.model_rebuild()
QueryColumn.model_rebuild()
InsertQueryClause.model_rebuild()
UnionClause.model_rebuild()
SubQueryCondition.model_rebuild()
InQueryCondition.model_rebuild()
ExistsCondition.model_rebuild()
NestedCondition.model_rebuild()
Query.model_rebuild()
