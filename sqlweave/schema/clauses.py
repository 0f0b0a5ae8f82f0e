"""Pydantic models for the non-condition clauses of a Query.

The variants of each family share an abstract base carrying the default
``component`` name.  The compiler dispatches on the concrete class; a
subclass it does not know raises
:class:`~sqlweave.errors.UnrecognizedClauseError`.

Families
--------
FROM / CTE     — ``FromClause``, ``RawFromClause``, ``QueryFromClause``
JOIN           — ``JoinClause``, ``DeepJoinClause``
SELECT / GROUP — ``Column``, ``RawColumn``, ``QueryColumn``
ORDER          — ``OrderBy``, ``RawOrderBy``, ``RandomOrderBy``
AGGREGATE      — ``AggregateClause``
INSERT/UPDATE  — ``InsertClause``, ``InsertQueryClause``
LIMIT          — ``LimitOffset``
UNION          — ``UnionClause``, ``RawUnionClause``
LOCK           — ``LockClause``
"""
from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from sqlweave.schema.base import AbstractClause
from sqlweave.schema.conditions import AbstractCondition

JoinType = Literal["INNER", "LEFT", "RIGHT", "FULL", "CROSS"]

_AS_SPLIT = re.compile(r"\s+as\s+", re.IGNORECASE)


# ---------------------------------------------------------------------------
# FROM / CTE
# ---------------------------------------------------------------------------


class AbstractFrom(AbstractClause):
    """Base of every table expression (``component`` is ``from`` or ``cte``)."""

    component: str = "from"

    @property
    def alias_name(self) -> str | None:
        """The name other clauses use to reference this table expression."""
        return None


class FromClause(AbstractFrom):
    """A named table, optionally aliased with ``'table as alias'``.

    Attributes:
        table: Table name, possibly schema-qualified (``'sales.orders'``).
    """

    table: str

    @property
    def alias_name(self) -> str | None:
        segments = _AS_SPLIT.split(self.table)
        if len(segments) > 1:
            return segments[-1].strip()
        return self.table


class RawFromClause(AbstractFrom):
    """A verbatim table expression.

    Attributes:
        expression: SQL text with ``?`` binding markers and ``[ident]`` markers.
        bindings: Values for the ``?`` markers, in order.
        alias: Name of the expression; required when used as a CTE.
    """

    expression: str
    bindings: list[Any] = Field(default_factory=list)
    alias: str | None = None

    @property
    def alias_name(self) -> str | None:
        return self.alias


class QueryFromClause(AbstractFrom):
    """A derived table: ``(<select>) AS alias``.

    Attributes:
        query: The inner query.
        alias: Explicit alias; falls back to ``query.alias``.
    """

    query: Query
    alias: str | None = None

    @property
    def alias_name(self) -> str | None:
        return self.alias or self.query.alias


# ---------------------------------------------------------------------------
# JOIN
# ---------------------------------------------------------------------------


class Join(BaseModel):
    """The body of a regular join.

    Attributes:
        type: SQL join type.
        table: The joined table expression.
        conditions: ``ON`` conditions; the first one's connector is ignored.
    """

    model_config = ConfigDict(extra="forbid")

    type: JoinType = "INNER"
    table: AbstractFrom
    conditions: list[AbstractCondition] = Field(default_factory=list)


class AbstractJoin(AbstractClause):
    component: str = "join"


class JoinClause(AbstractJoin):
    """An explicit join."""

    join: Join


class DeepJoinClause(AbstractJoin):
    """Marker expanded into a chain of joins from a dotted path.

    ``"Author.Books"`` on a base table aliased ``A`` becomes
    ``JOIN Author ON A.AuthorId = Author.Id`` followed by
    ``JOIN Books ON Author.BookId = Books.Id``.

    Attributes:
        expression: Dotted relationship path.
        type: Join type used for every generated join.
        source_key_suffix: Appended to the singular target name to build the
            source-side key.  Defaults to the compiler options.
        target_key: Key column on the target side.  Defaults to the compiler
            options.
        source_key_generator: Maps a target name to the source-side key;
            when set, it replaces the suffix convention.
        target_key_generator: Maps a target name to the target-side key.
    """

    expression: str
    type: JoinType = "INNER"
    source_key_suffix: str | None = None
    target_key: str | None = None
    source_key_generator: Callable[[str], str] | None = None
    target_key_generator: Callable[[str], str] | None = None


# ---------------------------------------------------------------------------
# SELECT / GROUP BY columns
# ---------------------------------------------------------------------------


class AbstractColumn(AbstractClause):
    component: str = "select"


class Column(AbstractColumn):
    """A column name; ``'table.col'`` and ``'col as alias'`` are supported."""

    name: str


class RawColumn(AbstractColumn):
    """A verbatim select expression."""

    expression: str
    bindings: list[Any] = Field(default_factory=list)


class QueryColumn(AbstractColumn):
    """A scalar sub-select: ``(<select>) AS <query.alias>``."""

    query: Query


# ---------------------------------------------------------------------------
# ORDER BY
# ---------------------------------------------------------------------------


class AbstractOrderBy(AbstractClause):
    component: str = "order"


class OrderBy(AbstractOrderBy):
    column: str
    ascending: bool = True


class RawOrderBy(AbstractOrderBy):
    expression: str
    bindings: list[Any] = Field(default_factory=list)


class RandomOrderBy(AbstractOrderBy):
    """Order rows randomly using the dialect's ``random()`` spelling."""

    seed: str = ""


# ---------------------------------------------------------------------------
# Aggregate, insert / update, limit, union, lock
# ---------------------------------------------------------------------------


class AggregateClause(AbstractClause):
    """``SELECT <TYPE>(<columns>) AS <alias>``.

    Attributes:
        type: Aggregate function name (``'count'``, ``'sum'``, ...).
        columns: Target columns; ``['*']`` by default.
        alias: Result alias; defaults to the compiler options.
    """

    component: str = "aggregate"
    type: str
    columns: list[str] = Field(default_factory=lambda: ["*"])
    alias: str | None = None


class AbstractInsertClause(AbstractClause):
    component: str = "insert"


class InsertClause(AbstractInsertClause):
    """Literal column/value pairs.  Also used (component ``update``) for SET."""

    columns: list[str]
    values: list[Any]


class InsertQueryClause(AbstractInsertClause):
    """``INSERT INTO <table> [(<columns>)] <select>``."""

    columns: list[str] = Field(default_factory=list)
    query: Query


class LimitOffset(AbstractClause):
    """Pagination.  Only positive values are rendered."""

    component: str = "limit"
    limit: int | None = None
    offset: int | None = None

    def has_limit(self) -> bool:
        return self.limit is not None and self.limit > 0

    def has_offset(self) -> bool:
        return self.offset is not None and self.offset > 0


class AbstractUnion(AbstractClause):
    component: str = "union"


class UnionClause(AbstractUnion):
    """``UNION [ALL] <select>`` (also ``INTERSECT`` and ``EXCEPT``)."""

    operation: Literal["union", "intersect", "except"] = "union"
    all: bool = False
    query: Query


class RawUnionClause(AbstractUnion):
    expression: str
    bindings: list[Any] = Field(default_factory=list)


class LockClause(AbstractClause):
    """Row locking request; rendered only by dialects that support it."""

    component: str = "lock"
    mode: Literal["update", "share"] = "update"
