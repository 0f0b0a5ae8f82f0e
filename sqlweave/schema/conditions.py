"""Boolean condition clauses (WHERE, HAVING and JOIN ... ON).

Conditions form a flat, ordered list.  Each condition carries its own
connector flag (``is_or``) which links it to the condition *before* it; the
first rendered condition of a list never shows its connector.  Grouping is
expressed with :class:`NestedCondition`.

Sub-query variants reference :class:`~sqlweave.schema.query.Query`, which is
resolved when ``sqlweave.schema.query`` is imported.
"""
from __future__ import annotations

from typing import Any

from pydantic import Field

from sqlweave.schema.base import AbstractClause


class AbstractCondition(AbstractClause):
    """Base of every condition variant.

    Attributes:
        is_or: Connect to the previous condition with ``OR`` instead of ``AND``.
        is_not: Negate the condition.
    """

    component: str = "where"
    is_or: bool = False
    is_not: bool = False


class RawCondition(AbstractCondition):
    """Verbatim SQL with ``?`` markers for ``bindings`` and ``[ident]`` markers."""

    expression: str
    bindings: list[Any] = Field(default_factory=list)


class BasicCondition(AbstractCondition):
    """``<column> <operator> <value>``."""

    column: str
    operator: str = "="
    value: Any = None


class BasicStringCondition(AbstractCondition):
    """Pattern match on a text column.

    Attributes:
        operator: ``like`` (value used as-is), ``starts``, ``ends`` or
            ``contains`` (``%`` added around the value as needed).  Any other
            operator is rendered verbatim.
        case_sensitive: When False both sides are lower-cased.
    """

    column: str
    operator: str = "like"
    value: str
    case_sensitive: bool = False


class BasicDateCondition(AbstractCondition):
    """``<PART>(<column>) <operator> <value>`` for ``date``, ``year``, ``month``..."""

    column: str
    part: str
    operator: str = "="
    value: Any = None


class TwoColumnsCondition(AbstractCondition):
    """``<first> <operator> <second>``: both sides are identifiers."""

    first: str
    operator: str = "="
    second: str


class NestedCondition(AbstractCondition):
    """A parenthesised group of conditions."""

    conditions: list[AbstractCondition] = Field(default_factory=list)


class SubQueryCondition(AbstractCondition):
    """``<column> <operator> (<select>)``."""

    column: str
    operator: str = "="
    query: Query


class InCondition(AbstractCondition):
    """``<column> IN (<values>)``."""

    column: str
    values: list[Any] = Field(default_factory=list)


class InQueryCondition(AbstractCondition):
    """``<column> IN (<select>)``."""

    column: str
    query: Query


class BetweenCondition(AbstractCondition):
    """``<column> BETWEEN <lower> AND <higher>``."""

    column: str
    lower: Any
    higher: Any


class NullCondition(AbstractCondition):
    """``<column> IS NULL``."""

    column: str


class ExistsCondition(AbstractCondition):
    """``EXISTS (<select>)``."""

    query: Query


class BooleanCondition(AbstractCondition):
    """``<column> = <true | false>`` using the dialect's boolean literal."""

    column: str
    value: bool = True


#: Operators accepted by :class:`BasicStringCondition` that become ``LIKE``.
LIKE_OPERATORS: frozenset[str] = frozenset({"like", "starts", "ends", "contains"})
