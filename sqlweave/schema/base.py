"""Base clause model and the ``Raw`` literal marker.

Every entry in a :class:`~sqlweave.schema.query.Query` is a clause: a
pydantic model tagged with the SQL ``component`` it belongs to and the
``engine`` (dialect name) it applies to.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict

#: Engine scope meaning "applies to every dialect".
WILDCARD_ENGINE = "*"


class AbstractClause(BaseModel):
    """Common fields of every clause.

    Attributes:
        component: Clause component name (``'where'``, ``'join'``, ...).
        engine: Dialect name the clause is restricted to, or ``'*'``.
    """

    model_config = ConfigDict(extra="forbid")

    component: str
    engine: str = WILDCARD_ENGINE

    def applies_to(self, engine: str) -> bool:
        """Return True if this clause is visible when compiling for ``engine``."""
        return self.engine == WILDCARD_ENGINE or self.engine == engine


class Raw(BaseModel):
    """A value injected verbatim into the SQL text instead of being bound.

    Example::

        InsertClause(columns=["created_at"], values=[Raw(value="CURRENT_TIMESTAMP")])
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    value: str
