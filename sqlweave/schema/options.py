"""Compiler configuration.

``CompilerOptions`` carries the naming conventions the compiler falls back to
when a clause leaves them unset.  It is frozen so a compiler instance can be
shared between threads.

Example::

    options = CompilerOptions(deep_join_source_key_suffix="_id", deep_join_target_key="id")
    compiler = QueryCompiler(PostgresDialect(), options)
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CompilerOptions(BaseModel):
    """Defaults applied during compilation.

    Attributes:
        deep_join_source_key_suffix: Appended to the singularised target name
            to build a deep join's source-side key (``Author`` → ``AuthorId``).
        deep_join_target_key: Key column on a deep join's target side.
        aggregate_alias: Alias of an aggregate result column.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    deep_join_source_key_suffix: str = "Id"
    deep_join_target_key: str = "Id"
    aggregate_alias: str = "count"
