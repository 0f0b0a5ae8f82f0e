"""Compilation context value object.

Packages the ``(dialect, options)`` pair shared by ``QueryCompiler`` and all
clause-level sub-builders into a single immutable object.
"""
from __future__ import annotations

from dataclasses import dataclass

from sqlweave.compile.base import SQLDialect
from sqlweave.schema.options import CompilerOptions


@dataclass(frozen=True)
class CompilationContext:
    """Immutable configuration for compilation runs.

    Attributes:
        dialect: Dialect strategy instance.
        options: Naming-convention defaults.
    """

    dialect: SQLDialect
    options: CompilerOptions

    @property
    def engine(self) -> str:
        """Engine scope used to filter clauses."""
        return self.dialect.dialect_name
