"""Custom exception hierarchy for sqlweave.

All public errors inherit from SQLWeaveError so callers can catch the base
class for any sqlweave-specific failure.  Every error is raised at the point
of detection and aborts the whole compilation; nothing is retried.
"""
from __future__ import annotations


class SQLWeaveError(Exception):
    """Base exception for all sqlweave errors."""


class CompilationError(SQLWeaveError):
    """Raised when a query cannot be compiled.

    Args:
        message: Human-readable description.
        clause: The clause component being compiled when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class MissingTargetTableError(CompilationError):
    """Raised when an insert, update or delete has no FROM clause."""

    def __init__(self, statement: str) -> None:
        super().__init__(f"No table set to {statement}.", clause="from")
        self.statement = statement


class InvalidTableExpressionError(CompilationError):
    """Raised when a statement needs a named table but got something else.

    Args:
        statement: ``'insert'``, ``'update'`` or ``'delete'``.
        variant: Class name of the FROM clause that was supplied.
    """

    def __init__(self, statement: str, variant: str) -> None:
        super().__init__(
            f"Invalid table expression \"{variant}\" for {statement}; "
            "a named table is required.",
            clause="from",
        )
        self.statement = statement
        self.variant = variant


class UnrecognizedClauseError(CompilationError):
    """Raised when a clause variant has no matching compiler.

    Args:
        variant: Class name of the offending clause.
        context: The compilation section that received it
            (e.g. ``'TableExpression'``).
    """

    def __init__(self, variant: str, context: str) -> None:
        super().__init__(
            f"Invalid type \"{variant}\" provided for the \"{context}\" clause.",
            clause=context,
        )
        self.variant = variant
        self.context = context


class MissingBaseAliasError(CompilationError):
    """Raised when a deep join cannot find the alias of the base query.

    Every join synthesised from a dotted path references the base table or
    alias, so the base query must declare one.
    """

    def __init__(self, expression: str) -> None:
        super().__init__(
            f"No table or alias found for the main query; one is needed to "
            f"generate the deep join '{expression}'.",
            clause="join",
        )
        self.expression = expression
