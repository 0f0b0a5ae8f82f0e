"""Dialect lookup by name.

``CompilerFactory`` maps canonical dialect names, plus any number of aliases
(``"postgresql"`` → ``"postgres"``), to :class:`SQLDialect` classes.  Lookups
are case-insensitive.  :meth:`CompilerFactory.resolve` also accepts a ready
dialect instance, which is how ``compile_query`` lets callers pass either.

Usage::

    @CompilerFactory.register("oracle", "ora")
    class OracleDialect(SQLDialect):
        ...

    CompilerFactory.resolve("ORA")   # -> OracleDialect()
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from sqlweave.compile.base import SQLDialect
from sqlweave.errors import CompilationError

DialectClass = type[SQLDialect]


def _normalize(name: str) -> str:
    return name.strip().lower()


class CompilerFactory:
    """Class-level registry of dialect strategies."""

    _dialects: ClassVar[dict[str, DialectClass]] = {}
    _aliases: ClassVar[dict[str, str]] = {}

    @classmethod
    def register(cls, name: str, *aliases: str) -> Callable[[DialectClass], DialectClass]:
        """Decorator form of :meth:`register_class`."""

        def decorator(dialect_cls: DialectClass) -> DialectClass:
            cls.register_class(name, dialect_cls, *aliases)
            return dialect_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, dialect_cls: DialectClass, *aliases: str) -> None:
        """Register ``dialect_cls`` under ``name`` and its ``aliases``.

        Re-registering a name replaces the previous class.  An alias that is
        already a canonical name is rejected.
        """
        canonical = _normalize(name)
        for alias in map(_normalize, aliases):
            if alias in cls._dialects and alias != canonical:
                raise CompilationError(
                    f"Alias '{alias}' is already a registered dialect name."
                )
            cls._aliases[alias] = canonical
        cls._aliases.pop(canonical, None)
        cls._dialects[canonical] = dialect_cls

    @classmethod
    def create(cls, name: str) -> SQLDialect:
        """Instantiate the dialect registered under ``name`` or one of its aliases.

        Raises:
            CompilationError: If the name is unknown.
        """
        key = _normalize(name)
        dialect_cls = cls._dialects.get(cls._aliases.get(key, key))
        if dialect_cls is None:
            raise CompilationError(
                f"Unsupported dialect: '{name}'. "
                f"Registered dialects: {cls.registered_dialects()}."
            )
        return dialect_cls()

    @classmethod
    def resolve(cls, dialect: str | SQLDialect) -> SQLDialect:
        """Return ``dialect`` itself if it is an instance, else :meth:`create` it."""
        if isinstance(dialect, SQLDialect):
            return dialect
        return cls.create(dialect)

    @classmethod
    def registered_dialects(cls) -> list[str]:
        """Canonical names only, sorted; aliases are not listed."""
        return sorted(cls._dialects)
