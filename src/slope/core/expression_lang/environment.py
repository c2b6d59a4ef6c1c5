"""
Lexical scopes for Slope evaluation.

Each scope holds its own bindings and a reference to its parent, so
creating a child scope for a call is O(1) and lookup walks the chain
outward.
"""

from __future__ import annotations

from collections.abc import Iterator

from slope.core.errors import BindingError
from slope.core.expression_lang.objects import Object


class Environment:
    """A binding table with an optional parent scope."""

    def __init__(self, parent: Environment | None = None) -> None:
        self._bindings: dict[str, Object] = {}
        self.parent = parent
        self.depth: int = 0 if parent is None else parent.depth + 1

    def child(self) -> Environment:
        """Create a new scope whose lookups fall back to this one."""
        return Environment(parent=self)

    def get(self, name: str) -> Object | None:
        """Return the innermost binding for ``name``, or None."""
        scope: Environment | None = self
        while scope is not None:
            if name in scope._bindings:
                return scope._bindings[name]
            scope = scope.parent
        return None

    def lookup(self, name: str) -> Object:
        value = self.get(name)
        if value is None:
            raise BindingError(f"`{name}` is not defined.")
        return value

    def declare(self, name: str, value: Object) -> None:
        """Bind ``name`` in this scope.

        Raises:
            BindingError: If ``name`` is already bound in this scope. Outer
                bindings may be shadowed.
        """
        if name in self._bindings:
            raise BindingError(f"`{name}` is already defined in this scope.")
        self._bindings[name] = value

    def names(self) -> list[str]:
        """All visible names, innermost scope first, without duplicates."""
        seen: dict[str, None] = {}
        for scope in self._chain():
            for name in scope._bindings:
                seen.setdefault(name, None)
        return list(seen)

    def items(self) -> list[tuple[str, Object]]:
        """Visible bindings as (name, value), shadowed entries excluded."""
        return [(name, self.lookup(name)) for name in self.names()]

    def _chain(self) -> Iterator[Environment]:
        scope: Environment | None = self
        while scope is not None:
            yield scope
            scope = scope.parent

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __repr__(self) -> str:
        return f"Environment(depth={self.depth}, names={list(self._bindings)})"
