"""
Static scope tracking for the resolver.

A stack of scopes, each scope a map name → "fully initialized?". The global
scope is deliberately NOT on the stack: names that are not found in any open
scope are left unresolved and looked up in the global environment at run time.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Generator, List, Optional


# -----------------------------------------------------------------------------
# Errors (caller reports when duplicate name in same scope)
# -----------------------------------------------------------------------------


class ScopeRedefinitionError(ValueError):
    """Raised when a name is already declared in this scope."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"redefinition of '{name}' in same scope")


# -----------------------------------------------------------------------------
# Scope kind (which construct opened the scope)
# -----------------------------------------------------------------------------


class ScopeKind(Enum):
    BLOCK = "block"
    FUNCTION = "function"
    THIS = "this"
    SUPER = "super"


# -----------------------------------------------------------------------------
# Scope (one dict on the stack: name -> initialized)
# -----------------------------------------------------------------------------


@dataclass
class Scope:
    """
    One lexical scope. A name maps to False between declaration and the end
    of its initializer, True afterwards.
    """

    kind: ScopeKind
    _bindings: Dict[str, bool] = field(default_factory=dict)

    def declare(self, name: str) -> None:
        """Add name as not-yet-initialized. Raises on a duplicate in this scope."""
        if name in self._bindings:
            raise ScopeRedefinitionError(name)
        self._bindings[name] = False

    def define(self, name: str) -> None:
        """Mark name as initialized (adds it if missing)."""
        self._bindings[name] = True

    def __contains__(self, name: str) -> bool:
        return name in self._bindings

    def is_uninitialized(self, name: str) -> bool:
        """True only for a name declared here whose initializer is still running."""
        return self._bindings.get(name) is False

    def names(self) -> List[str]:
        return list(self._bindings)


# -----------------------------------------------------------------------------
# Scope stack (push/pop via context manager, distance lookup)
# -----------------------------------------------------------------------------


class ScopeStack:
    """
    Stack of open local scopes. Index 0 is the outermost local scope;
    an empty stack means "at global scope".
    """

    def __init__(self) -> None:
        self._stack: List[Scope] = []

    def push(self, kind: ScopeKind) -> Scope:
        scope = Scope(kind=kind)
        self._stack.append(scope)
        return scope

    def pop(self) -> Scope:
        if not self._stack:
            raise RuntimeError("Cannot exit scope: no active scope")
        return self._stack.pop()

    @contextmanager
    def scope(self, kind: ScopeKind) -> Generator[Scope, None, None]:
        """Context manager: push on enter, pop on exit (with self.scope(...))."""
        s = self.push(kind)
        try:
            yield s
        finally:
            self.pop()

    def peek(self) -> Optional[Scope]:
        """Innermost scope, or None at global scope."""
        return self._stack[-1] if self._stack else None

    def distance_to(self, name: str) -> Optional[int]:
        """
        Number of scopes between the innermost scope and the one declaring
        `name` (innermost = 0). None if no open scope declares it.
        """
        for i in range(len(self._stack) - 1, -1, -1):
            if name in self._stack[i]:
                return len(self._stack) - 1 - i
        return None

    def __len__(self) -> int:
        return len(self._stack)
