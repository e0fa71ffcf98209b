"""
Execution Environment

One lexical frame: a name → value map plus a link to the enclosing frame.
Frames are shared, not copied: every closure and bound method created in a
frame holds the same object, so a later assignment is visible to all of them.

The global frame is the only one with enclosing=None.
"""

from typing import Any, Dict, Iterator, List, Optional

from ..shared.errors import LoxImplementationError, LoxRuntimeError, RuntimeErrorKind
from ..shared.source_location import SourceLocation


def _undefined_variable(name: str, location: Optional[SourceLocation]) -> LoxRuntimeError:
    return LoxRuntimeError(
        RuntimeErrorKind.UNBOUND_VARIABLE,
        f"Undefined variable '{name}'.",
        location,
        lexeme=name,
    )


class Environment:
    """
    Chained scope frame.

    - define(name, value): bind in this frame (rebinding in place is allowed)
    - get(name) / assign(name, value): search this frame outward
    - get_at(d, name) / assign_at(d, name, value): hop exactly d frames, then
      operate on that frame only (distances come from the resolver)
    """
    _values: Dict[str, Any]

    def __init__(self, enclosing: Optional['Environment'] = None):
        self._enclosing = enclosing
        self._values = {}

    @property
    def enclosing(self) -> Optional['Environment']:
        return self._enclosing

    def define(self, name: str, value: Any) -> None:
        """Bind name in this frame, overwriting any binding in this frame only."""
        self._values[name] = value

    def get(self, name: str, location: Optional[SourceLocation] = None) -> Any:
        """Lookup name from this frame outward (innermost to outermost)."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env._values:
                return env._values[name]
            env = env._enclosing
        raise _undefined_variable(name, location)

    def assign(self, name: str, value: Any, location: Optional[SourceLocation] = None) -> None:
        """Mutate the nearest existing binding. Never creates one."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env._values:
                env._values[name] = value
                return
            env = env._enclosing
        raise _undefined_variable(name, location)

    def ancestor(self, distance: int) -> 'Environment':
        """The frame exactly `distance` enclosing links away (0 = self)."""
        env = self
        for _ in range(distance):
            if env._enclosing is None:
                raise LoxImplementationError(f"Environment chain shorter than resolved distance {distance}")
            env = env._enclosing
        return env

    def get_at(self, distance: int, name: str, location: Optional[SourceLocation] = None) -> Any:
        """Read name from the frame at `distance`, without searching further."""
        frame = self.ancestor(distance)
        if name not in frame._values:
            raise _undefined_variable(name, location)
        return frame._values[name]

    def assign_at(self, distance: int, name: str, value: Any) -> None:
        """Write value into the frame at `distance`."""
        self.ancestor(distance)._values[name] = value

    def __contains__(self, name: str) -> bool:
        """Membership in this frame only."""
        return name in self._values

    def names(self) -> List[str]:
        return list(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __repr__(self) -> str:
        depth = 0
        env = self._enclosing
        while env is not None:
            depth += 1
            env = env._enclosing
        return f"Environment(depth={depth}, names={self.names()!r})"
