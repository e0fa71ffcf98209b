"""
Object Model: classes and instances.

- LoxClass: name, optional superclass, method table. Callable as its own
  constructor. Never mutated after declaration.
- LoxInstance: its class plus a private field map filled on first assignment.
  Fields shadow methods of the same name, for that instance only.
"""

import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..shared.errors import LoxRuntimeError, RuntimeErrorKind
from ..shared.source_location import SourceLocation
from ..utils.config import INITIALIZER_NAME
from .callables import LoxCallable, LoxFunction

if TYPE_CHECKING:
    from .interpreter import Interpreter

logger = logging.getLogger("pylox.runtime.objects")


class LoxClass(LoxCallable):
    """
    Class value. Method lookup walks the superclass chain; `init`, if found
    anywhere on the chain, is bound to each new instance and run.
    """

    def __init__(self, name: str, superclass: Optional['LoxClass'],
                 methods: Dict[str, LoxFunction]):
        self.name = name
        self.superclass = superclass
        self._methods = dict(methods)

    def find_own_method(self, name: str) -> Optional[LoxFunction]:
        """Method declared directly in this class (no inheritance)."""
        return self._methods.get(name)

    def find_method(self, name: str) -> Optional[LoxFunction]:
        """Method declared in this class or the nearest ancestor."""
        klass: Optional[LoxClass] = self
        while klass is not None:
            method = klass._methods.get(name)
            if method is not None:
                return method
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method(INITIALIZER_NAME)
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        instance = LoxInstance(self)
        initializer = self.find_method(INITIALIZER_NAME)
        logger.debug(f"Instantiating {self.name} (initializer: {initializer is not None})")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        parent = self.superclass.name if self.superclass is not None else None
        return f"LoxClass({self.name!r}, superclass={parent!r})"


class LoxInstance:
    """Runtime object: class reference + per-instance fields."""

    def __init__(self, klass: LoxClass):
        self.klass = klass
        self._fields: Dict[str, Any] = {}

    def get(self, name: str, location: Optional[SourceLocation] = None) -> Any:
        """Field first, then a method bound to this instance, else an error."""
        if name in self._fields:
            return self._fields[name]

        method = self.klass.find_method(name)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError(
            RuntimeErrorKind.UNDEFINED_PROPERTY,
            f"Undefined property '{name}'.",
            location,
            lexeme=name,
        )

    def set(self, name: str, value: Any) -> None:
        self._fields[name] = value

    def has_field(self, name: str) -> bool:
        return name in self._fields

    def __str__(self) -> str:
        return f"{self.klass.name} instance"

    def __repr__(self) -> str:
        return f"LoxInstance({self.klass.name!r}, fields={sorted(self._fields)!r})"
