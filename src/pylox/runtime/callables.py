"""
Callable Value Model

The one capability shared by user functions, bound methods, native functions
and classes-as-constructors: "has an arity, can be called with that many
arguments, produces a value".
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, TYPE_CHECKING

from ..shared.nodes import FunctionDeclaration
from ..utils.config import THIS_KEYWORD
from .environment import Environment

if TYPE_CHECKING:
    from .interpreter import Interpreter
    from .objects import LoxInstance


class LoxCallable(ABC):
    """Anything a Lox call expression may invoke."""

    @abstractmethod
    def arity(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        raise NotImplementedError


class LoxFunction(LoxCallable):
    """
    User-defined function or method: a declaration plus the environment that
    was current where it was declared (its closure).

    Each call gets a fresh frame parented at the closure, so recursive and
    re-entrant calls never share parameter bindings.
    """

    def __init__(self, declaration: FunctionDeclaration, closure: Environment,
                 is_initializer: bool = False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self) -> str:
        return self.declaration.name

    def arity(self) -> int:
        return self.declaration.arity

    def bind(self, instance: 'LoxInstance') -> 'LoxFunction':
        """
        New function sharing this one's code, whose closure is a fresh frame
        holding `this` = instance, parented at the original closure.
        """
        environment = Environment(self.closure)
        environment.define(THIS_KEYWORD, instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param, argument)

        flow = interpreter.execute_block(self.declaration.body, environment)

        # An initializer always yields its instance, whatever `return;` did.
        if self.is_initializer:
            return self.closure.get_at(0, THIS_KEYWORD)
        if flow.is_return():
            return flow.get_value()
        return None

    def __str__(self) -> str:
        return f"<fn {self.declaration.name}>"

    def __repr__(self) -> str:
        return f"LoxFunction({self.declaration.name!r}, arity={self.arity()})"


class NativeFunction(LoxCallable):
    """Host-provided function exposed to Lox code (e.g. `clock`)."""

    def __init__(self, name: str, arity: int, function: Callable[..., Any]):
        self.name = name
        self._arity = arity
        self._function = function

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: Optional['Interpreter'], arguments: List[Any]) -> Any:
        return self._function(*arguments)

    def __str__(self) -> str:
        return "<native fn>"

    def __repr__(self) -> str:
        return f"NativeFunction({self.name!r}, arity={self._arity})"
