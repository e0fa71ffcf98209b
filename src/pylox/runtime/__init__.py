"""
Runtime: environments, callables, the object model and the evaluator.
"""

from .environment import Environment
from .callables import LoxCallable, LoxFunction, NativeFunction
from .objects import LoxClass, LoxInstance
from .interpreter import Interpreter, is_truthy, is_equal, stringify
from .runtime import LoxRuntime, ExecutionResult
