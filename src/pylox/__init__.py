"""
pylox - a tree-walking interpreter for the Lox language.

    from pylox import CompilerDriver, LoxRuntime

    result = CompilerDriver().compile('print "hi";')
    LoxRuntime().execute(result).outputs   # ['hi']
"""

from .compiler.driver import CompilerDriver, CompilationResult
from .runtime.runtime import LoxRuntime, ExecutionResult

__version__ = "0.1.0"

__all__ = ["CompilerDriver", "CompilationResult", "LoxRuntime", "ExecutionResult", "__version__"]
