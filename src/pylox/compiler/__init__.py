"""
Compiler: drives parsing and the analysis passes.
"""

from .driver import CompilerDriver, CompilationResult
