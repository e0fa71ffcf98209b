"""
Lox AST Transformers
====================

Specialized transformers for different AST node types.
"""

from .base import LoxTransformer
from .literals import LiteralParser
from .functions import FunctionDefinitionParser, ParameterParser
from .expressions import BinaryExpressionParser

__all__ = [
    'LoxTransformer',
    'LiteralParser',
    'FunctionDefinitionParser',
    'ParameterParser',
    'BinaryExpressionParser',
]
