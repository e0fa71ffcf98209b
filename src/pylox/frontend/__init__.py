"""
Front end: Lox source text to AST.
"""

from .parser import Parser, ParseError
