"""
Operator enums shared by the front end, the AST printer and the evaluator.

The parser converts operator tokens to these directly; nothing downstream
looks at raw token text.
"""

from enum import Enum


class BinaryOp(Enum):
    """Binary operators"""
    # Arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"

    # Comparison
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


class LogicalOp(Enum):
    """Short-circuiting operators; kept apart from BinaryOp since both
    operands are not always evaluated."""
    AND = "and"
    OR = "or"


class UnaryOp(Enum):
    """Unary operators"""
    NOT = "!"
    NEG = "-"

