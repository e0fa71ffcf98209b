"""
Shared components: AST nodes, visitor, scopes and diagnostics.

Everything here is used by both the resolver and the interpreter; nothing
here depends on the front end.
"""

from .source_location import SourceLocation, UNKNOWN_LOCATION
from .errors import (
    Error, ErrorPhase, ErrorReporter,
    LoxError, ParseError, LoxRuntimeError, LoxImplementationError,
    ResolutionErrorKind, RuntimeErrorKind, SYNTAX_ERROR_CODE,
)
from .types import BinaryOp, LogicalOp, UnaryOp
from .nodes import (
    ASTNode, Expression, Statement, Program, NodeType,
    Literal, Grouping, Unary, Binary, Logical, Variable, Assign, Call,
    Get, Set, This, Super,
    ExpressionStatement, PrintStatement, VarDeclaration, Block,
    IfStatement, WhileStatement, FunctionDeclaration, ClassDeclaration,
    ReturnStatement,
)
from .ast_visitor import ASTVisitor
