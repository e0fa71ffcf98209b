"""
Lox AST (Abstract Syntax Tree) Definitions

Closed set of statement and expression nodes handed to the resolver and the
interpreter by the front end.

Visitor Pattern Support:
- Every node has an accept() method that calls exactly one visit_* method
- ASTVisitor declares all visit_* methods abstract, so a visitor that misses
  a node kind cannot be instantiated

Identity:
- Nodes compare and hash by identity (eq=False). The resolver keys its
  distance table on the node object itself, so two textually identical
  `a` references in different scopes stay distinct.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, TYPE_CHECKING, TypeVar, Union

from .source_location import SourceLocation, UNKNOWN_LOCATION
from .types import BinaryOp, LogicalOp, UnaryOp

if TYPE_CHECKING:
    from .ast_visitor import ASTVisitor

T = TypeVar('T')

LiteralValue = Union[None, bool, float, str]


class NodeType(Enum):
    """AST node types"""
    PROGRAM = "program"
    # Expressions
    LITERAL = "literal"
    GROUPING = "grouping"
    UNARY = "unary"
    BINARY = "binary"
    LOGICAL = "logical"
    VARIABLE = "variable"
    ASSIGN = "assign"
    CALL = "call"
    GET = "get"
    SET = "set"
    THIS = "this"
    SUPER = "super"
    # Statements
    EXPRESSION_STMT = "expression_stmt"
    PRINT_STMT = "print_stmt"
    VAR_DECL = "var_decl"
    BLOCK = "block"
    IF_STMT = "if_stmt"
    WHILE_STMT = "while_stmt"
    FUNCTION_DECL = "function_decl"
    CLASS_DECL = "class_decl"
    RETURN_STMT = "return_stmt"


class ASTNode:
    """
    Base class for all AST nodes

    `location` is the representative token's position, used for every
    diagnostic that points at this node.
    """
    __slots__ = ('node_type', 'location')

    def __init__(self, node_type: NodeType, location: Optional[SourceLocation]):
        self.node_type = node_type
        self.location = location if location is not None else UNKNOWN_LOCATION

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        raise NotImplementedError(f"accept() not implemented for {self.__class__.__name__}")


class Expression(ASTNode):
    """Base class for expressions"""
    __slots__ = ()


class Statement(ASTNode):
    """Base class for statements"""
    __slots__ = ()


# =============================================================================
# EXPRESSIONS
# =============================================================================

@dataclass(eq=False)
class Literal(Expression):
    """Literal value (nil, boolean, number, string)"""
    value: LiteralValue

    def __init__(self, value: LiteralValue, location: SourceLocation = None):
        super().__init__(NodeType.LITERAL, location)
        self.value = value

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_literal(self)


@dataclass(eq=False)
class Grouping(Expression):
    """Parenthesized expression"""
    expression: Expression

    def __init__(self, expression: Expression, location: SourceLocation = None):
        super().__init__(NodeType.GROUPING, location)
        self.expression = expression

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_grouping(self)


@dataclass(eq=False)
class Unary(Expression):
    """Prefix operator: !x, -x"""
    operator: UnaryOp
    operand: Expression

    def __init__(self, operator: UnaryOp, operand: Expression, location: SourceLocation = None):
        super().__init__(NodeType.UNARY, location)
        self.operator = operator
        self.operand = operand

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_unary(self)


@dataclass(eq=False)
class Binary(Expression):
    """Arithmetic, comparison and equality operators"""
    left: Expression
    operator: BinaryOp
    right: Expression

    def __init__(self, left: Expression, operator: BinaryOp, right: Expression, location: SourceLocation = None):
        super().__init__(NodeType.BINARY, location)
        self.left = left
        self.operator = operator
        self.right = right

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_binary(self)


@dataclass(eq=False)
class Logical(Expression):
    """Short-circuiting `and` / `or`"""
    left: Expression
    operator: LogicalOp
    right: Expression

    def __init__(self, left: Expression, operator: LogicalOp, right: Expression, location: SourceLocation = None):
        super().__init__(NodeType.LOGICAL, location)
        self.left = left
        self.operator = operator
        self.right = right

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_logical(self)


@dataclass(eq=False)
class Variable(Expression):
    """Variable reference"""
    name: str

    def __init__(self, name: str, location: SourceLocation = None):
        super().__init__(NodeType.VARIABLE, location)
        self.name = name

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_variable(self)


@dataclass(eq=False)
class Assign(Expression):
    """Assignment to an existing variable: name = value"""
    name: str
    value: Expression

    def __init__(self, name: str, value: Expression, location: SourceLocation = None):
        super().__init__(NodeType.ASSIGN, location)
        self.name = name
        self.value = value

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_assign(self)


@dataclass(eq=False)
class Call(Expression):
    """Call expression; location is the closing parenthesis"""
    callee: Expression
    arguments: List[Expression]

    def __init__(self, callee: Expression, arguments: List[Expression], location: SourceLocation = None):
        super().__init__(NodeType.CALL, location)
        self.callee = callee
        self.arguments = arguments

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_call(self)


@dataclass(eq=False)
class Get(Expression):
    """Property access: object.name"""
    object: Expression
    name: str

    def __init__(self, object: Expression, name: str, location: SourceLocation = None):
        super().__init__(NodeType.GET, location)
        self.object = object
        self.name = name

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_get(self)


@dataclass(eq=False)
class Set(Expression):
    """Property assignment: object.name = value"""
    object: Expression
    name: str
    value: Expression

    def __init__(self, object: Expression, name: str, value: Expression, location: SourceLocation = None):
        super().__init__(NodeType.SET, location)
        self.object = object
        self.name = name
        self.value = value

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_set(self)


@dataclass(eq=False)
class This(Expression):
    """`this` inside a method body"""
    keyword: str

    def __init__(self, location: SourceLocation = None):
        super().__init__(NodeType.THIS, location)
        self.keyword = "this"

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_this(self)


@dataclass(eq=False)
class Super(Expression):
    """`super.method` inside a method body"""
    keyword: str
    method: str

    def __init__(self, method: str, location: SourceLocation = None):
        super().__init__(NodeType.SUPER, location)
        self.keyword = "super"
        self.method = method

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_super(self)


# =============================================================================
# STATEMENTS
# =============================================================================

@dataclass(eq=False)
class ExpressionStatement(Statement):
    """Expression evaluated for its side effects"""
    expression: Expression

    def __init__(self, expression: Expression, location: SourceLocation = None):
        super().__init__(NodeType.EXPRESSION_STMT, location)
        self.expression = expression

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_expression_statement(self)


@dataclass(eq=False)
class PrintStatement(Statement):
    expression: Expression

    def __init__(self, expression: Expression, location: SourceLocation = None):
        super().__init__(NodeType.PRINT_STMT, location)
        self.expression = expression

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_print_statement(self)


@dataclass(eq=False)
class VarDeclaration(Statement):
    """var name (= initializer)?;"""
    name: str
    initializer: Optional[Expression]

    def __init__(self, name: str, initializer: Optional[Expression] = None, location: SourceLocation = None):
        super().__init__(NodeType.VAR_DECL, location)
        self.name = name
        self.initializer = initializer

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_var_declaration(self)


@dataclass(eq=False)
class Block(Statement):
    """{ statements } - introduces a new scope"""
    statements: List[Statement]

    def __init__(self, statements: List[Statement], location: SourceLocation = None):
        super().__init__(NodeType.BLOCK, location)
        self.statements = statements

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_block(self)


@dataclass(eq=False)
class IfStatement(Statement):
    condition: Expression
    then_branch: Statement
    else_branch: Optional[Statement]

    def __init__(self, condition: Expression, then_branch: Statement,
                 else_branch: Optional[Statement] = None, location: SourceLocation = None):
        super().__init__(NodeType.IF_STMT, location)
        self.condition = condition
        self.then_branch = then_branch
        self.else_branch = else_branch

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_if_statement(self)


@dataclass(eq=False)
class WhileStatement(Statement):
    """while loop; `for` is desugared into this by the parser"""
    condition: Expression
    body: Statement

    def __init__(self, condition: Expression, body: Statement, location: SourceLocation = None):
        super().__init__(NodeType.WHILE_STMT, location)
        self.condition = condition
        self.body = body

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_while_statement(self)


@dataclass(eq=False)
class FunctionDeclaration(Statement):
    """
    Function or method declaration.

    `body` is a plain statement list, not a Block: parameters and body
    share one scope, both in the resolver and at call time.
    `param_locations` runs parallel to `params` when the parser knows them.
    """
    name: str
    params: List[str]
    body: List[Statement]
    param_locations: List[SourceLocation]

    def __init__(self, name: str, params: List[str], body: List[Statement], location: SourceLocation = None,
                 param_locations: Optional[List[SourceLocation]] = None):
        super().__init__(NodeType.FUNCTION_DECL, location)
        self.name = name
        self.params = params
        self.body = body
        self.param_locations = param_locations if param_locations is not None else []

    def param_location(self, index: int) -> SourceLocation:
        """Where parameter `index` is written; falls back to the declaration."""
        if index < len(self.param_locations):
            return self.param_locations[index]
        return self.location

    @property
    def arity(self) -> int:
        return len(self.params)

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_function_declaration(self)


@dataclass(eq=False)
class ClassDeclaration(Statement):
    name: str
    superclass: Optional[Variable]
    methods: List[FunctionDeclaration]

    def __init__(self, name: str, superclass: Optional[Variable],
                 methods: List[FunctionDeclaration], location: SourceLocation = None):
        super().__init__(NodeType.CLASS_DECL, location)
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_class_declaration(self)


@dataclass(eq=False)
class ReturnStatement(Statement):
    """return value?; - location is the `return` keyword"""
    value: Optional[Expression]

    def __init__(self, value: Optional[Expression] = None, location: SourceLocation = None):
        super().__init__(NodeType.RETURN_STMT, location)
        self.value = value

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_return_statement(self)


# =============================================================================
# PROGRAM
# =============================================================================

@dataclass(eq=False)
class Program(ASTNode):
    """Top-level statement sequence produced by the parser"""
    statements: List[Statement]

    def __init__(self, statements: List[Statement], location: SourceLocation = None):
        super().__init__(NodeType.PROGRAM, location)
        self.statements = statements

    def __iter__(self):
        return iter(self.statements)

    def __len__(self) -> int:
        return len(self.statements)

    def accept(self, visitor: 'ASTVisitor[T]') -> Any:
        return [stmt.accept(visitor) for stmt in self.statements]
