"""
Lox Parser - lark parse tree to AST

Each grammar rule (or alias) has one method here. Operator, literal and
function handling is delegated to the specialized parsers next door.
"""

from lark import Transformer, v_args
from lark.lexer import Token
from typing import List, Optional, Tuple, Union, Any
from typing_extensions import TypeAlias
import logging

from ...shared import *
from ...shared.types import LogicalOp
from ...utils.base import extract_location_info

from .literals import LiteralParser
from .functions import FunctionDefinitionParser, ParameterParser
from .expressions import BinaryExpressionParser

# Precise types for better type safety
ParseResult: TypeAlias = Union[ASTNode, List[ASTNode]]
# Lark Meta object contains location information
LarkMeta: TypeAlias = Union[None, object]

logger: logging.Logger = logging.getLogger("pylox.frontend.transformers")


@v_args(inline=True, meta=True)
class LoxTransformer(Transformer):
    """
    Lox AST Transformer

    Builds AST nodes with source locations taken from lark's propagated
    positions. `current_file` must be set by the parser before transforming.
    """

    def __init__(self) -> None:
        super().__init__()
        self.function_parser: FunctionDefinitionParser = FunctionDefinitionParser(self._extract_location)
        self.parameter_parser: ParameterParser = ParameterParser(self._extract_location)
        self.expression_parser: BinaryExpressionParser = BinaryExpressionParser(self._extract_location)
        self.current_file: str = ""  # Must be set by parser before use

    def _extract_location(self, meta: LarkMeta) -> SourceLocation:
        """Extract location from Lark meta object"""
        if not self.current_file:
            raise RuntimeError(
                "Parser bug: current_file not set. "
                "Parser must set current_file before transforming."
            )

        location_info = extract_location_info(meta)
        if location_info['has_location']:
            return SourceLocation(
                file=self.current_file,
                line=location_info['line'],
                column=location_info['column'],
                start=location_info['start_pos'],
                end=location_info['end_pos'],
                end_line=location_info['end_line'],
                end_column=location_info['end_column'],
            )
        return SourceLocation(file=self.current_file, line=0, column=0)

    def _token_location(self, token: Token) -> SourceLocation:
        return SourceLocation(
            file=self.current_file,
            line=token.line or 0,
            column=token.column or 0,
            start=token.start_pos or 0,
            end=token.end_pos or 0,
            end_line=token.end_line or 0,
            end_column=token.end_column or 0,
        )

    # =========================================================================
    # PROGRAM STRUCTURE
    # =========================================================================

    def program(self, meta: LarkMeta, *statements: Statement) -> Program:
        return Program(statements=list(statements), location=self._extract_location(meta))

    # =========================================================================
    # DECLARATIONS
    # =========================================================================

    def class_decl(self, meta: LarkMeta, name: Token, *args: Union[Variable, FunctionDeclaration]) -> ClassDeclaration:
        return self.function_parser.parse_class_definition(meta, name, *args)

    def superclass(self, meta: LarkMeta, name: Token) -> Variable:
        return Variable(name=str(name), location=self._token_location(name))

    def fun_decl(self, meta: LarkMeta, function: FunctionDeclaration) -> FunctionDeclaration:
        return function

    def function(self, meta: LarkMeta, name: Token, *args: List[Any]) -> FunctionDeclaration:
        return self.function_parser.parse_function_definition(meta, name, *args)

    def parameters(self, meta: LarkMeta, *names: Token) -> List[Tuple[str, SourceLocation]]:
        return self.parameter_parser.parse_parameters(meta, *names)

    def body(self, meta: LarkMeta, *statements: Statement) -> List[Statement]:
        return list(statements)

    def var_decl(self, meta: LarkMeta, name: Token, initializer: Optional[Expression] = None) -> VarDeclaration:
        return VarDeclaration(name=str(name), initializer=initializer, location=self._token_location(name))

    # =========================================================================
    # STATEMENTS
    # =========================================================================

    def expr_stmt(self, meta: LarkMeta, expr: Expression) -> ExpressionStatement:
        return ExpressionStatement(expression=expr, location=self._extract_location(meta))

    def print_stmt(self, meta: LarkMeta, expr: Expression) -> PrintStatement:
        return PrintStatement(expression=expr, location=self._extract_location(meta))

    def return_stmt(self, meta: LarkMeta, value: Optional[Expression] = None) -> ReturnStatement:
        return ReturnStatement(value=value, location=self._extract_location(meta))

    def while_stmt(self, meta: LarkMeta, condition: Expression, body: Statement) -> WhileStatement:
        return WhileStatement(condition=condition, body=body, location=self._extract_location(meta))

    def if_stmt(self, meta: LarkMeta, condition: Expression, then_branch: Statement,
                else_branch: Optional[Statement] = None) -> IfStatement:
        return IfStatement(
            condition=condition,
            then_branch=then_branch,
            else_branch=else_branch,
            location=self._extract_location(meta),
        )

    def block(self, meta: LarkMeta, *statements: Statement) -> Block:
        return Block(statements=list(statements), location=self._extract_location(meta))

    def for_init(self, meta: LarkMeta, initializer: Optional[Statement] = None) -> Optional[Statement]:
        return initializer

    def for_cond(self, meta: LarkMeta, condition: Optional[Expression] = None) -> Optional[Expression]:
        return condition

    def for_incr(self, meta: LarkMeta, increment: Optional[Expression] = None) -> Optional[Expression]:
        return increment

    def for_stmt(self, meta: LarkMeta, initializer: Optional[Statement], condition: Optional[Expression],
                 increment: Optional[Expression], body: Statement) -> Statement:
        """
        Desugar into while:
            { init; while (cond) { body; incr; } }
        A missing condition loops forever.
        """
        location = self._extract_location(meta)
        if increment is not None:
            body = Block(
                statements=[body, ExpressionStatement(expression=increment, location=increment.location)],
                location=body.location,
            )
        if condition is None:
            condition = Literal(value=True, location=location)
        loop: Statement = WhileStatement(condition=condition, body=body, location=location)
        if initializer is not None:
            loop = Block(statements=[initializer, loop], location=location)
        return loop

    # =========================================================================
    # EXPRESSIONS
    # =========================================================================

    def assign(self, meta: LarkMeta, target: Expression, value: Expression) -> Expression:
        return self.expression_parser.parse_assignment(meta, target, value)

    def logical_or(self, meta: LarkMeta, left: Expression, right: Expression) -> Logical:
        return self.expression_parser.parse_logical(meta, left, LogicalOp.OR, right)

    def logical_and(self, meta: LarkMeta, left: Expression, right: Expression) -> Logical:
        return self.expression_parser.parse_logical(meta, left, LogicalOp.AND, right)

    def binary(self, meta: LarkMeta, left: Expression, operator: Token, right: Expression) -> Binary:
        return self.expression_parser.parse_binary(meta, left, operator, right)

    def unary_expr(self, meta: LarkMeta, operator: Token, operand: Expression) -> Unary:
        return self.expression_parser.parse_unary(meta, operator, operand)

    def call(self, meta: LarkMeta, callee: Expression, arguments: Optional[List[Expression]] = None) -> Call:
        return self.expression_parser.parse_call(meta, callee, arguments)

    def arguments(self, meta: LarkMeta, *args: Expression) -> List[Expression]:
        return list(args)

    def get(self, meta: LarkMeta, obj: Expression, name: Token) -> Get:
        return Get(object=obj, name=str(name), location=self._token_location(name))

    # Operator rules keep their single token
    def equality_op(self, meta: LarkMeta, token: Token) -> Token:
        return token

    comparison_op = equality_op
    term_op = equality_op
    factor_op = equality_op
    unary_op = equality_op

    # =========================================================================
    # PRIMARIES
    # =========================================================================

    def true(self, meta: LarkMeta) -> Literal:
        return Literal(value=True, location=self._extract_location(meta))

    def false(self, meta: LarkMeta) -> Literal:
        return Literal(value=False, location=self._extract_location(meta))

    def nil(self, meta: LarkMeta) -> Literal:
        return Literal(value=None, location=self._extract_location(meta))

    def number(self, meta: LarkMeta, token: Token) -> Literal:
        return LiteralParser.parse(token, self._token_location(token))

    def string(self, meta: LarkMeta, token: Token) -> Literal:
        return LiteralParser.parse(token, self._token_location(token))

    def variable(self, meta: LarkMeta, name: Token) -> Variable:
        return Variable(name=str(name), location=self._token_location(name))

    def this_expr(self, meta: LarkMeta) -> This:
        return This(location=self._extract_location(meta))

    def super_expr(self, meta: LarkMeta, method: Token) -> Super:
        return Super(method=str(method), location=self._extract_location(meta))

    def grouping(self, meta: LarkMeta, expr: Expression) -> Grouping:
        return Grouping(expression=expr, location=self._extract_location(meta))
