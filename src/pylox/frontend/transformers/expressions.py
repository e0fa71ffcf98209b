"""
Expression Parser - Extracted from LoxTransformer
Handles operators, assignment targets and call argument lists
"""

from typing import Any, Callable, List, Optional
from typing_extensions import TypeAlias
from lark.lexer import Token
from ...shared import (
    Assign, Binary, BinaryOp, Call, Expression, Get, Logical, LogicalOp, ParseError,
    Set, SourceLocation, Unary, UnaryOp, Variable,
)
from ...utils.config import MAX_ARGUMENTS

# Type aliases for better clarity
LarkMeta: TypeAlias = Any  # Lark's internal Meta object
LocationExtractor: TypeAlias = Callable[[LarkMeta], SourceLocation]


class BinaryExpressionParser:
    """Dedicated parser for operator and assignment expressions"""

    def __init__(self, location_extractor: LocationExtractor) -> None:
        self.extract_location = location_extractor

    def parse_binary(self, meta: LarkMeta, left: Expression, operator: Token, right: Expression) -> Binary:
        """Parse arithmetic, comparison and equality expressions"""
        return Binary(
            left=left,
            operator=BinaryOp(str(operator)),
            right=right,
            location=self._operator_location(meta, operator),
        )

    def parse_logical(self, meta: LarkMeta, left: Expression, operator: LogicalOp, right: Expression) -> Logical:
        """Parse `and` / `or` (short-circuiting, kept apart from Binary)"""
        return Logical(left=left, operator=operator, right=right, location=self.extract_location(meta))

    def parse_unary(self, meta: LarkMeta, operator: Token, operand: Expression) -> Unary:
        return Unary(
            operator=UnaryOp(str(operator)),
            operand=operand,
            location=self._operator_location(meta, operator),
        )

    def parse_assignment(self, meta: LarkMeta, target: Expression, value: Expression) -> Expression:
        """
        Turn `target = value` into Assign or Set. The grammar accepts any
        expression on the left; only variables and property accesses are
        valid targets.
        """
        location = self.extract_location(meta)
        if isinstance(target, Variable):
            return Assign(name=target.name, value=value, location=target.location)
        if isinstance(target, Get):
            return Set(object=target.object, name=target.name, value=value, location=target.location)
        raise ParseError("Invalid assignment target.", location, lexeme="=")

    def parse_call(self, meta: LarkMeta, callee: Expression, arguments: Optional[List[Expression]] = None) -> Call:
        """Call location is the closing parenthesis."""
        arguments = arguments if arguments is not None else []
        location = self.extract_location(meta)
        if location.end_line:
            location = SourceLocation(
                file=location.file,
                line=location.end_line,
                column=max(location.end_column - 1, 1),
                start=location.end - 1 if location.end else 0,
                end=location.end,
                end_line=location.end_line,
                end_column=location.end_column,
            )
        if len(arguments) > MAX_ARGUMENTS:
            raise ParseError(f"Can't have more than {MAX_ARGUMENTS} arguments.", location, lexeme=")")
        return Call(callee=callee, arguments=arguments, location=location)

    def _operator_location(self, meta: LarkMeta, operator: Token) -> SourceLocation:
        location = self.extract_location(meta)
        # Trust: Lark Token has line/column attributes
        return SourceLocation(
            file=location.file,
            line=operator.line,
            column=operator.column,
            start=operator.start_pos or 0,
            end=operator.end_pos or 0,
            end_line=operator.end_line or 0,
            end_column=operator.end_column or 0,
        )
