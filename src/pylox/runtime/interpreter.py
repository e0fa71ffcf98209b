"""Tree-walking evaluator. Statements yield ExecutionFlow; runtime errors raise LoxRuntimeError."""

import logging
import math
import sys
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, TextIO

from ..passes.base import ResolutionTable
from ..shared.ast_visitor import ASTVisitor
from ..shared.errors import LoxImplementationError, LoxRuntimeError, RuntimeErrorKind
from ..shared.nodes import Expression, Statement
from ..shared.source_location import SourceLocation
from ..shared.types import BinaryOp, LogicalOp, UnaryOp
from ..utils.base import ExecutionFlow, format_number
from ..utils.config import (
    BOOLEAN_FALSE_LITERAL, BOOLEAN_TRUE_LITERAL, INITIALIZER_NAME, NIL_LITERAL,
    SUPER_KEYWORD, THIS_KEYWORD,
)
from .callables import LoxCallable, LoxFunction
from .environment import Environment
from .natives import define_natives
from .objects import LoxClass, LoxInstance

logger = logging.getLogger("pylox.runtime.interpreter")


def _is_number(value: Any) -> bool:
    # bool is an int subclass; Lox numbers are always float
    return type(value) is float


def _divide(left: float, right: float) -> float:
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _is_odd_integer(value: float) -> bool:
    return value.is_integer() and int(value) % 2 == 1


def _power(left: float, right: float) -> float:
    # A negative base keeps its sign only under an odd integer exponent.
    sign = left if _is_odd_integer(right) else 1.0
    try:
        return math.pow(left, right)
    except ValueError:
        # 0 ^ negative is a pole, not a domain error
        if left == 0.0 and right < 0.0:
            return math.copysign(math.inf, sign)
        return math.nan
    except OverflowError:
        return math.copysign(math.inf, sign)


_ARITHMETIC_OP_MAP = {
    BinaryOp.SUB: lambda l, r: l - r,
    BinaryOp.MUL: lambda l, r: l * r,
    BinaryOp.DIV: _divide,
    BinaryOp.POW: _power,
    BinaryOp.LT: lambda l, r: l < r,
    BinaryOp.LE: lambda l, r: l <= r,
    BinaryOp.GT: lambda l, r: l > r,
    BinaryOp.GE: lambda l, r: l >= r,
}


def is_truthy(value: Any) -> bool:
    """nil and false are falsey; everything else (0, "" included) is truthy."""
    if value is None:
        return False
    if type(value) is bool:
        return value
    return True


def is_equal(left: Any, right: Any) -> bool:
    """Lox equality: no coercion across types; objects compare by identity."""
    if left is None or right is None:
        return left is right
    if type(left) is not type(right):
        return False
    if isinstance(left, float):
        return _same_number(left, right)
    if isinstance(left, (bool, str)):
        return left == right
    return left is right


def _same_number(left: float, right: float) -> bool:
    """Boxed-double equality: nan equals nan, 0 and -0 differ."""
    if math.isnan(left) or math.isnan(right):
        return math.isnan(left) and math.isnan(right)
    return left == right and math.copysign(1.0, left) == math.copysign(1.0, right)


def stringify(value: Any) -> str:
    if value is None:
        return NIL_LITERAL
    if type(value) is bool:
        return BOOLEAN_TRUE_LITERAL if value else BOOLEAN_FALSE_LITERAL
    if _is_number(value):
        return format_number(value)
    return str(value)


class Interpreter(ASTVisitor[Any]):
    """
    Evaluates a resolved program.

    Locals resolved by the static pass are read with `get_at` / `assign_at`
    using the recorded distance; anything without a distance is a global.
    """

    def __init__(self, output: Optional[TextIO] = None):
        self.globals = Environment()
        define_natives(self.globals)
        self.environment = self.globals
        self.locals = ResolutionTable()
        self.output = output

    # =========================================================================
    # Entry points
    # =========================================================================

    def install_resolutions(self, table: ResolutionTable) -> None:
        """Add resolver results; called once per compiled program."""
        self.locals.update(table)

    def interpret(self, statements: Sequence[Statement]) -> Optional[LoxRuntimeError]:
        """
        Execute top-level statements in order. Returns the first runtime error
        (execution stops there) or None.
        """
        try:
            for statement in statements:
                self.execute(statement)
        except LoxRuntimeError as error:
            logger.debug(f"Runtime error [{error.error_code}] at {error.location}: {error.message}")
            return error
        return None

    def execute(self, statement: Statement) -> ExecutionFlow:
        return statement.accept(self)

    def evaluate(self, expression: Expression) -> Any:
        return expression.accept(self)

    def execute_block(self, statements: Sequence[Statement], environment: Environment) -> ExecutionFlow:
        """Run statements in `environment`; stops early and propagates a RETURN."""
        with self._scoped(environment):
            for statement in statements:
                flow = self.execute(statement)
                if flow.is_return():
                    return flow
        return ExecutionFlow.continue_execution()

    @contextmanager
    def _scoped(self, environment: Environment) -> Iterator[None]:
        previous = self.environment
        self.environment = environment
        try:
            yield
        finally:
            self.environment = previous

    def _write(self, text: str) -> None:
        stream = self.output if self.output is not None else sys.stdout
        stream.write(text + "\n")

    # =========================================================================
    # Variable access
    # =========================================================================

    def _look_up_variable(self, name: str, expr: Expression) -> Any:
        distance = self.locals.distance(expr)
        if distance is not None:
            return self.environment.get_at(distance, name, expr.location)
        return self.globals.get(name, expr.location)

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_expression_statement(self, node) -> ExecutionFlow:
        self.evaluate(node.expression)
        return ExecutionFlow.continue_execution()

    def visit_print_statement(self, node) -> ExecutionFlow:
        value = self.evaluate(node.expression)
        self._write(stringify(value))
        return ExecutionFlow.continue_execution()

    def visit_var_declaration(self, node) -> ExecutionFlow:
        value = None
        if node.initializer is not None:
            value = self.evaluate(node.initializer)
        self.environment.define(node.name, value)
        return ExecutionFlow.continue_execution()

    def visit_block(self, node) -> ExecutionFlow:
        return self.execute_block(node.statements, Environment(self.environment))

    def visit_if_statement(self, node) -> ExecutionFlow:
        if is_truthy(self.evaluate(node.condition)):
            return self.execute(node.then_branch)
        if node.else_branch is not None:
            return self.execute(node.else_branch)
        return ExecutionFlow.continue_execution()

    def visit_while_statement(self, node) -> ExecutionFlow:
        while is_truthy(self.evaluate(node.condition)):
            flow = self.execute(node.body)
            if flow.is_return():
                return flow
        return ExecutionFlow.continue_execution()

    def visit_function_declaration(self, node) -> ExecutionFlow:
        function = LoxFunction(node, self.environment, is_initializer=False)
        self.environment.define(node.name, function)
        return ExecutionFlow.continue_execution()

    def visit_return_statement(self, node) -> ExecutionFlow:
        value = None
        if node.value is not None:
            value = self.evaluate(node.value)
        return ExecutionFlow.return_value(value)

    def visit_class_declaration(self, node) -> ExecutionFlow:
        superclass = None
        if node.superclass is not None:
            superclass = self.evaluate(node.superclass)
            if not isinstance(superclass, LoxClass):
                raise LoxRuntimeError(
                    RuntimeErrorKind.TYPE_MISMATCH,
                    "Superclass must be a class.",
                    node.superclass.location,
                    lexeme=node.superclass.name,
                )

        self.environment.define(node.name, None)

        # Methods of a subclass close over an extra frame holding `super`.
        method_closure = self.environment
        if superclass is not None:
            method_closure = Environment(self.environment)
            method_closure.define(SUPER_KEYWORD, superclass)

        methods: Dict[str, LoxFunction] = {}
        for method in node.methods:
            methods[method.name] = LoxFunction(
                method, method_closure, is_initializer=method.name == INITIALIZER_NAME
            )

        klass = LoxClass(node.name, superclass, methods)
        logger.debug(f"Declared class {node.name} with {len(methods)} method(s)")
        self.environment.assign(node.name, klass, node.location)
        return ExecutionFlow.continue_execution()

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_literal(self, node) -> Any:
        return node.value

    def visit_grouping(self, node) -> Any:
        return self.evaluate(node.expression)

    def visit_variable(self, node) -> Any:
        return self._look_up_variable(node.name, node)

    def visit_assign(self, node) -> Any:
        value = self.evaluate(node.value)
        distance = self.locals.distance(node)
        if distance is not None:
            self.environment.assign_at(distance, node.name, value)
        else:
            self.globals.assign(node.name, value, node.location)
        return value

    def visit_logical(self, node) -> Any:
        left = self.evaluate(node.left)
        if node.operator is LogicalOp.OR:
            if is_truthy(left):
                return left
        elif node.operator is LogicalOp.AND:
            if not is_truthy(left):
                return left
        else:
            raise LoxImplementationError(f"Unknown logical operator: {node.operator}")
        return self.evaluate(node.right)

    def visit_unary(self, node) -> Any:
        operand = self.evaluate(node.operand)
        if node.operator is UnaryOp.NOT:
            return not is_truthy(operand)
        if node.operator is UnaryOp.NEG:
            if not _is_number(operand):
                raise LoxRuntimeError(
                    RuntimeErrorKind.TYPE_MISMATCH, "Operand must be a number.", node.location,
                    lexeme=node.operator.value,
                )
            return -operand
        raise LoxImplementationError(f"Unknown unary operator: {node.operator}")

    def visit_binary(self, node) -> Any:
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        op = node.operator

        if op is BinaryOp.EQ:
            return is_equal(left, right)
        if op is BinaryOp.NE:
            return not is_equal(left, right)

        if op is BinaryOp.ADD:
            if _is_number(left) and _is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(
                RuntimeErrorKind.TYPE_MISMATCH, "Operands must be two numbers or two strings.",
                node.location, lexeme=op.value,
            )

        fn = _ARITHMETIC_OP_MAP.get(op)
        if fn is None:
            raise LoxImplementationError(f"Unknown binary operator: {op}")
        if not (_is_number(left) and _is_number(right)):
            raise LoxRuntimeError(
                RuntimeErrorKind.TYPE_MISMATCH, "Operands must be numbers.", node.location,
                lexeme=op.value,
            )
        return fn(left, right)

    def visit_call(self, node) -> Any:
        callee = self.evaluate(node.callee)
        arguments: List[Any] = [self.evaluate(argument) for argument in node.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(
                RuntimeErrorKind.NOT_CALLABLE, "Can only call functions and classes.",
                node.location, lexeme=")",
            )
        if len(arguments) != callee.arity():
            raise LoxRuntimeError(
                RuntimeErrorKind.ARITY_MISMATCH,
                f"Expected {callee.arity()} arguments but got {len(arguments)}.",
                node.location, lexeme=")",
            )
        return callee.call(self, arguments)

    def visit_get(self, node) -> Any:
        obj = self.evaluate(node.object)
        if isinstance(obj, LoxInstance):
            return obj.get(node.name, node.location)
        raise LoxRuntimeError(
            RuntimeErrorKind.UNDEFINED_PROPERTY, "Only instances have properties.",
            node.location, lexeme=node.name,
        )

    def visit_set(self, node) -> Any:
        obj = self.evaluate(node.object)
        if not isinstance(obj, LoxInstance):
            raise LoxRuntimeError(
                RuntimeErrorKind.UNDEFINED_PROPERTY, "Only instances have fields.",
                node.location, lexeme=node.name,
            )
        value = self.evaluate(node.value)
        obj.set(node.name, value)
        return value

    def visit_this(self, node) -> Any:
        return self._look_up_variable(THIS_KEYWORD, node)

    def visit_super(self, node) -> Any:
        distance = self.locals.distance(node)
        if distance is None:
            raise LoxImplementationError("Unresolved 'super' expression")
        superclass: LoxClass = self.environment.get_at(distance, SUPER_KEYWORD, node.location)
        # `this` lives in the frame just inside the `super` frame.
        instance = self.environment.get_at(distance - 1, THIS_KEYWORD, node.location)

        method = superclass.find_own_method(node.method)
        if method is None:
            raise LoxRuntimeError(
                RuntimeErrorKind.UNDEFINED_PROPERTY, f"Undefined property '{node.method}'.",
                node.location, lexeme=node.method,
            )
        return method.bind(instance)


__all__ = ["Interpreter", "is_truthy", "is_equal", "stringify"]
