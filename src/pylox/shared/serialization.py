"""
AST Serialization to S-Expressions
==================================

Renders statements and expressions as parenthesized prefix forms for
debugging and tests, e.g. `1 + 2 * 3` -> `(+ 1 (* 2 3))`.

Expressions also have a reverse Polish form, e.g. `(1 + 2) * 3` -> `1 2 + 3 *`.

Built as nested lists first, then pretty-printed: short forms stay on one
line, long forms break with one child per line.
"""

from typing import Any, List, Union

from .ast_visitor import ASTVisitor
from .errors import LoxImplementationError
from .nodes import ASTNode, Expression, Program
from .types import UnaryOp
from ..utils.base import format_number


class Symbol(str):
    """Unquoted atom (keywords, operators, names)."""


def _pretty_dumps(sexpr: Any, indent: int = 0, indent_str: str = "  ", max_line: int = 80) -> str:
    """
    Pretty-print structured sexpr. Keeps short forms on one line; breaks only when needed.
    """
    if sexpr is None:
        return "nil"
    if isinstance(sexpr, bool):
        return "true" if sexpr else "false"
    if isinstance(sexpr, float):
        return format_number(sexpr)
    if isinstance(sexpr, Symbol):
        return str(sexpr)
    if isinstance(sexpr, str):
        escaped = sexpr.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(sexpr, list):
        if not sexpr:
            return "()"
        parts = [_pretty_dumps(e, indent + 1, indent_str, max_line) for e in sexpr]
        one_line = "(" + " ".join(parts) + ")"
        if len(one_line) <= max_line and "\n" not in one_line:
            return one_line
        prefix = indent_str * indent
        next_prefix = indent_str * (indent + 1)
        # First element on same line as ( to avoid orphan (
        rest = "\n".join(next_prefix + p for p in parts[1:])
        inner = parts[0] + ("\n" + rest if rest else "")
        return f"({inner}\n{prefix})"
    return str(sexpr)


def _sym(name: str) -> Symbol:
    return Symbol(name)


class ASTSerializer(ASTVisitor[Any]):
    """Builds the nested-list form of a node."""

    def serialize(self, node: Union[ASTNode, List[ASTNode]]) -> str:
        if isinstance(node, (list, Program)):
            return "\n".join(_pretty_dumps(stmt.accept(self)) for stmt in node)
        return _pretty_dumps(node.accept(self))

    # Expressions

    def visit_literal(self, node) -> Any:
        return node.value

    def visit_grouping(self, node) -> Any:
        return [_sym("group"), node.expression.accept(self)]

    def visit_unary(self, node) -> Any:
        return [_sym(node.operator.value), node.operand.accept(self)]

    def visit_binary(self, node) -> Any:
        return [_sym(node.operator.value), node.left.accept(self), node.right.accept(self)]

    def visit_logical(self, node) -> Any:
        return [_sym(node.operator.value), node.left.accept(self), node.right.accept(self)]

    def visit_variable(self, node) -> Any:
        return _sym(node.name)

    def visit_assign(self, node) -> Any:
        return [_sym("="), _sym(node.name), node.value.accept(self)]

    def visit_call(self, node) -> Any:
        return [_sym("call"), node.callee.accept(self)] + [a.accept(self) for a in node.arguments]

    def visit_get(self, node) -> Any:
        return [_sym("."), node.object.accept(self), _sym(node.name)]

    def visit_set(self, node) -> Any:
        return [_sym("="), [_sym("."), node.object.accept(self), _sym(node.name)], node.value.accept(self)]

    def visit_this(self, node) -> Any:
        return _sym("this")

    def visit_super(self, node) -> Any:
        return [_sym("super"), _sym(node.method)]

    # Statements

    def visit_expression_statement(self, node) -> Any:
        return [_sym(";"), node.expression.accept(self)]

    def visit_print_statement(self, node) -> Any:
        return [_sym("print"), node.expression.accept(self)]

    def visit_var_declaration(self, node) -> Any:
        out = [_sym("var"), _sym(node.name)]
        if node.initializer is not None:
            out.append(node.initializer.accept(self))
        return out

    def visit_block(self, node) -> Any:
        return [_sym("block")] + [s.accept(self) for s in node.statements]

    def visit_if_statement(self, node) -> Any:
        out = [_sym("if"), node.condition.accept(self), node.then_branch.accept(self)]
        if node.else_branch is not None:
            out.append(node.else_branch.accept(self))
        return out

    def visit_while_statement(self, node) -> Any:
        return [_sym("while"), node.condition.accept(self), node.body.accept(self)]

    def visit_function_declaration(self, node) -> Any:
        params = [_sym(p) for p in node.params]
        return [_sym("fun"), _sym(node.name), params] + [s.accept(self) for s in node.body]

    def visit_class_declaration(self, node) -> Any:
        out = [_sym("class"), _sym(node.name)]
        if node.superclass is not None:
            out.append([_sym("<"), _sym(node.superclass.name)])
        out.extend(m.accept(self) for m in node.methods)
        return out

    def visit_return_statement(self, node) -> Any:
        out = [_sym("return")]
        if node.value is not None:
            out.append(node.value.accept(self))
        return out

class RPNSerializer(ASTVisitor[str]):
    """
    Renders an expression in reverse Polish notation: operands first, then
    the operator, with no parentheses. `(1 + 2) * (4 - 3)` -> `1 2 + 4 3 - *`.

    Negation prints as `~` so it cannot be confused with subtraction. Calls
    print as `callee args... call/N`, where N is the argument count.
    Only expressions have a postfix form; statements are rejected.
    """

    def serialize(self, node: ASTNode) -> str:
        return node.accept(self)

    def visit_literal(self, node) -> str:
        return _pretty_dumps(node.value)

    def visit_grouping(self, node) -> str:
        return node.expression.accept(self)

    def visit_unary(self, node) -> str:
        operator = "~" if node.operator is UnaryOp.NEG else node.operator.value
        return f"{node.operand.accept(self)} {operator}"

    def visit_binary(self, node) -> str:
        return f"{node.left.accept(self)} {node.right.accept(self)} {node.operator.value}"

    def visit_logical(self, node) -> str:
        return f"{node.left.accept(self)} {node.right.accept(self)} {node.operator.value}"

    def visit_variable(self, node) -> str:
        return node.name

    def visit_assign(self, node) -> str:
        return f"{node.value.accept(self)} {node.name} ="

    def visit_call(self, node) -> str:
        parts = [node.callee.accept(self)] + [a.accept(self) for a in node.arguments]
        parts.append(f"call/{len(node.arguments)}")
        return " ".join(parts)

    def visit_get(self, node) -> str:
        return f"{node.object.accept(self)} .{node.name}"

    def visit_set(self, node) -> str:
        return f"{node.object.accept(self)} {node.value.accept(self)} .{node.name} ="

    def visit_this(self, node) -> str:
        return "this"

    def visit_super(self, node) -> str:
        return f"super .{node.method}"

    def _not_an_expression(self, node) -> str:
        raise LoxImplementationError(f"No postfix form for statement {node.node_type.name}")

    visit_expression_statement = _not_an_expression
    visit_print_statement = _not_an_expression
    visit_var_declaration = _not_an_expression
    visit_block = _not_an_expression
    visit_if_statement = _not_an_expression
    visit_while_statement = _not_an_expression
    visit_function_declaration = _not_an_expression
    visit_class_declaration = _not_an_expression
    visit_return_statement = _not_an_expression


def serialize_ast(node: Union[ASTNode, List[ASTNode]]) -> str:
    """Serialize a node, statement list or Program to S-expression text."""
    return ASTSerializer().serialize(node)


def serialize_rpn(expression: Expression) -> str:
    """Serialize an expression in reverse Polish notation."""
    return RPNSerializer().serialize(expression)
