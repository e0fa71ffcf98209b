"""
Tests for the front end: grammar coverage, desugaring, locations and
syntax errors.
"""

import pytest

from pylox.frontend.parser import Parser, ParseError
from pylox.shared.errors import ErrorPhase, SYNTAX_ERROR_CODE
from pylox.shared.nodes import (
    Assign, Binary, Block, Call, ClassDeclaration, ExpressionStatement, FunctionDeclaration,
    Get, Grouping, IfStatement, Literal, Logical, PrintStatement, ReturnStatement, Set,
    Super, This, Unary, VarDeclaration, Variable, WhileStatement,
)
from pylox.shared.types import BinaryOp, LogicalOp, UnaryOp


@pytest.fixture(scope="module")
def parser():
    return Parser()


def _parse(parser, source):
    return parser.parse(source, "<test>").statements


def _expr(parser, source):
    statements = _parse(parser, source)
    assert len(statements) == 1
    assert isinstance(statements[0], ExpressionStatement)
    return statements[0].expression


class TestExpressions:

    def test_precedence(self, parser):
        expr = _expr(parser, "1 + 2 * 3;")
        assert isinstance(expr, Binary)
        assert expr.operator is BinaryOp.ADD
        assert isinstance(expr.right, Binary)
        assert expr.right.operator is BinaryOp.MUL

    def test_left_associativity(self, parser):
        expr = _expr(parser, "1 - 2 - 3;")
        assert expr.operator is BinaryOp.SUB
        assert isinstance(expr.left, Binary)
        assert expr.right.value == 3.0

    def test_literals(self, parser):
        values = [_expr(parser, src).value for src in ("12;", "1.5;", '"text";', "true;", "false;", "nil;")]
        assert values == [12.0, 1.5, "text", True, False, None]
        assert type(values[0]) is float

    def test_unary_and_grouping(self, parser):
        expr = _expr(parser, "!(a);")
        assert isinstance(expr, Unary)
        assert expr.operator is UnaryOp.NOT
        assert isinstance(expr.operand, Grouping)

    def test_logical_operators(self, parser):
        expr = _expr(parser, "a or b and c;")
        assert isinstance(expr, Logical)
        assert expr.operator is LogicalOp.OR
        assert isinstance(expr.right, Logical)
        assert expr.right.operator is LogicalOp.AND

    def test_assignment_is_right_associative(self, parser):
        expr = _expr(parser, "a = b = 1;")
        assert isinstance(expr, Assign)
        assert expr.name == "a"
        assert isinstance(expr.value, Assign)

    def test_property_assignment_becomes_set(self, parser):
        expr = _expr(parser, "a.b.c = 1;")
        assert isinstance(expr, Set)
        assert expr.name == "c"
        assert isinstance(expr.object, Get)

    def test_call_chain(self, parser):
        expr = _expr(parser, "f(1)(2, 3).g();")
        assert isinstance(expr, Call)
        assert expr.arguments == []
        assert isinstance(expr.callee, Get)
        inner = expr.callee.object
        assert isinstance(inner, Call)
        assert len(inner.arguments) == 2

    def test_this_and_super(self, parser):
        klass = _parse(parser, "class B < A { m() { return super.m(this); } }")[0]
        call = klass.methods[0].body[0].value
        assert isinstance(call.callee, Super)
        assert call.callee.method == "m"
        assert isinstance(call.arguments[0], This)

    def test_keyword_prefixed_identifier(self, parser):
        expr = _expr(parser, "orchid;")
        assert isinstance(expr, Variable)
        assert expr.name == "orchid"


class TestStatementsAndDeclarations:

    def test_var_declarations(self, parser):
        with_init, without = _parse(parser, "var a = 1; var b;")
        assert isinstance(with_init, VarDeclaration)
        assert with_init.initializer.value == 1.0
        assert without.initializer is None

    def test_function_declaration(self, parser):
        fn = _parse(parser, "fun add(a, b) { return a + b; }")[0]
        assert isinstance(fn, FunctionDeclaration)
        assert fn.params == ["a", "b"]
        assert fn.arity == 2
        assert isinstance(fn.body[0], ReturnStatement)

    def test_parameters_carry_their_own_locations(self, parser):
        fn = _parse(parser, "fun add(a,\n        b) {}")[0]
        assert [(loc.line, loc.column) for loc in fn.param_locations] == [(1, 9), (2, 9)]
        assert fn.param_location(1).end_column == 10

    def test_function_without_parameters(self, parser):
        fn = _parse(parser, "fun f() {}")[0]
        assert fn.params == []
        assert fn.body == []

    def test_class_declaration(self, parser):
        klass = _parse(parser, "class B < A { init(x) {} m() {} }")[0]
        assert isinstance(klass, ClassDeclaration)
        assert klass.name == "B"
        assert isinstance(klass.superclass, Variable)
        assert klass.superclass.name == "A"
        assert [m.name for m in klass.methods] == ["init", "m"]

    def test_class_without_superclass(self, parser):
        klass = _parse(parser, "class A {}")[0]
        assert klass.superclass is None
        assert klass.methods == []

    def test_dangling_else(self, parser):
        outer = _parse(parser, "if (a) if (b) print 1; else print 2;")[0]
        assert isinstance(outer, IfStatement)
        assert outer.else_branch is None
        assert isinstance(outer.then_branch, IfStatement)
        assert isinstance(outer.then_branch.else_branch, PrintStatement)

    def test_for_desugars_to_while(self, parser):
        loop = _parse(parser, "for (var i = 0; i < 3; i = i + 1) print i;")[0]
        assert isinstance(loop, Block)
        init, while_stmt = loop.statements
        assert isinstance(init, VarDeclaration)
        assert isinstance(while_stmt, WhileStatement)
        body = while_stmt.body
        assert isinstance(body, Block)
        assert isinstance(body.statements[0], PrintStatement)
        assert isinstance(body.statements[1].expression, Assign)

    def test_for_with_no_clauses(self, parser):
        loop = _parse(parser, "for (;;) print 1;")[0]
        assert isinstance(loop, WhileStatement)
        assert isinstance(loop.condition, Literal)
        assert loop.condition.value is True
        assert isinstance(loop.body, PrintStatement)

    def test_for_with_expression_initializer(self, parser):
        loop = _parse(parser, "for (i = 0; i < 1;) {}")[0]
        assert isinstance(loop, Block)
        assert isinstance(loop.statements[0], ExpressionStatement)


class TestLocations:

    def test_token_lines(self, parser):
        stmt = _parse(parser, "\n\nprint x;")[0]
        assert stmt.expression.location.line == 3
        assert stmt.expression.location.file == "<test>"

    def test_binary_location_is_operator(self, parser):
        expr = _expr(parser, "1\n+\n2;")
        assert expr.location.line == 2

    def test_call_location_is_closing_paren(self, parser):
        expr = _expr(parser, "f(\n1,\n2\n);")
        assert expr.location.line == 4


class TestSyntaxErrors:

    @pytest.mark.parametrize("source", ["1 = 2;", "a + b = c;", "(a) = 1;"])
    def test_invalid_assignment_target(self, parser, source):
        with pytest.raises(ParseError) as exc_info:
            parser.parse(source, "<test>")
        assert exc_info.value.message == "Invalid assignment target."

    @pytest.mark.parametrize("source", ["print ;", "var 1 = 2;", "var class = 1;", "fun () {}", "print 1"])
    def test_unexpected_input(self, parser, source):
        with pytest.raises(ParseError) as exc_info:
            parser.parse(source, "<test>")
        assert exc_info.value.message.startswith("Unexpected")

    def test_unexpected_character(self, parser):
        with pytest.raises(ParseError) as exc_info:
            parser.parse("print 1 @ 2;", "<test>")
        assert exc_info.value.message == "Unexpected character."
        assert exc_info.value.lexeme == "@"
        assert exc_info.value.location.column == 9

    def test_too_many_arguments(self, parser):
        args = ", ".join(["1"] * 256)
        with pytest.raises(ParseError) as exc_info:
            parser.parse(f"f({args});", "<test>")
        assert exc_info.value.message == "Can't have more than 255 arguments."

    def test_max_arguments_is_allowed(self, parser):
        args = ", ".join(["1"] * 255)
        expr = _expr(parser, f"f({args});")
        assert len(expr.arguments) == 255

    def test_too_many_parameters(self, parser):
        params = ", ".join(f"p{i}" for i in range(256))
        with pytest.raises(ParseError) as exc_info:
            parser.parse(f"fun f({params}) {{}}", "<test>")
        assert exc_info.value.message == "Can't have more than 255 parameters."

    def test_compiler_reports_syntax_errors(self, compiler):
        result = compiler.compile("var = ;", "<test>")
        assert not result.success
        assert result.program is None
        assert len(result.errors) == 1
        assert result.errors[0].phase is ErrorPhase.SYNTAX
        assert result.errors[0].code == SYNTAX_ERROR_CODE
        assert result.get_errors()[0].startswith("error[E0001]")
