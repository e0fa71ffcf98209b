"""
Tests for static scope resolution: hop counts and static errors.
"""

import pytest

from pylox.passes.base import ResolutionTable
from pylox.passes.resolver import resolve
from pylox.shared.errors import ErrorPhase, ResolutionErrorKind
from pylox.shared.nodes import (
    Block, Call, ClassDeclaration, ExpressionStatement, FunctionDeclaration,
    Literal, PrintStatement, ReturnStatement, Super, This, VarDeclaration, Variable,
)
from tests.test_utils import compile_and_execute


def _codes(errors):
    return [e.code for e in errors]


class TestResolutionDistances:
    """Distances recorded for hand-built trees"""

    def test_global_reference_is_unrecorded(self):
        ref = Variable("a")
        table = ResolutionTable()
        errors = resolve([VarDeclaration("a", Literal(1.0)), PrintStatement(ref)], table)
        assert errors == []
        assert ref not in table
        assert table.distance(ref) is None

    def test_block_local_distance_counts_hops(self):
        near = Variable("a")
        far = Variable("a")
        program = [
            Block([
                VarDeclaration("a", Literal(1.0)),
                PrintStatement(near),
                Block([PrintStatement(far)]),
            ])
        ]
        table = ResolutionTable()
        assert resolve(program, table) == []
        assert table.distance(near) == 0
        assert table.distance(far) == 1

    def test_parameters_and_body_share_one_scope(self):
        ref = Variable("x")
        nested = Variable("x")
        fn = FunctionDeclaration("f", ["x"], [PrintStatement(ref), Block([PrintStatement(nested)])])
        table = ResolutionTable()
        assert resolve([fn], table) == []
        assert table.distance(ref) == 0
        assert table.distance(nested) == 1

    def test_closure_reference_to_enclosing_function_local(self):
        ref = Variable("a")
        inner = FunctionDeclaration("inner", [], [PrintStatement(ref)])
        outer = FunctionDeclaration("outer", [], [VarDeclaration("a", Literal(1.0)), inner])
        table = ResolutionTable()
        assert resolve([outer], table) == []
        assert table.distance(ref) == 1

    def test_this_is_one_hop_outside_method_scope(self):
        this_node = This()
        method = FunctionDeclaration("m", [], [ReturnStatement(this_node)])
        table = ResolutionTable()
        assert resolve([ClassDeclaration("A", None, [method])], table) == []
        assert table.distance(this_node) == 1

    def test_super_is_two_hops_outside_method_scope(self):
        super_node = Super("m")
        method = FunctionDeclaration("m", [], [ExpressionStatement(Call(super_node, []))])
        klass = ClassDeclaration("B", Variable("A"), [method])
        table = ResolutionTable()
        assert resolve([klass], table) == []
        assert table.distance(super_node) == 2

    def test_forward_reference_to_later_global(self):
        ref = Variable("g")
        fn = FunctionDeclaration("f", [], [PrintStatement(ref)])
        table = ResolutionTable()
        assert resolve([fn, VarDeclaration("g", Literal(1.0))], table) == []
        assert ref not in table

    def test_resolving_twice_gives_identical_annotations(self):
        ref = Variable("a")
        program = [Block([VarDeclaration("a", None), Block([PrintStatement(ref)])])]
        first = ResolutionTable()
        second = ResolutionTable()
        resolve(program, first)
        resolve(program, second)
        assert first == second
        assert len(first) == 1


class TestStaticErrors:
    """Static errors, reported through the compiler"""

    def _compile_errors(self, compiler, source):
        result = compiler.compile(source, "<test>")
        assert not result.success
        return result.errors

    def test_self_referential_initializer(self, compiler):
        errors = self._compile_errors(compiler, '{ var a = "outer"; { var a = a; } }')
        assert _codes(errors) == [ResolutionErrorKind.SELF_REFERENTIAL_INITIALIZER.value]
        assert errors[0].message == "Can't read local variable in its own initializer."
        assert errors[0].phase is ErrorPhase.STATIC
        assert errors[0].lexeme == "a"
        assert errors[0].help == "give the inner variable another name"

    def test_global_self_reference_is_allowed(self, compiler):
        result = compiler.compile("var a = a;", "<test>")
        assert result.success

    def test_duplicate_local_declaration(self, compiler):
        errors = self._compile_errors(compiler, "fun f() { var a = 1; var a = 2; }")
        assert _codes(errors) == [ResolutionErrorKind.DUPLICATE_DECLARATION.value]
        assert errors[0].message == "Already a variable with this name in this scope."
        assert errors[0].help is None

    def test_duplicate_parameter(self, compiler):
        errors = self._compile_errors(compiler, "fun f(a, a) {}")
        assert _codes(errors) == [ResolutionErrorKind.DUPLICATE_DECLARATION.value]
        assert (errors[0].location.line, errors[0].location.column) == (1, 10)
        assert errors[0].lexeme == "a"

    def test_global_redeclaration_is_allowed(self, compiler):
        assert compiler.compile("var a = 1; var a = 2;", "<test>").success

    def test_return_outside_function(self, compiler):
        errors = self._compile_errors(compiler, "return 1;")
        assert _codes(errors) == [ResolutionErrorKind.RETURN_OUTSIDE_FUNCTION.value]
        assert errors[0].message == "Can't return from top-level code."

    def test_return_value_from_initializer(self, compiler):
        errors = self._compile_errors(compiler, "class A { init() { return 1; } }")
        assert _codes(errors) == [ResolutionErrorKind.RETURN_VALUE_FROM_INITIALIZER.value]
        assert errors[0].message == "Can't return a value from an initializer."

    def test_bare_return_in_initializer_is_allowed(self, compiler):
        assert compiler.compile("class A { init() { return; } }", "<test>").success

    def test_this_outside_class(self, compiler):
        errors = self._compile_errors(compiler, "print this;")
        assert _codes(errors) == [ResolutionErrorKind.THIS_OUTSIDE_CLASS.value]
        assert errors[0].message == "Can't use 'this' outside of a class."

    def test_this_in_plain_function_outside_class(self, compiler):
        errors = self._compile_errors(compiler, "fun f() { return this; }")
        assert _codes(errors) == [ResolutionErrorKind.THIS_OUTSIDE_CLASS.value]

    def test_this_in_function_nested_in_method(self, compiler):
        source = "class A { m() { fun f() { return this; } return f; } }"
        assert compiler.compile(source, "<test>").success

    def test_super_outside_class(self, compiler):
        errors = self._compile_errors(compiler, "super.m();")
        assert _codes(errors) == [ResolutionErrorKind.SUPER_OUTSIDE_CLASS.value]
        assert errors[0].message == "Can't use 'super' outside of a class."

    def test_super_without_superclass(self, compiler):
        errors = self._compile_errors(compiler, "class A { m() { super.m(); } }")
        assert _codes(errors) == [ResolutionErrorKind.SUPER_WITHOUT_SUPERCLASS.value]
        assert errors[0].message == "Can't use 'super' in a class with no superclass."

    def test_class_inheriting_from_itself(self, compiler):
        errors = self._compile_errors(compiler, "class A < A {}")
        assert _codes(errors) == [ResolutionErrorKind.SELF_INHERITANCE.value]
        assert errors[0].message == "A class can't inherit from itself."

    def test_errors_are_collected_not_fail_fast(self, compiler):
        source = "return;\nprint this;\nsuper.x();\n"
        errors = self._compile_errors(compiler, source)
        assert _codes(errors) == [
            ResolutionErrorKind.RETURN_OUTSIDE_FUNCTION.value,
            ResolutionErrorKind.THIS_OUTSIDE_CLASS.value,
            ResolutionErrorKind.SUPER_OUTSIDE_CLASS.value,
        ]
        assert [e.line for e in errors] == [1, 2, 3]

    def test_static_error_prevents_execution(self, compiler, runtime):
        result = compile_and_execute('print "never";\nreturn;', compiler, runtime)
        assert not result.success
        assert result.outputs == []
        assert result.phase is ErrorPhase.STATIC

    def test_resolution_table_rejects_negative_depth(self):
        with pytest.raises(ValueError):
            ResolutionTable().record(Variable("a"), -1)
