"""
Tests for the callable value model and the object model.
"""

import io

import pytest

from pylox.runtime.callables import LoxFunction, NativeFunction
from pylox.runtime.environment import Environment
from pylox.runtime.interpreter import Interpreter, stringify
from pylox.runtime.natives import native_functions
from pylox.runtime.objects import LoxClass, LoxInstance
from pylox.passes.resolver import resolve
from pylox.shared.errors import LoxRuntimeError, RuntimeErrorKind
from pylox.shared.nodes import FunctionDeclaration, ReturnStatement, Variable
from tests.test_utils import compile_and_execute, run_ok


def _function(name, params=(), body=None):
    return FunctionDeclaration(name, list(params), body if body is not None else [])


class TestCallables:

    def test_native_function(self):
        native = NativeFunction("double", 1, lambda x: x * 2)
        assert native.arity() == 1
        assert native.call(None, [2.0]) == 4.0
        assert str(native) == "<native fn>"

    def test_clock_native(self):
        (clock,) = native_functions()
        assert clock.name == "clock"
        assert clock.arity() == 0
        assert isinstance(clock.call(None, []), float)

    def test_function_arity_and_display(self):
        fn = LoxFunction(_function("add", ["a", "b"]), Environment())
        assert fn.arity() == 2
        assert fn.name == "add"
        assert str(fn) == "<fn add>"

    def test_call_returns_value_from_return_flow(self):
        interpreter = Interpreter(io.StringIO())
        declaration = _function("identity", ["x"], [ReturnStatement(Variable("x"))])
        resolve([declaration], interpreter.locals)
        fn = LoxFunction(declaration, interpreter.globals)
        assert fn.call(interpreter, ["value"]) == "value"

    def test_bind_creates_frame_with_this(self):
        closure = Environment()
        fn = LoxFunction(_function("m"), closure)
        instance = LoxInstance(LoxClass("A", None, {}))
        bound = fn.bind(instance)
        assert bound is not fn
        assert bound.closure.enclosing is closure
        assert bound.closure.get_at(0, "this") is instance
        assert bound.declaration is fn.declaration


class TestObjects:

    def test_class_display_and_arity_without_init(self):
        klass = LoxClass("Point", None, {})
        assert str(klass) == "Point"
        assert klass.arity() == 0
        assert str(LoxInstance(klass)) == "Point instance"

    def test_find_method_walks_chain_but_find_own_method_does_not(self):
        method = LoxFunction(_function("m"), Environment())
        base = LoxClass("Base", None, {"m": method})
        derived = LoxClass("Derived", base, {})
        assert derived.find_method("m") is method
        assert derived.find_own_method("m") is None
        assert derived.find_method("missing") is None

    def test_inherited_init_sets_arity(self):
        init = LoxFunction(_function("init", ["a", "b"]), Environment(), is_initializer=True)
        base = LoxClass("Base", None, {"init": init})
        assert LoxClass("Derived", base, {}).arity() == 2

    def test_instance_field_shadows_method(self):
        method = LoxFunction(_function("m"), Environment())
        instance = LoxInstance(LoxClass("A", None, {"m": method}))
        assert isinstance(instance.get("m"), LoxFunction)
        instance.set("m", "field")
        assert instance.get("m") == "field"
        assert instance.has_field("m")

    def test_undefined_property(self):
        instance = LoxInstance(LoxClass("A", None, {}))
        with pytest.raises(LoxRuntimeError) as exc_info:
            instance.get("nope")
        assert exc_info.value.kind is RuntimeErrorKind.UNDEFINED_PROPERTY
        assert exc_info.value.message == "Undefined property 'nope'."

    @pytest.mark.parametrize("value,expected", [
        (None, "nil"), (True, "true"), (False, "false"),
        (3.0, "3"), (2.5, "2.5"), (-0.0, "-0"), ("text", "text"),
    ])
    def test_stringify(self, value, expected):
        assert stringify(value) == expected


class TestDisplayThroughPrint:

    def test_display_forms(self, compiler, runtime):
        source = '''
        fun f() {}
        class A { m() {} }
        var a = A();
        print f;
        print A;
        print a;
        print a.m;
        '''
        assert run_ok(source, compiler, runtime) == ["<fn f>", "A", "A instance", "<fn m>"]

    def test_property_access_on_non_instance(self, compiler, runtime):
        result = compile_and_execute("var x = 1;\nprint x.y;", compiler, runtime)
        assert not result.success
        assert result.messages == ["Only instances have properties."]

    def test_field_assignment_on_non_instance(self, compiler, runtime):
        result = compile_and_execute('"str".y = 2;', compiler, runtime)
        assert not result.success
        assert result.messages == ["Only instances have fields."]
