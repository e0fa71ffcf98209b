"""
Tests for the chained scope frames used at run time.
"""

import pytest

from pylox.runtime.environment import Environment
from pylox.shared.errors import LoxRuntimeError, RuntimeErrorKind
from pylox.shared.source_location import SourceLocation


class TestEnvironment:

    def test_define_and_get(self):
        env = Environment()
        env.define("a", 1.0)
        assert env.get("a") == 1.0
        assert "a" in env

    def test_define_rebinds_in_place(self):
        env = Environment()
        env.define("a", 1.0)
        env.define("a", "two")
        assert env.get("a") == "two"
        assert env.names() == ["a"]

    def test_get_searches_outward(self):
        outer = Environment()
        outer.define("a", "outer")
        inner = Environment(outer)
        assert inner.get("a") == "outer"
        assert "a" not in inner

    def test_get_undefined_raises_unbound_variable(self):
        env = Environment(Environment())
        location = SourceLocation("<test>", 4, 7)
        with pytest.raises(LoxRuntimeError) as exc_info:
            env.get("missing", location)
        error = exc_info.value
        assert error.kind is RuntimeErrorKind.UNBOUND_VARIABLE
        assert error.message == "Undefined variable 'missing'."
        assert error.location.line == 4
        assert error.lexeme == "missing"

    def test_assign_updates_nearest_binding(self):
        outer = Environment()
        outer.define("a", 1.0)
        inner = Environment(outer)
        inner.assign("a", 2.0)
        assert outer.get("a") == 2.0
        assert "a" not in inner

    def test_assign_never_creates(self):
        env = Environment()
        with pytest.raises(LoxRuntimeError) as exc_info:
            env.assign("a", 1.0)
        assert exc_info.value.kind is RuntimeErrorKind.UNBOUND_VARIABLE
        assert "a" not in env

    def test_ancestor(self):
        outer = Environment()
        middle = Environment(outer)
        inner = Environment(middle)
        assert inner.ancestor(0) is inner
        assert inner.ancestor(1) is middle
        assert inner.ancestor(2) is outer
        assert inner.enclosing is middle
        assert outer.enclosing is None

    def test_get_at_reads_exact_frame(self):
        outer = Environment()
        outer.define("a", "outer")
        inner = Environment(outer)
        inner.define("a", "inner")
        assert inner.get_at(0, "a") == "inner"
        assert inner.get_at(1, "a") == "outer"

    def test_get_at_does_not_search_further(self):
        outer = Environment()
        outer.define("a", 1.0)
        inner = Environment(outer)
        with pytest.raises(LoxRuntimeError):
            inner.get_at(0, "a")

    def test_assign_at_writes_value_into_target_frame(self):
        outer = Environment()
        outer.define("a", 1.0)
        middle = Environment(outer)
        inner = Environment(middle)
        inner.define("a", "shadow")

        inner.assign_at(2, "a", 5.0)

        assert outer.get("a") == 5.0
        assert inner.get_at(0, "a") == "shadow"

    def test_frames_are_shared_not_copied(self):
        shared = Environment()
        shared.define("count", 0.0)
        first = Environment(shared)
        second = Environment(shared)
        first.assign("count", 1.0)
        assert second.get("count") == 1.0
