"""
Integration tests for closures: capture by reference and static binding.
"""

import pytest
from tests.test_utils import run_ok


class TestClosures:

    def test_counter(self, compiler, runtime):
        source = """
        fun makeCounter() {
            var i = 0;
            fun count() {
                i = i + 1;
                print i;
            }
            return count;
        }

        var counter = makeCounter();
        counter();
        counter();
        """
        assert run_ok(source, compiler, runtime) == ["1", "2"]

    def test_independent_counters(self, compiler, runtime):
        source = """
        fun makeCounter() {
            var i = 0;
            fun count() { i = i + 1; return i; }
            return count;
        }
        var a = makeCounter();
        var b = makeCounter();
        a(); a();
        print a();
        print b();
        """
        assert run_ok(source, compiler, runtime) == ["3", "1"]

    def test_closures_share_captured_frame(self, compiler, runtime):
        source = """
        var get;
        var set;
        fun pair() {
            var value = "initial";
            fun g() { return value; }
            fun s(v) { value = v; }
            get = g;
            set = s;
        }
        pair();
        set("updated");
        print get();
        """
        assert run_ok(source, compiler, runtime) == ["updated"]

    def test_closure_sees_later_mutation(self, compiler, runtime):
        source = """
        {
            var a = "before";
            fun show() { print a; }
            a = "after";
            show();
        }
        """
        assert run_ok(source, compiler, runtime) == ["after"]

    def test_binding_is_static_not_dynamic(self, compiler, runtime):
        source = """
        var a = "global";
        {
            fun showA() {
                print a;
            }

            showA();
            var a = "block";
            showA();
        }
        """
        assert run_ok(source, compiler, runtime) == ["global", "global"]

    def test_nested_closure_depths(self, compiler, runtime):
        source = """
        fun outer() {
            var x = "outer";
            fun middle() {
                fun inner() {
                    print x;
                }
                return inner;
            }
            return middle;
        }
        outer()()();
        """
        assert run_ok(source, compiler, runtime) == ["outer"]

    def test_functions_are_first_class(self, compiler, runtime):
        source = """
        fun apply(f, x) { return f(x); }
        fun square(n) { return n * n; }
        print apply(square, 7);
        """
        assert run_ok(source, compiler, runtime) == ["49"]
