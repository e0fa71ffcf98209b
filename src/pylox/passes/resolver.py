"""
Resolver Pass (static scope resolution)

Walks the whole program once before execution and, for every variable,
assignment, `this` and `super` expression, records how many scopes out its
binding lives. It opens exactly the scopes the interpreter will create at run
time:

- block:              one scope
- function / method:  one scope for parameters + body
- class:              a `super` scope (only with a superclass), then a `this` scope

Globals are never put on the scope stack; references that match no open
scope get no entry and are looked up in the global environment at run time.
That also covers forward references to globals declared later.

Static errors are reported and resolution continues, so one pass surfaces
every problem.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, List, Optional, Sequence

from ..shared.ast_visitor import ASTVisitor
from ..shared.errors import Error, ErrorPhase, ResolutionErrorKind
from ..shared.nodes import Expression, FunctionDeclaration, Program, Statement
from ..shared.scope import ScopeKind, ScopeRedefinitionError, ScopeStack
from ..shared.source_location import SourceLocation
from ..utils.config import INITIALIZER_NAME, SUPER_KEYWORD, THIS_KEYWORD
from .base import BasePass, PassContext, ResolutionTable

logger = logging.getLogger("pylox.passes.resolver")


class FunctionKind(Enum):
    NONE = "none"
    FUNCTION = "function"
    METHOD = "method"
    INITIALIZER = "initializer"


class ClassKind(Enum):
    NONE = "none"
    CLASS = "class"
    SUBCLASS = "subclass"


_MESSAGES = {
    ResolutionErrorKind.SELF_REFERENTIAL_INITIALIZER: "Can't read local variable in its own initializer.",
    ResolutionErrorKind.DUPLICATE_DECLARATION: "Already a variable with this name in this scope.",
    ResolutionErrorKind.RETURN_OUTSIDE_FUNCTION: "Can't return from top-level code.",
    ResolutionErrorKind.RETURN_VALUE_FROM_INITIALIZER: "Can't return a value from an initializer.",
    ResolutionErrorKind.THIS_OUTSIDE_CLASS: "Can't use 'this' outside of a class.",
    ResolutionErrorKind.SUPER_OUTSIDE_CLASS: "Can't use 'super' outside of a class.",
    ResolutionErrorKind.SUPER_WITHOUT_SUPERCLASS: "Can't use 'super' in a class with no superclass.",
    ResolutionErrorKind.SELF_INHERITANCE: "A class can't inherit from itself.",
}

_HELP = {
    ResolutionErrorKind.SELF_REFERENTIAL_INITIALIZER: "give the inner variable another name",
    ResolutionErrorKind.RETURN_VALUE_FROM_INITIALIZER: "use a bare `return;` inside `init`",
    ResolutionErrorKind.SUPER_WITHOUT_SUPERCLASS: "declare a superclass with `class Name < Base`",
}


class Resolver(ASTVisitor[None]):
    """
    Scope-resolving visitor. Results go to `table`; diagnostics to `errors`.
    """

    def __init__(self, table: Optional[ResolutionTable] = None):
        self.table = table if table is not None else ResolutionTable()
        self.errors: List[Error] = []
        self._scopes = ScopeStack()
        self._current_function = FunctionKind.NONE
        self._current_class = ClassKind.NONE

    # =========================================================================
    # Entry points
    # =========================================================================

    def resolve(self, statements: Sequence[Statement]) -> List[Error]:
        for statement in statements:
            statement.accept(self)
        return self.errors

    # =========================================================================
    # Helpers
    # =========================================================================

    def _error(self, kind: ResolutionErrorKind, location: SourceLocation, lexeme: Optional[str]) -> None:
        error = Error(
            message=_MESSAGES[kind],
            location=location,
            code=kind.value,
            phase=ErrorPhase.STATIC,
            lexeme=lexeme,
            help=_HELP.get(kind),
        )
        logger.debug(f"Static error {kind.name} at line {location.line}")
        self.errors.append(error)

    def _declare(self, name: str, location: SourceLocation) -> None:
        scope = self._scopes.peek()
        if scope is None:
            return
        try:
            scope.declare(name)
        except ScopeRedefinitionError:
            self._error(ResolutionErrorKind.DUPLICATE_DECLARATION, location, name)

    def _define(self, name: str) -> None:
        scope = self._scopes.peek()
        if scope is None:
            return
        scope.define(name)

    def _resolve_local(self, expr: Expression, name: str) -> None:
        depth = self._scopes.distance_to(name)
        if depth is not None:
            self.table.record(expr, depth)

    @contextmanager
    def _function_context(self, kind: FunctionKind) -> Iterator[None]:
        enclosing = self._current_function
        self._current_function = kind
        try:
            yield
        finally:
            self._current_function = enclosing

    @contextmanager
    def _class_context(self, kind: ClassKind) -> Iterator[None]:
        enclosing = self._current_class
        self._current_class = kind
        try:
            yield
        finally:
            self._current_class = enclosing

    def _resolve_function(self, function: FunctionDeclaration, kind: FunctionKind) -> None:
        with self._function_context(kind), self._scopes.scope(ScopeKind.FUNCTION):
            for index, param in enumerate(function.params):
                self._declare(param, function.param_location(index))
                self._define(param)
            for statement in function.body:
                statement.accept(self)

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_block(self, node) -> None:
        with self._scopes.scope(ScopeKind.BLOCK):
            for statement in node.statements:
                statement.accept(self)

    def visit_var_declaration(self, node) -> None:
        self._declare(node.name, node.location)
        if node.initializer is not None:
            node.initializer.accept(self)
        self._define(node.name)

    def visit_function_declaration(self, node) -> None:
        # Defined before the body so the function can call itself.
        self._declare(node.name, node.location)
        self._define(node.name)
        self._resolve_function(node, FunctionKind.FUNCTION)

    def visit_class_declaration(self, node) -> None:
        with self._class_context(ClassKind.CLASS):
            self._declare(node.name, node.location)
            self._define(node.name)

            has_superclass = node.superclass is not None
            if has_superclass:
                if node.superclass.name == node.name:
                    self._error(ResolutionErrorKind.SELF_INHERITANCE,
                                node.superclass.location, node.superclass.name)
                self._current_class = ClassKind.SUBCLASS
                node.superclass.accept(self)
                self._scopes.push(ScopeKind.SUPER).define(SUPER_KEYWORD)

            with self._scopes.scope(ScopeKind.THIS) as this_scope:
                this_scope.define(THIS_KEYWORD)
                for method in node.methods:
                    kind = FunctionKind.METHOD
                    if method.name == INITIALIZER_NAME:
                        kind = FunctionKind.INITIALIZER
                    self._resolve_function(method, kind)

            if has_superclass:
                self._scopes.pop()

    def visit_expression_statement(self, node) -> None:
        node.expression.accept(self)

    def visit_print_statement(self, node) -> None:
        node.expression.accept(self)

    def visit_if_statement(self, node) -> None:
        node.condition.accept(self)
        node.then_branch.accept(self)
        if node.else_branch is not None:
            node.else_branch.accept(self)

    def visit_while_statement(self, node) -> None:
        node.condition.accept(self)
        node.body.accept(self)

    def visit_return_statement(self, node) -> None:
        if self._current_function is FunctionKind.NONE:
            self._error(ResolutionErrorKind.RETURN_OUTSIDE_FUNCTION, node.location, "return")
        if node.value is not None:
            if self._current_function is FunctionKind.INITIALIZER:
                self._error(ResolutionErrorKind.RETURN_VALUE_FROM_INITIALIZER, node.location, "return")
            node.value.accept(self)

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_variable(self, node) -> None:
        scope = self._scopes.peek()
        if scope is not None and scope.is_uninitialized(node.name):
            self._error(ResolutionErrorKind.SELF_REFERENTIAL_INITIALIZER, node.location, node.name)
        self._resolve_local(node, node.name)

    def visit_assign(self, node) -> None:
        node.value.accept(self)
        self._resolve_local(node, node.name)

    def visit_this(self, node) -> None:
        if self._current_class is ClassKind.NONE:
            self._error(ResolutionErrorKind.THIS_OUTSIDE_CLASS, node.location, THIS_KEYWORD)
            return
        self._resolve_local(node, THIS_KEYWORD)

    def visit_super(self, node) -> None:
        if self._current_class is ClassKind.NONE:
            self._error(ResolutionErrorKind.SUPER_OUTSIDE_CLASS, node.location, SUPER_KEYWORD)
        elif self._current_class is not ClassKind.SUBCLASS:
            self._error(ResolutionErrorKind.SUPER_WITHOUT_SUPERCLASS, node.location, SUPER_KEYWORD)
        self._resolve_local(node, SUPER_KEYWORD)

    def visit_literal(self, node) -> None:
        pass

    def visit_grouping(self, node) -> None:
        node.expression.accept(self)

    def visit_unary(self, node) -> None:
        node.operand.accept(self)

    def visit_binary(self, node) -> None:
        node.left.accept(self)
        node.right.accept(self)

    def visit_logical(self, node) -> None:
        node.left.accept(self)
        node.right.accept(self)

    def visit_call(self, node) -> None:
        node.callee.accept(self)
        for argument in node.arguments:
            argument.accept(self)

    def visit_get(self, node) -> None:
        # Properties are looked up dynamically; only the object is resolved.
        node.object.accept(self)

    def visit_set(self, node) -> None:
        node.value.accept(self)
        node.object.accept(self)


def resolve(statements: Sequence[Statement], table: Optional[ResolutionTable] = None) -> List[Error]:
    """
    Resolve a statement sequence. Distances are written into `table` (a fresh
    one when omitted); returns the static errors found, possibly empty.
    """
    return Resolver(table).resolve(statements)


class ResolverPass(BasePass):
    """Runs the resolver over a program, recording into ctx.locals / ctx.reporter."""
    name = "resolver"

    def run(self, program: Program, ctx: PassContext) -> Program:
        logger.debug("Starting scope resolution")
        resolver = Resolver(ctx.locals)
        errors = resolver.resolve(program.statements)
        for error in errors:
            ctx.reporter.add(error)
        logger.debug(f"Scope resolution complete: {len(ctx.locals)} local references, {len(errors)} error(s)")
        return program
