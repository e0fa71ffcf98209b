"""
AST Visitor Pattern

Every node kind has exactly one abstract visit_* method here. Visitors
(resolver, interpreter, AST serializer) must implement all of them: a
visitor that forgets a kind raises TypeError at instantiation instead of
silently skipping nodes at run time.

Design:
- Abstract base class with visit_* methods for each AST node type
- Type-safe (mypy can check)
- Nodes dispatch through accept(); visitors never isinstance-switch on nodes
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from .nodes import (
        Literal, Grouping, Unary, Binary, Logical, Variable, Assign, Call,
        Get, Set, This, Super,
        ExpressionStatement, PrintStatement, VarDeclaration, Block,
        IfStatement, WhileStatement, FunctionDeclaration, ClassDeclaration,
        ReturnStatement,
    )

T = TypeVar('T')


class ASTVisitor(ABC, Generic[T]):
    """
    Base AST visitor. No default traversal: each visitor decides how scopes
    open and close around children, so every kind is spelled out.

    Usage:
        class Printer(ASTVisitor[str]):
            def visit_literal(self, node) -> str:
                return str(node.value)
            ...

        text = node.accept(Printer())
    """

    # Expressions
    @abstractmethod
    def visit_literal(self, node: 'Literal') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_literal()")

    @abstractmethod
    def visit_grouping(self, node: 'Grouping') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_grouping()")

    @abstractmethod
    def visit_unary(self, node: 'Unary') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_unary()")

    @abstractmethod
    def visit_binary(self, node: 'Binary') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_binary()")

    @abstractmethod
    def visit_logical(self, node: 'Logical') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_logical()")

    @abstractmethod
    def visit_variable(self, node: 'Variable') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_variable()")

    @abstractmethod
    def visit_assign(self, node: 'Assign') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_assign()")

    @abstractmethod
    def visit_call(self, node: 'Call') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_call()")

    @abstractmethod
    def visit_get(self, node: 'Get') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_get()")

    @abstractmethod
    def visit_set(self, node: 'Set') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_set()")

    @abstractmethod
    def visit_this(self, node: 'This') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_this()")

    @abstractmethod
    def visit_super(self, node: 'Super') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_super()")

    # Statements
    @abstractmethod
    def visit_expression_statement(self, node: 'ExpressionStatement') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_expression_statement()")

    @abstractmethod
    def visit_print_statement(self, node: 'PrintStatement') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_print_statement()")

    @abstractmethod
    def visit_var_declaration(self, node: 'VarDeclaration') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_var_declaration()")

    @abstractmethod
    def visit_block(self, node: 'Block') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_block()")

    @abstractmethod
    def visit_if_statement(self, node: 'IfStatement') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_if_statement()")

    @abstractmethod
    def visit_while_statement(self, node: 'WhileStatement') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_while_statement()")

    @abstractmethod
    def visit_function_declaration(self, node: 'FunctionDeclaration') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_function_declaration()")

    @abstractmethod
    def visit_class_declaration(self, node: 'ClassDeclaration') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_class_declaration()")

    @abstractmethod
    def visit_return_statement(self, node: 'ReturnStatement') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_return_statement()")
