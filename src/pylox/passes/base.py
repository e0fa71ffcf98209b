"""
Base Pass System

A pass walks the AST once and stores its results on the shared PassContext
rather than on the pass object, so results outlive the pass instance and the
driver can hand them to the runtime.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterator, List, Optional, Tuple

from ..shared.errors import ErrorReporter
from ..shared.nodes import Expression, Program


class ResolutionTable:
    """
    Resolution annotation: expression node (by identity) → hop count.

    Written by the resolver, read by the interpreter. A node with no entry is
    a global reference.
    """

    def __init__(self) -> None:
        self._depths: Dict[Expression, int] = {}

    def record(self, expr: Expression, depth: int) -> None:
        if depth < 0:
            raise ValueError(f"Resolution depth must be non-negative, got {depth}")
        self._depths[expr] = depth

    def distance(self, expr: Expression) -> Optional[int]:
        return self._depths.get(expr)

    def update(self, other: 'ResolutionTable') -> None:
        """Merge another table in (REPL lines accumulate into one interpreter)."""
        self._depths.update(other._depths)

    def items(self) -> Iterator[Tuple[Expression, int]]:
        return iter(self._depths.items())

    def __contains__(self, expr: Expression) -> bool:
        return expr in self._depths

    def __len__(self) -> int:
        return len(self._depths)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResolutionTable):
            return NotImplemented
        return self._depths == other._depths

    def __repr__(self) -> str:
        return f"ResolutionTable({len(self._depths)} entries)"


class PassContext:
    """
    Compilation context - single source of truth for state produced while
    compiling one program: sources, diagnostics and resolution results.
    """

    def __init__(self, source_files: Optional[Dict[str, str]] = None):
        self.source_files: Dict[str, str] = source_files if source_files is not None else {}
        self.reporter: ErrorReporter = ErrorReporter(self.source_files)
        self.locals: ResolutionTable = ResolutionTable()


class BasePass(ABC):
    """
    Base class for all AST passes.

    - Passes read the AST; they never rewrite it
    - Diagnostics go to ctx.reporter (collected, not raised)
    - Results go to ctx
    """
    name: str = "pass"

    @abstractmethod
    def run(self, program: Program, ctx: PassContext) -> Program:
        """Run pass on the program and return it."""
        raise NotImplementedError


class PassManager:
    """Runs registered passes in registration order, all sharing one context."""

    def __init__(self) -> None:
        self.passes: List[BasePass] = []

    def register_pass(self, pass_instance: BasePass) -> None:
        self.passes.append(pass_instance)

    def run_all(self, program: Program, ctx: PassContext) -> Program:
        for pass_instance in self.passes:
            program = pass_instance.run(program, ctx)
        return program
