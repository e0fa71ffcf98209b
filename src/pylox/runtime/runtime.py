"""
Runtime

Thin layer between a compilation result and the interpreter: installs the
resolver's table, runs the program, and packages the outcome.
"""

import io
import logging
from typing import Any, List, Optional, TextIO, TYPE_CHECKING

from ..shared.errors import Error, ErrorPhase
from ..shared.source_location import UNKNOWN_LOCATION
from .interpreter import Interpreter

if TYPE_CHECKING:
    from ..compiler.driver import CompilationResult

logger = logging.getLogger("pylox.runtime.runtime")


class ExecutionResult:
    """
    Execution result: printed output plus the runtime error, if any.
    """
    def __init__(
        self,
        value: Optional[Any] = None,
        outputs: Optional[List[str]] = None,
        error: Optional[Error] = None
    ):
        self.value = value
        self.outputs = outputs if outputs is not None else []
        self.error = error

    @property
    def success(self) -> bool:
        """Whether execution succeeded (no error)"""
        return self.error is None

    @property
    def output(self) -> str:
        return "".join(line + "\n" for line in self.outputs)

    @property
    def errors(self) -> List[Error]:
        if self.error:
            return [self.error]
        return []


class LoxRuntime:
    """
    One interpreter kept alive across executions, so successive programs
    (REPL lines) share a global environment.

    With `output=None`, printed lines are captured into the result's
    `outputs`; with a stream, they are written there as they happen.
    """

    def __init__(self, output: Optional[TextIO] = None):
        self._stream = output
        self.interpreter = Interpreter(output)

    def reset(self) -> None:
        """Drop all global state."""
        self.interpreter = Interpreter(self._stream)

    def execute(self, compilation_result: 'CompilationResult') -> ExecutionResult:
        if not compilation_result.success or compilation_result.program is None:
            return ExecutionResult(error=Error(
                message="Compilation failed",
                location=UNKNOWN_LOCATION,
                phase=ErrorPhase.STATIC,
            ))

        capture = io.StringIO() if self._stream is None else None
        if capture is not None:
            self.interpreter.output = capture

        try:
            self.interpreter.install_resolutions(compilation_result.ctx.locals)
            runtime_error = self.interpreter.interpret(compilation_result.program.statements)
        finally:
            if capture is not None:
                self.interpreter.output = None

        outputs = capture.getvalue().splitlines() if capture is not None else []
        if runtime_error is not None:
            logger.debug(f"Execution failed: {runtime_error.message}")
            return ExecutionResult(outputs=outputs, error=runtime_error.to_error())
        return ExecutionResult(outputs=outputs)
