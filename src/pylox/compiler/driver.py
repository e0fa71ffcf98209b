"""
Compiler Driver

Orchestrates the phases that run before execution:
1. Parsing (source → AST)
2. Scope resolution (AST → resolution table + static errors)
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from ..frontend.parser import Parser, ParseError
from ..passes.base import PassContext, PassManager
from ..passes.resolver import ResolverPass
from ..shared.errors import Error
from ..shared.nodes import Program
from ..shared.serialization import serialize_ast
from ..utils.config import AST_DUMP_DIR, DEFAULT_SOURCE_NAME, DUMP_AST_ENV_VAR
from ..utils.io_utils import write_text_file

logger = logging.getLogger("pylox.compiler.driver")


class CompilationResult:
    """Compilation result"""
    def __init__(
        self,
        program: Optional[Program] = None,
        ctx: Optional[PassContext] = None,
        success: bool = False
    ):
        self.program = program
        self.ctx = ctx
        self.success = success

    def has_errors(self) -> bool:
        """True if compilation reported errors."""
        if self.ctx and self.ctx.reporter:
            return self.ctx.reporter.has_errors()
        return not self.success

    @property
    def errors(self) -> List[Error]:
        if self.ctx is None:
            return []
        return list(self.ctx.reporter.errors)

    def get_errors(self) -> List[str]:
        """Formatted diagnostics, one string for all errors."""
        if self.ctx and self.ctx.reporter.has_errors():
            return [self.ctx.reporter.format_all_errors(color=False)]
        return []


class CompilerDriver:
    """
    Compiler driver.

    Holds the parser (grammar is loaded once) and the pass pipeline; every
    `compile` call gets a fresh PassContext.
    """

    def __init__(self, parser: Optional[Parser] = None):
        self.parser = parser if parser is not None else Parser()
        self.pass_manager = PassManager()
        self._register_passes()

    def _register_passes(self) -> None:
        self.pass_manager.register_pass(ResolverPass())

    def compile(self, source: str, source_file: str = DEFAULT_SOURCE_NAME) -> CompilationResult:
        """
        Compile source code. A result with `success=False` carries its
        syntax or static errors in `ctx.reporter`; it must not be executed.
        """
        ctx = PassContext()
        ctx.source_files[source_file] = source

        try:
            program = self.parser.parse(source, source_file)
        except ParseError as e:
            logger.debug(f"Syntax error in {source_file}: {e.message}")
            ctx.reporter.add(e.to_error())
            return CompilationResult(success=False, ctx=ctx)

        program = self.pass_manager.run_all(program, ctx)

        if os.environ.get(DUMP_AST_ENV_VAR):
            self._dump_ast(program, source_file)

        if ctx.reporter.has_errors():
            return CompilationResult(program=program, ctx=ctx, success=False)
        return CompilationResult(program=program, ctx=ctx, success=True)

    def _dump_ast(self, program: Program, source_file: str) -> None:
        stem = Path(source_file).stem.strip("<>") or "program"
        path = Path(AST_DUMP_DIR) / f"{stem}.sexpr"
        write_text_file(path, serialize_ast(program) + "\n")
        logger.debug(f"Wrote AST dump to {path}")
