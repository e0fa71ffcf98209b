"""CLI entry point: run `pylox file.lox`, `python -m pylox file.lox`, or `pylox` for a REPL."""

import argparse
import logging
import sys
import threading
from pathlib import Path
from typing import List, Optional

from .compiler.driver import CompilationResult, CompilerDriver
from .runtime.runtime import ExecutionResult, LoxRuntime
from .shared.errors import ErrorReporter
from .shared.serialization import serialize_ast
from .utils.config import (
    EXIT_DATA_ERROR, EXIT_NO_INPUT, EXIT_OK, EXIT_SOFTWARE, EXIT_USAGE,
    RECURSION_LIMIT, REPL_PROMPT, REPL_SOURCE_NAME, THREAD_STACK_SIZE,
)
from .utils.io_utils import read_source_file

logger = logging.getLogger("pylox.main")

STACK_OVERFLOW_MESSAGE = "Stack overflow."


class _ArgumentParser(argparse.ArgumentParser):
    """argparse with the sysexits usage code instead of 2."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        sys.stderr.write(f"{self.prog}: error: {message}\n")
        sys.exit(EXIT_USAGE)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="pylox", description="Run a Lox script, or start a REPL with no script.")
    parser.add_argument("script", nargs="?", type=Path, help="Path to .lox source file")
    parser.add_argument("--dump-ast", action="store_true", help="Print the parsed program as S-expressions and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _report_compile_errors(result: CompilationResult) -> None:
    sys.stderr.write(result.ctx.reporter.format_all_errors() + "\n")


def _execute_with_deep_stack(runtime: LoxRuntime, result: CompilationResult) -> ExecutionResult:
    """
    Run the program on a worker thread with a large stack and a raised
    recursion limit, so deep Lox recursion does not exhaust the host stack.
    Exceptions from the worker are re-raised here.
    """
    outcome = {}

    def target() -> None:
        try:
            outcome["result"] = runtime.execute(result)
        except BaseException as e:
            outcome["error"] = e

    previous_limit = sys.getrecursionlimit()
    previous_stack = threading.stack_size(THREAD_STACK_SIZE)
    sys.setrecursionlimit(max(previous_limit, RECURSION_LIMIT))
    try:
        worker = threading.Thread(target=target, name="pylox-interpreter")
        worker.start()
        worker.join()
    finally:
        sys.setrecursionlimit(previous_limit)
        threading.stack_size(previous_stack)

    if "error" in outcome:
        logger.debug("interpreter thread raised %s", type(outcome["error"]).__name__)
        raise outcome["error"]
    return outcome["result"]


def _run(source: str, source_file: str, compiler: CompilerDriver, runtime: LoxRuntime) -> int:
    result = compiler.compile(source, source_file)
    if not result.success:
        _report_compile_errors(result)
        return EXIT_DATA_ERROR

    try:
        exec_result = _execute_with_deep_stack(runtime, result)
    except RecursionError:
        sys.stderr.write(f"{STACK_OVERFLOW_MESSAGE}\n")
        return EXIT_SOFTWARE

    if exec_result.error is not None:
        reporter = ErrorReporter(result.ctx.source_files)
        sys.stderr.write(reporter.format_error(exec_result.error) + "\n")
        return EXIT_SOFTWARE
    return EXIT_OK


def run_file(path: Path, compiler: CompilerDriver, dump_ast: bool = False) -> int:
    try:
        source = read_source_file(path)
    except (OSError, UnicodeDecodeError) as e:
        sys.stderr.write(f"pylox: error: could not read file: {e}\n")
        return EXIT_NO_INPUT

    if dump_ast:
        result = compiler.compile(source, str(path))
        if not result.success:
            _report_compile_errors(result)
            return EXIT_DATA_ERROR
        sys.stdout.write(serialize_ast(result.program) + "\n")
        return EXIT_OK

    return _run(source, str(path), compiler, LoxRuntime(output=sys.stdout))


def run_prompt(compiler: CompilerDriver) -> int:
    """Read-eval-print loop. Globals persist across lines; errors never end the session."""
    runtime = LoxRuntime(output=sys.stdout)
    while True:
        try:
            line = input(REPL_PROMPT)
        except EOFError:
            sys.stdout.write("\n")
            return EXIT_OK
        except KeyboardInterrupt:
            sys.stdout.write("\n")
            continue
        if not line.strip():
            continue
        _run(line, REPL_SOURCE_NAME, compiler, runtime)


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    compiler = CompilerDriver()
    if args.script is None:
        if args.dump_ast:
            sys.stderr.write("pylox: error: --dump-ast requires a script\n")
            return EXIT_USAGE
        return run_prompt(compiler)
    return run_file(args.script, compiler, dump_ast=args.dump_ast)


if __name__ == "__main__":
    sys.exit(main())
