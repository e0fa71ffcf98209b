"""
Error Reporting

Two independent taxonomies:
- static errors found by the resolver (collected, never raised)
- runtime errors raised by the interpreter (first one aborts the run)

Both are rendered through the same `Error` record and `ErrorReporter`.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, List, Dict
from .source_location import SourceLocation


# ---------------------------------------------------------------------------
# Error kinds and codes
# ---------------------------------------------------------------------------

class ErrorPhase(Enum):
    """Which stage of the pipeline produced the error."""
    SYNTAX = "syntax"
    STATIC = "static"
    RUNTIME = "runtime"


class ResolutionErrorKind(Enum):
    """Static errors reported by the resolver. Value is the diagnostic code."""
    SELF_REFERENTIAL_INITIALIZER = "E0101"
    DUPLICATE_DECLARATION = "E0102"
    RETURN_OUTSIDE_FUNCTION = "E0103"
    RETURN_VALUE_FROM_INITIALIZER = "E0104"
    THIS_OUTSIDE_CLASS = "E0105"
    SUPER_OUTSIDE_CLASS = "E0106"
    SUPER_WITHOUT_SUPERCLASS = "E0107"
    SELF_INHERITANCE = "E0108"


class RuntimeErrorKind(Enum):
    """Runtime errors raised by the interpreter. Value is the diagnostic code."""
    UNBOUND_VARIABLE = "E0201"
    TYPE_MISMATCH = "E0202"
    NOT_CALLABLE = "E0203"
    ARITY_MISMATCH = "E0204"
    UNDEFINED_PROPERTY = "E0205"


SYNTAX_ERROR_CODE = "E0001"


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    return os.environ.get("PYLOX_COLOR", "").lower() not in ("0", "false", "no", "never")

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color or not codes:
        return text
    return "".join(codes) + text + _RESET


# ---------------------------------------------------------------------------
# Error dataclass
# ---------------------------------------------------------------------------

@dataclass
class Error:
    """
    One diagnostic: message plus the source position it refers to.

    `lexeme` is the text of the offending token when there is one
    (e.g. the variable name); `phase` tells static and runtime errors apart.
    `help` and `note` are optional trailing hints.
    """
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    phase: ErrorPhase = ErrorPhase.STATIC
    lexeme: Optional[str] = None
    help: Optional[str] = None
    note: Optional[str] = None

    @property
    def line(self) -> int:
        return self.location.line if self.location is not None else 0

    def short(self) -> str:
        """One-line form: `[line 3] Error at 'a': message`."""
        where = f" at '{self.lexeme}'" if self.lexeme else ""
        return f"[line {self.line}] Error{where}: {self.message}"


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

class _DiagnosticRenderer:
    """
    Renders one `Error` in rustc style.

    Example output (plain, no color)::

        error[E0101]: Can't read local variable in its own initializer.
         --> main.lox:3:13
          |
        3 |     var a = a;
          |             ^
          |
          = help: give the inner variable another name
    """

    def __init__(self, source_files: Dict[str, str], color: bool):
        self.source_files = source_files
        self.color = color

    def _paint(self, text: str, *codes: str) -> str:
        return _style(text, *codes, color=self.color)

    def render(self, error: Error) -> str:
        code = f"[{error.code}]" if error.code else ""
        out = [self._paint(f"error{code}", _BOLD, _RED) + self._paint(f": {error.message}", _BOLD)]

        loc = error.location
        source = self.source_files.get(loc.file) if loc is not None else None
        if source is None:
            where = f"{loc.file}:{loc.line}:{loc.column}" if loc is not None else "<unknown location>"
            out.append(self._paint(" --> ", _BOLD, _BLUE) + where)
            out.extend(self._hints(error, gutter=1))
            return "\n".join(out)

        gutter = len(str(loc.line))
        margin = " " * (gutter + 1)
        code_line = self._source_line(source, loc.line)
        column = max(loc.column, 1) - 1
        carets = " " * column + "^" * _caret_width(error, loc, code_line, column)

        out.append(self._paint(" " * gutter + "--> ", _BOLD, _BLUE) + f"{loc.file}:{loc.line}:{loc.column}")
        out.append(self._paint(margin + "|", _BOLD, _BLUE))
        out.append(self._paint(f"{loc.line} | ", _BOLD, _BLUE) + code_line)
        out.append(self._paint(margin + "| ", _BOLD, _BLUE) + self._paint(carets, _BOLD, _RED))
        out.extend(self._hints(error, gutter))
        return "\n".join(out)

    @staticmethod
    def _source_line(source: str, line: int) -> str:
        lines = source.split("\n")
        return lines[line - 1] if 0 < line <= len(lines) else ""

    def _hints(self, error: Error, gutter: int) -> List[str]:
        hints = [(kind, text) for kind, text in (("help", error.help), ("note", error.note)) if text]
        if not hints:
            return []
        margin = " " * (gutter + 1)
        out = [self._paint(margin + "|", _BOLD, _BLUE)]
        for kind, text in hints:
            out.append(self._paint(f"{margin}= ", _BOLD, _CYAN) + self._paint(f"{kind}: ", _BOLD) + text)
        return out


def _caret_width(error: Error, loc: SourceLocation, code_line: str, column: int) -> int:
    """Underline the lexeme if known, else the node's span, else the word at the column."""
    if error.lexeme:
        return len(error.lexeme)
    if loc.end_line == loc.line and loc.end_column > loc.column:
        return loc.end_column - loc.column
    width = 0
    for ch in code_line[column:]:
        if not (ch.isalnum() or ch == "_"):
            break
        width += 1
    return max(1, width)


# ---------------------------------------------------------------------------
# ErrorReporter
# ---------------------------------------------------------------------------

class ErrorReporter:
    """
    Collects diagnostics instead of failing fast, so one resolver pass can
    surface every static problem. Holds the sources for snippet rendering.
    """

    def __init__(self, source_files: Dict[str, str]):
        self.source_files = source_files
        self.errors: List[Error] = []

    def report_error(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        phase: ErrorPhase = ErrorPhase.STATIC,
        lexeme: Optional[str] = None,
        help: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Error:
        error = Error(message, location, code=code, phase=phase, lexeme=lexeme, help=help, note=note)
        self.add(error)
        return error

    def add(self, error: Error) -> None:
        self.errors.append(error)

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        use_color = _use_color() if color is None else color
        return _DiagnosticRenderer(self.source_files, use_color).render(error)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        use_color = _use_color() if color is None else color
        count = len(self.errors)
        summary = f"aborting due to {count} previous error{'' if count == 1 else 's'}"
        parts = [self.format_error(e, color=use_color) for e in self.errors]
        parts.append(_style("error", _BOLD, _RED, color=use_color) + _style(f": {summary}", _BOLD, color=use_color))
        return "\n\n".join(parts)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def errors_in_phase(self, phase: ErrorPhase) -> List[Error]:
        return [e for e in self.errors if e.phase is phase]

    def clear(self) -> None:
        self.errors.clear()


# ============================================================================
# Exception Classes
# ============================================================================

class LoxError(Exception):
    """Base exception for all errors in user Lox code"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location:
            return f"{self.message}\n[line {self.location.line}]"
        return self.message


class ParseError(LoxError):
    """Syntax error in Lox source, raised by the front end."""
    def __init__(self, message: str, location: Optional[SourceLocation] = None,
                 lexeme: Optional[str] = None):
        super().__init__(message, location)
        self.lexeme = lexeme

    def to_error(self) -> Error:
        return Error(self.message, self.location, code=SYNTAX_ERROR_CODE,
                     phase=ErrorPhase.SYNTAX, lexeme=self.lexeme)


class LoxRuntimeError(LoxError):
    """
    Error raised while executing Lox code.

    Unwinds through every block, loop and call up to `Interpreter.interpret`,
    which is the only place it is caught.
    """
    def __init__(self,
                 kind: RuntimeErrorKind,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 lexeme: Optional[str] = None):
        super().__init__(message, location)
        self.kind = kind
        self.lexeme = lexeme

    @property
    def error_code(self) -> str:
        return self.kind.value

    def to_error(self) -> Error:
        return Error(self.message, self.location, code=self.error_code,
                     phase=ErrorPhase.RUNTIME, lexeme=self.lexeme)


class LoxImplementationError(Exception):
    """
    Error in the interpreter itself (not the user's Lox code).

    Raised for broken internal invariants such as an operator the evaluator
    does not know. Never use this for errors in user code.
    """
    def __init__(self, message: str, error_code: str = "E9999"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"
