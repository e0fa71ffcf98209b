"""
Parser

Source text to AST via a lark LALR grammar and LoxTransformer.
"""

from pathlib import Path
from typing import Optional
from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, VisitError
import logging

from ..shared.nodes import Program
from ..shared.errors import ParseError
from ..shared.source_location import SourceLocation
from .transformers.base import LoxTransformer
from ..utils.config import DEFAULT_PARSER_CACHE_FILE, DEFAULT_SOURCE_NAME, GRAMMAR_FILE_NAME

logger = logging.getLogger("pylox.frontend.parser")


class Parser:
    """
    Parser: takes source code, returns a Program.

    - Preserves source locations (propagate_positions)
    - Converts lark errors into ParseError
    - Uses lark's grammar cache
    """

    def __init__(self, cache_file: Optional[str] = DEFAULT_PARSER_CACHE_FILE):
        grammar_path = Path(__file__).parent / GRAMMAR_FILE_NAME
        self.parser = Lark.open(
            str(grammar_path),
            start='program',
            parser='lalr',              # Required for caching
            lexer='basic',              # Keywords are reserved everywhere, not per parser state
            cache=cache_file or False,
            propagate_positions=True,   # Enable position tracking for error reporting
            maybe_placeholders=False,   # Clean meta handling
        )
        self.transformer = LoxTransformer()

    def parse(self, source: str, source_file: str = DEFAULT_SOURCE_NAME) -> Program:
        """
        Parse source code to AST.

        Raises ParseError on the first syntax error.
        """
        self.transformer.current_file = source_file
        try:
            tree = self.parser.parse(source)
        except UnexpectedInput as e:
            raise self._convert_lark_error(e, source, source_file) from e

        try:
            program = self.transformer.transform(tree)
        except VisitError as e:
            # Errors raised inside transformer callbacks arrive wrapped
            if isinstance(e.orig_exc, ParseError):
                raise e.orig_exc from None
            raise

        logger.debug(f"Parsed {source_file}: {len(program.statements)} top-level statement(s)")
        return program

    def _convert_lark_error(self, e: UnexpectedInput, source: str, source_file: str) -> ParseError:
        if isinstance(e, UnexpectedEOF) or getattr(getattr(e, 'token', None), 'type', None) == '$END':
            line = source.count("\n") + 1
            column = len(source) - (source.rfind("\n") + 1) + 1
            return ParseError("Unexpected end of input.", SourceLocation(source_file, line, column), lexeme=None)

        location = SourceLocation(file=source_file, line=e.line, column=e.column)
        if isinstance(e, UnexpectedCharacters):
            return ParseError("Unexpected character.", location, lexeme=e.char)

        token = str(e.token)
        return ParseError(f"Unexpected token '{token}'.", location, lexeme=token)
