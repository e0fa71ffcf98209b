"""
Literal Parser - Extracted from LoxTransformer
Handles parsing of literal tokens (numbers, strings)
"""

from ...shared import Literal, SourceLocation
from ...utils.config import STRING_QUOTE_CHAR
from ...utils.base import handle_token


class LiteralParser:
    """Dedicated parser for literal values using polymorphic token handling"""

    @staticmethod
    def parse(token, location: SourceLocation) -> Literal:
        """Parse literal token into a Literal node"""
        parser = LiteralParser()

        token_info = handle_token(token)
        token_type = token_info.get('type', 'unknown')
        token_value = token_info.get('value', str(token))

        if token_type == 'NUMBER':
            return parser._parse_number(token_value, location)
        if token_type == 'STRING':
            return parser._parse_string(token_value, location)
        raise ValueError(f"Not a literal token: {token_type}")

    def _parse_number(self, value_str: str, location: SourceLocation) -> Literal:
        """All Lox numbers are double precision, integral or not."""
        return Literal(value=float(value_str), location=location)

    def _parse_string(self, quoted_str: str, location: SourceLocation) -> Literal:
        """Strip quotes; Lox has no escape sequences."""
        if quoted_str.startswith(STRING_QUOTE_CHAR) and quoted_str.endswith(STRING_QUOTE_CHAR):
            quoted_str = quoted_str[1:-1]
        return Literal(value=quoted_str, location=location)
