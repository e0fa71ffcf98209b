"""
Source Location (Span)

Every AST node and every diagnostic carries one of these so the driver can
point at the offending line.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location of a token or node.

    - File, line, column (1-based, as lark reports them)
    - Optional end position for multi-character spans
    - Immutable (frozen) for hashability
    """
    file: str
    line: int
    column: int
    start: int = 0
    end: int = 0
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"


UNKNOWN_LOCATION = SourceLocation(file="<unknown>", line=0, column=0)
