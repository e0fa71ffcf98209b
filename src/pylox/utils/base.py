"""
Base Classes and Utilities for pylox
Execution-flow result type and small helpers shared across packages
"""

from typing import Dict, Optional, Any, Generic, TypeVar
from dataclasses import dataclass
from enum import Enum

T = TypeVar('T')

# ==================== EXECUTION FLOW CONTROL ====================

class ExecutionFlowTag(Enum):
    """Execution flow control tags"""
    CONTINUE = "continue"
    RETURN = "return"

@dataclass(frozen=True)
class ExecutionFlow(Generic[T]):
    """
    Outcome of executing one statement, without exceptions.

    Every statement sequencer (block, loop body, function body) checks
    is_return() after each statement and stops early when it is set; only a
    function call turns a RETURN back into a plain value.
    """
    tag: ExecutionFlowTag
    value: Optional[T] = None

    @classmethod
    def continue_execution(cls) -> 'ExecutionFlow[T]':
        """Continue normal execution"""
        return _CONTINUE

    @classmethod
    def return_value(cls, value: Optional[T]) -> 'ExecutionFlow[T]':
        """Return from function with value"""
        return cls(ExecutionFlowTag.RETURN, value)

    def is_return(self) -> bool:
        return self.tag == ExecutionFlowTag.RETURN

    def get_value(self) -> Optional[T]:
        return self.value


_CONTINUE: ExecutionFlow = ExecutionFlow(ExecutionFlowTag.CONTINUE)

# ==================== UTILITY FUNCTIONS ====================

def handle_token(token: Any) -> Dict[str, Any]:
    """Simple token handler - no complex dispatch needed"""
    # Handle Lark Token objects
    if hasattr(token, 'type') and hasattr(token, 'value'):
        return {
            'type': str(token.type),
            'value': str(token.value),
            'line': getattr(token, 'line', 0) or 0,
            'column': getattr(token, 'column', 0) or 0,
            'is_terminal': True
        }
    if isinstance(token, str):
        return {'type': 'string', 'value': token, 'line': 0, 'column': 0, 'is_terminal': True}
    return {'type': 'unknown', 'value': str(token), 'line': 0, 'column': 0, 'is_terminal': False}

def extract_location_info(meta: Any) -> Dict[str, Any]:
    """Simple location extraction from a lark Meta (or Token)"""
    result = {
        'has_location': False,
        'line': 0,
        'column': 0,
        'start_pos': 0,
        'end_pos': 0,
        'end_line': 0,
        'end_column': 0,
    }

    if meta is None or getattr(meta, 'empty', False):
        return result

    if hasattr(meta, 'line') and hasattr(meta, 'column'):
        result.update({
            'has_location': True,
            'line': meta.line or 0,
            'column': meta.column or 0,
            'start_pos': getattr(meta, 'start_pos', 0) or 0,
            'end_pos': getattr(meta, 'end_pos', 0) or 0,
            'end_line': getattr(meta, 'end_line', 0) or 0,
            'end_column': getattr(meta, 'end_column', 0) or 0,
        })

    return result

def format_number(value: float) -> str:
    """Display form of a Lox number: integral values drop the trailing '.0'."""
    text = repr(value)
    if text.endswith(".0"):
        text = text[:-2]
    return text
