"""
Configuration constants to replace magic numbers throughout pylox
"""

import os
import tempfile

# Reserved names bound by the resolver and the interpreter
THIS_KEYWORD = "this"
SUPER_KEYWORD = "super"
INITIALIZER_NAME = "init"

# Call limits (enforced by the parser)
MAX_ARGUMENTS = 255
MAX_PARAMETERS = 255

# Parser configuration constants (cache under temp dir to avoid cluttering project root)
DEFAULT_PARSER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "pylox_parser.cache")
GRAMMAR_FILE_NAME = "grammar.lark"
DEFAULT_SOURCE_NAME = "<script>"
REPL_SOURCE_NAME = "<repl>"

# Literal display
NIL_LITERAL = "nil"
BOOLEAN_TRUE_LITERAL = "true"
BOOLEAN_FALSE_LITERAL = "false"
STRING_QUOTE_CHAR = '"'

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# CLI exit codes (sysexits.h)
EXIT_OK = 0
EXIT_USAGE = 64
EXIT_DATA_ERROR = 65
EXIT_NO_INPUT = 66
EXIT_SOFTWARE = 70

# REPL
REPL_PROMPT = "> "

# The host call stack is the interpreter's call stack; each Lox call costs
# several Python frames. Programs run on a worker thread with a larger stack.
RECURSION_LIMIT = 100000
THREAD_STACK_SIZE = 512 * 1024 * 1024

# Debug dumps (set to any non-empty value to enable)
DUMP_AST_ENV_VAR = "PYLOX_DUMP_AST"
AST_DUMP_DIR = "ast_dump"
