"""ITF text parsing.

Submodules:
  grammar : cursor-based primitives (keywords, numbers, lists, matrices)
  lexer   : flat tokenizer for lexical diagnostics
  itf     : declaration parser producing a validated ProcessStack
"""

from .grammar import Cursor
from .lexer import Token, TokenKind, LexError, KEYWORDS, tokenize
from .itf import (
    ItfParser,
    ItfError,
    ParseError,
    ValidationError,
    Recognized,
    Unrecognized,
    parse_itf_file,
    validate_itf_content,
)

__all__ = [
    # Grammar
    "Cursor",
    # Lexer
    "Token",
    "TokenKind",
    "LexError",
    "KEYWORDS",
    "tokenize",
    # Parser
    "ItfParser",
    "ItfError",
    "ParseError",
    "ValidationError",
    "Recognized",
    "Unrecognized",
    "parse_itf_file",
    "validate_itf_content",
]
