"""Tokenizer for ITF text.

The declaration parser works on the raw text through ``grammar.Cursor``;
this tokenizer exists for lexical diagnostics (``python -m itfstack
tokens``) and for tools that want a flat token stream.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .grammar import IDENTIFIER_RE, NUMBER_RE


class TokenKind(str, Enum):
    KEYWORD = "keyword"
    IDENTIFIER = "identifier"
    NUMBER = "number"
    STRING = "string"
    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    EQUALS = "="
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    COMMA = ","
    EOF = "eof"


KEYWORDS = frozenset({
    "TECHNOLOGY", "GLOBAL_TEMPERATURE", "REFERENCE_DIRECTION", "BACKGROUND_ER",
    "HALF_NODE_SCALE_FACTOR", "USE_SI_DENSITY", "DROP_FACTOR_LATERAL_SPACING",
    "DIELECTRIC", "CONDUCTOR", "VIA",
    "THICKNESS", "ER", "CRT1", "CRT2", "RPSQ", "WMIN", "SMIN", "SIDE_TANGENT",
    "RHO_VS_WIDTH_AND_SPACING", "ETCH_VS_WIDTH_AND_SPACING",
    "THICKNESS_VS_WIDTH_AND_SPACING", "POLYNOMIAL_BASED_THICKNESS_VARIATION",
    "DENSITY_POLYNOMIAL_ORDERS", "WIDTH_POLYNOMIAL_ORDERS", "WIDTH_RANGES",
    "POLYNOMIAL_COEFFICIENTS", "RHO_VS_SI_WIDTH_AND_THICKNESS", "CRT_VS_SI_WIDTH",
    "WIDTHS", "SPACINGS", "VALUES", "WIDTH",
    "FROM", "TO", "AREA", "RPV",
    "MEASURED_FROM", "TOP_OF_CHIP", "ETCH_FROM_TOP", "CAPACITIVE_ONLY",
    "RESISTIVE_ONLY", "VERTICAL", "HORIZONTAL", "GATE", "YES", "NO",
    "SW_T", "TW_T",
})

_SYMBOLS = {
    "{": TokenKind.LEFT_BRACE,
    "}": TokenKind.RIGHT_BRACE,
    "=": TokenKind.EQUALS,
    "(": TokenKind.LEFT_PAREN,
    ")": TokenKind.RIGHT_PAREN,
    ",": TokenKind.COMMA,
}

_STRING_RE = re.compile(r"\"([^\"]*)\"|'([^']*)'")


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    line: int
    column: int
    value: float | None = None


class LexError(Exception):
    """Raised when the text contains a character no token can start with."""

    def __init__(self, char: str, line: int, column: int) -> None:
        self.char = char
        self.line = line
        self.column = column
        super().__init__(f"Unexpected character {char!r} at line {line}, column {column}")


def tokenize(text: str) -> list[Token]:
    """Split *text* into tokens, dropping whitespace and comments.

    Words are upper-cased when they are ITF keywords and kept verbatim
    otherwise.  The list always ends with an EOF token.
    """
    tokens: list[Token] = []
    pos = 0
    line = 1
    line_start = 0
    n = len(text)

    while pos < n:
        ch = text[pos]
        col = pos - line_start + 1

        if ch == "\n":
            pos += 1
            line += 1
            line_start = pos
            continue
        if ch.isspace():
            pos += 1
            continue
        if ch == "$":
            end = text.find("\n", pos)
            pos = n if end < 0 else end
            continue

        m = NUMBER_RE.match(text, pos)
        if m:
            tokens.append(Token(TokenKind.NUMBER, m.group(), line, col, float(m.group())))
            pos = m.end()
            continue

        m = IDENTIFIER_RE.match(text, pos)
        if m:
            word = m.group()
            upper = word.upper()
            if upper in KEYWORDS:
                tokens.append(Token(TokenKind.KEYWORD, upper, line, col))
            else:
                tokens.append(Token(TokenKind.IDENTIFIER, word, line, col))
            pos = m.end()
            continue

        m = _STRING_RE.match(text, pos)
        if m:
            body = m.group(1) if m.group(1) is not None else m.group(2)
            tokens.append(Token(TokenKind.STRING, body, line, col))
            newlines = m.group().count("\n")
            if newlines:
                line += newlines
                line_start = text.rfind("\n", pos, m.end()) + 1
            pos = m.end()
            continue

        kind = _SYMBOLS.get(ch)
        if kind is None:
            raise LexError(ch, line, col)
        tokens.append(Token(kind, ch, line, col))
        pos += 1

    tokens.append(Token(TokenKind.EOF, "", line, pos - line_start + 1))
    return tokens
