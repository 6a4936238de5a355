"""Primitive grammar shared by the ITF declaration parser.

A ``Cursor`` walks the raw text; every primitive either consumes what it
recognizes and returns a value, or returns ``None`` (``False`` for the
boolean ones) and leaves the position where it was.  ``$`` and ``$$``
comments run to the end of the line and are skipped wherever whitespace
is allowed.
"""

from __future__ import annotations

import re

IDENTIFIER_RE = re.compile(r"[A-Za-z0-9_+\-]+")
NUMBER_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?(?![\w.])")
_INLINE_WS_RE = re.compile(r"[ \t\r\f\v]+")


class Cursor:
    """Position in an ITF text buffer."""

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos

    def __repr__(self) -> str:
        return f"Cursor(line={self.line}, pos={self.pos}, next={self.text[self.pos:self.pos + 20]!r})"

    # ── Position helpers ───────────────────────────────────────────

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek_char(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    @property
    def line(self) -> int:
        """1-based line number of the current position."""
        return self.text.count("\n", 0, self.pos) + 1

    def current_line(self) -> str:
        """Text from the current position up to (not including) the newline."""
        end = self.text.find("\n", self.pos)
        return self.text[self.pos:] if end < 0 else self.text[self.pos:end]

    def skip_line(self) -> str:
        """Consume through the next newline; return the skipped text."""
        skipped = self.current_line()
        self.pos += len(skipped)
        if self.peek_char() == "\n":
            self.pos += 1
        return skipped

    def _skip_comment(self) -> None:
        end = self.text.find("\n", self.pos)
        self.pos = len(self.text) if end < 0 else end

    def skip_ws(self) -> None:
        """Skip whitespace, newlines and comments."""
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch.isspace():
                self.pos += 1
            elif ch == "$":
                self._skip_comment()
            else:
                break

    def skip_inline_ws(self) -> None:
        """Skip spaces and a trailing comment without crossing a newline."""
        while True:
            m = _INLINE_WS_RE.match(self.text, self.pos)
            if m:
                self.pos = m.end()
            if self.peek_char() == "$":
                self._skip_comment()
                continue
            break

    # ── Tokens ─────────────────────────────────────────────────────

    def symbol(self, ch: str) -> bool:
        start = self.pos
        self.skip_ws()
        if self.peek_char() == ch:
            self.pos += 1
            return True
        self.pos = start
        return False

    def peek_symbol(self, ch: str) -> bool:
        start = self.pos
        self.skip_ws()
        found = self.peek_char() == ch
        self.pos = start
        return found

    def identifier(self) -> str | None:
        start = self.pos
        self.skip_ws()
        m = IDENTIFIER_RE.match(self.text, self.pos)
        if not m:
            self.pos = start
            return None
        self.pos = m.end()
        return m.group()

    def keyword(self, word: str) -> bool:
        """Match *word* as a whole identifier, ignoring case."""
        start = self.pos
        ident = self.identifier()
        if ident is not None and ident.upper() == word:
            return True
        self.pos = start
        return False

    def peek_keyword(self) -> str | None:
        """Upper-cased next identifier, without consuming it."""
        start = self.pos
        ident = self.identifier()
        self.pos = start
        return ident.upper() if ident is not None else None

    def number(self) -> float | None:
        start = self.pos
        self.skip_ws()
        m = NUMBER_RE.match(self.text, self.pos)
        if not m:
            self.pos = start
            return None
        self.pos = m.end()
        return float(m.group())

    # ── Statements ─────────────────────────────────────────────────

    def assignment_number(self, word: str) -> float | None:
        """``WORD = <number>``."""
        start = self.pos
        if self.keyword(word) and self.symbol("="):
            value = self.number()
            if value is not None:
                return value
        self.pos = start
        return None

    def assignment_identifier(self, word: str) -> str | None:
        """``WORD = <identifier>``."""
        start = self.pos
        if self.keyword(word) and self.symbol("="):
            value = self.identifier()
            if value is not None:
                return value
        self.pos = start
        return None

    # ── Compound values ────────────────────────────────────────────

    def number_list(self) -> list[float] | None:
        """``{ n1 n2 ... }``."""
        start = self.pos
        if not self.symbol("{"):
            return None
        values: list[float] = []
        while True:
            if self.symbol("}"):
                return values
            value = self.number()
            if value is None:
                self.pos = start
                return None
            values.append(value)

    def number_matrix(self) -> list[list[float]] | None:
        """``{ row \\n row ... }`` with a uniform column count."""
        start = self.pos
        if not self.symbol("{"):
            return None
        rows: list[list[float]] = []
        row: list[float] = []
        while True:
            self.skip_inline_ws()
            ch = self.peek_char()
            if ch == "\n":
                self.pos += 1
                if row:
                    rows.append(row)
                    row = []
                continue
            if ch == "}":
                self.pos += 1
                if row:
                    rows.append(row)
                break
            value = self.number()
            if value is None:
                self.pos = start
                return None
            row.append(value)

        if any(len(r) != len(rows[0]) for r in rows):
            self.pos = start
            return None
        return rows

    def tuple_list(self, arity: int) -> list[tuple[float, ...]] | None:
        """``{ (a, b, c) (a, b, c) ... }``.

        Commas between numbers and between tuples are optional.
        """
        start = self.pos
        if not self.symbol("{"):
            return None
        items: list[tuple[float, ...]] = []
        while not self.symbol("}"):
            if not self.symbol("("):
                self.pos = start
                return None
            values: list[float] = []
            while not self.symbol(")"):
                value = self.number()
                if value is None:
                    self.pos = start
                    return None
                values.append(value)
                self.symbol(",")
            if len(values) != arity:
                self.pos = start
                return None
            items.append(tuple(values))
            self.symbol(",")
        return items

    def skip_balanced_block(self) -> bool:
        """Skip to the next ``{`` and past its matching ``}``.

        Returns False (and moves to the end of the text) when the block
        never closes.
        """
        text = self.text
        depth = 0
        opened = False
        while self.pos < len(text):
            ch = text[self.pos]
            if ch == "$":
                self._skip_comment()
                continue
            self.pos += 1
            if ch == "{":
                depth += 1
                opened = True
            elif ch == "}" and opened:
                depth -= 1
                if depth == 0:
                    return True
        return False
