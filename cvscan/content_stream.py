"""
Content Stream Tokenizer
========================
Minimal lexer for PDF page content streams.

Turns the raw bytes of a content stream into an ordered sequence of
(operator, operands) pairs. Operands are floats for numbers, str for names
(with the leading slash) and keywords, bytes for strings, and lists for
arrays and dictionaries. Inline image data (BI ... ID ... EI) is skipped.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, Optional

WHITESPACE = b" \t\r\n\f\x00"
DELIMITERS = b"()<>[]{}/%"

NUMBER_PATTERN = re.compile(rb"[+-]?(?:\d+\.?\d*|\.\d+)")

# Keywords that are operands rather than operators
OPERAND_KEYWORDS = frozenset({"true", "false", "null"})

# Token kinds
OPERAND = "operand"
KEYWORD = "keyword"
ARRAY_START = "array_start"
ARRAY_END = "array_end"
DICT_START = "dict_start"
DICT_END = "dict_end"


class ContentStreamLexer:
    """Sequential tokenizer over the bytes of one content stream."""

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0
        self.length = len(data)

    def _skip_whitespace(self):
        while self.pos < self.length:
            ch = self.data[self.pos]
            if ch in WHITESPACE:
                self.pos += 1
            elif ch == 0x25:  # % comment
                while (
                    self.pos < self.length
                    and self.data[self.pos] not in b"\r\n"
                ):
                    self.pos += 1
            else:
                break

    def next_token(self) -> Optional[tuple[str, Any]]:
        """Return the next (kind, value) token, or None at end of stream."""
        while True:
            self._skip_whitespace()
            if self.pos >= self.length:
                return None

            ch = self.data[self.pos:self.pos + 1]

            if ch == b"(":
                return OPERAND, self._read_literal_string()
            if ch == b"<":
                if self.data[self.pos + 1:self.pos + 2] == b"<":
                    self.pos += 2
                    return DICT_START, None
                return OPERAND, self._read_hex_string()
            if ch == b">":
                if self.data[self.pos + 1:self.pos + 2] == b">":
                    self.pos += 2
                    return DICT_END, None
                self.pos += 1
                continue
            if ch == b"[":
                self.pos += 1
                return ARRAY_START, None
            if ch == b"]":
                self.pos += 1
                return ARRAY_END, None
            if ch == b"/":
                self.pos += 1
                return OPERAND, "/" + self._read_regular().decode(
                    "latin-1"
                )
            if ch in (b"{", b"}", b")"):
                self.pos += 1
                continue

            token = self._read_regular()
            if NUMBER_PATTERN.fullmatch(token):
                return OPERAND, float(token)
            return KEYWORD, token.decode("latin-1")

    def _read_regular(self) -> bytes:
        start = self.pos
        while self.pos < self.length:
            ch = self.data[self.pos]
            if ch in WHITESPACE or ch in DELIMITERS:
                break
            self.pos += 1
        if self.pos == start:
            # Lone byte that is neither a delimiter nor whitespace-terminated
            self.pos += 1
        return self.data[start:self.pos]

    def _read_literal_string(self) -> bytes:
        self.pos += 1  # opening paren
        start = self.pos
        depth = 1
        while self.pos < self.length:
            ch = self.data[self.pos]
            if ch == 0x5C:  # backslash escapes the next byte
                self.pos += 2
                continue
            if ch == 0x28:
                depth += 1
            elif ch == 0x29:
                depth -= 1
                if depth == 0:
                    value = self.data[start:self.pos]
                    self.pos += 1
                    return value
            self.pos += 1
        return self.data[start:]

    def _read_hex_string(self) -> bytes:
        self.pos += 1  # opening angle bracket
        end = self.data.find(b">", self.pos)
        if end == -1:
            end = self.length
        value = self.data[self.pos:end]
        self.pos = end + 1
        return value

    def skip_inline_image(self) -> list[Any]:
        """
        Consume an inline image after its BI operator.

        Returns the flattened key/value list of the image dictionary.
        The binary payload between ID and EI is skipped.
        """
        params: list[Any] = []
        while True:
            token = self.next_token()
            if token is None:
                return params
            kind, value = token
            if kind == KEYWORD and value == "ID":
                break
            if kind in (OPERAND, KEYWORD):
                params.append(value)

        # A single whitespace byte separates ID from the image data
        self.pos += 1
        while True:
            idx = self.data.find(b"EI", self.pos)
            if idx == -1:
                self.pos = self.length
                break
            self.pos = idx + 2
            before_ok = idx == 0 or self.data[idx - 1] in WHITESPACE
            after_ok = (
                self.pos >= self.length
                or self.data[self.pos] in WHITESPACE
            )
            if before_ok and after_ok:
                break
        return params


def iter_operations(data: bytes) -> Iterator[tuple[str, list[Any]]]:
    """
    Yield (operator, operands) pairs from a content stream.

    Inline images are reported once as ("BI", <image dictionary list>).
    Unbalanced arrays or dictionaries are tolerated.
    """
    lexer = ContentStreamLexer(data)
    operands: list[Any] = []
    containers: list[list[Any]] = []

    while True:
        token = lexer.next_token()
        if token is None:
            break
        kind, value = token

        if kind in (ARRAY_START, DICT_START):
            containers.append([])
            continue

        if kind in (ARRAY_END, DICT_END):
            if not containers:
                continue
            item = containers.pop()
            (containers[-1] if containers else operands).append(item)
            continue

        if kind == OPERAND or value in OPERAND_KEYWORDS or containers:
            (containers[-1] if containers else operands).append(value)
            continue

        if value == "BI":
            yield "BI", lexer.skip_inline_image()
            operands = []
            continue

        yield value, operands
        operands = []
