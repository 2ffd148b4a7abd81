"""
Value Lexer - Tokenizes literal value lists

Converts text such as  1, 'John''s', true, 3.5, NULL  into typed values.
"""

import re
from typing import List, Optional

from ..core.types import SqlValue
from ..errors import EmptyValue, InvalidLiteral, LiteralSyntaxError, NoValuesProvided, UnterminatedString


_INTEGER_RE = re.compile(r'[+-]?\d+', re.ASCII)
_FLOAT_RE = re.compile(
    r'[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|inf|infinity|nan)',
    re.ASCII | re.IGNORECASE,
)

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1

# Characters produced by a backslash escape inside a string
_ESCAPES = {'n': '\n', 'r': '\r'}


def parse_single_value(text: str) -> SqlValue:
    """Classify one unquoted field: NULL, boolean, integer, float"""
    trimmed = text.strip()

    upper = trimmed.upper()
    if upper == 'NULL':
        return None
    if upper == 'TRUE':
        return True
    if upper == 'FALSE':
        return False

    if _INTEGER_RE.fullmatch(trimmed):
        value = int(trimmed)
        if INT64_MIN <= value <= INT64_MAX:
            return value
        return float(value)

    if _FLOAT_RE.fullmatch(trimmed):
        return float(trimmed)

    raise InvalidLiteral(trimmed)


class ValueLexer:
    """Single left-to-right scan over a comma-separated literal list"""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.values: List[SqlValue] = []
        self.field: List[str] = []

    def _current_char(self) -> Optional[str]:
        """Get current character or None if at end"""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def _peek(self, offset: int = 1) -> Optional[str]:
        """Peek at character ahead"""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def _advance(self) -> str:
        """Advance position and return current char"""
        char = self._current_char()
        self.pos += 1
        return char

    def _read_string(self) -> str:
        """Read a quoted string starting at the opening quote"""
        self._advance()  # Opening quote

        value = []
        while True:
            char = self._current_char()
            if char is None:
                raise UnterminatedString()

            if char == '\\':
                self._advance()
                escaped = self._current_char()
                if escaped is None:
                    raise UnterminatedString()
                value.append(_ESCAPES.get(escaped, escaped))
                self._advance()
                continue

            if char == "'":
                if self._peek() == "'":
                    # Doubled quote is a literal quote
                    self._advance()
                    self._advance()
                    value.append("'")
                    continue
                self._advance()  # Closing quote
                return ''.join(value)

            value.append(self._advance())

    def _skip_to_separator(self) -> None:
        """Discard anything after a closing quote up to the next comma"""
        while self._current_char() is not None and self._current_char() != ',':
            self._advance()

    def _finish_field(self) -> None:
        text = ''.join(self.field).strip()
        self.field = []
        if not text:
            raise EmptyValue(len(self.values) + 1)
        self.values.append(parse_single_value(text))

    def tokenize(self) -> List[SqlValue]:
        """Tokenize the entire input"""
        if not self.text.strip():
            raise NoValuesProvided()

        # Set once a quoted string has been read for the current field
        quoted = False

        while self._current_char() is not None:
            char = self._current_char()

            if char == "'":
                # Anything typed before the quote is dropped
                self.field = []
                self.values.append(self._read_string())
                self._skip_to_separator()
                quoted = True
                continue

            if char == ',':
                self._advance()
                if quoted:
                    quoted = False
                    self.field = []
                else:
                    self._finish_field()
                continue

            self.field.append(self._advance())

        if not quoted:
            self._finish_field()

        return self.values


def parse_values(text: str) -> List[SqlValue]:
    """
    Parse a comma-separated literal list.

    Args:
        text: Literal list such as "1, 'ab''c', true, NULL"

    Returns:
        Typed values in input order

    Raises:
        LiteralSyntaxError: For unterminated strings, unreadable literals,
                            empty fields or an empty list
    """
    if text is None:
        raise NoValuesProvided()
    return ValueLexer(text).tokenize()


def parse_literal(text: str) -> SqlValue:
    """Parse exactly one literal"""
    values = parse_values(text)
    if len(values) != 1:
        raise LiteralSyntaxError(f"Expected a single value, got {len(values)}: {text}")
    return values[0]
