from __future__ import annotations
from typing import Self

from dataclasses import dataclass

from cursorparse import const
from cursorparse.main import Cursor, Parseable, ParseError

# quoted string

GENERAL_ESCAPES = {
    'b': '\b',
    'f': '\f',
    'n': '\n',
    'r': '\r',
    't': '\t',
}

def unicode_escape(cursor: Cursor) -> str:
    """Reads the 4 hexadecimal digits after `\\u`."""
    code = cursor.src[cursor.pos:cursor.pos+4]
    if len(code) != 4 or not all(c in const.HEXADECIMAL for c in code):
        raise cursor.error("Expected 4 hexadecimal characters after unicode escape sequence.")
    return chr(int(cursor.consume_next_n(4), base=16))

def quoted_string(
    cursor: Cursor,
    *,
    quote: str = '"',
    escape: str = '\\',
    custom_escapes: dict[str, str] = GENERAL_ESCAPES,
) -> str:
    """
    Reads a string between two `quote`s, resolving escape sequences.

    Any escaped character without a special meaning stands for itself. (`\\"` is `"`)
    """
    start_pos = cursor.pos
    cursor.consume(quote)
    data: list[str] = []
    while True:
        char = cursor.try_consume_next()
        if char is None:
            cursor.pos = start_pos
            raise cursor.error(f"Expected closing quote `{quote}`.")
        if char == quote:
            return "".join(data)
        if char != escape:
            data.append(char)
            continue
        escaped = cursor.try_consume_next()
        if escaped is None:
            cursor.pos = start_pos
            raise cursor.error(f"Expected a character to escape after `{escape}`.")
        if escaped == "u":
            try:
                data.append(unicode_escape(cursor))
            except ParseError:
                cursor.pos = start_pos
                raise
        else:
            data.append(custom_escapes.get(escaped, escaped))


class QuotedString(str, Parseable):
    """A double quoted string, without the quotes and with its escapes resolved."""

    @classmethod
    def from_cursor(cls, cursor: Cursor) -> Self:
        return cls(quoted_string(cursor))


@dataclass(frozen=True)
class IntRange(Parseable):
    """
    An inclusive range of integers, written as `start-end`.

    `3-7`, `-5--2`
    """
    start: int
    end: int

    @classmethod
    def from_cursor(cls, cursor: Cursor) -> Self:
        start = cursor.read_int()
        cursor.consume("-")
        return cls(start, cursor.read_int())

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.start <= value <= self.end

    def __len__(self) -> int:
        return max(0, self.end - self.start + 1)

    def contains_range(self, other: IntRange) -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: IntRange) -> bool:
        return self.start <= other.end and other.start <= self.end


@dataclass(frozen=True)
class KeyValue(Parseable):
    """
    A `key: value` or `key=value` pair.

    The key is a word. The value runs up to the next whitespace or comma, so `a=1, b=2` reads as a list of pairs.
    """
    key: str
    value: str

    @classmethod
    def from_cursor(cls, cursor: Cursor) -> Self:
        start_pos = cursor.pos
        key = cursor.read_word()
        if not key:
            raise cursor.error("Expected a key.")
        if not (cursor.try_consume(":") or cursor.try_consume("=")):
            found = cursor.peek
            cursor.pos = start_pos
            raise cursor.error(f"Expected `:` or `=` after the key {key!r}, found {found!r}.")
        cursor.consume_copies_of(" ")
        value = cursor.consume_while(lambda c: c not in const.WHITESPACES and c != const.LIST_SEPARATOR)
        return cls(key, value)
