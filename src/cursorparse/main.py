"""
The implementations of the main classes.
"""

from __future__ import annotations
from typing import Any, Self, TypeVar, Final, Callable, Protocol, runtime_checkable, overload, get_origin, get_args

import logging

import cursorparse.const as const


logger = logging.getLogger(__name__)

_T = TypeVar("_T")



class ParseError(Exception):
    """
    The exception that's raised when the input breaks a cursor operation's precondition.

    The cursor operations without a `try_` prefix assume the input is well formed. When it isn't, that's a bug in the
    caller's grammar (or the input), not something to recover from.
    """

    def __init__(self, src: str, pos: int, msg: str | None = None) -> None:
        """
        `src`: The string that was being parsed.
        `pos`: The position of the error.
        `msg`: The reason for the error.
        """
        if msg is None:
            super().__init__()
        else:
            super().__init__(msg)
        self.src: str = src
        self.pos: int = pos
        self.append_pos_note(pos)

    def append_pos_note(self, pos: int, msg: str | None = None) -> Self:
        note: list[str] = [] if msg is None else [msg]

        pos = min(pos, len(self.src))
        # should still work with CRLF
        line = self.src.count("\n", 0, pos) + 1
        column = pos - self.src.rfind("\n", 0, pos) # works even when it returns -1
        note.append(f"At position {pos} (line {line}, column {column})")

        lines = self.src.splitlines()
        if len(lines) > line-1:
            line_str = lines[line-1]
            if len(line_str) >= column:
                if column <= 20:
                    note.append(f"{line_str[:40]}\n{' '*(column-1)}^")
                else:
                    note.append(f"{line_str[(column-20):(column+20)]}\n{' '*20}^")
        self.add_note("\n".join(note))
        return self



@runtime_checkable
class Parseable(Protocol):
    """
    A type that can construct itself by consuming from a `Cursor`.

    ```
    class Point(Parseable):
        def __init__(self, x: int, y: int) -> None:
            self.x = x
            self.y = y

        @classmethod
        def from_cursor(cls, cursor: Cursor) -> Self:
            x = cursor.read_int()
            cursor.consume(",")
            return cls(x, cursor.read_int())

    Point.from_string("3,4")
    cursor.read_value(Point)
    cursor.read_value(list[Point])
    ```
    """

    @classmethod
    def from_cursor(cls, cursor: Cursor) -> Self:
        """
        Consumes exactly the text of one value and nothing more.

        Leaves the cursor right after the consumed text.
        """
        ...

    @classmethod
    def from_string(cls, text: str) -> Self:
        """
        Builds the value from a whole string using a transient `Cursor`.

        Trailing input that `from_cursor()` didn't consume is ignored. Use `parse(cls, text, exhaustive=True)` to reject it.
        """
        return cls.from_cursor(Cursor(text))


Reader = Callable[["Cursor"], Any]

_readers: dict[type, Reader] = {}

def register_reader(kind: type, reader: Reader) -> None:
    """
    Lets `Cursor.read_value()` read a type that doesn't implement `Parseable`, such as a built-in.

    `reader` is called with the cursor and must consume exactly the value's text.
    """
    if kind in _readers:
        logger.debug("Replacing the reader for %s.", kind.__qualname__)
    _readers[kind] = reader

def get_reader(kind: Any) -> Reader:
    """
    Returns the function that reads `kind` from a cursor.

    Supports registered types, `Parseable` classes, and `list[...]` of any of those.
    """
    if get_origin(kind) is list:
        args = get_args(kind)
        if len(args) != 1:
            raise TypeError(f"Expected exactly one element type in {kind!r}.")
        element = args[0]
        get_reader(element) # fail early for unreadable element types
        return lambda cursor: cursor.read_list(element)
    if isinstance(kind, type):
        if kind in _readers:
            return _readers[kind]
        # a subclass of a registered type (e.g. a `str` subclass) still reads itself
        from_cursor = getattr(kind, "from_cursor", None)
        if callable(from_cursor):
            return from_cursor
        for base in kind.__mro__:
            if base in _readers:
                base_reader = _readers[base]
                return lambda cursor: kind(base_reader(cursor))
    raise TypeError(f"Don't know how to read {kind!r} from a cursor. Implement `from_cursor()` or use `register_reader()`.")


@overload
def parse(kind: type[_T], text: str, *, exhaustive: bool = False) -> _T: ...
@overload
def parse(kind: Any, text: str, *, exhaustive: bool = False) -> Any: ...

def parse(kind: Any, text: str, *, exhaustive: bool = False) -> Any:
    """
    Reads a value of `kind` from a whole string using a transient `Cursor`.

    By default, text left over after the value is ignored.
    If `exhaustive` is true, leftover text raises a `ParseError` instead.
    """
    cursor = Cursor(text)
    value = cursor.read_value(kind)
    if not cursor.is_done:
        if exhaustive:
            raise cursor.error(f"Expected the end of the input after the value, found {cursor.src[cursor.pos:cursor.pos+20]!r}.")
        logger.debug("Ignoring %d unconsumed characters after the value.", len(cursor))
    return value



class Cursor:
    """
    A position in an immutable string, with primitives that consume from it.

    Every operation works on `remaining`, the text from `pos` onward. Operations either move the position forward
    or, when they fail, leave it where it was.

    The `try_` operations (and the searches) report absence with `False` or `None`.
    The others assume the input is well formed and raise a `ParseError` when it isn't.
    """

    def __init__(self, src: str, *, starting_pos: int = 0) -> None:
        if not 0 <= starting_pos <= len(src):
            raise ValueError(f"Starting position {starting_pos} is outside of the input (length {len(src)}).")
        self.src: Final[str] = src
        """The string that's being parsed."""
        self.pos: int = starting_pos
        """The position of the first unconsumed character."""

    @property
    def remaining(self) -> str:
        """The unconsumed part of the input."""
        return self.src[self.pos:]

    @property
    def is_done(self) -> bool:
        """Whether all of the input has been consumed."""
        return self.pos >= len(self.src)

    @property
    def peek(self) -> str | None:
        """The next character without consuming it, or `None` if done."""
        if self.is_done:
            return None
        return self.src[self.pos]

    @property
    def offset(self) -> int:
        """The number of characters consumed so far."""
        return self.pos

    def __len__(self) -> int:
        return len(self.src) - self.pos

    def __bool__(self) -> bool:
        """Whether there are any characters left. The opposite of `is_done`."""
        return self.pos < len(self.src)

    def __repr__(self) -> str:
        preview = self.src[self.pos:self.pos+20]
        if len(self) > 20:
            preview += "..."
        return f"<Cursor at {self.pos}: {preview!r}>"

    def error(self, msg: str | None = None) -> ParseError:
        """Creates a `ParseError` at the current position."""
        return ParseError(self.src, self.pos, msg)

    def try_consume(self, literal: str) -> bool:
        """
        Attempts to match the given string. Case sensitive.

        Advances the position if it matched.

        Returns a bool indicating whether or not the string was matched.
        """
        if self.src.startswith(literal, self.pos):
            self.pos += len(literal)
            return True
        return False

    def consume(self, literal: str) -> None:
        """
        Matches the given string.

        Raises a `ParseError` if the input doesn't start with it.
        """
        if not self.try_consume(literal):
            found = self.src[self.pos:self.pos+len(literal)]
            raise self.error(f"Tried to consume {literal!r} but the input started with {found!r} instead.")

    def consume_through(self, separator: str) -> str | None:
        """
        Consumes up to and including the first occurrence of `separator`.

        Returns the consumed part without the separator, or `None` if the separator wasn't found. (Nothing is consumed then.)
        """
        consumed = self.consume_up_to(separator)
        if consumed is not None:
            self.pos += len(separator)
        return consumed

    def consume_up_to(self, separator: str) -> str | None:
        """
        Consumes up to the first occurrence of `separator`, leaving the separator unconsumed.

        Returns the consumed part, or `None` if the separator wasn't found. (Nothing is consumed then.)
        """
        if not separator:
            raise ValueError("The separator can't be empty.")
        index = self.src.find(separator, self.pos)
        if index == -1:
            return None
        start_pos = self.pos
        self.pos = index
        return self.src[start_pos:index]

    def consume_copies_of(self, char: str) -> None:
        """Skips every leading occurrence of the character."""
        if len(char) != 1:
            raise ValueError(f"Expected a single character, got {char!r}.")
        while self.pos < len(self.src) and self.src[self.pos] == char:
            self.pos += 1

    def consume_while(self, predicate: Callable[[str], bool]) -> str:
        """
        Consumes characters as long as `predicate` returns true for them.

        Returns the consumed part, which may be empty.
        """
        start_pos = self.pos
        end_pos = self.pos
        while end_pos < len(self.src) and predicate(self.src[end_pos]):
            end_pos += 1
        self.pos = end_pos
        return self.src[start_pos:end_pos]

    def consume_whitespace(self) -> str:
        """Consumes zero or more whitespace characters."""
        return self.consume_while(str.isspace)

    def consume_next(self) -> str:
        """
        Consumes and returns one character.

        Raises a `ParseError` if there are no characters left.
        """
        if self.is_done:
            raise self.error("Tried to consume a character at the end of the input.")
        char = self.src[self.pos]
        self.pos += 1
        return char

    def try_consume_next(self) -> str | None:
        """Consumes and returns one character, or returns `None` if there are no characters left."""
        if self.is_done:
            return None
        return self.consume_next()

    def consume_next_n(self, amount: int) -> str:
        """
        Consumes and returns exactly `amount` characters.

        Raises a `ParseError` if there aren't that many characters left.
        """
        if amount < 0:
            raise self.error(f"Tried to consume a negative amount ({amount}) of characters.")
        if amount > len(self):
            raise self.error(f"Tried to consume {amount} characters but only {len(self)} are left.")
        start_pos = self.pos
        self.pos += amount
        return self.src[start_pos:self.pos]

    def consume_rest(self) -> str:
        """Consumes and returns all of the remaining input. Returns an empty string if already done."""
        rest = self.src[self.pos:]
        self.pos = len(self.src)
        return rest

    def read_int(self) -> int:
        """
        Reads a decimal integer with an optional leading `-` or `+`.

        Raises a `ParseError` if no digits follow the sign. (Nothing is consumed then.)
        """
        start_pos = self.pos
        sign = 1
        if self.peek in const.SIGNS:
            sign = -1 if self.consume_next() == "-" else 1
        digits = self.consume_while(const.DECIMAL.__contains__)
        if not digits:
            self.pos = start_pos
            raise self.error(f"Expected a decimal digit, found {self.src[self.pos:self.pos+10]!r}.")
        try:
            return sign * int(digits)
        except ValueError as e:
            # too many digits for the interpreter's integer conversion limit
            self.pos = start_pos
            raise self.error(f"Couldn't convert {len(digits)} decimal digits to an integer.") from e

    def read_hex_int(self) -> int:
        """
        Reads a hexadecimal integer with an optional `0x` prefix. Case insensitive.

        Raises a `ParseError` if there are no hexadecimal digits. (Nothing is consumed then.)
        """
        start_pos = self.pos
        self.try_consume(const.HEX_PREFIX)
        digits = self.consume_while(const.HEXADECIMAL.__contains__)
        if not digits:
            self.pos = start_pos
            raise self.error(f"Expected a hexadecimal digit, found {self.src[self.pos:self.pos+10]!r}.")
        return int(digits, base=16)

    def read_word(self) -> str:
        """Reads letters and digits. Underscores aren't included. May return an empty string."""
        return self.consume_while(lambda c: c.isalpha() or c.isdigit())

    @overload
    def read_value(self, kind: type[_T]) -> _T: ...
    @overload
    def read_value(self, kind: Any) -> Any: ...

    def read_value(self, kind: Any) -> Any:
        """
        Reads a value of the given type.

        `kind` can be a `Parseable` class, a type registered with `register_reader()` (`int` and `str` are by default),
        or `list[...]` of any of those, which reads a comma separated list.
        """
        return get_reader(kind)(self)

    @overload
    def read_list(self, kind: type[_T], *, separator: str = const.LIST_SEPARATOR, padding: str = const.LIST_PADDING) -> list[_T]: ...
    @overload
    def read_list(self, kind: Any, *, separator: str = const.LIST_SEPARATOR, padding: str = const.LIST_PADDING) -> list[Any]: ...

    def read_list(self, kind: Any, *, separator: str = const.LIST_SEPARATOR, padding: str = const.LIST_PADDING) -> list[Any]:
        """
        Reads one or more values separated by `separator`.

        Leading copies of `padding` are skipped before each value. Stops at the first value that isn't followed by the separator.

        `"1, 2,3"` -> `[1, 2, 3]`
        """
        reader = get_reader(kind)
        values: list[Any] = []
        while True:
            self.consume_copies_of(padding)
            values.append(reader(self))
            if not self.try_consume(separator):
                return values


register_reader(int, Cursor.read_int)
register_reader(str, Cursor.read_word)
