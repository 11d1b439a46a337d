"""
Library to simplify writing string parsers manually.

A `Cursor` walks forward over a string. Each operation consumes part of what's left and returns it.

Operations that look for something that may legitimately be missing report it:
```
cursor.try_consume("abc")       # bool
cursor.consume_through(",")     # str | None
cursor.consume_up_to(",")       # str | None
cursor.try_consume_next()       # str | None
```

The rest assume the input is well formed, and raise a `ParseError` otherwise:
```
cursor.consume("abc")
cursor.consume_next()
cursor.consume_next_n(3)
cursor.read_int()
cursor.read_hex_int()
```

Defining values:
```
class Move(Parseable):
    def __init__(self, amount: int, source: int, target: int) -> None:
        ...

    @classmethod
    def from_cursor(cls, cursor: Cursor) -> Self:
        cursor.consume("move ")
        amount = cursor.read_int()
        cursor.consume(" from ")
        source = cursor.read_int()
        cursor.consume(" to ")
        return cls(amount, source, cursor.read_int())
```

Using them:
```
move = Move.from_string("move 3 from 1 to 2")
moves = parse(list[Move], "move 1 from 2 to 1, move 3 from 1 to 3")
numbers = parse(list[int], "1, 2,3")    # [1, 2, 3]
```

See the `cursorparse.general` module for general purpose values you can use as examples.
"""

import cursorparse.const as const
import cursorparse.main
from cursorparse.main import (
    ParseError,
    Parseable,
    Cursor,
    register_reader,
    get_reader,
    parse,
)
import cursorparse.general as general
