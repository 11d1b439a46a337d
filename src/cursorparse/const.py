"""
General use constants.
"""

from __future__ import annotations
from typing import Final

WHITESPACES: Final[frozenset[str]] = frozenset({" ", "\t", "\n", "\r", "\f", "\v"})
DECIMAL: Final[frozenset[str]] = frozenset("0123456789")
HEXADECIMAL: Final[frozenset[str]] = DECIMAL | frozenset("abcdefABCDEF")
SIGNS: Final[frozenset[str]] = frozenset({"-", "+"})

HEX_PREFIX: Final[str] = "0x"

LIST_SEPARATOR: Final[str] = ","
"""Separates the elements of a list read by `Cursor.read_list()`."""
LIST_PADDING: Final[str] = " "
"""Skipped before each element of a list read by `Cursor.read_list()`."""
