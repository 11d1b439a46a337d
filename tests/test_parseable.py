"""
Tests for `Parseable`, the reader registry, lists, and `parse()`.
"""

from __future__ import annotations
from typing import Self

import logging

import pytest

from cursorparse import Cursor, Parseable, ParseError, get_reader, parse, register_reader
from cursorparse.main import _readers


class Point(Parseable):
    def __init__(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    @classmethod
    def from_cursor(cls, cursor: Cursor) -> Self:
        cursor.consume("(")
        x = cursor.read_int()
        cursor.consume(";")
        y = cursor.read_int()
        cursor.consume(")")
        return cls(x, y)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Point) and (self.x, self.y) == (other.x, other.y)


class Color:
    """Not a `Parseable` subclass, only has the method."""

    def __init__(self, name: str) -> None:
        self.name = name

    @classmethod
    def from_cursor(cls, cursor: Cursor) -> Self:
        cursor.consume("#")
        return cls(cursor.read_word())


class Celsius(float):
    pass


@pytest.fixture
def restore_readers():
    saved = dict(_readers)
    yield
    _readers.clear()
    _readers.update(saved)


class TestParseable:

    def test_from_string(self) -> None:
        assert Point.from_string("(1;-2)") == Point(1, -2)

    def test_from_string_ignores_trailing_input(self) -> None:
        assert Point.from_string("(1;2) and more") == Point(1, 2)

    def test_read_value_leaves_cursor_after_value(self) -> None:
        cursor = Cursor("(1;2)(3;4)")
        assert cursor.read_value(Point) == Point(1, 2)
        assert cursor.remaining == "(3;4)"
        assert cursor.read_value(Point) == Point(3, 4)
        assert cursor.is_done

    def test_structural_implementation(self) -> None:
        assert parse(Color, "#ff00ff").name == "ff00ff"
        assert not issubclass(Color, Parseable)

    def test_malformed_value_raises(self) -> None:
        with pytest.raises(ParseError):
            Point.from_string("(1,2)")


class TestReaders:

    def test_builtin_readers(self) -> None:
        cursor = Cursor("-12abc")
        assert cursor.read_value(int) == -12
        assert cursor.read_value(str) == "abc"

    def test_unreadable_type(self) -> None:
        with pytest.raises(TypeError):
            Cursor("1.5").read_value(float)

    def test_unreadable_element_type(self) -> None:
        with pytest.raises(TypeError):
            get_reader(list[float])

    def test_register_reader(self, restore_readers) -> None:
        def read_celsius(cursor: Cursor) -> Celsius:
            value = cursor.read_int()
            cursor.consume("C")
            return Celsius(value)

        register_reader(Celsius, read_celsius)
        assert parse(list[Celsius], "20C, -3C") == [20.0, -3.0]

    def test_replacing_reader_is_logged(self, restore_readers, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="cursorparse.main"):
            register_reader(int, Cursor.read_hex_int)
        assert "Replacing the reader for int" in caplog.text
        assert parse(int, "ff") == 255

    def test_subclass_of_registered_type(self) -> None:
        class Flag(int):
            pass

        value = Cursor("5").read_value(Flag)
        assert type(value) is Flag
        assert value == 5
        assert parse(bool, "7") is True


class TestLists:

    def test_spaces_and_commas(self) -> None:
        assert parse(list[int], "1, 2,3") == [1, 2, 3]

    def test_single_element(self) -> None:
        assert parse(list[int], "5") == [5]

    def test_stops_without_comma(self) -> None:
        cursor = Cursor("1,2 3")
        assert cursor.read_value(list[int]) == [1, 2]
        assert cursor.remaining == " 3"

    def test_only_spaces_are_skipped(self) -> None:
        with pytest.raises(ParseError):
            parse(list[int], "1,\t2")

    def test_empty_element_is_left_to_the_element_reader(self) -> None:
        with pytest.raises(ParseError):
            parse(list[int], "1,,2")
        assert parse(list[str], "a,,b") == ["a", "", "b"]

    def test_parseable_elements(self) -> None:
        assert parse(list[Point], "(1;2), (3;4)") == [Point(1, 2), Point(3, 4)]

    def test_custom_separator(self) -> None:
        cursor = Cursor("1 | 2 | 3")
        assert cursor.read_list(int, separator=" |") == [1, 2, 3]

    def test_nested_lists(self) -> None:
        cursor = Cursor("1,2; 3; 4,5,6")
        assert cursor.read_list(list[int], separator=";") == [[1, 2], [3], [4, 5, 6]]


class TestParse:

    def test_lenient_by_default(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="cursorparse.main"):
            assert parse(int, "12 apples") == 12
        assert "Ignoring 7 unconsumed characters" in caplog.text

    def test_exhaustive(self) -> None:
        assert parse(list[int], "1,2", exhaustive=True) == [1, 2]
        with pytest.raises(ParseError) as exc_info:
            parse(int, "12 apples", exhaustive=True)
        assert exc_info.value.pos == 2
