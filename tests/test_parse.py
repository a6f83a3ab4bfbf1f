"""Tests for building modular integers from decimal text."""

import pytest

from modring.errors import ModIntError, ParseError
from modring.modint import ModInt

F21 = ModInt[21]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("10", 10),
        ("0", 0),
        ("+10", 10),
        ("-1", 20),
        ("40", 19),
        ("-400", 20),
        ("0021", 0),
        ("123456789012345678901234567890", 123456789012345678901234567890 % 21),
    ],
)
def test_parse_valid(text, expected):
    assert F21.parse(text) == expected
    assert F21.parse(text) == F21.new(int(text))


@pytest.mark.parametrize(
    "text",
    ["", "abc", "1.5", " 10", "10 ", "1_000", "--1", "+", "0x10", "1e3", "١٢"],
)
def test_parse_invalid(text):
    with pytest.raises(ParseError) as exc_info:
        F21.parse(text)
    assert exc_info.value.text == text


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        F21.parse("seven")
    with pytest.raises(ModIntError):
        F21.parse("seven")


def test_parse_non_string():
    with pytest.raises(ParseError):
        F21.parse(10)


def test_parse_result_type():
    assert isinstance(F21.parse("5"), F21)
