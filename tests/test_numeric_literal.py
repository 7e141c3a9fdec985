import pytest

from pysnbt import ByteTag, IntTag, StringTag
from pysnbt._reader import (
    NumericLiteral,
    classify_literal,
    convert_literal,
    detect_radix,
    parse_floating,
    parse_integer,
    unescape,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123", (10, "123")),
        ("0x1F", (16, "1F")),
        ("0X1f", (16, "1f")),
        ("-0x1F", (16, "-1F")),
        ("+0b11", (2, "+11")),
        ("0", (10, "0")),
        ("-", (10, "-")),
    ],
)
def test_detect_radix(text, expected):
    assert detect_radix(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("5", NumericLiteral("5", 10, None, True)),
        ("5b", NumericLiteral("5", 10, "b", True)),
        ("5B", NumericLiteral("5", 10, "b", True)),
        ("1_0sL", NumericLiteral("10", 10, "l", True)),
        ("255ub", NumericLiteral("255", 10, "b", False)),
        ("0xAB", NumericLiteral("AB", 16, None, False)),
        ("0xABub", NumericLiteral("AB", 16, "b", False)),
        ("0xABsb", NumericLiteral("AB", 16, "b", True)),
        ("0b1_01", NumericLiteral("101", 2, None, True)),
        ("1.0uf", NumericLiteral("1.0", 10, "f", False)),
        ("us", NumericLiteral("u", 10, "s", True)),
    ],
)
def test_classify_literal(text, expected):
    assert classify_literal(text) == expected


def test_sign_marker_needs_a_type_marker():
    # Without a type marker the trailing letter is just part of the text.
    assert classify_literal("5u") == NumericLiteral("5u", 10, None, True)


def test_convert_literal_returns_none_for_invalid_numbers():
    assert convert_literal(NumericLiteral("300", 10, "b", True)) is None
    assert convert_literal(NumericLiteral("abc", 10, None, True)) is None
    assert convert_literal(NumericLiteral("7f", 16, "b", True)) == ByteTag(127)
    assert convert_literal(NumericLiteral("7", 10, None, True)) == IntTag(7)


def test_convert_literal_never_makes_strings():
    assert not isinstance(
        convert_literal(NumericLiteral("x", 10, None, True)), StringTag
    )


@pytest.mark.parametrize(
    "args, expected",
    [
        (("127", 10, True, 8), 127),
        (("-128", 10, True, 8), -128),
        (("+1", 10, True, 32), 1),
        (("7f", 16, True, 8), 127),
        (("ff", 16, False, 8), -1),
        (("80", 16, False, 8), -128),
        (("ffff", 16, False, 16), -1),
        (("ffffffff", 16, False, 32), -1),
        (("7fffffff", 16, False, 32), 2 ** 31 - 1),
        (("ffffffffffffffff", 16, False, 64), -1),
        (("101", 2, True, 32), 5),
        (("0", 10, False, 64), 0),
    ],
)
def test_parse_integer(args, expected):
    assert parse_integer(*args) == expected


@pytest.mark.parametrize(
    "args",
    [
        ("128", 10, True, 8),
        ("80", 16, True, 8),
        ("100", 16, False, 8),
        ("-1", 10, False, 8),
        ("-1", 10, False, 32),
        ("-0", 10, False, 64),
        ("4294967296", 10, False, 32),
        ("0x10", 16, True, 32),
        ("1_0", 10, True, 32),
        (" 1", 10, True, 32),
        ("1.0", 10, True, 32),
        ("2", 2, True, 32),
        ("", 10, True, 32),
        ("-", 10, True, 32),
        ("١", 10, True, 32),
    ],
)
def test_parse_integer_rejects(args):
    with pytest.raises(ValueError):
        parse_integer(*args)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1.5", 1.5),
        ("-1.5", -1.5),
        (".5", 0.5),
        ("5.", 5.0),
        ("1e3", 1000.0),
        ("1E-3", 0.001),
        ("+2.5e+2", 250.0),
        ("1.5d", 1.5),
        ("1.5F", 1.5),
    ],
)
def test_parse_floating(text, expected):
    assert parse_floating(text) == expected


@pytest.mark.parametrize(
    "text", ["", ".", "1.5.5", "inf", "nan", "1e", "1e400", "0x1p3", " 1.5"]
)
def test_parse_floating_rejects(text):
    with pytest.raises(ValueError):
        parse_floating(text)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("plain", "plain"),
        (r"a\"b", 'a"b'),
        (r"a\\b", "a\\b"),
        (r"\n", "n"),
        (r"a\'", "a'"),
        ("", ""),
    ],
)
def test_unescape(text, expected):
    assert unescape(text) == expected
