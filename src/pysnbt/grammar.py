"""Shared tokens, character sets and numeric limits."""

import string
from typing import FrozenSet, Literal


# General

ESCAPE_MARKER = "\\"
MAX_DEPTH = 512
"""Deepest allowed nesting of tags, counted per call to the tag reader."""


# Container types: `compound`, `list`, typed arrays

COMPOUND_BEGIN = "{"
COMPOUND_END = "}"
COMPOUND_KEY_TERMINATOR = ":"
ARRAY_BEGIN = "["
ARRAY_END = "]"
ARRAY_SIGNATURE_SEPARATOR = ";"
VALUE_SEPARATOR = ","


# String: quoted values and keys

SINGLE_QUOTE = "'"
DOUBLE_QUOTE = '"'
QuoteMarkType = Literal["'", '"']
QUOTE_MARK_SET: FrozenSet[str] = frozenset((SINGLE_QUOTE, DOUBLE_QUOTE))
DEFAULT_QUOTE_MARK: QuoteMarkType = DOUBLE_QUOTE

ID_CHAR_SET = frozenset(f"{string.ascii_letters}{string.digits}-_.+")
"""
Characters allowed in a bare key or an unquoted value.
Anything else ends the run (or, in a value, must be escaped).
"""


# Number: type and sign markers

TYPE_BYTE = "b"
TYPE_SHORT = "s"
TYPE_INT = "i"
TYPE_LONG = "l"
TYPE_FLOAT = "f"
TYPE_DOUBLE = "d"

TYPE_SIGNED = "s"
TYPE_UNSIGNED = "u"

NUMERIC_TYPE_SET = frozenset(
    (TYPE_BYTE, TYPE_SHORT, TYPE_INT, TYPE_LONG, TYPE_FLOAT, TYPE_DOUBLE)
)
"""Lower case only; callers normalise the case before looking up."""

SIGN_MARKER_SET = frozenset((TYPE_SIGNED, TYPE_UNSIGNED))
FLOATING_TYPE_SET = frozenset((TYPE_FLOAT, TYPE_DOUBLE))

SIGN_SET = frozenset("+-")
DIGIT_SEPARATOR = "_"
DECIMAL_MARK = "."

BINARY_RADIX = 2
DECIMAL_RADIX = 10
HEX_RADIX = 16

RADIX_PREFIXES = (
    ("0b", BINARY_RADIX),
    ("0B", BINARY_RADIX),
    ("0x", HEX_RADIX),
    ("0X", HEX_RADIX),
)
RADIX_PREFIX_LEN = 2

RADIX_DIGIT_SETS = {
    BINARY_RADIX: frozenset("01"),
    DECIMAL_RADIX: frozenset(string.digits),
    HEX_RADIX: frozenset(string.hexdigits),
}

BIT_WIDTHS = {
    TYPE_BYTE: 8,
    TYPE_SHORT: 16,
    TYPE_INT: 32,
    TYPE_LONG: 64,
}

BYTE_MIN, BYTE_MAX = -(2 ** 7), 2 ** 7 - 1
SHORT_MIN, SHORT_MAX = -(2 ** 15), 2 ** 15 - 1
INT_MIN, INT_MAX = -(2 ** 31), 2 ** 31 - 1
LONG_MIN, LONG_MAX = -(2 ** 63), 2 ** 63 - 1


# Boolean literals

LITERAL_TRUE = "true"
LITERAL_FALSE = "false"


# Writer

DEFAULT_INDENT = ""
"""No indent; everything on a single line."""

WRITER_TYPE_SUFFIXES = {
    TYPE_BYTE: "b",
    TYPE_SHORT: "s",
    TYPE_LONG: "L",
    TYPE_FLOAT: "f",
    TYPE_DOUBLE: "d",
}
"""Suffix emitted after each number type; ints are written bare."""
