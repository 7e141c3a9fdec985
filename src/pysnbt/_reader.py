"""
Parse SNBT text into a tree of tags by calling `from_snbt`.

```python
tag = from_snbt('{name: "John Doe", age: 50, scores: [I; 7, 9]}')

assert tag == CompoundTag({
    "name": StringTag("John Doe"),
    "age": IntTag(50),
    "scores": IntArrayTag((7, 9)),
})
```
"""

import logging
import math
import re
from contextlib import contextmanager
from typing import (
    Callable, Dict, Iterator, List, NamedTuple, Optional, Tuple
)

from pysnbt._boolean_literal import BOOLEAN_LITERALS
from pysnbt._char_cursor import CharCursor
from pysnbt._snbt_error import SnbtError, SnbtErrorCategory
from pysnbt._tag import (
    ArrayTag,
    ByteArrayTag,
    ByteTag,
    CompoundTag,
    DoubleTag,
    FloatTag,
    IntArrayTag,
    IntTag,
    ListTag,
    LongArrayTag,
    LongTag,
    ShortTag,
    StringTag,
    Tag,
    narrow_to_float32,
)
from pysnbt.grammar import (
    ARRAY_BEGIN,
    ARRAY_END,
    ARRAY_SIGNATURE_SEPARATOR,
    BIT_WIDTHS,
    COMPOUND_BEGIN,
    COMPOUND_END,
    COMPOUND_KEY_TERMINATOR,
    DECIMAL_MARK,
    DECIMAL_RADIX,
    DIGIT_SEPARATOR,
    ESCAPE_MARKER,
    FLOATING_TYPE_SET,
    HEX_RADIX,
    ID_CHAR_SET,
    MAX_DEPTH,
    NUMERIC_TYPE_SET,
    QUOTE_MARK_SET,
    RADIX_DIGIT_SETS,
    RADIX_PREFIXES,
    RADIX_PREFIX_LEN,
    SIGN_MARKER_SET,
    SIGN_SET,
    TYPE_BYTE,
    TYPE_DOUBLE,
    TYPE_FLOAT,
    TYPE_INT,
    TYPE_LONG,
    TYPE_SHORT,
    TYPE_SIGNED,
    VALUE_SEPARATOR,
)


logger = logging.getLogger(__name__)

DEFAULT_ACCEPT_LEGACY = False

_FLOATING_PATTERN = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?[fFdD]?"
)
"""Decimal floating literal, optionally carrying its own type suffix."""

_INTEGRAL_TAGS = {
    TYPE_BYTE: ByteTag,
    TYPE_SHORT: ShortTag,
    TYPE_INT: IntTag,
    TYPE_LONG: LongTag,
}


def from_snbt(text: str, *, legacy: bool = DEFAULT_ACCEPT_LEGACY) -> Tag:
    """
    Parse the input text into a single tag.

    The whole input must be consumed (surrounding whitespace aside).
    Otherwise, raises an `SnbtError`.
    """

    logger.debug(
        "Parsing %d characters of SNBT (legacy=%s)", len(text), legacy
    )
    reader = TagStringReader(CharCursor(text))
    reader.legacy(legacy)
    tag = reader.tag()
    reader.finish()
    return tag


def compound_from_snbt(
    text: str, *, legacy: bool = DEFAULT_ACCEPT_LEGACY
) -> CompoundTag:
    """
    Parse the input text as a document whose root is a compound.

    The whole input must be consumed (surrounding whitespace aside).
    Otherwise, raises an `SnbtError`.
    """

    logger.debug(
        "Parsing %d characters of SNBT as a compound (legacy=%s)",
        len(text),
        legacy,
    )
    reader = TagStringReader(CharCursor(text))
    reader.legacy(legacy)
    compound = reader.compound()
    reader.finish()
    return compound


class TagStringReader:
    """
    Recursive descent reader for SNBT.

    Every level of container nesting takes one interpreter frame, so
    `MAX_DEPTH` levels fit within the default recursion limit as long as
    the caller is not already deep in its own call stack. The reader
    never changes the interpreter's recursion limit.

    An instance reads from one cursor, once. After an `SnbtError`
    neither the reader nor its cursor can be reused; start again
    with fresh ones.
    """

    _cursor: CharCursor

    _accept_legacy: bool
    """
    Whether to accept the older dialect: bare keys made of almost any
    character, and lists whose elements carry an `0:`-style index.
    """

    _depth: int
    """Number of compounds, lists and arrays currently being read."""

    def __init__(self, cursor: CharCursor) -> None:
        self._cursor = cursor
        self._accept_legacy = DEFAULT_ACCEPT_LEGACY
        self._depth = 0

    def legacy(self, accept_legacy: bool) -> None:
        self._accept_legacy = accept_legacy

    def finish(self) -> None:
        """Validates that nothing but whitespace is left to read."""

        if self._cursor.skip_whitespace().has_more():
            raise self._cursor.make_error(
                "SNBT input did not end where expected: "
                f"got {self._cursor.peek()!r} after the root tag.",
                SnbtErrorCategory.TRAILING_CONTENT,
            )

    # Depth guard

    @contextmanager
    def _nested(self) -> Iterator[None]:
        self._depth += 1
        try:
            if self._depth > MAX_DEPTH:
                raise self._cursor.make_error(
                    f"Exceeded the maximum allowed depth of {MAX_DEPTH} "
                    "when reading a container.",
                    SnbtErrorCategory.DEPTH_EXCEEDED,
                )
            yield
        finally:
            self._depth -= 1

    # Any tag

    def tag(self) -> Tag:
        """Entry point for the root and for every nested value."""
        return self._value_reader()()

    def _value_reader(self) -> Callable[[], Tag]:
        """
        Picks the method that reads the value starting at the cursor.

        Containers call the returned method themselves instead of going
        through `tag()`, so each level of nesting takes a single frame.
        """

        cursor = self._cursor
        start_token = cursor.skip_whitespace().peek()
        if start_token == COMPOUND_BEGIN:
            return self.compound
        elif start_token == ARRAY_BEGIN:
            if self._is_array_signature_ahead():
                return self.array
            return self.list
        elif start_token in QUOTE_MARK_SET:
            return self._quoted_string
        else:
            return self.scalar

    def _is_array_signature_ahead(self) -> bool:
        """Whether the cursor is at `[`, a single letter, then `;`."""

        cursor = self._cursor
        if not cursor.has_more(3):
            return False
        element_type = cursor.peek(1)
        return (
            element_type.isascii()
            and element_type.isalpha()
            and cursor.peek(2) == ARRAY_SIGNATURE_SEPARATOR
        )

    def _quoted_string(self) -> StringTag:
        cursor = self._cursor
        quote_mark = cursor.take()
        return StringTag(unescape(cursor.take_until(quote_mark)))

    # Containers

    def compound(self) -> CompoundTag:
        cursor = self._cursor
        with self._nested():
            cursor.expect(COMPOUND_BEGIN)
            if cursor.take_if(COMPOUND_END):
                return CompoundTag()

            # Later duplicates overwrite earlier values in place.
            entries: Dict[str, Tag] = {}
            while cursor.skip_whitespace().has_more():
                key = self.key()
                entries[key] = self._value_reader()()
                if self._separator_or_complete_with(COMPOUND_END):
                    return CompoundTag(entries)

            raise cursor.make_error(
                f"Reached the end of input without {COMPOUND_END!r} "
                "to end the compound.",
                SnbtErrorCategory.UNTERMINATED_COMPOUND,
            )

    def list(self) -> ListTag:
        cursor = self._cursor
        with self._nested():
            cursor.expect(ARRAY_BEGIN)
            prefixed_index = (
                self._accept_legacy
                and cursor.has_more(2)
                and cursor.peek() == "0"
                and cursor.peek(1) == COMPOUND_KEY_TERMINATOR
            )
            if not prefixed_index and cursor.take_if(ARRAY_END):
                return ListTag()

            elements: List[Tag] = []
            while cursor.skip_whitespace().has_more():
                if prefixed_index:
                    cursor.take_until(COMPOUND_KEY_TERMINATOR)
                elements.append(self._value_reader()())
                if self._separator_or_complete_with(ARRAY_END):
                    return ListTag(tuple(elements))

            raise cursor.make_error(
                f"Reached the end of input without {ARRAY_END!r} "
                "to end the list.",
                SnbtErrorCategory.UNTERMINATED_LIST,
            )

    def array(self, element_type: Optional[str] = None) -> ArrayTag:
        """
        Reads a typed array such as `[B; 1b, 2b]`, `[I; 1, 2]`
        or `[L; 1L, 2L]`. Without an `element_type`, the letter after
        the opening bracket is taken as the element type.

        Int array elements are read as full values and must come out
        as ints; byte and long array elements are plain digit runs.
        """

        cursor = self._cursor
        with self._nested():
            if element_type is None:
                element_type = cursor.skip_whitespace().peek(1)
            cursor.expect(ARRAY_BEGIN).expect(element_type).expect(
                ARRAY_SIGNATURE_SEPARATOR
            )

            element_type = element_type.lower()
            if element_type == TYPE_BYTE:
                return ByteArrayTag(
                    self._suffixed_elements(TYPE_BYTE, "byte")
                )
            elif element_type == TYPE_LONG:
                return LongArrayTag(
                    self._suffixed_elements(TYPE_LONG, "long")
                )
            elif element_type != TYPE_INT:
                raise cursor.make_error(
                    f"Type {element_type!r} is not a valid element type "
                    "in an array.",
                    SnbtErrorCategory.UNKNOWN_ARRAY_ELEMENT_TYPE,
                )

            if cursor.take_if(ARRAY_END):
                return IntArrayTag()

            values: List[int] = []
            while cursor.skip_whitespace().has_more():
                start_index = cursor.position
                value = self._value_reader()()
                if not isinstance(value, IntTag):
                    raise cursor.make_error(
                        "All elements of an int array must be ints, "
                        f"but got {value.tag_type}.",
                        SnbtErrorCategory.NOT_AN_INT,
                        position=start_index,
                    )
                values.append(value.value)
                if self._separator_or_complete_with(ARRAY_END):
                    return IntArrayTag(tuple(values))

            raise self._unterminated_array_error()

    def _suffixed_elements(
        self, type_token: str, type_name: str
    ) -> Tuple[int, ...]:
        """
        Scans plain decimal digit runs, each ending with `type_token`.
        Unlike values elsewhere, these are not read as full tags.
        """

        cursor = self._cursor
        if cursor.take_if(ARRAY_END):
            return ()

        bits = BIT_WIDTHS[type_token]
        values: List[int] = []
        while cursor.skip_whitespace().has_more():
            start_index = cursor.position
            digits = cursor.take_until(type_token)
            try:
                values.append(
                    parse_integer(digits, DECIMAL_RADIX, True, bits)
                )
            except ValueError as ve:
                raise cursor.make_error(
                    f"All elements of a {type_name} array must be "
                    f"{type_name}s, but got {digits!r}.",
                    SnbtErrorCategory.UNEXPECTED_TOKEN,
                    position=start_index,
                ) from ve
            if self._separator_or_complete_with(ARRAY_END):
                return tuple(values)

        raise self._unterminated_array_error()

    def _unterminated_array_error(self) -> SnbtError:
        return self._cursor.make_error(
            f"Reached the end of input without {ARRAY_END!r} "
            "to end the array.",
            SnbtErrorCategory.UNTERMINATED_ARRAY,
        )

    def _separator_or_complete_with(self, end_token: str) -> bool:
        """
        Consumes `end_token` and returns `True`, or consumes a value
        separator and returns whether `end_token` follows it directly.
        """

        cursor = self._cursor
        if cursor.take_if(end_token):
            return True
        cursor.expect(VALUE_SEPARATOR)
        return cursor.take_if(end_token)

    # Compound keys

    def key(self) -> str:
        """Reads a key along with the `:` that must follow it."""

        cursor = self._cursor
        cursor.skip_whitespace()
        if cursor.peek() in QUOTE_MARK_SET:
            quote_mark = cursor.take()
            key = unescape(cursor.take_until(quote_mark))
        else:
            key = self._bare_key()
        cursor.expect(COMPOUND_KEY_TERMINATOR)
        return key

    def _bare_key(self) -> str:
        cursor = self._cursor
        pieces: List[str] = []
        while cursor.has_more():
            c = cursor.peek()
            if c not in ID_CHAR_SET:
                if self._accept_legacy:
                    # Anything but the terminator; escape markers are dropped
                    # but the character after one is read as usual.
                    if c == ESCAPE_MARKER:
                        cursor.advance()
                        continue
                    elif c != COMPOUND_KEY_TERMINATOR:
                        pieces.append(cursor.take())
                        continue
                break
            pieces.append(cursor.take())
        return "".join(pieces)

    # Scalars

    def scalar(self) -> Tag:
        """
        Reads an unquoted value: a number, a boolean literal,
        or failing both, a string.
        """

        cursor = self._cursor
        pieces: List[str] = []
        while cursor.has_more():
            c = cursor.peek()
            if c == ESCAPE_MARKER:
                cursor.advance()
                c = cursor.take()
            elif c in ID_CHAR_SET:
                cursor.advance()
            else:
                break
            pieces.append(c)
        if not pieces:
            raise cursor.make_error(
                "Expected a value but got nothing.",
                SnbtErrorCategory.EMPTY_VALUE,
            )

        original = "".join(pieces)
        literal = classify_literal(original)
        if not literal.signed and literal.type_token in FLOATING_TYPE_SET:
            raise cursor.make_error(
                f"Cannot create unsigned floating point numbers: {original!r}",
                SnbtErrorCategory.UNSIGNED_FLOATING_POINT,
            )

        number = convert_literal(literal)
        if number is not None:
            return number

        boolean_literal = BOOLEAN_LITERALS.get(original.lower())
        if boolean_literal is not None:
            return boolean_literal.evaluation

        logger.debug("Reading %r as a string", original)
        return StringTag(original)


# Numeric literals


class NumericLiteral(NamedTuple):
    """An unquoted value after its radix, type and sign have been read."""

    digits: str
    """What is left to convert; digit separators removed."""

    radix: int

    type_token: Optional[str]
    """Lower case type marker, or `None` when none applies."""

    signed: bool


def detect_radix(text: str) -> Tuple[int, str]:
    """
    Returns the radix of `text` and `text` without its radix prefix.
    A leading sign is kept in place.
    """

    sign_offset = 1 if text[:1] in SIGN_SET else 0
    for prefix, radix in RADIX_PREFIXES:
        if text.startswith(prefix, sign_offset):
            stripped = (
                text[:sign_offset] + text[sign_offset + RADIX_PREFIX_LEN:]
            )
            return radix, stripped
    return DECIMAL_RADIX, text


def classify_literal(original: str) -> NumericLiteral:
    """Reads the radix, explicit type and signedness of an unquoted value."""

    radix, body = detect_radix(original)
    signed = radix != HEX_RADIX

    type_token = body[-1:].lower()
    if type_token not in NUMERIC_TYPE_SET:
        # A sign marker only counts right before a type marker; without
        # one, an `s` or `u` stays part of the text, so `1s2` is a string.
        return NumericLiteral(
            body.replace(DIGIT_SEPARATOR, ""), radix, None, signed
        )

    has_sign_token = len(body) > 2 and body[-2] in SIGN_MARKER_SET
    if has_sign_token:
        signed = body[-2] == TYPE_SIGNED
        body = body[:-2]
    elif radix == HEX_RADIX:
        # The trailing letter is a hex digit, not a type marker.
        return NumericLiteral(
            body.replace(DIGIT_SEPARATOR, ""), radix, None, signed
        )
    else:
        body = body[:-1]

    return NumericLiteral(
        body.replace(DIGIT_SEPARATOR, ""), radix, type_token, signed
    )


def convert_literal(literal: NumericLiteral) -> Optional[Tag]:
    """
    Converts a classified literal to a numeric tag,
    or returns `None` when it does not hold a valid number of its type.
    """

    digits, radix, type_token, signed = literal
    try:
        if type_token is None:
            return _convert_untyped(digits, radix, signed)
        elif type_token == TYPE_FLOAT:
            return FloatTag(narrow_to_float32(parse_floating(digits)))
        elif type_token == TYPE_DOUBLE:
            return DoubleTag(parse_floating(digits))
        else:
            value = parse_integer(
                digits, radix, signed, BIT_WIDTHS[type_token]
            )
            return _INTEGRAL_TAGS[type_token](value)
    except (ValueError, OverflowError):
        return None


def _convert_untyped(digits: str, radix: int, signed: bool) -> Tag:
    try:
        return IntTag(
            parse_integer(digits, radix, signed, BIT_WIDTHS[TYPE_INT])
        )
    except ValueError:
        if DECIMAL_MARK not in digits:
            raise
    return DoubleTag(parse_floating(digits))


def parse_integer(s: str, radix: int, signed: bool, bits: int) -> int:
    """
    Parses `s` as an integer of the given width, raising `ValueError`
    if it is malformed or out of range.

    Unsigned ints and longs cover `0` to `2 ** bits - 1` and come back as
    their two's complement signed value. Unsigned bytes and shorts are
    parsed as a signed int first, then must fit the narrow unsigned width
    before being narrowed the same way.
    """

    sign = s[:1] if s[:1] in SIGN_SET else ""
    digits = s[len(sign):]
    if not digits or not RADIX_DIGIT_SETS[radix].issuperset(digits):
        raise ValueError(f"not a base {radix} integer: {s!r}")
    n = int(digits, radix)
    if sign == "-":
        n = -n

    if signed:
        _check_range(s, n, -(1 << (bits - 1)), (1 << (bits - 1)) - 1)
        return n

    if bits >= BIT_WIDTHS[TYPE_INT]:
        if sign == "-":
            raise ValueError(f"illegal leading minus sign: {s!r}")
        _check_range(s, n, 0, (1 << bits) - 1)
    else:
        int_bits = BIT_WIDTHS[TYPE_INT]
        _check_range(s, n, -(1 << (int_bits - 1)), (1 << (int_bits - 1)) - 1)
        if n >> bits != 0:
            raise ValueError(f"out of range for {bits} unsigned bits: {s!r}")
    return n - (1 << bits) if n >> (bits - 1) else n


def _check_range(s: str, n: int, lower: int, upper: int) -> None:
    if n < lower or upper < n:
        raise ValueError(f"out of range [{lower}, {upper}]: {s!r}")


def parse_floating(s: str) -> float:
    """
    Parses `s` as a finite decimal floating point number,
    raising `ValueError` otherwise.
    """

    if _FLOATING_PATTERN.fullmatch(s) is None:
        raise ValueError(f"not a decimal floating point number: {s!r}")
    if s[-1] in "fFdD":
        s = s[:-1]
    x = float(s)
    if not math.isfinite(x):
        raise ValueError(f"not finite: {s!r}")
    return x


# Utility functions


def unescape(with_escapes: str) -> str:
    """
    Drops every escape marker, keeping the character after each one
    (itself an escape marker or otherwise) as it is.
    """

    if ESCAPE_MARKER not in with_escapes:
        return with_escapes

    pieces: List[str] = []
    index = 0
    while True:
        escape_index = with_escapes.find(ESCAPE_MARKER, index)
        if escape_index == -1:
            break
        pieces.append(with_escapes[index:escape_index])
        pieces.append(with_escapes[escape_index + 1:escape_index + 2])
        index = escape_index + 2
    pieces.append(with_escapes[index:])
    return "".join(pieces)
