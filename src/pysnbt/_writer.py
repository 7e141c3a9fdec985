"""
This module provides 2 ways to write a tag tree back out as SNBT.
1. Call `to_snbt()`.
2. Instantiate a `TagStringWriter` and call its `to_snbt()` method.

Both have the same configuration options and defaults.
Approach #2 may be useful if you want to set a configuration once
and reuse that for writing multiple times.

```python
from pysnbt import TagStringWriter, to_snbt

# Approach #1
snbt_output = to_snbt(tag)

# Approach #2
writer = TagStringWriter(indent="  ")
snbt_output = writer.to_snbt(tag)
other_snbt_output = writer.to_snbt(other_tag)
```

Whatever the options, `from_snbt(to_snbt(tag)) == tag`.
"""

import logging

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
)
from pysnbt.grammar import (
    ARRAY_BEGIN,
    ARRAY_END,
    ARRAY_SIGNATURE_SEPARATOR,
    COMPOUND_BEGIN,
    COMPOUND_END,
    COMPOUND_KEY_TERMINATOR,
    DEFAULT_INDENT,
    DEFAULT_QUOTE_MARK,
    ESCAPE_MARKER,
    ID_CHAR_SET,
    QUOTE_MARK_SET,
    TYPE_BYTE,
    TYPE_DOUBLE,
    TYPE_FLOAT,
    TYPE_INT,
    TYPE_LONG,
    TYPE_SHORT,
    VALUE_SEPARATOR,
    WRITER_TYPE_SUFFIXES,
    QuoteMarkType,
)


logger = logging.getLogger(__name__)

_LINE_SEPARATOR = "\n"
_SPACE = " "

_ARRAY_SIGNATURES = {
    ByteArrayTag: (TYPE_BYTE.upper(), WRITER_TYPE_SUFFIXES[TYPE_BYTE]),
    IntArrayTag: (TYPE_INT.upper(), ""),
    LongArrayTag: (TYPE_LONG.upper(), WRITER_TYPE_SUFFIXES[TYPE_LONG]),
}
"""Signature letter and per-element suffix of each array type."""


def to_snbt(
    tag: Tag,
    *,
    indent: str = DEFAULT_INDENT,
    quote_mark: QuoteMarkType = DEFAULT_QUOTE_MARK,
) -> str:
    """
    Writes the input `tag` as SNBT.

    This function has the same configuration options and defaults
    as `TagStringWriter`.
    For details, refer to the `TagStringWriter` documentation.
    """

    writer = TagStringWriter(indent=indent, quote_mark=quote_mark)
    return writer.to_snbt(tag)


class TagStringWriter:
    """Writes tags as SNBT that the reader parses back to equal tags."""

    def __init__(
        self,
        *,
        indent: str = DEFAULT_INDENT,
        quote_mark: QuoteMarkType = DEFAULT_QUOTE_MARK,
    ) -> None:
        """
        Args:
            indent:
                The incremental indent added for each layer of nesting.
                Can only contain whitespace. If empty, the whole output
                is written on a single line with no spaces.
            quote_mark:
                Symbol with which to enclose each quoted string or key.
        """

        if indent and not indent.isspace():
            raise ValueError("indent can only contain whitespace")
        self._indent = indent

        if quote_mark not in QUOTE_MARK_SET:
            raise ValueError(f"quote mark not recognized: {quote_mark}")
        self._quote_mark = quote_mark

    def to_snbt(self, tag: Tag) -> str:
        output = self.to_tag(tag, indent="")
        logger.debug(
            "Wrote %s tag as %d characters of SNBT",
            tag.tag_type,
            len(output),
        )
        return output

    def to_tag(self, tag: Tag, indent: str) -> str:
        """
        Writes the input `tag`, nested under the given existing `indent`.
        """

        if isinstance(tag, CompoundTag):
            return self.to_compound(tag, indent)
        elif isinstance(tag, ListTag):
            return self.to_list(tag, indent)
        elif isinstance(tag, (ByteArrayTag, IntArrayTag, LongArrayTag)):
            return self.to_array(tag)
        elif isinstance(tag, StringTag):
            return self.to_quoted(tag.value)
        elif isinstance(tag, (ByteTag, ShortTag, IntTag, LongTag)):
            return self.to_integer(tag)
        elif isinstance(tag, (FloatTag, DoubleTag)):
            return self.to_floating(tag)
        else:
            raise TypeError(
                "For writing as SNBT, the input must be a Tag, "
                f"but got {type(tag).__name__} ({tag!r})"
            )

    # Containers

    def to_compound(self, compound: CompoundTag, indent: str) -> str:
        nested_indent = f"{indent}{self._indent}"
        key_terminator = (
            f"{COMPOUND_KEY_TERMINATOR}{_SPACE}"
            if self._indent
            else COMPOUND_KEY_TERMINATOR
        )
        items = [
            f"{self.to_key(k)}{key_terminator}{self.to_tag(v, nested_indent)}"
            for k, v in compound.items()
        ]
        return self._enclose(items, COMPOUND_BEGIN, COMPOUND_END, indent)

    def to_list(self, list_tag: ListTag, indent: str) -> str:
        nested_indent = f"{indent}{self._indent}"
        items = [self.to_tag(element, nested_indent) for element in list_tag]
        return self._enclose(items, ARRAY_BEGIN, ARRAY_END, indent)

    def _enclose(
        self, items: list, open_mark: str, close_mark: str, indent: str
    ) -> str:
        if not items:
            return f"{open_mark}{close_mark}"
        if not self._indent:
            return f"{open_mark}{VALUE_SEPARATOR.join(items)}{close_mark}"

        line_separator = f"{_LINE_SEPARATOR}{indent}{self._indent}"
        content = f"{VALUE_SEPARATOR}{line_separator}".join(items)
        return (
            f"{open_mark}{line_separator}{content}"
            f"{_LINE_SEPARATOR}{indent}{close_mark}"
        )

    def to_array(self, array: ArrayTag) -> str:
        signature, suffix = _ARRAY_SIGNATURES[type(array)]
        separator = (
            f"{VALUE_SEPARATOR}{_SPACE}" if self._indent else VALUE_SEPARATOR
        )
        content = separator.join(f"{n}{suffix}" for n in array)
        return (
            f"{ARRAY_BEGIN}{signature}{ARRAY_SIGNATURE_SEPARATOR}"
            f"{content}{ARRAY_END}"
        )

    # Scalars

    def to_integer(self, tag: Tag) -> str:
        suffix = WRITER_TYPE_SUFFIXES.get(_INTEGER_TYPE_TOKENS[type(tag)], "")
        return f"{tag.value}{suffix}"

    def to_floating(self, tag: Tag) -> str:
        # repr is the shortest text that reads back as the same float
        type_token = TYPE_FLOAT if isinstance(tag, FloatTag) else TYPE_DOUBLE
        return f"{tag.value!r}{WRITER_TYPE_SUFFIXES[type_token]}"

    def to_key(self, key: str) -> str:
        if key and ID_CHAR_SET.issuperset(key):
            return key
        return self.to_quoted(key)

    def to_quoted(self, s: str) -> str:
        content = s.replace(ESCAPE_MARKER, ESCAPE_MARKER * 2).replace(
            self._quote_mark, f"{ESCAPE_MARKER}{self._quote_mark}"
        )
        return f"{self._quote_mark}{content}{self._quote_mark}"


_INTEGER_TYPE_TOKENS = {
    ByteTag: TYPE_BYTE,
    ShortTag: TYPE_SHORT,
    IntTag: TYPE_INT,
    LongTag: TYPE_LONG,
}
