"""
Typed values produced by the reader.

Every node of a parsed tree is an instance of one of the twelve frozen
dataclasses below. Integer and floating variants check their value on
construction, so a tree built by hand obeys the same limits as a parsed one.
"""

import dataclasses
import math
import struct
from enum import Enum
from types import MappingProxyType
from typing import (
    ClassVar, Iterable, Iterator, Mapping, Optional, Tuple, Union
)

from pysnbt.grammar import (
    BYTE_MAX,
    BYTE_MIN,
    INT_MAX,
    INT_MIN,
    LONG_MAX,
    LONG_MIN,
    SHORT_MAX,
    SHORT_MIN,
)


class TagType(Enum):
    """Variant ids, numbered like the binary encoding of the same format."""

    BYTE = 1
    SHORT = 2
    INT = 3
    LONG = 4
    FLOAT = 5
    DOUBLE = 6
    BYTE_ARRAY = 7
    STRING = 8
    LIST = 9
    COMPOUND = 10
    INT_ARRAY = 11
    LONG_ARRAY = 12

    def __str__(self) -> str:
        return self.name.lower()


class Tag:
    """Base class of every node in a tag tree."""

    tag_type: ClassVar[TagType]


def narrow_to_float32(x: float) -> float:
    """
    Rounds `x` to the nearest IEEE binary32 value.
    Raises `OverflowError` if the rounded value is not finite.
    """
    return struct.unpack(">f", struct.pack(">f", x))[0]


def _validate_integer(tag: Tag, n: object, lower: int, upper: int) -> None:
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(
            f"{type(tag).__name__} holds an int, "
            f"but got {type(n).__name__} ({n!r})"
        )
    if n < lower or upper < n:
        raise ValueError(
            f"Value cannot be represented by {type(tag).__name__} "
            f"(overflow): {n}"
        )


# Numeric scalars

@dataclasses.dataclass(frozen=True)
class _IntegralTag(Tag):
    value: int

    min_value: ClassVar[int]
    max_value: ClassVar[int]

    def __post_init__(self) -> None:
        _validate_integer(self, self.value, self.min_value, self.max_value)

    def __int__(self) -> int:
        return self.value


@dataclasses.dataclass(frozen=True)
class ByteTag(_IntegralTag):
    tag_type: ClassVar[TagType] = TagType.BYTE
    min_value: ClassVar[int] = BYTE_MIN
    max_value: ClassVar[int] = BYTE_MAX


@dataclasses.dataclass(frozen=True)
class ShortTag(_IntegralTag):
    tag_type: ClassVar[TagType] = TagType.SHORT
    min_value: ClassVar[int] = SHORT_MIN
    max_value: ClassVar[int] = SHORT_MAX


@dataclasses.dataclass(frozen=True)
class IntTag(_IntegralTag):
    tag_type: ClassVar[TagType] = TagType.INT
    min_value: ClassVar[int] = INT_MIN
    max_value: ClassVar[int] = INT_MAX


@dataclasses.dataclass(frozen=True)
class LongTag(_IntegralTag):
    tag_type: ClassVar[TagType] = TagType.LONG
    min_value: ClassVar[int] = LONG_MIN
    max_value: ClassVar[int] = LONG_MAX


@dataclasses.dataclass(frozen=True)
class _FloatingTag(Tag):
    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(
            self.value, (int, float)
        ):
            raise TypeError(
                f"{type(self).__name__} holds a float, "
                f"but got {type(self.value).__name__} ({self.value!r})"
            )
        if not math.isfinite(self.value):
            raise ValueError(
                f"{type(self).__name__} cannot hold a non-finite value: "
                f"{self.value}"
            )
        object.__setattr__(self, "value", float(self.value))

    def __float__(self) -> float:
        return self.value


@dataclasses.dataclass(frozen=True)
class FloatTag(_FloatingTag):
    """Single precision; the value is rounded to binary32 on construction."""

    tag_type: ClassVar[TagType] = TagType.FLOAT

    def __post_init__(self) -> None:
        super().__post_init__()
        try:
            narrowed = narrow_to_float32(self.value)
        except OverflowError as oe:
            ve = ValueError(
                f"Value cannot be represented by FloatTag: {self.value}"
            )
            raise ve from oe
        object.__setattr__(self, "value", narrowed)


@dataclasses.dataclass(frozen=True)
class DoubleTag(_FloatingTag):
    tag_type: ClassVar[TagType] = TagType.DOUBLE


# Text

@dataclasses.dataclass(frozen=True)
class StringTag(Tag):
    value: str

    tag_type: ClassVar[TagType] = TagType.STRING

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(
                f"StringTag holds a str, "
                f"but got {type(self.value).__name__} ({self.value!r})"
            )

    def __str__(self) -> str:
        return self.value


# Typed arrays

@dataclasses.dataclass(frozen=True)
class _ArrayTag(Tag):
    values: Tuple[int, ...] = ()

    min_value: ClassVar[int]
    max_value: ClassVar[int]

    def __post_init__(self) -> None:
        values = tuple(self.values)
        for n in values:
            _validate_integer(self, n, self.min_value, self.max_value)
        object.__setattr__(self, "values", values)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[int]:
        return iter(self.values)

    def __getitem__(self, index: int) -> int:
        return self.values[index]


@dataclasses.dataclass(frozen=True)
class ByteArrayTag(_ArrayTag):
    tag_type: ClassVar[TagType] = TagType.BYTE_ARRAY
    min_value: ClassVar[int] = BYTE_MIN
    max_value: ClassVar[int] = BYTE_MAX


@dataclasses.dataclass(frozen=True)
class IntArrayTag(_ArrayTag):
    tag_type: ClassVar[TagType] = TagType.INT_ARRAY
    min_value: ClassVar[int] = INT_MIN
    max_value: ClassVar[int] = INT_MAX


@dataclasses.dataclass(frozen=True)
class LongArrayTag(_ArrayTag):
    tag_type: ClassVar[TagType] = TagType.LONG_ARRAY
    min_value: ClassVar[int] = LONG_MIN
    max_value: ClassVar[int] = LONG_MAX


# Containers

@dataclasses.dataclass(frozen=True)
class ListTag(Tag):
    """
    Ordered sequence of tags.

    The element type is taken from the first element, but mixing
    element types is not rejected here.
    """

    elements: Tuple[Tag, ...] = ()

    tag_type: ClassVar[TagType] = TagType.LIST

    def __post_init__(self) -> None:
        elements = tuple(self.elements)
        for element in elements:
            if not isinstance(element, Tag):
                raise TypeError(
                    "ListTag elements must be tags, "
                    f"but got {type(element).__name__} ({element!r})"
                )
        object.__setattr__(self, "elements", elements)

    @property
    def element_type(self) -> Optional[TagType]:
        return self.elements[0].tag_type if self.elements else None

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self.elements)

    def __getitem__(self, index: int) -> Tag:
        return self.elements[index]


@dataclasses.dataclass(frozen=True)
class CompoundTag(Tag, Mapping[str, Tag]):
    """
    String keys mapped to tags, in insertion order.

    The entries are copied into a read-only mapping on construction.
    """

    entries: Mapping[str, Tag] = dataclasses.field(
        default_factory=dict
    )

    tag_type: ClassVar[TagType] = TagType.COMPOUND

    def __post_init__(self) -> None:
        entries = dict(self.entries)
        for k, v in entries.items():
            if not isinstance(k, str):
                raise TypeError(
                    "CompoundTag keys must be str, "
                    f"but got {type(k).__name__} ({k!r})"
                )
            if not isinstance(v, Tag):
                raise TypeError(
                    f"CompoundTag values must be tags, but the value for "
                    f"{k!r} is {type(v).__name__} ({v!r})"
                )
        object.__setattr__(self, "entries", MappingProxyType(entries))

    def __hash__(self) -> int:
        return hash(frozenset(self.entries.items()))

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, Tag]]) -> "CompoundTag":
        """Later pairs overwrite earlier pairs with the same key."""
        return cls(dict(pairs))

    def __getitem__(self, key: str) -> Tag:
        return self.entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


ArrayTag = Union[ByteArrayTag, IntArrayTag, LongArrayTag]
