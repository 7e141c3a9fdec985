"""
Python package for parsing SNBT into typed tags and writing tags as SNBT.

SNBT is the textual form of the NBT format: compounds, lists, typed arrays,
strings and numbers of several explicit widths.
"""

from pysnbt._snbt_error import SnbtError, SnbtErrorCategory
from pysnbt._char_cursor import CharCursor
from pysnbt._reader import TagStringReader, compound_from_snbt, from_snbt
from pysnbt._tag import (
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
    TagType,
)
from pysnbt._writer import TagStringWriter, to_snbt
from pysnbt.grammar import MAX_DEPTH
