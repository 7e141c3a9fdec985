"""Each literal word that stands for a boolean, stored as a byte."""

import dataclasses
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from pysnbt._tag import ByteTag
from pysnbt.grammar import LITERAL_FALSE, LITERAL_TRUE


@dataclasses.dataclass(frozen=True)
class BooleanLiteralEntry:
    lexeme: str
    evaluation: ByteTag


class BooleanLiteral(Enum):
    TRUE = BooleanLiteralEntry(LITERAL_TRUE, ByteTag(1))
    FALSE = BooleanLiteralEntry(LITERAL_FALSE, ByteTag(0))


BOOLEAN_LITERALS: Mapping[str, BooleanLiteralEntry] = MappingProxyType({
    boolean_literal.value.lexeme: boolean_literal.value
    for boolean_literal in BooleanLiteral.__members__.values()
})
"""Keyed by lower case lexeme; look up with `text.lower()`."""
