from enum import Enum
from typing import TypeVar


ERROR_POINTER_CHAR = "^"
ERROR_ELLIPSIS = "..."

MAX_ERROR_CONTEXT_LEN = 40
"""
The maximum number of characters on either side of the invalid position
to include in the error message.

Error messages will attempt to display the entire line
containing the invalid position.
However, if the part of the line before that position
is longer than this, then it will be truncated such that
only the substring of this length adjacent to the position
will be included.
The same applies to the part of the line after it.
"""

_SPACE = " "
_LINE_SEPARATOR = "\n"


class SnbtErrorCategory(Enum):
    UNEXPECTED_END_OF_INPUT = "unexpected end of input"
    UNEXPECTED_TOKEN = "unexpected token"
    UNTERMINATED_COMPOUND = "unterminated compound"
    UNTERMINATED_LIST = "unterminated list"
    UNTERMINATED_ARRAY = "unterminated array"
    DEPTH_EXCEEDED = "depth exceeded"
    EMPTY_VALUE = "empty value"
    UNSIGNED_FLOATING_POINT = "unsigned floating point"
    NOT_AN_INT = "not an int"
    UNKNOWN_ARRAY_ELEMENT_TYPE = "unknown array element type"
    TRAILING_CONTENT = "trailing content"

    def __str__(self) -> str:
        return self.value


class SnbtError(Exception):
    """Indicates a failure to parse a part of the input text."""

    Self = TypeVar("Self", bound="SnbtError")

    def __init__(
        self,
        error_message: str,
        *,
        error_category: SnbtErrorCategory,
        reason: str,
        position: int,
    ) -> None:
        """
        Args:
            error_message:
                The formatted error message to be displayed.
            error_category:
                Category that the error belongs to.
            reason:
                Why the identified part is invalid.
                This should be a complete sentence.
            position:
                Index (0-indexed within the whole input text) of the
                character identified as invalid. Equal to the length of
                the input when the input ended too early.
        """

        super().__init__(error_message)
        self.error_category = error_category
        self.reason = reason
        self.position = position

    @property
    def category(self) -> SnbtErrorCategory:
        return self.error_category

    @classmethod
    def make_parse_error(
        cls,
        reason: str,
        *,
        error_category: SnbtErrorCategory,
        text: str,
        position: int,
    ) -> Self:
        """
        Factory method for an error pointing at a single position
        of the input text.

        Args:
            reason:
                Why the input cannot be parsed as valid SNBT.
                This should be a complete sentence.
            error_category:
                Category that the error belongs to.
            text:
                The full input text.
            position:
                Index (0-indexed within `text`) of the invalid character.
        """

        if not 0 <= position <= len(text):
            raise ValueError(
                "Invalid position given when specifying the location "
                f"of the invalid SNBT input. position={position}, "
                f"text_length={len(text)}"
            )

        line_start = text.rfind(_LINE_SEPARATOR, 0, position) + 1
        line_end = text.find(_LINE_SEPARATOR, position)
        if line_end == -1:
            line_end = len(text)
        line_num = text.count(_LINE_SEPARATOR, 0, line_start) + 1
        line = text[line_start:line_end]
        column = position - line_start

        # The error message will include the line with the invalid position,
        # truncated such that the parts before and after it each has
        # a length of at most MAX_ERROR_CONTEXT_LEN.
        if MAX_ERROR_CONTEXT_LEN < len(line) - column - 1:
            truncate_index = column + 1 + MAX_ERROR_CONTEXT_LEN
            line = f"{line[:truncate_index]}{ERROR_ELLIPSIS}"
        len_before_invalid = column
        if MAX_ERROR_CONTEXT_LEN < len_before_invalid:
            truncate_index = len_before_invalid - MAX_ERROR_CONTEXT_LEN
            line = f"{ERROR_ELLIPSIS}{line[truncate_index:]}"
            len_before_invalid = MAX_ERROR_CONTEXT_LEN + len(ERROR_ELLIPSIS)

        error_message = (
            f"{reason}\n"
            f"Line {line_num}, at index {column} (position {position}):\n"
            f"{line}\n"
            f"{_SPACE * len_before_invalid}{ERROR_POINTER_CHAR}"
        )

        return cls(
            error_message=error_message,
            error_category=error_category,
            reason=reason,
            position=position,
        )
