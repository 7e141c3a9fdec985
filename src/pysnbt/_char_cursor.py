from typing import Optional

from pysnbt._snbt_error import SnbtError, SnbtErrorCategory
from pysnbt.grammar import ESCAPE_MARKER


class CharCursor:
    """
    Positional view over an input text.

    Knows nothing about the grammar; it only offers lookahead,
    consumption and expectations, raising `SnbtError` annotated with
    the current position when those cannot be met.
    """

    _text: str
    """The whole input text."""

    _index: int
    """
    Tracks the current index within `self._text`.
    Equal to `len(self._text)` once everything has been consumed.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._index = 0

    @property
    def text(self) -> str:
        return self._text

    @property
    def position(self) -> int:
        return self._index

    # Lookahead

    def has_more(self, n: int = 1) -> bool:
        """Returns whether at least `n` characters remain."""
        return self._index + n <= len(self._text)

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character `offset` positions ahead without consuming it.
        """

        if offset < 0:
            raise ValueError(f"offset must not be negative, but is {offset}")
        if not self.has_more(offset + 1):
            raise self.make_error(
                "Unexpected end of input while looking ahead "
                f"{offset + 1} character(s).",
                SnbtErrorCategory.UNEXPECTED_END_OF_INPUT,
                position=len(self._text),
            )
        return self._text[self._index + offset]

    # Consumption

    def take(self) -> str:
        c = self.peek()
        self._index += 1
        return c

    def advance(self) -> None:
        self._index += 1

    def skip_whitespace(self) -> "CharCursor":
        while self.has_more() and self._text[self._index].isspace():
            self._index += 1
        return self

    def take_if(self, token: str) -> bool:
        """
        Consumes the next non-whitespace character only if it is `token`.
        Leading whitespace is skipped either way.
        """

        self.skip_whitespace()
        if self.has_more() and self._text[self._index] == token:
            self._index += 1
            return True
        return False

    def expect(self, token: str) -> "CharCursor":
        """
        Consumes `token` after any whitespace, or raises `SnbtError`
        with the `UNEXPECTED_TOKEN` category, at the end of input too.

        A `token` longer than one character must appear contiguously.
        """

        self.skip_whitespace()
        for expected in token:
            if not self.has_more():
                raise self.make_error(
                    f"Expected {expected!r} but reached the end of input.",
                    SnbtErrorCategory.UNEXPECTED_TOKEN,
                )
            c = self._text[self._index]
            if c != expected:
                raise self.make_error(
                    f"Expected {expected!r} but got {c!r}.",
                    SnbtErrorCategory.UNEXPECTED_TOKEN,
                )
            self._index += 1
        return self

    def take_until(self, delimiter: str) -> str:
        """
        Consumes everything up to and including the next `delimiter`,
        then returns what came before it.

        The comparison ignores case. A character preceded by the escape
        marker never counts as the delimiter, and the escape markers are
        kept in the returned text.
        """

        until = delimiter.lower()
        index = self._index
        end_index = -1
        while index < len(self._text):
            c = self._text[index]
            if c == ESCAPE_MARKER:
                index += 1
            elif c.lower() == until:
                end_index = index
                break
            index += 1

        if end_index == -1:
            raise self.make_error(
                f"Reached the end of input without finding {delimiter!r}.",
                SnbtErrorCategory.UNEXPECTED_END_OF_INPUT,
                position=len(self._text),
            )

        result = self._text[self._index:end_index]
        self._index = end_index + 1
        return result

    # Error reporting

    def make_error(
        self,
        reason: str,
        error_category: SnbtErrorCategory,
        *,
        position: Optional[int] = None,
    ) -> SnbtError:
        """
        Internal convenience function to instantiate an `SnbtError`
        pointing at `position`, or at the current index if `None`.
        """

        if position is None:
            position = self._index
        return SnbtError.make_parse_error(
            reason,
            error_category=error_category,
            text=self._text,
            position=min(position, len(self._text)),
        )
