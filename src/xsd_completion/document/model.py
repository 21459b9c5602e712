"""Document model consumed by the completion engine.

The host editor owns the real document; the engine only needs read-only,
synchronous access to line text, the full text, words at a position and text
between two positions. ``DocumentModel`` is that contract and ``TextDocument``
is an in-memory implementation over a plain string.

Lines and columns are 1-based, matching the host editors this package serves.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Pattern

from xsd_completion.shared.config import DEFAULT_WORD_PATTERN


@dataclass(frozen=True)
class Position:
    """Cursor position (1-based line and column)."""

    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")


@dataclass(frozen=True)
class Range:
    """Text range between two positions, end column exclusive."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @classmethod
    def on_line(cls, line: int, start_column: int, end_column: int) -> "Range":
        """Create a single-line range."""
        return cls(line, start_column, line, end_column)

    @property
    def is_empty(self) -> bool:
        """Check whether the range covers no characters."""
        return (self.start_line, self.start_column) == (self.end_line, self.end_column)


@dataclass(frozen=True)
class WordAtPosition:
    """A word and the columns it spans (end column exclusive)."""

    word: str
    start_column: int
    end_column: int


class DocumentModel(ABC):
    """Read-only view of a host document."""

    @abstractmethod
    def line_content(self, line: int) -> str:
        """Text of ``line`` without its line terminator."""

    @abstractmethod
    def full_text(self) -> str:
        """Complete document text."""

    @abstractmethod
    def word_at_position(self, position: Position) -> Optional[WordAtPosition]:
        """The word touching ``position``, or None."""

    @abstractmethod
    def word_until_position(self, position: Position) -> WordAtPosition:
        """The part of the word at ``position`` that lies before it."""

    @abstractmethod
    def value_in_range(self, text_range: Range) -> str:
        """Text between two positions."""

    def offset_at(self, position: Position) -> int:
        """Absolute offset of ``position`` in ``full_text()``."""
        return len(self.text_until(position))

    def text_until(self, position: Position) -> str:
        """Text from the document start up to ``position``."""
        return self.value_in_range(Range(1, 1, position.line, position.column))


class TextDocument(DocumentModel):
    """In-memory document over a string.

    Example:
        >>> doc = TextDocument("<root>\\n  <chi")
        >>> doc.word_at_position(Position(2, 6)).word
        'chi'
    """

    def __init__(
        self,
        text: str,
        word_pattern: str = DEFAULT_WORD_PATTERN,
        version: int = 1
    ) -> None:
        """Initialize the document.

        Args:
            text: Document text
            word_pattern: Regex matching word characters
            version: Host document version, bumped on every edit
        """
        self._text = text
        self._lines: List[str] = text.split("\n")
        self._line_offsets: List[int] = []
        offset = 0
        for line in self._lines:
            self._line_offsets.append(offset)
            offset += len(line) + 1
        self._word_regex: Pattern[str] = re.compile(word_pattern)
        self.version = version

    @property
    def line_count(self) -> int:
        """Number of lines in the document."""
        return len(self._lines)

    def line_content(self, line: int) -> str:
        if 1 <= line <= len(self._lines):
            return self._lines[line - 1].rstrip("\r")
        return ""

    def full_text(self) -> str:
        return self._text

    def offset_at(self, position: Position) -> int:
        line = min(position.line, len(self._lines))
        line_text = self._lines[line - 1]
        column = min(position.column, len(line_text) + 1)
        return self._line_offsets[line - 1] + column - 1

    def value_in_range(self, text_range: Range) -> str:
        start = self.offset_at(Position(text_range.start_line, text_range.start_column))
        end = self.offset_at(Position(text_range.end_line, text_range.end_column))
        return self._text[start:end]

    def word_at_position(self, position: Position) -> Optional[WordAtPosition]:
        line_text = self.line_content(position.line)
        index = position.column - 1
        for match in self._word_regex.finditer(line_text):
            if match.start() <= index <= match.end():
                return WordAtPosition(match.group(), match.start() + 1, match.end() + 1)
            if match.start() > index:
                break
        return None

    def word_until_position(self, position: Position) -> WordAtPosition:
        word = self.word_at_position(position)
        if word is None:
            return WordAtPosition("", position.column, position.column)
        return WordAtPosition(
            word.word[:position.column - word.start_column],
            word.start_column,
            position.column,
        )
