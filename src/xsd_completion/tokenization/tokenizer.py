"""Tolerant markup tokenizer for completion context analysis.

This module implements a never-fail scanner that turns raw, possibly partial
or malformed markup into a typed token stream. It is not a validating parser:
it recognizes just enough structure (tags, attributes, comments, CDATA,
processing instructions and declarations) for the tag stack tracker and the
context resolver to reason about the text before the cursor.

Every token is self-contained: after a token ends the scanner is always back
in text content, so scanning may restart at any token boundary. The
incremental document index relies on this.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, List, Optional, Tuple

from xsd_completion.shared.logging import get_logger

# Characters that terminate an element name. '|' is kept for compatibility
# with editors that use it as a placeholder separator.
NAME_STOP_CHARS = frozenset(" \t\r\n\f\v<>/?|=\"'")
ATTR_NAME_STOP_CHARS = frozenset(" \t\r\n\f\v<>/=\"'")
QUOTE_CHARS = ("\"", "'")

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"
PI_OPEN = "<?"
PI_CLOSE = "?>"
DECLARATION_OPEN = "<!"


class TokenType(Enum):
    """Markup token types produced by the tokenizer."""

    START_TAG = auto()                 # <name ...> or <name .../>
    END_TAG = auto()                   # </name>
    COMMENT = auto()                   # <!-- ... -->
    CDATA = auto()                     # <![CDATA[ ... ]]>
    PROCESSING_INSTRUCTION = auto()    # <? ... ?>
    DECLARATION = auto()               # <!DOCTYPE ...> and friends
    TEXT = auto()                      # Character content between markup


@dataclass
class TokenPosition:
    """Position information for markup tokens (1-based line and column)."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")


@dataclass
class Attribute:
    """Attribute found inside a start tag.

    ``value`` is None for a bare attribute name with no ``=``. ``terminated``
    is False when a quoted value was cut short by the end of input or by a
    ``<``, which cannot appear inside an attribute value.
    """

    name: str
    value: Optional[str]
    start: int
    end: int
    terminated: bool = True


@dataclass
class Token:
    """A single markup token spanning ``text[start:end]``."""

    type: TokenType
    value: str
    start: int
    end: int
    position: TokenPosition
    attributes: List[Attribute] = field(default_factory=list)
    self_closing: bool = False
    complete: bool = True

    def __post_init__(self) -> None:
        """Validate token span."""
        if self.end < self.start:
            raise ValueError("Token end must be >= token start")

    @property
    def is_tag_name(self) -> bool:
        """Check whether this token contributes a tag name to the tag stack.

        Start tags and end tags with a non-empty name count; self-closing
        tags never open anything, so they are excluded.
        """
        if not self.value:
            return False
        if self.type == TokenType.END_TAG:
            return True
        return self.type == TokenType.START_TAG and not self.self_closing

    @property
    def prefix(self) -> str:
        """Namespace prefix of the tag name, or an empty string."""
        if ":" not in self.value:
            return ""
        return self.value.split(":", 1)[0]

    @property
    def local_name(self) -> str:
        """Tag name without its namespace prefix."""
        return self.value.rsplit(":", 1)[-1]


@dataclass
class TokenizationResult:
    """Result of a tokenization run."""

    tokens: List[Token]
    processing_time: float = 0.0
    character_count: int = 0

    @property
    def token_count(self) -> int:
        """Get the total number of tokens."""
        return len(self.tokens)

    @property
    def incomplete_count(self) -> int:
        """Number of tokens cut short by malformed or partial input."""
        return sum(1 for token in self.tokens if not token.complete)

    def tag_names(self) -> List[str]:
        """Tag-name tokens in document order."""
        return [token.value for token in self.tokens if token.is_tag_name]


class MarkupTokenizer:
    """Never-fail scanner producing a typed markup token stream.

    The scanner looks at most one character past the end of any token it
    emits, which keeps previously scanned tokens valid when text is edited
    strictly after them.
    """

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        include_text: bool = True
    ) -> None:
        """Initialize the markup tokenizer.

        Args:
            correlation_id: Optional correlation ID for tracking requests
            include_text: Emit TEXT tokens for non-whitespace content
        """
        self.correlation_id = correlation_id
        self.include_text = include_text
        self.logger = get_logger(__name__, correlation_id, "markup_tokenizer")

    def tokenize(
        self,
        text: str,
        start: int = 0,
        stop: Optional[int] = None
    ) -> TokenizationResult:
        """Tokenize ``text[start:stop]`` without copying the text.

        Offsets in the resulting tokens are absolute offsets into ``text``.
        Anything after ``stop`` is treated as if it did not exist.

        Args:
            text: Markup text
            start: Offset to begin scanning at (must be a token boundary)
            stop: Offset to stop scanning at (defaults to end of text)

        Returns:
            TokenizationResult with tokens in document order
        """
        start_time = time.time()
        limit = len(text) if stop is None else max(0, min(stop, len(text)))
        start = max(0, min(start, limit))
        tokens = list(self.iter_tokens(text, start, limit))
        processing_time = time.time() - start_time

        self.logger.debug(
            "Tokenization completed",
            extra={
                "token_count": len(tokens),
                "character_count": limit - start,
                "processing_time": processing_time,
            }
        )

        return TokenizationResult(
            tokens=tokens,
            processing_time=processing_time,
            character_count=limit - start,
        )

    def iter_tokens(self, text: str, start: int, limit: int) -> Iterator[Token]:
        """Yield tokens lazily from ``text[start:limit]``."""
        scanner = _Scanner(text, start, limit)
        while scanner.index < limit:
            token = scanner.next_token()
            if token is None:
                continue
            if token.type == TokenType.TEXT and not self.include_text:
                continue
            yield token


def tag_names(text: str) -> List[str]:
    """Return every tag-name token of ``text`` in document order.

    Convenience wrapper used for single-line analysis.
    """
    scanner = _Scanner(text, 0, len(text))
    names: List[str] = []
    while scanner.index < len(text):
        token = scanner.next_token()
        if token is not None and token.is_tag_name:
            names.append(token.value)
    return names


class _Scanner:
    """Cursor over a text window with line/column bookkeeping."""

    def __init__(self, text: str, start: int, limit: int) -> None:
        self.text = text
        self.index = start
        self.limit = limit
        self.line = text.count("\n", 0, start) + 1
        self.line_start = text.rfind("\n", 0, start) + 1

    def _position(self, offset: int) -> TokenPosition:
        # Advance line bookkeeping lazily up to ``offset``.
        newline = self.text.find("\n", self.line_start, offset)
        while newline != -1:
            self.line += 1
            self.line_start = newline + 1
            newline = self.text.find("\n", self.line_start, offset)
        return TokenPosition(self.line, offset - self.line_start + 1, offset)

    def _peek(self, offset: int) -> str:
        return self.text[offset] if offset < self.limit else ""

    def _find(self, needle: str, offset: int) -> int:
        return self.text.find(needle, offset, self.limit)

    def next_token(self) -> Optional[Token]:
        """Scan one token starting at the current index.

        Returns None when the consumed characters produced no token
        (whitespace-only text).
        """
        text = self.text
        begin = self.index

        if text[begin] != "<":
            return self._scan_text(begin)
        if text.startswith(COMMENT_OPEN, begin, self.limit):
            return self._scan_delimited(begin, TokenType.COMMENT, len(COMMENT_OPEN),
                                        COMMENT_CLOSE)
        if text.startswith(CDATA_OPEN, begin, self.limit):
            return self._scan_delimited(begin, TokenType.CDATA, len(CDATA_OPEN),
                                        CDATA_CLOSE)
        if text.startswith(PI_OPEN, begin, self.limit):
            return self._scan_delimited(begin, TokenType.PROCESSING_INSTRUCTION,
                                        len(PI_OPEN), PI_CLOSE)
        if text.startswith(DECLARATION_OPEN, begin, self.limit):
            return self._scan_declaration(begin)
        if self._peek(begin + 1) == "/":
            return self._scan_end_tag(begin)
        return self._scan_start_tag(begin)

    def _scan_text(self, begin: int) -> Optional[Token]:
        # A '<' that cannot open a tag is folded into the text run.
        end = self._find("<", begin + 1)
        if end == -1:
            end = self.limit
        self.index = end
        content = self.text[begin:end]
        if not content.strip():
            return None
        return Token(TokenType.TEXT, content, begin, end, self._position(begin))

    def _scan_delimited(
        self, begin: int, token_type: TokenType, open_length: int, closer: str
    ) -> Token:
        close_at = self._find(closer, begin + open_length)
        if close_at == -1:
            end, complete = self.limit, False
            value = self.text[begin + open_length:end]
        else:
            end, complete = close_at + len(closer), True
            value = self.text[begin + open_length:close_at]
        self.index = end
        return Token(token_type, value, begin, end, self._position(begin),
                     complete=complete)

    def _scan_declaration(self, begin: int) -> Token:
        # <!DOCTYPE root [ <!ENTITY ...> ]> - '>' inside brackets does not close.
        depth = 0
        index = begin + len(DECLARATION_OPEN)
        while index < self.limit:
            char = self.text[index]
            if char == "[":
                depth += 1
            elif char == "]" and depth:
                depth -= 1
            elif char == ">" and not depth:
                self.index = index + 1
                return Token(TokenType.DECLARATION,
                             self.text[begin + len(DECLARATION_OPEN):index],
                             begin, index + 1, self._position(begin))
            index += 1
        self.index = self.limit
        return Token(TokenType.DECLARATION,
                     self.text[begin + len(DECLARATION_OPEN):self.limit],
                     begin, self.limit, self._position(begin), complete=False)

    def _read_name(self, offset: int, stop_chars: frozenset) -> int:
        while offset < self.limit and self.text[offset] not in stop_chars:
            offset += 1
        return offset

    def _scan_end_tag(self, begin: int) -> Optional[Token]:
        name_start = begin + 2
        name_end = self._read_name(name_start, NAME_STOP_CHARS)
        if name_end == name_start:
            return self._scan_text(begin)
        close_at = name_end
        while close_at < self.limit and self.text[close_at] not in "<>":
            close_at += 1
        if close_at < self.limit and self.text[close_at] == ">":
            end, complete = close_at + 1, True
        else:
            end, complete = close_at, False
        self.index = end
        return Token(TokenType.END_TAG, self.text[name_start:name_end], begin, end,
                     self._position(begin), complete=complete)

    def _scan_start_tag(self, begin: int) -> Optional[Token]:
        name_start = begin + 1
        name_end = self._read_name(name_start, NAME_STOP_CHARS)
        if name_end == name_start:
            return self._scan_text(begin)

        attributes: List[Attribute] = []
        index = name_end
        while True:
            while index < self.limit and self.text[index].isspace():
                index += 1
            char = self._peek(index)
            if char == "":
                end, complete, self_closing = self.limit, False, False
                break
            if char == ">":
                end, complete, self_closing = index + 1, True, False
                break
            if char == "/" and self._peek(index + 1) == ">":
                end, complete, self_closing = index + 2, True, True
                break
            if char == "<":
                # Recovery: the tag was never closed; let '<' start a new token.
                end, complete, self_closing = index, False, False
                break
            attribute, index = self._scan_attribute(index)
            if attribute is not None:
                attributes.append(attribute)

        self.index = end
        return Token(TokenType.START_TAG, self.text[name_start:name_end], begin, end,
                     self._position(begin), attributes=attributes,
                     self_closing=self_closing, complete=complete)

    def _scan_attribute(self, begin: int) -> Tuple[Optional[Attribute], int]:
        name_end = self._read_name(begin, ATTR_NAME_STOP_CHARS)
        if name_end == begin:
            # Stray character (lone '/', quote or '='); skip it to make progress.
            return None, begin + 1
        name = self.text[begin:name_end]

        index = name_end
        while index < self.limit and self.text[index].isspace():
            index += 1
        if self._peek(index) != "=":
            return Attribute(name, None, begin, name_end), name_end

        index += 1
        while index < self.limit and self.text[index].isspace():
            index += 1
        quote = self._peek(index)
        if quote in QUOTE_CHARS:
            value_start = index + 1
            value_end = value_start
            while value_end < self.limit and self.text[value_end] not in (quote, "<"):
                value_end += 1
            if value_end < self.limit and self.text[value_end] == quote:
                return (Attribute(name, self.text[value_start:value_end], begin,
                                  value_end + 1), value_end + 1)
            return (Attribute(name, self.text[value_start:value_end], begin,
                              value_end, terminated=False), value_end)

        value_end = index
        while (value_end < self.limit
               and not self.text[value_end].isspace()
               and self.text[value_end] not in "<>"
               and not (self.text[value_end] == "/"
                        and self._peek(value_end + 1) == ">")):
            value_end += 1
        return Attribute(name, self.text[index:value_end], begin, value_end), value_end
