"""Completion context resolver.

Classifies what kind of completion is valid at the cursor from the text of
the current line before the cursor and the signal that triggered the
request. The classification is a pure function of those two inputs.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional

from xsd_completion.shared.config import DEFAULT_TRIGGER_CHARACTERS
from xsd_completion.tokenization.tokenizer import MarkupTokenizer, TokenType

# An attribute value opened with at least one character and not closed yet.
INSIDE_ATTRIBUTE_VALUE_PATTERN = re.compile(r'="[^"]+$')


class CompletionKind(Enum):
    """Classified intent of a completion request."""

    NONE = auto()                   # No completion is valid here
    ELEMENT = auto()                # Element name right after '<'
    ATTRIBUTE = auto()              # Attribute name after a space in a tag
    CLOSING_ELEMENT = auto()        # Element name right after '</'
    INCOMPLETE_ELEMENT = auto()     # Partially typed element name
    INCOMPLETE_ATTRIBUTE = auto()   # Partially typed attribute name
    SNIPPET = auto()                # Whole element inserted as a snippet

    @property
    def needs_schema(self) -> bool:
        """Check whether this kind is answered from schema suggestions."""
        return self not in (CompletionKind.NONE, CompletionKind.CLOSING_ELEMENT)


class TriggerKind(Enum):
    """Event that caused a completion request."""

    INVOKE = auto()                              # Explicit user invocation
    TRIGGER_CHARACTER = auto()                   # A trigger character was typed
    TRIGGER_FOR_INCOMPLETE_COMPLETIONS = auto()  # Re-query of an incomplete list


@dataclass(frozen=True)
class CompletionTrigger:
    """Trigger signal of a completion request."""

    kind: TriggerKind
    character: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate trigger values."""
        if self.kind == TriggerKind.TRIGGER_CHARACTER:
            if self.character is None or len(self.character) != 1:
                raise ValueError("Character triggers need exactly one character")

    @classmethod
    def invoke(cls) -> "CompletionTrigger":
        """Explicit invocation."""
        return cls(TriggerKind.INVOKE)

    @classmethod
    def incomplete(cls) -> "CompletionTrigger":
        """Continuation of an incomplete completion list."""
        return cls(TriggerKind.TRIGGER_FOR_INCOMPLETE_COMPLETIONS)

    @classmethod
    def typed(cls, character: str) -> "CompletionTrigger":
        """A single typed trigger character."""
        return cls(TriggerKind.TRIGGER_CHARACTER, character)


_CHARACTER_KINDS = {
    "<": CompletionKind.ELEMENT,
    " ": CompletionKind.ATTRIBUTE,
    "/": CompletionKind.CLOSING_ELEMENT,
}

_line_tokenizer = MarkupTokenizer(include_text=False)


def is_inside_attribute_value(text: str) -> bool:
    """Check whether ``text`` ends inside an open attribute value."""
    return INSIDE_ATTRIBUTE_VALUE_PATTERN.search(text) is not None


def kind_for_character(
    character: Optional[str],
    trigger_characters: Iterable[str] = DEFAULT_TRIGGER_CHARACTERS
) -> CompletionKind:
    """Map a typed trigger character to a completion kind."""
    if character is None or character not in tuple(trigger_characters):
        return CompletionKind.NONE
    return _CHARACTER_KINDS.get(character, CompletionKind.NONE)


def kind_for_incomplete_text(text: str) -> CompletionKind:
    """Classify an explicit or continued request from the line text.

    Attribute names count only when they follow the nearest preceding tag
    opener and that tag is still open at the cursor.
    """
    tokens = _line_tokenizer.tokenize(text).tokens
    start_tags = [token for token in tokens if token.type == TokenType.START_TAG]
    if start_tags:
        nearest = start_tags[-1]
        if not nearest.complete and nearest.end == len(text) and nearest.attributes:
            return CompletionKind.INCOMPLETE_ATTRIBUTE
    if any(token.is_tag_name for token in tokens):
        return CompletionKind.INCOMPLETE_ELEMENT
    return CompletionKind.SNIPPET


def classify(
    line_before_cursor: str,
    trigger: CompletionTrigger,
    trigger_characters: Iterable[str] = DEFAULT_TRIGGER_CHARACTERS
) -> CompletionKind:
    """Classify the completion kind at the cursor.

    Args:
        line_before_cursor: Current line text up to the cursor
        trigger: Signal that caused the request
        trigger_characters: Characters the host registered as triggers

    Returns:
        The completion kind; NONE inside an open attribute value

    Examples:
        >>> classify('<book ', CompletionTrigger.typed(' '))
        <CompletionKind.ATTRIBUTE: 3>
        >>> classify('<book status="open <', CompletionTrigger.typed('<'))
        <CompletionKind.NONE: 1>
    """
    if is_inside_attribute_value(line_before_cursor):
        return CompletionKind.NONE
    if trigger.kind == TriggerKind.TRIGGER_CHARACTER:
        return kind_for_character(trigger.character, trigger_characters)
    return kind_for_incomplete_text(line_before_cursor)
