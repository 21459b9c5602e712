"""Tag stack tracker.

Infers the element that is open at the cursor without parsing the document:
tag-name tokens from the document start up to the cursor are replayed onto a
name-matched ``TagStack``.
"""

from typing import List, Optional

from xsd_completion.document.index import DocumentIndex
from xsd_completion.document.model import DocumentModel, Position
from xsd_completion.tokenization.stack import TagStack
from xsd_completion.tokenization.tokenizer import MarkupTokenizer, tag_names

_tokenizer = MarkupTokenizer(include_text=False)


def local_name(tag: str) -> str:
    """Strip the namespace prefix from a tag name."""
    return tag.rsplit(":", 1)[-1]


def last_tag_name(line: str) -> Optional[str]:
    """Last tag-name token of a single line, or None."""
    names = tag_names(line)
    return names[-1] if names else None


def unclosed_tags(text: str) -> List[str]:
    """Return the element names still open at the end of ``text``.

    Examples:
        >>> unclosed_tags('<a><b></b>')
        ['a']
        >>> unclosed_tags('<a><b><c></b>')
        ['a']
    """
    return TagStack(_tokenizer.tokenize(text).tag_names()).to_list()


def parent_tag(
    document: DocumentModel,
    position: Position,
    index: Optional[DocumentIndex] = None
) -> Optional[str]:
    """Return the element that encloses the cursor, or None at the root.

    When the word under the cursor is the name of the innermost open tag, the
    user is still typing that tag, so its parent is returned instead. The
    same applies when the last tag on the current line is prefixed and its
    local name equals that word, which covers namespaced tags split by the
    word boundary.

    Args:
        document: Document to inspect
        position: Cursor position
        index: Optional incremental index of ``document``'s current text

    Returns:
        Enclosing element name as written (prefix included), or None
    """
    if index is not None:
        stack = TagStack(index.unclosed_tags(document.offset_at(position)))
    else:
        stack = TagStack(unclosed_tags(document.text_until(position)))

    word = document.word_at_position(position)
    if word is not None and word.word == stack.peek():
        return stack.peek(1)

    last_in_line = last_tag_name(document.line_content(position.line))
    if (word is not None and last_in_line and ":" in last_in_line
            and local_name(last_in_line) == word.word):
        return stack.peek(1)

    return stack.peek()
