"""Completion records handed to the host presentation layer."""

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Any, Dict, Optional

from xsd_completion.document.model import Range


class CompletionItemKind(Enum):
    """Presentation category of a completion item."""

    ELEMENT = auto()      # Element name
    ATTRIBUTE = auto()    # Attribute name with value placeholder
    CLOSE_TAG = auto()    # Name that closes the innermost open element
    SNIPPET = auto()      # Whole element with body placeholder


@dataclass(frozen=True)
class CompletionItem:
    """A single suggestion ready for display and insertion.

    ``insert_text`` uses ``${n}`` tab-stop placeholders when
    ``insert_as_snippet`` is set.
    """

    label: str
    kind: CompletionItemKind
    insert_text: str
    detail: str = ""
    insert_as_snippet: bool = True
    range: Optional[Range] = None
    preselect: bool = False
    documentation: Optional[str] = None
    sort_text: Optional[str] = None

    def with_range(self, text_range: Range) -> "CompletionItem":
        """Copy of this item replacing ``text_range`` on insertion."""
        return replace(self, range=text_range)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        result: Dict[str, Any] = {
            "label": self.label,
            "kind": self.kind.name,
            "detail": self.detail,
            "insertText": self.insert_text,
            "insertAsSnippet": self.insert_as_snippet,
            "preselect": self.preselect,
        }
        if self.range is not None:
            result["range"] = {
                "startLine": self.range.start_line,
                "startColumn": self.range.start_column,
                "endLine": self.range.end_line,
                "endColumn": self.range.end_column,
            }
        if self.documentation is not None:
            result["documentation"] = self.documentation
        if self.sort_text is not None:
            result["sortText"] = self.sort_text
        return result
