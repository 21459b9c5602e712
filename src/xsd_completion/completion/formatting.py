"""Schema documentation formatting.

Schema annotations frequently embed HTML fragments. They are converted to
lightweight markdown before reaching completion items.
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag

from xsd_completion.shared.logging import get_logger

_WHITESPACE = re.compile(r"[ \t\r\f\v]+")
_BLANK_LINES = re.compile(r"\n{3,}")

_EMPHASIS = {
    "b": "**",
    "strong": "**",
    "i": "*",
    "em": "*",
    "code": "`",
}
_BLOCKS = {"p", "div", "ul", "ol"}


class HtmlDocumentationFormatter:
    """Convert HTML documentation fragments to markdown text.

    Examples:
        >>> HtmlDocumentationFormatter().format('Use <b>only</b> once.')
        'Use **only** once.'
        >>> HtmlDocumentationFormatter().format('plain text')
        'plain text'
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.logger = get_logger(__name__, correlation_id, "doc_formatter")

    def format(self, documentation: Optional[str]) -> str:
        """Return markdown for ``documentation``; empty input yields ''."""
        if not documentation:
            return ""
        if "<" not in documentation and "&" not in documentation:
            return self._normalize(documentation)

        soup = BeautifulSoup(documentation, "html.parser")
        parts: List[str] = []
        self._render(soup, parts)
        markdown = self._normalize("".join(parts))

        self.logger.debug(
            "Converted HTML documentation",
            extra={"input_length": len(documentation), "output_length": len(markdown)}
        )
        return markdown

    def _render(self, node: Tag, parts: List[str]) -> None:
        for child in node.children:
            if isinstance(child, NavigableString):
                # Comments, CDATA and doctypes are NavigableString subclasses
                if type(child) is NavigableString:
                    parts.append(str(child))
                continue
            if not isinstance(child, Tag):
                continue

            name = child.name.lower()
            if name == "br":
                parts.append("\n")
            elif name in _EMPHASIS:
                marker = _EMPHASIS[name]
                inner: List[str] = []
                self._render(child, inner)
                text = "".join(inner).strip()
                if text:
                    parts.append(f"{marker}{text}{marker}")
            elif name == "li":
                parts.append("\n- ")
                self._render(child, parts)
            elif name in _BLOCKS:
                parts.append("\n\n")
                self._render(child, parts)
                parts.append("\n\n")
            else:
                self._render(child, parts)

    @staticmethod
    def _normalize(text: str) -> str:
        lines = [_WHITESPACE.sub(" ", line).strip() for line in text.split("\n")]
        return _BLANK_LINES.sub("\n\n", "\n".join(lines)).strip()
