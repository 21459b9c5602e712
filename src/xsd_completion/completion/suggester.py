"""Completion item builder.

Turns schema suggestion records into completion items using fixed insertion
templates. ``${n}`` markers are editor tab stops.
"""

from typing import TYPE_CHECKING, List, Optional, Sequence

from xsd_completion.shared.config import SuggestionConfig

from .formatting import HtmlDocumentationFormatter
from .items import CompletionItem, CompletionItemKind

if TYPE_CHECKING:
    from xsd_completion.schema.provider import SuggestionRecord


def qualified_name(name: str, prefix: Optional[str] = None) -> str:
    """Prepend ``prefix:`` to ``name`` when a non-empty prefix is given."""
    return f"{prefix}:{name}" if prefix else name


class CodeSuggester:
    """Build element, attribute and close-tag completion items."""

    def __init__(
        self,
        formatter: Optional[HtmlDocumentationFormatter] = None,
        config: Optional[SuggestionConfig] = None
    ) -> None:
        self.config = config or SuggestionConfig()
        self.formatter = formatter or HtmlDocumentationFormatter()

    def elements(
        self,
        records: Sequence["SuggestionRecord"],
        without_tag: bool = False,
        incomplete: bool = False,
        prefix: Optional[str] = None
    ) -> List[CompletionItem]:
        """Build element items in schema order.

        Args:
            records: Element suggestions
            without_tag: Insert the whole element as a snippet
            incomplete: Insert only the name, completing a partial one
            prefix: Namespace prefix qualifying every inserted name

        Returns:
            Completion items whose sort text preserves schema order
        """
        items = []
        for index, record in enumerate(records):
            name = qualified_name(record.name, prefix)
            items.append(CompletionItem(
                label=name,
                kind=CompletionItemKind.SNIPPET if without_tag else CompletionItemKind.ELEMENT,
                detail=self.config.element_snippet_detail if without_tag else "",
                insert_text=self.element_insert_text(name, without_tag, incomplete),
                documentation=self._documentation(record.documentation),
                sort_text=str(index),
            ))
        return items

    def element_insert_text(self, name: str, without_tag: bool, incomplete: bool) -> str:
        """Insertion template for an element name.

        Examples:
            >>> CodeSuggester().element_insert_text('book', False, False)
            'book${1}></book'
            >>> CodeSuggester().element_insert_text('book', False, True)
            'book'
        """
        if without_tag:
            indent = self.config.snippet_indent
            return f"<{name}${{1}}>\n{indent}${{2}}\n</{name}>"
        if incomplete:
            return name
        # No trailing '>'
        return f"{name}${{1}}></{name}"

    def attributes(self, records: Sequence["SuggestionRecord"]) -> List[CompletionItem]:
        """Build attribute items; required attributes are preselected."""
        return [
            CompletionItem(
                label=record.name,
                kind=CompletionItemKind.ATTRIBUTE,
                detail=record.type_info or "",
                insert_text=f'{record.name}="${{1}}"',
                preselect=record.required,
                documentation=self._documentation(record.documentation) or "",
            )
            for record in records
        ]

    def closing_element(self, name: str) -> CompletionItem:
        """Build the item that closes the open element ``name``."""
        return CompletionItem(
            label=name,
            kind=CompletionItemKind.CLOSE_TAG,
            detail=self.config.close_tag_detail,
            insert_text=name,
            insert_as_snippet=False,
            documentation=f"Closes the unclosed {name} tag in this file.",
        )

    def _documentation(self, documentation: Optional[str]) -> Optional[str]:
        if not documentation:
            return None
        if self.config.format_documentation:
            return self.formatter.format(documentation)
        return documentation
