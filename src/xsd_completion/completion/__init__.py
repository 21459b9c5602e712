"""Completion items and the builders that produce them."""

from .items import CompletionItem, CompletionItemKind
from .formatting import HtmlDocumentationFormatter
from .suggester import CodeSuggester, qualified_name

__all__ = [
    "CompletionItem",
    "CompletionItemKind",
    "HtmlDocumentationFormatter",
    "CodeSuggester",
    "qualified_name",
]
