"""Document layer: positions, ranges, read-only document access and the
incremental per-document analysis index."""

from .model import (
    DocumentModel,
    Position,
    Range,
    TextDocument,
    WordAtPosition,
)
from .index import DocumentIndex

__all__ = [
    "DocumentIndex",
    "DocumentModel",
    "Position",
    "Range",
    "TextDocument",
    "WordAtPosition",
]
