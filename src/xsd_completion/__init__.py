"""XSD Completion.

Schema-driven completion for markup documents: classifies what may be typed
at the cursor, works out the enclosing element and the governing schema from
namespace declarations, and returns cached suggestions from registered
schema sources.

Progressive API Disclosure:
- Level 1: Simple function - complete()
- Level 2: Long-lived engine - XsdCompletionEngine with a SchemaRegistry
- Level 3: Incremental analysis - DocumentIndex fed with document edits
"""

__version__ = "0.1.0"
__author__ = "XSD Completion Team"

# Level 1 and Level 2 entry points
from .api import CompletionResult, XsdCompletionEngine, complete

# Completion context
from .context import CompletionKind, CompletionTrigger, TriggerKind

# Documents and incremental analysis
from .document import DocumentIndex, DocumentModel, Position, Range, TextDocument

# Schemas
from .schema import (
    SchemaRegistry,
    SchemaSource,
    StaticSchemaSource,
    SuggestionCache,
    SuggestionRecord,
)

# Result objects
from .completion import CompletionItem, CompletionItemKind

# Configuration classes for advanced usage
from .shared.config import CompletionConfig

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple completion function
    "complete",

    # Level 2: Engine and registry
    "XsdCompletionEngine",
    "SchemaRegistry",
    "SchemaSource",
    "StaticSchemaSource",
    "SuggestionCache",
    "SuggestionRecord",

    # Level 3: Incremental analysis
    "DocumentIndex",

    # Request and result objects
    "CompletionKind",
    "CompletionTrigger",
    "TriggerKind",
    "CompletionItem",
    "CompletionItemKind",
    "CompletionResult",
    "DocumentModel",
    "Position",
    "Range",
    "TextDocument",

    # Configuration
    "CompletionConfig",
]
