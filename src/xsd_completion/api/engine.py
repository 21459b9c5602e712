"""Completion engine API with progressive disclosure.

Level 1 is the module-level ``complete()`` function, which answers a single
request against a handful of schema sources. Level 2 is
``XsdCompletionEngine``, which serves a long-lived schema registry, host
document models and optional incremental document indexes.
"""

import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

from xsd_completion.completion.items import CompletionItem
from xsd_completion.completion.suggester import CodeSuggester
from xsd_completion.context.resolver import CompletionKind, CompletionTrigger, classify
from xsd_completion.context.tags import local_name, parent_tag
from xsd_completion.document.index import DocumentIndex
from xsd_completion.document.model import DocumentModel, Position, Range, TextDocument
from xsd_completion.namespaces.builder import completion_namespace, namespaces
from xsd_completion.namespaces.selector import active_schemas
from xsd_completion.schema.provider import SchemaSource
from xsd_completion.schema.registry import SchemaRegistry
from xsd_completion.shared.config import CompletionConfig
from xsd_completion.shared.logging import configure_logging, get_logger

MS_PER_SECOND = 1000


@dataclass
class CompletionResult:
    """Completion items for one request plus how they were derived."""

    items: List[CompletionItem]
    kind: CompletionKind
    parent_tag: Optional[str] = None
    namespace_prefix: str = ""
    processing_time_ms: float = 0.0
    schemas_consulted: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Check whether no completion is offered."""
        return not self.items

    @property
    def labels(self) -> List[str]:
        """Labels of all items in order."""
        return [item.label for item in self.items]

    def __iter__(self) -> Iterator[CompletionItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "suggestions": [item.to_dict() for item in self.items],
            "kind": self.kind.name,
            "parentTag": self.parent_tag,
            "namespacePrefix": self.namespace_prefix,
            "processingTimeMs": self.processing_time_ms,
            "schemasConsulted": list(self.schemas_consulted),
        }


class XsdCompletionEngine:
    """Schema-driven completion provider for markup documents.

    Examples:
        >>> from xsd_completion.schema import StaticSchemaSource, SuggestionRecord
        >>> registry = SchemaRegistry()
        >>> registry.set(StaticSchemaSource(
        ...     'books.xsd', root_elements=[SuggestionRecord.element('library')]))
        >>> engine = XsdCompletionEngine(registry)
        >>> doc = '<r xsi:noNamespaceSchemaLocation="books.xsd"/>\\n<'
        >>> engine.complete(doc, 2, 2, CompletionTrigger.typed('<')).labels
        ['library']
    """

    def __init__(
        self,
        registry: Optional[SchemaRegistry] = None,
        config: Optional[CompletionConfig] = None
    ) -> None:
        """Initialize the engine.

        Args:
            registry: Registered schemas; an empty registry when omitted
            config: Engine configuration; defaults when omitted
        """
        self.config = config or (registry.config if registry is not None else CompletionConfig())
        self.registry = registry if registry is not None else SchemaRegistry(self.config)
        self.suggester = CodeSuggester(config=self.config.suggestions)
        self.logger = get_logger(__name__, self.config.correlation_id, "completion_engine")
        self._qualified_word_start = re.compile(
            f"(?:{self.config.context.word_pattern}):$"
        )

    @property
    def trigger_characters(self) -> List[str]:
        """Characters the host should register as completion triggers."""
        return list(self.config.context.trigger_characters)

    def create_index(self, text: str, version: int = 1) -> DocumentIndex:
        """Create an incremental index configured like this engine."""
        return DocumentIndex(
            text,
            reserved_prefixes=self.config.context.reserved_prefixes,
            correlation_id=self.config.correlation_id,
            version=version,
        )

    def provide_completion_items(
        self,
        document: DocumentModel,
        position: Position,
        trigger: Optional[CompletionTrigger] = None,
        index: Optional[DocumentIndex] = None
    ) -> CompletionResult:
        """Compute completion items at ``position``.

        Args:
            document: Host document
            position: Cursor position
            trigger: Request trigger; explicit invocation when omitted
            index: Optional incremental index holding ``document``'s current text

        Returns:
            CompletionResult, empty when no completion is valid at the cursor
        """
        start_time = time.perf_counter()
        trigger = trigger or CompletionTrigger.invoke()
        if not self.config.enable_incremental_index:
            index = None

        line = document.line_content(position.line)
        line_before_cursor = line[:position.column - 1]
        kind = classify(line_before_cursor, trigger, self.config.context.trigger_characters)
        result = CompletionResult(items=[], kind=kind)

        if kind != CompletionKind.NONE:
            result.parent_tag = parent_tag(document, position, index)
        if kind.needs_schema:
            self._collect_schema_items(document, position, line, index, result)
        elif kind == CompletionKind.CLOSING_ELEMENT and result.parent_tag:
            result.items.append(self.suggester.closing_element(result.parent_tag))

        if result.items:
            text_range = self._replacement_range(document, position, line_before_cursor)
            result.items = [item.with_range(text_range) for item in result.items]

        result.processing_time_ms = (time.perf_counter() - start_time) * MS_PER_SECOND
        self.logger.debug(
            "Completion request served",
            extra={
                "kind": kind.name,
                "parent_tag": result.parent_tag,
                "namespace_prefix": result.namespace_prefix,
                "item_count": len(result.items),
                "schemas_consulted": result.schemas_consulted,
                "processing_time_ms": result.processing_time_ms,
            }
        )
        return result

    def complete(
        self,
        text: str,
        line: int,
        column: int,
        trigger: Optional[CompletionTrigger] = None
    ) -> CompletionResult:
        """Compute completion items for plain ``text`` at ``line``/``column``."""
        document = TextDocument(text, self.config.context.word_pattern)
        return self.provide_completion_items(document, Position(line, column), trigger)

    def _collect_schema_items(
        self,
        document: DocumentModel,
        position: Position,
        line: str,
        index: Optional[DocumentIndex],
        result: CompletionResult
    ) -> None:
        if index is not None:
            bindings = index.namespaces()
        else:
            bindings = namespaces(document.full_text(), self.config.context.reserved_prefixes)

        result.namespace_prefix = completion_namespace(line, position.column)
        parent = local_name(result.parent_tag) if result.parent_tag else None

        for schema in active_schemas(bindings, result.namespace_prefix, self.registry):
            result.schemas_consulted.append(schema.worker.path)
            result.items.extend(
                schema.worker.do_completion(result.kind, parent, schema.prefix)
            )

    def _replacement_range(
        self,
        document: DocumentModel,
        position: Position,
        line_before_cursor: str
    ) -> Range:
        """Range from the start of the (prefix-qualified) word to the cursor."""
        start_column = document.word_until_position(position).start_column
        match = self._qualified_word_start.search(line_before_cursor[:start_column - 1])
        if match:
            start_column = match.start() + 1
        return Range.on_line(position.line, start_column, position.column)


def complete(
    text: str,
    line: int,
    column: int,
    schemas: Iterable[SchemaSource] = (),
    trigger: Optional[CompletionTrigger] = None,
    config: Optional[CompletionConfig] = None
) -> CompletionResult:
    """Compute completions for ``text`` against ad hoc schema sources.

    Builds a throwaway registry, so nothing is cached across calls. Use
    ``XsdCompletionEngine`` with a long-lived ``SchemaRegistry`` to benefit
    from suggestion caching.

    Args:
        text: Document text
        line: Cursor line (1-based)
        column: Cursor column (1-based)
        schemas: Schema sources to register
        trigger: Request trigger; explicit invocation when omitted
        config: Engine configuration; defaults when omitted

    Returns:
        CompletionResult for the cursor position
    """
    config = config or CompletionConfig()
    configure_logging(config.logging_level)
    registry = SchemaRegistry(config)
    for source in schemas:
        registry.set(source)
    return XsdCompletionEngine(registry, config).complete(text, line, column, trigger)
