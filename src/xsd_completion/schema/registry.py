"""Schema registry.

Holds one worker per registered schema path. A worker owns the suggestion
cache of its schema source, so replacing or deleting a registration also
discards every suggestion memoized for it.
"""

from typing import Dict, List, Optional

from xsd_completion.completion.items import CompletionItem
from xsd_completion.completion.suggester import CodeSuggester
from xsd_completion.context.resolver import CompletionKind
from xsd_completion.shared.config import CompletionConfig
from xsd_completion.shared.logging import get_logger

from .cache import SuggestionCache
from .provider import SchemaSource


class SchemaWorker:
    """Answers completion requests for a single schema source."""

    def __init__(
        self,
        source: SchemaSource,
        config: Optional[CompletionConfig] = None,
        suggester: Optional[CodeSuggester] = None
    ) -> None:
        self.source = source
        self.config = config or CompletionConfig()
        self.cache = SuggestionCache(source, self.config.cache, self.config.correlation_id)
        self.suggester = suggester or CodeSuggester(config=self.config.suggestions)

    @property
    def path(self) -> str:
        """Path of the wrapped schema source."""
        return self.source.path

    def do_completion(
        self,
        kind: CompletionKind,
        parent: Optional[str] = None,
        prefix: Optional[str] = None
    ) -> List[CompletionItem]:
        """Build completion items of ``kind`` for the element ``parent``.

        Args:
            kind: Classified completion kind
            parent: Local name of the enclosing element, None at the root
            prefix: Namespace prefix qualifying suggested element names

        Returns:
            Completion items; empty for kinds this schema cannot answer
        """
        if kind == CompletionKind.ELEMENT:
            return self.suggester.elements(self.cache.elements(parent), prefix=prefix)
        if kind == CompletionKind.INCOMPLETE_ELEMENT:
            return self.suggester.elements(
                self.cache.elements(parent), incomplete=True, prefix=prefix
            )
        if kind == CompletionKind.SNIPPET:
            return self.suggester.elements(
                self.cache.elements(parent), without_tag=True, prefix=prefix
            )
        if kind in (CompletionKind.ATTRIBUTE, CompletionKind.INCOMPLETE_ATTRIBUTE):
            if parent is None:
                return []
            return self.suggester.attributes(self.cache.attributes(parent))
        return []

    def __repr__(self) -> str:
        return f"SchemaWorker({self.path!r})"


class SchemaRegistry:
    """Registered schema sources keyed by path.

    Example:
        >>> from xsd_completion.schema.provider import StaticSchemaSource
        >>> registry = SchemaRegistry()
        >>> registry.set(StaticSchemaSource('books.xsd'))
        >>> registry.has('books.xsd'), registry.delete('books.xsd')
        (True, True)
    """

    def __init__(self, config: Optional[CompletionConfig] = None) -> None:
        self.config = config or CompletionConfig()
        self.logger = get_logger(__name__, self.config.correlation_id, "schema_registry")
        self._workers: Dict[str, SchemaWorker] = {}

    def set(self, source: SchemaSource) -> None:
        """Register ``source`` under its path, replacing any previous one."""
        self._workers[source.path] = SchemaWorker(source, self.config)
        self.logger.debug("Registered schema", extra={"schema_path": source.path})

    def update(self, source: SchemaSource) -> None:
        """Replace the registration for ``source.path`` and drop its cache."""
        self.delete(source.path)
        self.set(source)

    def delete(self, path: str) -> bool:
        """Remove the registration for ``path``; True if one existed."""
        removed = self._workers.pop(path, None) is not None
        if removed:
            self.logger.debug("Removed schema", extra={"schema_path": path})
        return removed

    def get(self, path: str) -> Optional[SchemaWorker]:
        return self._workers.get(path)

    def has(self, path: str) -> bool:
        return path in self._workers

    def paths(self) -> List[str]:
        """Registered paths in registration order."""
        return list(self._workers)

    def __contains__(self, path: object) -> bool:
        return path in self._workers

    def __len__(self) -> int:
        return len(self._workers)
