"""Per-schema suggestion cache.

Memoizes the root-element, sub-element and attribute lists of one schema
source. The first lookup of a key performs exactly one provider fetch; every
later lookup of that key returns the stored sequence. Entries are never
evicted and live as long as the cache, which the schema registry discards
together with its schema source.

Root, sub-element and attribute lookups use separate key spaces, so an
element named like the root key, or an element and its attribute list,
never share an entry.
"""

import threading
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from xsd_completion.shared.config import CacheConfig
from xsd_completion.shared.logging import get_logger
from xsd_completion.shared.result import CacheStatistics

from .provider import SchemaSource, SuggestionRecord

Suggestions = Tuple[SuggestionRecord, ...]


class LookupSpace(Enum):
    """Independent key spaces of a suggestion cache."""

    ROOT_ELEMENTS = auto()
    SUB_ELEMENTS = auto()
    ATTRIBUTES = auto()


CacheKey = Tuple[LookupSpace, Optional[str]]


class SuggestionCache:
    """Lazily filled suggestion store for a single schema source.

    With ``CacheConfig.thread_safe`` set, a per-key lock guarantees at most
    one provider fetch per key even under concurrent lookups, while fetches
    for different keys proceed independently.
    """

    def __init__(
        self,
        source: SchemaSource,
        config: Optional[CacheConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the cache.

        Args:
            source: Schema source answering cache misses
            config: Cache behavior configuration
            correlation_id: Optional correlation ID for request tracking
        """
        self.source = source
        self.config = config or CacheConfig()
        self.statistics = CacheStatistics()
        self.logger = get_logger(__name__, correlation_id, "suggestion_cache")
        self._entries: Dict[CacheKey, Suggestions] = {}
        self._guard = threading.RLock()
        self._key_locks: Dict[CacheKey, threading.Lock] = {}

    def elements(self, parent: Optional[str] = None) -> Suggestions:
        """Elements allowed inside ``parent``; root elements when it is None."""
        if parent is None:
            return self._lookup(
                (LookupSpace.ROOT_ELEMENTS, None),
                self.source.get_root_elements,
                "Fetching root elements from schema",
            )
        return self._lookup(
            (LookupSpace.SUB_ELEMENTS, parent),
            lambda: self.source.get_sub_elements(parent),
            f"Fetching sub elements for {parent} from schema",
        )

    def attributes(self, element: str) -> Suggestions:
        """Attributes allowed on ``element``."""
        return self._lookup(
            (LookupSpace.ATTRIBUTES, element),
            lambda: self.source.get_attributes_for_element(element),
            f"Fetching attributes for {element} from schema",
        )

    def cached_keys(self) -> List[CacheKey]:
        """Keys currently stored, in insertion order."""
        with self._guard:
            return list(self._entries)

    def clear(self) -> None:
        """Drop every stored entry and reset statistics."""
        with self._guard:
            self._entries.clear()
            self._key_locks.clear()
            self.statistics.reset()

    def __len__(self) -> int:
        return len(self._entries)

    def _lookup(
        self,
        key: CacheKey,
        fetch: Callable[[], Sequence[SuggestionRecord]],
        message: str
    ) -> Suggestions:
        cached = self._entries.get(key)
        if cached is not None:
            self._count_hit()
            return cached

        if not self.config.thread_safe:
            return self._fetch_and_store(key, fetch, message)

        with self._guard:
            key_lock = self._key_locks.setdefault(key, threading.Lock())
        with key_lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._count_hit()
                return cached
            return self._fetch_and_store(key, fetch, message)

    def _count_hit(self) -> None:
        with self._guard:
            self.statistics.hits += 1

    def _fetch_and_store(
        self,
        key: CacheKey,
        fetch: Callable[[], Sequence[SuggestionRecord]],
        message: str
    ) -> Suggestions:
        with self._guard:
            self.statistics.misses += 1
            self.statistics.fetches += 1

        self.logger.debug(message, extra={"schema_path": self.source.path})
        try:
            records: Suggestions = tuple(fetch())
        except Exception as e:
            with self._guard:
                self.statistics.failed_fetches += 1
            self.logger.warning(
                "Schema fetch failed, serving empty suggestions",
                extra={
                    "schema_path": self.source.path,
                    "lookup": key[0].name,
                    "lookup_name": key[1],
                    "error": str(e),
                },
                exc_info=True
            )
            if not self.config.cache_failed_fetches:
                return ()
            records = ()

        with self._guard:
            self._entries[key] = records
        return records
