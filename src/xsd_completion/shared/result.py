"""Metrics objects shared across completion components."""

from dataclasses import dataclass


@dataclass
class CacheStatistics:
    """Hit, miss and fetch counters for a single suggestion cache."""

    hits: int = 0
    misses: int = 0
    fetches: int = 0
    failed_fetches: int = 0

    @property
    def lookups(self) -> int:
        """Total number of cache lookups."""
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.lookups == 0:
            return 0.0
        return self.hits / self.lookups

    def reset(self) -> None:
        """Zero all counters."""
        self.hits = 0
        self.misses = 0
        self.fetches = 0
        self.failed_fetches = 0


@dataclass
class IndexStatistics:
    """Work counters for an incremental document index."""

    edits_applied: int = 0
    characters_scanned: int = 0
    namespace_scans: int = 0
    namespace_scans_skipped: int = 0
