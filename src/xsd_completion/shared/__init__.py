"""Shared utilities for schema-driven completion.

This module provides configuration objects, metrics types and logging
helpers used across all completion components.
"""

from .result import CacheStatistics, IndexStatistics
from .config import (
    CacheConfig,
    CompletionConfig,
    ConfigError,
    ConfigValidationError,
    ContextConfig,
    SuggestionConfig,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "CacheStatistics",
    "IndexStatistics",
    "CacheConfig",
    "CompletionConfig",
    "ConfigError",
    "ConfigValidationError",
    "ContextConfig",
    "SuggestionConfig",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
]
