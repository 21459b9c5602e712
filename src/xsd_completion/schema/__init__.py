"""Schema access: provider interface, suggestion cache and registry."""

from .provider import (
    NodeCategory,
    SchemaSource,
    StaticSchemaSource,
    SuggestionRecord,
)
from .cache import LookupSpace, SuggestionCache
from .registry import SchemaRegistry, SchemaWorker

__all__ = [
    "NodeCategory",
    "SchemaSource",
    "StaticSchemaSource",
    "SuggestionRecord",
    "LookupSpace",
    "SuggestionCache",
    "SchemaRegistry",
    "SchemaWorker",
]
