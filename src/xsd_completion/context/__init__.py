"""Completion context analysis: what to complete and inside which element."""

from .resolver import (
    CompletionKind,
    CompletionTrigger,
    TriggerKind,
    classify,
    is_inside_attribute_value,
)
from .tags import (
    last_tag_name,
    local_name,
    parent_tag,
    unclosed_tags,
)

__all__ = [
    "CompletionKind",
    "CompletionTrigger",
    "TriggerKind",
    "classify",
    "is_inside_attribute_value",
    "last_tag_name",
    "local_name",
    "parent_tag",
    "unclosed_tags",
]
