"""Public completion API."""

from .engine import CompletionResult, XsdCompletionEngine, complete

__all__ = [
    "CompletionResult",
    "XsdCompletionEngine",
    "complete",
]
