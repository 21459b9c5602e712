"""Tokenization layer for completion context analysis.

This package turns raw, possibly partial markup into a typed token stream and
maintains the derived structures the completion engine needs.

Key Components:
    MarkupTokenizer: Never-fail scanner producing typed tokens
    Token: Single markup token with span, position and attributes
    TokenType: Enumeration of markup token types
    TagStack: Name-matched stack of open element names
"""

from .tokenizer import (
    Attribute,
    MarkupTokenizer,
    Token,
    TokenizationResult,
    TokenPosition,
    TokenType,
    tag_names,
)
from .stack import TagStack

__all__ = [
    "Attribute",
    "MarkupTokenizer",
    "TagStack",
    "Token",
    "TokenizationResult",
    "TokenPosition",
    "TokenType",
    "tag_names",
]
