"""Incremental per-document analysis index.

Rescanning the whole document on every keystroke is fine for small files but
does not scale. ``DocumentIndex`` keeps the token stream and the namespace
bindings of one document and, on each edit, throws away only what the edit
can have affected:

* tokens ending strictly before the edit offset are kept; scanning resumes
  lazily from the end of the last kept token;
* namespace bindings are kept unless the edit touches a previous
  declaration, contains punctuation or whitespace, or lands in a stretch of
  text (bounded by ``>`` or ``|``) that holds a declaration keyword. No
  declaration can span such a boundary.

Queries answer exactly what the stateless functions would answer for the
current text.
"""

import bisect
from typing import Dict, Iterable, List, Optional, Tuple

from xsd_completion.namespaces.builder import (
    DECLARATION_BOUNDARIES,
    DECLARATION_KEYWORDS,
    NamespaceBinding,
    NamespaceScan,
    scan_namespaces,
)
from xsd_completion.shared.config import DEFAULT_RESERVED_PREFIXES
from xsd_completion.shared.logging import get_logger
from xsd_completion.shared.result import IndexStatistics
from xsd_completion.tokenization.stack import TagStack
from xsd_completion.tokenization.tokenizer import MarkupTokenizer, Token


def declaration_stretch(text: str, start: int, end: int) -> str:
    """Widest text around ``text[start:end]`` that one declaration could span."""
    left = max(text.rfind(boundary, 0, start) for boundary in DECLARATION_BOUNDARIES) + 1
    rights = [text.find(boundary, end) for boundary in DECLARATION_BOUNDARIES]
    right = min((found for found in rights if found != -1), default=len(text))
    return text[left:right]


class DocumentIndex:
    """Token and namespace cache for a single document."""

    def __init__(
        self,
        text: str = "",
        reserved_prefixes: Iterable[str] = DEFAULT_RESERVED_PREFIXES,
        correlation_id: Optional[str] = None,
        version: int = 1
    ) -> None:
        """Initialize the index.

        Args:
            text: Initial document text
            reserved_prefixes: Namespace prefixes ignored by the namespace scan
            correlation_id: Optional correlation ID for request tracking
            version: Host document version of ``text``
        """
        self.reserved_prefixes = tuple(reserved_prefixes)
        self.version = version
        self.statistics = IndexStatistics()
        self.logger = get_logger(__name__, correlation_id, "document_index")
        self._tokenizer = MarkupTokenizer(correlation_id, include_text=False)
        self._reset(text)

    def _reset(self, text: str) -> None:
        self._text = text
        self._tokens: List[Token] = []
        self._token_ends: List[int] = []
        self._scanned_until = 0
        self._fully_scanned = False
        self._namespace_scan: Optional[NamespaceScan] = None
        # (number of tokens replayed, stack after replaying them)
        self._checkpoint: Tuple[int, TagStack] = (0, TagStack())

    @property
    def text(self) -> str:
        """Current document text."""
        return self._text

    def replace_text(self, text: str, version: Optional[int] = None) -> None:
        """Replace the whole document, discarding every cached result."""
        self._reset(text)
        self.version = version if version is not None else self.version + 1

    def apply_change(
        self,
        offset: int,
        removed_length: int,
        inserted_text: str,
        version: Optional[int] = None
    ) -> None:
        """Apply one edit and invalidate only the affected cached state.

        Args:
            offset: Offset in the current text where the edit starts
            removed_length: Number of characters replaced
            inserted_text: Replacement text
            version: Host document version after the edit
        """
        old_text = self._text
        offset = max(0, min(offset, len(old_text)))
        removed_length = max(0, min(removed_length, len(old_text) - offset))
        removed_text = old_text[offset:offset + removed_length]
        self._text = old_text[:offset] + inserted_text + old_text[offset + removed_length:]
        self.version = version if version is not None else self.version + 1
        self.statistics.edits_applied += 1

        keep = bisect.bisect_left(self._token_ends, offset)
        del self._tokens[keep:]
        del self._token_ends[keep:]
        self._scanned_until = self._token_ends[-1] if self._token_ends else 0
        self._fully_scanned = False
        if self._checkpoint[0] > keep:
            self._checkpoint = (0, TagStack())

        if self._namespace_scan is not None:
            if self._edit_affects_namespaces(old_text, offset, removed_text, inserted_text):
                self._namespace_scan = None
            else:
                self._shift_spans(offset, len(inserted_text) - removed_length)
                self.statistics.namespace_scans_skipped += 1

        self.logger.debug(
            "Applied document change",
            extra={
                "offset": offset,
                "removed_length": removed_length,
                "inserted_length": len(inserted_text),
                "tokens_kept": keep,
                "namespaces_cached": self._namespace_scan is not None,
                "version": self.version,
            }
        )

    def _edit_affects_namespaces(
        self, old_text: str, offset: int, removed_text: str, inserted_text: str
    ) -> bool:
        scan = self._namespace_scan
        if scan is None or scan.touches(offset, offset + len(removed_text)):
            return True
        edited = removed_text + inserted_text
        if not edited:
            return False
        if not edited.isalnum():
            return True
        stretches = (
            declaration_stretch(old_text, offset, offset + len(removed_text)),
            declaration_stretch(self._text, offset, offset + len(inserted_text)),
        )
        return any(keyword in stretch
                   for stretch in stretches for keyword in DECLARATION_KEYWORDS)

    def _shift_spans(self, offset: int, delta: int) -> None:
        scan = self._namespace_scan
        if scan is None or delta == 0:
            return
        scan.spans = [
            (start + delta, end + delta) if start >= offset else (start, end)
            for start, end in scan.spans
        ]

    def _scan_until(self, offset: Optional[int]) -> None:
        # Extend the token list until a token reaches ``offset`` (or the end).
        if self._fully_scanned:
            return
        if offset is not None and self._token_ends and self._token_ends[-1] >= offset:
            return
        start = self._scanned_until
        for token in self._tokenizer.iter_tokens(self._text, start, len(self._text)):
            self._tokens.append(token)
            self._token_ends.append(token.end)
            self._scanned_until = token.end
            if offset is not None and token.end >= offset:
                self.statistics.characters_scanned += token.end - start
                return
        self.statistics.characters_scanned += len(self._text) - start
        self._scanned_until = len(self._text)
        self._fully_scanned = True

    def tokens(self) -> List[Token]:
        """Full token stream of the current text (TEXT tokens excluded)."""
        self._scan_until(None)
        return list(self._tokens)

    def unclosed_tags(self, offset: int) -> List[str]:
        """Open element names in ``text[:offset]``, innermost last.

        Equivalent to tokenizing the prefix from scratch, but reuses every
        cached token that ends before ``offset``.
        """
        offset = max(0, min(offset, len(self._text)))
        self._scan_until(offset)
        reusable = bisect.bisect_left(self._token_ends, offset)

        replayed, stack = self._checkpoint
        if replayed > reusable:
            replayed, stack = 0, TagStack()
        stack = stack.copy()
        for token in self._tokens[replayed:reusable]:
            if token.is_tag_name:
                stack.feed(token.value)
        self._checkpoint = (reusable, stack.copy())

        tail_start = self._token_ends[reusable - 1] if reusable else 0
        tail = self._tokenizer.tokenize(self._text, tail_start, offset)
        stack.feed_all(tail.tag_names())
        return stack.to_list()

    def namespaces(self) -> Dict[str, NamespaceBinding]:
        """Schema path -> namespace binding map of the current text."""
        if self._namespace_scan is None:
            self._namespace_scan = scan_namespaces(self._text, self.reserved_prefixes)
            self.statistics.namespace_scans += 1
        return dict(self._namespace_scan.bindings)
