"""Name-matched tag stack.

A heuristic stand-in for a real element tree: each tag name either opens
(pushed) or, if the same name is already open anywhere on the stack, closes
everything from the top down to and including its first occurrence. Crossed
or unbalanced markup therefore always yields some stack instead of an error.
"""

from typing import Iterable, List, Optional


class TagStack:
    """Array-backed stack of open element names."""

    def __init__(self, names: Optional[Iterable[str]] = None) -> None:
        self._items: List[str] = []
        if names is not None:
            self.feed_all(names)

    def feed(self, name: str) -> None:
        """Apply one tag-name token to the stack."""
        try:
            index = self._items.index(name)
        except ValueError:
            self._items.append(name)
        else:
            del self._items[index:]

    def feed_all(self, names: Iterable[str]) -> "TagStack":
        """Apply tag-name tokens in document order."""
        for name in names:
            self.feed(name)
        return self

    def copy(self) -> "TagStack":
        """Independent copy of this stack."""
        clone = TagStack()
        clone._items = list(self._items)
        return clone

    def peek(self, depth: int = 0) -> Optional[str]:
        """Entry ``depth`` levels below the top, or None."""
        if depth < 0 or depth >= len(self._items):
            return None
        return self._items[-1 - depth]

    def to_list(self) -> List[str]:
        """Entries from bottom (outermost) to top (innermost)."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"TagStack({self._items!r})"
