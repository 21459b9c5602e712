"""Schema provider interface.

A schema source is an already loaded, queryable view of one schema document,
identified by its path. Parsing the schema is the provider's business; the
completion engine only asks for root elements, sub-elements of an element and
attributes of an element, and treats every answer as safe to memoize.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Mapping, Optional, Sequence, Tuple


class NodeCategory(Enum):
    """Kind of schema node a suggestion describes."""

    ELEMENT = auto()
    ATTRIBUTE = auto()


@dataclass(frozen=True)
class SuggestionRecord:
    """One schema-derived suggestion."""

    name: str
    category: NodeCategory
    type_info: Optional[str] = None
    required: bool = False
    documentation: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate suggestion record."""
        if not self.name:
            raise ValueError("Suggestion name cannot be empty")

    @classmethod
    def element(
        cls,
        name: str,
        type_info: Optional[str] = None,
        documentation: Optional[str] = None
    ) -> "SuggestionRecord":
        """Create an element suggestion."""
        return cls(name, NodeCategory.ELEMENT, type_info, False, documentation)

    @classmethod
    def attribute(
        cls,
        name: str,
        type_info: Optional[str] = None,
        required: bool = False,
        documentation: Optional[str] = None
    ) -> "SuggestionRecord":
        """Create an attribute suggestion."""
        return cls(name, NodeCategory.ATTRIBUTE, type_info, required, documentation)


class SchemaSource(ABC):
    """Queryable, externally owned schema document."""

    @property
    @abstractmethod
    def path(self) -> str:
        """Path identifying this schema source."""

    @abstractmethod
    def get_root_elements(self) -> Sequence[SuggestionRecord]:
        """Elements allowed at the document root."""

    @abstractmethod
    def get_sub_elements(self, parent_name: str) -> Sequence[SuggestionRecord]:
        """Elements allowed inside ``parent_name``."""

    @abstractmethod
    def get_attributes_for_element(self, element_name: str) -> Sequence[SuggestionRecord]:
        """Attributes allowed on ``element_name``."""


class StaticSchemaSource(SchemaSource):
    """Schema source backed by precomputed suggestion tables.

    Useful for hosts that extract suggestion lists ahead of time and for
    tests. Unknown names yield empty sequences.
    """

    def __init__(
        self,
        path: str,
        root_elements: Sequence[SuggestionRecord] = (),
        sub_elements: Optional[Mapping[str, Sequence[SuggestionRecord]]] = None,
        attributes: Optional[Mapping[str, Sequence[SuggestionRecord]]] = None
    ) -> None:
        self._path = path
        self._root_elements: Tuple[SuggestionRecord, ...] = tuple(root_elements)
        self._sub_elements: Dict[str, Tuple[SuggestionRecord, ...]] = {
            name: tuple(records) for name, records in (sub_elements or {}).items()
        }
        self._attributes: Dict[str, Tuple[SuggestionRecord, ...]] = {
            name: tuple(records) for name, records in (attributes or {}).items()
        }

    @property
    def path(self) -> str:
        return self._path

    def get_root_elements(self) -> Sequence[SuggestionRecord]:
        return self._root_elements

    def get_sub_elements(self, parent_name: str) -> Sequence[SuggestionRecord]:
        return self._sub_elements.get(parent_name, ())

    def get_attributes_for_element(self, element_name: str) -> Sequence[SuggestionRecord]:
        return self._attributes.get(element_name, ())

    def __repr__(self) -> str:
        return f"StaticSchemaSource({self._path!r})"
