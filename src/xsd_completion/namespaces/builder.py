"""Namespace registry builder.

Scans document text for namespace declarations (``xmlns:p="uri"`` and
``xmlns="uri"``) and schema location hints (``xsi:schemaLocation`` and
``xsi:noNamespaceSchemaLocation``) and joins them by URI into a mapping from
schema path to namespace binding.

All extraction steps are total: text without any declaration simply yields
empty mappings.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from xsd_completion.shared.config import DEFAULT_RESERVED_PREFIXES
from xsd_completion.tokenization.tokenizer import tag_names

NO_NAMESPACE_URI_SCHEME = "file://"

PREFIXED_NAMESPACE_PATTERN = re.compile(
    r'xmlns:(?P<prefix>[^:\s|/>="]+)="(?P<uri>[^\s|>"]+)"'
)
DEFAULT_NAMESPACE_PATTERN = re.compile(r'xmlns="(?P<uri>[^\s|>"]+)"')
SCHEMA_LOCATION_PATTERN = re.compile(
    r'xsi:schemaLocation=\s*"(?P<value>[^"|>]+)"'
)
NO_NAMESPACE_SCHEMA_LOCATION_PATTERN = re.compile(
    r'xsi:noNamespaceSchemaLocation=\s*"(?P<value>[^"|>]+)"'
)

# Every declaration match contains one of these substrings.
DECLARATION_KEYWORDS = ("xmlns", "schemaLocation", "SchemaLocation")

# No declaration match contains any of these characters.
DECLARATION_BOUNDARIES = ">|"


@dataclass(frozen=True)
class NamespaceBinding:
    """Association between a schema path and its declared namespace prefix.

    ``prefix`` is None when no ``xmlns`` declaration names the schema's URI,
    and an empty string for the default namespace.
    """

    prefix: Optional[str]
    path: str


@dataclass
class NamespaceScan:
    """Full result of one namespace scan."""

    bindings: Dict[str, NamespaceBinding] = field(default_factory=dict)
    spans: List[Tuple[int, int]] = field(default_factory=list)

    def touches(self, start: int, end: int) -> bool:
        """Check whether ``[start, end]`` overlaps or abuts any declaration."""
        return any(span_start <= end and start <= span_end
                   for span_start, span_end in self.spans)


def namespace_prefixes(
    text: str,
    reserved_prefixes: Iterable[str] = DEFAULT_RESERVED_PREFIXES,
    spans: Optional[List[Tuple[int, int]]] = None
) -> Dict[str, str]:
    """Extract a uri -> prefix map from ``xmlns`` declarations.

    Prefixed declarations are read first, then default declarations, so a
    default declaration wins over a prefixed one for the same URI. Within
    each kind the last declaration read wins.
    """
    reserved = set(reserved_prefixes)
    prefixes: Dict[str, str] = {}
    for match in PREFIXED_NAMESPACE_PATTERN.finditer(text):
        if match.group("prefix") in reserved:
            continue
        prefixes[match.group("uri")] = match.group("prefix")
        if spans is not None:
            spans.append(match.span())
    for match in DEFAULT_NAMESPACE_PATTERN.finditer(text):
        prefixes[match.group("uri")] = ""
        if spans is not None:
            spans.append(match.span())
    return prefixes


def schema_locations(
    text: str,
    spans: Optional[List[Tuple[int, int]]] = None
) -> Dict[str, str]:
    """Extract a path -> uri map from schema location hints.

    ``xsi:schemaLocation`` holds whitespace separated uri/path pairs; a
    trailing uri without a path is ignored. ``xsi:noNamespaceSchemaLocation``
    paths get the synthetic URI ``file://<path>``.
    """
    locations: Dict[str, str] = {}
    for match in SCHEMA_LOCATION_PATTERN.finditer(text):
        parts = match.group("value").split()
        for uri, path in zip(parts[0::2], parts[1::2]):
            locations[path] = uri
        if spans is not None:
            spans.append(match.span())
    for match in NO_NAMESPACE_SCHEMA_LOCATION_PATTERN.finditer(text):
        path = match.group("value").strip()
        if path:
            locations[path] = NO_NAMESPACE_URI_SCHEME + path
        if spans is not None:
            spans.append(match.span())
    return locations


def scan_namespaces(
    text: str,
    reserved_prefixes: Iterable[str] = DEFAULT_RESERVED_PREFIXES
) -> NamespaceScan:
    """Scan ``text`` and join declarations with schema locations by URI.

    Args:
        text: Full document text
        reserved_prefixes: Prefixes whose declarations are ignored

    Returns:
        NamespaceScan with bindings keyed by schema path
    """
    spans: List[Tuple[int, int]] = []
    prefixes = namespace_prefixes(text, reserved_prefixes, spans)
    locations = schema_locations(text, spans)
    bindings = {
        path: NamespaceBinding(prefix=prefixes.get(uri), path=path)
        for path, uri in locations.items()
    }
    return NamespaceScan(
        bindings=bindings,
        spans=sorted(spans),
    )


def namespaces(
    text: str,
    reserved_prefixes: Iterable[str] = DEFAULT_RESERVED_PREFIXES
) -> Dict[str, NamespaceBinding]:
    """Build the schema path -> namespace binding map for a document.

    Example:
        >>> namespaces('<r xmlns:ns="http://example/ns" '
        ...            'xsi:schemaLocation="http://example/ns schema/a.xsd">')
        {'schema/a.xsd': NamespaceBinding(prefix='ns', path='schema/a.xsd')}
    """
    return scan_namespaces(text, reserved_prefixes).bindings


def completion_namespace(line: str, column: Optional[int] = None) -> str:
    """Return the namespace prefix the user is completing in.

    Looks at the last tag-name token in the line text before ``column``
    (1-based; the whole line when omitted). An empty string means every
    registered namespace is eligible.
    """
    text = line if column is None else line[:max(column - 1, 0)]
    names = tag_names(text)
    if names:
        parts = names[-1].split(":")
        if len(parts) > 1:
            return parts[0]
    return ""
