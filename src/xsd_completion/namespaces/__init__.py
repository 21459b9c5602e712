"""Namespace declarations and schema selection."""

from .builder import (
    NamespaceBinding,
    NamespaceScan,
    completion_namespace,
    namespace_prefixes,
    namespaces,
    scan_namespaces,
    schema_locations,
)
from .selector import ActiveSchema, active_schemas

__all__ = [
    "NamespaceBinding",
    "NamespaceScan",
    "completion_namespace",
    "namespace_prefixes",
    "namespaces",
    "scan_namespaces",
    "schema_locations",
    "ActiveSchema",
    "active_schemas",
]
