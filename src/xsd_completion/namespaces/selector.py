"""Namespace-to-schema selector.

Chooses the registered schemas that may answer a completion request, given
the document's namespace bindings and the prefix the user is typing in.
"""

from typing import TYPE_CHECKING, List, Mapping, NamedTuple, Optional

from .builder import NamespaceBinding

if TYPE_CHECKING:
    from xsd_completion.schema.registry import SchemaRegistry, SchemaWorker


class ActiveSchema(NamedTuple):
    """A registered schema selected for a request and the prefix it is bound to."""

    worker: "SchemaWorker"
    prefix: Optional[str]


def active_schemas(
    bindings: Mapping[str, NamespaceBinding],
    requested_prefix: str,
    registry: "SchemaRegistry"
) -> List[ActiveSchema]:
    """Select the schemas answering a request.

    With a non-empty ``requested_prefix`` at most one schema is returned: the
    first binding declaring that prefix whose path is registered. With an
    empty prefix every binding with a registered path is returned, in
    binding order, each bound to its own declared prefix. Bindings whose
    path is not registered are skipped.

    Args:
        bindings: Schema path -> namespace binding map of the document
        requested_prefix: Prefix of the tag being completed, or ''
        registry: Registered schemas

    Returns:
        Selected schemas in merge order
    """
    if requested_prefix:
        for binding in bindings.values():
            if binding.prefix != requested_prefix:
                continue
            worker = registry.get(binding.path)
            if worker is not None:
                return [ActiveSchema(worker, requested_prefix)]
        return []

    selected = []
    for binding in bindings.values():
        worker = registry.get(binding.path)
        if worker is not None:
            selected.append(ActiveSchema(worker, binding.prefix))
    return selected
