"""Compare-mode merge of two independently built trace indices."""

from __future__ import annotations

import logging
from types import MappingProxyType

from .types import TraceIndex, TraceNode

logger = logging.getLogger(__name__)


class IndexMismatchError(ValueError):
    """Raised when two indices cannot be merged because their roots differ."""


def _union_children(primary: tuple[str, ...], other: tuple[str, ...]) -> tuple[str, ...]:
    """Primary order first, then ids only the other side knows, in its order."""
    seen = set(primary)
    merged = list(primary)
    for child_id in other:
        if child_id not in seen:
            seen.add(child_id)
            merged.append(child_id)
    return tuple(merged)


def _merge_node(node_a: TraceNode | None, node_b: TraceNode | None) -> TraceNode:
    if node_a is not None and node_b is not None:
        kind = "dir" if node_b.kind == "dir" else node_a.kind
        return TraceNode(
            id=node_a.id,
            name=node_a.name,
            kind=kind,
            status=node_a.status,
            reason=node_a.reason,
            pattern=node_a.pattern,
            last_event=node_a.last_event,
            children=_union_children(node_a.children, node_b.children),
            status_b=node_b.status,
            reason_b=node_b.reason,
            pattern_b=node_b.pattern,
            origin="both",
        )

    only = node_a if node_a is not None else node_b
    assert only is not None
    return TraceNode(
        id=only.id,
        name=only.name,
        kind=only.kind,
        status=only.status,
        reason=only.reason,
        pattern=only.pattern,
        last_event=only.last_event,
        children=only.children,
        status_b="unknown",
        origin="a" if node_a is not None else "b",
    )


def merge_indexes(index_a: TraceIndex, index_b: TraceIndex) -> TraceIndex:
    """Union two indices into one compare-annotated index.

    A's values always occupy the primary status/reason/pattern slot on
    shared paths and B's go to the ``_b`` slot, so ``merge_indexes(a, b)``
    and ``merge_indexes(b, a)`` agree on membership but not on primary status.
    A path seen by one side only carries that side's values in the primary
    slot; ``origin`` records which side it was.

    Counts are the element-wise sum of both inputs, not a recount of the
    merged node statuses.
    """
    if index_a.root_id != index_b.root_id:
        raise IndexMismatchError(
            f"cannot merge trace indices with different roots: {index_a.root_id!r} != {index_b.root_id!r}"
        )

    nodes: dict[str, TraceNode] = {}
    for node_id in (*index_a.nodes.keys(), *index_b.nodes.keys()):
        if node_id in nodes:
            continue
        nodes[node_id] = _merge_node(index_a.nodes.get(node_id), index_b.nodes.get(node_id))

    logger.debug(
        "Merged trace indices: %d + %d nodes -> %d nodes",
        len(index_a.nodes),
        len(index_b.nodes),
        len(nodes),
    )
    return TraceIndex(
        root_id=index_a.root_id,
        nodes=MappingProxyType(nodes),
        counts=index_a.counts + index_b.counts,
        compare=True,
    )


__all__ = ["IndexMismatchError", "merge_indexes"]
