"""Plain-dict round trip for trace indices.

The dict shape is JSON-safe so an index can cross a worker/process boundary
or be dumped to disk for another tool to pick up.
"""

from __future__ import annotations

from types import MappingProxyType

from .types import NODE_KINDS, TraceCounts, TraceIndex, TraceNode

_STATUSES = frozenset({"unknown", "included", "ignored", "skipped"})
_ORIGINS = frozenset({"a", "b", "both"})


def node_to_dict(node: TraceNode) -> dict[str, object]:
    meta: dict[str, object] = {"status": node.status}
    if node.reason is not None:
        meta["reason"] = node.reason
    if node.pattern is not None:
        meta["pattern"] = node.pattern
    if node.last_event is not None:
        meta["lastEvent"] = node.last_event
    if node.origin is not None:
        meta["statusB"] = node.status_b or "unknown"
        if node.reason_b is not None:
            meta["reasonB"] = node.reason_b
        if node.pattern_b is not None:
            meta["patternB"] = node.pattern_b
        meta["origin"] = node.origin
    return {
        "id": node.id,
        "name": node.name,
        "path": node.path,
        "kind": node.kind,
        "meta": meta,
        "children": list(node.children),
    }


def index_to_dict(index: TraceIndex) -> dict[str, object]:
    """Serialize ``index`` into nested dicts/lists/strings/ints only."""
    return {
        "rootId": index.root_id,
        "compare": index.compare,
        "nodes": {node_id: node_to_dict(node) for node_id, node in index.nodes.items()},
        "counts": {
            "included": index.counts.included,
            "ignored": index.counts.ignored,
            "skipped": index.counts.skipped,
        },
    }


def _optional_str(raw: dict[str, object], key: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"expected string for {key!r}, got {type(value).__name__}")
    return value


def _choice(value: object, allowed: frozenset[str], what: str) -> str:
    if not isinstance(value, str) or value not in allowed:
        raise ValueError(f"invalid {what}: {value!r}")
    return value


def node_from_dict(node_id: str, raw: object) -> TraceNode:
    if not isinstance(raw, dict):
        raise ValueError(f"node {node_id!r} is not an object")
    meta = raw.get("meta") or {}
    if not isinstance(meta, dict):
        raise ValueError(f"node {node_id!r} has invalid meta")
    children = raw.get("children") or []
    if not isinstance(children, list) or not all(isinstance(child, str) for child in children):
        raise ValueError(f"node {node_id!r} has invalid children")

    name = raw.get("name")
    origin = meta.get("origin")
    status_b = meta.get("statusB")
    return TraceNode(
        id=node_id,
        name=name if isinstance(name, str) else node_id,
        kind=_choice(raw.get("kind", "file"), NODE_KINDS, "kind"),  # type: ignore[arg-type]
        status=_choice(meta.get("status", "unknown"), _STATUSES, "status"),  # type: ignore[arg-type]
        reason=_optional_str(meta, "reason"),
        pattern=_optional_str(meta, "pattern"),
        last_event=_optional_str(meta, "lastEvent"),
        children=tuple(dict.fromkeys(children)),
        status_b=_choice(status_b, _STATUSES, "statusB") if status_b is not None else None,  # type: ignore[arg-type]
        reason_b=_optional_str(meta, "reasonB"),
        pattern_b=_optional_str(meta, "patternB"),
        origin=_choice(origin, _ORIGINS, "origin") if origin is not None else None,  # type: ignore[arg-type]
    )


def index_from_dict(raw: object) -> TraceIndex:
    """Rebuild an immutable ``TraceIndex`` from ``index_to_dict`` output.

    Raises ``ValueError`` for structurally malformed payloads.
    """
    if not isinstance(raw, dict):
        raise ValueError("serialized index must be an object")
    root_id = raw.get("rootId")
    if not isinstance(root_id, str) or not root_id:
        raise ValueError("serialized index is missing rootId")
    raw_nodes = raw.get("nodes")
    if not isinstance(raw_nodes, dict):
        raise ValueError("serialized index is missing nodes")

    nodes = {str(node_id): node_from_dict(str(node_id), node) for node_id, node in raw_nodes.items()}

    raw_counts = raw.get("counts") or {}
    if not isinstance(raw_counts, dict):
        raise ValueError("serialized index has invalid counts")
    counts: dict[str, int] = {}
    for key in ("included", "ignored", "skipped"):
        value = raw_counts.get(key, 0)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"serialized index has invalid {key} count")
        counts[key] = value

    compare = raw.get("compare", False)
    if not isinstance(compare, bool):
        raise ValueError("serialized index has invalid compare flag")

    return TraceIndex(
        root_id=root_id,
        nodes=MappingProxyType(nodes),
        counts=TraceCounts(**counts),
        compare=compare,
    )


__all__ = ["node_to_dict", "node_from_dict", "index_to_dict", "index_from_dict"]
