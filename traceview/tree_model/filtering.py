"""Filtered, ordered row projection for the trace tree."""

from __future__ import annotations

from collections.abc import Mapping, Set

from ..trace_model.stats import compute_subtree_stats
from ..trace_model.types import SubtreeStats, TraceIndex, TraceNode
from .ordering import order_children
from .types import COST_METRIC_CHOICES, ORDER_BY_CHOICES, VisibleRow

EXCLUDED_STATUSES = frozenset({"ignored", "skipped"})


def is_self_visible(node: TraceNode, show_excluded: bool) -> bool:
    """Included on either compare side, or anything when excluded are shown."""
    if show_excluded:
        return True
    return node.status == "included" or node.status_b == "included"


def matches_search(node: TraceNode, query: str) -> bool:
    """Case-insensitive substring match on the node path (``query`` pre-folded)."""
    return query in node.path.casefold()


def compute_visibility(
    index: TraceIndex,
    show_excluded: bool,
    search: str = "",
) -> dict[str, bool]:
    """Return per-id visibility for every node reachable from root.

    Children resolve before parents, so a node is visible when it passes the
    active test (search match when searching, otherwise self-visibility) or
    any child is visible. Visibility therefore only ever propagates upward
    along one ancestor chain and never across sibling subtrees.
    """
    root = index.root
    if root is None:
        return {}
    query = search.strip().casefold()
    nodes = index.nodes
    visible: dict[str, bool] = {}
    stack: list[tuple[TraceNode, int, bool]] = [(root, 0, False)]
    active: set[str] = {root.id}

    while stack:
        node, pos, child_visible = stack[-1]
        if pos < len(node.children):
            child_id = node.children[pos]
            stack[-1] = (node, pos + 1, child_visible)
            cached = visible.get(child_id)
            if cached is not None:
                if cached:
                    stack[-1] = (node, pos + 1, True)
                continue
            child = nodes.get(child_id)
            if child is None or child_id in active:
                continue
            active.add(child_id)
            stack.append((child, 0, False))
            continue

        stack.pop()
        active.discard(node.id)
        own = matches_search(node, query) if query else is_self_visible(node, show_excluded)
        result = own or child_visible
        visible[node.id] = result
        if result and stack:
            parent, parent_pos, _ = stack[-1]
            stack[-1] = (parent, parent_pos, True)
    return visible


def build_visible_rows(
    index: TraceIndex,
    expanded: Set[str],
    show_excluded: bool,
    search: str = "",
    order_by: str = "scan",
    stats: Mapping[str, SubtreeStats] | None = None,
    cost_metric: str = "total",
) -> list[VisibleRow]:
    """Build the flattened row list a (virtualized) tree view renders.

    Root is implicit and always open: rows start with its visible children
    at depth 0. A visible node's children are walked only when it is in
    ``expanded`` or a search is active; a search force-reveals every match
    without touching ``expanded``.
    """
    if order_by not in ORDER_BY_CHOICES:
        raise ValueError(f"unknown ordering strategy: {order_by!r}")
    if cost_metric not in COST_METRIC_CHOICES:
        raise ValueError(f"unknown cost metric: {cost_metric!r}")
    root = index.root
    if root is None:
        return []
    if order_by == "cost" and stats is None:
        stats = compute_subtree_stats(index)

    searching = bool(search.strip())
    visible = compute_visibility(index, show_excluded, search)
    rows: list[VisibleRow] = []

    def ordered(node: TraceNode) -> list[TraceNode]:
        return order_children(node.children, index, order_by, stats, cost_metric)

    # Explicit stack in reverse order so rows come out depth-first, in order.
    stack: list[tuple[TraceNode, int]] = [(child, 0) for child in reversed(ordered(root))]
    emitted: set[str] = {root.id}
    while stack:
        node, depth = stack.pop()
        if not visible.get(node.id) or node.id in emitted:
            continue
        emitted.add(node.id)
        is_expanded = node.id in expanded
        rows.append(
            VisibleRow(
                node=node,
                depth=depth,
                has_children=bool(node.children),
                is_expanded=is_expanded,
                dimmed=show_excluded and node.status in EXCLUDED_STATUSES,
            )
        )
        if is_expanded or searching:
            stack.extend((child, depth + 1) for child in reversed(ordered(node)))
    return rows


__all__ = [
    "EXCLUDED_STATUSES",
    "is_self_visible",
    "matches_search",
    "compute_visibility",
    "build_visible_rows",
]
