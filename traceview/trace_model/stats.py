"""Memoized subtree aggregation over a finished trace index."""

from __future__ import annotations

from collections.abc import Mapping

from .types import SubtreeStats, TraceIndex, TraceNode


def _own_stats(node: TraceNode) -> list[int]:
    is_dir = node.is_dir
    return [
        1,
        0 if is_dir else 1,
        1 if is_dir else 0,
        1 if node.status == "ignored" else 0,
        1 if node.status == "skipped" else 0,
    ]


def _accumulate(totals: list[int], stats: SubtreeStats) -> None:
    totals[0] += stats.total_nodes
    totals[1] += stats.total_files
    totals[2] += stats.total_dirs
    totals[3] += stats.ignored
    totals[4] += stats.skipped


def compute_subtree_stats(index: TraceIndex) -> Mapping[str, SubtreeStats]:
    """Return ``SubtreeStats`` for every node, keyed by node id.

    Post-order traversal with a per-id cache: each node is summed exactly
    once after all of its children, so total work is linear in the number of
    nodes no matter how many ancestors share a subtree. Dangling child ids
    are skipped. A child id that is still on the active path is treated the
    same way, which keeps a malformed (cyclic) mapping from looping.
    """
    nodes = index.nodes
    memo: dict[str, SubtreeStats] = {}
    active: set[str] = set()

    for start_id in nodes:
        if start_id in memo:
            continue
        # Stack frames: (node, accumulated totals, next child position).
        stack: list[tuple[TraceNode, list[int], int]] = [(nodes[start_id], _own_stats(nodes[start_id]), 0)]
        active.add(start_id)
        while stack:
            node, totals, pos = stack[-1]
            if pos < len(node.children):
                stack[-1] = (node, totals, pos + 1)
                child_id = node.children[pos]
                cached = memo.get(child_id)
                if cached is not None:
                    _accumulate(totals, cached)
                    continue
                child = nodes.get(child_id)
                if child is None or child_id in active:
                    continue
                active.add(child_id)
                stack.append((child, _own_stats(child), 0))
                continue

            stack.pop()
            active.discard(node.id)
            result = SubtreeStats(*totals)
            memo[node.id] = result
            if stack:
                _accumulate(stack[-1][1], result)

    return memo


def cost_of(stats: SubtreeStats | None, cost_metric: str) -> int:
    """Return the ordering/badge cost for ``stats`` under ``cost_metric``."""
    if stats is None:
        return 0
    if cost_metric == "ignored":
        return stats.ignored
    if cost_metric == "total":
        return stats.total_nodes
    raise ValueError(f"unknown cost metric: {cost_metric!r}")


__all__ = ["compute_subtree_stats", "cost_of"]
