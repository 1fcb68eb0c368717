"""Child ordering strategies for the trace tree."""

from __future__ import annotations

import locale
import unicodedata
from collections.abc import Mapping, Sequence

from ..trace_model.stats import cost_of
from ..trace_model.types import SubtreeStats, TraceIndex, TraceNode
from .types import COST_METRIC_CHOICES, ORDER_BY_CHOICES


def is_directory_like(node: TraceNode) -> bool:
    """Directories, skipped paths, and anything with children sort first."""
    return node.kind == "dir" or node.status == "skipped" or bool(node.children)


def _collation_base(name: str) -> str:
    """Casefolded name with accents stripped, so "é" collates next to "e"."""
    decomposed = unicodedata.normalize("NFKD", name.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def name_sort_key(name: str) -> tuple[str, str, str]:
    """Case- and accent-insensitive collation key with deterministic tie-breaks.

    The base letters decide first (through the process locale when one is
    set), then the casefolded name, then the raw name.
    """
    return (locale.strxfrm(_collation_base(name)), name.casefold(), name)


def order_children(
    children: Sequence[str],
    index: TraceIndex,
    order_by: str = "scan",
    stats: Mapping[str, SubtreeStats] | None = None,
    cost_metric: str = "total",
) -> list[TraceNode]:
    """Return child nodes partitioned dirs-first and sorted by ``order_by``.

    ``scan`` keeps discovery order, ``alpha`` sorts by name, and ``cost``
    sorts by descending subtree cost with name as the tie-break. Ids missing
    from the index are dropped.
    """
    if order_by not in ORDER_BY_CHOICES:
        raise ValueError(f"unknown ordering strategy: {order_by!r}")
    if cost_metric not in COST_METRIC_CHOICES:
        raise ValueError(f"unknown cost metric: {cost_metric!r}")

    dirs: list[TraceNode] = []
    files: list[TraceNode] = []
    for child_id in children:
        child = index.nodes.get(child_id)
        if child is None:
            continue
        if is_directory_like(child):
            dirs.append(child)
        else:
            files.append(child)

    if order_by == "alpha":
        dirs.sort(key=lambda node: name_sort_key(node.name))
        files.sort(key=lambda node: name_sort_key(node.name))
    elif order_by == "cost":
        cost_stats = stats or {}

        def cost_key(node: TraceNode) -> tuple[int, tuple[str, str, str]]:
            return (-cost_of(cost_stats.get(node.id), cost_metric), name_sort_key(node.name))

        dirs.sort(key=cost_key)
        files.sort(key=cost_key)
    return dirs + files


__all__ = ["is_directory_like", "name_sort_key", "order_children"]
