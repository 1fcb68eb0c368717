"""Row datatypes handed from the visibility filter to renderers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ..trace_model.types import TraceNode

OrderBy = Literal["scan", "alpha", "cost"]
CostMetric = Literal["total", "ignored"]

ORDER_BY_CHOICES: tuple[str, ...] = ("scan", "alpha", "cost")
COST_METRIC_CHOICES: tuple[str, ...] = ("total", "ignored")


@dataclass(frozen=True)
class VisibleRow:
    """One rendered row in the trace tree (root's children sit at depth 0)."""

    node: TraceNode
    depth: int
    has_children: bool
    is_expanded: bool
    dimmed: bool = False
