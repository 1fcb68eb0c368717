"""Tree-view projection: visibility filtering, child ordering, row formatting.

Defines ``VisibleRow`` and the helpers that turn a trace index plus view
state (expanded ids, show-excluded toggle, search, ordering) into rows.
"""

from __future__ import annotations

from .filtering import (
    EXCLUDED_STATUSES,
    build_visible_rows,
    compute_visibility,
    is_self_visible,
    matches_search,
)
from .ordering import is_directory_like, name_sort_key, order_children
from .rendering import (
    compare_badge,
    cost_color,
    format_counts_header,
    format_node_details,
    format_trace_row,
    highlight_substring,
    status_color,
)
from .types import COST_METRIC_CHOICES, ORDER_BY_CHOICES, CostMetric, OrderBy, VisibleRow

__all__ = [
    "VisibleRow",
    "OrderBy",
    "CostMetric",
    "ORDER_BY_CHOICES",
    "COST_METRIC_CHOICES",
    "EXCLUDED_STATUSES",
    "build_visible_rows",
    "compute_visibility",
    "is_self_visible",
    "matches_search",
    "is_directory_like",
    "name_sort_key",
    "order_children",
    "compare_badge",
    "cost_color",
    "format_counts_header",
    "format_node_details",
    "format_trace_row",
    "highlight_substring",
    "status_color",
]
