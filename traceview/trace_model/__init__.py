"""Domain model for scanner traces reconstructed into path hierarchies.

This package contains the non-UI core:
- event decoding and path normalization
- index building from an unordered event stream
- memoized subtree aggregation
- compare-mode merging of two indices
- plain-dict serialization and summary cross-checks
"""

from __future__ import annotations

from .types import (
    EVENT_TYPES,
    NODE_KINDS,
    ROOT_ID,
    DecodeError,
    NodeKind,
    NodeOrigin,
    NodeStatus,
    SubtreeStats,
    SummaryItem,
    TraceCounts,
    TraceEvent,
    TraceIndex,
    TraceNode,
    TraceSummary,
)
from .events import (
    decode_line,
    event_from_dict,
    infer_kind,
    node_name,
    normalize_trace_path,
    parent_id,
    summary_from_dict,
)
from .build import (
    PROGRESS_EVERY_LINES,
    IngestCancelled,
    IngestProgress,
    IngestResult,
    TraceIndexBuilder,
    build_trace_index,
    ingest_trace,
)
from .stats import compute_subtree_stats, cost_of
from .merge import IndexMismatchError, merge_indexes
from .serialize import index_from_dict, index_to_dict, node_from_dict, node_to_dict
from .summary import SummaryMismatch, check_summary

__all__ = [
    "EVENT_TYPES",
    "NODE_KINDS",
    "ROOT_ID",
    "DecodeError",
    "NodeKind",
    "NodeOrigin",
    "NodeStatus",
    "SubtreeStats",
    "SummaryItem",
    "TraceCounts",
    "TraceEvent",
    "TraceIndex",
    "TraceNode",
    "TraceSummary",
    "decode_line",
    "event_from_dict",
    "infer_kind",
    "node_name",
    "normalize_trace_path",
    "parent_id",
    "summary_from_dict",
    "PROGRESS_EVERY_LINES",
    "IngestCancelled",
    "IngestProgress",
    "IngestResult",
    "TraceIndexBuilder",
    "build_trace_index",
    "ingest_trace",
    "compute_subtree_stats",
    "cost_of",
    "IndexMismatchError",
    "merge_indexes",
    "index_from_dict",
    "index_to_dict",
    "node_from_dict",
    "node_to_dict",
    "SummaryMismatch",
    "check_summary",
]
