"""Index construction from a stream of trace events.

``TraceIndexBuilder`` applies events one at a time to a path-keyed node map,
synthesizing ancestor placeholders as paths are first referenced.
``ingest_trace`` drives a builder over a JSONL text blob, collecting decode
errors and reporting progress at a fixed line cadence.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from types import MappingProxyType

from .events import (
    decode_line,
    event_from_dict,
    infer_kind,
    node_name,
    normalize_trace_path,
    parent_id,
    summary_from_dict,
)
from .types import (
    ROOT_ID,
    DecodeError,
    NodeKind,
    NodeStatus,
    TraceCounts,
    TraceEvent,
    TraceIndex,
    TraceNode,
    TraceSummary,
)

logger = logging.getLogger(__name__)

PROGRESS_EVERY_LINES = 5000


@dataclass
class _NodeDraft:
    """Mutable node state while the building pass is in progress."""

    id: str
    name: str
    kind: NodeKind
    status: NodeStatus = "unknown"
    reason: str | None = None
    pattern: str | None = None
    last_event: str | None = None
    children: list[str] = field(default_factory=list)
    child_ids: set[str] = field(default_factory=set)
    counted: set[str] = field(default_factory=set)

    def add_child(self, child_id: str) -> bool:
        if child_id in self.child_ids:
            return False
        self.child_ids.add(child_id)
        self.children.append(child_id)
        return True

    def freeze(self) -> TraceNode:
        return TraceNode(
            id=self.id,
            name=self.name,
            kind=self.kind,
            status=self.status,
            reason=self.reason,
            pattern=self.pattern,
            last_event=self.last_event,
            children=tuple(self.children),
        )


def _apply_include(node: _NodeDraft, event: TraceEvent) -> NodeStatus:
    node.status = "included"
    if node.kind != "dir":
        node.kind = infer_kind(event)
    node.reason = None
    node.pattern = None
    return "included"


def _apply_ignore(node: _NodeDraft, event: TraceEvent) -> NodeStatus:
    node.status = "ignored"
    node.reason = event.reason
    node.pattern = event.pattern
    return "ignored"


def _apply_skip(node: _NodeDraft, event: TraceEvent) -> NodeStatus:
    node.status = "skipped"
    node.reason = event.reason
    node.pattern = event.pattern
    node.kind = "dir"
    return "skipped"


def _apply_temp(node: _NodeDraft, _event: TraceEvent) -> NodeStatus | None:
    # Never overrides a definitive decision already recorded for the path.
    if node.status != "unknown":
        return None
    node.status = "ignored"
    node.reason = "temporary"
    return "ignored"


def _apply_error(node: _NodeDraft, _event: TraceEvent) -> NodeStatus:
    node.status = "ignored"
    node.reason = "error"
    node.pattern = None
    return "ignored"


def _apply_enter(node: _NodeDraft, _event: TraceEvent) -> None:
    node.kind = "dir"
    return None


_STATUS_HANDLERS: dict[str, Callable[[_NodeDraft, TraceEvent], NodeStatus | None]] = {
    "include": _apply_include,
    "ignore": _apply_ignore,
    "skip": _apply_skip,
    "temp": _apply_temp,
    "error": _apply_error,
    "enter": _apply_enter,
}


class TraceIndexBuilder:
    """Accumulate events into a path-keyed node map, then freeze it.

    Latest applicable event wins per path. Counts grow once per status
    category a node transitions into, so replaying identical events leaves
    both node state and counts unchanged.
    """

    def __init__(self) -> None:
        self.root_id = ROOT_ID
        self._nodes: dict[str, _NodeDraft] = {}
        self._counts: dict[str, int] = {"included": 0, "ignored": 0, "skipped": 0}
        self._finished = False
        self._ensure_node(ROOT_ID, "dir")

    def __len__(self) -> int:
        return len(self._nodes)

    def _ensure_node(self, node_id: str, kind: NodeKind) -> _NodeDraft:
        node = self._nodes.get(node_id)
        if node is not None:
            if kind == "dir" and node.kind != "dir":
                node.kind = "dir"
            return node
        node = _NodeDraft(id=node_id, name=node_name(node_id), kind=kind)
        self._nodes[node_id] = node
        return node

    def _link_ancestors(self, node_id: str) -> None:
        """Materialize every missing ancestor and link each child exactly once."""
        child_id = node_id
        parent = parent_id(child_id)
        while parent is not None:
            parent_node = self._ensure_node(parent, "dir")
            if not parent_node.add_child(child_id):
                # Already linked, so the rest of the chain exists too.
                return
            child_id = parent
            parent = parent_id(child_id)

    def apply(self, event: TraceEvent) -> None:
        """Apply one event to the node map."""
        self._check_open()
        if event.event == "summary":
            return
        node_id = normalize_trace_path(event.path)
        node = self._ensure_node(node_id, infer_kind(event))
        self._link_ancestors(node_id)
        node.last_event = event.event

        handler = _STATUS_HANDLERS.get(event.event or "")
        if handler is None:
            return
        decided = handler(node, event)
        if decided is not None and decided not in node.counted:
            node.counted.add(decided)
            self._counts[decided] += 1

    def apply_all(self, events: Iterable[TraceEvent]) -> TraceIndexBuilder:
        for event in events:
            self.apply(event)
        return self

    def finish(self) -> TraceIndex:
        """Freeze the builder into an immutable ``TraceIndex``."""
        self._check_open()
        self._finished = True
        nodes = {node_id: draft.freeze() for node_id, draft in self._nodes.items()}
        return TraceIndex(
            root_id=self.root_id,
            nodes=MappingProxyType(nodes),
            counts=TraceCounts(**self._counts),
        )

    def _check_open(self) -> None:
        if self._finished:
            raise RuntimeError("index builder already finished")


def build_trace_index(events: Iterable[TraceEvent]) -> TraceIndex:
    """Build a finished index from already-decoded events."""
    return TraceIndexBuilder().apply_all(events).finish()


@dataclass(frozen=True)
class IngestProgress:
    """Liveness signal emitted while a trace is being ingested."""

    label: str
    processed: int
    total: int


class IngestCancelled(Exception):
    """Raised when a caller abandons an in-flight ingestion."""


@dataclass(frozen=True)
class IngestResult:
    """Finished index plus everything the ingestion pass observed on the side."""

    label: str
    index: TraceIndex
    errors: tuple[DecodeError, ...] = ()
    summary: TraceSummary | None = None
    total_lines: int = 0


def ingest_trace(
    text: str,
    label: str = "A",
    on_progress: Callable[[IngestProgress], None] | None = None,
    is_cancelled: Callable[[], bool] | None = None,
) -> IngestResult:
    """Decode a newline-delimited JSON trace into an index.

    Malformed lines become line-numbered ``DecodeError`` entries and are
    skipped. The terminal ``summary`` record is kept aside and never folded
    into the index. ``is_cancelled`` is polled at the progress cadence;
    returning true aborts with ``IngestCancelled``.
    """
    lines = text.split("\n")
    total = len(lines)
    builder = TraceIndexBuilder()
    errors: list[DecodeError] = []
    summary: TraceSummary | None = None

    for idx, raw_line in enumerate(lines):
        if idx % PROGRESS_EVERY_LINES == 0:
            if is_cancelled is not None and is_cancelled():
                raise IngestCancelled(f"ingestion of trace {label} cancelled at line {idx + 1}")
            logger.debug("Parsing trace %s: %d / %d lines", label, idx, total)
            if on_progress is not None:
                on_progress(IngestProgress(label=label, processed=idx, total=total))

        line = raw_line.strip()
        if not line:
            continue
        try:
            raw = decode_line(line)
        except ValueError as exc:
            message = f"Failed to parse JSON on line {idx + 1}: {exc}"
            logger.warning("trace %s: %s", label, message)
            errors.append(DecodeError(line=idx + 1, message=message))
            continue

        if raw.get("event") == "summary":
            summary = summary_from_dict(raw)
            continue
        builder.apply(event_from_dict(raw))

    index = builder.finish()
    logger.info(
        "Trace %s loaded: %d nodes, %d included, %d ignored, %d skipped, %d decode errors",
        label,
        len(index),
        index.counts.included,
        index.counts.ignored,
        index.counts.skipped,
        len(errors),
    )
    return IngestResult(
        label=label,
        index=index,
        errors=tuple(errors),
        summary=summary,
        total_lines=total,
    )


__all__ = [
    "PROGRESS_EVERY_LINES",
    "TraceIndexBuilder",
    "build_trace_index",
    "IngestProgress",
    "IngestCancelled",
    "IngestResult",
    "ingest_trace",
]
