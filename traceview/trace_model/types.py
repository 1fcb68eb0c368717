"""Datatypes for trace events, reconstructed nodes, and finished indices."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

ROOT_ID = "."

NodeKind = Literal["file", "dir", "symlink"]
NodeStatus = Literal["unknown", "included", "ignored", "skipped"]
NodeOrigin = Literal["a", "b", "both"]

NODE_KINDS: frozenset[str] = frozenset({"file", "dir", "symlink"})
EVENT_TYPES: frozenset[str] = frozenset(
    {"enter", "skip", "include", "ignore", "temp", "normalize", "error", "summary"}
)


@dataclass(frozen=True)
class TraceEvent:
    """One decoded trace record, tagged by ``event``.

    ``event`` is kept verbatim even when it is not one of ``EVENT_TYPES`` so
    callers can tell an unknown tag from a missing one (``None``).
    """

    event: str | None
    path: str | None = None
    kind: str | None = None
    reason: str | None = None
    pattern: str | None = None
    can_skip_dir: bool | None = None
    temp_expired: bool | None = None
    normalized_path: str | None = None
    auto_normalize: bool | None = None
    message: str | None = None


@dataclass(frozen=True)
class SummaryItem:
    """One entry of the terminal ``summary`` record's included/ignored lists."""

    path: str
    kind: str | None = None
    reason: str | None = None


@dataclass(frozen=True)
class TraceSummary:
    """Whole-list echo emitted by the scanner after the per-path events."""

    included: tuple[SummaryItem, ...] = ()
    ignored: tuple[SummaryItem, ...] = ()


@dataclass(frozen=True)
class DecodeError:
    """A line that could not be decoded into an event (1-based ``line``)."""

    line: int
    message: str


@dataclass(frozen=True)
class TraceCounts:
    """Running decision counts accumulated while building an index."""

    included: int = 0
    ignored: int = 0
    skipped: int = 0

    def __add__(self, other: TraceCounts) -> TraceCounts:
        return TraceCounts(
            included=self.included + other.included,
            ignored=self.ignored + other.ignored,
            skipped=self.skipped + other.skipped,
        )


@dataclass(frozen=True)
class TraceNode:
    """One reconstructed path in a finished index.

    ``status_b``/``reason_b``/``pattern_b`` and ``origin`` are only set on
    nodes of a merged (compare) index.
    """

    id: str
    name: str
    kind: NodeKind
    status: NodeStatus = "unknown"
    reason: str | None = None
    pattern: str | None = None
    last_event: str | None = None
    children: tuple[str, ...] = ()
    status_b: NodeStatus | None = None
    reason_b: str | None = None
    pattern_b: str | None = None
    origin: NodeOrigin | None = None

    @property
    def path(self) -> str:
        return self.id

    @property
    def is_dir(self) -> bool:
        """Directory for aggregation purposes: dir kind or any child."""
        return self.kind == "dir" or bool(self.children)

    def side_status(self, side: Literal["a", "b"]) -> NodeStatus:
        """Return the status one compare side observed for this path."""
        if self.origin is None:
            return self.status if side == "a" else "unknown"
        if self.origin == "both":
            return self.status if side == "a" else (self.status_b or "unknown")
        return self.status if self.origin == side else "unknown"


@dataclass(frozen=True)
class TraceIndex:
    """Immutable path-keyed hierarchy produced by one building pass or a merge."""

    root_id: str
    nodes: Mapping[str, TraceNode]
    counts: TraceCounts
    compare: bool = False

    @property
    def root(self) -> TraceNode | None:
        return self.nodes.get(self.root_id)

    def __len__(self) -> int:
        return len(self.nodes)


@dataclass(frozen=True)
class SubtreeStats:
    """Aggregate statistics for a node's full subtree, the node included."""

    total_nodes: int
    total_files: int
    total_dirs: int
    ignored: int
    skipped: int

    @property
    def traversed_dirs(self) -> int:
        return self.total_dirs - self.skipped


__all__ = [
    "ROOT_ID",
    "NodeKind",
    "NodeStatus",
    "NodeOrigin",
    "NODE_KINDS",
    "EVENT_TYPES",
    "TraceEvent",
    "SummaryItem",
    "TraceSummary",
    "DecodeError",
    "TraceCounts",
    "TraceNode",
    "TraceIndex",
    "SubtreeStats",
]
