"""Cross-check a built index against the scanner's terminal summary record."""

from __future__ import annotations

from dataclasses import dataclass

from .events import normalize_trace_path
from .types import TraceIndex, TraceSummary


@dataclass(frozen=True)
class SummaryMismatch:
    """A summary entry whose path disagrees with the reconstructed index.

    ``actual`` is ``None`` when the path never appeared in the event stream.
    """

    path: str
    expected: str
    actual: str | None
    reason: str | None = None


def check_summary(index: TraceIndex, summary: TraceSummary) -> list[SummaryMismatch]:
    """Return summary entries whose index status does not match, in summary order.

    Entries on the ``included`` list expect status ``included``. Entries on
    the ``ignored`` list accept ``ignored`` or ``skipped``, since the scanner
    reports pruned directories on its ignored list too.
    """
    mismatches: list[SummaryMismatch] = []
    for item in summary.included:
        node = index.nodes.get(normalize_trace_path(item.path))
        actual = node.status if node is not None else None
        if actual != "included":
            mismatches.append(SummaryMismatch(item.path, "included", actual, item.reason))
    for item in summary.ignored:
        node = index.nodes.get(normalize_trace_path(item.path))
        actual = node.status if node is not None else None
        if actual not in ("ignored", "skipped"):
            mismatches.append(SummaryMismatch(item.path, "ignored", actual, item.reason))
    return mismatches


__all__ = ["SummaryMismatch", "check_summary"]
