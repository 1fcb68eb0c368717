"""Line decoding, path normalization, and kind inference for trace events."""

from __future__ import annotations

import json

from .types import NODE_KINDS, ROOT_ID, NodeKind, SummaryItem, TraceEvent, TraceSummary


def normalize_trace_path(raw: str | None) -> str:
    """Map a raw event path to its canonical node id.

    Missing, empty, and ``"."`` paths denote the root sentinel. A leading
    ``./`` is stripped; nothing else is rewritten.
    """
    if not raw or raw == ROOT_ID:
        return ROOT_ID
    if raw.startswith("./"):
        raw = raw[2:]
    return raw or ROOT_ID


def parent_id(node_id: str) -> str | None:
    """Return the parent id by stripping the final segment, ``None`` for root."""
    if node_id == ROOT_ID:
        return None
    idx = node_id.rfind("/")
    if idx <= 0:
        return ROOT_ID
    return node_id[:idx]


def node_name(node_id: str) -> str:
    """Return the final path segment (``"."`` for root)."""
    if node_id == ROOT_ID:
        return ROOT_ID
    return node_id.rsplit("/", 1)[-1] or node_id


def infer_kind(event: TraceEvent) -> NodeKind:
    """Kind implied by one event when it first materializes its node."""
    if event.event == "include":
        return event.kind if event.kind in NODE_KINDS else "file"  # type: ignore[return-value]
    if event.event in ("enter", "skip"):
        return "dir"
    return "file"


def _str_field(raw: dict[str, object], key: str) -> str | None:
    value = raw.get(key)
    return value if isinstance(value, str) else None


def _bool_field(raw: dict[str, object], key: str) -> bool | None:
    value = raw.get(key)
    return value if isinstance(value, bool) else None


def event_from_dict(raw: dict[str, object]) -> TraceEvent:
    """Build a ``TraceEvent`` from a decoded JSON object.

    Fields of the wrong JSON type are treated as absent rather than rejected.
    """
    return TraceEvent(
        event=_str_field(raw, "event"),
        path=_str_field(raw, "path"),
        kind=_str_field(raw, "kind"),
        reason=_str_field(raw, "reason"),
        pattern=_str_field(raw, "pattern"),
        can_skip_dir=_bool_field(raw, "canSkipDir"),
        temp_expired=_bool_field(raw, "tempExpired"),
        normalized_path=_str_field(raw, "normalizedPath"),
        auto_normalize=_bool_field(raw, "autoNormalize"),
        message=_str_field(raw, "message"),
    )


def _summary_items(raw: object) -> tuple[SummaryItem, ...]:
    if not isinstance(raw, list):
        return ()
    items: list[SummaryItem] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        path = entry.get("Path")
        if not isinstance(path, str):
            continue
        kind = entry.get("Kind")
        reason = entry.get("Reason")
        items.append(
            SummaryItem(
                path=path,
                kind=kind if isinstance(kind, str) and kind else None,
                reason=reason if isinstance(reason, str) and reason else None,
            )
        )
    return tuple(items)


def summary_from_dict(raw: dict[str, object]) -> TraceSummary:
    """Decode the terminal ``summary`` record's included/ignored lists."""
    return TraceSummary(
        included=_summary_items(raw.get("included")),
        ignored=_summary_items(raw.get("ignored")),
    )


def decode_line(line: str) -> dict[str, object]:
    """Parse one JSONL line into a JSON object.

    Raises ``ValueError`` (``json.JSONDecodeError`` included) when the line is
    not valid JSON or does not decode to an object.
    """
    raw = json.loads(line)
    if not isinstance(raw, dict):
        raise ValueError(f"expected a JSON object, got {type(raw).__name__}")
    return raw


__all__ = [
    "normalize_trace_path",
    "parent_id",
    "node_name",
    "infer_kind",
    "event_from_dict",
    "summary_from_dict",
    "decode_line",
]
