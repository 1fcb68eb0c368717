"""Formatting helpers for trace-tree rows, headers, and node details."""

from __future__ import annotations

from collections.abc import Mapping

from ..trace_model.stats import cost_of
from ..trace_model.types import SubtreeStats, TraceCounts, TraceNode
from ..ui_theme import DEFAULT_THEME, UITheme
from .ordering import is_directory_like
from .types import VisibleRow

COST_BADGE_LOW_BELOW = 20
COST_BADGE_HIGH_ABOVE = 1000
STATUS_DOT = "●"


def status_color(status: str | None, theme: UITheme) -> str:
    if status == "included":
        return theme.status_included
    if status == "ignored":
        return theme.status_ignored
    if status == "skipped":
        return theme.status_skipped
    return theme.status_unknown


def cost_color(cost: int, theme: UITheme) -> str:
    """Green under 20, red over 1000, amber in between."""
    if cost > COST_BADGE_HIGH_ABOVE:
        return theme.cost_high
    if cost < COST_BADGE_LOW_BELOW:
        return theme.cost_low
    return theme.cost_mid


def compare_badge(
    node: TraceNode,
    has_children: bool,
    stats_a: SubtreeStats | None = None,
    stats_b: SubtreeStats | None = None,
) -> str | None:
    """Return ``"A only"``, ``"B only"``, ``"Diff"``, or ``None`` for a merged node.

    ``Diff`` marks a directory included on both or neither side whose
    per-side subtree statistics disagree.
    """
    included_a = node.side_status("a") == "included"
    included_b = node.side_status("b") == "included"
    if included_a and not included_b:
        return "A only"
    if included_b and not included_a:
        return "B only"
    if has_children and stats_a is not None and stats_b is not None and stats_a != stats_b:
        return "Diff"
    return None


def highlight_substring(text: str, query: str, theme: UITheme, restore: str = "") -> str:
    """Highlight first case-insensitive substring match in ``text``.

    ``restore`` is re-emitted after the highlight so surrounding color resumes.
    """
    query = query.strip()
    if not query or not theme.highlight:
        return text
    # Casefolding can change length ("ß" -> "ss"), so map folded offsets back.
    folded_parts: list[str] = []
    owners: list[int] = []
    for pos, ch in enumerate(text):
        piece = ch.casefold()
        folded_parts.append(piece)
        owners.extend([pos] * len(piece))
    folded_query = query.casefold()
    hit = "".join(folded_parts).find(folded_query)
    if hit < 0:
        return text
    idx = owners[hit]
    end = owners[hit + len(folded_query) - 1] + 1
    return text[:idx] + theme.highlight + text[idx:end] + theme.reset + restore + text[end:]


def format_trace_row(
    row: VisibleRow,
    stats: Mapping[str, SubtreeStats] | None = None,
    *,
    compare: bool = False,
    stats_a: Mapping[str, SubtreeStats] | None = None,
    stats_b: Mapping[str, SubtreeStats] | None = None,
    cost_metric: str = "total",
    search_query: str = "",
    theme: UITheme | None = None,
) -> str:
    """Render one trace-tree row as ANSI-styled display text."""
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    node = row.node

    indent = "  " * row.depth
    if row.has_children:
        marker = "▾ " if row.is_expanded else "▸ "
    else:
        marker = "  "
    dot = f"{status_color(node.status, active_theme)}{STATUS_DOT}{reset} "

    is_dir = is_directory_like(node)
    name_color = active_theme.tree_dir if is_dir else active_theme.tree_file
    if row.dimmed:
        name_color = active_theme.dim
    name = highlight_substring(node.name, search_query, active_theme, restore=name_color)
    name = f"{name_color}{name}{'/' if is_dir else ''}{reset}"

    parts = [f"{indent}{active_theme.tree_marker}{marker}{reset}{dot}{name}"]
    if compare:
        badge = compare_badge(
            node,
            row.has_children,
            (stats_a or {}).get(node.id),
            (stats_b or {}).get(node.id),
        )
        if badge == "A only":
            parts.append(f"{active_theme.badge_only_a}[A only]{reset}")
        elif badge == "B only":
            parts.append(f"{active_theme.badge_only_b}[B only]{reset}")
        elif badge == "Diff":
            parts.append(f"{active_theme.badge_diff}[Diff]{reset}")

    node_stats = (stats or {}).get(node.id)
    if row.has_children and node_stats is not None:
        cost = cost_of(node_stats, cost_metric)
        parts.append(f"{cost_color(cost, active_theme)}[{cost}]{reset}")
    return " ".join(parts)


def format_counts_header(counts: TraceCounts, theme: UITheme | None = None) -> str:
    """Render the ``N included • N ignored • N skipped`` header line."""
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    return " • ".join(
        [
            f"{active_theme.status_included}{counts.included} included{reset}",
            f"{active_theme.status_ignored}{counts.ignored} ignored{reset}",
            f"{active_theme.status_skipped}{counts.skipped} skipped{reset}",
        ]
    )


def format_node_details(
    node: TraceNode,
    stats: SubtreeStats | None = None,
    *,
    compare: bool = False,
) -> list[str]:
    """Plain-text detail lines for one node (kind, decision, subtree cost)."""

    def field(label: str, value: object) -> str:
        return f"{label:<16}{'—' if value is None else value}"

    lines = [
        field("Path", node.path),
        field("Kind", node.kind),
        field("Status", node.status),
        field("Reason", node.reason),
        field("Pattern", node.pattern),
        field("Last event", node.last_event),
    ]
    if stats is not None:
        lines.extend(
            [
                field("Total items", stats.total_nodes),
                field("Traversed dirs", stats.traversed_dirs),
                field("Dirs", stats.total_dirs),
                field("Files", stats.total_files),
                field("Ignored", stats.ignored),
                field("Skipped dirs", stats.skipped),
            ]
        )
    if compare:
        lines.extend(
            [
                field("Status (A)", node.side_status("a")),
                field("Status (B)", node.side_status("b")),
                field("Reason (A)", node.reason if node.origin != "b" else None),
                field("Reason (B)", node.reason_b if node.origin != "b" else node.reason),
                field("Pattern (A)", node.pattern if node.origin != "b" else None),
                field("Pattern (B)", node.pattern_b if node.origin != "b" else node.pattern),
            ]
        )
    return lines


__all__ = [
    "COST_BADGE_LOW_BELOW",
    "COST_BADGE_HIGH_ABOVE",
    "STATUS_DOT",
    "status_color",
    "cost_color",
    "compare_badge",
    "highlight_substring",
    "format_trace_row",
    "format_counts_header",
    "format_node_details",
]
