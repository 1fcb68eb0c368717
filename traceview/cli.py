"""Command-line front door for traceview.

Parses CLI options, loads one trace (or two in compare mode), and prints the
reconstructed tree. Options that are not given fall back to persisted
preferences.
"""

from __future__ import annotations

import argparse
import json
import locale
import logging
import shutil
import sys
from pathlib import Path

from .ansi import clip_ansi_line
from .runtime import config
from .trace_model import (
    ROOT_ID,
    IndexMismatchError,
    IngestResult,
    TraceIndex,
    check_summary,
    compute_subtree_stats,
    index_to_dict,
    ingest_trace,
    merge_indexes,
    normalize_trace_path,
)
from .tree_model import (
    COST_METRIC_CHOICES,
    ORDER_BY_CHOICES,
    build_visible_rows,
    format_counts_header,
    format_node_details,
    format_trace_row,
)
from .ui_theme import available_theme_names, resolve_theme

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_render_width() -> int:
    """Resolve default row width from current terminal size."""
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def _read_trace(path: Path) -> str:
    if not path.is_file():
        raise SystemExit(f"Path not found: {path}")
    return path.read_text(encoding="utf-8", errors="replace")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reconstruct a scanner trace (JSON lines) into a browsable path tree."
    )
    parser.add_argument("trace", help="Path to a newline-delimited JSON trace file.")
    parser.add_argument("--compare", metavar="TRACE_B", help="Second trace to merge against the first.")
    parser.add_argument("--search", default="", help="Case-insensitive substring filter on node paths.")
    excluded = parser.add_mutually_exclusive_group()
    excluded.add_argument(
        "--show-excluded",
        dest="show_excluded",
        action="store_const",
        const=True,
        default=None,
        help="Show ignored and skipped nodes (dimmed).",
    )
    excluded.add_argument(
        "--hide-excluded",
        dest="show_excluded",
        action="store_const",
        const=False,
        help="Hide ignored and skipped nodes.",
    )
    parser.add_argument("--order", choices=ORDER_BY_CHOICES, default=None, help="Child ordering strategy.")
    parser.add_argument(
        "--cost-metric",
        choices=COST_METRIC_CHOICES,
        default=None,
        help="Metric used for cost ordering and badges.",
    )
    parser.add_argument(
        "--expand",
        metavar="ID",
        action="append",
        default=None,
        help="Expand node ID (repeatable). Defaults to persisted expansion, or root.",
    )
    parser.add_argument("--expand-all", action="store_true", help="Expand every node that has children.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Clip rows to this width (default: terminal width on TTY, unclipped otherwise).",
    )
    parser.add_argument("--dump-index", metavar="PATH", help="Write the serialized index as JSON to PATH.")
    parser.add_argument(
        "--check-summary",
        action="store_true",
        help="Cross-check the trailing summary record against the reconstructed tree.",
    )
    parser.add_argument("--details", metavar="ID", help="Print the detail panel for node ID and exit.")
    parser.add_argument("--save-prefs", action="store_true", help="Persist the effective view options.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    return parser


def _load_results(args: argparse.Namespace) -> list[IngestResult]:
    paths = [Path(args.trace)]
    if args.compare is not None:
        paths.append(Path(args.compare))
    texts = [_read_trace(path) for path in paths]
    return [ingest_trace(text, label) for text, label in zip(texts, ("A", "B"))]


def _resolve_index(results: list[IngestResult]) -> TraceIndex:
    if len(results) == 1:
        return results[0].index
    try:
        return merge_indexes(results[0].index, results[1].index)
    except IndexMismatchError as exc:
        raise SystemExit(str(exc)) from exc


def _expanded_ids(args: argparse.Namespace, index: TraceIndex) -> set[str]:
    if args.expand_all:
        return {node_id for node_id, node in index.nodes.items() if node.children}
    if args.expand is not None:
        return {normalize_trace_path(item) for item in args.expand}
    persisted = config.load_expanded_ids()
    return persisted if persisted else {ROOT_ID}


def _report_decode_errors(results: list[IngestResult]) -> None:
    for result in results:
        for error in result.errors:
            print(f"trace {result.label}: {error.message}", file=sys.stderr)


def _report_summary_mismatches(results: list[IngestResult]) -> None:
    for result in results:
        if result.summary is None:
            print(f"trace {result.label}: no summary record", file=sys.stderr)
            continue
        mismatches = check_summary(result.index, result.summary)
        if not mismatches:
            print(f"trace {result.label}: summary matches")
            continue
        for mismatch in mismatches:
            actual = mismatch.actual if mismatch.actual is not None else "missing"
            print(f"trace {result.label}: {mismatch.path}: summary says {mismatch.expected}, tree says {actual}")


def main() -> None:
    """Parse CLI arguments, ingest trace(s), and print the visible tree.

    User errors (missing files, mismatched compare roots, unknown node ids)
    exit through ``SystemExit`` with a message.
    """
    args = _build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.debug("Could not apply the environment collation locale; using the default")

    results = _load_results(args)
    index = _resolve_index(results)
    compare = index.compare
    stats = compute_subtree_stats(index)

    if args.details is not None:
        node_id = normalize_trace_path(args.details)
        node = index.nodes.get(node_id)
        if node is None:
            raise SystemExit(f"Node not found: {node_id}")
        for line in format_node_details(node, stats.get(node_id), compare=compare):
            print(line)
        return

    show_excluded = args.show_excluded if args.show_excluded is not None else config.load_show_excluded()
    order_by = args.order or config.load_order_by()
    cost_metric = args.cost_metric or config.load_cost_metric()
    theme_name = args.theme or config.load_theme_name()
    expanded = _expanded_ids(args, index)
    color = not args.no_color and sys.stdout.isatty()
    theme = resolve_theme(theme_name, no_color=not color)
    max_cols = args.max_cols
    if max_cols is None and sys.stdout.isatty():
        max_cols = _default_render_width()

    stats_a = stats_b = None
    if compare:
        stats_a = compute_subtree_stats(results[0].index)
        stats_b = compute_subtree_stats(results[1].index)

    rows = build_visible_rows(
        index,
        expanded,
        show_excluded,
        search=args.search,
        order_by=order_by,
        stats=stats,
        cost_metric=cost_metric,
    )
    lines = [format_counts_header(index.counts, theme)]
    for row in rows:
        lines.append(
            format_trace_row(
                row,
                stats,
                compare=compare,
                stats_a=stats_a,
                stats_b=stats_b,
                cost_metric=cost_metric,
                search_query=args.search,
                theme=theme,
            )
        )
    for line in lines:
        if max_cols is not None:
            line = clip_ansi_line(line, max_cols)
        sys.stdout.write(line + "\n")

    _report_decode_errors(results)
    if args.check_summary:
        _report_summary_mismatches(results)

    if args.dump_index is not None:
        dump_path = Path(args.dump_index)
        dump_path.write_text(json.dumps(index_to_dict(index), indent=2) + "\n", encoding="utf-8")
        logger.info("Wrote serialized index to %s", dump_path)

    if args.save_prefs:
        config.save_show_excluded(show_excluded)
        config.save_order_by(order_by)
        config.save_cost_metric(cost_metric)
        config.save_expanded_ids(expanded)
        if args.theme:
            config.save_theme_name(args.theme)


if __name__ == "__main__":
    main()
