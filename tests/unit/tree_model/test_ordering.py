"""Tests for child ordering strategies."""

from __future__ import annotations

import unittest
from types import MappingProxyType

from traceview.trace_model import build_trace_index, compute_subtree_stats
from traceview.trace_model.types import ROOT_ID, TraceCounts, TraceEvent, TraceIndex, TraceNode
from traceview.tree_model import order_children


def _cost_example() -> TraceIndex:
    events = [
        TraceEvent(event="include", path="b.txt", kind="file"),
        TraceEvent(event="enter", path="a"),
    ]
    events.extend(TraceEvent(event="include", path=f"c/f{i}.txt") for i in range(500))
    return build_trace_index(events)


def _names(nodes: list[TraceNode]) -> list[str]:
    return [node.name for node in nodes]


class OrderChildrenTests(unittest.TestCase):
    def test_cost_ordering_puts_heaviest_directory_first(self) -> None:
        index = _cost_example()
        stats = compute_subtree_stats(index)
        ordered = order_children(index.root.children, index, "cost", stats)
        self.assertEqual(_names(ordered), ["c", "a", "b.txt"])

    def test_scan_ordering_keeps_discovery_order_with_dirs_first(self) -> None:
        index = _cost_example()
        ordered = order_children(index.root.children, index, "scan")
        self.assertEqual(_names(ordered), ["a", "c", "b.txt"])

    def test_alpha_ordering_is_case_insensitive(self) -> None:
        index = build_trace_index(
            [
                TraceEvent(event="include", path="beta.txt"),
                TraceEvent(event="include", path="Alpha.txt"),
                TraceEvent(event="include", path="Zeta/x.txt"),
                TraceEvent(event="include", path="docs/y.txt"),
            ]
        )
        ordered = order_children(index.root.children, index, "alpha")
        self.assertEqual(_names(ordered), ["docs", "Zeta", "Alpha.txt", "beta.txt"])

    def test_alpha_ordering_collates_accented_names_with_their_base_letter(self) -> None:
        index = build_trace_index(
            [
                TraceEvent(event="include", path="zebra.txt"),
                TraceEvent(event="include", path="éclair.txt"),
                TraceEvent(event="include", path="fig.txt"),
                TraceEvent(event="include", path="eclair.txt"),
            ]
        )
        ordered = order_children(index.root.children, index, "alpha")
        self.assertEqual(_names(ordered), ["eclair.txt", "éclair.txt", "fig.txt", "zebra.txt"])

    def test_skipped_paths_sort_with_directories(self) -> None:
        nodes = {
            ROOT_ID: TraceNode(id=ROOT_ID, name=ROOT_ID, kind="dir", children=("z.txt", "vendor")),
            "z.txt": TraceNode(id="z.txt", name="z.txt", kind="file", status="included"),
            "vendor": TraceNode(id="vendor", name="vendor", kind="file", status="skipped"),
        }
        index = TraceIndex(root_id=ROOT_ID, nodes=MappingProxyType(nodes), counts=TraceCounts())
        self.assertEqual(_names(order_children(index.root.children, index)), ["vendor", "z.txt"])

    def test_ignored_metric_orders_by_ignored_descendants(self) -> None:
        index = build_trace_index(
            [
                TraceEvent(event="include", path="big/a.txt"),
                TraceEvent(event="include", path="big/b.txt"),
                TraceEvent(event="include", path="big/c.txt"),
                TraceEvent(event="ignore", path="noisy/a.log"),
                TraceEvent(event="ignore", path="noisy/b.log"),
            ]
        )
        stats = compute_subtree_stats(index)
        by_total = order_children(index.root.children, index, "cost", stats, "total")
        by_ignored = order_children(index.root.children, index, "cost", stats, "ignored")
        self.assertEqual(_names(by_total), ["big", "noisy"])
        self.assertEqual(_names(by_ignored), ["noisy", "big"])

    def test_dangling_ids_are_dropped(self) -> None:
        index = _cost_example()
        ordered = order_children(("a", "ghost", "b.txt"), index)
        self.assertEqual(_names(ordered), ["a", "b.txt"])

    def test_invalid_strategy_or_metric_raises(self) -> None:
        index = _cost_example()
        with self.assertRaises(ValueError):
            order_children(index.root.children, index, "size")
        with self.assertRaises(ValueError):
            order_children(index.root.children, index, "cost", cost_metric="bytes")


if __name__ == "__main__":
    unittest.main()
