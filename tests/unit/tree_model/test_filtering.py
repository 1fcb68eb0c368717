"""Tests for visibility filtering and flattened row construction.

Search must reveal a match's ancestor chain without leaking into sibling
subtrees, and collapsed directories must hide their children.
"""

from __future__ import annotations

import unittest

from traceview.trace_model import build_trace_index, merge_indexes
from traceview.trace_model.types import ROOT_ID, TraceEvent, TraceIndex
from traceview.tree_model import build_visible_rows, compute_visibility


def _index() -> TraceIndex:
    return build_trace_index(
        [
            TraceEvent(event="include", path="a/b/target.txt"),
            TraceEvent(event="ignore", path="a/other.txt", reason="pattern"),
            TraceEvent(event="include", path="z/x.txt"),
            TraceEvent(event="skip", path="vendor", reason="pattern"),
        ]
    )


def _rows(index: TraceIndex, **kwargs) -> list[tuple[str, int]]:
    return [(row.node.id, row.depth) for row in build_visible_rows(index, **kwargs)]


class VisibilityTests(unittest.TestCase):
    def test_search_reveals_ancestors_but_not_siblings(self) -> None:
        visible = compute_visibility(_index(), show_excluded=True, search="TARGET")
        self.assertTrue(visible["a/b/target.txt"])
        self.assertTrue(visible["a/b"])
        self.assertTrue(visible["a"])
        self.assertTrue(visible[ROOT_ID])
        self.assertFalse(visible["a/other.txt"])
        self.assertFalse(visible["z"])
        self.assertFalse(visible["vendor"])

    def test_hidden_excluded_nodes_stay_hidden_without_included_descendants(self) -> None:
        visible = compute_visibility(_index(), show_excluded=False)
        self.assertFalse(visible["vendor"])
        self.assertFalse(visible["a/other.txt"])
        self.assertTrue(visible["a"])

    def test_b_side_inclusion_makes_a_merged_node_visible(self) -> None:
        a = build_trace_index([TraceEvent(event="ignore", path="conf.yml", reason="pattern")])
        b = build_trace_index([TraceEvent(event="include", path="conf.yml")])
        merged = merge_indexes(a, b)
        self.assertTrue(compute_visibility(merged, show_excluded=False)["conf.yml"])


class BuildVisibleRowsTests(unittest.TestCase):
    def test_collapsed_directories_hide_children(self) -> None:
        rows = _rows(_index(), expanded=set(), show_excluded=True)
        self.assertEqual(rows, [("a", 0), ("z", 0), ("vendor", 0)])

    def test_expanded_directories_show_children_one_level_deeper(self) -> None:
        rows = _rows(_index(), expanded={ROOT_ID, "a"}, show_excluded=True)
        self.assertEqual(rows, [("a", 0), ("a/b", 1), ("a/other.txt", 1), ("z", 0), ("vendor", 0)])

    def test_search_forces_matches_open_without_touching_expanded(self) -> None:
        expanded: set[str] = set()
        rows = _rows(_index(), expanded=expanded, show_excluded=False, search="target")
        self.assertEqual(rows, [("a", 0), ("a/b", 1), ("a/b/target.txt", 2)])
        self.assertEqual(expanded, set())

    def test_excluded_rows_are_dimmed_only_when_shown(self) -> None:
        shown = build_visible_rows(_index(), {"a"}, show_excluded=True)
        dimmed = {row.node.id for row in shown if row.dimmed}
        self.assertEqual(dimmed, {"a/other.txt", "vendor"})

        hidden = build_visible_rows(_index(), {"a"}, show_excluded=False)
        self.assertEqual([row.node.id for row in hidden], ["a", "a/b", "z"])
        self.assertFalse(any(row.dimmed for row in hidden))

    def test_row_flags_reflect_children_and_expansion(self) -> None:
        rows = {row.node.id: row for row in build_visible_rows(_index(), {"a"}, show_excluded=True)}
        self.assertTrue(rows["a"].has_children)
        self.assertTrue(rows["a"].is_expanded)
        self.assertTrue(rows["a/b"].has_children)
        self.assertFalse(rows["a/b"].is_expanded)
        self.assertFalse(rows["a/other.txt"].has_children)

    def test_cost_ordering_computes_stats_when_not_given(self) -> None:
        index = build_trace_index(
            [TraceEvent(event="include", path="small/x.txt")]
            + [TraceEvent(event="include", path=f"large/f{i}.txt") for i in range(5)]
        )
        rows = _rows(index, expanded=set(), show_excluded=True, order_by="cost")
        self.assertEqual(rows, [("large", 0), ("small", 0)])

    def test_invalid_options_raise(self) -> None:
        with self.assertRaises(ValueError):
            build_visible_rows(_index(), set(), True, order_by="random")
        with self.assertRaises(ValueError):
            build_visible_rows(_index(), set(), True, cost_metric="bytes")


if __name__ == "__main__":
    unittest.main()
