"""Tests for compare-mode merging of two trace indices."""

from __future__ import annotations

import unittest
from types import MappingProxyType

from traceview.trace_model import IndexMismatchError, build_trace_index, merge_indexes
from traceview.trace_model.types import TraceCounts, TraceEvent, TraceIndex, TraceNode


def _index_a() -> TraceIndex:
    return build_trace_index(
        [
            TraceEvent(event="include", path="src/main.go"),
            TraceEvent(event="include", path="shared.txt"),
            TraceEvent(event="include", path="only_a.txt"),
        ]
    )


def _index_b() -> TraceIndex:
    return build_trace_index(
        [
            TraceEvent(event="ignore", path="shared.txt", reason="pattern", pattern="*.txt"),
            TraceEvent(event="include", path="src/util.go"),
            TraceEvent(event="include", path="only_b.txt"),
        ]
    )


class MergeIndexesTests(unittest.TestCase):
    def test_membership_is_the_union_of_both_sides(self) -> None:
        a, b = _index_a(), _index_b()
        merged = merge_indexes(a, b)

        self.assertTrue(merged.compare)
        self.assertEqual(set(merged.nodes), set(a.nodes) | set(b.nodes))
        self.assertEqual(set(merge_indexes(b, a).nodes), set(merged.nodes))

    def test_children_keep_a_order_then_b_only(self) -> None:
        merged = merge_indexes(_index_a(), _index_b())
        self.assertEqual(merged.nodes["src"].children, ("src/main.go", "src/util.go"))
        self.assertEqual(merged.root.children, ("src", "shared.txt", "only_a.txt", "only_b.txt"))

    def test_shared_paths_put_a_in_primary_slot(self) -> None:
        merged = merge_indexes(_index_a(), _index_b())
        shared = merged.nodes["shared.txt"]
        self.assertEqual(shared.origin, "both")
        self.assertEqual(shared.status, "included")
        self.assertEqual(shared.status_b, "ignored")
        self.assertEqual(shared.reason_b, "pattern")
        self.assertEqual(shared.pattern_b, "*.txt")

    def test_merge_is_asymmetric_on_primary_status(self) -> None:
        a, b = _index_a(), _index_b()
        self.assertEqual(merge_indexes(a, b).nodes["shared.txt"].status, "included")
        self.assertEqual(merge_indexes(b, a).nodes["shared.txt"].status, "ignored")

    def test_one_sided_paths_carry_their_side_and_origin(self) -> None:
        merged = merge_indexes(_index_a(), _index_b())

        only_a = merged.nodes["only_a.txt"]
        self.assertEqual((only_a.status, only_a.status_b, only_a.origin), ("included", "unknown", "a"))
        self.assertEqual(only_a.side_status("a"), "included")
        self.assertEqual(only_a.side_status("b"), "unknown")

        only_b = merged.nodes["only_b.txt"]
        self.assertEqual((only_b.status, only_b.status_b, only_b.origin), ("included", "unknown", "b"))
        self.assertEqual(only_b.side_status("a"), "unknown")
        self.assertEqual(only_b.side_status("b"), "included")

    def test_counts_are_summed(self) -> None:
        a, b = _index_a(), _index_b()
        merged = merge_indexes(a, b)
        self.assertEqual(merged.counts, TraceCounts(included=5, ignored=1, skipped=0))

    def test_kind_upgrades_to_dir_when_b_saw_a_directory(self) -> None:
        a = build_trace_index([TraceEvent(event="include", path="thing")])
        b = build_trace_index([TraceEvent(event="enter", path="thing")])
        self.assertEqual(merge_indexes(a, b).nodes["thing"].kind, "dir")

    def test_root_mismatch_raises(self) -> None:
        a = _index_a()
        other = TraceIndex(
            root_id="elsewhere",
            nodes=MappingProxyType({"elsewhere": TraceNode(id="elsewhere", name="elsewhere", kind="dir")}),
            counts=TraceCounts(),
        )
        with self.assertRaises(IndexMismatchError):
            merge_indexes(a, other)
        with self.assertRaises(ValueError):
            merge_indexes(other, a)


if __name__ == "__main__":
    unittest.main()
