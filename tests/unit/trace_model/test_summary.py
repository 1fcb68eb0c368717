"""Tests for cross-checking the terminal summary record against the tree."""

from __future__ import annotations

import unittest

from traceview.trace_model import SummaryMismatch, build_trace_index, check_summary
from traceview.trace_model.types import SummaryItem, TraceEvent, TraceSummary


class CheckSummaryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.index = build_trace_index(
            [
                TraceEvent(event="include", path="src/main.go"),
                TraceEvent(event="skip", path="vendor", reason="pattern"),
                TraceEvent(event="ignore", path="debug.log", reason="pattern"),
            ]
        )

    def test_consistent_summary_has_no_mismatches(self) -> None:
        summary = TraceSummary(
            included=(SummaryItem("src/main.go", "file"),),
            ignored=(SummaryItem("vendor", "dir", "pattern"), SummaryItem("./debug.log", "file", "pattern")),
        )
        self.assertEqual(check_summary(self.index, summary), [])

    def test_disagreements_and_unseen_paths_are_reported_in_order(self) -> None:
        summary = TraceSummary(
            included=(SummaryItem("debug.log"), SummaryItem("missing.txt")),
            ignored=(SummaryItem("src/main.go", reason="pattern"),),
        )
        self.assertEqual(
            check_summary(self.index, summary),
            [
                SummaryMismatch("debug.log", "included", "ignored"),
                SummaryMismatch("missing.txt", "included", None),
                SummaryMismatch("src/main.go", "ignored", "included", "pattern"),
            ],
        )


if __name__ == "__main__":
    unittest.main()
