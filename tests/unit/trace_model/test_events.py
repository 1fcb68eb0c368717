"""Tests for trace line decoding, path normalization, and kind inference."""

from __future__ import annotations

import json
import unittest

from traceview.trace_model import events
from traceview.trace_model.types import ROOT_ID, SummaryItem, TraceEvent


class PathHelperTests(unittest.TestCase):
    def test_missing_empty_and_dot_paths_map_to_root(self) -> None:
        for raw in (None, "", ".", "./"):
            with self.subTest(raw=raw):
                self.assertEqual(events.normalize_trace_path(raw), ROOT_ID)

    def test_leading_dot_slash_is_stripped(self) -> None:
        self.assertEqual(events.normalize_trace_path("./src/main.go"), "src/main.go")
        self.assertEqual(events.normalize_trace_path("src/main.go"), "src/main.go")

    def test_parent_id_walks_up_to_root(self) -> None:
        self.assertEqual(events.parent_id("a/b/c"), "a/b")
        self.assertEqual(events.parent_id("a"), ROOT_ID)
        self.assertIsNone(events.parent_id(ROOT_ID))

    def test_node_name_is_final_segment(self) -> None:
        self.assertEqual(events.node_name("a/b/c.txt"), "c.txt")
        self.assertEqual(events.node_name("top"), "top")
        self.assertEqual(events.node_name(ROOT_ID), ROOT_ID)


class KindInferenceTests(unittest.TestCase):
    def test_include_uses_carried_kind_and_falls_back_to_file(self) -> None:
        self.assertEqual(events.infer_kind(TraceEvent(event="include", kind="dir")), "dir")
        self.assertEqual(events.infer_kind(TraceEvent(event="include", kind="symlink")), "symlink")
        self.assertEqual(events.infer_kind(TraceEvent(event="include", kind="socket")), "file")
        self.assertEqual(events.infer_kind(TraceEvent(event="include")), "file")

    def test_enter_and_skip_imply_directories(self) -> None:
        self.assertEqual(events.infer_kind(TraceEvent(event="enter")), "dir")
        self.assertEqual(events.infer_kind(TraceEvent(event="skip")), "dir")

    def test_other_events_default_to_file(self) -> None:
        for tag in ("ignore", "temp", "normalize", "error", None):
            with self.subTest(tag=tag):
                self.assertEqual(events.infer_kind(TraceEvent(event=tag)), "file")


class DecodeTests(unittest.TestCase):
    def test_event_from_dict_reads_wire_field_names(self) -> None:
        raw = json.loads(
            '{"event":"ignore","path":"node_modules","reason":"pattern","pattern":"**/node_modules",'
            '"canSkipDir":true,"tempExpired":false,"normalizedPath":"x","autoNormalize":true,"message":"m"}'
        )
        event = events.event_from_dict(raw)
        self.assertEqual(
            event,
            TraceEvent(
                event="ignore",
                path="node_modules",
                reason="pattern",
                pattern="**/node_modules",
                can_skip_dir=True,
                temp_expired=False,
                normalized_path="x",
                auto_normalize=True,
                message="m",
            ),
        )

    def test_event_from_dict_treats_wrong_types_as_absent(self) -> None:
        event = events.event_from_dict({"event": "include", "path": 7, "kind": None, "canSkipDir": "yes"})
        self.assertEqual(event.event, "include")
        self.assertIsNone(event.path)
        self.assertIsNone(event.kind)
        self.assertIsNone(event.can_skip_dir)

    def test_unknown_event_tag_is_kept_verbatim(self) -> None:
        self.assertEqual(events.event_from_dict({"event": "teleport"}).event, "teleport")

    def test_decode_line_rejects_non_objects(self) -> None:
        with self.assertRaises(ValueError):
            events.decode_line("[1, 2]")
        with self.assertRaises(ValueError):
            events.decode_line("{not json")
        self.assertEqual(events.decode_line('{"event":"enter"}'), {"event": "enter"})

    def test_summary_from_dict_skips_malformed_entries(self) -> None:
        summary = events.summary_from_dict(
            {
                "event": "summary",
                "included": [{"Path": "a.txt", "Kind": "file", "Reason": ""}, "bogus", {"Kind": "file"}],
                "ignored": [{"Path": "node_modules", "Kind": "dir", "Reason": "pattern"}],
            }
        )
        self.assertEqual(summary.included, (SummaryItem(path="a.txt", kind="file", reason=None),))
        self.assertEqual(summary.ignored, (SummaryItem(path="node_modules", kind="dir", reason="pattern"),))


if __name__ == "__main__":
    unittest.main()
