"""Unit tests for breakpoint selection and range building

Covers the default split on technical changes, the marker-driven split
options, the force-no-split override and the partition invariants.
"""

import unittest

from dvpackager.config import BreakpointPolicy
from dvpackager.exceptions import MalformedMetadata
from dvpackager.segmentation import build_ranges, make_breakpoint_selector

from factories import FRAME_UNITS, make_frames

def _ranges(frames, **policy):
    return build_ranges(frames, make_breakpoint_selector(BreakpointPolicy(**policy)))

def _spans(ranges):
    return [(r.start_frame, r.end_frame) for r in ranges]

class TestBreakpointSelector(unittest.TestCase):
    def test_stream_start_is_always_a_breakpoint(self):
        frame = make_frames(1)[0]
        for policy in (BreakpointPolicy(), BreakpointPolicy(force_no_split=True),
                       BreakpointPolicy(split_on_recording_start=True)):
            self.assertTrue(make_breakpoint_selector(policy)(None, frame))

    def test_technical_change_by_default(self):
        first, same, changed = make_frames(3, {2: {"chroma_subsampling": "4:2:0"}})
        is_breakpoint = make_breakpoint_selector(BreakpointPolicy())
        self.assertFalse(is_breakpoint(first, same))
        self.assertTrue(is_breakpoint(first, changed))

    def test_each_technical_attribute_counts(self):
        is_breakpoint = make_breakpoint_selector(BreakpointPolicy())
        for attribute, value in (("video_rate", "25/1"), ("chroma_subsampling", "4:2:0"),
                                 ("aspect_ratio", "16/9"), ("audio_rate", "32000"),
                                 ("channel_count", 4)):
            first, changed = make_frames(2, {1: {attribute: value}})
            self.assertTrue(is_breakpoint(first, changed), attribute)

    def test_markers_ignored_by_default(self):
        first, marked = make_frames(2, {1: {"recording_start": True, "timecode_discontinuity": True}})
        self.assertFalse(make_breakpoint_selector(BreakpointPolicy())(first, marked))

    def test_marker_flags(self):
        cases = (
            ("split_on_recording_start", "recording_start"),
            ("split_on_recording_timestamp_discontinuity", "recording_timestamp_discontinuity"),
            ("split_on_timecode_discontinuity", "timecode_discontinuity"),
        )
        for flag, marker in cases:
            first, marked = make_frames(2, {1: {marker: True}})
            self.assertTrue(make_breakpoint_selector(BreakpointPolicy(**{flag: True}))(first, marked))
            # A different marker does not match the enabled flag
            for other_flag, _ in cases:
                if other_flag != flag:
                    self.assertFalse(
                        make_breakpoint_selector(BreakpointPolicy(**{other_flag: True}))(first, marked)
                    )

    def test_marker_flags_narrow_technical_splits(self):
        first, changed = make_frames(2, {1: {"aspect_ratio": "16/9"}})
        is_breakpoint = make_breakpoint_selector(BreakpointPolicy(split_on_recording_start=True))
        self.assertFalse(is_breakpoint(first, changed))

    def test_force_no_split(self):
        first, changed = make_frames(2, {1: {"aspect_ratio": "16/9", "recording_start": True}})
        is_breakpoint = make_breakpoint_selector(
            BreakpointPolicy(force_no_split=True, split_on_recording_start=True)
        )
        self.assertFalse(is_breakpoint(first, changed))

class TestRangeBuilder(unittest.TestCase):
    def test_aspect_ratio_change_splits_in_two(self):
        frames = make_frames(3, {2: {"aspect_ratio": "16/9"}})
        ranges = _ranges(frames)
        self.assertEqual(_spans(ranges), [(0, 2), (2, 3)])
        self.assertFalse(ranges[0].is_open)
        self.assertTrue(ranges[1].is_open)
        self.assertEqual(ranges[1].first.aspect_ratio, "16/9")

    def test_recording_start_split(self):
        frames = make_frames(100, {50: {"recording_start": True}})
        ranges = _ranges(frames, split_on_recording_start=True)
        self.assertEqual(len(ranges), 2)
        self.assertEqual(ranges[1].start_frame, 50)
        self.assertEqual(ranges[1].first.index, 50)

    def test_force_no_split_yields_single_open_range(self):
        changes = {10: {"aspect_ratio": "16/9"}, 20: {"recording_start": True},
                   30: {"timecode_discontinuity": True}, 40: {"audio_rate": "32000"}}
        frames = make_frames(60, changes)
        ranges = _ranges(frames, force_no_split=True, split_on_recording_start=True,
                         split_on_timecode_discontinuity=True)
        self.assertEqual(_spans(ranges), [(0, 60)])
        self.assertTrue(ranges[0].is_open)
        self.assertEqual(ranges[0].end_pts, frames[-1].end_pts)

    def test_range_timing(self):
        frames = make_frames(5, {3: {"video_rate": "25/1"}, 4: {"video_rate": "25/1"}})
        first, last = _ranges(frames)
        self.assertEqual(first.start_pts, 0)
        self.assertEqual(first.end_pts, 3 * FRAME_UNITS)
        self.assertEqual(first.duration, 3 * FRAME_UNITS)
        self.assertEqual(first.frame_count, 3)
        self.assertEqual(first.byte_offset, 0)
        self.assertEqual(last.start_pts, 3 * FRAME_UNITS)
        self.assertEqual(last.end_pts, 5 * FRAME_UNITS)
        self.assertEqual(last.byte_offset, frames[3].byte_offset)
        self.assertEqual(last.start_pts_text, frames[3].pts_text)

    def test_ranges_partition_the_stream(self):
        scenarios = [
            ({}, {}),
            ({1: {"aspect_ratio": "16/9"}, 2: {"aspect_ratio": "4/3"}}, {}),
            ({0: {"recording_start": True}, 7: {"recording_start": True},
              8: {"recording_start": True}, 29: {"recording_start": True}},
             {"split_on_recording_start": True}),
            ({5: {"timecode_discontinuity": True}, 6: {"recording_timestamp_discontinuity": True}},
             {"split_on_timecode_discontinuity": True,
              "split_on_recording_timestamp_discontinuity": True}),
            ({i: {"channel_count": 2 + i % 2} for i in range(30)}, {}),
        ]
        for changes, policy in scenarios:
            frames = make_frames(30, changes)
            ranges = _ranges(frames, **policy)
            with self.subTest(policy=policy, changes=sorted(changes)):
                self.assertEqual(ranges[0].start_frame, 0)
                self.assertEqual(ranges[-1].end_frame, len(frames))
                for previous, current in zip(ranges, ranges[1:]):
                    self.assertEqual(previous.end_frame, current.start_frame)
                    self.assertEqual(previous.end_pts, current.start_pts)
                    self.assertFalse(previous.is_open)
                self.assertTrue(ranges[-1].is_open)
                self.assertEqual(sum(r.frame_count for r in ranges), len(frames))
                self.assertEqual([r.number for r in ranges], list(range(len(ranges))))

    def test_every_frame_in_one_range(self):
        frames = make_frames(12, {i: {"aspect_ratio": "16/9"} for i in range(4, 9)})
        ranges = _ranges(frames)
        owners = [sum(1 for r in ranges if r.start_frame <= i < r.end_frame) for i in range(12)]
        self.assertEqual(owners, [1] * 12)
        self.assertEqual(_spans(ranges), [(0, 4), (4, 9), (9, 12)])

    def test_empty_stream_is_rejected(self):
        with self.assertRaises(MalformedMetadata):
            _ranges([])

    def test_single_frame_stream(self):
        ranges = _ranges(make_frames(1))
        self.assertEqual(_spans(ranges), [(0, 1)])
        self.assertTrue(ranges[0].is_open)

if __name__ == "__main__":
    unittest.main()
