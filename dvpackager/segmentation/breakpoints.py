"""Breakpoint selection

A breakpoint is a frame that starts a new range. The decision is a pure
function of the policy, the first frame of the range being built and the
candidate frame.
"""

from typing import Callable, Optional

from ..config import BreakpointPolicy
from ..metadata.records import FrameRecord

BreakpointSelector = Callable[[Optional[FrameRecord], FrameRecord], bool]


def make_breakpoint_selector(policy: BreakpointPolicy) -> BreakpointSelector:
    """
    Build the breakpoint predicate for a policy.

    The predicate takes the first frame of the current range (None at the
    start of the stream) and a candidate frame.

    - force_no_split: only the first frame of the stream is a breakpoint.
    - Marker flags: a frame carrying an enabled marker is a breakpoint.
    - No marker flag enabled: a change of technical characteristics
      relative to the range's first frame is a breakpoint.
    """
    if policy.force_no_split:
        def is_breakpoint(range_first: Optional[FrameRecord], frame: FrameRecord) -> bool:
            return range_first is None
        return is_breakpoint

    def is_breakpoint(range_first: Optional[FrameRecord], frame: FrameRecord) -> bool:
        if range_first is None:
            return True
        if policy.split_on_recording_start and frame.recording_start:
            return True
        if policy.split_on_recording_timestamp_discontinuity and frame.recording_timestamp_discontinuity:
            return True
        if policy.split_on_timecode_discontinuity and frame.timecode_discontinuity:
            return True
        if not policy.selective:
            return frame.technical != range_first.technical
        return False

    return is_breakpoint
