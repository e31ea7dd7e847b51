"""
Range building

Responsibilities:
  - Fold the ordered frames into contiguous, non-overlapping ranges
  - Close a range just before each breakpoint frame
  - Leave the last range open so it runs to the end of the stream
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from ..exceptions import MalformedMetadata
from ..metadata.records import FrameRecord
from .breakpoints import BreakpointSelector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Range:
    """
    A span of frames that becomes one output file.

    Attributes:
        number: Position of the range within the stream
        start_frame: Position of the first frame
        end_frame: Position one past the last frame
        start_pts: Start time in timebase units
        end_pts: End time in timebase units
        first: The range's first frame, carrying its technical characteristics
        is_open: True for the last range, which extends to end of stream
    """
    number: int
    start_frame: int
    end_frame: int
    start_pts: int
    end_pts: int
    first: FrameRecord
    is_open: bool = False

    @property
    def duration(self) -> int:
        return self.end_pts - self.start_pts

    @property
    def frame_count(self) -> int:
        return self.end_frame - self.start_frame

    @property
    def start_pts_text(self) -> str:
        return self.first.pts_text

    @property
    def byte_offset(self) -> Optional[int]:
        return self.first.byte_offset

    def contains(self, pts: int) -> bool:
        return self.start_pts <= pts <= self.end_pts


def _stream_end(frames: Sequence[FrameRecord]) -> int:
    last = frames[-1]
    return last.end_pts if last.end_pts is not None else last.pts


def iter_ranges(frames: Sequence[FrameRecord], is_breakpoint: BreakpointSelector) -> Iterator[Range]:
    """
    Yield the ranges of a frame sequence in order.

    Carries the open range's start position and first frame forward; each
    breakpoint closes the open range at the preceding frame.
    """
    start: Optional[int] = None
    first: Optional[FrameRecord] = None
    number = 0

    for position, frame in enumerate(frames):
        if not is_breakpoint(first, frame):
            continue
        if first is not None:
            yield Range(number, start, position, first.pts, frame.pts, first)
            number += 1
        start, first = position, frame

    if first is not None:
        yield Range(number, start, len(frames), first.pts, _stream_end(frames), first, is_open=True)


def build_ranges(frames: Sequence[FrameRecord], is_breakpoint: BreakpointSelector) -> List[Range]:
    """
    Partition frames into ranges.

    Raises:
        MalformedMetadata: If there are no frames, or the selector does not
            open a range at the first frame
    """
    if not frames:
        raise MalformedMetadata("Cannot build ranges from an empty stream", module="ranges")
    if not is_breakpoint(None, frames[0]):
        raise MalformedMetadata("First frame must open a range", module="ranges")

    ranges = list(iter_ranges(frames, is_breakpoint))
    logger.info("Built %d range(s) from %d frames", len(ranges), len(frames))
    return ranges
