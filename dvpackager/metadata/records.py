"""Frame-level records read from the analysis log"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

# Media formats reported for raw, unwrapped DV essence
ELEMENTARY_FORMATS = ("DV",)


@dataclass(frozen=True)
class FrameRecord:
    """
    One captured frame.

    Attributes:
        index: Frame ordinal within the stream
        pts: Presentation timestamp in timebase units
        pts_text: The timestamp exactly as written in the log
        end_pts: End of the frame in timebase units, when known
        timecode: Embedded tape timecode
        recording_timestamp: Embedded recording date/time, None when absent or invalid
        byte_offset: Position of the frame in the raw stream
        size: Length of the frame in bytes
        recording_start: The camera signalled a new recording
        recording_timestamp_discontinuity: Recording time did not advance as expected
        timecode_discontinuity: Timecode did not advance as expected
    """
    index: int
    pts: int
    pts_text: str
    end_pts: Optional[int] = None
    timecode: Optional[str] = None
    recording_timestamp: Optional[str] = None
    byte_offset: Optional[int] = None
    size: Optional[int] = None
    video_rate: Optional[str] = None
    chroma_subsampling: Optional[str] = None
    aspect_ratio: Optional[str] = None
    audio_rate: Optional[str] = None
    channel_count: Optional[int] = None
    recording_start: bool = False
    recording_timestamp_discontinuity: bool = False
    timecode_discontinuity: bool = False

    @property
    def technical(self) -> Tuple:
        """Attributes whose change makes a stream unrepresentable in one file."""
        return (
            self.video_rate,
            self.chroma_subsampling,
            self.aspect_ratio,
            self.audio_rate,
            self.channel_count,
        )

    @property
    def has_marker(self) -> bool:
        return (
            self.recording_start
            or self.recording_timestamp_discontinuity
            or self.timecode_discontinuity
        )


@dataclass
class MediaSource:
    """A parsed analysis log: the media it describes and its frames."""
    path: Path
    format: str
    frames: List[FrameRecord]

    @property
    def is_elementary(self) -> bool:
        """True for raw DV, addressable by byte offset."""
        return self.format.upper() in ELEMENTARY_FORMATS

    @property
    def end_pts(self) -> int:
        last = self.frames[-1]
        return last.end_pts if last.end_pts is not None else last.pts
