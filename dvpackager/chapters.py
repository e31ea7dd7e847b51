"""Chapter markers for one range

Every frame carrying a recording-start or discontinuity marker becomes a
chapter, whether or not it also split the stream. Chapter times are kept in
timebase units relative to the start of the range, and written as an
ffmpeg metadata file merged into the output's global metadata.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from .config import TIMEBASE
from .metadata.records import FrameRecord
from .segmentation.ranges import Range

_FFMETADATA_ESCAPE = re.compile(r"([=;#\\\n])")


@dataclass(frozen=True)
class Chapter:
    start: int
    end: int
    title: str


def chapter_title(frame: FrameRecord, number: int) -> str:
    """Human-readable label from timecode and recording time."""
    parts = [part for part in (frame.timecode, frame.recording_timestamp) if part]
    return " - ".join(parts) if parts else f"Chapter {number}"


def synthesize_chapters(frames: Sequence[FrameRecord], rng: Range) -> List[Chapter]:
    """
    Build the chapters of a range.

    Each chapter ends where the next begins; the last ends at the end of
    the range. A marker on the frame that starts the next range is not
    part of this one.
    """
    starts = []
    for frame in frames[rng.start_frame:rng.end_frame]:
        if frame.has_marker and rng.contains(frame.pts):
            starts.append((frame.pts - rng.start_pts, frame))

    chapters = []
    for number, (start, frame) in enumerate(starts, 1):
        end = starts[number][0] if number < len(starts) else rng.duration
        chapters.append(Chapter(start, end, chapter_title(frame, number)))
    return chapters


def _escape(value: str) -> str:
    return _FFMETADATA_ESCAPE.sub(r"\\\1", value)


def render_ffmetadata(chapters: Sequence[Chapter]) -> str:
    lines = [";FFMETADATA1"]
    for chapter in chapters:
        lines.extend([
            "",
            "[CHAPTER]",
            f"TIMEBASE=1/{TIMEBASE}",
            f"START={chapter.start}",
            f"END={chapter.end}",
            f"title={_escape(chapter.title)}",
        ])
    return "\n".join(lines) + "\n"


def write_ffmetadata(chapters: Sequence[Chapter], path: Path) -> Path:
    path.write_text(render_ffmetadata(chapters), encoding="utf-8")
    return path
