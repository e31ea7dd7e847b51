"""Audio/video synchronization check of produced outputs

Advisory only: a mismatch is reported, never raised, and the check is
skipped when ffprobe is unavailable or cannot report both durations.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .config import SYNC_TOLERANCE_MS, TIMEBASE
from .ffprobe.exec import MetadataError, get_media_property, get_stream_tag
from .timebase import parse_pts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncMismatch:
    output_file: Path
    video_ms: int
    audio_ms: int

    @property
    def difference_ms(self) -> int:
        return abs(self.video_ms - self.audio_ms)

    def __str__(self) -> str:
        return (
            f"{self.output_file.name}: video {self.video_ms}ms vs audio {self.audio_ms}ms "
            f"({self.difference_ms}ms apart)"
        )


def stream_duration(output_file: Path, stream_type: str, ffprobe: str) -> float:
    """
    Duration of the first stream of a type, in seconds.

    Matroska leaves the stream duration unset and keeps it in the DURATION
    tag; the container duration is the last resort.

    Raises:
        MetadataError: If no duration can be read
    """
    try:
        return get_media_property(output_file, stream_type, "duration", 0, ffprobe)
    except MetadataError as e:
        logger.debug("No %s stream duration in %s: %s", stream_type, output_file.name, e)
    try:
        tag = get_stream_tag(output_file, stream_type, "DURATION", 0, ffprobe)
    except MetadataError:
        logger.warning("Using container duration for %s validation of %s", stream_type, output_file.name)
        return get_media_property(output_file, "format", "duration", 0, ffprobe)
    try:
        return parse_pts(tag) / TIMEBASE
    except ValueError as e:
        raise MetadataError(f"Unreadable DURATION tag {tag!r}", "DURATION") from e


def read_durations_ms(output_file: Path, ffprobe: str) -> Tuple[int, int]:
    """Return (video, audio) track durations in milliseconds."""
    video = stream_duration(output_file, "video", ffprobe)
    audio = stream_duration(output_file, "audio", ffprobe)
    return round(video * 1000), round(audio * 1000)


def check_av_sync(
    output_file: Path,
    ffprobe: Optional[str],
    tolerance_ms: int = SYNC_TOLERANCE_MS
) -> Optional[SyncMismatch]:
    """
    Compare the video and audio durations of an output.

    Returns:
        SyncMismatch when they differ by more than tolerance_ms, else None
    """
    if ffprobe is None:
        return None
    try:
        video_ms, audio_ms = read_durations_ms(output_file, ffprobe)
    except MetadataError as e:
        logger.debug("Skipping sync check of %s: %s", output_file.name, e)
        return None

    if abs(video_ms - audio_ms) <= tolerance_ms:
        logger.debug("Sync OK for %s (%dms / %dms)", output_file.name, video_ms, audio_ms)
        return None

    mismatch = SyncMismatch(output_file, video_ms, audio_ms)
    logger.warning("Audio/video duration mismatch in %s", mismatch)
    return mismatch
