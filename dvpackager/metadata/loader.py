"""Parsing of the dvrescue analysis log

The log is an XML document with one <media> element holding <frames>
groups; each group declares the technical characteristics shared by its
<frame> children. Frames are streamed with iterparse and checked for
ordering as they are read.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from ..config import MIN_VALID_RECORDING_YEAR
from ..exceptions import MalformedMetadata, SourceAcquisitionError
from ..timebase import parse_pts
from .records import ELEMENTARY_FORMATS, FrameRecord, MediaSource

logger = logging.getLogger(__name__)

_RDT_FORMAT = "%Y-%m-%d %H:%M:%S"


def _local(tag: str) -> str:
    """Strip the XML namespace from a tag."""
    return tag.rsplit("}", 1)[-1]


def _flag(value: Optional[str]) -> bool:
    return value in ("1", "true", "True")


def _optional_int(value: Optional[str], name: str, index: int) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise MalformedMetadata(f"Frame {index}: invalid {name} {value!r}", module="loader") from None


def parse_recording_timestamp(value: Optional[str]) -> Optional[str]:
    """Return the recording timestamp if it is a plausible date, else None."""
    if not value:
        return None
    try:
        parsed = datetime.strptime(value.strip(), _RDT_FORMAT)
    except ValueError:
        return None
    if parsed.year < MIN_VALID_RECORDING_YEAR:
        return None
    return value.strip()


def build_frame(attrs: Dict[str, str], group: Dict[str, str], position: int) -> FrameRecord:
    """
    Build a FrameRecord from a <frame> element and its enclosing <frames> group.

    Raises:
        MalformedMetadata: If the index or pts is missing or unreadable
    """
    index = _optional_int(attrs.get("n"), "index", position)
    if index is None:
        raise MalformedMetadata(f"Frame at position {position} has no index", module="loader")
    pts_text = attrs.get("pts")
    if not pts_text:
        raise MalformedMetadata(f"Frame {index} has no pts", module="loader")
    try:
        pts = parse_pts(pts_text)
        end_pts = parse_pts(attrs["end_pts"]) if attrs.get("end_pts") else None
    except ValueError as e:
        raise MalformedMetadata(f"Frame {index}: {e}", module="loader") from e

    return FrameRecord(
        index=index,
        pts=pts,
        pts_text=pts_text,
        end_pts=end_pts,
        timecode=attrs.get("tc") or None,
        recording_timestamp=parse_recording_timestamp(attrs.get("rdt")),
        byte_offset=_optional_int(attrs.get("pos"), "byte offset", index),
        size=_optional_int(attrs.get("size"), "size", index),
        video_rate=group.get("video_rate"),
        chroma_subsampling=group.get("chroma_subsampling"),
        aspect_ratio=group.get("aspect_ratio"),
        audio_rate=group.get("audio_rate"),
        channel_count=_optional_int(group.get("channels"), "channel count", index),
        recording_start=_flag(attrs.get("rec_start")),
        recording_timestamp_discontinuity=_flag(attrs.get("rdt_nc")),
        timecode_discontinuity=_flag(attrs.get("tc_nc")),
    )


def _check_order(previous: Optional[FrameRecord], frame: FrameRecord, elementary: bool) -> None:
    if elementary and frame.byte_offset is None:
        raise MalformedMetadata(f"Frame {frame.index} has no byte offset", module="loader")
    if previous is None:
        return
    if frame.index <= previous.index:
        raise MalformedMetadata(
            f"Frame index not increasing: {previous.index} then {frame.index}", module="loader"
        )
    if frame.pts <= previous.pts:
        raise MalformedMetadata(
            f"Frame {frame.index}: pts {frame.pts_text} not after {previous.pts_text}", module="loader"
        )
    if (frame.byte_offset is not None and previous.byte_offset is not None
            and frame.byte_offset < previous.byte_offset):
        raise MalformedMetadata(
            f"Frame {frame.index}: byte offset decreases", module="loader"
        )


def _close_group(frames, group: Dict[str, str]) -> None:
    """Give the last frame of a group the group end time when it has none."""
    if frames[-1].end_pts is None and group.get("end_pts"):
        try:
            frames[-1] = replace(frames[-1], end_pts=parse_pts(group["end_pts"]))
        except ValueError as e:
            raise MalformedMetadata(f"Frames group: {e}", module="loader") from e


def load_metadata(log_path: Path) -> MediaSource:
    """
    Parse an analysis log.

    Args:
        log_path: Path to the dvrescue XML log

    Returns:
        MediaSource with the ordered frames

    Raises:
        SourceAcquisitionError: If the log reports an error for its media
        MalformedMetadata: If the log is unreadable, empty or out of order
    """
    media_format = None
    group: Dict[str, str] = {}
    frames = []
    previous = None
    group_start = 0

    try:
        for event, elem in ET.iterparse(str(log_path), events=("start", "end")):
            tag = _local(elem.tag)
            if event == "start":
                if tag == "media":
                    if elem.get("error"):
                        raise SourceAcquisitionError(
                            f"{elem.get('ref', log_path.name)}: {elem.get('error')}",
                            module="loader"
                        )
                    media_format = elem.get("format")
                    if not media_format:
                        raise MalformedMetadata("Media element has no format", module="loader")
                elif tag == "frames":
                    group = dict(elem.attrib)
                    group_start = len(frames)
                continue

            if tag == "frame":
                if media_format is None:
                    raise MalformedMetadata("Frame outside of a media element", module="loader")
                frame = build_frame(elem.attrib, group, len(frames))
                _check_order(previous, frame, media_format.upper() in ELEMENTARY_FORMATS)
                frames.append(frame)
                previous = frame
                elem.clear()
            elif tag == "frames":
                if len(frames) > group_start:
                    _close_group(frames, group)
                elem.clear()
    except ET.ParseError as e:
        raise MalformedMetadata(f"Cannot parse {log_path.name}: {e}", module="loader") from e

    if media_format is None:
        raise MalformedMetadata(f"No media element in {log_path.name}", module="loader")
    if not frames:
        raise MalformedMetadata(f"No frames in {log_path.name}", module="loader")

    logger.info("Loaded %d frames (%s) from %s", len(frames), media_format, log_path.name)
    return MediaSource(path=log_path, format=media_format, frames=frames)
