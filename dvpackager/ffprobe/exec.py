"""Low-level ffprobe command execution utilities

Responsibilities:
- Execute ffprobe queries for single stream properties and stream tags
- Convert values to the appropriate type
- Define the metadata exception type
"""

import subprocess
import logging
from pathlib import Path
from typing import Sequence, Union

logger = logging.getLogger(__name__)

class MetadataError(Exception):
    """Raised when metadata cannot be retrieved or parsed"""
    def __init__(self, message: str, property_name: str = None):
        self.property_name = property_name
        super().__init__(f"Metadata error: {message}")

def _query(path: Path, args: Sequence[str], name: str, ffprobe: str) -> str:
    """Run one ffprobe query and return its bare value."""
    try:
        result = subprocess.run(
            [ffprobe, "-v", "error"] + list(args) + [str(path)],
            capture_output=True,
            text=True,
            check=True
        )
    except (subprocess.CalledProcessError, OSError) as e:
        raise MetadataError(f"Could not get {name}: {str(e)}", name) from e

    value = result.stdout.strip()
    if not value or value.lower() in ["n/a", "nan"]:
        raise MetadataError(f"No valid value found for {name}", name)
    return value

def get_media_property(
    path: Path,
    stream_type: str,
    property_name: str,
    stream_index: int = 0,
    ffprobe: str = "ffprobe"
) -> Union[float, int, str]:
    """
    Get a single media property with type conversion.

    Args:
        path: Path to media file
        stream_type: Type of stream ("video", "audio", "subtitle" or "format")
        property_name: Name of the property to fetch
        stream_index: Stream index (default 0)
        ffprobe: Path to the ffprobe executable

    Returns:
        Property value with appropriate type casting

    Raises:
        MetadataError: If property cannot be retrieved or parsed
    """
    if stream_type == "format":
        args = (
            "-show_entries", f"format={property_name}",
            "-of", "default=noprint_wrappers=1:nokey=1"
        )
    else:
        type_prefix = stream_type[0]  # v for video, a for audio, s for subtitle
        args = (
            "-select_streams", f"{type_prefix}:{stream_index}",
            "-show_entries", f"stream={property_name}",
            "-of", "default=noprint_wrappers=1:nokey=1"
        )

    value = _query(path, args, property_name, ffprobe)
    try:
        if property_name in ["duration", "start_time"]:
            return float(value)
        elif property_name in ["channels", "nb_frames"]:
            return int(value)
        return value
    except ValueError as e:
        raise MetadataError(f"Could not convert {value} to required type", property_name) from e

def get_stream_tag(
    path: Path,
    stream_type: str,
    tag: str,
    stream_index: int = 0,
    ffprobe: str = "ffprobe"
) -> str:
    """
    Get a stream tag such as Matroska's per-track DURATION.

    Raises:
        MetadataError: If the stream has no such tag
    """
    args = (
        "-select_streams", f"{stream_type[0]}:{stream_index}",
        "-show_entries", f"stream_tags={tag}",
        "-of", "default=noprint_wrappers=1:nokey=1"
    )
    return _query(path, args, tag, ffprobe)
