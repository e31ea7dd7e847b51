"""Frame-level metadata

This package provides:
- Frame records and the parsed media source
- Parsing of the dvrescue XML log
- Acquisition (and reuse) of the log through dvrescue
"""

from .records import FrameRecord, MediaSource
from .loader import load_metadata, parse_recording_timestamp
from .analysis import build_analysis_command, ensure_metadata_log, log_is_complete

__all__ = [
    'FrameRecord',
    'MediaSource',
    'load_metadata',
    'parse_recording_timestamp',
    'build_analysis_command',
    'ensure_metadata_log',
    'log_is_complete',
]
