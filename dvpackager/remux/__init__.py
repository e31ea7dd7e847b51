"""Per-range extraction through ffmpeg"""

from .command_builders import build_remux_command, build_rewrap_command
from .driver import ExtractionParams, extraction_params, package_range

__all__ = [
    'build_remux_command',
    'build_rewrap_command',
    'ExtractionParams',
    'extraction_params',
    'package_range',
]
