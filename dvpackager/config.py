"""Configuration settings for the dvpackager pipeline

This module centralizes all configuration settings including:
- Log directory and external tool locations
- Timing constants (timebase, sync tolerance)
- The immutable per-run configuration built from command-line options

Environment variables provide user-level defaults; everything chosen on
the command line is collected once into a frozen PackagerConfig and
passed explicitly to the components that need it.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError, InvalidOption
from .planner import SUPPORTED_EXTENSIONS, get_output_plan

# LOG_DIR: user definable with default of "$HOME/dvpackager_logs"
LOG_DIR = Path(os.environ.get("DVPACKAGER_LOG_DIR", str(Path.home() / "dvpackager_logs")))

# External tool overrides; None means "look up on PATH"
FFMPEG_PATH = os.environ.get("DVPACKAGER_FFMPEG")
FFPROBE_PATH = os.environ.get("DVPACKAGER_FFPROBE")
DVRESCUE_PATH = os.environ.get("DVPACKAGER_DVRESCUE")

# Sidecar directory is "<input>_<suffix>"
SIDECAR_SUFFIX = "dvrescue"

# Fixed-point timebase: units per second (hundred-thousandths)
TIMEBASE = 100000

# Allowed |video - audio| duration difference in milliseconds
SYNC_TOLERANCE_MS = 33

# Recording timestamps before this year are camera sentinels, not dates
MIN_VALID_RECORDING_YEAR = 1995

# Input extensions picked up when a directory is given
INPUT_EXTENSIONS = ("dv", "mkv", "mov")

DEFAULT_EXTENSION = "mkv"

# Logging configuration
LOG_LEVEL = "INFO"  # valid values: DEBUG, INFO, WARNING, ERROR, CRITICAL

_LANGUAGE_RE = re.compile(r"^[a-z]{3}$")


@dataclass(frozen=True)
class BreakpointPolicy:
    """Which frames may start a new range."""
    force_no_split: bool = False
    split_on_recording_start: bool = False
    split_on_recording_timestamp_discontinuity: bool = False
    split_on_timecode_discontinuity: bool = False

    @property
    def selective(self) -> bool:
        """True when at least one marker flag narrows splitting."""
        return (
            self.split_on_recording_start
            or self.split_on_recording_timestamp_discontinuity
            or self.split_on_timecode_discontinuity
        )


@dataclass(frozen=True)
class ToolPaths:
    """Locations of the external collaborators."""
    ffmpeg: Optional[str] = FFMPEG_PATH
    ffprobe: Optional[str] = FFPROBE_PATH
    dvrescue: Optional[str] = DVRESCUE_PATH


@dataclass(frozen=True)
class PackagerConfig:
    """Everything a run needs, fixed before the first input is touched."""
    policy: BreakpointPolicy = field(default_factory=BreakpointPolicy)
    extension: str = DEFAULT_EXTENSION
    report_only: bool = False
    verbose: bool = False
    unpackage: bool = False
    embed_subtitles: bool = False
    audio_language: Optional[str] = None
    secondary_audio_language: Optional[str] = None
    caption_language: Optional[str] = None
    output_dir: Optional[Path] = None
    tools: ToolPaths = field(default_factory=ToolPaths)

    @property
    def plan(self):
        return get_output_plan(self.extension)


def validate_config(config: PackagerConfig) -> None:
    """
    Validate a run configuration.

    Raises:
        InvalidOption: If the extension or a language tag is not allowed
        ConfigurationError: If options are combined in an unsupported way
    """
    if config.extension not in SUPPORTED_EXTENSIONS:
        raise InvalidOption(
            f"Unsupported extension '{config.extension}', expected one of: "
            f"{', '.join(SUPPORTED_EXTENSIONS)}",
            module="config"
        )

    for name in ("audio_language", "secondary_audio_language", "caption_language"):
        value = getattr(config, name)
        if value is not None and not _LANGUAGE_RE.match(value):
            raise InvalidOption(
                f"{name.replace('_', ' ')} must be a 3-letter ISO 639-2 code, got '{value}'",
                module="config"
            )

    if config.unpackage and config.extension != "dv":
        raise ConfigurationError(
            "Unpackage mode only produces raw DV output (extension 'dv')",
            module="config"
        )

    if config.secondary_audio_language and not config.audio_language:
        raise ConfigurationError(
            "A secondary audio language requires a primary audio language",
            module="config"
        )

    if config.output_dir is not None and config.output_dir.exists() and not config.output_dir.is_dir():
        raise ConfigurationError(
            f"Output path '{config.output_dir}' is not a directory",
            module="config"
        )
