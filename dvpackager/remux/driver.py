"""
Per-range extraction and remuxing

Responsibilities:
  - Derive extraction parameters for a range from the source format
  - Attach technical subtitles, captions and chapter metadata
  - Run ffmpeg, rewrapping wrapped sources to raw DV first
  - Remove partial outputs when a range fails
"""

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..chapters import synthesize_chapters, write_ffmetadata
from ..command_jobs import RemuxJob
from ..config import PackagerConfig
from ..exceptions import RemuxFailure
from ..metadata.records import MediaSource
from ..segmentation.ranges import Range
from ..timebase import to_seconds_arg
from ..workspace import SidecarLayout, temp_artifact
from .command_builders import build_remux_command, build_rewrap_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionParams:
    """
    How to cut one range out of its source.

    Raw DV is addressed by byte offset and bounded by a frame count;
    wrapped sources are addressed by time.
    """
    skip_bytes: Optional[int] = None
    frame_limit: Optional[int] = None
    seek: Optional[str] = None
    until: Optional[str] = None

    @property
    def by_byte_offset(self) -> bool:
        return self.seek is None


def extraction_params(source: MediaSource, rng: Range) -> ExtractionParams:
    """Derive the extraction parameters of a range."""
    if source.is_elementary:
        return ExtractionParams(
            skip_bytes=rng.byte_offset or 0,
            frame_limit=None if rng.is_open else rng.frame_count,
        )
    return ExtractionParams(
        seek=to_seconds_arg(rng.start_pts),
        until=None if rng.is_open else to_seconds_arg(rng.end_pts),
    )


def _side_tracks(layout: SidecarLayout, config: PackagerConfig):
    plan = config.plan
    subtitles = captions = None
    if plan.embeds_subtitles:
        if config.embed_subtitles and layout.subtitles.is_file():
            subtitles = layout.subtitles
        if layout.captions.is_file():
            captions = layout.captions
    return subtitles, captions


def package_range(
    source: MediaSource,
    rng: Range,
    layout: SidecarLayout,
    config: PackagerConfig,
    ffmpeg: str
) -> Path:
    """
    Produce the output file of one range.

    Args:
        source: Parsed analysis log of the input
        rng: Range to extract
        layout: Sidecar layout of the input
        config: Run configuration
        ffmpeg: Path to the ffmpeg executable

    Returns:
        Path to the output file

    Raises:
        RemuxFailure: If ffmpeg fails; no partial output is left behind
    """
    plan = config.plan
    params = extraction_params(source, rng)
    output_file = layout.output_path(rng.start_pts_text, plan.extension)
    subtitles, captions = _side_tracks(layout, config)
    chapters = synthesize_chapters(source.frames, rng)
    audio_languages = (config.audio_language, config.secondary_audio_language)

    logger.info(
        "Range %d: %s, %d frames -> %s",
        rng.number, rng.start_pts_text, rng.frame_count, output_file.name
    )

    try:
        with ExitStack() as stack:
            chapters_file = None
            if chapters and plan.chapters:
                chapters_file = write_ffmetadata(
                    chapters, stack.enter_context(temp_artifact(layout.directory, ".ffmetadata"))
                )

            dv_input = layout.input_file
            if not params.by_byte_offset:
                dv_input = stack.enter_context(temp_artifact(layout.directory, ".dv"))
                RemuxJob(build_rewrap_command(
                    ffmpeg, layout.input_file, dv_input, params.seek, params.until
                )).execute()

            RemuxJob(build_remux_command(
                ffmpeg, dv_input, output_file, plan,
                skip_bytes=params.skip_bytes,
                frame_limit=params.frame_limit,
                side_seek=to_seconds_arg(rng.start_pts),
                subtitles=subtitles,
                captions=captions,
                chapters=chapters_file,
                audio_languages=audio_languages,
                caption_language=config.caption_language,
            )).execute()
    except RemuxFailure:
        if output_file.exists():
            output_file.unlink()
        raise

    return output_file

