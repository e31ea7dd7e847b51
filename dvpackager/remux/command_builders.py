"""Helper functions for building ffmpeg commands"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from ..planner import OutputPlan

log = logging.getLogger(__name__)

DV_AUDIO_RATE = "48000"

def build_rewrap_command(
    ffmpeg: str,
    input_file: Path,
    intermediate: Path,
    seek: str,
    until: Optional[str] = None
) -> List[str]:
    """Build ffmpeg command trimming a wrapped source into raw DV"""
    cmd = [ffmpeg, "-hide_banner", "-loglevel", "warning", "-ss", seek]
    if until is not None:
        cmd.extend(["-to", until])
    cmd.extend([
        "-i", str(input_file),
        "-map", "0:v:0",
        "-map", "0:a?",
        "-c:v", "copy",
        "-c:a", "pcm_s16le",
        "-f", "dv",
        "-y", str(intermediate)
    ])
    return cmd

def build_remux_command(
    ffmpeg: str,
    input_file: Path,
    output_file: Path,
    plan: OutputPlan,
    skip_bytes: Optional[int] = None,
    frame_limit: Optional[int] = None,
    side_seek: str = "0",
    subtitles: Optional[Path] = None,
    captions: Optional[Path] = None,
    chapters: Optional[Path] = None,
    audio_languages: Sequence[Optional[str]] = (),
    caption_language: Optional[str] = None
) -> List[str]:
    """Build ffmpeg command remuxing raw DV into the planned container"""
    cmd = [ffmpeg, "-hide_banner", "-loglevel", "warning", "-f", "dv"]
    if skip_bytes:
        cmd.extend(["-skip_initial_bytes", str(skip_bytes)])
    cmd.extend(["-i", str(input_file)])

    # Side inputs, numbered after the DV input
    subtitle_inputs = []
    for side in (subtitles, captions):
        if side is not None and plan.embeds_subtitles:
            cmd.extend(["-ss", side_seek, "-i", str(side)])
            subtitle_inputs.append(len(subtitle_inputs) + 1)
    chapters_input = None
    if chapters is not None:
        chapters_input = len(subtitle_inputs) + 1
        cmd.extend(["-f", "ffmetadata", "-i", str(chapters)])

    cmd.extend(["-map", "0:v:0", "-map", "0:a?"])
    for index in subtitle_inputs:
        cmd.extend(["-map", f"{index}:s:0"])
    if chapters_input is not None:
        cmd.extend(["-map_metadata", str(chapters_input), "-map_chapters", str(chapters_input)])

    cmd.extend(["-c:v", "copy", "-c:a", plan.audio_codec])
    if plan.resample_audio:
        cmd.extend(["-ar", DV_AUDIO_RATE])
    if subtitle_inputs:
        cmd.extend(["-c:s", plan.subtitle_codec])
    if frame_limit is not None:
        cmd.extend(["-frames:v", str(frame_limit)])

    for stream, language in enumerate(audio_languages):
        if language:
            cmd.extend([f"-metadata:s:a:{stream}", f"language={language}"])
    if captions is not None and caption_language and plan.embeds_subtitles:
        cmd.extend([f"-metadata:s:s:{len(subtitle_inputs) - 1}", f"language={caption_language}"])

    cmd.extend(["-f", plan.container_format, "-y", str(output_file)])
    log.debug("Remux command: %s", " ".join(cmd))
    return cmd
