"""Acquisition of the frame-level analysis log

Responsibilities:
- Decide whether an existing log in the sidecar directory can be reused
- Run dvrescue to (re)produce the log and its supplementary tracks
- Promote freshly written artifacts into the sidecar directory
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..command_jobs import AnalysisJob
from ..exceptions import AnalysisError
from ..workspace import SidecarLayout, temp_artifact

logger = logging.getLogger(__name__)

_LOG_TAIL = b"</dvrescue>"


def build_analysis_command(
    dvrescue: str,
    input_file: Path,
    xml_output: Path,
    subtitles_output: Optional[Path] = None,
    captions_output: Optional[Path] = None
) -> List[str]:
    """Build dvrescue command producing the XML log and optional side tracks"""
    cmd = [dvrescue, str(input_file), "-x", str(xml_output)]
    if subtitles_output is not None:
        cmd.extend(["--webvtt-output", str(subtitles_output)])
    if captions_output is not None:
        cmd.extend(["--cc-format", "scc", "--cc-output", str(captions_output)])
    return cmd


def log_is_complete(path: Path) -> bool:
    """True when the log exists and was written to its closing element."""
    if not path.is_file():
        return False
    with open(path, "rb") as f:
        f.seek(0, 2)
        size = f.tell()
        f.seek(max(0, size - 256))
        return f.read().rstrip().endswith(_LOG_TAIL)


def needs_analysis(layout: SidecarLayout, embed_subtitles: bool) -> bool:
    if not log_is_complete(layout.metadata_log):
        return True
    if embed_subtitles and not layout.subtitles.is_file():
        logger.info("Technical subtitles missing for %s, re-running analysis", layout.input_file.name)
        return True
    return False


def ensure_metadata_log(layout: SidecarLayout, dvrescue: str, embed_subtitles: bool = False) -> Path:
    """
    Make sure a complete analysis log exists for the input.

    Args:
        layout: Sidecar layout of the input
        dvrescue: Path to the dvrescue executable
        embed_subtitles: Whether technical subtitles are required

    Returns:
        Path to the analysis log

    Raises:
        AnalysisError: If dvrescue fails or writes an incomplete log
    """
    if not needs_analysis(layout, embed_subtitles):
        logger.info("Reusing analysis log: %s", layout.metadata_log.name)
        return layout.metadata_log

    layout.ensure()
    logger.info("Analyzing %s", layout.input_file.name)
    with temp_artifact(layout.directory, ".xml") as xml_tmp, \
            temp_artifact(layout.directory, ".vtt") as vtt_tmp, \
            temp_artifact(layout.directory, ".scc") as scc_tmp:
        cmd = build_analysis_command(
            dvrescue, layout.input_file, xml_tmp,
            subtitles_output=vtt_tmp if embed_subtitles else None,
            captions_output=scc_tmp
        )
        AnalysisJob(cmd).execute()

        if not log_is_complete(xml_tmp):
            raise AnalysisError(
                f"Analysis of {layout.input_file.name} produced an incomplete log",
                module="analysis"
            )
        xml_tmp.replace(layout.metadata_log)
        if embed_subtitles and vtt_tmp.stat().st_size > 0:
            vtt_tmp.replace(layout.subtitles)
        if scc_tmp.stat().st_size > 0:
            scc_tmp.replace(layout.captions)

    return layout.metadata_log
