"""High-level pipeline orchestration

Responsibilities:
  - Expand command-line inputs into the files to package
  - Acquire and load the analysis log of each input
  - Split each input into ranges and package them one by one
  - Check every output for audio/video sync
  - Present a per-input and final summary

Inputs are processed one after the other; an error on one input abandons
only that input, and a failed range skips only that range.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .chapters import synthesize_chapters
from .config import INPUT_EXTENSIONS, PackagerConfig
from .exceptions import (
    AnalysisError, MalformedMetadata, RemuxFailure, SourceAcquisitionError
)
from .formatting import (
    print_check, print_error, print_header, print_info,
    print_range_table, print_separator, print_success, print_warning
)
from .metadata import ensure_metadata_log, load_metadata, log_is_complete
from .remux import package_range
from .segmentation import build_ranges, make_breakpoint_selector
from .sync import SyncMismatch, check_av_sync
from .utils import format_size, get_file_size
from .workspace import SidecarLayout

logger = logging.getLogger(__name__)


@dataclass
class FileSummary:
    input_file: Path
    ranges: int = 0
    outputs: List[Path] = field(default_factory=list)
    skipped: int = 0
    sync_warnings: List[SyncMismatch] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.skipped == 0


def collect_inputs(paths: Iterable[Path]) -> List[Path]:
    """Expand directories into their DV/MKV/MOV files, keeping order."""
    inputs = []
    for path in paths:
        if path.is_dir():
            inputs.extend(sorted(
                p for p in path.iterdir()
                if p.is_file() and p.suffix.lower().lstrip(".") in INPUT_EXTENSIONS
            ))
        else:
            inputs.append(path)
    return inputs


def _package_ranges(source, ranges, layout: SidecarLayout, config: PackagerConfig,
                    tools: Dict[str, Optional[str]], summary: FileSummary) -> None:
    layout.ensure()
    for rng in ranges:
        try:
            output_file = package_range(source, rng, layout, config, tools["ffmpeg"])
        except RemuxFailure as e:
            logger.error("Range %d of %s failed: %s", rng.number, layout.input_file.name, e)
            print_error(f"Skipped range starting at {rng.start_pts_text}")
            summary.skipped += 1
            continue

        try:
            size = get_file_size(output_file)
        except OSError as e:
            logger.error("Range %d of %s produced no output: %s", rng.number, layout.input_file.name, e)
            print_error(f"No output written for range starting at {rng.start_pts_text}")
            summary.skipped += 1
            continue

        summary.outputs.append(output_file)
        print_check(f"{output_file.name} ({format_size(size)})")

        mismatch = check_av_sync(output_file, tools.get("ffprobe"))
        if mismatch is not None:
            summary.sync_warnings.append(mismatch)
            print_warning(f"Possible audio/video desync: {mismatch}")


def process_file(input_file: Path, config: PackagerConfig,
                 tools: Dict[str, Optional[str]]) -> FileSummary:
    """
    Package a single input.

    Raises:
        AnalysisError: If no analysis log can be produced
        SourceAcquisitionError: If the log reports an error for the input
        MalformedMetadata: If the log cannot be used
    """
    summary = FileSummary(input_file)
    layout = SidecarLayout.for_input(input_file, config.output_dir)

    print_header(input_file.name)
    if not input_file.is_file():
        raise SourceAcquisitionError(f"Input {input_file} does not exist", module="pipeline")

    if config.report_only and log_is_complete(layout.metadata_log):
        log_path = layout.metadata_log
    else:
        if tools.get("dvrescue") is None:
            raise AnalysisError("dvrescue is required to analyze inputs", module="pipeline")
        log_path = ensure_metadata_log(layout, tools["dvrescue"], config.embed_subtitles)
    source = load_metadata(log_path)

    if config.unpackage and source.is_elementary:
        logger.info("%s is already raw DV, extracting by byte offset", input_file.name)

    ranges = build_ranges(source.frames, make_breakpoint_selector(config.policy))
    summary.ranges = len(ranges)

    if config.report_only:
        chapter_counts = [len(synthesize_chapters(source.frames, rng)) for rng in ranges]
        print_range_table(f"{input_file.name} ({source.format})", ranges, chapter_counts)
        return summary

    print_info(f"{len(ranges)} range(s) to package as .{config.extension}")
    _package_ranges(source, ranges, layout, config, tools, summary)
    return summary


def process_inputs(inputs: Iterable[Path], config: PackagerConfig,
                   tools: Dict[str, Optional[str]]) -> List[FileSummary]:
    """Package every input, continuing past per-input failures."""
    summaries = []
    start_time = time.time()

    for input_file in inputs:
        try:
            summary = process_file(input_file, config, tools)
        except (AnalysisError, SourceAcquisitionError, MalformedMetadata) as e:
            logger.error("Skipping %s: %s", input_file.name, e)
            print_error(f"Skipped {input_file.name}: {e.message}")
            summary = FileSummary(input_file, error=e.message)
        summaries.append(summary)

    if not config.report_only:
        print_summary(summaries, time.time() - start_time)
    return summaries


def print_summary(summaries: List[FileSummary], elapsed: float) -> None:
    hours = int(elapsed // 3600)
    minutes = int((elapsed % 3600) // 60)
    seconds = int(elapsed % 60)

    print_header("Packaging Summary")
    for s in summaries:
        print_separator()
        if s.error is not None:
            print_error(f"{s.input_file.name}: {s.error}")
            continue
        print_check(s.input_file.name)
        print_success(f"Outputs: {len(s.outputs)} of {s.ranges} range(s)")
        if s.skipped:
            print_error(f"Failed ranges: {s.skipped}")
        for mismatch in s.sync_warnings:
            print_warning(f"Sync: {mismatch}")
    print_separator()
    print_success(f"{len(summaries)} input(s) in {hours:02d}:{minutes:02d}:{seconds:02d}")
