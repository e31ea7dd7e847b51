"""Console reporting for packaging runs

Status lines share one layout: a fixed-width status tag followed by the
message, so per-range results line up under each input's header.
"""

from typing import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .timebase import format_pts

console = Console(highlight=False)

def _status(tag: str, tag_style: str, message: str, message_style: str = "") -> None:
    console.print(Text(f"{tag:<5}", style=tag_style) + Text(message, style=message_style))

def print_check(message: str) -> None:
    """Report a completed step, such as one packaged range."""
    _status("ok", "bold green", message)

def print_warning(message: str) -> None:
    _status("warn", "bold yellow", message, "yellow")

def print_error(message: str) -> None:
    _status("fail", "bold red", message, "red")

def print_success(message: str) -> None:
    """Report a run-level result in the summary."""
    _status("done", "bold green", message, "green")

def print_info(message: str) -> None:
    _status("info", "cyan", message, "dim")

def print_header(title: str) -> None:
    """Open the section of one input, or of the final summary."""
    console.print()
    console.rule(Text(title, style="bold cyan"), style="cyan")

def print_separator() -> None:
    console.rule(style="dim")

def build_range_table(title: str, ranges: Sequence, chapter_counts: Sequence[int]) -> Table:
    """Technical report of the ranges of one input."""
    table = Table(title=title, header_style="bold cyan")
    for column in ("#", "Start", "End", "Duration", "Frames", "Video rate",
                   "Chroma", "Aspect", "Audio rate", "Channels", "Chapters"):
        justify = "right" if column in ("#", "Frames", "Channels", "Chapters") else "left"
        table.add_column(column, justify=justify)

    for rng, chapters in zip(ranges, chapter_counts):
        first = rng.first
        table.add_row(
            str(rng.number),
            format_pts(rng.start_pts),
            format_pts(rng.end_pts) + (" (open)" if rng.is_open else ""),
            format_pts(rng.duration),
            str(rng.frame_count),
            first.video_rate or "-",
            first.chroma_subsampling or "-",
            first.aspect_ratio or "-",
            first.audio_rate or "-",
            str(first.channel_count) if first.channel_count is not None else "-",
            str(chapters),
        )
    return table

def print_range_table(title: str, ranges: Sequence, chapter_counts: Sequence[int]) -> None:
    console.print(build_range_table(title, ranges, chapter_counts))
