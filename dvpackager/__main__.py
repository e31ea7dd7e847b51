"""
Command-line interface for dvpackager
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import (
    DEFAULT_EXTENSION, LOG_LEVEL, BreakpointPolicy, PackagerConfig, ToolPaths,
    validate_config
)
from .exceptions import ConfigurationError, DependencyError
from .formatting import print_error, print_header, print_info
from .logging import configure_logging
from .pipeline import collect_inputs, process_inputs
from .planner import SUPPORTED_EXTENSIONS
from .utils import check_dependencies

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dvpackager",
        description="Split captured DV streams into playable files using dvrescue analysis"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-e", "--extension",
        dest="extension",
        type=str.lower,
        default=None,
        help=f"Output container extension, one of {', '.join(SUPPORTED_EXTENSIONS)} "
             f"(default: {DEFAULT_EXTENSION}, or dv in unpackage mode)"
    )
    parser.add_argument(
        "-n", "--ignore-technical-changes",
        dest="force_no_split",
        action="store_true",
        help="Never split: package each input as a single file"
    )
    parser.add_argument(
        "-s", "--split-on-recording-start",
        dest="split_on_recording_start",
        action="store_true",
        help="Split where the camera signalled a new recording"
    )
    parser.add_argument(
        "-d", "--split-on-recording-timestamp-discontinuity",
        dest="split_on_rdt_discontinuity",
        action="store_true",
        help="Split where the recording date/time jumps"
    )
    parser.add_argument(
        "-t", "--split-on-timecode-discontinuity",
        dest="split_on_tc_discontinuity",
        action="store_true",
        help="Split where the timecode jumps"
    )
    parser.add_argument(
        "-r", "--report-only",
        dest="report_only",
        action="store_true",
        help="Show the ranges of each input without packaging"
    )
    parser.add_argument(
        "-v", "--verbose",
        dest="verbose",
        action="store_true",
        help="Show debug output, including every external command"
    )
    parser.add_argument(
        "-u", "--unpackage",
        dest="unpackage",
        action="store_true",
        help="Rewrap DV from MKV/MOV inputs back to raw DV"
    )
    parser.add_argument(
        "-S", "--embed-technical-subtitles",
        dest="embed_subtitles",
        action="store_true",
        help="Embed dvrescue technical subtitles in the outputs"
    )
    parser.add_argument(
        "-l", "--audio-language",
        dest="audio_language",
        default=None,
        help="ISO 639-2 language of the first audio track"
    )
    parser.add_argument(
        "-L", "--secondary-audio-language",
        dest="secondary_audio_language",
        default=None,
        help="ISO 639-2 language of the second audio track"
    )
    parser.add_argument(
        "-c", "--caption-language",
        dest="caption_language",
        default=None,
        help="ISO 639-2 language of the caption track"
    )
    parser.add_argument(
        "-o", "--output-dir",
        dest="output_dir",
        type=Path,
        default=None,
        help="Directory for packaged files (default: the input's sidecar directory)"
    )
    parser.add_argument("--ffmpeg", dest="ffmpeg", default=None, help="Path to ffmpeg")
    parser.add_argument("--ffprobe", dest="ffprobe", default=None, help="Path to ffprobe")
    parser.add_argument("--dvrescue", dest="dvrescue", default=None, help="Path to dvrescue")
    parser.add_argument(
        "--no-log-file",
        dest="file_logging",
        action="store_false",
        help="Log to the console only"
    )
    parser.add_argument(
        "inputs",
        type=Path,
        nargs="+",
        help="Input files or directories"
    )
    return parser

def config_from_args(args: argparse.Namespace) -> PackagerConfig:
    """Collect parsed options into one immutable configuration"""
    extension = args.extension or ("dv" if args.unpackage else DEFAULT_EXTENSION)
    defaults = ToolPaths()
    return PackagerConfig(
        policy=BreakpointPolicy(
            force_no_split=args.force_no_split,
            split_on_recording_start=args.split_on_recording_start,
            split_on_recording_timestamp_discontinuity=args.split_on_rdt_discontinuity,
            split_on_timecode_discontinuity=args.split_on_tc_discontinuity,
        ),
        extension=extension,
        report_only=args.report_only,
        verbose=args.verbose,
        unpackage=args.unpackage,
        embed_subtitles=args.embed_subtitles,
        audio_language=args.audio_language,
        secondary_audio_language=args.secondary_audio_language,
        caption_language=args.caption_language,
        output_dir=args.output_dir,
        tools=ToolPaths(
            ffmpeg=args.ffmpeg or defaults.ffmpeg,
            ffprobe=args.ffprobe or defaults.ffprobe,
            dvrescue=args.dvrescue or defaults.dvrescue,
        ),
    )

def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    # Configuration problems abort before anything is written
    try:
        config = config_from_args(args)
        validate_config(config)
    except ConfigurationError as e:
        print_error(e.message)
        return 1

    log_file = configure_logging("DEBUG" if config.verbose else LOG_LEVEL, args.file_logging)
    log = logging.getLogger("dvpackager")
    if log_file is not None:
        log.debug("Log file: %s", log_file)

    print_header(f"dvpackager v{__version__}")
    if config.policy.force_no_split and config.policy.selective:
        print_info("Ignoring split options: technical changes are ignored and nothing is split")

    try:
        tools = check_dependencies(
            config.tools,
            required=() if config.report_only else ("ffmpeg", "dvrescue")
        )
    except DependencyError as e:
        log.error("%s", e.message)
        return 1

    inputs = collect_inputs(args.inputs)
    if not inputs:
        log.error("No input files found")
        return 1

    try:
        process_inputs(inputs, config, tools)
    except KeyboardInterrupt:
        log.warning("Interrupted by user")
        return 130
    return 0

if __name__ == "__main__":
    sys.exit(main())
