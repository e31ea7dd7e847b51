"""Fixed-point presentation timestamps

Timestamps from the analysis log ("hh:mm:ss.ffffff") are converted once into
integer units of 1/TIMEBASE seconds. All range and chapter arithmetic is done
on these integers; floats only appear when talking to external tools.
"""

import re

from .config import TIMEBASE

_PTS_RE = re.compile(r"^(\d+):([0-5]\d):([0-5]\d)(?:\.(\d+))?$")
_FRACTION_DIGITS = len(str(TIMEBASE)) - 1


def parse_pts(value: str) -> int:
    """
    Convert "hh:mm:ss.fff" into timebase units.

    Fractional digits beyond the timebase precision are truncated, so the
    result never exceeds the time the string denotes.

    Raises:
        ValueError: If the string is not a timestamp
    """
    match = _PTS_RE.match(value.strip()) if value else None
    if not match:
        raise ValueError(f"Invalid timestamp: {value!r}")
    hours, minutes, seconds, fraction = match.groups()
    fraction = (fraction or "")[:_FRACTION_DIGITS].ljust(_FRACTION_DIGITS, "0")
    whole = int(hours) * 3600 + int(minutes) * 60 + int(seconds)
    return whole * TIMEBASE + int(fraction)


def format_pts(units: int) -> str:
    """Format timebase units as "hh:mm:ss.fffff"."""
    if units < 0:
        raise ValueError(f"Negative timestamp: {units}")
    whole, fraction = divmod(units, TIMEBASE)
    hours, rest = divmod(whole, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{fraction:0{_FRACTION_DIGITS}d}"


def to_seconds_arg(units: int) -> str:
    """Render units as a decimal seconds string for ffmpeg (-ss/-to)."""
    whole, fraction = divmod(units, TIMEBASE)
    return f"{whole}.{fraction:0{_FRACTION_DIGITS}d}"


def filename_safe(pts: str) -> str:
    """Make a timestamp usable inside a filename."""
    return pts.replace(":", "-")
