"""Output container policies

Each supported output extension maps to one fixed OutputPlan: the ffmpeg
container format, how audio is carried, how subtitles and captions are
embedded, and whether audio needs resampling to fit the container.
"""

from dataclasses import dataclass
from typing import Optional

from .exceptions import InvalidOption


@dataclass(frozen=True)
class OutputPlan:
    extension: str
    container_format: str
    audio_codec: str
    subtitle_codec: Optional[str]
    resample_audio: bool
    chapters: bool

    @property
    def embeds_subtitles(self) -> bool:
        return self.subtitle_codec is not None


# Raw DV output carries only the unwrapped essence: no subtitle streams or
# chapters, and the DV muxer only accepts 48 kHz audio.
OUTPUT_PLANS = {
    "mkv": OutputPlan("mkv", "matroska", "copy", "webvtt", False, True),
    "mov": OutputPlan("mov", "mov", "pcm_s16le", "mov_text", False, True),
    "dv": OutputPlan("dv", "dv", "pcm_s16le", None, True, False),
}

SUPPORTED_EXTENSIONS = tuple(OUTPUT_PLANS)


def get_output_plan(extension: str) -> OutputPlan:
    """
    Look up the policy for an output extension.

    Raises:
        InvalidOption: If the extension is not supported
    """
    try:
        return OUTPUT_PLANS[extension.lower()]
    except KeyError:
        raise InvalidOption(
            f"Unsupported extension '{extension}', expected one of: {', '.join(SUPPORTED_EXTENSIONS)}",
            module="planner"
        ) from None
