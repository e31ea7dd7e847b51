"""Unit tests for run configuration and output plans."""
from pathlib import Path

import pytest

from dvpackager.__main__ import build_parser, config_from_args
from dvpackager.config import BreakpointPolicy, PackagerConfig, validate_config
from dvpackager.exceptions import ConfigurationError, InvalidOption
from dvpackager.planner import SUPPORTED_EXTENSIONS, get_output_plan


def test_supported_extensions() -> None:
    assert SUPPORTED_EXTENSIONS == ("mkv", "mov", "dv")


def test_output_plans() -> None:
    mkv = get_output_plan("mkv")
    assert mkv.container_format == "matroska"
    assert mkv.embeds_subtitles and mkv.chapters

    mov = get_output_plan("MOV")
    assert mov.subtitle_codec == "mov_text"

    dv = get_output_plan("dv")
    assert dv.container_format == "dv"
    assert not dv.embeds_subtitles
    assert not dv.chapters
    assert dv.resample_audio


def test_unknown_extension_is_invalid() -> None:
    with pytest.raises(InvalidOption):
        get_output_plan("avi")
    with pytest.raises(InvalidOption, match="avi"):
        validate_config(PackagerConfig(extension="avi"))


def test_invalid_option_is_a_configuration_error() -> None:
    assert issubclass(InvalidOption, ConfigurationError)


def test_default_config_is_valid() -> None:
    config = PackagerConfig()
    validate_config(config)
    assert config.extension == "mkv"
    assert config.policy == BreakpointPolicy()
    assert not config.policy.selective


def test_config_is_immutable() -> None:
    config = PackagerConfig()
    with pytest.raises(AttributeError):
        config.extension = "dv"


@pytest.mark.parametrize("field", ["audio_language", "secondary_audio_language", "caption_language"])
def test_language_tags_are_checked(field: str) -> None:
    values = {"audio_language": "eng", field: "english"}
    with pytest.raises(InvalidOption, match="ISO 639-2"):
        validate_config(PackagerConfig(**values))


def test_secondary_language_needs_primary() -> None:
    with pytest.raises(ConfigurationError):
        validate_config(PackagerConfig(secondary_audio_language="fra"))


def test_unpackage_requires_dv_output() -> None:
    with pytest.raises(ConfigurationError, match="Unpackage"):
        validate_config(PackagerConfig(unpackage=True, extension="mkv"))
    validate_config(PackagerConfig(unpackage=True, extension="dv"))


def test_output_dir_must_be_a_directory(tmp_path: Path) -> None:
    not_a_dir = tmp_path / "file"
    not_a_dir.write_text("x")
    with pytest.raises(ConfigurationError):
        validate_config(PackagerConfig(output_dir=not_a_dir))


def test_config_from_args() -> None:
    args = build_parser().parse_args([
        "-e", "MOV", "-s", "-t", "-l", "eng", "-L", "fra", "-c", "eng",
        "--ffmpeg", "/opt/ffmpeg", "tape.dv"
    ])
    config = config_from_args(args)
    assert config.extension == "mov"
    assert config.policy == BreakpointPolicy(
        split_on_recording_start=True, split_on_timecode_discontinuity=True
    )
    assert config.policy.selective
    assert config.audio_language == "eng"
    assert config.secondary_audio_language == "fra"
    assert config.tools.ffmpeg == "/opt/ffmpeg"
    validate_config(config)


def test_unpackage_defaults_to_dv() -> None:
    config = config_from_args(build_parser().parse_args(["-u", "tape.mkv"]))
    assert config.extension == "dv"
    assert config.unpackage
