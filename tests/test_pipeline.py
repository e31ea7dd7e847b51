"""Tests for input orchestration and the command-line entry point."""
from pathlib import Path
from unittest.mock import patch

import pytest

from dvpackager.__main__ import main
from dvpackager.config import BreakpointPolicy, PackagerConfig
from dvpackager.exceptions import AnalysisError, MalformedMetadata, RemuxFailure, SourceAcquisitionError
from dvpackager.metadata.records import MediaSource
from dvpackager.pipeline import collect_inputs, process_file, process_inputs

from factories import make_frames

TOOLS = {"ffmpeg": "/usr/bin/ffmpeg", "ffprobe": "/usr/bin/ffprobe", "dvrescue": "/usr/bin/dvrescue"}


def _three_range_source(path: Path) -> MediaSource:
    frames = make_frames(9, {i: {"aspect_ratio": "16/9"} for i in range(3, 6)})
    return MediaSource(path=path, format="DV", frames=frames)


@pytest.fixture
def tape(tmp_path: Path) -> Path:
    path = tmp_path / "tape.dv"
    path.write_bytes(b"\0" * 16)
    return path


def _fake_package(source, rng, layout, config, ffmpeg):
    output = layout.output_path(rng.start_pts_text, config.extension)
    output.write_bytes(b"\0" * 64)
    return output


def test_collect_inputs(tmp_path: Path) -> None:
    folder = tmp_path / "captures"
    folder.mkdir()
    for name in ("b.mov", "a.dv", "notes.txt", "c.MKV"):
        (folder / name).write_bytes(b"")
    single = tmp_path / "single.dv"

    inputs = collect_inputs([single, folder])

    assert inputs == [single, folder / "a.dv", folder / "b.mov", folder / "c.MKV"]


@patch("dvpackager.pipeline.check_av_sync", return_value=None)
@patch("dvpackager.pipeline.package_range", side_effect=_fake_package)
@patch("dvpackager.pipeline.load_metadata")
@patch("dvpackager.pipeline.ensure_metadata_log")
def test_process_file_packages_every_range(mock_ensure, mock_load, mock_package, mock_sync, tape) -> None:
    mock_load.return_value = _three_range_source(tape)

    summary = process_file(tape, PackagerConfig(), TOOLS)

    mock_ensure.assert_called_once()
    assert summary.ranges == 3
    assert len(summary.outputs) == 3
    assert summary.ok
    assert mock_sync.call_count == 3


@patch("dvpackager.pipeline.check_av_sync", return_value=None)
@patch("dvpackager.pipeline.package_range")
@patch("dvpackager.pipeline.load_metadata")
@patch("dvpackager.pipeline.ensure_metadata_log")
def test_failed_range_is_skipped(mock_ensure, mock_load, mock_package, mock_sync, tape) -> None:
    mock_load.return_value = _three_range_source(tape)

    def package(source, rng, layout, config, ffmpeg):
        if rng.number == 1:
            raise RemuxFailure("Remux failed", module="remux")
        return _fake_package(source, rng, layout, config, ffmpeg)

    mock_package.side_effect = package

    summary = process_file(tape, PackagerConfig(), TOOLS)

    assert mock_package.call_count == 3
    assert len(summary.outputs) == 2
    assert summary.skipped == 1
    assert not summary.ok


@patch("dvpackager.pipeline.package_range")
@patch("dvpackager.pipeline.load_metadata")
@patch("dvpackager.pipeline.ensure_metadata_log")
def test_report_only_packages_nothing(mock_ensure, mock_load, mock_package, tape) -> None:
    mock_load.return_value = _three_range_source(tape)

    summary = process_file(tape, PackagerConfig(report_only=True), TOOLS)

    assert summary.ranges == 3
    mock_package.assert_not_called()


@patch("dvpackager.pipeline.load_metadata")
@patch("dvpackager.pipeline.ensure_metadata_log")
def test_report_only_reuses_log_without_dvrescue(mock_ensure, mock_load, tape) -> None:
    log = tape.parent / "tape.dv_dvrescue" / "tape.dv.dvrescue.xml"
    log.parent.mkdir()
    log.write_text("<dvrescue><media format=\"DV\"/></dvrescue>\n")
    mock_load.return_value = _three_range_source(tape)

    process_file(tape, PackagerConfig(report_only=True), dict(TOOLS, dvrescue=None))

    mock_ensure.assert_not_called()
    mock_load.assert_called_once_with(log)


@patch("dvpackager.pipeline.load_metadata")
@patch("dvpackager.pipeline.ensure_metadata_log")
def test_report_only_reanalyzes_truncated_log(mock_ensure, mock_load, tape) -> None:
    log = tape.parent / "tape.dv_dvrescue" / "tape.dv.dvrescue.xml"
    log.parent.mkdir()
    log.write_text("<dvrescue><media format=\"DV\"><frames><frame n=\"0\"")
    mock_ensure.return_value = log
    mock_load.return_value = _three_range_source(tape)

    summary = process_file(tape, PackagerConfig(report_only=True), TOOLS)

    mock_ensure.assert_called_once()
    assert summary.ranges == 3


@patch("dvpackager.pipeline.check_av_sync", return_value=None)
@patch("dvpackager.pipeline.package_range")
@patch("dvpackager.pipeline.load_metadata")
@patch("dvpackager.pipeline.ensure_metadata_log")
def test_range_without_output_file_is_skipped(mock_ensure, mock_load, mock_package, mock_sync, tape) -> None:
    mock_load.return_value = _three_range_source(tape)

    def package(source, rng, layout, config, ffmpeg):
        if rng.number == 2:
            return layout.output_path(rng.start_pts_text, config.extension)
        return _fake_package(source, rng, layout, config, ffmpeg)

    mock_package.side_effect = package

    summary = process_file(tape, PackagerConfig(), TOOLS)

    assert len(summary.outputs) == 2
    assert summary.skipped == 1
    assert mock_sync.call_count == 2


@patch("dvpackager.pipeline.load_metadata")
@patch("dvpackager.pipeline.ensure_metadata_log")
def test_force_no_split_packages_one_range(mock_ensure, mock_load, tape) -> None:
    mock_load.return_value = _three_range_source(tape)
    config = PackagerConfig(report_only=True, policy=BreakpointPolicy(force_no_split=True))

    assert process_file(tape, config, TOOLS).ranges == 1


def test_missing_input(tmp_path: Path) -> None:
    with pytest.raises(SourceAcquisitionError):
        process_file(tmp_path / "missing.dv", PackagerConfig(), TOOLS)


@patch("dvpackager.pipeline.check_av_sync", return_value=None)
@patch("dvpackager.pipeline.package_range", side_effect=_fake_package)
@patch("dvpackager.pipeline.load_metadata")
@patch("dvpackager.pipeline.ensure_metadata_log")
def test_failed_input_does_not_stop_the_run(mock_ensure, mock_load, mock_package, mock_sync,
                                            tmp_path: Path) -> None:
    inputs = []
    for name in ("a.dv", "b.dv", "c.dv", "d.dv"):
        inputs.append(tmp_path / name)
        inputs[-1].write_bytes(b"\0")

    def ensure(layout, dvrescue, embed_subtitles=False):
        if layout.input_file.name == "a.dv":
            raise AnalysisError("Analysis failed", module="analysis")
        return layout.metadata_log

    def load(log_path):
        if log_path.name.startswith("b.dv"):
            raise SourceAcquisitionError("Not a DV file", module="metadata")
        if log_path.name.startswith("c.dv"):
            raise MalformedMetadata("No frames", module="metadata")
        return _three_range_source(inputs[3])

    mock_ensure.side_effect = ensure
    mock_load.side_effect = load

    summaries = process_inputs(inputs, PackagerConfig(), TOOLS)

    assert [s.error is None for s in summaries] == [False, False, False, True]
    assert summaries[0].error == "Analysis failed"
    assert len(summaries[3].outputs) == 3


@patch("dvpackager.__main__.process_inputs")
@patch("dvpackager.__main__.configure_logging")
def test_invalid_extension_aborts_before_work(mock_logging, mock_process, tape) -> None:
    assert main(["-e", "avi", str(tape)]) == 1
    mock_logging.assert_not_called()
    mock_process.assert_not_called()


@patch("dvpackager.__main__.process_inputs")
@patch("dvpackager.__main__.configure_logging")
def test_unpackage_with_mkv_is_rejected(mock_logging, mock_process, tape) -> None:
    assert main(["-u", "-e", "mkv", str(tape)]) == 1
    mock_process.assert_not_called()


@patch("dvpackager.__main__.process_inputs")
@patch("dvpackager.__main__.check_dependencies", return_value=TOOLS)
@patch("dvpackager.__main__.configure_logging", return_value=None)
def test_main_runs_pipeline(mock_logging, mock_deps, mock_process, tape) -> None:
    assert main(["-s", "-e", "mov", str(tape)]) == 0
    (inputs, config, tools), _ = mock_process.call_args
    assert inputs == [tape]
    assert config.extension == "mov"
    assert config.policy.split_on_recording_start
    assert tools == TOOLS


@patch("dvpackager.__main__.process_inputs")
@patch("dvpackager.__main__.configure_logging", return_value=None)
def test_missing_dependency_exits(mock_logging, mock_process, tape) -> None:
    with patch("dvpackager.utils.shutil.which", return_value=None):
        assert main(["--dvrescue", "/nonexistent/dvrescue", str(tape)]) == 1
    mock_process.assert_not_called()


@patch("dvpackager.__main__.process_inputs", side_effect=KeyboardInterrupt)
@patch("dvpackager.__main__.check_dependencies", return_value=TOOLS)
@patch("dvpackager.__main__.configure_logging", return_value=None)
def test_interrupt_exit_code(mock_logging, mock_deps, mock_process, tape) -> None:
    assert main([str(tape)]) == 130
