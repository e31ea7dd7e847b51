"""Sidecar directory layout and scoped temporary artifacts

Directory structure, next to each input:
<input>_dvrescue/
├── <input>.dvrescue.xml    # analysis log, reused by later runs
├── <input>.dvrescue.vtt    # technical subtitles (optional)
├── <input>.dvrescue.scc    # captions (optional)
└── <stem>_<pts>.<ext>      # packaged outputs
"""

import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Generator, Optional

from .config import SIDECAR_SUFFIX
from .timebase import filename_safe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SidecarLayout:
    """Where the artifacts belonging to one input live."""
    input_file: Path
    directory: Path
    output_dir: Path

    @classmethod
    def for_input(cls, input_file: Path, output_dir: Optional[Path] = None) -> "SidecarLayout":
        directory = input_file.parent / f"{input_file.name}_{SIDECAR_SUFFIX}"
        return cls(input_file, directory, output_dir or directory)

    @property
    def metadata_log(self) -> Path:
        return self.directory / f"{self.input_file.name}.{SIDECAR_SUFFIX}.xml"

    @property
    def subtitles(self) -> Path:
        return self.directory / f"{self.input_file.name}.{SIDECAR_SUFFIX}.vtt"

    @property
    def captions(self) -> Path:
        return self.directory / f"{self.input_file.name}.{SIDECAR_SUFFIX}.scc"

    def output_path(self, start_pts: str, extension: str) -> Path:
        """Deterministic output name for the range starting at start_pts."""
        return self.output_dir / f"{self.input_file.stem}_{filename_safe(start_pts)}.{extension}"

    def ensure(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self.output_dir.mkdir(parents=True, exist_ok=True)


@contextmanager
def temp_artifact(directory: Path, suffix: str, keep: bool = False) -> Generator[Path, None, None]:
    """
    Context manager for a temporary file inside directory.

    The file is removed on exit whether or not the body succeeded,
    unless keep is set.

    Yields:
        Path to an empty temporary file
    """
    directory.mkdir(parents=True, exist_ok=True)
    handle, name = tempfile.mkstemp(suffix=suffix, prefix=".dvpackager-", dir=directory)
    os.close(handle)
    path = Path(name)
    try:
        yield path
    finally:
        if not keep and path.exists():
            try:
                if path.is_dir():
                    shutil.rmtree(path)
                else:
                    path.unlink()
            except OSError as e:
                logger.error("Failed to remove temporary file %s: %s", path, e)
