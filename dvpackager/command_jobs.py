"""
command_jobs.py

Defines a base class for command jobs and specialized implementations for
the external collaborators (dvrescue analysis, ffmpeg remuxing).
"""

import logging
import subprocess
from typing import List
from .utils import run_cmd
from .exceptions import (
    CommandExecutionError, AnalysisError, RemuxFailure
)

logger = logging.getLogger(__name__)

class CommandJob:
    """
    Base class representing a command job.

    Attributes:
        cmd (List[str]): The command to run
    """
    def __init__(self, cmd: List[str]):
        self.cmd = cmd

    def execute(self) -> None:
        """
        Execute the stored command.

        Raises:
            CommandExecutionError: If command fails
        """
        logger.debug("Executing command: %s", " ".join(self.cmd))
        try:
            run_cmd(self.cmd)
        except (subprocess.CalledProcessError, OSError) as e:
            raise CommandExecutionError(
                f"Command failed: {' '.join(self.cmd)}",
                module="command_jobs"
            ) from e

class AnalysisJob(CommandJob):
    """Job for producing the frame-level analysis log."""
    def execute(self) -> None:
        try:
            super().execute()
        except CommandExecutionError as e:
            raise AnalysisError(
                f"Analysis failed: {str(e)}",
                module="analysis"
            ) from e

class RemuxJob(CommandJob):
    """Job for extracting and remuxing one range."""
    def execute(self) -> None:
        try:
            super().execute()
        except CommandExecutionError as e:
            raise RemuxFailure(
                f"Remux failed: {str(e)}",
                module="remux"
            ) from e
