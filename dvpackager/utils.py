"""Utility functions for the dvpackager pipeline"""

import shutil
import subprocess
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .exceptions import DependencyError

logger = logging.getLogger(__name__)

def run_cmd(cmd: List[str], capture_output: bool = True,
            check: bool = True) -> subprocess.CompletedProcess:
    """Run a command and handle errors"""
    logger.debug("Running command: %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            capture_output=capture_output,
            check=check,
            text=True
        )
        if result.stdout:
            logger.debug("Command stdout: %s", result.stdout)
        if result.stderr:
            logger.debug("Command stderr: %s", result.stderr)
        return result
    except subprocess.CalledProcessError as e:
        logger.error("Command failed: %s", " ".join(cmd))
        logger.error("Error output: %s", e.stderr)
        raise

def get_file_size(path: Union[str, Path]) -> int:
    """Get file size in bytes"""
    return Path(path).stat().st_size

def get_timestamp() -> str:
    """Get current timestamp in YYYYMMDD_HHMMSS format"""
    return datetime.now().strftime("%Y%m%d_%H%M%S")

def format_size(size: int) -> str:
    """Format file size for display"""
    for unit in ['B', 'KiB', 'MiB', 'GiB', 'TiB']:
        if size < 1024:
            return f"{size:.1f}{unit}"
        size /= 1024
    return f"{size:.1f}TiB"

def resolve_tool(name: str, override: Optional[str] = None) -> Optional[str]:
    """Locate an external tool, preferring an explicit path"""
    if override:
        return shutil.which(override) or (override if Path(override).is_file() else None)
    return shutil.which(name)

def check_dependencies(tools, required: Sequence[str] = ("ffmpeg", "dvrescue")) -> Dict[str, Optional[str]]:
    """
    Check for required dependencies.

    Args:
        tools: ToolPaths with optional overrides
        required: Tools that must be present

    Returns:
        Resolved path (or None) for ffmpeg, ffprobe and dvrescue

    Raises:
        DependencyError: If a required tool cannot be found
    """
    resolved = {
        name: resolve_tool(name, getattr(tools, name))
        for name in ("ffmpeg", "ffprobe", "dvrescue")
    }
    for name in required:
        if resolved[name] is None:
            raise DependencyError(f"Required dependency not found: {name}", module="utils")
    if resolved["ffprobe"] is None:
        logger.warning("ffprobe not found, audio/video sync will not be verified")
    return resolved
