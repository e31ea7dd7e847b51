"""Centralized logging configuration for dvpackager"""

import logging
from typing import Optional
from pathlib import Path

from rich.logging import RichHandler

from .config import LOG_DIR
from .utils import get_timestamp

def configure_logging(log_level: str = "INFO", file_logging: bool = True,
                      log_dir: Path = LOG_DIR) -> Optional[Path]:
    """
    Central logging configuration for all modules.

    Returns:
        Path of the session log file, or None without file logging
    """
    logger = logging.getLogger("dvpackager")
    logger.setLevel(log_level)

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(show_path=False, rich_tracebacks=True)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    log_file = None
    if file_logging:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"dvpackager_{get_timestamp()}.log"
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))
        logger.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
