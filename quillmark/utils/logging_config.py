"""
Logging setup with a rotating log file.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .resource_loader import get_log_dir


def setup_logging(console_level: int = logging.INFO, log_dir: Optional[Path] = None) -> Path:
    """
    Configure the ``quillmark`` logger.

    Writes DEBUG and above to ``quillmark.log`` (2 MB per file, 3 rotations)
    and ``console_level`` and above to stderr.

    Returns:
        Path to the log directory
    """
    log_dir = log_dir or get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("quillmark")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    file_handler = RotatingFileHandler(
        log_dir / "quillmark.log",
        maxBytes=2 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)-8s | %(name)s | %(message)s"))
    logger.addHandler(console_handler)

    logger.debug("Logging to %s", log_dir)
    return log_dir
