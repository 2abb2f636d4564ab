"""Loguru setup for readingtracker.

The CLI calls setup_logger once per invocation. Library code only imports
``loguru.logger`` and never adds sinks itself.
"""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

# Short console lines; the CLI's own output goes to stdout through Rich
CONSOLE_FORMAT = "<dim>{time:HH:mm:ss}</dim> <level>{level: <7}</level> <cyan>{name}</cyan> {message}"

FILE_FORMAT = "{time:YYYY-MM-DDTHH:mm:ss.SSSZZ} {level: <7} {name}:{line} {message}"


def setup_logger(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    rotation: str = "5 MB",
    retention: int = 3,
) -> None:
    """Replace loguru's sinks with readingtracker's.

    Args:
        level: Minimum level for every sink
        log_file: Also write to this file when set
        rotation: Size or interval after which the file is rotated
        retention: Number of rotated files to keep
    """
    logger.remove()

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
        )

    logger.debug(f"Logging at {level}" + (f" to {log_file}" if log_file else ""))
