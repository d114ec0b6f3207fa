"""Utility functions for hoard."""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger


def setup_logging(
    log_file: Optional[Union[str, Path]] = None,
    level: str = "INFO",
    console: bool = False,
) -> None:
    """
    Configure loguru sinks.

    The default stderr handler is always removed so command output stays clean.

    Args:
        log_file: Optional file to log to, rotated at 10 MB
        level: Minimum level for all sinks
        console: Also log to stderr
    """
    logger.remove()

    if console:
        logger.add(sys.stderr, level=level, colorize=True)

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(path),
            level=level,
            rotation="10 MB",
            retention="10 days",
            backtrace=True,
            diagnose=False,
            enqueue=False,
        )
