"""
Logging configuration using loguru.

Call setup_logging() at app startup, or just use loguru directly.  Library
modules only ever emit through ``loguru.logger``.
"""

import os
import sys

from loguru import logger


def setup_logging(
    level: str = "WARNING",
    log_dir: str | None = None,
    fmt: str = "<level>[{level.name}]</level> {message}",
    rotation: str = "5 MB",
    retention: str = "14 days",
) -> None:
    """
    Configure loguru with console and optional file output.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
        log_dir: Directory for ``healthnote.log``. If None, only logs to stderr.
        fmt: Loguru format string for the console sink.
        rotation: Log file rotation size.
        retention: How long to keep rotated logs.
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=fmt)

    if log_dir:
        log_dir = os.path.expanduser(log_dir)
        os.makedirs(log_dir, exist_ok=True)
        # File sink always captures debug detail, including swallowed sync failures
        logger.add(
            os.path.join(log_dir, "healthnote.log"),
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}",
            rotation=rotation,
            retention=retention,
        )
