"""
================================================================================
Storefront Tools Common Utilities
================================================================================

Logging setup and small filesystem helpers shared by the test suites and the
runner.

Exports:
    - init_logger: Configure loguru sinks (console + optional rotating file)
    - ensure_directory: Create a directory if needed

Usage:
    from storefront_tools.common import init_logger

    init_logger(level="DEBUG", log_file="logs/ui.log")

================================================================================
"""

import os
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger


DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_logger_initialized = False


def init_logger(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    force: bool = False,
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to $LOG_LEVEL or INFO.
        format_string: Log format string. Uses default if not provided.
        log_file: Optional file path to write logs to.
        rotation: Rotation policy of the file sink.
        retention: Retention policy of the file sink.
        force: Re-initialize even if already configured.

    Example:
        init_logger()  # Use defaults
        init_logger(level="DEBUG", log_file="logs/ui.log")
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    # Remove default handler
    logger.remove()

    level = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    format_string = format_string or DEFAULT_FORMAT

    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
    )

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation=rotation,
            retention=retention,
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized (level={level}, file={log_file or '-'})")


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensures a directory exists, creating it if necessary.

    Returns:
        The directory as a Path (for chaining)
    """
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


__all__ = [
    "init_logger",
    "ensure_directory",
]
