"""
Logging setup for applications that host tilewfc.

The library itself only logs through ``logging.getLogger(__name__)`` and never
configures handlers. Hosts (the Blender add-on, scripts) call this once:

    from tilewfc.logging_config import setup_logging
    setup_logging(logging.INFO, log_file="wfc.log")

Console output goes to stderr; the optional file gets everything from DEBUG up.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "tilewfc"
MAX_LOG_SIZE = 5 * 1024 * 1024  # 5 MB per file
BACKUP_COUNT = 3


def setup_logging(
    console_level: int = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
    file_level: int = logging.DEBUG,
) -> logging.Logger:
    """
    Configure handlers on the ``tilewfc`` logger.

    Args:
        console_level: Level for stderr output (default: WARNING)
        log_file: Optional path of a rotating log file
        file_level: Level for the log file (default: DEBUG)

    Returns:
        The configured ``tilewfc`` logger
    """
    root_logger = logging.getLogger(LOGGER_NAME)
    # Clear any existing handlers (for re-initialization, e.g. add-on reloads)
    teardown_logging()
    root_logger.setLevel(min(console_level, file_level) if log_file else console_level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(fmt="%(levelname)-8s | %(name)-28s | %(message)s"))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-28s | %(funcName)-24s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        root_logger.addHandler(file_handler)
        root_logger.debug("Log file: %s", log_path.absolute())

    return root_logger


def teardown_logging() -> None:
    """Remove the handlers installed by :func:`setup_logging` (add-on unregister, tests)."""
    root_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(root_logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(logging.NOTSET)
