"""Logging setup for the watcher process.

All package loggers share one console handler and one size-rotated log file.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional, Sequence

LOG_FILE_NAME = "mcwatch.log"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
MAX_LOG_BYTES = 1 << 20
LOG_BACKUPS = 3

logger = logging.getLogger(__name__)


def default_log_path() -> Path:
    """$MCWATCH_LOG_DIR/mcwatch.log, or ./logs/mcwatch.log."""
    log_dir = os.getenv("MCWATCH_LOG_DIR")
    return Path(log_dir or Path.cwd() / "logs") / LOG_FILE_NAME


def open_log_file(candidates: Sequence[Path]) -> tuple[Optional[RotatingFileHandler], Optional[Path]]:
    """Open a rotating handler on the first candidate path that is writable."""
    for path in candidates:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
        except OSError as e:
            logger.debug("cannot log to %s: %s", path, e)
            continue
        return handler, path
    return None, None


def setup_logging(
    log_paths: Sequence[Path],
    logger_names: Iterable[str],
    level: int = logging.INFO,
) -> Optional[Path]:
    """Route `logger_names` to stderr and the first writable log path.

    Returns the log file in use, or None when logging is console-only.
    """
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    file_handler, log_path = open_log_file(log_paths)
    if file_handler is not None:
        handlers.append(file_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
    for name in logger_names:
        configured = logging.getLogger(name)
        configured.setLevel(level)
        configured.propagate = False
        for handler in handlers:
            configured.addHandler(handler)

    if log_path is None:
        logger.warning("no writable log file among %s, logging to console only", [str(p) for p in log_paths])
    return log_path
