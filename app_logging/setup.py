"""
Logging Setup
Routes the goals, capture and goal_tracker package loggers to one rotating
log file under the state directory, plus an optional console stream.
"""
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from goal_tracker.state_paths import resolve_state_dir

COMPONENTS = ("goals", "capture", "goal_tracker")

DETAILED_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(filename)s:%(lineno)d | %(message)s"
SIMPLE_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

MAX_LOG_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_BACKUPS = 5


def _level(log_level: str) -> int:
    return getattr(logging, str(log_level).upper(), logging.INFO)


def log_file_path(log_dir: Optional[Path] = None) -> Path:
    """Today's log file; defaults to <state dir>/logs."""
    base = Path(log_dir).expanduser() if log_dir is not None else resolve_state_dir() / "logs"
    return base / f"goal_tracker_{datetime.now().strftime('%Y%m%d')}.log"


def reset_logging(components: Iterable[str] = COMPONENTS) -> None:
    """Close and detach every handler installed on the component loggers."""
    for name in components:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    components: Iterable[str] = COMPONENTS,
    console_output: bool = True,
) -> Path:
    """
    Configure logging for the Goal Tracker packages.

    The file handler always records DEBUG and up; the console follows
    ``log_level``. Calling it again replaces the previous handlers.

    Args:
        log_level: Console level name (INFO, DEBUG, ...)
        log_dir: Directory for the log file (defaults to <state dir>/logs)
        components: Logger names to configure
        console_output: Whether to also log to stdout

    Returns:
        Path of the log file being written
    """
    components = tuple(components)
    log_file = log_file_path(log_dir)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    handlers: list[logging.Handler] = [file_handler]
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(_level(log_level))
        console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT, datefmt="%H:%M:%S"))
        handlers.append(console_handler)

    reset_logging(components)
    for name in components:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        for handler in handlers:
            logger.addHandler(handler)
        # Records already reach our handlers; keep them off the root logger
        logger.propagate = False

    logging.getLogger("goal_tracker").debug(f"Logging to {log_file}")
    return log_file
