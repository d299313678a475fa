"""Logging configuration for the rancherctl package.

Messages go to the console (INFO to stdout, WARNING and above to stderr)
and are appended to the audit log.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from .config import Config
from .errors import UnsupportedEnvironmentError

LOGGER_NAME = "rancherctl"


class _MaxLevelFilter(logging.Filter):
    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def ensure_audit_log(path: Path) -> Path:
    """Create the audit log (mode 0644) if needed and check it is writable."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if not path.exists():
            path.touch()
            os.chmod(path, 0o644)
        with open(path, "a"):
            pass
    except OSError as e:
        raise UnsupportedEnvironmentError(
            f"Cannot write audit log {path}: {e.strerror}. "
            "Run as root or set RANCHERCTL_AUDIT_LOG to a writable path."
        ) from e
    return path


def close_audit_log(path: Path) -> None:
    """Detach and close the handlers appending to ``path``."""
    target = os.path.abspath(path)
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            logger.removeHandler(handler)
            handler.close()


def setup_logging(debug: bool = False, audit_log: Optional[Path] = None) -> logging.Logger:
    """
    Configure the rancherctl logger.

    Args:
        debug: Log at DEBUG instead of the configured level
        audit_log: Append-only audit file; no file logging when None

    Returns:
        The configured package logger
    """
    level = logging.DEBUG if debug else getattr(logging, Config.LOG_LEVEL, logging.INFO)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(Config.LOG_FORMAT)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.addFilter(_MaxLevelFilter(logging.WARNING))
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)
    logger.addHandler(stderr_handler)

    if audit_log is not None:
        file_handler = logging.FileHandler(ensure_audit_log(audit_log), mode="a", encoding="utf-8")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Disable debug logging for noisy libraries
    if not debug:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("kubernetes").setLevel(logging.WARNING)

    return logger
