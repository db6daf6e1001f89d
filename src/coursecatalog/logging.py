"""Logging setup for the course catalog.

Every module logs through ``logging.getLogger(__name__)`` below the
``coursecatalog`` logger. ``setup_logging`` attaches one rotating file
handler (and optionally a console handler) to that logger.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "coursecatalog"
ENV_LOG_DIR = "COURSECATALOG_LOG_DIR"
ENV_LOG_LEVEL = "COURSECATALOG_LOG_LEVEL"

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "coursecatalog.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_EMAIL = re.compile(r"\b([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*@([A-Za-z0-9.-]+\.[A-Za-z]{2,})\b")
_SENSITIVE = [
    (re.compile(r"\$pbkdf2-sha256\$[^\s'\"]+"), "[PASSWORD_HASH]"),
    (re.compile(r"\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}"), "[PASSWORD_HASH]"),
    (re.compile(r"password=[^\s&]+"), "password=[REDACTED]"),
    (re.compile(r"Bearer [a-zA-Z0-9._-]+"), "Bearer [REDACTED]"),
]


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """Configure the ``coursecatalog`` logger. Safe to call more than once.

    Args:
        log_dir: Where log files go; falls back to $COURSECATALOG_LOG_DIR, then "logs".
        log_file: File name inside ``log_dir``.
        max_bytes: Rotate once the file reaches this size.
        backup_count: Rotated files to keep.
        level: Level name; falls back to $COURSECATALOG_LOG_LEVEL, then INFO.
        console: Also echo records to stderr.

    Returns:
        The configured ``coursecatalog`` logger.
    """
    if log_dir is None:
        log_dir = os.environ.get(ENV_LOG_DIR, DEFAULT_LOG_DIR)
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)

    level_name = (level or os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(numeric_level)
    _reset_handlers(logger)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    log_path = directory / log_file
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info("Course catalog logging initialized (level=%s, file=%s)", level_name, log_path)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a component, e.g. ``get_logger("catalog.search")``."""
    prefix = f"{ROOT_LOGGER}."
    return logging.getLogger(name if name.startswith(prefix) else prefix + name)


def sanitize_for_log(text: str) -> str:
    """Mask e-mail addresses and credentials before logging.

    ``jane.doe@example.com`` becomes ``j***@example.com``.
    """
    result = _EMAIL.sub(r"\1***@\2", text)
    for pattern, replacement in _SENSITIVE:
        result = pattern.sub(replacement, result)
    return result
