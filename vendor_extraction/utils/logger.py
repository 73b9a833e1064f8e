"""
Logging setup for the extraction engine.

Every module logs through a child of the ``vendor_extraction`` logger:

    from vendor_extraction.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Scanning document...")

Handlers are attached once, at startup, by setup_logger() or
setup_logger_from_config(). Console output goes to stderr so that JSON
printed on stdout stays machine-readable.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, TextIO

import colorama
from colorama import Fore, Style

colorama.init()

ROOT_LOGGER_NAME = "vendor_extraction"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Console formatter that tints each line by level."""

    LEVEL_COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno)
        if not color:
            return text
        return f"{color}{text}{Style.RESET_ALL}"


def _to_level(level: str) -> int:
    """Map a level name to its number; unknown names fall back to INFO."""
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def _console_handler(formatter: logging.Formatter, stream: Optional[TextIO]) -> logging.Handler:
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    return handler


def _file_handler(
    log_file: str,
    formatter: logging.Formatter,
    max_bytes: int,
    backup_count: int
) -> logging.Handler:
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
    )
    handler.setFormatter(formatter)
    return handler


def setup_logger(
    level: str = "INFO",
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    log_file: Optional[str] = None,
    max_bytes: int = 10485760,
    backup_count: int = 5,
    colorize: bool = True,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Attach console (and optionally rotating file) handlers to the package logger.

    Calling it again replaces the previous handlers, so a CLI run that
    switches configuration never logs twice.

    Args:
        level: Level name; unknown names mean INFO.
        log_format: Record format, DEFAULT_FORMAT if omitted.
        date_format: Timestamp format, DEFAULT_DATE_FORMAT if omitted.
        log_file: Rotating log file path, or None for console only.
        max_bytes: Rotation size of the log file.
        backup_count: Rotated files to keep.
        colorize: Tint console lines by level (the file is never tinted).
        stream: Console stream, stderr if omitted.

    Returns:
        The ``vendor_extraction`` logger.
    """
    log_format = log_format or DEFAULT_FORMAT
    date_format = date_format or DEFAULT_DATE_FORMAT
    plain = logging.Formatter(log_format, datefmt=date_format)
    console_formatter = ColoredFormatter(log_format, datefmt=date_format) if colorize else plain

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.addHandler(_console_handler(console_formatter, stream))
    if log_file:
        package_logger.addHandler(_file_handler(log_file, plain, max_bytes, backup_count))

    set_level(level)
    package_logger.propagate = False

    package_logger.debug(f"Logging initialized at {logging.getLevelName(package_logger.level)}")
    return package_logger


def set_level(level: str) -> None:
    """Change the level of the package logger and all of its handlers."""
    numeric = _to_level(level)
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(numeric)
    for handler in package_logger.handlers:
        handler.setLevel(numeric)


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``, placed under the package namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logger_from_config() -> logging.Logger:
    """Run setup_logger() with the ``logging`` section of the settings."""
    from config import get_config

    log_file = get_config("logging.file.path") if get_config("logging.file.enabled", False) else None

    return setup_logger(
        level=get_config("logging.level", "INFO"),
        log_format=get_config("logging.format"),
        date_format=get_config("logging.date_format"),
        log_file=log_file,
        max_bytes=get_config("logging.file.max_bytes", 10485760),
        backup_count=get_config("logging.file.backup_count", 5),
        colorize=get_config("logging.console.colorize", True)
    )
