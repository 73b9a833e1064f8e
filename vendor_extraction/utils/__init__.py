"""
Shared utilities: logging setup, the exception hierarchy and small helpers.
"""

from .logger import setup_logger, setup_logger_from_config, get_logger, set_level
from .helpers import (
    ensure_directory,
    get_file_extension,
    validate_file_exists,
    merge_dicts,
    collapse_whitespace
)

__all__ = [
    'setup_logger',
    'setup_logger_from_config',
    'get_logger',
    'set_level',
    'ensure_directory',
    'get_file_extension',
    'validate_file_exists',
    'merge_dicts',
    'collapse_whitespace'
]
