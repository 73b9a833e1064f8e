"""
Small path and text helpers shared by the schema loader, scanner and CLI.
"""

from pathlib import Path
from typing import Any, Dict, Union

PathLike = Union[str, Path]


def ensure_directory(path: PathLike) -> Path:
    """Create ``path`` (and parents) if missing and return it as a Path."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def get_file_extension(filepath: PathLike) -> str:
    """
    Lower-cased suffix including the dot, '' when there is none.

    Example:
        >>> get_file_extension("vendors/Wyncken.YAML")
        '.yaml'
    """
    return Path(filepath).suffix.lower()


def validate_file_exists(filepath: PathLike) -> bool:
    return Path(filepath).is_file()


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursive merge used to lay a vendor schema file over the settings defaults.

    Nested mappings are merged key by key; any other value in ``override``
    (lists included) replaces the one in ``base``. Neither input is modified.

    Example:
        >>> merge_dicts({"numeric_locale": {"decimal_separator": "."}, "window_bound": 20},
        ...             {"numeric_locale": {"decimal_separator": ","}})
        {'numeric_locale': {'decimal_separator': ','}, 'window_bound': 20}
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_dicts(current, value)
        else:
            merged[key] = value
    return merged


def collapse_whitespace(text: str) -> str:
    """Squash runs of whitespace into single spaces and strip the ends."""
    return ' '.join(text.split())
