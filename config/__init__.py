"""
Configuration Module for the Vendor Extraction Engine.

Settings come from config/settings.yaml. A custom file (``--config`` on
the command line, or the VENDOR_EXTRACTION_CONFIG environment variable)
only needs the keys it changes: it is laid over the shipped defaults.

Environment overrides:
    VENDOR_EXTRACTION_CONFIG      path of a custom settings file
    VENDOR_EXTRACTION_LOG_LEVEL   replaces logging.level
    VENDOR_EXTRACTION_SCHEMAS     replaces paths.vendor_schemas
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_SETTINGS = Path(__file__).resolve().parent / "settings.yaml"

CONFIG_ENV = "VENDOR_EXTRACTION_CONFIG"
ENV_OVERRIDES = {
    "VENDOR_EXTRACTION_LOG_LEVEL": ("logging", "level"),
    "VENDOR_EXTRACTION_SCHEMAS": ("paths", "vendor_schemas"),
}


def _overlay(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _overlay(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


class ConfigurationManager:
    """
    Process-wide settings holder.

    The first instantiation decides which file is loaded; later calls
    return the same instance. Call reset() to switch files.

    Attributes:
        config_path: Custom settings file, or None for the shipped defaults.

    Example:
        >>> config = ConfigurationManager()
        >>> config.get("extraction.schema_defaults.window_bound")
        20
        >>> config.section("validation")["max_unit_price"]
        10000
    """

    _instance: Optional['ConfigurationManager'] = None

    def __new__(cls, config_path: Optional[str] = None) -> 'ConfigurationManager':
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._initialized = False
            cls._instance = instance
        return cls._instance

    def __init__(self, config_path: Optional[str] = None) -> None:
        if self._initialized:
            return

        custom = config_path or os.environ.get(CONFIG_ENV)
        self.config_path: Optional[Path] = Path(custom) if custom else None
        self._config: Dict[str, Any] = {}
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """
        Build the effective settings: defaults, custom file, environment.

        Raises:
            FileNotFoundError: If a settings file doesn't exist.
            ValueError: If a settings file is not a YAML mapping.
        """
        config = _read_yaml(DEFAULT_SETTINGS)
        if self.config_path is not None:
            config = _overlay(config, _read_yaml(self.config_path))

        for variable, (section, key) in ENV_OVERRIDES.items():
            value = os.environ.get(variable)
            if value:
                config.setdefault(section, {})[key] = value

        self._config = config
        self._resolve_paths()

    def _resolve_paths(self) -> None:
        """Make relative entries under ``paths`` absolute (project root based)."""
        paths = self._config.get('paths') or {}
        for key, value in paths.items():
            if value and not Path(value).is_absolute():
                paths[key] = str(PROJECT_ROOT / value)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a value by dot path, e.g. "logging.file.enabled".

        Returns:
            The value, or default when any part of the path is missing.
        """
        value: Any = self._config
        for part in key.split('.'):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def section(self, name: str) -> Dict[str, Any]:
        """Copy of one top-level section (empty if absent)."""
        return dict(self._config.get(name) or {})

    @classmethod
    def reset(cls) -> None:
        """Forget the current instance so the next one reloads."""
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """Shortcut for ConfigurationManager().get(key, default)."""
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'get_config', 'PROJECT_ROOT']
