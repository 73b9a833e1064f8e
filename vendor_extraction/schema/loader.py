"""
Vendor Schema Loader.

Builds VendorSchema values from YAML files. Each vendor file is merged
over the ``extraction.schema_defaults`` section of settings.yaml, so a
vendor file only needs to state what differs from the defaults.

Usage:
    from vendor_extraction.schema import load_vendor_schema

    schema = load_vendor_schema("wyncken")
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from config import get_config
from vendor_extraction.utils.exceptions import InvalidSchemaError, UnknownVendorError
from vendor_extraction.utils.helpers import (
    get_file_extension,
    merge_dicts,
    validate_file_exists
)
from vendor_extraction.utils.logger import get_logger
from .vendor_schema import VendorSchema

logger = get_logger(__name__)

SCHEMA_EXTENSIONS = ('.yaml', '.yml')


def get_schema_directory() -> Path:
    """Directory holding the vendor schema files (paths.vendor_schemas)."""
    configured = get_config("paths.vendor_schemas")
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parents[2] / "config" / "vendors"


def available_vendors(schema_dir: Optional[Union[str, Path]] = None) -> List[str]:
    """
    List vendor names that have a schema file.

    Args:
        schema_dir: Directory to search. Defaults to the configured one.

    Returns:
        Sorted vendor names (file stems).
    """
    directory = Path(schema_dir) if schema_dir else get_schema_directory()
    if not directory.is_dir():
        logger.warning(f"Vendor schema directory not found: {directory}")
        return []

    return sorted(
        path.stem for path in directory.iterdir()
        if path.is_file() and get_file_extension(path) in SCHEMA_EXTENSIONS
    )


def schema_from_mapping(data: Dict[str, Any], name: Optional[str] = None) -> VendorSchema:
    """
    Build a schema from a mapping, applying the configured defaults.

    Args:
        data: Vendor-specific schema keys.
        name: Fallback name when the mapping carries none.

    Returns:
        VendorSchema instance.
    """
    defaults = get_config("extraction.schema_defaults", {}) or {}
    merged = merge_dicts(defaults, data)
    if not merged.get('name') and name:
        merged['name'] = name
    return VendorSchema.from_dict(merged)


def load_schema_file(path: Union[str, Path]) -> VendorSchema:
    """
    Load one vendor schema from a YAML file.

    Args:
        path: Path to the schema file.

    Returns:
        VendorSchema instance.

    Raises:
        InvalidSchemaError: If the file is missing, is not valid YAML,
            or describes an invalid schema.
    """
    path = Path(path)
    if not validate_file_exists(path):
        raise InvalidSchemaError(path.stem, f"schema file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise InvalidSchemaError(path.stem, f"invalid YAML: {e}")

    if not isinstance(data, dict):
        raise InvalidSchemaError(path.stem, "schema file must contain a mapping")

    schema = schema_from_mapping(data, name=path.stem)
    logger.debug(
        f"Loaded schema '{schema.name}' from {path.name} "
        f"({len(schema.label_vocabulary)} labels, window {schema.window_bound})"
    )
    return schema


def load_vendor_schema(
    vendor: str,
    schema_dir: Optional[Union[str, Path]] = None
) -> VendorSchema:
    """
    Load the schema for a vendor by name.

    Args:
        vendor: Vendor name, matching a schema file stem (case-insensitive).
        schema_dir: Directory to search. Defaults to the configured one.

    Returns:
        VendorSchema instance.

    Raises:
        UnknownVendorError: If no schema file exists for the vendor.

    Example:
        >>> schema = load_vendor_schema("armedangels")
        >>> schema.window_bound
        10
    """
    directory = Path(schema_dir) if schema_dir else get_schema_directory()
    key = vendor.strip().lower()

    for extension in SCHEMA_EXTENSIONS:
        candidate = directory / f"{key}{extension}"
        if validate_file_exists(candidate):
            return load_schema_file(candidate)

    raise UnknownVendorError(vendor, available_vendors(directory))
