"""
Vendor Schema Module.

This module provides the configuration values that parametrize the
extraction engine per document layout:
    - VendorSchema / NumericLocale definitions
    - YAML loading from config/vendors/
"""

from .vendor_schema import VendorSchema, NumericLocale, label_key
from .loader import (
    available_vendors,
    load_schema_file,
    load_vendor_schema,
    schema_from_mapping
)

__all__ = [
    'VendorSchema',
    'NumericLocale',
    'label_key',
    'available_vendors',
    'load_schema_file',
    'load_vendor_schema',
    'schema_from_mapping'
]
