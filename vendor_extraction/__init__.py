"""
Vendor Line-Item Extraction Engine.

Turns plain text extracted from vendor invoices and catalogs into
structured line items (item code, description, attributes, sizes,
quantities, prices), driven by one data-only schema per vendor layout.

Example:
    >>> from vendor_extraction import extract_text, load_vendor_schema
    >>> result = extract_text(text, load_vendor_schema("armedangels"))
    >>> print(result.to_json())
"""

__version__ = "1.0.0"

from .models import (
    Diagnostic,
    DiagnosticReason,
    ExtractionResult,
    LineStream,
    OutputRecord,
    RawRecord
)
from .schema import (
    NumericLocale,
    VendorSchema,
    available_vendors,
    load_schema_file,
    load_vendor_schema
)
from .scanner import ExtractionPipeline, extract, extract_text

__all__ = [
    '__version__',
    'extract',
    'extract_text',
    'ExtractionPipeline',
    'VendorSchema',
    'NumericLocale',
    'available_vendors',
    'load_schema_file',
    'load_vendor_schema',
    'Diagnostic',
    'DiagnosticReason',
    'ExtractionResult',
    'LineStream',
    'OutputRecord',
    'RawRecord'
]
