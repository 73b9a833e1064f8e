"""
Data Model Module for the Vendor Extraction Engine.

This module defines the values exchanged between scanner stages and
handed back to callers:
    - LineStream: normalized document lines
    - RawRecord: per-anchor accumulator
    - OutputRecord: finished line item
    - Diagnostic / DiagnosticReason: recovery notes
    - ExtractionResult: records plus diagnostics for one document
"""

from .line_stream import LineStream
from .records import (
    RawRecord,
    OutputRecord,
    Diagnostic,
    DiagnosticReason,
    NUMERIC_FIELDS,
    PRICE_FIELDS,
    QUANTITY_FIELD,
    RESERVED_FIELDS,
    INLINE_RANK
)
from .extraction_result import ExtractionResult

__all__ = [
    'LineStream',
    'RawRecord',
    'OutputRecord',
    'Diagnostic',
    'DiagnosticReason',
    'ExtractionResult',
    'NUMERIC_FIELDS',
    'PRICE_FIELDS',
    'QUANTITY_FIELD',
    'RESERVED_FIELDS',
    'INLINE_RANK'
]
