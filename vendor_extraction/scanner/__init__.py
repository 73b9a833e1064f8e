"""
Scanner Module.

This module contains the extraction engine proper:
    - Line normalization
    - Numeric token parsing
    - Anchor scanning, field windows and size breakdowns
    - Record emission and the driving pipeline
"""

from .line_normalizer import normalize_text, normalize_lines
from .numeric import (
    NumericTokenParser,
    find_amounts,
    get_parser,
    parse_number,
    parse_quantity
)
from .anchor import AnchorMatch, next_anchor
from .field_window import FieldWindow, extract_fields
from .size_breakdown import SizeBreakdown, collect_sizes
from .emitter import emit
from .pipeline import ExtractionPipeline, PipelineState, extract, extract_text

__all__ = [
    'normalize_text',
    'normalize_lines',
    'NumericTokenParser',
    'find_amounts',
    'get_parser',
    'parse_number',
    'parse_quantity',
    'AnchorMatch',
    'next_anchor',
    'FieldWindow',
    'extract_fields',
    'SizeBreakdown',
    'collect_sizes',
    'emit',
    'ExtractionPipeline',
    'PipelineState',
    'extract',
    'extract_text'
]
