"""
Size Breakdown Collector Module.

Collects the size/quantity pairs that follow a record's field window:

    XS
    1
    S
    2

A size code must be followed by a bare integer line. Anything else
leaves the code orphaned and is reported as a diagnostic.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from vendor_extraction.models.line_stream import LineStream
from vendor_extraction.models.records import Diagnostic, DiagnosticReason
from vendor_extraction.scanner.classifier import (
    is_anchor,
    is_size_code,
    is_skip_line,
    is_terminator
)
from vendor_extraction.scanner.numeric import get_parser
from vendor_extraction.schema.vendor_schema import VendorSchema
from vendor_extraction.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class SizeBreakdown:
    """
    Collected pairs.

    Attributes:
        pairs: Ordered (size code, quantity) pairs
        stop_index: First line index not consumed
    """
    pairs: List[Tuple[str, int]] = field(default_factory=list)
    stop_index: int = 0


def collect_sizes(stream: LineStream, from_index: int, schema: VendorSchema,
                  diagnostics: List[Diagnostic]) -> SizeBreakdown:
    """
    Collect size/quantity pairs starting at from_index.

    Args:
        stream: Normalized document lines.
        from_index: Index where the breakdown may begin.
        schema: Vendor schema providing size, skip and terminator vocabularies.
        diagnostics: List that orphaned-size notes are appended to.

    Returns:
        SizeBreakdown; stop_index >= from_index.

    Example:
        >>> breakdown = collect_sizes(LineStream(("XS", "S", "2")), 0, schema, diags)
        >>> breakdown.pairs
        [('S', 2)]
    """
    parser = get_parser(schema.numeric_locale)
    pairs: List[Tuple[str, int]] = []
    cursor = max(from_index, 0)

    while cursor < len(stream):
        line = stream[cursor]

        if is_skip_line(line, schema) and not is_size_code(line, schema):
            cursor += 1
            continue

        if is_anchor(line, schema) or is_terminator(line, schema) \
                or not is_size_code(line, schema):
            break

        size_code = ' '.join(line.split())
        following = _next_content_line(stream, cursor + 1, schema)

        if following >= len(stream):
            _orphan(diagnostics, cursor, line, "end of stream")
            cursor += 1
            break

        next_line = stream[following]
        if is_size_code(next_line, schema):
            _orphan(diagnostics, cursor, line, "followed by another size code")
            cursor = following
            continue

        quantity = None
        if next_line.isascii() and next_line.isdigit():
            quantity = parser.parse_quantity(next_line)
        if quantity is None:
            _orphan(diagnostics, cursor, line, "no quantity")
            cursor += 1
            break

        pairs.append((size_code, quantity))
        cursor = following + 1

    if pairs:
        logger.debug(f"Collected {len(pairs)} size pairs ending at line {cursor}")
    return SizeBreakdown(pairs=pairs, stop_index=cursor)


def _next_content_line(stream: LineStream, index: int, schema: VendorSchema) -> int:
    """Index of the next line that is not noise (may be len(stream))."""
    while index < len(stream):
        line = stream[index]
        if not is_skip_line(line, schema) or is_size_code(line, schema):
            return index
        index += 1
    return index


def _orphan(diagnostics: List[Diagnostic], index: int, line: str, detail: str) -> None:
    logger.debug(f"Orphaned size token at line {index}: {line!r} ({detail})")
    diagnostics.append(
        Diagnostic(index, line, DiagnosticReason.ORPHANED_SIZE_TOKEN, detail)
    )
