"""
Line Normalizer Module.

Turns raw extracted text (or a list of already split lines) into a
LineStream: split on line breaks, trimmed, empty lines dropped, order
and duplicates preserved.
"""

import re
from typing import Iterable, Optional

from vendor_extraction.models.line_stream import LineStream
from vendor_extraction.utils.exceptions import StructuralInputError

# \r\n, \r, \n plus the Unicode line and paragraph separators
_LINE_BREAKS = re.compile(r'\r\n|[\r\n\u2028\u2029\x0b\x0c]')


def normalize_text(raw_text: Optional[str]) -> LineStream:
    """
    Split raw text into a LineStream.

    Args:
        raw_text: Text as produced by the PDF text extractor.

    Returns:
        LineStream of trimmed, non-empty lines. Empty text gives an
        empty stream.

    Raises:
        StructuralInputError: If raw_text is None.

    Example:
        >>> normalize_text("Style:\\n  ABC123 JACKET \\n\\n").lines
        ('Style:', 'ABC123 JACKET')
    """
    if raw_text is None:
        raise StructuralInputError("no text supplied")
    return normalize_lines(_LINE_BREAKS.split(str(raw_text)))


def normalize_lines(lines: Optional[Iterable[str]]) -> LineStream:
    """
    Normalize an ordered sequence of lines into a LineStream.

    Elements that themselves contain line breaks are split further, so
    a caller may pass page texts as well as single lines.

    Raises:
        StructuralInputError: If lines is None or a bare string.
    """
    if lines is None:
        raise StructuralInputError("no lines supplied")
    if isinstance(lines, (str, bytes)):
        raise StructuralInputError("expected a sequence of lines, got a single string")

    normalized = []
    for line in lines:
        if line is None:
            continue
        for part in _LINE_BREAKS.split(str(line)):
            part = part.strip()
            if part:
                normalized.append(part)

    return LineStream(tuple(normalized))
