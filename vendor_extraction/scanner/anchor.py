"""
Anchor Scanner Module.

Finds record-start lines. An anchor is the first line at or after a
cursor whose text matches the schema's anchor pattern; the item code
and any inline fields are captured from that same line.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from vendor_extraction.models.line_stream import LineStream
from vendor_extraction.schema.vendor_schema import VendorSchema
from vendor_extraction.utils.logger import get_logger

logger = get_logger(__name__)

ITEM_CODE_GROUP = 'item_code'


@dataclass(frozen=True)
class AnchorMatch:
    """
    A record start.

    Attributes:
        index: Line index of the anchor in the stream
        item_code: Item code captured on the anchor line (may be empty,
            e.g. a bare "Style:" line whose code follows below)
        inline_captures: Field values captured on the anchor line
    """
    index: int
    item_code: str
    inline_captures: Dict[str, str] = field(default_factory=dict)


def next_anchor(stream: LineStream, from_index: int,
                schema: VendorSchema) -> Optional[AnchorMatch]:
    """
    Return the first anchor at or after from_index.

    Args:
        stream: Normalized document lines.
        from_index: First line index to consider.
        schema: Vendor schema providing the anchor pattern.

    Returns:
        AnchorMatch, or None when no anchor remains.
    """
    for index in range(max(from_index, 0), len(stream)):
        line = stream[index]
        match = schema.anchor_regex.match(line)
        if match is None:
            continue

        item_code = _item_code(match)
        captures = _inline_captures(line, match, schema)
        logger.debug(f"Anchor at line {index}: item_code={item_code!r}")
        return AnchorMatch(index=index, item_code=item_code, inline_captures=captures)

    return None


def _item_code(match) -> str:
    groups = match.groupdict()
    if ITEM_CODE_GROUP in groups:
        value = groups[ITEM_CODE_GROUP]
    elif match.re.groups >= 1:
        value = match.group(1)
    else:
        value = None
    return ' '.join((value or '').split())


def _inline_captures(line: str, match, schema: VendorSchema) -> Dict[str, str]:
    captures: Dict[str, str] = {}

    for name, value in match.groupdict().items():
        if name == ITEM_CODE_GROUP or value is None:
            continue
        value = value.strip()
        if value:
            captures[name] = value

    for name, regex in schema.inline_regexes:
        if name in captures:
            continue
        found = regex.search(line)
        if found is None or found.group(1) is None:
            continue
        value = found.group(1).strip()
        if value:
            captures[name] = value

    return captures
