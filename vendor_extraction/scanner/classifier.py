"""
Line Classification Helpers.

Predicates shared by the anchor scanner, the field window and the size
collector. All of them look at one normalized line and the schema only.
"""

from typing import NamedTuple, Optional

from vendor_extraction.schema.vendor_schema import VendorSchema, label_key


class LabelMatch(NamedTuple):
    """A line recognised as a label, with its inline value if any."""
    field_name: str
    rank: int
    label: str
    value: Optional[str]


def is_anchor(line: str, schema: VendorSchema) -> bool:
    return schema.anchor_regex.match(line) is not None


def is_terminator(line: str, schema: VendorSchema) -> bool:
    return any(regex.search(line) for regex in schema.terminator_regexes)


def is_skip_line(line: str, schema: VendorSchema) -> bool:
    return any(regex.search(line) for regex in schema.skip_regexes)


def is_size_code(line: str, schema: VendorSchema) -> bool:
    """True if the whole line is one token of the size vocabulary."""
    return ' '.join(line.split()) in schema.size_code_vocabulary


def match_label(line: str, schema: VendorSchema) -> Optional[LabelMatch]:
    """
    Recognise "Label", "Label:" and "Label: value" lines.

    Args:
        line: Normalized line.
        schema: Vendor schema holding the label vocabulary.

    Returns:
        LabelMatch, or None if the line does not start with a known
        label. ``value`` is None when nothing follows the label.
    """
    if schema.label_regex is None:
        return None

    match = schema.label_regex.match(line)
    if match is None:
        return None

    label = match.group('label')
    target = schema.label_fields.get(label_key(label))
    if target is None:
        return None

    value = match.group('value')
    if value is not None:
        value = value.strip() or None

    field_name, rank = target
    return LabelMatch(field_name, rank, label, value)


def is_label(line: str, schema: VendorSchema) -> bool:
    return match_label(line, schema) is not None


def is_boundary(line: str, schema: VendorSchema) -> bool:
    """Lines that can never serve as a value: labels, anchors, terminators."""
    return (
        is_anchor(line, schema)
        or is_terminator(line, schema)
        or is_label(line, schema)
    )
