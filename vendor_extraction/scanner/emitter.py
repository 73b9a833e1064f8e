"""
Record Emitter Module.

Turns a finished RawRecord into OutputRecords: one per size pair, or a
single record when the item has no size breakdown.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from vendor_extraction.models.records import (
    Diagnostic,
    DiagnosticReason,
    OutputRecord,
    QUANTITY_FIELD,
    RESERVED_FIELDS,
    RawRecord
)
from vendor_extraction.schema.vendor_schema import VendorSchema
from vendor_extraction.utils.helpers import collapse_whitespace
from vendor_extraction.utils.logger import get_logger

logger = get_logger(__name__)

DESCRIPTION_FIELD = 'description'
SIZE_FIELD = 'size'


def emit(raw_record: RawRecord, schema: VendorSchema,
         diagnostics: List[Diagnostic], anchor_text: str = "") -> List[OutputRecord]:
    """
    Build output records from a raw record.

    Args:
        raw_record: Accumulated window and size data.
        schema: Vendor schema (size aliases, default size, strip patterns).
        diagnostics: List that a missing item code is reported to.
        anchor_text: Anchor line, quoted in that diagnostic.

    Returns:
        List of OutputRecord; empty only when the item code is missing.

    Example:
        A raw record with sizes [("XS", 1), ("S", 2)] and unit price
        29.95 yields two records with totals 29.95 and 59.90.
    """
    item_code = collapse_whitespace(raw_record.item_code)
    if not item_code:
        diagnostics.append(Diagnostic(
            raw_record.anchor_index,
            anchor_text,
            DiagnosticReason.MISSING_ITEM_CODE,
            "record dropped"
        ))
        logger.debug(f"Dropping record at line {raw_record.anchor_index}: no item code")
        return []

    fields = raw_record.resolved_fields()
    description = _build_description(raw_record, fields, schema)
    attributes = _build_attributes(fields)
    unit_price: Optional[Decimal] = fields.get('unit_price')
    aliases = schema.size_alias_map

    if raw_record.sizes:
        return [
            OutputRecord(
                item_code=item_code,
                description=description,
                attributes=dict(attributes),
                size=_size_label(size_code, aliases),
                quantity=quantity,
                unit_price=unit_price,
                total_price=_line_total(unit_price, quantity)
            )
            for size_code, quantity in raw_record.sizes
        ]

    quantity = fields.get(QUANTITY_FIELD)
    if quantity is None:
        quantity = 0

    size_value = fields.get(SIZE_FIELD)
    size = _size_label(str(size_value), aliases) if size_value else schema.default_size

    total_price: Optional[Decimal] = fields.get('total_price')
    if total_price is None and QUANTITY_FIELD in fields:
        total_price = _line_total(unit_price, quantity)

    return [OutputRecord(
        item_code=item_code,
        description=description,
        attributes=attributes,
        size=size,
        quantity=quantity,
        unit_price=unit_price,
        total_price=total_price
    )]


def _build_description(raw_record: RawRecord, fields: Dict[str, Any],
                       schema: VendorSchema) -> str:
    parts = list(raw_record.description_parts)
    labeled = fields.get(DESCRIPTION_FIELD)
    if labeled:
        parts.append(str(labeled))

    description = collapse_whitespace(' '.join(parts))
    for regex in schema.strip_regexes:
        description = regex.sub('', description)
    return collapse_whitespace(description)


def _build_attributes(fields: Dict[str, Any]) -> Dict[str, str]:
    return {
        name: str(value)
        for name, value in fields.items()
        if name not in RESERVED_FIELDS and value is not None and str(value)
    }


def _size_label(size_code: str, aliases: Dict[str, str]) -> str:
    if size_code in aliases:
        return aliases[size_code]
    # Aliases are written by hand; tolerate case differences
    lowered = {key.lower(): value for key, value in aliases.items()}
    return lowered.get(size_code.lower(), size_code)


def _line_total(unit_price: Optional[Decimal], quantity: int) -> Optional[Decimal]:
    if unit_price is None:
        return None
    return unit_price * quantity
