"""
Record Data Classes.

This module defines the record structures that flow through the
scanner:

    RawRecord     - mutable accumulator bound to one anchor match
    OutputRecord  - immutable line item handed to downstream exporters
    Diagnostic    - non-fatal recovery note with the line it refers to
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


# Fields parsed as numbers; every other field is a free-form string
QUANTITY_FIELD = 'quantity'
PRICE_FIELDS = ('unit_price', 'total_price')
NUMERIC_FIELDS = (QUANTITY_FIELD,) + PRICE_FIELDS

# Fields with a dedicated slot on OutputRecord instead of an attribute
RESERVED_FIELDS = ('item_code', 'description', 'size') + NUMERIC_FIELDS

# Rank given to values captured on the anchor line itself; labels rank 0..n
INLINE_RANK = -1


class DiagnosticReason(str, Enum):
    """Why a diagnostic was recorded."""

    STRUCTURAL_INPUT_ERROR = 'structural_input_error'
    FIELD_RECOVERY_GAP = 'field_recovery_gap'
    ORPHANED_SIZE_TOKEN = 'orphaned_size_token'
    NUMERIC_PARSE_FAILURE = 'numeric_parse_failure'
    MISSING_ITEM_CODE = 'missing_item_code'


@dataclass(frozen=True)
class Diagnostic:
    """
    A non-fatal recovery note.

    Attributes:
        line_index: Index into the LineStream (-1 when no line applies)
        raw_text: The offending line, verbatim
        reason: DiagnosticReason member
        detail: Optional short note, usually the field concerned
    """
    line_index: int
    raw_text: str
    reason: DiagnosticReason
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'line_index': self.line_index,
            'raw_text': self.raw_text,
            'reason': self.reason.value,
            'detail': self.detail,
        }


@dataclass
class RawRecord:
    """
    Accumulator for one record while its window is open.

    Labeled values carry a rank (position of the label in the schema
    vocabulary, or INLINE_RANK for anchor-line captures); a lower rank
    wins when two sources target the same field. Soft values are kept
    apart and only fill fields the labeled path left unset.

    Attributes:
        anchor_index: Line index of the anchor
        item_code: Item code from the anchor match or the following line
        description_parts: Ordered free-text fragments
        fields: Labeled values by field name (str, Decimal or int)
        soft_fields: Values recognised by content alone
        sizes: Ordered (size code, quantity) pairs
    """
    anchor_index: int
    item_code: str = ""
    description_parts: List[str] = field(default_factory=list)
    fields: Dict[str, Any] = field(default_factory=dict)
    soft_fields: Dict[str, Any] = field(default_factory=dict)
    sizes: List[Tuple[str, int]] = field(default_factory=list)
    _ranks: Dict[str, int] = field(default_factory=dict, init=False, repr=False)

    def set_field(self, name: str, value: Any, rank: int) -> bool:
        """
        Store a labeled value unless a higher-priority source already did.

        Returns:
            True if the value was stored.
        """
        current = self._ranks.get(name)
        if current is not None and current <= rank:
            return False
        self.fields[name] = value
        self._ranks[name] = rank
        return True

    def set_soft_field(self, name: str, value: Any) -> None:
        """Store a soft value; the first one seen for a field is kept."""
        self.soft_fields.setdefault(name, value)

    def has_field(self, name: str) -> bool:
        return name in self.fields or name in self.soft_fields

    def resolved_fields(self) -> Dict[str, Any]:
        """Soft values overlaid by labeled values (labeled always win)."""
        merged = dict(self.soft_fields)
        merged.update(self.fields)
        return merged

    def add_description(self, text: str) -> None:
        self.description_parts.append(text)

    def add_size(self, size_code: str, quantity: int) -> None:
        self.sizes.append((size_code, quantity))


@dataclass(frozen=True)
class OutputRecord:
    """
    One commercial line item.

    Attributes:
        item_code: Non-empty code derived from the anchor
        description: Joined description text (may be empty)
        attributes: Free-form named strings (colour, fabric, material...)
        size: Size label, or the schema placeholder
        quantity: Non-negative integer
        unit_price: Non-negative Decimal or None
        total_price: Non-negative Decimal or None

    Example:
        >>> record = OutputRecord("WK20W170", "PULL ON", {"colour": "Blue"},
        ...                       "One Size", 5, Decimal("26.50"), None)
        >>> record.to_dict()["unit_price"]
        '26.50'
    """
    item_code: str
    description: str
    attributes: Dict[str, str]
    size: str
    quantity: int
    unit_price: Optional[Decimal] = None
    total_price: Optional[Decimal] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a JSON-friendly dictionary.

        Prices are rendered as two-decimal strings so that no float
        rounding creeps into exported amounts.
        """
        return {
            'item_code': self.item_code,
            'description': self.description,
            'attributes': dict(sorted(self.attributes.items())),
            'size': self.size,
            'quantity': self.quantity,
            'unit_price': _format_amount(self.unit_price),
            'total_price': _format_amount(self.total_price),
        }

    def __repr__(self) -> str:
        return (
            f"OutputRecord(item={self.item_code}, size={self.size}, "
            f"qty={self.quantity}, unit={_format_amount(self.unit_price)})"
        )


def _format_amount(value: Optional[Decimal]) -> Optional[str]:
    if value is None:
        return None
    return f"{value:.2f}"
