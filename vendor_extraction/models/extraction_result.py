"""
Extraction Result Data Class.

This module defines the batch result returned for one document: the
ordered output records plus the ordered diagnostics explaining every
recovery the scanner had to make.
"""

import json
from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .records import Diagnostic, DiagnosticReason, OutputRecord


@dataclass
class ExtractionResult:
    """
    Represents the result of scanning one document.

    The result is never empty-and-silent: malformed input always yields
    records, diagnostics, or both. Whether incomplete records are
    acceptable is left to the caller.

    Attributes:
        vendor: Name of the schema used
        records: Ordered OutputRecords
        diagnostics: Ordered Diagnostics
        line_count: Number of lines in the scanned stream

    Example:
        >>> result = extract(lines, schema)
        >>> for record in result.records:
        ...     print(record.item_code, record.size, record.quantity)
        >>> print(result.to_json())
    """
    vendor: Optional[str] = None
    records: List[OutputRecord] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    line_count: int = 0

    @property
    def success(self) -> bool:
        """False only when the input was structurally unusable."""
        return not any(
            d.reason is DiagnosticReason.STRUCTURAL_INPUT_ERROR
            for d in self.diagnostics
        )

    @property
    def record_count(self) -> int:
        return len(self.records)

    @property
    def item_codes(self) -> List[str]:
        """Distinct item codes in first-seen order."""
        return list(dict.fromkeys(r.item_code for r in self.records))

    @property
    def total_quantity(self) -> int:
        return sum(r.quantity for r in self.records)

    @property
    def total_value(self) -> Decimal:
        """Sum of known record totals; records without a total count as zero."""
        return sum(
            (r.total_price for r in self.records if r.total_price is not None),
            Decimal("0")
        )

    def diagnostic_counts(self) -> Dict[str, int]:
        """Number of diagnostics per reason value."""
        counts = Counter(d.reason.value for d in self.diagnostics)
        return dict(sorted(counts.items()))

    def diagnostics_for(self, reason: DiagnosticReason) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.reason is reason]

    def add_record(self, record: OutputRecord) -> None:
        self.records.append(record)

    def add_diagnostic(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary format.

        Returns:
            Dictionary representation of the extraction result.
        """
        return {
            'vendor': self.vendor,
            'success': self.success,
            'line_count': self.line_count,
            'record_count': self.record_count,
            'total_quantity': self.total_quantity,
            'total_value': f"{self.total_value:.2f}",
            'diagnostic_counts': self.diagnostic_counts(),
            'records': [r.to_dict() for r in self.records],
            'diagnostics': [d.to_dict() for d in self.diagnostics],
        }

    def to_json(self, indent: int = 2) -> str:
        """
        Convert to JSON string.

        Args:
            indent: JSON indentation level.

        Returns:
            JSON string representation.
        """
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def __repr__(self) -> str:
        return (
            f"ExtractionResult("
            f"vendor={self.vendor}, "
            f"records={self.record_count}, "
            f"diagnostics={len(self.diagnostics)})"
        )
