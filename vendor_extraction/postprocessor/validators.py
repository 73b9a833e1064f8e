"""
Record Validators Module.

This module provides an optional business sanity pass over extracted
records:
    - Amount range checks (negative or implausibly large prices)
    - Total vs. unit price x quantity consistency
    - Zero-quantity and missing-price warnings

Validators only report. They never change records.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

from config import get_config
from vendor_extraction.models.extraction_result import ExtractionResult
from vendor_extraction.models.records import OutputRecord
from vendor_extraction.utils.exceptions import ValidationError
from vendor_extraction.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


def _to_decimal(value: Any, fallback: str) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal(fallback)


class AmountValidator:
    """
    Validates amount fields.

    Checks for:
        - Non-negative values
        - Values below a configurable maximum

    Example:
        >>> validator = AmountValidator(max_amount=Decimal("100"))
        >>> validator.validate(Decimal("26.50"))
        (True, 'Valid amount')
        >>> validator.validate(Decimal("2650"))
        (False, 'Amount 2650 exceeds maximum 100')
    """

    MIN_AMOUNT = Decimal("0")
    DEFAULT_MAX_AMOUNT = "10000"

    def __init__(self, max_amount: Optional[Decimal] = None) -> None:
        """
        Initialize the amount validator.

        Args:
            max_amount: Upper bound for a unit price. If None, uses
                ``validation.max_unit_price`` from config.
        """
        if max_amount is None:
            max_amount = _to_decimal(
                get_config("validation.max_unit_price", self.DEFAULT_MAX_AMOUNT),
                self.DEFAULT_MAX_AMOUNT
            )
        self.max_amount = Decimal(max_amount)
        logger.debug(f"AmountValidator initialized (max={self.max_amount})")

    def is_valid(self, amount: Optional[Decimal]) -> bool:
        valid, _ = self.validate(amount)
        return valid

    def validate(self, amount: Optional[Decimal]) -> Tuple[bool, str]:
        """
        Validate an amount with detailed feedback.

        Args:
            amount: Decimal amount; None counts as "not known", not invalid.

        Returns:
            Tuple of (is_valid, message).
        """
        if amount is None:
            return True, "Amount not known"

        if amount < self.MIN_AMOUNT:
            return False, "Amount cannot be negative"

        if amount > self.max_amount:
            return False, f"Amount {amount} exceeds maximum {self.max_amount}"

        return True, "Valid amount"


class RecordValidator:
    """
    Checks extracted records for plausibility.

    Errors (record is suspicious):
        - unit or total price out of range
        - total price differs from unit price x quantity

    Warnings (record is incomplete but plausible):
        - zero quantity
        - unknown unit price

    Example:
        >>> validator = RecordValidator()
        >>> report = validator.validate(result)
        >>> print(report.is_valid, report.errors)
    """

    def __init__(
        self,
        max_unit_price: Optional[Decimal] = None,
        total_tolerance: Optional[Decimal] = None,
        flag_zero_quantity: Optional[bool] = None
    ) -> None:
        self.amount_validator = AmountValidator(max_unit_price)
        if total_tolerance is None:
            total_tolerance = _to_decimal(
                get_config("validation.total_tolerance", "0.01"), "0.01"
            )
        self.total_tolerance = Decimal(total_tolerance)
        if flag_zero_quantity is None:
            flag_zero_quantity = get_config("validation.flag_zero_quantity", True)
        self.flag_zero_quantity = bool(flag_zero_quantity)

    def validate(self, result: ExtractionResult, strict: bool = False) -> 'ValidationResult':
        """
        Validate every record of an extraction result.

        Args:
            result: ExtractionResult to check.
            strict: Raise on the first error instead of collecting.

        Returns:
            ValidationResult with per-record findings.

        Raises:
            ValidationError: In strict mode, when a record fails.
        """
        report = ValidationResult()

        for index, record in enumerate(result.records):
            key = f"{index}:{record.item_code}/{record.size}"
            valid, message = self.validate_record(record, report)
            report.add_field_result(key, valid, message)
            if strict and not valid:
                raise ValidationError(key, record.item_code, message)

        logger.info(
            f"Validated {len(result.records)} records: "
            f"{len(report.errors)} errors, {len(report.warnings)} warnings"
        )
        return report

    def validate_record(
        self,
        record: OutputRecord,
        report: Optional['ValidationResult'] = None
    ) -> Tuple[bool, str]:
        """
        Validate one record.

        Args:
            record: OutputRecord to check.
            report: Optional ValidationResult receiving warnings.

        Returns:
            Tuple of (is_valid, message).
        """
        for name in ('unit_price', 'total_price'):
            valid, message = self.amount_validator.validate(getattr(record, name))
            if not valid:
                return False, f"{name}: {message}"

        if record.quantity < 0:
            return False, "quantity cannot be negative"

        if record.unit_price is not None and record.total_price is not None:
            expected = record.unit_price * record.quantity
            if abs(expected - record.total_price) > self.total_tolerance:
                return False, (
                    f"total {record.total_price} does not match "
                    f"{record.quantity} x {record.unit_price}"
                )

        if report is not None:
            label = f"{record.item_code} ({record.size})"
            if self.flag_zero_quantity and record.quantity == 0:
                report.add_warning(f"{label}: zero quantity")
            if record.unit_price is None:
                report.add_warning(f"{label}: unit price unknown")

        return True, "Valid record"


class ValidationResult:
    """
    Contains the result of validation checks.

    Attributes:
        is_valid: Overall validation result
        errors: List of error messages
        warnings: List of warning messages
        field_results: Per-record validation results
    """

    def __init__(self):
        self.is_valid = True
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.field_results: Dict[str, Tuple[bool, str]] = {}

    def add_error(self, message: str) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(message)

    def add_field_result(
        self,
        field: str,
        is_valid: bool,
        message: str
    ) -> None:
        """Add a record-level validation result."""
        self.field_results[field] = (is_valid, message)
        if not is_valid:
            self.add_error(f"{field}: {message}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'is_valid': self.is_valid,
            'errors': self.errors,
            'warnings': self.warnings,
            'field_results': {
                key: {'is_valid': valid, 'message': message}
                for key, (valid, message) in self.field_results.items()
            }
        }
