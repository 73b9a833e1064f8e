"""
Custom Exceptions Module.

This module defines all custom exceptions used throughout the vendor
extraction engine. Recoverable document problems are never raised; they
are reported as Diagnostic records on the ExtractionResult. Exceptions
are reserved for unusable input and broken configuration.

Exception Hierarchy:
    VendorExtractionError (base)
    ├── InputError
    │   ├── InputFileNotFoundError
    │   └── StructuralInputError
    ├── SchemaError
    │   ├── InvalidSchemaError
    │   └── UnknownVendorError
    └── PostProcessingError
        └── ValidationError
"""


class VendorExtractionError(Exception):
    """
    Base exception for all vendor extraction errors.

    All custom exceptions in this system inherit from this class,
    allowing for easy catching of all system-specific errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(VendorExtractionError):
    """Base exception for input handling errors."""
    pass


class InputFileNotFoundError(InputError):
    """Raised when an input text file cannot be found."""

    def __init__(self, filepath: str):
        message = f"File not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


class StructuralInputError(InputError):
    """
    Raised when the line sequence itself is unusable (null or empty).

    The pipeline converts this into a single diagnostic instead of
    letting it escape to the caller.
    """

    def __init__(self, reason: str = None):
        message = "Structurally invalid line input"
        details = {"reason": reason}
        super().__init__(message, details)


# =============================================================================
# SCHEMA ERRORS
# =============================================================================

class SchemaError(VendorExtractionError):
    """Base exception for vendor schema errors."""
    pass


class InvalidSchemaError(SchemaError):
    """
    Raised when a vendor schema definition is malformed.

    Example:
        >>> raise InvalidSchemaError("wyncken", "window_bound must be positive")
    """

    def __init__(self, vendor: str, reason: str = None):
        message = f"Invalid vendor schema: {vendor}"
        details = {"vendor": vendor, "reason": reason}
        super().__init__(message, details)


class UnknownVendorError(SchemaError):
    """Raised when no schema file exists for the requested vendor."""

    def __init__(self, vendor: str, available: list = None):
        message = f"Unknown vendor: '{vendor}'"
        details = {"vendor": vendor, "available": available or []}
        super().__init__(message, details)


# =============================================================================
# POST-PROCESSING ERRORS
# =============================================================================

class PostProcessingError(VendorExtractionError):
    """Base exception for post-processing errors."""
    pass


class ValidationError(PostProcessingError):
    """Raised when strict record validation fails."""

    def __init__(self, field: str, value: str, reason: str = None):
        message = f"Validation failed for field '{field}'"
        details = {"field": field, "value": value, "reason": reason}
        super().__init__(message, details)


# Export all exceptions
__all__ = [
    'VendorExtractionError',
    'InputError',
    'InputFileNotFoundError',
    'StructuralInputError',
    'SchemaError',
    'InvalidSchemaError',
    'UnknownVendorError',
    'PostProcessingError',
    'ValidationError',
]
