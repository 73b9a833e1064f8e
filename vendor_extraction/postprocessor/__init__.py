"""
Post-processing Module.

This module provides optional checks applied after extraction:
    - Amount range validation
    - Record consistency validation
"""

from .validators import AmountValidator, RecordValidator, ValidationResult

__all__ = [
    'AmountValidator',
    'RecordValidator',
    'ValidationResult'
]
