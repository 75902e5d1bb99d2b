"""
Field checks shared by the encoders.
"""

from .validators import (
    DIGITS,
    ValidationResult,
    is_digits,
    mod10_check_digit,
    validate_gtin,
    validate_ndc,
)

__all__ = [
    "DIGITS",
    "ValidationResult",
    "is_digits",
    "mod10_check_digit",
    "validate_gtin",
    "validate_ndc",
]
