"""
Field checks for the Rx barcode generator.

- NDC shape (10 ASCII digits once separators are removed)
- GTIN-14 length and Mod10 check digit (AI 01)

Checks return a ValidationResult instead of raising so the encoders can
degrade to placeholders and log the reason.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class ValidationResult:
    """Outcome of a field check."""
    valid: bool = True
    errors: List[str] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)

    def fail(self, message: str) -> "ValidationResult":
        self.valid = False
        self.errors.append(message)
        return self


# str.isdigit() also accepts e.g. Arabic-Indic digits
DIGITS = frozenset("0123456789")


def is_digits(value: str) -> bool:
    return bool(value) and set(value) <= DIGITS


def mod10_check_digit(digits: str) -> int:
    """
    GS1 Mod10 check digit for a digit string (without the check digit).

    Weights run 3, 1, 3, ... from the rightmost digit. For the 13 data
    digits of a GTIN-14 that is the same as 3, 1, 3, ... from the left.

    Raises:
        ValueError: digits is empty or not all ASCII digits
    """
    if not is_digits(digits):
        raise ValueError(f"Expected a non-empty digit string, got {digits!r}")

    weighted = sum(int(d) * (1 if pos % 2 else 3) for pos, d in enumerate(digits[::-1]))
    return -weighted % 10


def _digits_of_length(value: str, length: int, what: str) -> ValidationResult:
    result = ValidationResult()
    if not value:
        return result.fail(f"{what} is empty")
    if not is_digits(value):
        return result.fail(f"{what} must contain digits only")
    if len(value) != length:
        return result.fail(f"{what} must be {length} digits, got {len(value)}")
    return result


def validate_ndc(value: str) -> ValidationResult:
    """Separator-free NDC: exactly 10 digits."""
    return _digits_of_length(value, 10, "NDC")


def validate_gtin(value: str) -> ValidationResult:
    """GTIN-14 with a matching check digit in position 14."""
    result = _digits_of_length(value, 14, "GTIN")
    if not result.valid:
        return result

    expected = mod10_check_digit(value[:-1])
    result.meta["check_digit"] = expected
    if int(value[-1]) != expected:
        result.fail(f"Check digit mismatch: expected {expected}, got {value[-1]}")
    return result

