"""
NDC to GTIN-14 encoding.

A 10-digit NDC becomes a GTIN-14 by prefixing the indicator digit and the
US pharma company prefix ("103") and appending a Mod10 check digit.
"""

from __future__ import annotations

import logging
import re
from typing import Tuple

from ..validators.validators import mod10_check_digit, validate_ndc


logger = logging.getLogger(__name__)

GTIN_PREFIX = "103"

# Placeholder returned for unusable input. Its check digit does not verify
# (NDC 0000000000 encodes to 10300000000008); kept as is for compatibility
FALLBACK_GTIN = "10300000000005"

_SEPARATORS = re.compile(r"[-\s]")


def normalize_ndc(ndc: str) -> str:
    """Remove hyphens and whitespace."""
    return _SEPARATORS.sub("", ndc or "")


def encode_ndc(ndc: str) -> Tuple[str, bool]:
    """
    Encode an NDC, reporting whether the fallback GTIN was substituted.

    Returns:
        (gtin14, is_fallback)
    """
    if not ndc or not ndc.strip():
        return FALLBACK_GTIN, True

    clean_ndc = normalize_ndc(ndc)
    check = validate_ndc(clean_ndc)
    if not check.valid:
        logger.debug("NDC %r rejected (%s), using fallback GTIN", ndc, "; ".join(check.errors))
        return FALLBACK_GTIN, True

    digits13 = GTIN_PREFIX + clean_ndc
    return digits13 + str(mod10_check_digit(digits13)), False


def ndc_to_gtin14(ndc: str) -> str:
    """
    Convert a raw NDC string into a 14-digit GTIN.

    Never raises: malformed input (empty, wrong length, non-digits) yields
    FALLBACK_GTIN.

    Example:
        >>> ndc_to_gtin14("0123-456-789")
        '10301234567893'
    """
    return encode_ndc(ndc)[0]
