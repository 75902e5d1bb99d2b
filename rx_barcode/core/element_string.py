"""
GS1 element string formatting.

Builds the human-readable (bracketed AI) element string used both as the
on-screen text and as the Data Matrix payload:

    (01)<GTIN-14>(17)<YYMMDD>(10)<lot>(21)<serial>

AI (01) is always present; (17), (10) and (21) are emitted only when their
value is non-empty, in that order.
"""

from __future__ import annotations

import logging
import os
import re
from urllib.parse import quote, urlencode

from dateutil.parser import isoparse


logger = logging.getLogger(__name__)

AI_GTIN = "01"
AI_EXPIRY = "17"
AI_BATCH_LOT = "10"
AI_SERIAL = "21"

DATAMATRIX_SYMBOLOGY = "gs1datamatrix"
DATAMATRIX_ENDPOINT = os.getenv("DATAMATRIX_ENDPOINT", "https://bwipjs-api.metafloor.com/")

# Separator between the date and a time part
_DATE_PART = re.compile(r"[Tt\s]")


def format_gs1_date(iso_date: str) -> str:
    """
    Encode a calendar date as GS1 YYMMDD.

    Only the date part is read, so a time or offset (including T24:00)
    never moves the day.

    Returns:
        Six digits, or "" when the input is empty or cannot be parsed.
    """
    if not iso_date or not iso_date.strip():
        return ""
    try:
        parsed = isoparse(_DATE_PART.split(iso_date.strip(), 1)[0])
    except (ValueError, OverflowError):
        logger.debug("Unparseable expiration date %r, omitting AI (17)", iso_date)
        return ""
    return f"{parsed.year % 100:02d}{parsed.month:02d}{parsed.day:02d}"


def format_element_string(gtin: str, gs1_date: str, lot: str, serial: str) -> str:
    """Concatenate the AI-tagged fields in GS1 pharma order."""
    segments = [f"({AI_GTIN}){gtin}"]
    if gs1_date:
        segments.append(f"({AI_EXPIRY}){gs1_date}")
    if lot:
        segments.append(f"({AI_BATCH_LOT}){lot}")
    if serial:
        segments.append(f"({AI_SERIAL}){serial}")
    return "".join(segments)


def build_datamatrix_url(element_string: str, endpoint: str = DATAMATRIX_ENDPOINT) -> str:
    """
    Request descriptor for the external Data Matrix image service.

    The element string is percent-encoded, AI brackets excepted, so a lot or
    serial containing '&', '#' or spaces stays inside the text parameter.
    """
    query = urlencode(
        {"bcid": DATAMATRIX_SYMBOLOGY, "text": element_string},
        quote_via=quote,
        safe="()",
    )
    return f"{endpoint}?{query}"
