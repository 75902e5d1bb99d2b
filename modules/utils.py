"""
Utility helpers for the barcode UI.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional


def parse_iso_date(value: str) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def format_timestamp(timestamp_ms: int) -> str:
    """Epoch milliseconds as local "YYYY-MM-DD HH:MM:SS"."""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M:%S")
