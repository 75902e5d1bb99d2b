"""
Panel selection state machine.

States are ALL_VISIBLE and Selection(focused=<id>). Clicking the focused
panel returns to ALL_VISIBLE; clicking any other panel focuses it directly.
"""

from __future__ import annotations

from typing import Union

from .models import ALL_VISIBLE, BarcodeId, Selection


def toggle(current: Selection, clicked: Union[BarcodeId, str]) -> Selection:
    clicked_id = BarcodeId(clicked)
    if current.focused == clicked_id:
        return ALL_VISIBLE
    return Selection(clicked_id)


def is_visible(current: Selection, barcode_id: Union[BarcodeId, str]) -> bool:
    return current.all_visible or current.focused == BarcodeId(barcode_id)
