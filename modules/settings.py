"""
Display settings, persisted next to the history under "settings.<name>".
"""

from __future__ import annotations

import logging
from typing import Any, Dict

import streamlit as st

from .storage import get_setting, set_setting


logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: Dict[str, Any] = {
    "show_barcode_text": True,
    "barcode_module_height": 15.0,  # mm
    "datamatrix_size_px": 200,
    "display_mode": "Light",  # Light or Dark
}


def _coerce(key: str, value: Any) -> Any:
    """Cast a stored value to the type of its default; fall back to the default."""
    default = DEFAULT_SETTINGS[key]
    if isinstance(value, type(default)):
        return value
    try:
        if isinstance(default, bool):
            if str(value).lower() in ("true", "1", "yes"):
                return True
            if str(value).lower() in ("false", "0", "no"):
                return False
            raise ValueError(value)
        return type(default)(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring stored setting %s=%r", key, value)
        return default


@st.cache_data(ttl=300)
def load_settings() -> Dict[str, Any]:
    return {key: _coerce(key, get_setting(key, default)) for key, default in DEFAULT_SETTINGS.items()}


def save_settings(updates: Dict[str, Any]) -> None:
    """
    Persist updates and drop the cached settings.

    Raises:
        KeyError: a key is not one of DEFAULT_SETTINGS
    """
    unknown = set(updates) - set(DEFAULT_SETTINGS)
    if unknown:
        raise KeyError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
    for key, value in updates.items():
        set_setting(key, _coerce(key, value))
    load_settings.clear()
