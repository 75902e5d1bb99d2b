"""
Logging setup for the Streamlit app and scripts.

Call setup_logging() once at entry; modules log through
logging.getLogger(__name__). Repeated calls do not add handlers, which
matters because Streamlit re-executes the entry script on every rerun.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "")
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_HANDLER_NAME = "rx_barcode"


def setup_logging(level: str = LOG_LEVEL, log_file: Optional[str] = LOG_FILE) -> logging.Logger:
    """
    Configure the root logger (idempotent).

    Args:
        level: Level name, e.g. "DEBUG" or "INFO"
        log_file: Optional path for a size-rotated log file

    Returns:
        The root logger
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return root

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.set_name(_HANDLER_NAME)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=5_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.set_name(f"{_HANDLER_NAME}.file")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for noisy in ("PIL", "pymongo", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return root
