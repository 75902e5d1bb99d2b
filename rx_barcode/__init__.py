"""
Rx Barcode Generator

Turns pharmacy product identifiers (Rx number, NDC, lot, serial, expiry)
into Code 128 payloads and a GS1 Data Matrix element string, keeping the
last ten entries for quick recall.

Based on GS1 General Specifications (AI 01, 17, 10, 21).
"""

from .core.models import (
    ALL_VISIBLE,
    BarcodeId,
    DerivedOutputs,
    FieldSet,
    GenerationResult,
    HistoryRecord,
    LinearBarcodeJob,
    Selection,
    ValidationError,
)
from .core.gtin import FALLBACK_GTIN, ndc_to_gtin14
from .core.element_string import build_datamatrix_url, format_element_string, format_gs1_date
from .core.selection import is_visible, toggle
from .core.orchestrator import GenerationOrchestrator, derive_outputs
from .history import HISTORY_CAPACITY, HISTORY_KEY, RecordStore
from .validators.validators import mod10_check_digit, validate_gtin

__version__ = "1.0.0"
__all__ = [
    "ALL_VISIBLE",
    "BarcodeId",
    "DerivedOutputs",
    "FieldSet",
    "GenerationResult",
    "HistoryRecord",
    "LinearBarcodeJob",
    "Selection",
    "ValidationError",
    "FALLBACK_GTIN",
    "ndc_to_gtin14",
    "build_datamatrix_url",
    "format_element_string",
    "format_gs1_date",
    "is_visible",
    "toggle",
    "GenerationOrchestrator",
    "derive_outputs",
    "HISTORY_CAPACITY",
    "HISTORY_KEY",
    "RecordStore",
    "mod10_check_digit",
    "validate_gtin",
]
