"""
Core encoding and display-state modules for the Rx barcode generator.
"""

from .models import (
    ALL_VISIBLE,
    LINEAR_IDS,
    BarcodeId,
    DerivedOutputs,
    FieldSet,
    GenerationResult,
    HistoryRecord,
    LinearBarcodeJob,
    Selection,
    ValidationError,
)
from .gtin import FALLBACK_GTIN, encode_ndc, ndc_to_gtin14
from .element_string import build_datamatrix_url, format_element_string, format_gs1_date
from .selection import is_visible, toggle
from .orchestrator import GenerationOrchestrator, derive_outputs

__all__ = [
    "ALL_VISIBLE",
    "LINEAR_IDS",
    "BarcodeId",
    "DerivedOutputs",
    "FieldSet",
    "GenerationResult",
    "HistoryRecord",
    "LinearBarcodeJob",
    "Selection",
    "ValidationError",
    "FALLBACK_GTIN",
    "encode_ndc",
    "ndc_to_gtin14",
    "build_datamatrix_url",
    "format_element_string",
    "format_gs1_date",
    "is_visible",
    "toggle",
    "GenerationOrchestrator",
    "derive_outputs",
]
