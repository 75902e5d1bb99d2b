"""
Data model for the Rx barcode generator.

FieldSet is the unit of operator input and of history. HistoryRecord wraps a
FieldSet with its creation time. DerivedOutputs and GenerationResult are
recomputed on demand and never stored.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


class BarcodeId(str, Enum):
    """Identifiers of the barcode panels."""
    RX = "rx"
    NDC = "ndc"
    GS1 = "gs1"
    BARCODE1 = "barcode1"
    BARCODE2 = "barcode2"


# Panels drawn with the linear (Code 128) renderer
LINEAR_IDS: Tuple[BarcodeId, ...] = (
    BarcodeId.RX,
    BarcodeId.NDC,
    BarcodeId.BARCODE1,
    BarcodeId.BARCODE2,
)


class ValidationError(ValueError):
    """Raised when a required field is missing at generation time."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__("Please fill in Rx and NDC fields")


# Persisted (camelCase) key -> attribute name
_FIELD_KEYS = {
    "rx": "rx",
    "ndc": "ndc",
    "lotNumber": "lot_number",
    "serialNumber": "serial_number",
    "expirationDate": "expiration_date",
    "barcode1": "barcode1",
    "barcode2": "barcode2",
}


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise TypeError(f"Expected a text value, got {type(value).__name__}")
    return str(value)


@dataclass(frozen=True)
class FieldSet:
    """
    One set of operator input.

    Attributes:
        rx: Prescription number (required for generation)
        ndc: National Drug Code, 10 digits with optional hyphens (required)
        lot_number: Batch/lot, AI (10)
        serial_number: Serial, AI (21)
        expiration_date: ISO calendar date or empty, AI (17)
        barcode1: Free-text payload for an extra Code 128 barcode
        barcode2: Free-text payload for an extra Code 128 barcode
    """
    rx: str = ""
    ndc: str = ""
    lot_number: str = ""
    serial_number: str = ""
    expiration_date: str = ""
    barcode1: str = ""
    barcode2: str = ""

    def missing_required(self) -> List[str]:
        missing = []
        if not self.rx:
            missing.append("rx")
        if not self.ndc:
            missing.append("ndc")
        return missing

    def payload(self, barcode_id: BarcodeId) -> str:
        """Raw text shown by a panel (the element string is not a field)."""
        if barcode_id == BarcodeId.GS1:
            raise ValueError("The GS1 panel has no raw text payload")
        return getattr(self, barcode_id.value)

    def to_dict(self) -> Dict[str, str]:
        return {key: getattr(self, attr) for key, attr in _FIELD_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldSet":
        """Build from camelCase (persisted) or snake_case keys."""
        values = {}
        for key, attr in _FIELD_KEYS.items():
            raw = data.get(key, data.get(attr))
            values[attr] = _text(raw)
        return cls(**values)


@dataclass(frozen=True)
class HistoryRecord:
    """A FieldSet plus its creation time in epoch milliseconds."""
    fields: FieldSet
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = self.fields.to_dict()
        data["timestamp"] = self.timestamp
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HistoryRecord":
        if not isinstance(data, Mapping):
            raise TypeError("History entry must be an object")
        if "rx" not in data or "ndc" not in data:
            raise ValueError("History entry is missing rx or ndc")
        timestamp = data.get("timestamp", 0)
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise TypeError("History timestamp must be a number")
        if not math.isfinite(timestamp):
            raise ValueError(f"History timestamp is not finite: {timestamp}")
        return cls(fields=FieldSet.from_dict(data), timestamp=int(timestamp))

    def label(self) -> str:
        f = self.fields
        return " | ".join([
            f.rx,
            f.ndc,
            f.lot_number,
            f.serial_number,
            f.expiration_date,
            f.barcode1,
            f.barcode2,
        ])


@dataclass(frozen=True)
class Selection:
    """Either all panels visible (focused is None) or one focused panel."""
    focused: Optional[BarcodeId] = None

    @classmethod
    def focused_on(cls, barcode_id: Union[BarcodeId, str]) -> "Selection":
        return cls(BarcodeId(barcode_id))

    @property
    def all_visible(self) -> bool:
        return self.focused is None


ALL_VISIBLE = Selection()


@dataclass(frozen=True)
class DerivedOutputs:
    """
    Values computed from a FieldSet.

    gtin_is_fallback is True when the NDC failed the shape check and
    gtin14 holds the placeholder GTIN instead of an encoded one.
    """
    gtin14: str
    gs1_date: str
    gs1_element_string: str
    datamatrix_url: str
    gtin_is_fallback: bool = False


@dataclass(frozen=True)
class LinearBarcodeJob:
    """Input for the Code 128 renderer: target panel and raw text."""
    target_id: BarcodeId
    text: str
    format: str = "CODE128"


@dataclass(frozen=True)
class GenerationResult:
    """
    Everything the rendering layer needs after a generate or recall.

    Attributes:
        fields: The FieldSet the outputs were derived from
        outputs: Derived strings
        panel_ids: Panels that exist for this FieldSet
        visible_ids: Panels whose content is drawn under the selection
        linear_jobs: Code 128 drawings to perform, in panel order
        show_gs1: Whether the element string text and Data Matrix are shown
    """
    fields: FieldSet
    outputs: DerivedOutputs
    panel_ids: Tuple[BarcodeId, ...]
    visible_ids: Tuple[BarcodeId, ...]
    linear_jobs: Tuple[LinearBarcodeJob, ...] = field(default_factory=tuple)
    show_gs1: bool = False
