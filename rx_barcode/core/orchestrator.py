"""
Generation pipeline.

Turns a FieldSet plus the current Selection into the data the rendering
layer binds to: derived GS1 strings, the Data Matrix request descriptor,
and the Code 128 jobs for the visible panels. Nothing here draws or
performs network I/O.
"""

from __future__ import annotations

import logging
from typing import List, Union

from .element_string import (
    DATAMATRIX_ENDPOINT,
    build_datamatrix_url,
    format_element_string,
    format_gs1_date,
)
from .gtin import encode_ndc
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
from .selection import is_visible


logger = logging.getLogger(__name__)


def derive_outputs(fields: FieldSet, endpoint: str = DATAMATRIX_ENDPOINT) -> DerivedOutputs:
    """Pure function of the FieldSet (and the configured endpoint)."""
    gtin14, is_fallback = encode_ndc(fields.ndc)
    gs1_date = format_gs1_date(fields.expiration_date)
    element_string = format_element_string(
        gtin14,
        gs1_date,
        fields.lot_number,
        fields.serial_number,
    )
    return DerivedOutputs(
        gtin14=gtin14,
        gs1_date=gs1_date,
        gs1_element_string=element_string,
        datamatrix_url=build_datamatrix_url(element_string, endpoint),
        gtin_is_fallback=is_fallback,
    )


def panel_ids_for(fields: FieldSet) -> List[BarcodeId]:
    """Rx, NDC and GS1 always; the free-text panels only when filled in."""
    ids = [BarcodeId.RX, BarcodeId.NDC, BarcodeId.GS1]
    if fields.barcode1:
        ids.append(BarcodeId.BARCODE1)
    if fields.barcode2:
        ids.append(BarcodeId.BARCODE2)
    return ids


class GenerationOrchestrator:
    """
    Runs the generate and recall paths.

    Args:
        record_store: History sink; only the live generate path appends.
        endpoint: Data Matrix image service base URL.
    """

    def __init__(self, record_store, *, endpoint: str = DATAMATRIX_ENDPOINT):
        self.record_store = record_store
        self.endpoint = endpoint

    def generate(self, fields: FieldSet, selection: Selection = ALL_VISIBLE) -> GenerationResult:
        """Validate, record in history, and compute the display data."""
        self._require(fields)
        self.record_store.append(fields)
        logger.info("Generated barcodes for rx=%s ndc=%s", fields.rx, fields.ndc)
        return self.view(fields, selection)

    def recall(
        self,
        record: Union[HistoryRecord, FieldSet],
        selection: Selection = ALL_VISIBLE,
    ) -> GenerationResult:
        """Replay a stored FieldSet. History is left untouched."""
        fields = record.fields if isinstance(record, HistoryRecord) else record
        self._require(fields)
        return self.view(fields, selection)

    def view(self, fields: FieldSet, selection: Selection = ALL_VISIBLE) -> GenerationResult:
        """Recompute display data, e.g. after the selection changed."""
        outputs = derive_outputs(fields, self.endpoint)
        panels = panel_ids_for(fields)
        visible = [pid for pid in panels if is_visible(selection, pid)]
        jobs = [
            LinearBarcodeJob(target_id=pid, text=fields.payload(pid))
            for pid in LINEAR_IDS
            if pid in visible
        ]
        return GenerationResult(
            fields=fields,
            outputs=outputs,
            panel_ids=tuple(panels),
            visible_ids=tuple(visible),
            linear_jobs=tuple(jobs),
            show_gs1=BarcodeId.GS1 in visible,
        )

    @staticmethod
    def _require(fields: FieldSet) -> None:
        missing = fields.missing_required()
        if missing:
            raise ValidationError(missing)
