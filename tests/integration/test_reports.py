"""
Tests for history exports, label PDFs and Code 128 rendering.
"""

import re

import pandas as pd
import pytest
from barcode.errors import BarcodeError
from modules import reports, rendering
from rx_barcode import (
    BarcodeId,
    FieldSet,
    GenerationOrchestrator,
    HistoryRecord,
    LinearBarcodeJob,
    RecordStore,
)

from tests.fakes import MemoryStore, StepClock


@pytest.fixture(autouse=True)
def exports_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(reports, "EXPORTS_DIR", tmp_path / "exports")
    return tmp_path / "exports"


@pytest.fixture
def records():
    history = RecordStore(MemoryStore(), clock=StepClock())
    history.append(FieldSet(rx="RX1", ndc="0123456789", expiration_date="2025-03-07"))
    history.append(FieldSet(rx="RX2", ndc="bad", lot_number="L2", barcode1="B1"))
    return history.records


class TestHistoryDataFrame:
    """Tabular history."""

    def test_columns_and_derived_values(self, records):
        df = reports.history_dataframe(records)
        assert list(df.columns) == reports.HISTORY_COLUMNS
        assert list(df["rx"]) == ["RX2", "RX1"]
        assert df.iloc[1]["gtin14"] == "10301234567893"
        assert df.iloc[1]["gs1_element_string"] == "(01)10301234567893(17)250307"
        assert df.iloc[0]["gtin14"] == "10300000000005"

    def test_empty(self):
        df = reports.history_dataframe([])
        assert df.empty
        assert list(df.columns) == reports.HISTORY_COLUMNS


class TestExports:
    """Files written under the exports directory."""

    def test_csv(self, records, exports_dir):
        path = reports.export_csv(reports.history_dataframe(records), "history.csv")
        assert path.parent == exports_dir
        df = pd.read_csv(path, dtype=str)
        assert list(df["ndc"]) == ["bad", "0123456789"]

    def test_excel(self, records):
        path = reports.export_excel(reports.history_dataframe(records), "history.xlsx")
        df = pd.read_excel(path, sheet_name="History", dtype=str)
        assert list(df["rx"]) == ["RX2", "RX1"]

    def test_pdf(self, records):
        path = reports.export_pdf("Barcode History", reports.history_dataframe(records), "history.pdf")
        assert path.read_bytes().startswith(b"%PDF")

    def test_pdf_many_rows_paginates(self):
        many = [HistoryRecord(FieldSet(rx=f"RX{n}", ndc="0123456789"), timestamp=n) for n in range(60)]
        path = reports.export_pdf("Barcode History", reports.history_dataframe(many), "long.pdf")
        assert len(re.findall(rb"/Type /Page\b", path.read_bytes())) > 1

    def test_label_pdf(self):
        orchestrator = GenerationOrchestrator(RecordStore(MemoryStore()))
        result = orchestrator.generate(FieldSet(rx="RX1", ndc="0123456789", barcode1="EXTRA"))
        path = reports.export_label_pdf(result.linear_jobs, "labels.pdf")
        assert path.read_bytes().startswith(b"%PDF")

    def test_label_pdf_requires_jobs(self):
        with pytest.raises(ValueError):
            reports.export_label_pdf([], "empty.pdf")


class TestRendering:
    """Code 128 PNG rendering."""

    def test_png(self):
        png = rendering.render_code128_png("RX1")
        assert png.startswith(b"\x89PNG")

    def test_render_jobs(self):
        jobs = [
            LinearBarcodeJob(BarcodeId.RX, "RX1"),
            LinearBarcodeJob(BarcodeId.NDC, "0123456789"),
        ]
        images = rendering.render_jobs(jobs, show_text=False)
        assert set(images) == {BarcodeId.RX, BarcodeId.NDC}

    def test_failed_job_is_skipped(self, monkeypatch):
        real = rendering.render_code128_png

        def flaky(text, **kwargs):
            if text == "BAD":
                raise BarcodeError("cannot encode")
            return real(text, **kwargs)

        monkeypatch.setattr(rendering, "render_code128_png", flaky)
        images = rendering.render_jobs([
            LinearBarcodeJob(BarcodeId.RX, "RX1"),
            LinearBarcodeJob(BarcodeId.BARCODE1, "BAD"),
        ])
        assert list(images) == [BarcodeId.RX]

    def test_unsupported_format_is_skipped(self):
        images = rendering.render_jobs([LinearBarcodeJob(BarcodeId.RX, "RX1", format="EAN13")])
        assert images == {}
