"""
History export (CSV/Excel/PDF) and printable Code 128 labels.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd
from reportlab.graphics.barcode import code128
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import inch, mm
from reportlab.pdfgen import canvas

from rx_barcode import HistoryRecord, LinearBarcodeJob, derive_outputs

from .utils import format_timestamp


EXPORTS_DIR = Path(os.getenv("RX_BARCODE_EXPORTS_DIR", str(Path(__file__).resolve().parent.parent / "exports")))

HISTORY_COLUMNS = [
    "timestamp",
    "rx",
    "ndc",
    "lot_number",
    "serial_number",
    "expiration_date",
    "barcode1",
    "barcode2",
    "gtin14",
    "gs1_element_string",
]

LABEL_W = 70 * mm
LABEL_H = 30 * mm


def ensure_exports_dir() -> None:
    EXPORTS_DIR.mkdir(parents=True, exist_ok=True)


def history_dataframe(records: Iterable[HistoryRecord]) -> pd.DataFrame:
    rows = []
    for record in records:
        f = record.fields
        outputs = derive_outputs(f)
        rows.append(
            {
                "timestamp": format_timestamp(record.timestamp),
                "rx": f.rx,
                "ndc": f.ndc,
                "lot_number": f.lot_number,
                "serial_number": f.serial_number,
                "expiration_date": f.expiration_date,
                "barcode1": f.barcode1,
                "barcode2": f.barcode2,
                "gtin14": outputs.gtin14,
                "gs1_element_string": outputs.gs1_element_string,
            }
        )
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)


def export_csv(df: pd.DataFrame, filename: str) -> Path:
    ensure_exports_dir()
    path = EXPORTS_DIR / filename
    df.to_csv(path, index=False)
    return path


def export_excel(df: pd.DataFrame, filename: str, sheet_name: str = "History") -> Path:
    ensure_exports_dir()
    path = EXPORTS_DIR / filename
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    return path


# Relative column widths for the history table; columns not listed get 1.0
COLUMN_WEIGHTS = {"timestamp": 1.1, "gs1_element_string": 1.6}
# Cell text is cut to this many characters; default 30
COLUMN_MAX_CHARS = {"gs1_element_string": 60, "barcode1": 24, "barcode2": 24}

ROW_HEIGHT = 0.22 * inch
PAGE_MARGIN = 0.5 * inch


def _column_widths(df: pd.DataFrame, total_width: float) -> List[float]:
    """Share total_width by the longest cell (or header) of each column."""
    sample = df.head(50).astype(str)
    demand = []
    for col in df.columns:
        longest = max([len(str(col))] + sample[col].str.len().tolist())
        demand.append(longest * COLUMN_WEIGHTS.get(col, 1.0))

    scale = total_width / (sum(demand) or 1)
    bounded = [min(max(d * scale, 0.03 * total_width), 0.30 * total_width) for d in demand]
    stretch = total_width / sum(bounded)
    return [w * stretch for w in bounded]


def _clip(col: str, value) -> str:
    text = "" if value is None else str(value)
    limit = COLUMN_MAX_CHARS.get(col, 30)
    return text if len(text) <= limit else text[: limit - 3] + "..."


class _TablePage:
    """Cursor over a landscape canvas that starts a new page when full."""

    def __init__(self, c: canvas.Canvas, title: str):
        self.c = c
        self.title = title
        self.page_w, self.page_h = landscape(A4)
        self.x = PAGE_MARGIN
        self.width = self.page_w - 2 * PAGE_MARGIN
        self.y = self.page_h - PAGE_MARGIN

    def footer(self, text: str) -> None:
        self.c.setFont("Helvetica-Oblique", 8)
        self.c.drawString(PAGE_MARGIN, 0.35 * inch, text)
        self.c.drawRightString(self.page_w - PAGE_MARGIN, 0.35 * inch, f"Page {self.c.getPageNumber()}")

    def row(self, cells: List[str], widths: List[float], font: str, shade: Optional[float] = None) -> None:
        if shade is not None:
            self.c.setFillGray(shade)
            self.c.rect(self.x, self.y - 0.06 * inch, self.width, ROW_HEIGHT, fill=1, stroke=0)
            self.c.setFillGray(0)
        self.c.setFont(font, 8)
        left = self.x
        for text, w in zip(cells, widths):
            self.c.drawString(left + 2, self.y, text)
            left += w
        self.y -= ROW_HEIGHT

    def break_if_full(self) -> bool:
        if self.y >= 0.6 * inch:
            return False
        self.footer(self.title)
        self.c.showPage()
        self.y = self.page_h - PAGE_MARGIN
        return True


def export_pdf(report_title: str, df: pd.DataFrame, filename: str) -> Path:
    """History table on landscape A4, header repeated on every page."""
    ensure_exports_dir()
    path = EXPORTS_DIR / filename
    c = canvas.Canvas(str(path), pagesize=landscape(A4))
    page = _TablePage(c, report_title)

    c.setFont("Helvetica-Bold", 16)
    c.drawString(page.x, page.y, report_title)
    page.y -= 0.4 * inch

    if df.empty:
        c.setFont("Helvetica-Oblique", 9)
        c.drawString(page.x, page.y, "No history entries.")
    else:
        columns = list(df.columns)
        widths = _column_widths(df, page.width)
        page.row(columns, widths, "Helvetica-Bold", shade=0.9)
        for n, values in enumerate(df.itertuples(index=False)):
            cells = [_clip(col, v) for col, v in zip(columns, values)]
            page.row(cells, widths, "Helvetica", shade=0.97 if n % 2 else None)
            if page.break_if_full():
                page.row(columns, widths, "Helvetica-Bold", shade=0.9)

    page.footer(f"{report_title} | Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    c.save()
    return path


def _draw_label(c: canvas.Canvas, job: LinearBarcodeJob) -> None:
    margin = 1.0 * mm
    font_name = "Helvetica"
    font_size = 8
    text_band_h = font_size + 0.8 * mm

    usable_w = LABEL_W - 2 * margin
    usable_h = LABEL_H - 2 * margin - text_band_h
    bar_height = min(usable_h, 14 * mm)

    # Module count at 1pt decides whether the 0.30 mm minimum X fits
    sizing = code128.Code128(job.text, barHeight=bar_height, barWidth=1.0, humanReadable=False)
    x_min = 0.30 * mm
    quiet = max(10 * x_min, 2.0 * mm)
    if sizing.width * x_min + 2 * quiet <= usable_w:
        bar_width = x_min
    else:
        quiet = max(0.1 * mm, 0.025 * usable_w)
        bar_width = max(usable_w - 2 * quiet, 1) / sizing.width

    bc = code128.Code128(job.text, barHeight=bar_height, barWidth=bar_width, humanReadable=False)
    y = margin + text_band_h + (usable_h - bar_height) / 2.0
    bc.drawOn(c, margin + quiet, y)

    label_text = f"{job.target_id.value.upper()} | {job.text}"
    c.setFillColor(colors.black)
    c.setFont(font_name, font_size)
    text_w = c.stringWidth(label_text, font_name, font_size)
    c.drawString((LABEL_W - text_w) / 2.0, margin, label_text)


def export_label_pdf(jobs: Iterable[LinearBarcodeJob], filename: str) -> Path:
    """One 70x30 mm page per Code 128 job."""
    ensure_exports_dir()
    path = EXPORTS_DIR / filename
    c = canvas.Canvas(str(path), pagesize=(LABEL_W, LABEL_H))
    pages = 0
    for job in jobs:
        _draw_label(c, job)
        c.showPage()
        pages += 1
    if not pages:
        raise ValueError("No barcodes to print")
    c.save()
    return path
