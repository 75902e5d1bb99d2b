"""
Code 128 rendering for the barcode panels.
"""

from __future__ import annotations

import io
import logging
from typing import Dict, Iterable

import barcode
from barcode.errors import BarcodeError
from barcode.writer import ImageWriter

from rx_barcode import BarcodeId, LinearBarcodeJob


logger = logging.getLogger(__name__)

_WRITERS = {"CODE128": "code128"}


def render_code128_png(text: str, *, module_height: float = 15.0, show_text: bool = True) -> bytes:
    """Render text as a Code 128 PNG."""
    barcode_class = barcode.get_barcode_class(_WRITERS["CODE128"])
    code = barcode_class(text, writer=ImageWriter())

    buffer = io.BytesIO()
    code.write(
        buffer,
        options={
            "module_height": module_height,
            "write_text": show_text,
            "quiet_zone": 2.0,
        },
    )
    return buffer.getvalue()


def render_jobs(
    jobs: Iterable[LinearBarcodeJob],
    *,
    module_height: float = 15.0,
    show_text: bool = True,
) -> Dict[BarcodeId, bytes]:
    """
    Render each job. A job the renderer rejects is logged and left out, so
    its panel shows no image while the others still render.
    """
    images: Dict[BarcodeId, bytes] = {}
    for job in jobs:
        if job.format not in _WRITERS:
            logger.warning("Unsupported barcode format %s for %s", job.format, job.target_id.value)
            continue
        try:
            images[job.target_id] = render_code128_png(
                job.text, module_height=module_height, show_text=show_text
            )
        except (BarcodeError, ValueError, OSError) as exc:
            logger.warning("Could not render %s barcode %r: %s", job.target_id.value, job.text, exc)
    return images
