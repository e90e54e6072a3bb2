"""
Applies field overlays to a PDF.

Each page that receives at least one non-empty field gets its own reportlab canvas,
sized to that page, onto which the page's fields are drawn in input order.
The canvas is then merged on top of the original page with pypdf, so
existing page content is never altered.
"""

import io
import logging
from dataclasses import dataclass, field as dataclass_field
from typing import Dict, List, Optional, Sequence

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError
from reportlab.pdfgen import canvas

from app.schemas.document import FieldDescriptor
from app.services.field_renderer import FieldRenderer
from app.services.geometry import resolve_field_rect
from app.utils.exceptions import DecodeError

logger = logging.getLogger(__name__)

STATUS_APPLIED = "applied"
STATUS_SKIPPED = "skipped"

REASON_PAGE_OUT_OF_RANGE = "page_out_of_range"
REASON_EMPTY_VALUE = "empty_value"


@dataclass
class FieldOutcome:
    index: int
    page: int
    type: str
    status: str
    reason: Optional[str] = None


@dataclass
class OverlayResult:
    pdf_bytes: bytes
    outcomes: List[FieldOutcome] = dataclass_field(default_factory=list)

    @property
    def applied_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == STATUS_APPLIED)


def _load_pdf(pdf_bytes: bytes) -> PdfReader:
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
        # Touch the page tree so structural errors surface here.
        len(reader.pages)
    except (PyPdfError, ValueError, KeyError, TypeError) as exc:
        raise DecodeError("Stored PDF could not be parsed", details={"reason": str(exc)}) from exc
    return reader


class OverlayService:
    def __init__(self, renderer: FieldRenderer = None):
        self.renderer = renderer or FieldRenderer()

    def apply_fields(self, pdf_bytes: bytes, fields: Sequence[FieldDescriptor]) -> OverlayResult:
        """Render ``fields`` onto ``pdf_bytes`` and return the re-serialized PDF.

        Fields pointing at a page that does not exist are skipped, never
        rejected. Any decode failure propagates and no output is produced.
        """
        reader = _load_pdf(pdf_bytes)
        pages = reader.pages
        page_count = len(pages)

        overlays: Dict[int, canvas.Canvas] = {}
        buffers: Dict[int, io.BytesIO] = {}
        outcomes: List[FieldOutcome] = []

        for index, fld in enumerate(fields):
            page_index = fld.page - 1
            if page_index < 0 or page_index >= page_count:
                logger.debug(f"Field {index} skipped: page {fld.page} not in 1..{page_count}")
                outcomes.append(FieldOutcome(index, fld.page, fld.type, STATUS_SKIPPED, REASON_PAGE_OUT_OF_RANGE))
                continue

            if not fld.value:
                outcomes.append(FieldOutcome(index, fld.page, fld.type, STATUS_SKIPPED, REASON_EMPTY_VALUE))
                continue

            page = pages[page_index]
            page_width = float(page.mediabox.width)
            page_height = float(page.mediabox.height)

            pdf = overlays.get(page_index)
            if pdf is None:
                buffers[page_index] = io.BytesIO()
                pdf = canvas.Canvas(buffers[page_index], pagesize=(page_width, page_height))
                overlays[page_index] = pdf

            rect = resolve_field_rect(fld, page_width, page_height)
            if self.renderer.render(pdf, rect, fld):
                outcomes.append(FieldOutcome(index, fld.page, fld.type, STATUS_APPLIED))
            else:
                outcomes.append(FieldOutcome(index, fld.page, fld.type, STATUS_SKIPPED, REASON_EMPTY_VALUE))

        # Cloning keeps catalog-level structure: outline, page labels, forms, metadata.
        writer = PdfWriter(clone_from=reader)
        for page_index, pdf in sorted(overlays.items()):
            pdf.showPage()
            pdf.save()
            buffers[page_index].seek(0)
            overlay_page = PdfReader(buffers[page_index]).pages[0]
            writer.pages[page_index].merge_page(overlay_page)

        out = io.BytesIO()
        writer.write(out)
        return OverlayResult(pdf_bytes=out.getvalue(), outcomes=outcomes)
