"""
PDF writer for incident reports.

Lays out DocumentBlocks top to bottom on reportlab canvas pages, wrapping
text to the usable page width and starting a new page whenever a block would
run past the page-break line.
"""
import io
import logging
from typing import Dict, Iterable, Tuple

from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from incident_report_service.core.errors import ExportError
from incident_report_service.core.export_mapper import BlockRole, DocumentBlock, Emphasis

logger = logging.getLogger(__name__)

# ── Brand colors ──────────────────────────────────────────────────────────────
ACCENT_BLUE = colors.Color(0, 123 / 255, 1)
DISCLAIMER_ORANGE = colors.Color(1, 123 / 255, 0)

# role -> (font size, centered)
_ROLE_LAYOUT: Dict[BlockRole, Tuple[int, bool]] = {
    BlockRole.TITLE: (18, True),
    BlockRole.SUBTITLE: (10, True),
    BlockRole.SECTION: (14, False),
    BlockRole.SUBSECTION: (12, False),
    BlockRole.BODY: (11, False),
    BlockRole.DISCLAIMER: (9, False),
}

_FONTS = {Emphasis.NORMAL: "Helvetica", Emphasis.BOLD: "Helvetica-Bold"}

BLOCK_GAP = 3 * mm
SECTION_GAP = 5 * mm
DISCLAIMER_BOX_HEIGHT = 20 * mm


def line_advance(size: int) -> float:
    """Vertical distance between wrapped lines at ``size`` points"""
    return size * 0.4 * mm


class PdfDocumentWriter:
    """Render a block sequence to PDF bytes.

    Distances are taken in millimetres, measured from the top of the page,
    matching how page-break thresholds are usually specified.
    """

    def __init__(
        self,
        page_width_mm: float = 210.0,
        page_height_mm: float = 297.0,
        margin_mm: float = 15.0,
        top_mm: float = 20.0,
        page_break_threshold_mm: float = 280.0,
    ):
        self.page_width = page_width_mm * mm
        self.page_height = page_height_mm * mm
        self.margin = margin_mm * mm
        self.top = top_mm * mm
        self.threshold = page_break_threshold_mm * mm

    @property
    def usable_width(self) -> float:
        return self.page_width - self.margin * 2

    def render(self, blocks: Iterable[DocumentBlock], title: str = "Incident Report") -> bytes:
        """Build the PDF.

        Raises:
            ExportError: If reportlab fails while laying out or saving the document
        """
        buf = io.BytesIO()
        try:
            pdf = canvas.Canvas(buf, pagesize=(self.page_width, self.page_height))
            pdf.setTitle(title)
            y = self.top
            for block in blocks:
                y = self._draw_block(pdf, block, y)
            pdf.save()
        except ExportError:
            raise
        except Exception as e:
            logger.error(f"Failed to generate PDF: {e}")
            raise ExportError(f"PDF generation failed: {e}") from e
        return buf.getvalue()

    def _draw_block(self, pdf: canvas.Canvas, block: DocumentBlock, y: float) -> float:
        size, centered = _ROLE_LAYOUT[block.role]
        font = _FONTS[block.emphasis]
        lines = simpleSplit(block.text, font, size, self.usable_width) or [""]

        if block.role == BlockRole.SECTION:
            y += SECTION_GAP
        if block.role == BlockRole.DISCLAIMER:
            y += SECTION_GAP
            if y + DISCLAIMER_BOX_HEIGHT > self.threshold:
                pdf.showPage()
                y = self.top
            pdf.setStrokeColor(DISCLAIMER_ORANGE)
            pdf.rect(self.margin, self.page_height - y - DISCLAIMER_BOX_HEIGHT,
                     self.usable_width, DISCLAIMER_BOX_HEIGHT, stroke=1, fill=0)
            y += 5 * mm

        step = line_advance(size)
        if y + len(lines) * step > self.threshold:
            pdf.showPage()
            y = self.top

        fill = ACCENT_BLUE if block.role == BlockRole.SECTION else colors.black
        pdf.setFont(font, size)
        pdf.setFillColor(fill)

        for line in lines:
            # Blocks taller than a page continue on the next one
            if y > self.threshold:
                pdf.showPage()
                pdf.setFont(font, size)
                pdf.setFillColor(fill)
                y = self.top
            baseline = self.page_height - y
            if centered:
                pdf.drawCentredString(self.page_width / 2, baseline, line)
            else:
                pdf.drawString(self.margin, baseline, line)
            y += step

        return y + BLOCK_GAP
