"""
PDF backend using ReportLab.

Replays the page buffers produced by the composer onto a ReportLab canvas.
Layout works in top-origin coordinates; the canvas origin is bottom-left,
so every y coordinate is flipped here and nowhere else.

License: MIT
"""

import io
import logging
from typing import List, Optional, Tuple

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from docpress.composer import DocumentComposer
from docpress.errors import CancellationToken
from docpress.models import DocumentRenderRequest
from docpress.surface import DrawOp, PageBuffer
from docpress.styles import colors, page_config

logger = logging.getLogger(__name__)


class PdfBackend:
    """
    Draws page buffers to PDF.

    Each instruction is drawn inside ``saveState()``/``restoreState()`` so
    that fonts, colours and line widths never carry over to the next one.
    """

    def __init__(self, title: Optional[str] = None, author: Optional[str] = None):
        self.buffer = io.BytesIO()
        self.page_width = page_config.width
        self.page_height = page_config.height
        self.c = canvas.Canvas(self.buffer, pagesize=(self.page_width, self.page_height))
        if title:
            self.c.setTitle(title)
        if author:
            self.c.setAuthor(author)

    def render(self, pages: List[PageBuffer]) -> bytes:
        """
        Draw all pages and finalize the PDF.

        Returns:
            PDF bytes
        """
        for page in pages:
            for op in page.ops:
                self.c.saveState()
                try:
                    self._draw(op)
                finally:
                    self.c.restoreState()
            self.c.showPage()

        self.c.save()
        return self.buffer.getvalue()

    def _flip(self, y: float) -> float:
        return self.page_height - y

    def _draw(self, op: DrawOp) -> None:
        if op.kind == "text":
            self._draw_text(op)
        elif op.kind == "line":
            self.c.setStrokeColorRGB(*(op.stroke or colors.line_light))
            self.c.setLineWidth(op.line_width)
            self.c.line(op.x, self._flip(op.y), op.x2, self._flip(op.y2))
        elif op.kind == "rect":
            self._draw_rect(op)
        elif op.kind == "circle":
            self._apply_fill_stroke(op)
            self.c.circle(op.x, self._flip(op.y), op.radius,
                          stroke=int(op.stroke is not None), fill=int(op.fill is not None))
        elif op.kind == "image":
            self._draw_image(op)
        else:
            logger.warning(f"Skipping unknown draw instruction '{op.kind}'")

    def _apply_fill_stroke(self, op: DrawOp) -> None:
        if op.fill is not None:
            self.c.setFillColorRGB(*op.fill)
        if op.stroke is not None:
            self.c.setStrokeColorRGB(*op.stroke)
            self.c.setLineWidth(op.line_width)

    def _draw_text(self, op: DrawOp) -> None:
        paint = op.paint
        self.c.setFont(paint.font, paint.size)
        self.c.setFillColorRGB(*paint.color)
        y = self._flip(op.y)
        if op.align == "right":
            self.c.drawRightString(op.x, y, op.text)
        elif op.align == "center":
            self.c.drawCentredString(op.x, y, op.text)
        else:
            self.c.drawString(op.x, y, op.text)

    def _draw_rect(self, op: DrawOp) -> None:
        self._apply_fill_stroke(op)
        # ReportLab rectangles are anchored at their bottom-left corner
        y = self._flip(op.y + op.height)
        stroke = int(op.stroke is not None)
        fill = int(op.fill is not None)
        if op.radius:
            self.c.roundRect(op.x, y, op.width, op.height, op.radius, stroke=stroke, fill=fill)
        else:
            self.c.rect(op.x, y, op.width, op.height, stroke=stroke, fill=fill)

    def _draw_image(self, op: DrawOp) -> None:
        try:
            img = ImageReader(io.BytesIO(op.data or b""))
            img.getSize()
        except Exception as e:
            logger.warning(f"Could not decode image, drawing placeholder: {e}")
            if op.text:
                self.c.setFont(op.paint.font, op.paint.size)
                self.c.setFillColorRGB(*op.paint.color)
                self.c.drawCentredString(op.x + op.width / 2,
                                         self._flip(op.y + op.height / 2), op.text)
            return

        self.c.drawImage(img, op.x, self._flip(op.y + op.height),
                         width=op.width, height=op.height,
                         preserveAspectRatio=True, mask="auto")


def render_document_with_count(request: DocumentRenderRequest,
                                cancel_token: Optional[CancellationToken] = None) -> Tuple[bytes, int]:
    """
    Render a request to PDF bytes.

    Args:
        request: Fully resolved render request
        cancel_token: Optional token checked between pages

    Returns:
        Tuple of (PDF bytes, page count)
    """
    pages = DocumentComposer(request, cancel_token=cancel_token).compose()
    backend = PdfBackend(title=request.document.title, author=request.company_name)
    return backend.render(pages), len(pages)


def render_document(request: DocumentRenderRequest,
                    cancel_token: Optional[CancellationToken] = None) -> bytes:
    """Render a request to PDF bytes."""
    pdf_bytes, _ = render_document_with_count(request, cancel_token=cancel_token)
    return pdf_bytes
