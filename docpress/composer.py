"""
Document composer.

Builds the page sequence for one render request:

    cover page(s) -> table of contents -> sections -> pricing (if items)
    -> signatures (if any) -> audit page

Layout runs twice. The first pass draws onto a non-recording surface to
learn the first page of every table-of-contents entry and the total page
count; the second pass draws the real pages with those numbers filled in.
Both passes run the same code, so the numbers are exact.

License: MIT
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from reportlab.lib.units import mm

from docpress.blocks import classify_text
from docpress.decorators import ThemedDecorator, decorator_for
from docpress.errors import CancellationToken
from docpress.layout import BlockLayout, truncate_to_width
from docpress.models import DocumentRenderRequest, PricingItem, Signature
from docpress.pagination import PaginationController
from docpress.styles import colors, font_sizes, spacing
from docpress.surface import PageBuffer, PageSurface, PaintContext
from docpress.text import format_currency, format_datetime

logger = logging.getLogger(__name__)

TOC_TITLE = "Table of Contents"
PRICING_TITLE = "Pricing & Investment"
SIGNATURES_TITLE = "Signatures"
AUDIT_TITLE = "Document Audit Trail"

PRICING_ROW_HEIGHT = 14
PRICING_HEADER_HEIGHT = 12 * mm
PRICING_TOTALS_HEIGHT = 60 * mm
SIGNATURE_BLOCK_HEIGHT = 55 * mm
SIGNATURE_GAP = 8 * mm
AUDIT_ROW_HEIGHT = 10 * mm
CELL_GAP = 2 * mm


@dataclass
class TocEntry:
    """A line of the table of contents and the page it starts on."""
    title: str
    page: int = 0


@dataclass
class CompositionPass:
    surface: PageSurface
    controller: PaginationController
    entries: List[TocEntry] = field(default_factory=list)
    front_matter_pages: int = 0


class DocumentComposer:
    """
    Lays out a complete document into page buffers.

    Construction resolves the theme decorator, so an invalid theme fails
    before any page is drawn.
    """

    def __init__(self, request: DocumentRenderRequest,
                 cancel_token: Optional[CancellationToken] = None):
        self.request = request
        self.cancel_token = cancel_token
        self.decorator: ThemedDecorator = decorator_for(request)
        self.monochrome = request.theme.monochrome
        self.primary = self.decorator.primary
        self.sections = request.ordered_sections
        self.front_matter_pages = 0
        self.toc: List[TocEntry] = []

    def toc_titles(self) -> List[str]:
        titles = [section.title for section in self.sections]
        if self.request.pricing_items:
            titles.append(PRICING_TITLE)
        if self.request.signatures:
            titles.append(SIGNATURES_TITLE)
        return titles

    def compose(self) -> List[PageBuffer]:
        """
        Lay out the document.

        Returns:
            Page buffers in document order

        Raises:
            RenderCancelled: If the cancellation token fires between pages
        """
        measured = self._run(PageSurface(record=False))
        self.toc = measured.entries
        self.front_matter_pages = measured.front_matter_pages
        total = measured.surface.page_count
        logger.debug("Measuring pass: %d pages, TOC %s", total,
                     [(entry.title, entry.page) for entry in self.toc])

        final = self._run(PageSurface(record=True), toc=self.toc, total_pages=total)
        if final.surface.page_count != total:
            # Both passes run identical layout code
            raise RuntimeError(f"Page count changed between passes ({total} -> {final.surface.page_count})")
        logger.info(f"Composed '{self.request.document.title}': {total} pages")
        return final.surface.pages

    def _run(self, surface: PageSurface, toc: Optional[List[TocEntry]] = None,
             total_pages: Optional[int] = None) -> CompositionPass:
        controller = PaginationController(surface, self.decorator,
                                          cancel_token=self.cancel_token,
                                          total_pages=total_pages)
        run = CompositionPass(surface=surface, controller=controller)

        for index in range(self.decorator.cover_page_count):
            controller.start_page("cover", self.request.document.title)
            self.decorator.draw_cover_page(surface, index)

        self._compose_toc(controller, toc)
        run.front_matter_pages = surface.page_count

        for number, section in enumerate(self.sections, start=1):
            controller.start_page("section", section.title, label=str(number))
            run.entries.append(TocEntry(section.title, surface.page_count))
            BlockLayout(controller, self.primary, self.monochrome).render(classify_text(section.content))

        if self.request.pricing_items:
            controller.start_page("pricing", PRICING_TITLE)
            run.entries.append(TocEntry(PRICING_TITLE, surface.page_count))
            self._compose_pricing(controller)

        if self.request.signatures:
            controller.start_page("signatures", SIGNATURES_TITLE)
            run.entries.append(TocEntry(SIGNATURES_TITLE, surface.page_count))
            self._compose_signatures(controller)

        controller.start_page("audit", AUDIT_TITLE)
        self._compose_audit(controller)
        return run

    # Table of contents

    def _compose_toc(self, controller: PaginationController, toc: Optional[List[TocEntry]]) -> None:
        controller.start_page("toc", TOC_TITLE)
        surface = controller.surface
        cursor = controller.cursor
        left = cursor.margin_left
        right = left + cursor.content_width
        paint = PaintContext(size=12)
        number_width = paint.width("0000")

        for idx, title in enumerate(self.toc_titles()):
            controller.check_page_break(spacing.toc_row)
            baseline = cursor.y + paint.size
            title_x = left + 10 * mm
            shown = truncate_to_width(title, right - number_width - 8 * mm - title_x, paint)

            surface.text(left, baseline, f"{idx + 1}.", paint)
            title_end = title_x + surface.text(title_x, baseline, shown, paint)

            # Dotted leader between title and page number
            dot_x = title_end + 3 * mm
            dots_end = right - number_width
            while dot_x < dots_end:
                surface.circle(dot_x, baseline - 1, 0.3 * mm, fill=colors.line_light)
                dot_x += 3 * mm

            page = toc[idx].page if toc else 0
            if page:
                surface.text(right, baseline, str(page), paint, align="right")
            controller.advance(spacing.toc_row)

    # Pricing

    def _pricing_columns(self, left: float, right: float):
        return [
            ("Item", left + 5 * mm, "left"),
            ("Description", left + 50 * mm, "left"),
            ("Qty", left + 100 * mm, "left"),
            ("Unit Price", left + 122 * mm, "left"),
            ("Total", right - 5 * mm, "right"),
        ]

    def _draw_pricing_header(self, controller: PaginationController) -> None:
        surface = controller.surface
        cursor = controller.cursor
        left, width = cursor.margin_left, cursor.content_width
        top = cursor.y
        surface.rect(left, top, width, PRICING_HEADER_HEIGHT, fill=colors.panel)
        paint = PaintContext(size=10, color=colors.text_secondary).bold()
        for label, x, align in self._pricing_columns(left, left + width):
            surface.text(x, top + 8 * mm, label, paint, align=align)
        controller.advance(PRICING_HEADER_HEIGHT + 4)

    def _draw_pricing_row(self, controller: PaginationController, idx: int, item: PricingItem) -> None:
        surface = controller.surface
        cursor = controller.cursor
        left, width = cursor.margin_left, cursor.content_width
        top = cursor.y
        if idx % 2 == 0:
            surface.rect(left, top, width, PRICING_ROW_HEIGHT, fill=colors.stripe)

        baseline = top + PRICING_ROW_HEIGHT - 4
        body = PaintContext(size=10)
        (_, name_x, _), (_, desc_x, _), (_, qty_x, _), (_, price_x, _), (_, total_x, _) = \
            self._pricing_columns(left, left + width)
        muted = body.derive(color=colors.text_muted)
        total_text = format_currency(item.line_total)
        total_left = total_x - body.bold().width(total_text)
        cells = [
            (name_x, desc_x, item.name or "Item", body),
            (desc_x, qty_x, item.description, muted),
            (qty_x, price_x, item.quantity_label, body),
            (price_x, total_left, format_currency(item.unit_price), body),
        ]
        for x, next_x, text, paint in cells:
            surface.text(x, baseline, truncate_to_width(text, next_x - x - CELL_GAP, paint), paint)
        surface.text(total_x, baseline, total_text, body.bold(), align="right")
        controller.advance(PRICING_ROW_HEIGHT)

    def _compose_pricing(self, controller: PaginationController) -> None:
        request = self.request
        self._draw_pricing_header(controller)
        for idx, item in enumerate(request.pricing_items):
            if controller.check_page_break(PRICING_ROW_HEIGHT):
                self._draw_pricing_header(controller)
            self._draw_pricing_row(controller, idx, item)

        controller.check_page_break(PRICING_TOTALS_HEIGHT)
        controller.gap(10 * mm)
        surface = controller.surface
        cursor = controller.cursor
        left = cursor.margin_left
        right = left + cursor.content_width
        label_x = left + 100 * mm

        surface.line(label_x, cursor.y, right, cursor.y, stroke=colors.line_light)
        controller.advance(10 * mm)

        body = PaintContext(size=10)
        surface.text(label_x, cursor.y, "Subtotal:", body)
        surface.text(right, cursor.y, format_currency(request.subtotal), body, align="right")
        controller.advance(8 * mm)

        if request.discount > 0:
            percent = request.pricing.discount_percent or 0
            discount_paint = body.derive(color=colors.discount)
            surface.text(label_x, cursor.y, f"Discount ({percent:g}%):", discount_paint)
            surface.text(right, cursor.y, f"-{format_currency(request.discount)}", discount_paint, align="right")
            controller.advance(8 * mm)

        if self.monochrome:
            surface.line(label_x, cursor.y - 4 * mm, right, cursor.y - 4 * mm,
                         stroke=colors.line_strong, line_width=0.5)
            total_paint = PaintContext(size=12).bold()
            surface.text(label_x, cursor.y + 2 * mm, "Total:", total_paint)
            surface.text(right, cursor.y + 2 * mm, format_currency(request.total), total_paint, align="right")
            controller.advance(10 * mm)
        else:
            box_top = cursor.y
            surface.rect(label_x - 5 * mm, box_top, right - label_x + 5 * mm, 15 * mm,
                         fill=self.primary, radius=3 * mm)
            total_paint = PaintContext(size=12, color=colors.white).bold()
            surface.text(label_x, box_top + 10 * mm, "Total Investment", total_paint)
            surface.text(right - 5 * mm, box_top + 10 * mm, format_currency(request.total),
                         total_paint, align="right")
            controller.advance(20 * mm)

    # Signatures

    def _compose_signatures(self, controller: PaginationController) -> None:
        for signature in self.request.signatures:
            controller.check_page_break(SIGNATURE_BLOCK_HEIGHT)
            self._draw_signature(controller, signature)
            controller.advance(SIGNATURE_BLOCK_HEIGHT)
            controller.gap(SIGNATURE_GAP)

    def _draw_signature(self, controller: PaginationController, signature: Signature) -> None:
        surface = controller.surface
        cursor = controller.cursor
        left, width = cursor.margin_left, cursor.content_width
        top = cursor.y

        surface.rect(left, top, width, SIGNATURE_BLOCK_HEIGHT, stroke=colors.line_light, radius=2 * mm)
        sig_x = left + width / 2 + 10 * mm
        signer_width = sig_x - left - 10 * mm
        detail_width = left + width - 5 * mm - sig_x

        signer_lines = [
            (10 * mm, signature.signer_role.upper(),
             PaintContext(size=font_sizes.caption, color=colors.text_muted).bold()),
            (20 * mm, signature.signer_name, PaintContext(size=12).bold()),
            (28 * mm, signature.signer_email, PaintContext(size=font_sizes.small, color=colors.text_muted)),
        ]
        for offset, text, paint in signer_lines:
            if text:
                surface.text(left + 5 * mm, top + offset, truncate_to_width(text, signer_width, paint), paint)

        small = PaintContext(size=font_sizes.caption, color=colors.text_muted)

        if signature.is_signed:
            surface.text(left + width - 5 * mm, top + 10 * mm, "SIGNED",
                         PaintContext(size=font_sizes.caption, color=colors.signed).bold(), align="right")
            if signature.signature_image:
                surface.image(sig_x, top + 8 * mm, 60 * mm, 20 * mm, signature.signature_image,
                              fallback="[Signature on file]", paint=small)
            else:
                surface.text(sig_x + 30 * mm, top + 20 * mm, "[Signature on file]", small, align="center")

            details = [f"Signed: {format_datetime(signature.signed_at)}"]
            if signature.ip_address:
                details.append(f"IP: {signature.ip_address}")
            location = signature.location
            if location and (location.city or location.country):
                place = ", ".join(part for part in (location.city, location.country) if part)
                details.append(f"Location: {place}")
            for offset, line in enumerate(details):
                surface.text(sig_x, top + 38 * mm + offset * 5 * mm,
                             truncate_to_width(line, detail_width, small), small)
        else:
            surface.line(sig_x, top + 35 * mm, sig_x + 60 * mm, top + 35 * mm,
                         stroke=colors.line_strong, line_width=0.5)
            surface.text(sig_x + 30 * mm, top + 42 * mm, "Pending signature", small, align="center")
            badge_paint = PaintContext(size=7, color=colors.white).bold()
            badge_width = badge_paint.width("PENDING") + 6 * mm
            badge_x = left + width - 5 * mm - badge_width
            surface.rect(badge_x, top + 5 * mm, badge_width, 7 * mm, fill=colors.pending, radius=1.5 * mm)
            surface.text(badge_x + badge_width / 2, top + 10 * mm, "PENDING", badge_paint, align="center")

    # Audit trail

    def _audit_rows(self):
        document = self.request.document
        rows = [
            ("Document ID", document.number()),
            ("Type", document.type_label),
            ("Status", document.status.upper()),
            ("Created", format_datetime(document.created_at, long=True)),
            ("Last Modified", format_datetime(document.updated_at or document.created_at, long=True)),
            ("Version", f"v{document.version}"),
            ("Compliance Confirmed", "Yes" if document.compliance_confirmed else "No"),
        ]
        if self.request.signatures:
            signed = sum(1 for signature in self.request.signatures if signature.is_signed)
            rows.append(("Signatures", f"{signed} of {len(self.request.signatures)} signed"))
        return rows

    def _compose_audit(self, controller: PaginationController) -> None:
        surface = controller.surface
        cursor = controller.cursor
        left, width = cursor.margin_left, cursor.content_width
        label_paint = PaintContext(size=10, color=colors.text_muted).bold()
        value_paint = PaintContext(size=10)

        for idx, (label, value) in enumerate(self._audit_rows()):
            controller.check_page_break(AUDIT_ROW_HEIGHT)
            top = cursor.y
            if idx % 2 == 0:
                surface.rect(left, top, width, AUDIT_ROW_HEIGHT, fill=colors.stripe)
            baseline = top + AUDIT_ROW_HEIGHT / 2 + 3.5
            surface.text(left + 5 * mm, baseline, label, label_paint)
            surface.text(left + 70 * mm, baseline, value, value_paint)
            controller.advance(AUDIT_ROW_HEIGHT)

        controller.check_page_break(20 * mm)
        controller.gap(10 * mm)
        note = PaintContext(size=font_sizes.small, color=colors.text_soft)
        generated_at = self.request.generated_at or datetime.now()
        generated_by = f"This document was generated by {self.request.company_name}"
        surface.text(left, cursor.y, truncate_to_width(generated_by, width, note), note)
        controller.advance(5 * mm)
        surface.text(left, cursor.y, f"Generated on {format_datetime(generated_at, long=True)}", note)
        controller.advance(5 * mm)


def compose_document(request: DocumentRenderRequest,
                     cancel_token: Optional[CancellationToken] = None) -> List[PageBuffer]:
    """Lay out ``request`` into page buffers."""
    return DocumentComposer(request, cancel_token=cancel_token).compose()
