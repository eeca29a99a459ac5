"""
Theme page decorators.

A decorator owns everything that is drawn around the content of a page:
cover pages, the page header (or the "(continued)" title on continuation
pages) and the footer. Two styles exist:

- ``banner``: colour band header, full-colour cover followed by an info page
- ``rule``: minimal monochrome header with a hairline rule, letterhead cover

Sequence and page-break logic live in the composer and are the same for
both styles.

License: MIT
"""

import logging
from abc import abstractmethod
from typing import List, Optional

from reportlab.lib.units import mm

from docpress.errors import ThemeError
from docpress.inline import Run
from docpress.layout import truncate_to_width, wrap_runs
from docpress.models import DocumentRenderRequest, Theme
from docpress.pagination import CONTINUED_SUFFIX, PageDecorator, PageFrame
from docpress.styles import RGB, colors, font_sizes, page_config
from docpress.surface import PageSurface, PaintContext
from docpress.text import format_date

logger = logging.getLogger(__name__)

TAGLINE = "Enterprise Technology Solutions"


def _join(parts, sep: str) -> str:
    return sep.join(part for part in parts if part)


def _initials(name: str) -> str:
    return "".join(word[0] for word in name.split() if word)[:2].upper() or "CX"


def _page_label(frame: PageFrame) -> str:
    if frame.total:
        return f"Page {frame.number} of {frame.total}"
    return f"Page {frame.number}"


def _fit_title(frame: PageFrame, width: float, paint: PaintContext, prefix: str = "") -> str:
    """Truncate a page title to ``width``, keeping the continuation suffix visible."""
    suffix = CONTINUED_SUFFIX if frame.continued else ""
    return truncate_to_width(prefix + frame.title, width - paint.width(suffix), paint) + suffix


class ThemedDecorator(PageDecorator):
    """Shared state and helpers for the built-in decorator styles."""

    cover_page_count = 1

    def __init__(self, request: DocumentRenderRequest, theme: Theme):
        self.request = request
        self.theme = theme
        self.company = request.company
        self.doc_number = request.document.number()
        self.primary: RGB = colors.text_secondary if theme.monochrome else theme.primary_rgb
        self.secondary: RGB = colors.text_muted if theme.monochrome else theme.secondary_rgb

    def decorate(self, surface: PageSurface, frame: PageFrame) -> None:
        # Cover pages are drawn in full by draw_cover_page
        if frame.role == "cover":
            return
        self.draw_header(surface, frame)
        self.draw_footer(surface, frame)

    @abstractmethod
    def draw_header(self, surface: PageSurface, frame: PageFrame) -> None:
        """Draw the header of a content page."""

    @abstractmethod
    def draw_footer(self, surface: PageSurface, frame: PageFrame) -> None:
        """Draw the footer of a content page."""

    @abstractmethod
    def draw_cover_page(self, surface: PageSurface, index: int) -> None:
        """Draw cover page ``index`` (0-based) on the page just opened."""

    # Helpers

    def _wrapped(self, surface: PageSurface, text: str, x: float, y: float,
                 width: float, paint: PaintContext, line_height: float) -> float:
        """Draw wrapped text starting at baseline ``y``; returns the next baseline."""
        for line in wrap_runs([Run(text=text)], width, paint):
            surface.text(x, y, "".join(run.text for run in line), paint)
            y += line_height
        return y

    def _company_value(self, field: str) -> Optional[str]:
        return getattr(self.company, field, None) if self.company else None

    def _company_address(self, sep: str = " - ") -> str:
        if not self.company:
            return ""
        locality = _join([self.company.city, self.company.province, self.company.postal_code], ", ")
        return _join([self.company.address_line1, self.company.address_line2,
                      locality, self.company.country], sep)

    def _contact_line(self, sep: str = " | ") -> str:
        return _join([self._company_value("phone"), self._company_value("email"),
                      self._company_value("website")], sep)

    def _logo(self, surface: PageSurface, x: float, y: float, width: float, height: float) -> bool:
        logo = self._company_value("logo")
        if not logo:
            return False
        surface.image(x, y, width, height, logo)
        return True

    def _created(self) -> str:
        return format_date(self.request.document.created_at)

    def _valid_until(self) -> str:
        expires = self.request.document.expires_at
        return format_date(expires) if expires else "No expiration"


class BannerDecorator(ThemedDecorator):
    """Colour band header; full-colour cover page plus an info page."""

    cover_page_count = 2

    def draw_header(self, surface: PageSurface, frame: PageFrame) -> None:
        surface.rect(0, 0, surface.width, page_config.band_height, fill=self.primary)
        margin = page_config.margin
        if frame.label:
            surface.text(margin, 12 * mm, f"Section {frame.label}",
                         PaintContext(size=font_sizes.small, color=colors.white))
        title_paint = PaintContext(size=font_sizes.page_title, color=colors.white).bold()
        surface.text(margin, 22 * mm, _fit_title(frame, surface.width - 2 * margin, title_paint), title_paint)

    def draw_footer(self, surface: PageSurface, frame: PageFrame) -> None:
        margin = page_config.margin
        y = surface.height - page_config.footer_offset
        paint = PaintContext(size=font_sizes.small, color=colors.text_soft)
        label = _page_label(frame)
        available = surface.width - 2 * margin - paint.width(label) - 5 * mm
        caption = f"{self.request.document.title} - {self.request.company_name}"
        surface.text(margin, y, truncate_to_width(caption, available, paint), paint)
        surface.text(surface.width - margin, y, label, paint, align="right")

    def draw_cover_page(self, surface: PageSurface, index: int) -> None:
        if index == 0:
            self._draw_cover(surface)
        else:
            self._draw_info_page(surface)

    def _draw_cover(self, surface: PageSurface) -> None:
        width, height = surface.width, surface.height
        margin = page_config.margin
        centre = width / 2
        company_name = self.request.company_name

        surface.rect(0, 0, width, height, fill=self.primary)

        if not self._logo(surface, centre - 20 * mm, 30 * mm, 40 * mm, 40 * mm):
            surface.circle(centre, 50 * mm, 20 * mm, fill=colors.white)
            initials_paint = PaintContext(size=20, color=self.primary).bold()
            surface.text(centre, 55 * mm, _initials(company_name), initials_paint, align="center")

        company_paint = PaintContext(size=font_sizes.cover_company, color=colors.white).bold()
        surface.text(centre, 90 * mm, truncate_to_width(company_name, width - 2 * margin, company_paint),
                     company_paint, align="center")
        surface.text(centre, 100 * mm, TAGLINE,
                     PaintContext(size=12, color=colors.white), align="center")

        # White content panel
        panel_x = margin
        panel_width = width - 2 * margin
        surface.rect(panel_x, 120 * mm, panel_width, 110 * mm, fill=colors.white, radius=5 * mm)

        inner_x = panel_x + 15 * mm
        badge_text = self.request.document.type_label.upper()
        badge_paint = PaintContext(size=10, color=colors.white).bold()
        badge_width = badge_paint.width(badge_text) + 16 * mm
        surface.rect(inner_x, 130 * mm, badge_width, 10 * mm, fill=self.secondary, radius=2 * mm)
        surface.text(inner_x + badge_width / 2, 137 * mm, badge_text, badge_paint, align="center")

        title_paint = PaintContext(size=font_sizes.cover_title).bold()
        self._wrapped(surface, self.request.document.title, inner_x, 160 * mm,
                      panel_width - 30 * mm, title_paint, font_sizes.cover_title + 4)

        caption = PaintContext(size=10, color=colors.text_muted)
        surface.text(inner_x, 185 * mm, "PREPARED FOR", caption)
        client_paint = PaintContext(size=14).bold()
        surface.text(inner_x, 195 * mm,
                     truncate_to_width(self.request.client_name, panel_width - 30 * mm, client_paint), client_paint)
        surface.text(inner_x, 210 * mm, f"DATE: {self._created()}", caption)
        if self.request.document.expires_at:
            surface.text(inner_x, 218 * mm, f"VALID UNTIL: {self._valid_until()}", caption)

        # Footer band with company details
        band_top = height - 45 * mm
        surface.rect(0, band_top, width, 45 * mm, fill=self.primary)
        footer_paint = PaintContext(size=font_sizes.small, color=colors.white)
        y = band_top + 10 * mm
        tax_number = self._company_value("tax_number")
        for line in (self._company_address(), self._contact_line(),
                     f"HST/GST: {tax_number}" if tax_number else ""):
            if line:
                surface.text(centre, y, line, footer_paint, align="center")
                y += 7 * mm

    def _draw_info_page(self, surface: PageSurface) -> None:
        width, height = surface.width, surface.height
        margin = page_config.margin
        content_width = width - 2 * margin
        document = self.request.document
        contact = self.request.client_contact
        client = self.request.client

        surface.rect(0, 0, 8 * mm, 40 * mm, fill=self.primary)
        number_paint = PaintContext(size=11).bold()
        name_paint = PaintContext(size=16, color=self.primary).bold()
        name_width = width - margin - 15 * mm - number_paint.width(self.doc_number) - 10 * mm
        surface.text(15 * mm, 18 * mm, truncate_to_width(self.request.company_name, name_width, name_paint),
                     name_paint)
        surface.text(15 * mm, 26 * mm, TAGLINE, PaintContext(size=10, color=colors.text_muted))
        surface.text(width - margin, 18 * mm, self.doc_number, number_paint, align="right")
        surface.line(margin, 45 * mm, width - margin, 45 * mm, stroke=colors.line_light)

        badge_text = document.type_label.upper()
        badge_paint = PaintContext(size=10, color=colors.white).bold()
        badge_width = badge_paint.width(badge_text) + 20 * mm
        surface.rect(margin, 55 * mm, badge_width, 12 * mm, fill=self.secondary, radius=3 * mm)
        surface.text(margin + badge_width / 2, 63 * mm, badge_text, badge_paint, align="center")

        self._wrapped(surface, document.title, margin, 90 * mm, content_width,
                      PaintContext(size=26).bold(), 30)
        if document.service_label:
            surface.text(margin, 105 * mm, document.service_label,
                         PaintContext(size=14, color=self.secondary))

        # Client panel
        surface.rect(margin, 120 * mm, content_width, 70 * mm, fill=colors.stripe, radius=4 * mm)
        inner_x = margin + 15 * mm
        surface.text(inner_x, 138 * mm, "PREPARED FOR", PaintContext(size=10, color=colors.text_muted).bold())
        client_paint = PaintContext(size=16).bold()
        surface.text(inner_x, 152 * mm,
                     truncate_to_width(self.request.client_name, content_width - 30 * mm, client_paint), client_paint)
        y = 164 * mm
        if contact and contact.full_name:
            surface.text(inner_x, y, contact.full_name, PaintContext(size=11, color=colors.text_secondary))
            if contact.job_title:
                surface.text(inner_x, 172 * mm, contact.job_title,
                             PaintContext(size=10, color=colors.text_muted))
            y = 182 * mm
        if client:
            address_paint = PaintContext(size=10, color=colors.text_muted)
            locality = _join([client.city, client.province, client.postal_code], ", ")
            for line in (client.address_line1, locality):
                if line:
                    surface.text(inner_x, y, line, address_paint)
                    y += 6 * mm

        # Date boxes
        box_y = 205 * mm
        box_width = (content_width - 10 * mm) / 2
        label_paint = PaintContext(size=9, color=colors.white).bold()
        value_paint = PaintContext(size=14, color=colors.white).bold()
        for offset, fill, label, value in (
            (0, self.primary, "DATE ISSUED", self._created()),
            (box_width + 10 * mm, self.secondary, "VALID UNTIL", self._valid_until()),
        ):
            surface.rect(margin + offset, box_y, box_width, 35 * mm, fill=fill, radius=4 * mm)
            surface.text(margin + offset + 10 * mm, box_y + 14 * mm, label, label_paint)
            surface.text(margin + offset + 10 * mm, box_y + 26 * mm, value, value_paint)


class RuleDecorator(ThemedDecorator):
    """Minimal monochrome header with a hairline rule; letterhead cover."""

    cover_page_count = 1

    def content_top(self, frame: PageFrame) -> float:
        if frame.continued:
            return 35 * mm
        return page_config.content_top

    def draw_header(self, surface: PageSurface, frame: PageFrame) -> None:
        margin = page_config.margin
        width = surface.width
        company_paint = PaintContext(size=font_sizes.small, color=colors.text_muted)
        surface.text(margin, 12 * mm,
                     truncate_to_width(self.request.company_name, width - 2 * margin - 35 * mm, company_paint),
                     company_paint)
        self._logo(surface, width - margin - 30 * mm, 6 * mm, 30 * mm, 10 * mm)

        title_color = colors.text_primary if self.theme.monochrome else self.primary
        prefix = f"{frame.label}. " if frame.label else ""
        if frame.continued:
            paint = PaintContext(size=12, color=colors.text_muted)
            surface.text(margin, 25 * mm, _fit_title(frame, width - 2 * margin, paint, prefix), paint)
            surface.line(margin, 28 * mm, width - margin, 28 * mm, stroke=colors.line_light, line_width=0.3)
        else:
            paint = PaintContext(size=font_sizes.page_title, color=title_color).bold()
            surface.text(margin, 30 * mm, _fit_title(frame, width - 2 * margin, paint, prefix), paint)
            surface.line(margin, 35 * mm, width - margin, 35 * mm, stroke=colors.line_strong, line_width=0.5)

    def draw_footer(self, surface: PageSurface, frame: PageFrame) -> None:
        margin = page_config.margin
        width, height = surface.width, surface.height
        rule_y = height - page_config.footer_rule_offset
        surface.line(margin, rule_y, width - margin, rule_y, stroke=colors.line_light, line_width=0.3)
        paint = PaintContext(size=font_sizes.caption, color=colors.text_muted)
        text_y = height - 12 * mm
        contact = _join([self._company_value("address_line1"), self._company_value("website"),
                         self._company_value("phone"), self._company_value("email")], " | ")
        label = _page_label(frame)
        if contact:
            # Centred, so it must clear the page label on both sides
            available = width - 2 * margin - 2 * (paint.width(label) + 4 * mm)
            surface.text(width / 2, text_y, truncate_to_width(contact, available, paint), paint, align="center")
        surface.text(width - margin, text_y, label, paint, align="right")

    def draw_cover_page(self, surface: PageSurface, index: int) -> None:
        width = surface.width
        margin = page_config.margin
        content_width = width - 2 * margin
        document = self.request.document

        # Letterhead
        text_x = margin
        if self._logo(surface, margin, 12 * mm, 25 * mm, 25 * mm):
            text_x = margin + 30 * mm
        surface.text(text_x, 20 * mm, self.request.company_name, PaintContext(size=16).bold())
        description = self._company_value("description")
        if description:
            surface.text(text_x, 26 * mm, description, PaintContext(size=9, color=colors.text_muted))

        right_paint = PaintContext(size=8, color=colors.text_secondary)
        tax_number = self._company_value("tax_number")
        right_lines: List[str] = [
            self._company_value("director_name") or "",
            f"(HST/GST) TAX ID: {tax_number}" if tax_number else "",
            f"Email: {self._company_value('email')}" if self._company_value("email") else "",
            f"Phone: {self._company_value('phone')}" if self._company_value("phone") else "",
            f"Website: {self._company_value('website')}" if self._company_value("website") else "",
            self._company_address(", "),
        ]
        y = 16 * mm
        for line in right_lines:
            if line:
                surface.text(width - margin, y, line, right_paint, align="right")
                y += 4.5 * mm
        rule_y = max(y, 40 * mm)
        surface.line(margin, rule_y, width - margin, rule_y, stroke=colors.line_strong, line_width=0.5)

        # Document block
        y = rule_y + 50 * mm
        surface.text(margin, y, "DOCUMENT ID:", PaintContext(size=9, color=colors.text_muted).bold())
        surface.text(margin + 32 * mm, y, self.doc_number, PaintContext(size=9))
        y += 12 * mm

        badge_text = document.type_label.upper()
        badge_paint = PaintContext(size=9, color=colors.badge_text).bold()
        badge_width = badge_paint.width(badge_text) + 16 * mm
        surface.rect(margin, y - 6 * mm, badge_width, 9 * mm, fill=colors.badge_fill,
                     stroke=colors.badge_border, radius=1.5 * mm)
        surface.text(margin + 8 * mm, y, badge_text, badge_paint)
        y += 18 * mm

        y = self._wrapped(surface, document.title, margin, y, content_width,
                          PaintContext(size=font_sizes.cover_title).bold(), font_sizes.cover_title + 6)
        y += 6 * mm
        detail_paint = PaintContext(size=10, color=colors.text_secondary)
        if document.service_label:
            surface.text(margin, y, f"SERVICE TYPE: {document.service_label}", detail_paint)
            y += 7 * mm
        surface.text(margin, y, f"DATE: {self._created()}", detail_paint)

        self._draw_prepared_for(surface)

    def _draw_prepared_for(self, surface: PageSurface) -> None:
        width, height = surface.width, surface.height
        margin = page_config.margin
        contact = self.request.client_contact
        client = self.request.client

        y = height - 80 * mm
        surface.line(margin, y - 8 * mm, width - margin, y - 8 * mm, stroke=colors.line_light, line_width=0.3)
        surface.text(margin, y, "PREPARED FOR", PaintContext(size=11).bold())

        heading = PaintContext(size=8, color=colors.text_muted).bold()
        value = PaintContext(size=9, color=colors.text_secondary)
        left_x, right_x = margin, width / 2
        left_y = right_y = y + 10 * mm

        surface.text(left_x, left_y, "PRIMARY CONTACT", heading)
        if contact:
            for line in (contact.full_name, contact.job_title, contact.email, contact.phone):
                if line:
                    left_y += 5 * mm
                    surface.text(left_x, left_y, line, value)

        surface.text(right_x, right_y, "COMPANY INFORMATION", heading)
        right_y += 5 * mm
        surface.text(right_x, right_y, self.request.client_name, value.bold())
        if client:
            locality = _join([client.city, client.province, client.postal_code], ", ")
            for line in (client.industry, client.website, client.address_line1, locality, client.country):
                if line:
                    right_y += 5 * mm
                    surface.text(right_x, right_y, line, value)


DECORATORS = {
    "banner": BannerDecorator,
    "rule": RuleDecorator,
}


def decorator_for(request: DocumentRenderRequest, theme: Optional[Theme] = None) -> ThemedDecorator:
    """
    Build the page decorator for a request's theme.

    Raises:
        ThemeError: If the theme names an unknown decorator style
    """
    theme = theme or request.theme
    decorator_cls = DECORATORS.get(theme.style)
    if decorator_cls is None:
        raise ThemeError(f"Unknown theme style '{theme.style}' (expected one of {', '.join(DECORATORS)})")
    logger.debug("Using %s for theme %s", decorator_cls.__name__, theme.name)
    return decorator_cls(request, theme)
