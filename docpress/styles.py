"""
Style tokens and design configuration for document rendering.

This module defines the design tokens used by the layout engine: fonts,
the heading size ladder, colours, spacing, page geometry, table metrics and
the built-in theme presets.

License: MIT
"""

import re
from dataclasses import dataclass
from typing import Dict, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

RGB = Tuple[float, float, float]

HEX_COLOR_PATTERN = re.compile(r"^#?([a-fA-F\d]{2})([a-fA-F\d]{2})([a-fA-F\d]{2})$")


@dataclass
class FontConfig:
    """Standard PDF fonts (no embedding needed for metrics or output)."""
    body: str = "Helvetica"
    bold: str = "Helvetica-Bold"
    italic: str = "Helvetica-Oblique"
    bold_italic: str = "Helvetica-BoldOblique"
    code: str = "Courier"


@dataclass
class FontSizes:
    """Font sizes in points."""
    h1: float = 16
    h2: float = 14
    h3: float = 12
    h4: float = 11
    body: float = 10
    small: float = 9
    caption: float = 8
    table: float = 9
    page_title: float = 16
    toc_title: float = 20
    cover_title: float = 22
    cover_company: float = 26

    def heading(self, level: int) -> float:
        """Size for a heading level; levels past the ladder clamp to the smallest."""
        ladder = (self.h1, self.h2, self.h3, self.h4)
        index = min(max(level, 1), len(ladder)) - 1
        return ladder[index]


@dataclass
class Colors:
    """Color palette in RGB tuples (0-1 range for ReportLab)."""

    # Text
    text_primary: RGB = (0.122, 0.161, 0.216)  # #1F2937
    text_secondary: RGB = (0.216, 0.255, 0.318)  # #374151
    text_muted: RGB = (0.420, 0.447, 0.502)  # #6B7280
    text_soft: RGB = (0.612, 0.639, 0.686)  # #9CA3AF

    # Lines and fills
    line_light: RGB = (0.784, 0.784, 0.784)  # #C8C8C8
    line_strong: RGB = (0.392, 0.392, 0.392)  # #646464
    stripe: RGB = (0.976, 0.980, 0.984)  # #F9FAFB
    panel: RGB = (0.953, 0.957, 0.965)  # #F3F4F6
    header_gray: RGB = (0.863, 0.863, 0.863)  # #DCDCDC
    quote_bar: RGB = (0.820, 0.835, 0.859)  # #D1D5DB

    # Status
    signed: RGB = (0.086, 0.639, 0.290)  # #16A34A
    pending: RGB = (0.984, 0.749, 0.141)  # #FBBF24
    discount: RGB = (0.133, 0.545, 0.133)  # #228B22

    # Minimal cover badge
    badge_fill: RGB = (0.941, 0.973, 1.0)  # #F0F8FF
    badge_border: RGB = (0.392, 0.584, 0.929)  # #6495ED
    badge_text: RGB = (0.275, 0.510, 0.706)  # #4682B4

    white: RGB = (1.0, 1.0, 1.0)
    black: RGB = (0.0, 0.0, 0.0)


@dataclass
class Spacing:
    """Spacing values in points."""
    line_height: float = 14
    paragraph_gap: float = 11
    heading_gap: float = 6
    list_indent: float = 16
    bullet_radius: float = 1.6
    quote_indent: float = 12
    rule_gap: float = 10
    table_gap: float = 10
    toc_row: float = 22
    section_title_gap: float = 8


@dataclass
class PageConfig:
    """A4 page geometry in points (1 pt = 1/72 inch)."""
    width: float = A4[0]
    height: float = A4[1]
    margin: float = 20 * mm

    # Header furniture
    band_height: float = 30 * mm
    content_top: float = 45 * mm
    footer_offset: float = 15 * mm
    footer_rule_offset: float = 18 * mm

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def bottom_limit(self) -> float:
        return self.height - self.margin


@dataclass
class TableConfig:
    """Markdown table metrics."""
    fixed_padding: float = 10 * mm
    cap_width: float = 50 * mm
    cell_padding: float = 3 * mm
    average_glyph_width: float = 2 * mm
    row_height: float = 18


def hex_to_rgb(value: str) -> RGB:
    """
    Convert a hex colour string to a ReportLab RGB tuple.

    Args:
        value: Colour such as ``#6B21A8`` or ``6B21A8``

    Returns:
        Tuple of floats in the 0-1 range; unparseable input yields the
        primary text colour.
    """
    match = HEX_COLOR_PATTERN.match(value or "")
    if not match:
        return colors.text_primary
    return tuple(int(part, 16) / 255 for part in match.groups())


def is_hex_color(value: str) -> bool:
    return bool(HEX_COLOR_PATTERN.match(value or ""))


# Built-in themes, referenced by name from render requests
THEME_PRESETS: Dict[str, Dict[str, object]] = {
    "branded": {
        "name": "branded",
        "style": "banner",
        "primary_color": "#6B21A8",
        "secondary_color": "#A855F7",
        "monochrome": False,
    },
    "minimal": {
        "name": "minimal",
        "style": "rule",
        "primary_color": "#374151",
        "secondary_color": "#6B7280",
        "monochrome": True,
    },
}

# Global style instances (singletons)
fonts = FontConfig()
font_sizes = FontSizes()
colors = Colors()
spacing = Spacing()
page_config = PageConfig()
table_config = TableConfig()
