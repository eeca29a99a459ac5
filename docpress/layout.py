"""
Word wrapping and block layout.

Consumes the block list produced by the classifier and lays it out through
the pagination controller. Every block routine asks the controller for a
page break before drawing, using the block's worst-case height (one line at
a time for wrapped text).

License: MIT
"""

import re
from dataclasses import replace
from typing import List

from docpress.blocks import (
    Block, Blockquote, BulletItem, Heading, NumberedItem, Paragraph, Rule, Spacer, Table
)
from docpress.inline import Run
from docpress.pagination import PaginationController
from docpress.styles import RGB, colors, font_sizes, spacing
from docpress.surface import PaintContext
from docpress.tables import layout_table

ELLIPSIS = "..."

WHITESPACE_SPLIT = re.compile(r"(\s+)")


def truncate_to_width(word: str, max_width: float, paint: PaintContext) -> str:
    """Hard-truncate a word that is wider than the column, ending it with an ellipsis."""
    if paint.width(word) <= max_width:
        return word
    for keep in range(len(word) - 1, 0, -1):
        candidate = word[:keep] + ELLIPSIS
        if paint.width(candidate) <= max_width:
            return candidate
    return ELLIPSIS if paint.width(ELLIPSIS) <= max_width else ""


def _same_style(a: Run, b: Run) -> bool:
    return (a.bold, a.italic, a.code) == (b.bold, b.italic, b.code)


def _finish_line(fragments: List[Run]) -> List[Run]:
    """Drop trailing whitespace and merge neighbouring fragments of the same style."""
    while fragments and fragments[-1].text.isspace():
        fragments.pop()
    merged: List[Run] = []
    for fragment in fragments:
        if merged and _same_style(merged[-1], fragment):
            merged[-1] = replace(merged[-1], text=merged[-1].text + fragment.text,
                                 end=fragment.end)
        else:
            merged.append(fragment)
    return merged


def wrap_runs(runs: List[Run], max_width: float, base: PaintContext) -> List[List[Run]]:
    """
    Greedy word wrap of styled runs.

    Words are added to the current line until the next one would overflow
    ``max_width``; a single word wider than the column is hard-truncated.

    Args:
        runs: Styled runs of one logical line
        max_width: Column width in points
        base: Paint context for plain text; styled runs derive from it

    Returns:
        Wrapped lines, each a list of runs; never wider than ``max_width``
    """
    lines: List[List[Run]] = []
    current: List[Run] = []
    current_width = 0.0

    for run in runs:
        if not run.text:
            continue
        paint = base.for_run(run)

        for part in WHITESPACE_SPLIT.split(run.text):
            if not part:
                continue
            is_space = part.isspace()
            if is_space and not current:
                continue

            width = paint.width(part)
            if current and current_width + width > max_width:
                lines.append(_finish_line(current))
                current = []
                current_width = 0.0
                if is_space:
                    continue

            if width > max_width:
                part = truncate_to_width(part, max_width, paint)
                width = paint.width(part)
                if not part:
                    continue

            current.append(replace(run, text=part))
            current_width += width

    if current:
        lines.append(_finish_line(current))
    return [line for line in lines if line]


def line_width(line: List[Run], base: PaintContext) -> float:
    return sum(base.for_run(run).width(run.text) for run in line)


class BlockLayout:
    """
    Lays out classified blocks for one section.

    Maintains no state of its own besides the controller it draws through.
    """

    def __init__(self, controller: PaginationController, primary: RGB, monochrome: bool):
        self.controller = controller
        self.surface = controller.surface
        self.primary = primary
        self.monochrome = monochrome
        self.body = PaintContext(size=font_sizes.body, color=colors.text_primary)

    @property
    def x(self) -> float:
        return self.controller.cursor.margin_left

    @property
    def width(self) -> float:
        return self.controller.cursor.content_width

    def render(self, blocks: List[Block]) -> None:
        for block in blocks:
            self.render_block(block)

    def render_block(self, block: Block) -> None:
        """Render a single block based on its type."""
        if isinstance(block, Heading):
            self._render_heading(block)
        elif isinstance(block, Paragraph):
            self._render_paragraph(block)
        elif isinstance(block, BulletItem):
            self._render_bullet(block)
        elif isinstance(block, NumberedItem):
            self._render_numbered(block)
        elif isinstance(block, Blockquote):
            self._render_blockquote(block)
        elif isinstance(block, Rule):
            self._render_rule()
        elif isinstance(block, Spacer):
            self.controller.gap(spacing.paragraph_gap / 2)
        elif isinstance(block, Table):
            self._render_table(block)

    def _draw_runs(self, line: List[Run], x: float, baseline: float, base: PaintContext) -> float:
        for run in line:
            x += self.surface.text(x, baseline, run.text, base.for_run(run))
        return x

    def _render_lines(self, lines: List[List[Run]], x: float, base: PaintContext,
                      line_height: float, marker=None) -> None:
        """Draw wrapped lines, checking for a page break before each one."""
        for idx, line in enumerate(lines):
            self.controller.check_page_break(line_height)
            top = self.controller.cursor.y
            baseline = top + base.size
            if idx == 0 and marker is not None:
                marker(baseline)
            self._draw_runs(line, x, baseline, base)
            self.controller.advance(line_height)

    def _render_heading(self, heading: Heading):
        size = font_sizes.heading(heading.level)
        color = colors.text_primary if self.monochrome else self.primary
        paint = PaintContext(size=size, color=color).bold()
        line_height = size + 4
        lines = wrap_runs([Run(text=heading.text)], self.width, paint)
        if not lines:
            return

        # Keep the heading together with at least one line of what follows
        required = spacing.heading_gap + len(lines) * line_height + spacing.line_height
        self.controller.check_page_break(required)
        self.controller.gap(spacing.heading_gap)
        self._render_lines(lines, self.x, paint, line_height)
        self.controller.gap(spacing.heading_gap / 2)

    def _render_paragraph(self, paragraph: Paragraph):
        lines = wrap_runs(paragraph.runs, self.width, self.body)
        self._render_lines(lines, self.x, self.body, spacing.line_height)

    def _render_bullet(self, item: BulletItem):
        indent = spacing.list_indent
        lines = wrap_runs(item.runs, self.width - indent, self.body)
        if not lines:
            return

        def marker(baseline: float) -> None:
            fill = colors.text_primary if self.monochrome else self.primary
            self.surface.circle(self.x + 4, baseline - self.body.size * 0.3,
                                spacing.bullet_radius, fill=fill)

        self._render_lines(lines, self.x + indent, self.body, spacing.line_height, marker)

    def _render_numbered(self, item: NumberedItem):
        indent = spacing.list_indent + 4
        lines = wrap_runs(item.runs, self.width - indent, self.body)
        if not lines:
            return

        def marker(baseline: float) -> None:
            self.surface.text(self.x, baseline, f"{item.index}.", self.body.bold())

        self._render_lines(lines, self.x + indent, self.body, spacing.line_height, marker)

    def _render_blockquote(self, quote: Blockquote):
        indent = spacing.quote_indent
        paint = self.body.derive(color=colors.text_muted)
        lines = wrap_runs([Run(text=quote.text, italic=True)], self.width - indent, paint)
        for line in lines:
            self.controller.check_page_break(spacing.line_height)
            top = self.controller.cursor.y
            self.surface.rect(self.x, top, 2, spacing.line_height, fill=colors.quote_bar)
            self._draw_runs(line, self.x + indent, top + paint.size, paint)
            self.controller.advance(spacing.line_height)

    def _render_rule(self):
        self.controller.check_page_break(spacing.rule_gap)
        y = self.controller.cursor.y + spacing.rule_gap / 2
        self.surface.line(self.x, y, self.x + self.width, y,
                          stroke=colors.line_light, line_width=0.3)
        self.controller.advance(spacing.rule_gap)

    def _render_table(self, table: Table):
        layout_table(self.controller, table.rows, self.x, self.width,
                     primary=self.primary, monochrome=self.monochrome)
        self.controller.gap(spacing.table_gap)
