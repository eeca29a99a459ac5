"""
Table layout for pipe-delimited table blocks.

Columns share the available width equally, capped so that a table with few
columns does not stretch across the page. Cell text that does not fit the
column's character budget is cut and marked with ``..``.

License: MIT
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

from docpress.pagination import PaginationController
from docpress.styles import RGB, colors, font_sizes, table_config
from docpress.surface import PaintContext

TRUNCATION_MARK = ".."


@dataclass(frozen=True)
class TableGeometry:
    column_count: int
    column_width: float
    char_budget: int

    @property
    def total_width(self) -> float:
        return self.column_count * self.column_width


def column_width(max_width: float, column_count: int) -> float:
    """Equal column width: ``min((max_width - fixed_padding) / columns, cap)``."""
    if column_count <= 0:
        return 0.0
    usable = max(max_width - table_config.fixed_padding, 0.0)
    return min(usable / column_count, table_config.cap_width)


def char_budget(col_width: float) -> int:
    """Number of characters a cell of this width can show."""
    usable = col_width - 2 * table_config.cell_padding
    return max(math.floor(usable / table_config.average_glyph_width), 0)


def truncate_cell(text: str, budget: int) -> str:
    """Cut ``text`` to ``budget`` characters, ending with ``..`` when cut."""
    if len(text) <= budget:
        return text
    keep = max(budget - len(TRUNCATION_MARK), 0)
    return text[:keep] + TRUNCATION_MARK


def measure_table(rows: Sequence[Sequence[str]], max_width: float) -> TableGeometry:
    count = len(rows[0]) if rows else 0
    width = column_width(max_width, count)
    return TableGeometry(column_count=count, column_width=width, char_budget=char_budget(width))


def fit_rows(rows: Sequence[Sequence[str]], geometry: TableGeometry) -> List[List[str]]:
    """Pad or cut every row to the header's column count and truncate cells."""
    fitted = []
    for row in rows:
        cells = list(row[:geometry.column_count])
        cells += [""] * (geometry.column_count - len(cells))
        fitted.append([truncate_cell(cell, geometry.char_budget) for cell in cells])
    return fitted


def layout_table(controller: PaginationController, rows: Sequence[Sequence[str]],
                 x: float, max_width: float, primary: RGB, monochrome: bool) -> float:
    """
    Draw a table at the controller's cursor.

    Args:
        controller: Pagination controller owning the cursor
        rows: Table rows; the first row is the header
        x: Left edge of the table
        max_width: Width available to the table
        primary: Theme primary colour (header fill in colour themes)
        monochrome: Use a grey header instead of the primary colour

    Returns:
        Cursor y after the table
    """
    if not rows:
        return controller.cursor.y

    geometry = measure_table(rows, max_width)
    if geometry.column_count == 0:
        return controller.cursor.y

    fitted = fit_rows(rows, geometry)
    surface = controller.surface
    row_height = table_config.row_height
    table_width = geometry.total_width

    header_paint = PaintContext(size=font_sizes.table).bold().derive(
        color=colors.text_primary if monochrome else colors.white)
    body_paint = PaintContext(size=font_sizes.table)

    def draw_row(cells: List[str], row_idx: int) -> None:
        top = controller.cursor.y
        is_header = row_idx == 0

        # Row background: filled header, striped body rows
        if is_header:
            fill = colors.header_gray if monochrome else primary
            surface.rect(x, top, table_width, row_height, fill=fill)
        elif row_idx % 2 == 0:
            surface.rect(x, top, table_width, row_height, fill=colors.stripe)

        paint = header_paint if is_header else body_paint
        baseline = top + row_height / 2 + paint.size * 0.35
        for col_idx, cell in enumerate(cells):
            cell_x = x + col_idx * geometry.column_width + table_config.cell_padding
            surface.text(cell_x, baseline, cell, paint)

        surface.line(x, top + row_height, x + table_width, top + row_height,
                     stroke=colors.line_light, line_width=0.3)
        controller.advance(row_height)

    for row_idx, cells in enumerate(fitted):
        broke = controller.check_page_break(row_height)
        # Repeat the header row at the top of a continuation page
        if broke and row_idx > 0:
            draw_row(fitted[0], 0)
        draw_row(cells, row_idx)

    return controller.cursor.y
