"""Tests for table geometry, truncation and paginated table layout."""

import pytest

from docpress.styles import colors, page_config, table_config
from docpress.tables import (
    TRUNCATION_MARK, char_budget, column_width, fit_rows, layout_table, measure_table, truncate_cell,
)

PRIMARY = (0.42, 0.13, 0.66)


@pytest.mark.parametrize("count", range(1, 13))
def test_columns_never_exceed_available_width(count):
    max_width = page_config.content_width
    assert column_width(max_width, count) * count <= max_width


def test_few_columns_are_capped():
    assert column_width(page_config.content_width, 2) == table_config.cap_width


def test_many_columns_share_the_width():
    max_width = page_config.content_width
    expected = (max_width - table_config.fixed_padding) / 6
    assert column_width(max_width, 6) == pytest.approx(expected)


def test_zero_columns():
    assert column_width(400, 0) == 0.0


def test_truncate_cell():
    assert truncate_cell("abcdef", 6) == "abcdef"
    assert truncate_cell("abcdefg", 6) == "abcd.."
    assert truncate_cell("", 3) == ""


def test_cells_marked_only_when_over_budget():
    geometry = measure_table([["H1", "H2", "H3"]], page_config.content_width)
    budget = geometry.char_budget
    assert budget == char_budget(geometry.column_width)

    exact = "x" * budget
    over = "y" * (budget + 1)
    fitted = fit_rows([["H1", "H2", "H3"], [exact, over, "short"]], geometry)
    assert fitted[1][0] == exact
    assert fitted[1][1].endswith(TRUNCATION_MARK)
    assert len(fitted[1][1]) == budget
    assert fitted[1][2] == "short"


def test_rows_padded_and_cut_to_header_width():
    geometry = measure_table([["A", "B", "C"]], page_config.content_width)
    fitted = fit_rows([["A", "B", "C"], ["1"], ["1", "2", "3", "4"]], geometry)
    assert fitted[1] == ["1", "", ""]
    assert fitted[2] == ["1", "2", "3"]


def test_header_fill_follows_theme(controller):
    layout_table(controller, [["A", "B"], ["1", "2"]], 50, 400, primary=PRIMARY, monochrome=False)
    first_rect = next(op for op in controller.surface.current.ops if op.kind == "rect")
    assert first_rect.fill == PRIMARY


def test_monochrome_header_is_grey(controller):
    layout_table(controller, [["A", "B"], ["1", "2"]], 50, 400, primary=PRIMARY, monochrome=True)
    first_rect = next(op for op in controller.surface.current.ops if op.kind == "rect")
    assert first_rect.fill == colors.header_gray


def test_returns_cursor_after_table(controller):
    start = controller.cursor.y
    end = layout_table(controller, [["A"], ["1"], ["2"]], 50, 400, primary=PRIMARY, monochrome=False)
    assert end == controller.cursor.y == pytest.approx(start + 3 * table_config.row_height)


def test_header_repeats_on_continuation_pages(controller, decorator):
    rows = [["Name", "Qty", "Note"]] + [[f"row {i}", str(i), "ok"] for i in range(80)]
    layout_table(controller, rows, controller.cursor.margin_left, controller.cursor.content_width,
                 primary=PRIMARY, monochrome=False)

    pages = controller.surface.pages
    assert len(pages) > 1
    assert controller.page_breaks == len(pages) - 1
    for page in pages[1:]:
        assert page.texts()[:3] == ["Name", "Qty", "Note"]
    assert all(frame.continued for frame in decorator.frames[1:])

    # Every body row appears exactly once
    body = [text for page in pages for text in page.texts() if text.startswith("row ")]
    assert body == [f"row {i}" for i in range(80)]
