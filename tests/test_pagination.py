"""Tests for the pagination controller."""

import pytest

from docpress.errors import CancellationToken, RenderCancelled
from docpress.pagination import PaginationController, PaginationState
from docpress.styles import page_config
from docpress.surface import PageSurface


def test_requires_an_open_page(decorator):
    controller = PaginationController(PageSurface(), decorator)
    with pytest.raises(RuntimeError):
        controller.check_page_break(10)


def test_start_page_decorates_and_resets_cursor(controller, decorator):
    assert controller.surface.page_count == 1
    assert decorator.frames[0].title == "Overview"
    assert decorator.frames[0].number == 1
    assert controller.cursor.y == page_config.content_top
    assert controller.at_page_top


def test_block_that_fits_does_not_break(controller):
    controller.advance(100)
    assert controller.check_page_break(50) is False
    assert controller.state is PaginationState.LAYING_OUT
    assert controller.surface.page_count == 1


def test_overflow_opens_continuation_page(controller, decorator):
    controller.cursor.y = controller.cursor.bottom_limit - 5
    assert controller.check_page_break(20) is True

    assert controller.surface.page_count == 2
    assert controller.state is PaginationState.JUST_BROKE
    assert controller.cursor.y == page_config.content_top
    frame = decorator.frames[-1]
    assert frame.continued
    assert frame.number == 2
    assert frame.display_title == "Overview (continued)"
    assert controller.surface.current.title == "Overview (continued)"

    controller.advance(14)
    assert controller.state is PaginationState.LAYING_OUT


def test_oversized_block_at_page_top_does_not_loop(controller):
    assert controller.check_page_break(10_000) is False
    assert controller.surface.page_count == 1


def test_gap_is_clamped_and_skipped_at_page_top(controller):
    controller.gap(30)
    assert controller.cursor.y == page_config.content_top

    controller.advance(1)
    controller.cursor.y = controller.cursor.bottom_limit - 5
    controller.gap(50)
    assert controller.cursor.y == controller.cursor.bottom_limit


def test_frames_carry_page_total(decorator):
    controller = PaginationController(PageSurface(), decorator, total_pages=7)
    controller.start_page("toc", "Contents")
    assert decorator.frames[0].total == 7


def test_cancellation_is_checked_when_opening_pages(decorator):
    token = CancellationToken()
    controller = PaginationController(PageSurface(), decorator, cancel_token=token)
    controller.start_page("section", "One")

    token.cancel()
    assert token.cancelled
    controller.cursor.y = controller.cursor.bottom_limit
    with pytest.raises(RenderCancelled):
        controller.check_page_break(20)
    with pytest.raises(RenderCancelled):
        controller.start_page("section", "Two")
    assert controller.surface.page_count == 1


def test_non_recording_surface_still_counts_pages(decorator):
    surface = PageSurface(record=False)
    controller = PaginationController(surface, decorator)
    controller.start_page("section", "Dry run")
    surface.text(10, 10, "ignored")
    controller.cursor.y = controller.cursor.bottom_limit
    controller.check_page_break(20)
    assert surface.page_count == 2
    assert all(page.ops == [] for page in surface.pages)
