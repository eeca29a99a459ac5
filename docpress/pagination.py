"""
Pagination controller.

Owns the vertical cursor for the page being laid out and decides when the
content has to continue on a new page. Page furniture (headers, the
"(continued)" title, footers) is drawn by the ``PageDecorator`` the
controller was built with.

License: MIT
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from docpress.errors import CancellationToken
from docpress.styles import page_config
from docpress.surface import PageSurface

logger = logging.getLogger(__name__)

CONTINUED_SUFFIX = " (continued)"


class PaginationState(Enum):
    LAYING_OUT = "laying_out"
    JUST_BROKE = "just_broke"


@dataclass
class PageCursor:
    """Current drawing position and printable bounds, in points from the top-left."""
    page_index: int = 0
    x: float = page_config.margin
    y: float = page_config.margin
    margin_left: float = page_config.margin
    margin_right: float = page_config.margin
    margin_top: float = page_config.margin
    margin_bottom: float = page_config.margin
    page_width: float = page_config.width
    page_height: float = page_config.height

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    @property
    def bottom_limit(self) -> float:
        return self.page_height - self.margin_bottom

    @property
    def remaining(self) -> float:
        return self.bottom_limit - self.y


@dataclass(frozen=True)
class PageFrame:
    """What a decorator needs to know about the page it is decorating."""
    role: str
    title: str
    label: Optional[str] = None
    continued: bool = False
    number: int = 0
    total: Optional[int] = None

    @property
    def display_title(self) -> str:
        return self.title + CONTINUED_SUFFIX if self.continued else self.title


class PageDecorator(ABC):
    """Theme-specific page furniture."""

    def content_top(self, frame: PageFrame) -> float:
        """Y offset where content starts below the header."""
        return page_config.content_top

    @abstractmethod
    def decorate(self, surface: PageSurface, frame: PageFrame) -> None:
        """Draw header and footer furniture on the page just opened."""


class PaginationController:
    """
    Two-state page break machine.

    ``check_page_break`` is called by every block routine before it draws,
    with the block's worst-case height. When the block would cross the
    bottom margin a continuation page is opened and decorated, and the
    cursor jumps to the decorator's content start.
    """

    def __init__(self, surface: PageSurface, decorator: PageDecorator,
                 cursor: Optional[PageCursor] = None,
                 cancel_token: Optional[CancellationToken] = None,
                 total_pages: Optional[int] = None):
        self.surface = surface
        self.decorator = decorator
        self.cursor = cursor or PageCursor()
        self.cancel_token = cancel_token
        self.total_pages = total_pages
        self.state = PaginationState.LAYING_OUT
        self.frame: Optional[PageFrame] = None
        self.page_breaks = 0
        self._page_top = self.cursor.y

    @property
    def at_page_top(self) -> bool:
        """True while nothing has been laid out on the current page."""
        return self.cursor.y <= self._page_top

    def _open(self, frame: PageFrame) -> PageFrame:
        if self.cancel_token is not None:
            self.cancel_token.raise_if_cancelled()
        page = self.surface.new_page(frame.role, frame.display_title)
        frame = replace(frame, number=page.number, total=self.total_pages)
        self.decorator.decorate(self.surface, frame)
        self.frame = frame
        self.cursor.page_index = page.number - 1
        self.cursor.x = self.cursor.margin_left
        self.cursor.y = self.decorator.content_top(frame)
        self._page_top = self.cursor.y
        return frame

    def start_page(self, role: str, title: str, label: Optional[str] = None) -> PageFrame:
        """Open a fresh (non-continuation) page for a new part of the document."""
        self.state = PaginationState.LAYING_OUT
        return self._open(PageFrame(role=role, title=title, label=label))

    def check_page_break(self, required_space: float) -> bool:
        """
        Break to a continuation page if ``required_space`` does not fit.

        Args:
            required_space: Worst-case height of what is about to be drawn

        Returns:
            True if a page break was taken
        """
        if self.frame is None:
            raise RuntimeError("start_page() must be called before laying out content")

        fits = self.cursor.y + required_space <= self.cursor.bottom_limit
        # An empty page is the best we can do for an oversized block
        if fits or self.at_page_top:
            self.state = PaginationState.LAYING_OUT
            return False

        self._open(replace(self.frame, continued=True))
        self.page_breaks += 1
        self.state = PaginationState.JUST_BROKE
        logger.debug("Page break to page %d (%s)", self.frame.number, self.frame.display_title)
        return True

    def advance(self, dy: float) -> None:
        """Move the cursor down after drawing."""
        self.cursor.y += dy
        self.state = PaginationState.LAYING_OUT

    def gap(self, dy: float) -> None:
        """Add vertical whitespace without ever passing the bottom margin."""
        if self.at_page_top:
            return
        self.cursor.y = min(self.cursor.y + dy, self.cursor.bottom_limit)
        self.state = PaginationState.LAYING_OUT
