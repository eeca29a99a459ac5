"""
Draw instructions and page buffers.

Layout code never talks to a PDF canvas directly. It records backend-neutral
draw instructions on a ``PageSurface``; every instruction carries the
``PaintContext`` it is drawn with, so there is no ambient font or colour
state to leak from one block into the next.

Coordinates are in points with the origin at the top-left corner of the
page and y growing downward.

License: MIT
"""

from dataclasses import dataclass, field, replace
from typing import Iterator, List, Optional

from reportlab.pdfbase import pdfmetrics

from docpress.inline import Run
from docpress.styles import RGB, colors, font_sizes, fonts, page_config
from docpress.text import normalize


@dataclass(frozen=True)
class PaintContext:
    """Font, size and fill colour for one draw instruction."""
    font: str = fonts.body
    size: float = font_sizes.body
    color: RGB = colors.text_primary

    def derive(self, **changes) -> "PaintContext":
        """Return a copy with some attributes replaced; ``self`` is untouched."""
        return replace(self, **changes)

    def for_run(self, run: Run) -> "PaintContext":
        """Paint context for a styled run, derived from this one."""
        if run.code:
            return self.derive(font=fonts.code)
        if run.bold and run.italic:
            return self.derive(font=fonts.bold_italic)
        if run.bold:
            return self.derive(font=fonts.bold)
        if run.italic:
            return self.derive(font=fonts.italic)
        return self

    def bold(self) -> "PaintContext":
        return self.derive(font=fonts.bold)

    def width(self, text: str) -> float:
        return pdfmetrics.stringWidth(text, self.font, self.size)


DEFAULT_PAINT = PaintContext()


@dataclass(slots=True)
class DrawOp:
    """
    A single backend-neutral draw instruction.

    ``kind`` is one of ``text``, ``line``, ``rect``, ``circle`` or ``image``.
    For ``line`` the segment runs from (x, y) to (x2, y2); for ``circle``
    (x, y) is the centre and ``radius`` the radius; rectangles and images use
    (x, y) as their top-left corner.
    """
    kind: str
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    x2: float = 0.0
    y2: float = 0.0
    radius: float = 0.0
    text: str = ""
    align: str = "left"
    paint: PaintContext = DEFAULT_PAINT
    fill: Optional[RGB] = None
    stroke: Optional[RGB] = None
    line_width: float = 0.5
    data: Optional[bytes] = None


@dataclass(slots=True)
class PageBuffer:
    """Ordered draw instructions for one page."""
    number: int
    role: str
    title: Optional[str] = None
    ops: List[DrawOp] = field(default_factory=list)

    def texts(self) -> List[str]:
        """Text instructions in drawing order."""
        return [op.text for op in self.ops if op.kind == "text"]

    def text_ops(self) -> Iterator[DrawOp]:
        return (op for op in self.ops if op.kind == "text")

    def images(self) -> List[DrawOp]:
        return [op for op in self.ops if op.kind == "image"]

    def contains_text(self, needle: str) -> bool:
        return any(needle in text for text in self.texts())


class PageSurface:
    """
    Collects pages of draw instructions.

    A surface created with ``record=False`` still opens pages (so page
    numbering works) but discards the instructions. The composer uses it for
    the measuring pass that runs the full layout without producing output.
    """

    def __init__(self, record: bool = True):
        self.record = record
        self.pages: List[PageBuffer] = []
        self.width = page_config.width
        self.height = page_config.height

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def current(self) -> PageBuffer:
        if not self.pages:
            raise RuntimeError("No page has been opened on this surface")
        return self.pages[-1]

    def new_page(self, role: str, title: Optional[str] = None) -> PageBuffer:
        page = PageBuffer(number=len(self.pages) + 1, role=role, title=title)
        self.pages.append(page)
        return page

    def _emit(self, op: DrawOp) -> None:
        if self.record:
            self.current.ops.append(op)

    # Drawing primitives

    def text(self, x: float, y: float, text: str, paint: PaintContext = DEFAULT_PAINT,
             align: str = "left") -> float:
        """
        Draw a string with its baseline at ``y``.

        Args:
            x: Left edge, right edge or centre depending on ``align``
            y: Baseline position
            text: Text to draw, normalized to the renderable subset
            paint: Paint context for this string only
            align: ``left``, ``right`` or ``center``

        Returns:
            Width of the drawn string in points
        """
        safe = normalize(text)
        if safe:
            self._emit(DrawOp(kind="text", x=x, y=y, text=safe, align=align, paint=paint))
        return paint.width(safe)

    def line(self, x: float, y: float, x2: float, y2: float,
             stroke: RGB = colors.line_light, line_width: float = 0.5) -> None:
        self._emit(DrawOp(kind="line", x=x, y=y, x2=x2, y2=y2, stroke=stroke, line_width=line_width))

    def rect(self, x: float, y: float, width: float, height: float,
             fill: Optional[RGB] = None, stroke: Optional[RGB] = None,
             radius: float = 0.0, line_width: float = 0.5) -> None:
        self._emit(DrawOp(kind="rect", x=x, y=y, width=width, height=height, fill=fill,
                          stroke=stroke, radius=radius, line_width=line_width))

    def circle(self, x: float, y: float, radius: float,
               fill: Optional[RGB] = None, stroke: Optional[RGB] = None) -> None:
        self._emit(DrawOp(kind="circle", x=x, y=y, radius=radius, fill=fill, stroke=stroke))

    def image(self, x: float, y: float, width: float, height: float, data: bytes,
              fallback: str = "", paint: PaintContext = DEFAULT_PAINT) -> None:
        """Place image bytes; the backend draws ``fallback`` if they cannot be decoded."""
        self._emit(DrawOp(kind="image", x=x, y=y, width=width, height=height, data=data,
                          text=normalize(fallback), paint=paint))
