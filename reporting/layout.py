"""
Page geometry, the layout cursor and the drawing surface.

Renderers work in top-down coordinates: y is measured from the top edge of
the page, the way the content flows. PageSurface converts to PDF space
(origin bottom-left) when it draws.

Finished pages are held back by ReportCanvas until the document is saved,
so page furniture that depends on the final page count (the "Page p of N"
footer) is stamped in a second pass over every page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Final, List, Optional, Tuple

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from reporting.styles import Theme
from reporting.text_flow import measure

logger = logging.getLogger(__name__)


# =============================================================================
# Page Geometry (US Letter, points)
# =============================================================================

PAGE_SIZE: Final[Tuple[float, float]] = letter
PAGE_WIDTH: Final[float] = letter[0]
PAGE_HEIGHT: Final[float] = letter[1]
MARGIN: Final[float] = 48
CONTENT_WIDTH: Final[float] = PAGE_WIDTH - 2 * MARGIN

# Content may not extend past PAGE_HEIGHT - BOTTOM_RESERVE; the footer band
# lives below that line.
BOTTOM_RESERVE: Final[float] = 60
# Where content resumes on a continuation page.
CONTINUATION_TOP: Final[float] = MARGIN


# =============================================================================
# Layout Cursor
# =============================================================================


@dataclass
class LayoutCursor:
    """
    Vertical position of the next thing to draw.

    Owned by exactly one composition. `page_index` starts at 0 and only
    grows; `on_page_break` is called with the new index every time a page
    is added so the surface can keep its pages in step.
    """

    y: float = MARGIN
    page_index: int = 0
    page_height: float = PAGE_HEIGHT
    bottom_reserve: float = BOTTOM_RESERVE
    continuation_top: float = CONTINUATION_TOP
    on_page_break: Optional[Callable[[int], None]] = field(default=None, repr=False)

    @property
    def limit(self) -> float:
        return self.page_height - self.bottom_reserve

    @property
    def remaining(self) -> float:
        return self.limit - self.y

    def fits(self, needed: float) -> bool:
        return self.y + needed <= self.limit

    def ensure_space(self, needed: float) -> bool:
        """
        Start a new page if `needed` points will not fit below the cursor.

        Returns True when a page break happened. A block taller than a whole
        page is never pushed off a page it already starts at the top of.
        """
        if self.fits(needed) or self.y <= self.continuation_top:
            return False
        self.new_page()
        return True

    def new_page(self) -> None:
        self.page_index += 1
        self.y = self.continuation_top
        if self.on_page_break is not None:
            self.on_page_break(self.page_index)

    def advance(self, amount: float) -> float:
        """Move down; never past the content limit, so the next ensure_space breaks instead."""
        self.y = min(self.y + amount, self.limit)
        return self.y

    def move_to(self, y: float) -> None:
        self.y = min(y, self.limit)


# =============================================================================
# Canvas
# =============================================================================


class ReportCanvas(canvas.Canvas):
    """Canvas that keeps every finished page until save()."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states: List[dict] = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    @property
    def page_count(self) -> int:
        return len(self._saved_page_states)

    def save_with(self, stamp: Callable[[int, int], None]) -> None:
        """Revisit each held page, let `stamp(index, total)` draw on it, then write."""
        total_pages = len(self._saved_page_states)
        for index, state in enumerate(self._saved_page_states):
            self.__dict__.update(state)
            stamp(index, total_pages)
            canvas.Canvas.showPage(self)
        canvas.Canvas.save(self)


# =============================================================================
# Rendered Pages
# =============================================================================


@dataclass(frozen=True)
class RenderedPage:
    """Text drawn on one page, in drawing order."""

    index: int
    texts: Tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return "\n".join(self.texts)

    def contains(self, fragment: str) -> bool:
        return any(fragment in text for text in self.texts)


# =============================================================================
# Surface
# =============================================================================


class PageSurface:
    """
    Drawing primitives in top-down coordinates.

    Colors and text styles are passed as theme tokens. Every string drawn is
    also recorded against the page it landed on.
    """

    def __init__(
        self,
        buffer: BinaryIO,
        theme: Theme,
        title: str = "",
        author: str = "",
        compress: bool = True,
        page_size: Tuple[float, float] = PAGE_SIZE,
    ):
        self.theme = theme
        self.width, self.height = page_size
        self.canvas = ReportCanvas(
            buffer,
            pagesize=page_size,
            pageCompression=1 if compress else 0,
            invariant=1,
        )
        self.canvas.setTitle(title)
        self.canvas.setAuthor(author)
        self.canvas.setCreator(author)
        self._texts: List[List[str]] = [[]]
        self._active = 0
        self._finished = False

    # -------------------------------------------------------------------------
    # Pages
    # -------------------------------------------------------------------------

    @property
    def page_count(self) -> int:
        return len(self._texts)

    def cursor(self, start_y: float = MARGIN) -> LayoutCursor:
        """A cursor bound to this surface; its page breaks add pages here."""
        return LayoutCursor(y=start_y, page_height=self.height, on_page_break=self._on_page_break)

    def _on_page_break(self, page_index: int) -> None:
        self.canvas.showPage()
        self._texts.append([])
        self._active = len(self._texts) - 1
        if page_index != self._active:
            logger.warning("Cursor page %d out of step with surface page %d", page_index, self._active)

    def finish(self, stamp: Optional[Callable[["PageSurface", int, int], None]] = None) -> Tuple[RenderedPage, ...]:
        """
        Close the last page, run `stamp(surface, index, total)` over every
        page, and write the PDF to the buffer.
        """
        if self._finished:
            raise RuntimeError("PageSurface.finish() called twice")
        self._finished = True
        self.canvas.showPage()

        def _stamp(index: int, total: int) -> None:
            self._active = index
            if stamp is not None:
                stamp(self, index, total)

        self.canvas.save_with(_stamp)
        return tuple(RenderedPage(index=i, texts=tuple(texts)) for i, texts in enumerate(self._texts))

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def _pdf_y(self, y: float) -> float:
        return self.height - y

    def text_width(self, value: str, style: str) -> float:
        text_style = self.theme.text(style)
        return measure(value, text_style.font, text_style.size)

    def text(
        self,
        x: float,
        y: float,
        value: str,
        style: str,
        align: str = "left",
        color: Optional[str] = None,
    ) -> float:
        """Draw one line with its baseline at y. Returns the drawn width."""
        text_style = self.theme.text(style)
        self.canvas.setFont(text_style.font, text_style.size)
        self.canvas.setFillColor(self.theme.color(color or text_style.color))

        pdf_y = self._pdf_y(y)
        if align == "right":
            self.canvas.drawRightString(x, pdf_y, value)
        elif align == "center":
            self.canvas.drawCentredString(x, pdf_y, value)
        else:
            self.canvas.drawString(x, pdf_y, value)

        if value:
            self._texts[self._active].append(value)
        return measure(value, text_style.font, text_style.size)

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        line_width: float = 0.5,
        radius: float = 0,
    ) -> None:
        """Draw a rectangle whose top edge is at y."""
        if fill is not None:
            self.canvas.setFillColor(self.theme.color(fill))
        if stroke is not None:
            self.canvas.setStrokeColor(self.theme.color(stroke))
            self.canvas.setLineWidth(line_width)

        bottom = self._pdf_y(y + height)
        if radius:
            self.canvas.roundRect(x, bottom, width, height, radius,
                                  stroke=int(stroke is not None), fill=int(fill is not None))
        else:
            self.canvas.rect(x, bottom, width, height,
                             stroke=int(stroke is not None), fill=int(fill is not None))

    def line(self, x1: float, y1: float, x2: float, y2: float,
             color: str = "border", width: float = 0.5) -> None:
        self.canvas.setStrokeColor(self.theme.color(color))
        self.canvas.setLineWidth(width)
        self.canvas.line(x1, self._pdf_y(y1), x2, self._pdf_y(y2))
