"""
Justification rendering: free-text narratives as bulleted support points.

The narrative text has no guaranteed structure, so splitting it into points
is a best-effort chain of heuristics, tried in order:

1. numbered list ("1. ... 2. ..." or "1) ...")
2. bullet markers ("•" or "- ")
3. more than one sentence
4. the whole string as a single point
"""

from __future__ import annotations

import logging
import re
from typing import Final, List, Optional, Sequence

from reporting.layout import CONTENT_WIDTH, MARGIN, LayoutCursor, PageSurface
from reporting.schemas import LineItem
from reporting.text_flow import fit_width, wrap_text
from utils.formatting import format_currency, format_number

logger = logging.getLogger(__name__)

# A list number must start the text or follow whitespace, and be followed by
# whitespace, so "3.5 inch" and "R905.2" are left alone.
NUMBERED_MARKER: Final = re.compile(r"(?:^|(?<=\s))\d+[.)]\s+")
BULLET_MARKER: Final = re.compile(r"•\s*|(?:^|(?<=\s))-\s+")
SENTENCE_END: Final = re.compile(r"[.!?]+(?=\s|$)")
SENTENCE_SPLIT: Final = re.compile(r"(?<=[.!?])\s+")

BULLET: Final[str] = "•"


def _pieces(parts: Sequence[str]) -> List[str]:
    return [part.strip() for part in parts if part and part.strip()]


def split_into_points(text: str) -> List[str]:
    """
    Split a justification narrative into discrete points.

    Returns an empty list for blank text. When no heuristic applies the
    original string is returned unchanged as the only point.
    """
    if not text or not text.strip():
        return []

    if NUMBERED_MARKER.match(text.lstrip()) or re.search(r"\n\s*\d+[.)]\s", text):
        points = _pieces(NUMBERED_MARKER.split(text))
        if points:
            return points

    if "•" in text or re.search(r"(?:^|\s)-\s", text):
        points = _pieces(BULLET_MARKER.split(text))
        if points:
            return points

    if len(SENTENCE_END.findall(text.strip())) > 1:
        points = _pieces(SENTENCE_SPLIT.split(text.strip()))
        if len(points) > 1:
            return points

    return [text]


class JustificationRenderer:
    """
    Draws one block per line item: a header strip (number, code,
    description, price), wrapped bullets, and reference lines.
    """

    HEADER_HEIGHT: Final[float] = 22

    def __init__(
        self,
        surface: PageSurface,
        cursor: LayoutCursor,
        left: float = MARGIN,
        width: float = CONTENT_WIDTH,
        show_quantity: bool = False,
        show_photos: bool = False,
    ):
        self.surface = surface
        self.cursor = cursor
        self.left = left
        self.width = width
        self.show_quantity = show_quantity
        self.show_photos = show_photos

    def render_items(self, items: Sequence[LineItem]) -> int:
        """Render every item in order. Returns the total number of points drawn."""
        drawn = 0
        for number, item in enumerate(items, start=1):
            drawn += len(self.render_item(item, number))
        return drawn

    def render_item(self, item: LineItem, number: int) -> List[str]:
        """Render one item and return the points drawn for it."""
        self._header(item, number)
        if self.show_quantity:
            self._quantity_line(item)

        points = split_into_points(item.justification)
        self.render_points(points)

        if item.code_reference:
            self._reference_line(f"Code Reference: {item.code_reference}")
        if self.show_photos and item.photo_references:
            self._reference_line(f"Photo Evidence: See {', '.join(item.photo_references)}", style="caption")

        self.cursor.advance(10)
        return points

    def render_points(self, points: Sequence[str]) -> None:
        bullet_style = self.surface.theme.text("bullet")
        body_style = self.surface.theme.text("body")
        text_x = self.left + 22
        text_width = self.width - 26

        for point in points:
            first = True
            for line in wrap_text(point, body_style.font, body_style.size, text_width):
                self.cursor.ensure_space(body_style.line_height)
                if first:
                    self.surface.text(self.left + 12, self.cursor.y, BULLET, "bullet")
                    first = False
                self.surface.text(text_x, self.cursor.y, line, "body")
                self.cursor.advance(body_style.line_height)
            self.cursor.advance(max(bullet_style.line_height - body_style.line_height, 0) + 3)

    def _header(self, item: LineItem, number: int) -> None:
        self.cursor.ensure_space(self.HEADER_HEIGHT + 24)
        top = self.cursor.y
        self.surface.rect(self.left, top, self.width, self.HEADER_HEIGHT, fill="bg_accent")
        self.surface.rect(self.left, top, 3, self.HEADER_HEIGHT, fill="primary")

        baseline = top + 14
        x = self.left + 10
        x += self.surface.text(x, baseline, f"{number}.", "item_number") + 6
        x += self.surface.text(x, baseline, item.code, "item_code") + 6

        price = format_currency(item.total_price)
        price_x = self.left + self.width - 8
        price_width = self.surface.text_width(price, "item_price")
        self.surface.text(price_x, baseline, price, "item_price", align="right")

        description_style = self.surface.theme.text("body")
        room = price_x - price_width - 10 - x
        if item.description and room > 0:
            description = fit_width(f"— {item.description}", description_style.font, description_style.size, room)
            self.surface.text(x, baseline, description, "body")

        self.cursor.advance(self.HEADER_HEIGHT + 10)

    def _quantity_line(self, item: LineItem) -> None:
        each: Optional[float] = item.total_price / item.quantity if item.quantity else None
        unit_price = format_currency(each if each is not None else item.unit_price)
        text = f"{format_number(item.quantity)} {item.unit} @ {unit_price}/ea".replace("  ", " ")
        self.cursor.ensure_space(12)
        self.surface.text(self.left + 12, self.cursor.y, text, "caption")
        self.cursor.advance(13)

    def _reference_line(self, text: str, style: str = "reference") -> None:
        text_style = self.surface.theme.text(style)
        for line in wrap_text(text, text_style.font, text_style.size, self.width - 26):
            self.cursor.ensure_space(text_style.line_height)
            self.surface.text(self.left + 22, self.cursor.y, line, style)
            self.cursor.advance(text_style.line_height)
