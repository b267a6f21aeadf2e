"""
Footer stamping.

The footer shows "Page p of N", and N is only known once every page has been
laid out, so footers are drawn in a second pass: PageSurface.finish() hands
each held-back page to FooterStamper.stamp() before writing it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from reporting.layout import MARGIN, PageSurface

FOOTER_BAND_HEIGHT: Final[float] = 36


def page_label(page_index: int, page_count: int) -> str:
    return f"Page {page_index + 1} of {page_count}"


@dataclass(frozen=True)
class FooterStamper:
    """
    Draws the footer band on one page.

    mark_style distinguishes the branded wordmark (bold, brand color) from
    the plain report name used on unbranded documents.
    """

    mark: str
    generated_date: str = ""
    mark_style: str = "footer_mark"
    band_height: float = FOOTER_BAND_HEIGHT

    def __call__(self, surface: PageSurface, page_index: int, page_count: int) -> None:
        self.stamp(surface, page_index, page_count)

    def stamp(self, surface: PageSurface, page_index: int, page_count: int) -> None:
        top = surface.height - self.band_height
        surface.rect(0, top, surface.width, self.band_height, fill="bg_light")
        surface.line(MARGIN, top, surface.width - MARGIN, top, color="border", width=0.5)

        baseline = surface.height - 18
        x = MARGIN + surface.text(MARGIN, baseline, self.mark, self.mark_style)
        if self.generated_date:
            surface.text(x, baseline, f"  |  {self.generated_date}", "footer_text")

        surface.text(
            surface.width - MARGIN,
            baseline,
            page_label(page_index, page_count),
            "footer_page",
            align="right",
        )
