"""
Reusable page sections: header bars, titles, key/value panels, summary
rows, wrapped paragraphs and flagged entries.

Each helper draws at the cursor, advances it, and calls ensure_space before
every unit it draws.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from reporting.layout import CONTENT_WIDTH, MARGIN, LayoutCursor, PageSurface
from reporting.text_flow import truncate, wrap_text
from utils.formatting import PLACEHOLDER


@dataclass(frozen=True)
class SummaryRow:
    """One label/value line of a financial summary."""

    label: str
    value: str
    style: str = "summary_value"


@dataclass(frozen=True)
class PanelField:
    label: str
    value: Optional[str]
    color: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.value is None or not str(self.value).strip()


# =============================================================================
# Headers and Titles
# =============================================================================


def draw_header_bar(
    surface: PageSurface,
    cursor: LayoutCursor,
    heading: str,
    subtitle: str = "",
    date_text: str = "",
    height: float = 72,
    heading_style: str = "wordmark",
) -> None:
    """Full-width dark bar across the top of the first page; heading, subtitle and date share one baseline."""
    surface.rect(0, 0, surface.width, height, fill="header_bg")

    baseline = round(height * 0.61)
    heading_width = surface.text(MARGIN, baseline, heading, heading_style)
    if subtitle:
        surface.text(MARGIN + heading_width + 16, baseline, subtitle, "header_subtitle")
    if date_text:
        surface.text(surface.width - MARGIN, baseline, date_text, "header_date", align="right")

    cursor.move_to(height + 18)


def draw_title(
    surface: PageSurface,
    cursor: LayoutCursor,
    title: str,
    style: str = "title",
    underline_width: float = 60,
) -> None:
    """Large title with a short accent underline."""
    cursor.ensure_space(32)
    surface.text(MARGIN, cursor.y, title, style)
    cursor.advance(6)
    surface.line(MARGIN, cursor.y, MARGIN + underline_width, cursor.y, color="primary", width=2.5)
    cursor.advance(18)


def draw_section_header(
    surface: PageSurface,
    cursor: LayoutCursor,
    title: str,
    divider: bool = True,
    underline_width: float = 100,
) -> None:
    """Divider line, bold heading and accent underline."""
    cursor.ensure_space(40)
    if divider:
        surface.line(MARGIN, cursor.y, MARGIN + CONTENT_WIDTH, cursor.y)
        cursor.advance(18)
    surface.text(MARGIN, cursor.y, title, "section")
    cursor.advance(5)
    surface.line(MARGIN, cursor.y, MARGIN + underline_width, cursor.y, color="primary", width=1.5)
    cursor.advance(14)


def draw_divider(surface: PageSurface, cursor: LayoutCursor, gap: float = 12) -> None:
    cursor.ensure_space(gap)
    surface.line(MARGIN, cursor.y, MARGIN + CONTENT_WIDTH, cursor.y)
    cursor.advance(gap)


# =============================================================================
# Text Blocks
# =============================================================================


def draw_lines(
    surface: PageSurface,
    cursor: LayoutCursor,
    lines: Iterable[str],
    style: str = "company",
    x: float = MARGIN,
) -> int:
    """Draw pre-broken lines, skipping blanks. Returns the number drawn."""
    leading = surface.theme.text(style).line_height
    drawn = 0
    for line in lines:
        if not line or not line.strip():
            continue
        cursor.ensure_space(leading)
        surface.text(x, cursor.y, line, style)
        cursor.advance(leading)
        drawn += 1
    return drawn


def draw_paragraph(
    surface: PageSurface,
    cursor: LayoutCursor,
    text: str,
    style: str = "body",
    x: float = MARGIN,
    width: float = CONTENT_WIDTH,
    max_lines: Optional[int] = None,
    color: Optional[str] = None,
) -> int:
    """Wrap text to width and draw it line by line. Returns the line count."""
    text_style = surface.theme.text(style)
    leading = text_style.line_height
    drawn = 0
    for line in wrap_text(text, text_style.font, text_style.size, width):
        if max_lines is not None and drawn >= max_lines:
            break
        cursor.ensure_space(leading)
        surface.text(x, cursor.y, line, style, color=color)
        cursor.advance(leading)
        drawn += 1
    return drawn


def draw_notice_box(
    surface: PageSurface,
    cursor: LayoutCursor,
    text: str,
    heading: str = "",
    style: str = "body",
    fill: str = "bg_light",
    padding: float = 12,
) -> None:
    """
    A shaded box with an optional bold heading and wrapped text inside it.

    A box taller than a whole page cannot be kept together; its heading and
    lines are then flowed unboxed, breaking pages line by line.
    """
    text_style = surface.theme.text(style)
    lines = list(wrap_text(text, text_style.font, text_style.size, CONTENT_WIDTH - 2 * padding))
    if not lines:
        return
    heading_height = surface.theme.text("body_bold").line_height if heading else 0
    height = heading_height + len(lines) * text_style.line_height + 2 * padding

    if height + 8 > cursor.limit - cursor.continuation_top:
        if heading:
            cursor.ensure_space(heading_height)
            surface.text(MARGIN, cursor.y, heading, "body_bold")
            cursor.advance(heading_height)
        for line in lines:
            cursor.ensure_space(text_style.line_height)
            surface.text(MARGIN, cursor.y, line, style)
            cursor.advance(text_style.line_height)
        cursor.advance(12)
        return

    cursor.ensure_space(height + 8)
    surface.rect(MARGIN, cursor.y, CONTENT_WIDTH, height, fill=fill, stroke="border", radius=3)

    y = cursor.y + padding + text_style.size
    if heading:
        surface.text(MARGIN + padding, y, heading, "body_bold")
        y += heading_height
    for line in lines:
        surface.text(MARGIN + padding, y, line, style)
        y += text_style.line_height
    cursor.advance(height + 12)


# =============================================================================
# Panels and Summaries
# =============================================================================


def draw_key_value_panel(
    surface: PageSurface,
    cursor: LayoutCursor,
    fields: Sequence[PanelField],
    heading: str = "",
    columns: int = 1,
    label_width: float = 75,
    max_chars: int = 38,
    omit_empty: bool = True,
    boxed: bool = True,
) -> int:
    """
    Labelled values in one or two columns.

    Empty values are either dropped (omit_empty) or shown as a dash.
    Returns the number of fields drawn.
    """
    shown: List[Tuple[str, str, Optional[str]]] = []
    for panel_field in fields:
        if panel_field.is_empty:
            if omit_empty:
                continue
            shown.append((panel_field.label, PLACEHOLDER, None))
        else:
            value = truncate(str(panel_field.value).strip(), max_chars)
            shown.append((panel_field.label, value, panel_field.color))

    if not shown and not heading:
        return 0

    label_style = surface.theme.text("label")
    row_height = label_style.line_height
    rows = -(-len(shown) // columns) if shown else 0
    heading_height = 16 if heading else 0
    height = heading_height + rows * row_height + (14 if boxed else 4)

    cursor.ensure_space(height + 10)
    top = cursor.y
    if boxed:
        surface.rect(MARGIN, top, CONTENT_WIDTH, height, fill="bg_light", stroke="border", radius=4)

    y = top + 14
    if heading:
        surface.text(MARGIN + 12, y, heading, "panel_heading")
        y += heading_height

    column_width = (CONTENT_WIDTH - 28) / columns
    for index, (label, value, color) in enumerate(shown):
        column = index % columns
        row = index // columns
        x = MARGIN + 12 + column * column_width
        row_y = y + row * row_height
        surface.text(x, row_y, label, "label")
        surface.text(x + label_width, row_y, value, "value", color=color)

    cursor.move_to(top + height + 14)
    return len(shown)


def draw_summary_rows(
    surface: PageSurface,
    cursor: LayoutCursor,
    rows: Sequence[SummaryRow],
    value_x: float = MARGIN + 200,
) -> None:
    """Label on the left, value aligned at value_x."""
    for row in rows:
        line_height = surface.theme.text("summary_label").line_height
        cursor.ensure_space(line_height)
        surface.text(MARGIN, cursor.y, row.label, "summary_label")
        surface.text(value_x, cursor.y, row.value, row.style)
        cursor.advance(line_height)


def draw_flagged_entry(
    surface: PageSurface,
    cursor: LayoutCursor,
    title: str,
    bar_color: str,
    body: str = "",
    tag: str = "",
    tag_color: Optional[str] = None,
    detail_label: str = "",
    detail: str = "",
    detail_color: str = "text",
) -> None:
    """
    A titled entry with a colored bar on its left edge.

    Used for policy landmines, favorable provisions, exclusions and
    endorsements.
    """
    body_style = surface.theme.text("body_muted")
    text_x = MARGIN + 10
    text_width = CONTENT_WIDTH - 14

    body_lines = list(wrap_text(body, body_style.font, body_style.size, text_width))
    detail_text = f"{detail_label} {detail}".strip() if detail else ""
    detail_lines = list(wrap_text(detail_text, body_style.font, body_style.size, text_width))
    height = 14 + (len(body_lines) + len(detail_lines)) * body_style.line_height + 6

    cursor.ensure_space(min(height, 40))
    top = cursor.y
    surface.rect(MARGIN, top - 9, 3, min(height, cursor.limit - top + 9), fill=bar_color)

    title_width = surface.text(text_x, cursor.y, title, "body_bold")
    if tag:
        surface.text(text_x + title_width + 8, cursor.y, tag, "tag", color=tag_color)
    cursor.advance(12)

    for line in body_lines:
        cursor.ensure_space(body_style.line_height)
        surface.text(text_x, cursor.y, line, "body_muted")
        cursor.advance(body_style.line_height)
    for line in detail_lines:
        cursor.ensure_space(body_style.line_height)
        surface.text(text_x, cursor.y, line, "body_muted", color=detail_color)
        cursor.advance(body_style.line_height)

    cursor.advance(8)


def draw_field_strip(
    surface: PageSurface,
    cursor: LayoutCursor,
    fields: Sequence[PanelField],
    max_chars: int = 32,
    height: float = 38,
) -> None:
    """A boxed row of fields, each label stacked above its value. Empty values show a dash."""
    if not fields:
        return
    cursor.ensure_space(height + 12)
    top = cursor.y
    surface.rect(MARGIN, top, CONTENT_WIDTH, height, fill="bg_light", stroke="border", radius=3)

    column_width = CONTENT_WIDTH / len(fields)
    for index, panel_field in enumerate(fields):
        x = MARGIN + 12 + index * column_width
        value = PLACEHOLDER if panel_field.is_empty else truncate(str(panel_field.value).strip(), max_chars)
        surface.text(x, top + 14, panel_field.label, "label")
        surface.text(x, top + 26, value, "value")

    cursor.move_to(top + height + 12)
