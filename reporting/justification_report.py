"""
Justification and support points report.

A standalone document contractors attach to carrier correspondence: one
block of support points per line item, plus a waste factor explanation
when roof measurements are known.
"""

from __future__ import annotations

from typing import Optional

from reporting.composer import ReportComposer
from reporting.justification import JustificationRenderer
from reporting.layout import CONTENT_WIDTH, MARGIN, LayoutCursor, PageSurface
from reporting.schemas import JustificationRecord
from reporting.sections import (
    PanelField,
    draw_field_strip,
    draw_header_bar,
    draw_paragraph,
    draw_title,
)
from reporting.tables import NO_LINE_ITEMS_MESSAGE
from utils.config import Config
from utils.formatting import format_number, safe_filename

INSTRUCTIONS = (
    "Use the following points to support your supplement when communicating with the carrier. "
    "Personalize the language before including in your email or written correspondence."
)


def waste_explanation(record: JustificationRecord) -> str:
    return (
        f"The roof measures {format_number(record.roof_squares)} squares with a calculated waste "
        f"factor of {format_number(record.waste_percent)}%. This accounts for cuts required by the "
        f"roof geometry (hips, valleys, dormers) and manufacturer specifications for the installed product."
    )


class JustificationReportComposer(ReportComposer[JustificationRecord]):
    """Composes the branded support points document."""

    report_type = "justification"
    document_title = "Justification & Support Points"

    def filename(self, record: JustificationRecord) -> str:
        return f"{safe_filename(record.claim_number, fallback='claim')}_Justification_Support_Points.pdf"

    def render(self, record: JustificationRecord, surface: PageSurface, cursor: LayoutCursor) -> None:
        draw_header_bar(surface, cursor, self.brand, "Supporting Arguments Document", record.generated_date)
        draw_title(surface, cursor, "JUSTIFICATION & SUPPORT POINTS", underline_width=260)

        draw_paragraph(surface, cursor, INSTRUCTIONS, style="note")
        cursor.advance(12)

        draw_field_strip(surface, cursor, [
            PanelField("Claim #", record.claim_number),
            PanelField("Carrier", record.carrier_name),
            PanelField("Property", record.property_address),
        ])

        if record.items:
            renderer = JustificationRenderer(surface, cursor, show_quantity=True, show_photos=True)
            for number, item in enumerate(record.items, start=1):
                renderer.render_item(item, number)
                cursor.ensure_space(6)
                surface.line(MARGIN + 10, cursor.y - 6, MARGIN + CONTENT_WIDTH - 10, cursor.y - 6, width=0.3)
        else:
            cursor.ensure_space(20)
            surface.text(MARGIN, cursor.y, NO_LINE_ITEMS_MESSAGE, "placeholder")
            cursor.advance(20)

        if record.has_waste_data:
            self._waste_section(record, surface, cursor)

    def _waste_section(self, record: JustificationRecord, surface: PageSurface, cursor: LayoutCursor) -> None:
        cursor.ensure_space(80)
        cursor.advance(6)
        surface.text(MARGIN, cursor.y, "WASTE PERCENTAGE JUSTIFICATION", "section")
        cursor.advance(6)
        surface.line(MARGIN, cursor.y, MARGIN + 230, cursor.y, color="primary", width=1.5)
        cursor.advance(14)

        draw_paragraph(surface, cursor, waste_explanation(record), x=MARGIN + 12, width=CONTENT_WIDTH - 20)
        cursor.advance(6)

        if record.suggested_squares is not None:
            cursor.ensure_space(14)
            surface.text(
                MARGIN + 12,
                cursor.y,
                f"Adjusted total: {format_number(record.suggested_squares)} squares including waste.",
                "body_bold",
                color="primary_dark",
            )
            cursor.advance(14)


def generate_justification_pdf(record: JustificationRecord, config: Optional[Config] = None) -> bytes:
    """Render a support points document and return the PDF bytes."""
    return JustificationReportComposer(config).generate_to_buffer(record)
