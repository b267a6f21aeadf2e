"""
Supplement request report.

Page 1 onward: brand header, title, company block, claim panel, financial
summary, roof measurements, and the category-grouped line item table.
A new page then carries the supporting arguments for each line item.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from reporting.composer import ReportComposer
from reporting.justification import JustificationRenderer
from reporting.layout import CONTENT_WIDTH, MARGIN, LayoutCursor, PageSurface
from reporting.schemas import SupplementRecord
from reporting.sections import (
    PanelField,
    SummaryRow,
    draw_header_bar,
    draw_key_value_panel,
    draw_lines,
    draw_paragraph,
    draw_section_header,
    draw_summary_rows,
    draw_title,
)
from reporting.tables import TableRenderer, TableSummary
from utils.config import Config
from utils.formatting import format_currency, format_number, format_percent, safe_filename

logger = logging.getLogger(__name__)

SUPPORTING_ARGUMENTS_INTRO = (
    "Each supplemental line item below is justified per applicable building codes, "
    "manufacturer specifications, and industry standards."
)


def financial_summary_rows(record: SupplementRecord) -> List[SummaryRow]:
    """
    Money rows for the financial summary.

    Adjuster estimate and revised total appear only when the adjuster's
    total is known; the supplement amount always appears.
    """
    rows = []
    if record.adjuster_total is not None:
        rows.append(SummaryRow("Adjuster's Estimate (RCV):", format_currency(record.adjuster_total)))
    rows.append(SummaryRow(
        "Supplement Amount Requested:",
        format_currency(record.supplement_total),
        style="summary_highlight",
    ))
    if record.revised_total is not None:
        rows.append(SummaryRow("Revised Total (RCV):", format_currency(record.revised_total)))
    return rows


class SupplementReportComposer(ReportComposer[SupplementRecord]):
    """Composes the branded supplement request."""

    report_type = "supplement"
    document_title = "Supplement Request"

    def title_for(self, record: SupplementRecord) -> str:
        if record.claim.claim_number:
            return f"Supplement Request - Claim {record.claim.claim_number}"
        return self.document_title

    def filename(self, record: SupplementRecord) -> str:
        name = record.claim.claim_name or record.claim.claim_number
        return f"{safe_filename(name, fallback='claim')}_Supplement.pdf"

    def render(self, record: SupplementRecord, surface: PageSurface, cursor: LayoutCursor) -> TableSummary:
        draw_header_bar(surface, cursor, self.brand, "Supplement Analysis Report", record.generated_date)
        draw_title(surface, cursor, "SUPPLEMENT REQUEST", underline_width=170)

        if record.company.name:
            draw_lines(surface, cursor, [record.company.name, *record.company.lines()])
            cursor.advance(8)

        self._claim_panel(record, surface, cursor)

        draw_section_header(surface, cursor, "FINANCIAL SUMMARY")
        draw_summary_rows(surface, cursor, financial_summary_rows(record), value_x=MARGIN + 220)
        cursor.advance(12)

        if record.measurements.has_data:
            self._measurements_panel(record, surface, cursor)

        draw_section_header(surface, cursor, "SUPPLEMENT LINE ITEMS")
        table = TableRenderer(surface, cursor)
        summary = table.line_items(record.items)

        if record.items:
            cursor.new_page()
            self._supporting_arguments(record, surface, cursor)

        return summary

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def _claim_panel(self, record: SupplementRecord, surface: PageSurface, cursor: LayoutCursor) -> None:
        claim = record.claim
        draw_key_value_panel(
            surface,
            cursor,
            [
                PanelField("Claim #", claim.claim_number),
                PanelField("Policy #", claim.policy_number),
                PanelField("Carrier", claim.carrier_name),
                PanelField("Property", claim.property_address),
                PanelField("Date of Loss", claim.date_of_loss),
                PanelField("Adjuster", claim.adjuster_name),
            ],
            heading="CLAIM INFORMATION",
            columns=2,
        )

    def _measurements_panel(self, record: SupplementRecord, surface: PageSurface, cursor: LayoutCursor) -> None:
        m = record.measurements
        draw_key_value_panel(
            surface,
            cursor,
            [
                PanelField("Measured", f"{format_number(m.measured_squares)} SQ" if m.measured_squares is not None else None),
                PanelField("Waste", format_percent(m.waste_percent) if m.waste_percent is not None else None),
                PanelField("Suggested", f"{format_number(m.suggested_squares)} SQ" if m.suggested_squares is not None else None),
                PanelField("Pitch", m.pitch),
            ],
            heading="ROOF MEASUREMENTS",
            columns=2,
        )

    def _supporting_arguments(self, record: SupplementRecord, surface: PageSurface, cursor: LayoutCursor) -> None:
        draw_title(surface, cursor, "SUPPORTING ARGUMENTS", style="page_title", underline_width=190)
        draw_paragraph(surface, cursor, SUPPORTING_ARGUMENTS_INTRO, style="note", width=CONTENT_WIDTH)
        cursor.advance(12)

        renderer = JustificationRenderer(surface, cursor)
        points = renderer.render_items(record.items)
        logger.debug("Rendered %d supporting points for %d items", points, len(record.items))


def generate_supplement_pdf(record: SupplementRecord, config: Optional[Config] = None) -> bytes:
    """Render a supplement request and return the PDF bytes."""
    return SupplementReportComposer(config).generate_to_buffer(record)
