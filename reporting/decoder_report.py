"""
Unbranded policy decoder report.

A neutral summary of an insurance policy a contractor can hand to a
homeowner: risk assessment, policy details, landmines, favorable
provisions, coverages, deductibles, depreciation, exclusions and
endorsements.
"""

from __future__ import annotations

from typing import Final, Optional

from reporting.composer import ReportComposer
from reporting.footer import FooterStamper
from reporting.layout import CONTENT_WIDTH, MARGIN, LayoutCursor, PageSurface
from reporting.schemas import DecoderRecord, Deductible
from reporting.sections import (
    PanelField,
    draw_flagged_entry,
    draw_header_bar,
    draw_key_value_panel,
    draw_notice_box,
    draw_paragraph,
    draw_section_header,
)
from reporting.styles import UNBRANDED_THEME
from utils.config import Config
from utils.formatting import PLACEHOLDER, format_currency, safe_filename

DISCLAIMER: Final[str] = (
    "This analysis is generated by AI for educational and informational purposes only. "
    "It does not constitute legal, insurance, or professional advice. Always consult with "
    "a licensed insurance professional for policy interpretation. Results may not reflect "
    "all policy provisions, especially if only a declarations page was provided."
)

RISK_COLORS: Final[dict] = {"high": "red", "medium": "amber"}


def severity_color(severity: str) -> str:
    """Bar color for exclusions and endorsements."""
    severity = severity.lower()
    if severity == "critical":
        return "red"
    if severity == "warning":
        return "amber"
    return "primary"


def deductible_amount(deductible: Deductible) -> str:
    """Percentage deductibles also show their dollar value when known."""
    text = deductible.amount
    if deductible.dollar_amount and "%" in deductible.amount:
        text += f" ({format_currency(deductible.dollar_amount).replace('.00', '')})"
    return text


class DecoderReportComposer(ReportComposer[DecoderRecord]):
    """Composes the unbranded policy analysis report."""

    report_type = "decoder"
    document_title = "Policy Analysis Report"
    default_theme = UNBRANDED_THEME

    def filename(self, record: DecoderRecord) -> str:
        name = record.policy_number or record.named_insured
        return f"{safe_filename(name, fallback='policy')}_Policy_Analysis.pdf"

    def footer(self, record: DecoderRecord) -> FooterStamper:
        return FooterStamper(
            mark=self.theme.mark,
            generated_date=record.generated_date,
            mark_style="footer_text",
            band_height=30,
        )

    def render(self, record: DecoderRecord, surface: PageSurface, cursor: LayoutCursor) -> None:
        draw_header_bar(
            surface, cursor, "POLICY ANALYSIS REPORT",
            date_text=record.generated_date, height=56, heading_style="header_title",
        )

        self._risk_strip(record, surface, cursor)
        self._policy_information(record, surface, cursor)

        if record.summary_for_contractor:
            draw_notice_box(surface, cursor, record.summary_for_contractor, heading="Summary", style="body_muted")

        if record.landmines:
            draw_section_header(surface, cursor, f"POLICY LANDMINES ({len(record.landmines)})")
            for landmine in record.landmines:
                color = "red" if landmine.severity.lower() == "critical" else "amber"
                draw_flagged_entry(
                    surface, cursor, landmine.name, color,
                    body=landmine.impact,
                    tag=landmine.severity.upper(), tag_color=color,
                    detail_label="Action:", detail=landmine.action_item, detail_color="text",
                )

        if record.favorable_provisions:
            draw_section_header(surface, cursor, f"FAVORABLE PROVISIONS ({len(record.favorable_provisions)})")
            for provision in record.favorable_provisions:
                draw_flagged_entry(surface, cursor, provision.name, "green", body=provision.impact)

        if record.coverages:
            self._coverages(record, surface, cursor)
        if record.deductibles:
            self._deductibles(record, surface, cursor)
        self._depreciation(record, surface, cursor)

        if record.exclusions:
            draw_section_header(surface, cursor, f"EXCLUSIONS ({len(record.exclusions)})")
            for exclusion in record.exclusions:
                color = severity_color(exclusion.severity)
                draw_flagged_entry(
                    surface, cursor, exclusion.name, color,
                    body=exclusion.description,
                    tag=exclusion.severity.upper(), tag_color=color,
                    detail_label="Impact:", detail=exclusion.impact, detail_color="red",
                )

        if record.endorsements:
            draw_section_header(surface, cursor, f"ENDORSEMENTS ({len(record.endorsements)})")
            for endorsement in record.endorsements:
                color = severity_color(endorsement.severity)
                title = endorsement.name
                if endorsement.number:
                    title += f" ({endorsement.number})"
                draw_flagged_entry(
                    surface, cursor, title, color,
                    body=endorsement.description,
                    tag=endorsement.severity.upper(), tag_color=color,
                    detail_label="Impact:", detail=endorsement.impact, detail_color="text",
                )

        self._disclaimer(surface, cursor)

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def _risk_strip(self, record: DecoderRecord, surface: PageSurface, cursor: LayoutCursor) -> None:
        top = cursor.y
        surface.rect(MARGIN, top, CONTENT_WIDTH, 48, fill="bg_light", stroke="border", radius=3)

        risk = (record.risk_level or "unknown").lower()
        badge_color = RISK_COLORS.get(risk, "green")
        surface.rect(MARGIN + 14, top + 14, 80, 20, fill=badge_color, radius=3)
        surface.text(MARGIN + 54, top + 27, f"{risk.upper()} RISK", "badge", align="center")

        confidence = int(record.confidence * 100 + 0.5)
        surface.text(MARGIN + 110, top + 27, f"Confidence: {confidence}%", "caption")
        if record.document_type:
            surface.text(MARGIN + 220, top + 27, f"Document: {record.document_type.replace('_', ' ')}", "caption")

        cursor.move_to(top + 60)

    def _policy_information(self, record: DecoderRecord, surface: PageSurface, cursor: LayoutCursor) -> None:
        draw_section_header(surface, cursor, "POLICY INFORMATION", divider=False)
        draw_key_value_panel(
            surface,
            cursor,
            [
                PanelField("Policy Type", record.policy_type),
                PanelField("Carrier", record.carrier),
                PanelField("Policy #", record.policy_number),
                PanelField("Named Insured", record.named_insured),
                PanelField("Property", record.property_address),
                PanelField("Effective", record.effective_date),
                PanelField("Expiration", record.expiration_date),
            ],
            columns=2,
            label_width=80,
            max_chars=42,
            boxed=False,
        )

    def _coverages(self, record: DecoderRecord, surface: PageSurface, cursor: LayoutCursor) -> None:
        draw_section_header(surface, cursor, "COVERAGE SECTIONS")
        for coverage in record.coverages:
            cursor.ensure_space(24)
            surface.text(MARGIN, cursor.y, coverage.label, "body_bold")
            if coverage.limit:
                surface.text(MARGIN + CONTENT_WIDTH, cursor.y, coverage.limit, "item_price", align="right")
            cursor.advance(10)
            if coverage.description:
                draw_paragraph(surface, cursor, coverage.description, style="body_muted", width=CONTENT_WIDTH - 80)
            cursor.advance(6)

    def _deductibles(self, record: DecoderRecord, surface: PageSurface, cursor: LayoutCursor) -> None:
        draw_section_header(surface, cursor, "DEDUCTIBLES")
        for deductible in record.deductibles:
            cursor.ensure_space(24)
            amount = deductible_amount(deductible) or PLACEHOLDER
            width = surface.text(MARGIN, cursor.y, amount, "summary_value")
            if deductible.type:
                surface.text(MARGIN + width + 6, cursor.y, f"({deductible.type})", "body_muted")
            cursor.advance(10)
            if deductible.applies_to:
                surface.text(MARGIN, cursor.y, f"Applies to: {deductible.applies_to}", "body_muted")
            cursor.advance(12)

    def _depreciation(self, record: DecoderRecord, surface: PageSurface, cursor: LayoutCursor) -> None:
        cursor.ensure_space(40)
        draw_section_header(surface, cursor, "DEPRECIATION METHOD")
        method = record.depreciation_method.upper()
        color = {"RCV": "green", "ACV": "red"}.get(method, "text")
        surface.text(MARGIN, cursor.y, record.depreciation_method or "Unknown", "summary_value", color=color)
        cursor.advance(12)
        if record.depreciation_notes:
            draw_paragraph(surface, cursor, record.depreciation_notes, style="body_muted")
            cursor.advance(4)

    def _disclaimer(self, surface: PageSurface, cursor: LayoutCursor) -> None:
        cursor.ensure_space(60)
        cursor.advance(8)
        surface.line(MARGIN, cursor.y, MARGIN + CONTENT_WIDTH, cursor.y)
        cursor.advance(12)
        surface.text(MARGIN, cursor.y, "DISCLAIMER", "tag")
        cursor.advance(10)
        draw_paragraph(surface, cursor, DISCLAIMER, style="disclaimer")


def generate_decoder_pdf(record: DecoderRecord, config: Optional[Config] = None) -> bytes:
    """Render a policy analysis report and return the PDF bytes."""
    return DecoderReportComposer(config).generate_to_buffer(record)
