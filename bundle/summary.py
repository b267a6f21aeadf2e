"""
Plain-text companions to the PDFs in a claim bundle.

Supplement_Summary.txt restates the claim, financials, measurements and line
items; Justification_Support_Points.txt is a copy-and-paste friendly version
of the support points document.
"""

from __future__ import annotations

from typing import List, Optional

from reporting.justification_report import INSTRUCTIONS, waste_explanation
from reporting.schemas import JustificationRecord, SupplementRecord
from utils.formatting import display, format_currency, format_number

RULE_WIDTH = 70
HEAVY_RULE = "=" * RULE_WIDTH
LIGHT_RULE = "-" * RULE_WIDTH

LABEL_WIDTH = 20


def _field(label: str, value: Optional[object]) -> str:
    return f"{label + ':':<{LABEL_WIDTH}}{display(value)}"


def _money(amount: Optional[float]) -> Optional[str]:
    return format_currency(amount) if amount is not None else None


def _heading(lines: List[str], title: str, rule: str = LIGHT_RULE) -> None:
    lines.extend(["", rule, title, rule])


def claim_display_name(record: SupplementRecord) -> str:
    """The claim's name, or "Claim <number>" when it has none."""
    if record.claim.claim_name:
        return record.claim.claim_name
    return f"Claim {record.claim.claim_number}".strip()


def supplement_summary_text(record: SupplementRecord, generated_by: str = "4MARGIN") -> str:
    claim = record.claim
    lines = [HEAVY_RULE, "SUPPLEMENT SUMMARY", HEAVY_RULE, ""]
    lines.append(_field("Claim", claim_display_name(record)))
    lines.append(_field("Claim #", claim.claim_number))
    lines.append(_field("Policy #", claim.policy_number))
    lines.append(_field("Carrier", claim.carrier_name))
    lines.append(_field("Property", claim.property_address))
    lines.append(_field("Date of Loss", claim.date_of_loss))

    _heading(lines, "FINANCIAL SUMMARY")
    lines.append(_field("Adjuster Total", _money(record.adjuster_total)))
    lines.append(_field("Supplement Total", _money(record.supplement_total)))
    lines.append(_field("Revised Total", _money(record.revised_total)))

    measurements = record.measurements
    if measurements.has_data:
        _heading(lines, "MEASUREMENTS")
        if measurements.measured_squares is not None:
            lines.append(_field("Measured Squares", format_number(measurements.measured_squares)))
        if measurements.waste_percent is not None:
            lines.append(_field("Waste %", f"{format_number(measurements.waste_percent)}%"))
        if measurements.suggested_squares is not None:
            lines.append(_field("Suggested Squares", format_number(measurements.suggested_squares)))
        if measurements.pitch:
            lines.append(_field("Pitch", measurements.pitch))

    if record.items:
        _heading(lines, "SUPPLEMENT LINE ITEMS")
        lines.append("")
        for number, item in enumerate(record.items, start=1):
            lines.append(f"{number}. {item.code} — {item.description}")
            lines.append(f"   Category:   {display(item.category)}")
            lines.append(f"   Quantity:   {format_number(item.quantity)} {item.unit}".rstrip())
            if item.unit_price:
                lines.append(f"   Unit Price: {format_currency(item.unit_price)}")
            if item.total_price:
                lines.append(f"   Total:      {format_currency(item.total_price)}")
            lines.append("")

    lines.extend(["", HEAVY_RULE, _generated_line(generated_by, record.generated_date)])
    return "\n".join(lines) + "\n"


def justification_summary_text(record: JustificationRecord, generated_by: str = "4MARGIN") -> str:
    lines = [HEAVY_RULE, "SUPPLEMENT JUSTIFICATION — SUPPORTING POINTS", HEAVY_RULE, ""]
    lines.append(INSTRUCTIONS)
    lines.append("")
    lines.append(f"Claim #:   {display(record.claim_number)}")
    lines.append(f"Carrier:   {display(record.carrier_name)}")
    lines.append(f"Property:  {display(record.property_address)}")
    lines.append("")

    if record.items:
        lines.extend([LIGHT_RULE, ""])
        for number, item in enumerate(record.items, start=1):
            lines.extend([f"{number}. {item.code} — {item.description}", ""])
            if item.has_justification:
                lines.extend(["   JUSTIFICATION:", f"   {item.justification.strip()}", ""])
            if item.code_reference:
                lines.extend([f"   CODE REFERENCE: {item.code_reference}", ""])
            if item.photo_references:
                lines.extend([f"   PHOTO EVIDENCE: See {', '.join(item.photo_references)}", ""])
            lines.extend([LIGHT_RULE, ""])
    else:
        lines.extend(["[No line items have been added to this supplement yet.]", ""])

    if record.has_waste_data:
        _heading(lines, "WASTE PERCENTAGE JUSTIFICATION", rule=HEAVY_RULE)
        lines.extend(["", waste_explanation(record), ""])
        if record.suggested_squares is not None:
            lines.append(f"Adjusted total: {format_number(record.suggested_squares)} squares including waste.")
        lines.append("")

    lines.extend([LIGHT_RULE, _generated_line(generated_by, record.generated_date)])
    return "\n".join(lines) + "\n"


def _generated_line(generated_by: str, generated_date: str) -> str:
    if generated_date:
        return f"Generated by {generated_by} on {generated_date}"
    return f"Generated by {generated_by}"
