"""
Tests for the unbranded policy analysis report.

Tests cover:
- Risk strip and section order
- Omitted empty sections
- Long summaries flowing across pages
- Non-finite confidence and blank deductible amounts
"""

import dataclasses
import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from reporting.composer import PDF_MAGIC
from reporting.decoder_report import (
    DecoderReportComposer,
    deductible_amount,
    generate_decoder_pdf,
    severity_color,
)
from reporting.layout import BOTTOM_RESERVE, PageSurface
from reporting.parsing import record_from_dict
from reporting.schemas import DecoderRecord, Deductible, create_sample_decoder
from utils.config import Config
from utils.formatting import PLACEHOLDER


@pytest.fixture
def config():
    return Config(brand_name="4MARGIN")


@pytest.fixture
def record():
    return create_sample_decoder()


class TestDecoderReport:
    """Sections appear in order and only when populated."""

    def test_valid_pdf(self, config, record):
        assert generate_decoder_pdf(record, config).startswith(PDF_MAGIC)

    def test_risk_strip(self, config, record):
        first = DecoderReportComposer(config).compose(record).pages[0]

        assert first.contains("POLICY ANALYSIS REPORT")
        assert first.contains("MEDIUM RISK")
        assert first.contains("Confidence: 86%")
        assert first.contains("Document: Full policy")

    def test_section_order(self, config, record):
        report = DecoderReportComposer(config).compose(record)
        texts = [text for page in report.pages for text in page.texts]
        headings = [
            "POLICY INFORMATION",
            "POLICY LANDMINES (1)",
            "FAVORABLE PROVISIONS (1)",
            "COVERAGE SECTIONS",
            "DEDUCTIBLES",
            "DEPRECIATION METHOD",
            "EXCLUSIONS (1)",
            "ENDORSEMENTS (1)",
            "DISCLAIMER",
        ]

        positions = [texts.index(heading) for heading in headings]
        assert positions == sorted(positions)

    def test_entry_details(self, config, record):
        report = DecoderReportComposer(config).compose(record)

        assert report.contains("Matching limitation")
        assert report.contains("CRITICAL")
        assert report.contains("Action: Document discontinued shingle line")
        assert report.contains("Impact: Metal vents and flashing dents may be denied.")
        assert report.contains("Ordinance or Law (HO 04 77)")
        assert report.contains("Applies to: Wind and hail losses")
        assert report.contains("2% ($7,000)")
        assert report.contains("$350,000")

    def test_empty_sections_omitted(self, config, record):
        sparse = dataclasses.replace(
            record, landmines=(), favorable_provisions=(), exclusions=(), endorsements=(), coverages=()
        )
        report = DecoderReportComposer(config).compose(sparse)

        assert not report.contains("POLICY LANDMINES")
        assert not report.contains("FAVORABLE PROVISIONS")
        assert not report.contains("EXCLUSIONS")
        assert not report.contains("ENDORSEMENTS")
        assert not report.contains("COVERAGE SECTIONS")
        assert report.contains("DEPRECIATION METHOD")

    def test_empty_record(self, config):
        report = DecoderReportComposer(config).compose(DecoderRecord())

        assert report.content.startswith(PDF_MAGIC)
        assert report.contains("UNKNOWN RISK")
        assert report.contains("Unknown")
        assert report.contains("DISCLAIMER")

    def test_disclaimer_text(self, config, record):
        report = DecoderReportComposer(config).compose(record)

        assert report.contains("This analysis is generated by AI")

    def test_long_summary_flows_across_pages(self, config, record, monkeypatch):
        summary = " ".join(f"Summary sentence {i} about coverage limits." for i in range(400)) + " FINALWORDS"
        drawn = []
        original_text = PageSurface.text

        def spy(surface, x, y, value, style, *args, **kwargs):
            drawn.append((value, y, surface.height - BOTTOM_RESERVE))
            return original_text(surface, x, y, value, style, *args, **kwargs)

        monkeypatch.setattr(PageSurface, "text", spy)
        report = DecoderReportComposer(config).compose(dataclasses.replace(record, summary_for_contractor=summary))

        first_page = next(page.index for page in report.pages if page.contains("Summary sentence 0 about"))
        last_page = next(page.index for page in report.pages if page.contains("FINALWORDS"))
        assert last_page > first_page
        summary_lines = [(y, limit) for value, y, limit in drawn if "Summary sentence" in value]
        assert summary_lines
        assert all(y <= limit for y, limit in summary_lines)

    def test_short_summary_stays_on_first_page(self, config, record):
        report = DecoderReportComposer(config).compose(record)

        assert report.pages[0].contains("Replacement cost policy")

    def test_non_finite_confidence_renders(self, config):
        record = record_from_dict("decoder", {"confidence": "nan", "riskLevel": "high"})
        report = DecoderReportComposer(config).compose(record)

        assert report.content.startswith(PDF_MAGIC)
        assert report.pages[0].contains("Confidence: 0%")

    def test_blank_deductible_amount_uses_placeholder(self, config, record):
        def placeholders(amount):
            changed = dataclasses.replace(record, deductibles=(Deductible("AOP", amount),))
            report = DecoderReportComposer(config).compose(changed)
            return [text for page in report.pages for text in page.texts].count(PLACEHOLDER)

        assert placeholders("") == placeholders("$1,000") + 1

    def test_filename(self, config, record):
        composer = DecoderReportComposer(config)

        assert composer.filename(record) == "POL-987654_Policy_Analysis.pdf"
        unnumbered = dataclasses.replace(record, policy_number="")
        assert composer.filename(unnumbered) == "John_Smith_Policy_Analysis.pdf"


class TestHelpers:
    @pytest.mark.parametrize(
        "severity,color",
        [("critical", "red"), ("CRITICAL", "red"), ("warning", "amber"), ("info", "primary"), ("", "primary")],
    )
    def test_severity_color(self, severity, color):
        assert severity_color(severity) == color

    def test_percentage_deductible_shows_dollars(self):
        assert deductible_amount(Deductible("Wind/Hail", "2%", 7000)) == "2% ($7,000)"

    def test_flat_deductible_unchanged(self):
        assert deductible_amount(Deductible("AOP", "$1,000", 1000)) == "$1,000"

    def test_percentage_without_dollars(self):
        assert deductible_amount(Deductible("Hurricane", "5%")) == "5%"
