"""
Tests for the supplement request report.

Tests cover:
1. Four items, two categories, adjuster total → three money rows
2. No adjuster total → only the supplement amount row
3. Empty item list → placeholder instead of a table
4. Twenty items produce a larger document than four
5. Page count grows with content
6. Deterministic output
7. Drawing failures surface as ReportGenerationError
"""

import dataclasses
import math
import re
import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from reporting.composer import PDF_MAGIC, ReportGenerationError
from reporting.schemas import LineItem, create_sample_supplement, sort_line_items
from reporting.supplement_report import (
    SupplementReportComposer,
    financial_summary_rows,
    generate_supplement_pdf,
)
from reporting.tables import NO_LINE_ITEMS_MESSAGE
from utils.config import Config


def make_items(count):
    categories = ["Roofing", "Gutters", "Interior", "Siding"]
    items = [
        LineItem(
            code=f"ITM {i:03d}",
            description=f"Supplemental line item number {i}",
            category=categories[i % len(categories)],
            quantity=2,
            unit="EA",
            unit_price=50.25,
            total_price=100.5,
            justification="1. Required by code 2. Omitted from the adjuster's estimate",
            code_reference="IRC R905.2",
        )
        for i in range(count)
    ]
    return tuple(sort_line_items(items))


def with_items(record, items):
    return dataclasses.replace(
        record,
        items=items,
        supplement_total=math.fsum(item.total_price for item in items),
    )


def count_pdf_pages(content):
    return len(re.findall(rb"/Type /Page[^s]", content))


@pytest.fixture
def config():
    return Config(brand_name="4MARGIN", pdf_compression=True)


@pytest.fixture
def composer(config):
    return SupplementReportComposer(config)


@pytest.fixture
def record():
    return create_sample_supplement()


# =============================================================================
# Scenarios
# =============================================================================


class TestFinancialSummary:
    """Money rows depend on whether the adjuster total is known."""

    def test_three_rows_with_adjuster_total(self, composer, record):
        report = composer.compose(record)

        assert report.content.startswith(PDF_MAGIC)
        assert report.contains("Adjuster's Estimate (RCV):")
        assert report.contains("Supplement Amount Requested:")
        assert report.contains("Revised Total (RCV):")
        assert report.contains("$8,500.00")
        assert report.contains("$12,750.00")

    def test_rows_without_adjuster_total(self, composer, record):
        report = composer.compose(dataclasses.replace(record, adjuster_total=None))

        assert report.content.startswith(PDF_MAGIC)
        assert not report.contains("Adjuster's Estimate (RCV):")
        assert not report.contains("Revised Total (RCV):")
        assert report.contains("Supplement Amount Requested:")
        assert report.contains("CLAIM INFORMATION")
        assert report.contains("SUPPLEMENT LINE ITEMS")

    def test_row_builder(self, record):
        labels = [row.label for row in financial_summary_rows(record)]
        assert len(labels) == 3

        labels = [row.label for row in financial_summary_rows(dataclasses.replace(record, adjuster_total=None))]
        assert labels == ["Supplement Amount Requested:"]

    def test_zero_adjuster_total_still_shown(self, record):
        rows = financial_summary_rows(dataclasses.replace(record, adjuster_total=0.0))

        assert len(rows) == 3


class TestLineItems:
    """Table and supporting arguments."""

    def test_empty_items_render_placeholder(self, composer, record):
        report = composer.compose(with_items(record, ()))

        assert report.content.startswith(PDF_MAGIC)
        assert report.size > 0
        assert report.contains(NO_LINE_ITEMS_MESSAGE)
        assert not report.contains("SUPPORTING ARGUMENTS")
        assert report.page_count == 1

    def test_supporting_arguments_start_new_page(self, composer, record):
        report = composer.compose(record)

        assert report.page_count >= 2
        assert not report.pages[0].contains("SUPPORTING ARGUMENTS")
        assert report.pages[1].contains("SUPPORTING ARGUMENTS")

    def test_items_grouped_by_category(self, composer, record):
        texts = composer.compose(record).pages[0].texts

        assert texts.index("INTERIOR") < texts.index("DRY CLN") < texts.index("ROOFING")
        for code in ("RFG FELT", "RFG ICE", "RFG LAMI"):
            assert texts.index(code) > texts.index("ROOFING")

    def test_total_row_matches_items(self, composer, record):
        report = composer.compose(record)

        assert report.contains("SUPPLEMENT TOTAL")
        assert report.contains("$4,250.00")

    def test_twenty_items_larger_than_four(self, composer, record):
        small = composer.compose(with_items(record, make_items(4)))
        large = composer.compose(with_items(record, make_items(20)))

        assert large.size > small.size

    def test_size_grows_monotonically(self, composer, record):
        sizes = [composer.compose(with_items(record, make_items(n))).size for n in (0, 4, 12, 40)]

        assert sizes == sorted(sizes)

    def test_page_count_grows_with_content(self, composer, record):
        counts = [composer.compose(with_items(record, make_items(n))).page_count for n in (4, 40, 120)]

        assert counts == sorted(counts)
        assert counts[-1] > counts[0]

    def test_page_objects_match_rendered_pages(self, composer, record):
        report = composer.compose(with_items(record, make_items(60)))

        assert count_pdf_pages(report.content) == report.page_count

    def test_unsorted_items_fail_generation(self, composer, record):
        items = make_items(8)
        unsorted = (items[0], items[2], items[1])

        with pytest.raises(ReportGenerationError) as exc_info:
            composer.compose(with_items(record, unsorted))

        assert exc_info.value.report_type == "supplement"
        assert "category" in exc_info.value.reason.lower()


class TestOutput:
    def test_deterministic(self, config, record):
        first = SupplementReportComposer(config).generate_to_buffer(record)
        second = SupplementReportComposer(config).generate_to_buffer(record)

        assert first == second

    def test_uncompressed_output(self, record):
        content = generate_supplement_pdf(record, Config(pdf_compression=False))

        assert content.startswith(PDF_MAGIC)

    def test_missing_optional_fields(self, composer, record):
        sparse = dataclasses.replace(
            record,
            company=dataclasses.replace(record.company, name="", phone="", license=""),
            claim=dataclasses.replace(record.claim, policy_number="", adjuster_name="", date_of_loss=""),
            measurements=dataclasses.replace(record.measurements, measured_squares=None, waste_percent=None,
                                             suggested_squares=None, pitch=None),
        )
        report = composer.compose(sparse)

        assert report.content.startswith(PDF_MAGIC)
        assert not report.contains("ROOF MEASUREMENTS")
        assert not report.contains("Policy #")

    def test_generate_writes_file(self, composer, record, tmp_path):
        result = composer.generate(record, tmp_path)

        assert result.path == tmp_path / "Smith_Residence_Supplement.pdf"
        assert result.path.read_bytes().startswith(PDF_MAGIC)
        assert result.page_count >= 2

    def test_drawing_failure_wrapped(self, composer, record, monkeypatch):
        def broken(*args, **kwargs):
            raise OSError("surface allocation failed")

        monkeypatch.setattr(composer, "render", broken)

        with pytest.raises(ReportGenerationError) as exc_info:
            composer.compose(record)

        assert isinstance(exc_info.value.__cause__, OSError)
        assert "surface allocation failed" in str(exc_info.value)
