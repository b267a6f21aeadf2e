"""
Tests for footer stamping.

The footer is drawn after layout, so every page of every report shows the
final page count.
"""

import pytest
from io import BytesIO
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from reporting.decoder_report import DecoderReportComposer
from reporting.footer import FooterStamper, page_label
from reporting.layout import PageSurface
from reporting.schemas import create_sample_decoder, create_sample_supplement
from reporting.styles import BRANDED_THEME
from reporting.supplement_report import SupplementReportComposer
from utils.config import Config


@pytest.fixture
def config():
    return Config(brand_name="4MARGIN", pdf_compression=True)


class TestPageLabel:
    def test_one_based(self):
        assert page_label(0, 3) == "Page 1 of 3"
        assert page_label(2, 3) == "Page 3 of 3"


class TestFooterStamper:
    """Second pass over finished pages."""

    def test_every_page_gets_label_and_mark(self):
        surface = PageSurface(BytesIO(), BRANDED_THEME)
        cursor = surface.cursor()
        cursor.new_page()
        cursor.new_page()

        pages = surface.finish(FooterStamper(mark="4MARGIN", generated_date="June 20, 2024"))

        assert len(pages) == 3
        for page in pages:
            assert page.contains(f"Page {page.index + 1} of 3")
            assert page.contains("4MARGIN")
            assert page.contains("June 20, 2024")

    def test_no_date_segment_without_date(self):
        surface = PageSurface(BytesIO(), BRANDED_THEME)
        pages = surface.finish(FooterStamper(mark="4MARGIN"))

        assert not any("|" in text for text in pages[0].texts)

    def test_footer_drawn_after_content(self):
        surface = PageSurface(BytesIO(), BRANDED_THEME)
        surface.text(48, 100, "Body text", "body")
        pages = surface.finish(FooterStamper(mark="4MARGIN"))

        assert pages[0].texts[0] == "Body text"
        assert pages[0].texts[-1] == "Page 1 of 1"


class TestReportFooters:
    """Footers on composed reports."""

    def test_supplement_pages_are_numbered(self, config):
        report = SupplementReportComposer(config).compose(create_sample_supplement())

        assert report.page_count >= 2
        for page in report.pages:
            assert page.contains(f"Page {page.index + 1} of {report.page_count}")
            assert page.contains("4MARGIN")

    def test_configured_brand_mark(self):
        report = SupplementReportComposer(Config(brand_name="Acme Supplements")).compose(create_sample_supplement())

        for page in report.pages:
            assert page.contains("Acme Supplements")

    def test_decoder_footer_is_unbranded(self, config):
        report = DecoderReportComposer(config).compose(create_sample_decoder())

        for page in report.pages:
            assert page.contains("Policy Analysis Report")
            assert page.contains(f"Page {page.index + 1} of {report.page_count}")
            assert not page.contains("4MARGIN")
