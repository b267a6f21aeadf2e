"""
Tests for the table renderer.

Tests cover:
- Category grouping over sorted input
- CategoryOrderError when a category reappears
- Total equals the sum of rendered items
- Zero items renders a placeholder, not an error
- Header row repeats after a page break
- Cell truncation
"""

import math
import pytest
from io import BytesIO
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from reporting.layout import PageSurface
from reporting.schemas import LineItem, create_sample_line_items, sort_line_items
from reporting.styles import BRANDED_THEME
from reporting.tables import (
    LINE_ITEM_COLUMNS,
    NO_LINE_ITEMS_MESSAGE,
    CategoryOrderError,
    ColumnSpec,
    TableRenderer,
    group_by_category,
)


def make_item(code, category, total, description="Line item"):
    return LineItem(
        code=code,
        description=description,
        category=category,
        quantity=1,
        unit="EA",
        unit_price=total,
        total_price=total,
    )


@pytest.fixture
def surface():
    return PageSurface(BytesIO(), BRANDED_THEME)


@pytest.fixture
def renderer(surface):
    return TableRenderer(surface, surface.cursor(100))


@pytest.fixture
def many_items():
    categories = ["Roofing", "Gutters", "Interior"]
    items = [
        make_item(f"ITM {i:03d}", categories[i % 3], 100.10 + i)
        for i in range(90)
    ]
    return sort_line_items(items)


# =============================================================================
# Grouping
# =============================================================================


class TestGroupByCategory:
    """Partition of sorted items into contiguous runs."""

    def test_sorted_items_group_contiguously(self, many_items):
        groups = group_by_category(many_items)

        assert [group.category for group in groups] == ["Gutters", "Interior", "Roofing"]
        assert sum(len(group.items) for group in groups) == 90

    def test_flattened_groups_preserve_order(self, many_items):
        groups = group_by_category(many_items)
        flattened = [item for group in groups for item in group.items]

        assert flattened == list(many_items)

    def test_reappearing_category_raises(self):
        items = [
            make_item("A", "Roofing", 1),
            make_item("B", "Gutters", 1),
            make_item("C", "Roofing", 1),
        ]

        with pytest.raises(CategoryOrderError) as exc_info:
            group_by_category(items)

        assert exc_info.value.category == "Roofing"
        assert exc_info.value.position == 2
        assert isinstance(exc_info.value, ValueError)

    def test_subtotal(self):
        groups = group_by_category([make_item("A", "Roofing", 10.25), make_item("B", "Roofing", 5.5)])

        assert groups[0].subtotal == pytest.approx(15.75)

    def test_empty(self):
        assert group_by_category([]) == []


# =============================================================================
# Line Item Table
# =============================================================================


class TestLineItemTable:
    """Rendering the category grouped table."""

    def test_total_matches_sum_of_items(self, renderer):
        items = sort_line_items(create_sample_line_items())
        summary = renderer.line_items(items)

        expected = math.fsum(item.total_price for item in items)
        assert abs(summary.total - expected) <= 0.01
        assert summary.row_count == len(items)

    def test_total_row_drawn(self, surface, renderer):
        items = sort_line_items(create_sample_line_items())
        renderer.line_items(items)
        pages = surface.finish()

        assert pages[0].contains("SUPPLEMENT TOTAL")
        assert pages[0].contains("$4,250.00")

    def test_category_banners_in_order(self, surface, renderer):
        items = sort_line_items(create_sample_line_items())
        summary = renderer.line_items(items)
        texts = surface.finish()[0].texts

        assert summary.categories == ("Interior", "Roofing")
        assert texts.index("INTERIOR") < texts.index("ROOFING")

    def test_unsorted_items_raise(self, renderer):
        items = [
            make_item("A", "Roofing", 1),
            make_item("B", "Gutters", 1),
            make_item("C", "Roofing", 1),
        ]

        with pytest.raises(CategoryOrderError):
            renderer.line_items(items)

    def test_zero_items_draws_placeholder(self, surface, renderer):
        summary = renderer.line_items([])
        pages = surface.finish()

        assert summary.row_count == 0
        assert summary.total == 0
        assert pages[0].contains(NO_LINE_ITEMS_MESSAGE)
        assert not pages[0].contains("SUPPLEMENT TOTAL")
        assert not pages[0].contains("Code")

    def test_long_table_spans_pages_and_repeats_header(self, surface, renderer, many_items):
        renderer.line_items(many_items)
        pages = surface.finish()

        assert len(pages) >= 2
        for page in pages:
            assert "Description" in page.texts

    def test_header_not_repeated_below_total(self, surface, renderer, many_items):
        renderer.line_items(many_items)
        cursor = renderer.cursor
        cursor.new_page()
        pages = surface.finish()

        assert "Description" not in pages[-1].texts

    def test_long_description_truncated(self, surface, renderer):
        description = "Remove and replace laminated composition shingles including starter and ridge"
        renderer.line_items([make_item("RFG LAMI", "Roofing", 10, description=description)])
        texts = surface.finish()[0].texts

        assert description not in texts
        assert any(text.endswith("...") and description.startswith(text[:-3]) for text in texts)


class TestGenericRows:
    def test_empty_cell_shows_dash(self, surface, renderer):
        columns = [ColumnSpec("Time", 0, 60), ColumnSpec("Gust", 60, 60, align="right")]
        renderer.header(columns)
        renderer.row(columns, ["2:00 PM", ""])
        texts = surface.finish()[0].texts

        assert "2:00 PM" in texts
        assert "—" in texts

    def test_column_anchor(self):
        left_column = ColumnSpec("Code", 10, 50)
        right_column = ColumnSpec("RCV", 10, 50, align="right")

        assert left_column.anchor(48) == 61
        assert right_column.anchor(48) == 104

    def test_line_item_columns_fit_content_width(self):
        last = LINE_ITEM_COLUMNS[-1]
        assert last.x + last.width <= 516
