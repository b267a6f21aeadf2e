"""
Tests for the layout cursor and drawing surface.

Tests cover:
- Page break when a block does not fit
- No break for blocks that fit, or at the top of a fresh page
- Cursor never moves past the content limit
- Surface keeps one RenderedPage per page
- Deterministic output
"""

import pytest
from io import BytesIO
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from reporting.layout import (
    BOTTOM_RESERVE,
    CONTINUATION_TOP,
    PAGE_HEIGHT,
    LayoutCursor,
    PageSurface,
)
from reporting.styles import BRANDED_THEME


LIMIT = PAGE_HEIGHT - BOTTOM_RESERVE


@pytest.fixture
def cursor():
    return LayoutCursor(y=100)


@pytest.fixture
def surface():
    return PageSurface(BytesIO(), BRANDED_THEME, title="Test")


# =============================================================================
# Cursor
# =============================================================================


class TestEnsureSpace:
    """Page breaks happen before a block that would cross the limit."""

    def test_no_break_when_block_fits(self, cursor):
        assert cursor.ensure_space(50) is False
        assert cursor.page_index == 0
        assert cursor.y == 100

    def test_break_when_block_does_not_fit(self):
        cursor = LayoutCursor(y=LIMIT - 10)

        assert cursor.ensure_space(20) is True
        assert cursor.page_index == 1
        assert cursor.y == CONTINUATION_TOP

    def test_block_ending_exactly_at_limit_fits(self):
        cursor = LayoutCursor(y=LIMIT - 20)

        assert cursor.ensure_space(20) is False

    def test_oversized_block_at_top_of_page_does_not_break(self):
        cursor = LayoutCursor(y=CONTINUATION_TOP)

        assert cursor.ensure_space(PAGE_HEIGHT * 2) is False
        assert cursor.page_index == 0

    def test_page_break_callback_receives_new_index(self):
        seen = []
        cursor = LayoutCursor(y=LIMIT, on_page_break=seen.append)

        cursor.ensure_space(10)
        cursor.move_to(LIMIT)
        cursor.ensure_space(10)

        assert seen == [1, 2]

    def test_page_index_only_grows(self, cursor):
        indexes = []
        for _ in range(200):
            cursor.ensure_space(14)
            cursor.advance(14)
            indexes.append(cursor.page_index)

        assert indexes == sorted(indexes)
        assert indexes[-1] >= 3


class TestCursorMovement:
    def test_advance_clamps_to_limit(self, cursor):
        cursor.advance(PAGE_HEIGHT)

        assert cursor.y == LIMIT
        assert cursor.remaining == 0

    def test_move_to_clamps_to_limit(self, cursor):
        cursor.move_to(PAGE_HEIGHT + 50)

        assert cursor.y == LIMIT

    def test_new_page_resets_y(self, cursor):
        cursor.new_page()

        assert cursor.y == CONTINUATION_TOP
        assert cursor.page_index == 1


# =============================================================================
# Surface
# =============================================================================


class TestPageSurface:
    """Drawing surface pages and text log."""

    def test_single_page(self, surface):
        surface.text(48, 100, "Hello", "body")
        pages = surface.finish()

        assert len(pages) == 1
        assert pages[0].contains("Hello")

    def test_cursor_breaks_add_pages(self, surface):
        cursor = surface.cursor()
        for i in range(120):
            cursor.ensure_space(12)
            surface.text(48, cursor.y, f"line {i}", "body")
            cursor.advance(12)
        pages = surface.finish()

        assert len(pages) == surface.page_count
        assert len(pages) >= 2
        assert pages[0].contains("line 0")
        assert pages[-1].contains("line 119")
        assert not pages[0].contains("line 119")

    def test_output_starts_with_pdf_signature(self):
        buffer = BytesIO()
        surface = PageSurface(buffer, BRANDED_THEME)
        surface.text(48, 100, "x", "body")
        surface.finish()

        assert buffer.getvalue().startswith(b"%PDF")

    def test_finish_twice_raises(self, surface):
        surface.finish()

        with pytest.raises(RuntimeError):
            surface.finish()

    def test_stamp_runs_once_per_page_with_total(self, surface):
        cursor = surface.cursor()
        cursor.new_page()
        cursor.new_page()
        calls = []

        surface.finish(lambda s, index, total: calls.append((index, total)))

        assert calls == [(0, 3), (1, 3), (2, 3)]

    def test_text_returns_drawn_width(self, surface):
        width = surface.text(48, 100, "Width", "body")

        assert width == pytest.approx(surface.text_width("Width", "body"))
        assert width > 0

    def test_same_drawing_is_byte_identical(self):
        def draw():
            buffer = BytesIO()
            surface = PageSurface(buffer, BRANDED_THEME, title="Same")
            surface.rect(48, 48, 100, 20, fill="accent")
            surface.text(48, 100, "Deterministic", "body")
            surface.finish()
            return buffer.getvalue()

        assert draw() == draw()
