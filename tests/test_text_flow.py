"""
Tests for text measurement, wrapping and truncation.

Tests cover:
- Every wrapped line fits the width
- Words are never split
- Over-long single words stay on their own line
- Blank input and explicit newlines
- Hard truncation with an ellipsis
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from reporting.text_flow import ELLIPSIS, fit_width, measure, truncate, wrap_text


FONT = "Helvetica"
SIZE = 8


@pytest.fixture
def long_paragraph():
    return (
        "Ice and water shield is required along all eaves extending at least 24 inches "
        "inside the exterior wall line of the building, and in all valleys, per the "
        "applicable residential code and the shingle manufacturer's installation instructions."
    )


# =============================================================================
# Wrapping
# =============================================================================


class TestWrapText:
    """Greedy word wrapping."""

    def test_lines_fit_width(self, long_paragraph):
        lines = list(wrap_text(long_paragraph, FONT, SIZE, 200))

        assert len(lines) > 1
        for line in lines:
            assert measure(line, FONT, SIZE) <= 200

    def test_words_are_preserved_in_order(self, long_paragraph):
        lines = list(wrap_text(long_paragraph, FONT, SIZE, 150))

        assert " ".join(lines).split() == long_paragraph.split()

    def test_short_text_is_one_line(self):
        assert list(wrap_text("Drip edge", FONT, SIZE, 300)) == ["Drip edge"]

    def test_overlong_word_stays_whole(self):
        word = "Supercalifragilisticexpialidocious" * 3
        lines = list(wrap_text(f"see {word} here", FONT, SIZE, 60))

        assert word in lines
        assert lines[0] == "see"
        assert lines[-1] == "here"

    def test_blank_input_yields_nothing(self):
        assert list(wrap_text("", FONT, SIZE, 100)) == []
        assert list(wrap_text("   \n  ", FONT, SIZE, 100)) == []

    def test_explicit_newlines_start_new_lines(self):
        lines = list(wrap_text("first line\nsecond line", FONT, SIZE, 500))

        assert lines == ["first line", "second line"]

    def test_blank_paragraph_kept_as_empty_line(self):
        lines = list(wrap_text("one\n\ntwo", FONT, SIZE, 500))

        assert lines == ["one", "", "two"]

    def test_is_lazy(self, long_paragraph):
        lines = wrap_text(long_paragraph, FONT, SIZE, 100)

        first = next(lines)
        assert first
        assert long_paragraph.startswith(first)


# =============================================================================
# Truncation
# =============================================================================


class TestTruncate:
    """Hard truncation for single-line cells."""

    def test_short_text_unchanged(self):
        assert truncate("Starter strip", 42) == "Starter strip"

    def test_exact_length_unchanged(self):
        assert truncate("x" * 10, 10) == "x" * 10

    def test_long_text_cut_with_ellipsis(self):
        result = truncate("Remove & replace laminated comp shingle roofing", 20)

        assert result == "Remove & replace l" + ELLIPSIS
        assert result.endswith(ELLIPSIS)

    def test_fit_width_shortens_until_it_fits(self):
        text = "Remove and replace laminated composition shingle roofing with felt"
        result = fit_width(text, FONT, SIZE, 120)

        assert result.endswith(ELLIPSIS)
        assert measure(result, FONT, SIZE) <= 120

    def test_fit_width_leaves_fitting_text(self):
        assert fit_width("Felt", FONT, SIZE, 120) == "Felt"
