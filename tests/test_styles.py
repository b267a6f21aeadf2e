"""
Tests for the style registry.
"""

import dataclasses
import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from reporting.styles import (
    BRANDED_THEME,
    COLOR_TOKENS,
    THEMES,
    UNBRANDED_THEME,
    UnknownStyleTokenError,
    get_theme,
)


class TestThemes:
    """Both themes define the same tokens with their own palettes."""

    @pytest.mark.parametrize("theme", [BRANDED_THEME, UNBRANDED_THEME])
    def test_every_color_token_defined(self, theme):
        for token in COLOR_TOKENS:
            assert theme.color(token) is not None

    @pytest.mark.parametrize("theme", [BRANDED_THEME, UNBRANDED_THEME])
    def test_every_text_style_uses_a_known_color(self, theme):
        for name, style in theme.text_styles.items():
            assert style.color in COLOR_TOKENS, name
            assert theme.text_color(name) is not None

    def test_palettes_differ(self):
        assert BRANDED_THEME.color("primary") != UNBRANDED_THEME.color("primary")

    def test_marks(self):
        assert BRANDED_THEME.mark == "4MARGIN"
        assert UNBRANDED_THEME.mark == "Policy Analysis Report"

    def test_unknown_color_token(self):
        with pytest.raises(UnknownStyleTokenError):
            BRANDED_THEME.color("chartreuse")

    def test_unknown_text_style(self):
        with pytest.raises(UnknownStyleTokenError):
            BRANDED_THEME.text("headline_xxl")

    def test_registry_lookup(self):
        assert get_theme("branded") is BRANDED_THEME
        assert get_theme("unbranded") is UNBRANDED_THEME
        assert set(THEMES) == {"branded", "unbranded"}

    def test_unknown_theme(self):
        with pytest.raises(UnknownStyleTokenError):
            get_theme("sepia")


class TestImmutability:
    def test_theme_is_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            BRANDED_THEME.mark = "Other"

    def test_palette_is_read_only(self):
        with pytest.raises(TypeError):
            BRANDED_THEME.palette["primary"] = None

    def test_with_mark_returns_copy(self):
        renamed = BRANDED_THEME.with_mark("Acme")

        assert renamed.mark == "Acme"
        assert BRANDED_THEME.mark == "4MARGIN"
        assert renamed.palette is BRANDED_THEME.palette

    def test_line_height_defaults_from_size(self):
        style = BRANDED_THEME.text("title")

        assert style.leading is None
        assert style.line_height == pytest.approx(style.size * 1.25)
