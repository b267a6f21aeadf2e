"""
Style registry for claim reports.

Every color, font weight and text style used by the layout engine is looked
up here by token, so all four report types share one palette and tests can
check which theme a document was drawn with.

Two themes are registered:
- branded: sky/slate palette used by the supplement, justification and
  weather reports
- unbranded: neutral slate/blue palette used by the policy decoder report
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final, Mapping, Optional

from reportlab.lib import colors


def rgb(red: int, green: int, blue: int) -> colors.Color:
    """Build a ReportLab color from 0-255 channel values."""
    return colors.Color(red / 255, green / 255, blue / 255)


# =============================================================================
# Fonts
# =============================================================================


class Fonts:
    """Standard Type 1 fonts only; no embedding required."""

    REGULAR = "Helvetica"
    BOLD = "Helvetica-Bold"
    ITALIC = "Helvetica-Oblique"


# =============================================================================
# Color Palettes
# =============================================================================


class Palette:
    """
    Branded palette.
    Slate text on white with a sky-blue accent.
    """

    PRIMARY = rgb(14, 165, 233)  # Sky-500
    PRIMARY_DARK = rgb(2, 132, 199)  # Sky-600
    ACCENT = rgb(15, 23, 42)  # Slate-900
    TEXT = rgb(15, 23, 42)
    TEXT_MUTED = rgb(100, 116, 139)  # Slate-500
    TEXT_LIGHT = rgb(148, 163, 184)  # Slate-400
    BORDER = rgb(226, 232, 240)  # Slate-200
    BG_LIGHT = rgb(248, 250, 252)  # Slate-50
    BG_ACCENT = rgb(240, 249, 255)  # Sky-50
    GREEN = rgb(22, 163, 74)
    RED = rgb(220, 38, 38)
    AMBER = rgb(245, 158, 11)
    HIGHLIGHT_BG = rgb(254, 226, 226)  # Red-100
    NEUTRAL_BG = rgb(229, 231, 235)  # Gray-200
    NEUTRAL_TEXT = rgb(55, 65, 81)  # Gray-700
    WHITE = colors.white


class NeutralPalette:
    """Unbranded palette (neutral slate/gray with a blue accent)."""

    TEXT = rgb(15, 23, 42)
    TEXT_MUTED = rgb(100, 116, 139)
    TEXT_LIGHT = rgb(148, 163, 184)
    BORDER = rgb(226, 232, 240)
    BG_LIGHT = rgb(248, 250, 252)
    BG_ACCENT = rgb(239, 246, 255)  # Blue-50
    ACCENT = rgb(59, 130, 246)  # Blue-500
    ACCENT_DARK = rgb(37, 99, 235)  # Blue-600
    GREEN = rgb(22, 163, 74)
    RED = rgb(220, 38, 38)
    AMBER = rgb(217, 119, 6)
    HIGHLIGHT_BG = rgb(254, 226, 226)
    NEUTRAL_BG = rgb(229, 231, 235)
    NEUTRAL_TEXT = rgb(55, 65, 81)
    WHITE = colors.white


# Every theme must define all of these tokens.
COLOR_TOKENS: Final[tuple[str, ...]] = (
    "primary",
    "primary_dark",
    "accent",
    "header_bg",
    "text",
    "text_muted",
    "text_light",
    "border",
    "bg_light",
    "bg_accent",
    "green",
    "red",
    "amber",
    "highlight_bg",
    "neutral_bg",
    "neutral_text",
    "white",
)


# =============================================================================
# Text Styles
# =============================================================================


@dataclass(frozen=True)
class TextStyle:
    """Font, size and color token for one kind of text."""

    font: str
    size: float
    color: str
    leading: Optional[float] = None

    @property
    def line_height(self) -> float:
        return self.leading if self.leading is not None else round(self.size * 1.25, 2)


# (font, size, color token, leading)
_TEXT_STYLE_SPECS: Final[dict[str, tuple[str, float, str, Optional[float]]]] = {
    "wordmark": (Fonts.BOLD, 24, "white", None),
    "header_title": (Fonts.BOLD, 18, "white", None),
    "header_subtitle": (Fonts.REGULAR, 9, "text_light", None),
    "header_date": (Fonts.REGULAR, 8, "text_light", None),
    "title": (Fonts.BOLD, 18, "accent", None),
    "page_title": (Fonts.BOLD, 14, "accent", None),
    "section": (Fonts.BOLD, 10, "accent", None),
    "panel_heading": (Fonts.BOLD, 9, "primary", None),
    "label": (Fonts.REGULAR, 8, "text_muted", 13),
    "value": (Fonts.BOLD, 8, "text", 13),
    "summary_label": (Fonts.REGULAR, 9, "text_muted", 16),
    "summary_value": (Fonts.BOLD, 9, "text", 16),
    "summary_highlight": (Fonts.BOLD, 9, "green", 16),
    "company": (Fonts.REGULAR, 8, "text_muted", 11),
    "body": (Fonts.REGULAR, 8, "text", 10),
    "body_bold": (Fonts.BOLD, 8, "text", 10),
    "body_muted": (Fonts.REGULAR, 7.5, "text_muted", 9),
    "note": (Fonts.ITALIC, 8, "text_muted", 10),
    "placeholder": (Fonts.ITALIC, 9, "text_muted", 20),
    "table_header": (Fonts.BOLD, 7.5, "white", 12),
    "table_cell": (Fonts.REGULAR, 7.5, "text", 14),
    "table_cell_bold": (Fonts.BOLD, 7.5, "text", 14),
    "table_cell_muted": (Fonts.REGULAR, 7.5, "text_muted", 14),
    "table_cell_alert": (Fonts.BOLD, 7.5, "red", 14),
    "table_cell_warning": (Fonts.BOLD, 7.5, "amber", 14),
    "category": (Fonts.BOLD, 7, "primary_dark", 14),
    "total": (Fonts.BOLD, 9, "white", 20),
    "item_number": (Fonts.BOLD, 9, "accent", None),
    "item_code": (Fonts.BOLD, 8, "primary_dark", None),
    "item_price": (Fonts.BOLD, 8, "green", None),
    "bullet": (Fonts.REGULAR, 8, "primary", 10),
    "reference": (Fonts.BOLD, 7, "primary_dark", 12),
    "caption": (Fonts.REGULAR, 7, "text_muted", 12),
    "tag": (Fonts.BOLD, 7, "text_muted", None),
    "badge": (Fonts.BOLD, 9, "white", None),
    "banner_title": (Fonts.BOLD, 14, "white", None),
    "banner_text": (Fonts.REGULAR, 7.5, "white", 9),
    "disclaimer": (Fonts.ITALIC, 7, "text_muted", 9),
    "footer_mark": (Fonts.BOLD, 7, "primary", None),
    "footer_text": (Fonts.REGULAR, 7, "text_light", None),
    "footer_page": (Fonts.REGULAR, 7, "text_muted", None),
}


def _build_text_styles() -> Mapping[str, TextStyle]:
    return MappingProxyType({
        name: TextStyle(font=font, size=size, color=color, leading=leading)
        for name, (font, size, color, leading) in _TEXT_STYLE_SPECS.items()
    })


# =============================================================================
# Themes
# =============================================================================


class UnknownStyleTokenError(KeyError):
    """Raised when a renderer asks for a token the theme does not define."""


@dataclass(frozen=True)
class Theme:
    """An immutable set of named colors and text styles."""

    name: str
    mark: str
    palette: Mapping[str, colors.Color]
    text_styles: Mapping[str, TextStyle] = field(default_factory=_build_text_styles)

    def color(self, token: str) -> colors.Color:
        try:
            return self.palette[token]
        except KeyError:
            raise UnknownStyleTokenError(f"Theme '{self.name}' has no color '{token}'") from None

    def text(self, token: str) -> TextStyle:
        try:
            return self.text_styles[token]
        except KeyError:
            raise UnknownStyleTokenError(f"Theme '{self.name}' has no text style '{token}'") from None

    def text_color(self, token: str) -> colors.Color:
        """Resolve the color of a text style."""
        return self.color(self.text(token).color)

    def with_mark(self, mark: str) -> "Theme":
        """Return a copy of this theme with a different brand mark."""
        return Theme(name=self.name, mark=mark, palette=self.palette, text_styles=self.text_styles)


BRANDED_THEME: Final[Theme] = Theme(
    name="branded",
    mark="4MARGIN",
    palette=MappingProxyType({
        "primary": Palette.PRIMARY,
        "primary_dark": Palette.PRIMARY_DARK,
        "accent": Palette.ACCENT,
        "header_bg": Palette.ACCENT,
        "text": Palette.TEXT,
        "text_muted": Palette.TEXT_MUTED,
        "text_light": Palette.TEXT_LIGHT,
        "border": Palette.BORDER,
        "bg_light": Palette.BG_LIGHT,
        "bg_accent": Palette.BG_ACCENT,
        "green": Palette.GREEN,
        "red": Palette.RED,
        "amber": Palette.AMBER,
        "highlight_bg": Palette.HIGHLIGHT_BG,
        "neutral_bg": Palette.NEUTRAL_BG,
        "neutral_text": Palette.NEUTRAL_TEXT,
        "white": Palette.WHITE,
    }),
)

UNBRANDED_THEME: Final[Theme] = Theme(
    name="unbranded",
    mark="Policy Analysis Report",
    palette=MappingProxyType({
        "primary": NeutralPalette.ACCENT,
        "primary_dark": NeutralPalette.ACCENT_DARK,
        "accent": NeutralPalette.TEXT,
        "header_bg": NeutralPalette.TEXT,
        "text": NeutralPalette.TEXT,
        "text_muted": NeutralPalette.TEXT_MUTED,
        "text_light": NeutralPalette.TEXT_LIGHT,
        "border": NeutralPalette.BORDER,
        "bg_light": NeutralPalette.BG_LIGHT,
        "bg_accent": NeutralPalette.BG_ACCENT,
        "green": NeutralPalette.GREEN,
        "red": NeutralPalette.RED,
        "amber": NeutralPalette.AMBER,
        "highlight_bg": NeutralPalette.HIGHLIGHT_BG,
        "neutral_bg": NeutralPalette.NEUTRAL_BG,
        "neutral_text": NeutralPalette.NEUTRAL_TEXT,
        "white": NeutralPalette.WHITE,
    }),
)

THEMES: Final[Mapping[str, Theme]] = MappingProxyType({
    BRANDED_THEME.name: BRANDED_THEME,
    UNBRANDED_THEME.name: UNBRANDED_THEME,
})


def get_theme(name: str) -> Theme:
    """Look up a registered theme by name."""
    try:
        return THEMES[name]
    except KeyError:
        raise UnknownStyleTokenError(f"Unknown theme '{name}'") from None
