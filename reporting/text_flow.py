"""
Text measurement, word wrapping and truncation.

Widths come from the standard font metrics bundled with ReportLab, so the
wrapping here matches what the canvas draws.
"""

from __future__ import annotations

from typing import Iterator

from reportlab.pdfbase.pdfmetrics import stringWidth

ELLIPSIS = "..."


def measure(text: str, font_name: str, font_size: float) -> float:
    """Width of `text` in points when set in the given font."""
    return stringWidth(text, font_name, font_size)


def wrap_text(text: str, font_name: str, font_size: float, max_width: float) -> Iterator[str]:
    """
    Break text into lines no wider than max_width.

    Greedy, word by word. Explicit newlines start a new line. A single word
    wider than max_width is emitted on its own line and left unbroken.
    Whitespace-only input yields nothing.
    """
    if not text or not text.strip():
        return

    for paragraph in text.splitlines():
        words = paragraph.split()
        if not words:
            yield ""
            continue

        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            if stringWidth(candidate, font_name, font_size) <= max_width:
                current = candidate
            else:
                yield current
                current = word
        yield current


def truncate(text: str, max_chars: int) -> str:
    """Cut text longer than max_chars to max_chars - 2 characters plus '...'."""
    if len(text) <= max_chars:
        return text
    return text[: max(max_chars - 2, 0)] + ELLIPSIS


def fit_width(text: str, font_name: str, font_size: float, max_width: float) -> str:
    """Shorten text with a trailing '...' until it fits in max_width."""
    if stringWidth(text, font_name, font_size) <= max_width:
        return text
    clipped = text
    while clipped and stringWidth(clipped + ELLIPSIS, font_name, font_size) > max_width:
        clipped = clipped[:-1]
    return clipped.rstrip() + ELLIPSIS
