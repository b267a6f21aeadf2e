"""
Report composer base.

A composer turns one record into one PDF. Each run owns a fresh buffer,
surface and cursor; nothing is shared between documents. Rendering is a
straight pass over the report's sections followed by the footer pass.

Missing optional values never stop a composition (renderers fall back to a
dash or leave the row out). Anything that does raise while composing is
wrapped in ReportGenerationError.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Any, Generic, Optional, Tuple, TypeVar

from reporting.footer import FooterStamper
from reporting.layout import LayoutCursor, PageSurface, RenderedPage
from reporting.styles import BRANDED_THEME, Theme
from utils.config import Config
from utils.formatting import safe_filename

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"

RecordT = TypeVar("RecordT")


class ReportGenerationError(Exception):
    """A document could not be produced."""

    def __init__(self, report_type: str, reason: str):
        self.report_type = report_type
        self.reason = reason
        super().__init__(f"Failed to generate {report_type} report: {reason}")


# =============================================================================
# Result Types
# =============================================================================


@dataclass(frozen=True)
class ComposedReport:
    """A finished document and the text drawn on each of its pages."""

    report_type: str
    content: bytes
    pages: Tuple[RenderedPage, ...]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def size(self) -> int:
        return len(self.content)

    def text(self) -> str:
        return "\n".join(page.text for page in self.pages)

    def contains(self, fragment: str) -> bool:
        return any(page.contains(fragment) for page in self.pages)


@dataclass
class ReportSuccess:
    """Returned by generate() once the PDF is written to disk."""

    path: Path
    page_count: int


# =============================================================================
# Composer
# =============================================================================


class ReportComposer(ABC, Generic[RecordT]):
    """
    Base class for the four report types.

    Subclasses implement render() (content pass) and may override
    footer() and filename().
    """

    report_type: str = "report"
    document_title: str = "Report"
    default_theme: Theme = BRANDED_THEME

    def __init__(self, config: Optional[Config] = None, theme: Optional[Theme] = None):
        self.config = config or Config.load()
        self.theme = theme or self._configured_theme()

    def _configured_theme(self) -> Theme:
        if self.default_theme is BRANDED_THEME and self.config.brand_name:
            return BRANDED_THEME.with_mark(self.config.brand_name)
        return self.default_theme

    @property
    def brand(self) -> str:
        return self.theme.mark

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def compose(self, record: RecordT) -> ComposedReport:
        """
        Render the record to PDF bytes.

        Raises:
            ReportGenerationError: any failure while drawing the document
        """
        buffer = BytesIO()
        try:
            surface = PageSurface(
                buffer,
                theme=self.theme,
                title=self.title_for(record),
                author=self.brand,
                compress=self.config.pdf_compression,
            )
            cursor = surface.cursor()
            self.render(record, surface, cursor)
            pages = surface.finish(self.footer(record))
        except ReportGenerationError:
            raise
        except Exception as e:
            logger.exception("Error generating %s report", self.report_type)
            raise ReportGenerationError(self.report_type, str(e) or type(e).__name__) from e

        content = buffer.getvalue()
        if not content.startswith(PDF_MAGIC):
            raise ReportGenerationError(self.report_type, "drawing surface produced no PDF output")

        logger.info(
            "Generated %s report: %d page(s), %d bytes",
            self.report_type, len(pages), len(content),
        )
        return ComposedReport(report_type=self.report_type, content=content, pages=pages)

    def generate_to_buffer(self, record: RecordT) -> bytes:
        """Generate PDF and return as bytes."""
        return self.compose(record).content

    def generate(self, record: RecordT, output_dir: Optional[Path] = None) -> ReportSuccess:
        """Generate PDF and write it to output_dir (default: the configured reports dir)."""
        report = self.compose(record)
        directory = Path(output_dir) if output_dir is not None else Path(self.config.reports_dir)
        directory.mkdir(parents=True, exist_ok=True)

        output_path = directory / self.filename(record)
        output_path.write_bytes(report.content)
        logger.info("Wrote %s", output_path)
        return ReportSuccess(path=output_path, page_count=report.page_count)

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    @abstractmethod
    def render(self, record: RecordT, surface: PageSurface, cursor: LayoutCursor) -> Any:
        """Content pass: draw every section, advancing the cursor."""

    def footer(self, record: RecordT) -> FooterStamper:
        return FooterStamper(mark=self.brand, generated_date=getattr(record, "generated_date", ""))

    def title_for(self, record: RecordT) -> str:
        return self.document_title

    def filename(self, record: RecordT) -> str:
        return f"{safe_filename(self.document_title, fallback=self.report_type)}.pdf"
