"""
Claim bundle assembly.

A bundle is a zip archive of everything a contractor sends a carrier: the
generated PDFs, plain-text summaries and stored attachments (the adjuster's
estimate, any carrier response, photos).

Assembly is collect-and-continue: a document that fails to generate or an
attachment that fails to fetch is logged and skipped, and the bundle is
built from whatever succeeded. Only a bundle with nothing in it is an error.
"""

from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass
from io import BytesIO
from pathlib import PurePosixPath
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar, Union

from bundle.sources import AttachmentFetchError, AttachmentSource, default_attachment_source
from bundle.summary import claim_display_name, justification_summary_text, supplement_summary_text
from reporting.justification_report import JustificationReportComposer
from reporting.schemas import JustificationRecord, SupplementRecord, WeatherRecord
from reporting.supplement_report import SupplementReportComposer
from reporting.weather_report import WeatherReportComposer
from utils.config import Config
from utils.formatting import safe_filename

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")

# Fixed entry timestamp so identical inputs produce identical archives.
ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)


class EmptyBundleError(Exception):
    """Nothing could be added to the bundle."""

    def __init__(self, skipped: Sequence["DocumentFailure"] = ()):
        self.skipped = tuple(skipped)
        reasons = "; ".join(f"{failure.name}: {failure.reason}" for failure in self.skipped)
        super().__init__(f"Bundle is empty{': ' + reasons if reasons else ''}")


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class DocumentSuccess:
    """A bundle entry that was produced."""

    name: str
    content: bytes


@dataclass
class DocumentFailure:
    """A bundle entry that was skipped, and why."""

    name: str
    reason: str


DocumentResult = Union[DocumentSuccess, DocumentFailure]


@dataclass
class BundleResult:
    """The finished archive and an account of what went into it."""

    content: bytes
    filename: str
    included: Tuple[str, ...] = ()
    skipped: Tuple[DocumentFailure, ...] = ()

    @property
    def is_partial(self) -> bool:
        return bool(self.skipped)


def generate_document(name: str, fn: Callable[[RecordT], bytes], record: RecordT) -> DocumentResult:
    """
    Run one document generator, converting any exception into a failure.

    Args:
        name: Archive entry name for the document
        fn: Generator returning the document bytes
        record: Input record for the generator

    Returns:
        DocumentSuccess with the bytes, or DocumentFailure with the reason
    """
    try:
        content = fn(record)
    except Exception as e:
        logger.warning("Skipping %s: %s", name, e, exc_info=True)
        return DocumentFailure(name=name, reason=str(e) or type(e).__name__)
    return DocumentSuccess(name=name, content=content)


# =============================================================================
# Assembler
# =============================================================================


class BundleAssembler:
    """Collects entries, then writes them to a zip archive in insertion order."""

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED):
        self.compression = compression
        self._entries: List[DocumentSuccess] = []
        self._skipped: List[DocumentFailure] = []

    @property
    def included(self) -> Tuple[str, ...]:
        return tuple(entry.name for entry in self._entries)

    @property
    def skipped(self) -> Tuple[DocumentFailure, ...]:
        return tuple(self._skipped)

    def add(self, result: DocumentResult) -> bool:
        """Record a generated document. Returns True if it was included."""
        if isinstance(result, DocumentFailure):
            self._skipped.append(result)
            return False
        if result.name in self.included:
            logger.warning("Duplicate bundle entry %s replaced", result.name)
            self._entries = [entry for entry in self._entries if entry.name != result.name]
        self._entries.append(result)
        return True

    def add_bytes(self, name: str, content: bytes) -> bool:
        return self.add(DocumentSuccess(name=name, content=content))

    def add_text(self, name: str, text: str) -> bool:
        return self.add_bytes(name, text.encode("utf-8"))

    def add_generated(self, name: str, fn: Callable[[RecordT], bytes], record: RecordT) -> bool:
        return self.add(generate_document(name, fn, record))

    def add_attachment(self, source: AttachmentSource, reference: str, name: str) -> bool:
        """Fetch a stored attachment; a failed fetch is logged and skipped."""
        try:
            content = source.fetch(reference)
        except AttachmentFetchError as e:
            logger.warning("Skipping attachment %s: %s", name, e.reason)
            return self.add(DocumentFailure(name=name, reason=e.reason))
        return self.add_bytes(name, content)

    def build(self, filename: str) -> BundleResult:
        """
        Write the archive.

        Raises:
            EmptyBundleError: every entry failed, or none was added
        """
        if not self._entries:
            raise EmptyBundleError(self._skipped)

        buffer = BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=self.compression) as archive:
            for entry in self._entries:
                info = zipfile.ZipInfo(entry.name, date_time=ZIP_TIMESTAMP)
                info.compress_type = self.compression
                archive.writestr(info, entry.content)

        content = buffer.getvalue()
        logger.info(
            "Built bundle %s: %d entries, %d skipped, %d bytes",
            filename, len(self._entries), len(self._skipped), len(content),
        )
        return BundleResult(
            content=content,
            filename=filename,
            included=self.included,
            skipped=self.skipped,
        )


# =============================================================================
# Claim Bundle
# =============================================================================


def _extension(reference: str, default: str) -> str:
    suffix = PurePosixPath(reference.split("?", 1)[0]).suffix.lstrip(".")
    return suffix.lower() or default


def photo_entry_name(reference: str, index: int) -> str:
    """Entry name for the index-th (1-based) photo under Photos/."""
    name = PurePosixPath(reference.split("?", 1)[0]).name
    if not name or name in (".", ".."):
        name = f"Photo_{index}.{_extension(reference, 'jpg')}"
    return f"Photos/{name}"


def bundle_filename(record: SupplementRecord) -> str:
    return f"{safe_filename(claim_display_name(record), fallback='claim')}_Supplement.zip"


def assemble_claim_bundle(
    record: SupplementRecord,
    weather: Optional[WeatherRecord] = None,
    adjuster_estimate: Optional[str] = None,
    carrier_response: Optional[str] = None,
    photos: Sequence[str] = (),
    source: Optional[AttachmentSource] = None,
    config: Optional[Config] = None,
) -> BundleResult:
    """
    Build the zip a contractor sends with a supplement.

    Contents, in order: supplement PDF, justification PDF, weather PDF (when
    a weather record is given), the two text summaries, then attachments:
    Adjuster_Estimate.pdf, Carrier_Response.<ext> and Photos/.

    Raises:
        EmptyBundleError: nothing at all could be produced
    """
    config = config or Config.load()
    source = source or default_attachment_source(config)
    assembler = BundleAssembler()
    justification = JustificationRecord.from_supplement(record)

    supplement_composer = SupplementReportComposer(config)
    assembler.add_generated(
        supplement_composer.filename(record), supplement_composer.generate_to_buffer, record
    )

    justification_composer = JustificationReportComposer(config)
    assembler.add_generated(
        justification_composer.filename(justification),
        justification_composer.generate_to_buffer,
        justification,
    )

    if weather is not None:
        weather_composer = WeatherReportComposer(config)
        assembler.add_generated(weather_composer.filename(weather), weather_composer.generate_to_buffer, weather)

    brand = supplement_composer.brand
    assembler.add_generated(
        "Supplement_Summary.txt",
        lambda r: supplement_summary_text(r, brand).encode("utf-8"),
        record,
    )
    assembler.add_generated(
        "Justification_Support_Points.txt",
        lambda r: justification_summary_text(r, brand).encode("utf-8"),
        justification,
    )

    if adjuster_estimate:
        assembler.add_attachment(source, adjuster_estimate, "Adjuster_Estimate.pdf")
    if carrier_response:
        assembler.add_attachment(
            source, carrier_response, f"Carrier_Response.{_extension(carrier_response, 'pdf')}"
        )
    for index, reference in enumerate(photos, start=1):
        assembler.add_attachment(source, reference, photo_entry_name(reference, index))

    return assembler.build(bundle_filename(record))
