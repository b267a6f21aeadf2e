"""
Claim bundles: zip archives of generated reports, text summaries and stored
attachments.
"""

from .assembler import (
    BundleAssembler,
    BundleResult,
    DocumentFailure,
    DocumentSuccess,
    EmptyBundleError,
    assemble_claim_bundle,
    generate_document,
)
from .sources import (
    AttachmentFetchError,
    AttachmentSource,
    HttpAttachmentSource,
    LocalAttachmentSource,
    RoutedAttachmentSource,
    default_attachment_source,
)
from .summary import justification_summary_text, supplement_summary_text

__all__ = [
    "BundleAssembler",
    "BundleResult",
    "DocumentFailure",
    "DocumentSuccess",
    "EmptyBundleError",
    "assemble_claim_bundle",
    "generate_document",
    "AttachmentFetchError",
    "AttachmentSource",
    "HttpAttachmentSource",
    "LocalAttachmentSource",
    "RoutedAttachmentSource",
    "default_attachment_source",
    "justification_summary_text",
    "supplement_summary_text",
]
