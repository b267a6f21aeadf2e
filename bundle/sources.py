"""
Attachment sources for claim bundles.

An attachment reference is either a path relative to the local attachment
root or an http(s) URL. Sources return raw bytes or raise
AttachmentFetchError; the assembler logs and skips failed fetches.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import requests

from utils.config import Config

logger = logging.getLogger(__name__)


class AttachmentFetchError(Exception):
    """An attachment could not be read."""

    def __init__(self, reference: str, reason: str):
        self.reference = reference
        self.reason = reason
        super().__init__(f"Could not fetch attachment {reference}: {reason}")


class AttachmentSource(ABC):
    """Reads stored attachments by reference."""

    @abstractmethod
    def fetch(self, reference: str) -> bytes:
        """Return the attachment's bytes, or raise AttachmentFetchError."""


# =============================================================================
# Local Storage
# =============================================================================


class LocalAttachmentSource(AttachmentSource):
    """
    Attachments stored on disk under a single root.

    References are relative paths such as "estimates/claim-42/estimate.pdf".
    Anything that would resolve outside the root is rejected.
    """

    def __init__(self, root: str):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, reference: str) -> Path:
        parts = [part for part in reference.replace("\\", "/").split("/") if part and part != "."]
        if not parts or ".." in parts:
            raise AttachmentFetchError(reference, "invalid attachment path")
        return self._root.joinpath(*parts)

    def fetch(self, reference: str) -> bytes:
        path = self._resolve(reference)
        try:
            return path.read_bytes()
        except OSError as e:
            raise AttachmentFetchError(reference, e.strerror or type(e).__name__) from e


# =============================================================================
# HTTP
# =============================================================================


class HttpAttachmentSource(AttachmentSource):
    """Attachments served over HTTP, e.g. signed storage URLs."""

    def __init__(self, timeout: float = 30, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch(self, reference: str) -> bytes:
        try:
            response = self._session.get(reference, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise AttachmentFetchError(reference, str(e)) from e
        return response.content


class RoutedAttachmentSource(AttachmentSource):
    """Sends URLs to the HTTP source and everything else to local storage."""

    def __init__(self, local: AttachmentSource, http: AttachmentSource):
        self.local = local
        self.http = http

    def fetch(self, reference: str) -> bytes:
        if reference.startswith(("http://", "https://")):
            return self.http.fetch(reference)
        return self.local.fetch(reference)


def default_attachment_source(config: Optional[Config] = None) -> AttachmentSource:
    config = config or Config.load()
    return RoutedAttachmentSource(
        local=LocalAttachmentSource(config.attachment_root),
        http=HttpAttachmentSource(timeout=config.attachment_timeout),
    )
