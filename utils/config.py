"""
Configuration management.
"""

import os
from dataclasses import dataclass, field


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # Rendering
    brand_name: str = field(default_factory=lambda: os.getenv("BRAND_NAME", "4MARGIN"))
    pdf_compression: bool = field(
        default_factory=lambda: os.getenv("PDF_COMPRESSION", "true").lower() == "true"
    )
    reports_dir: str = field(default_factory=lambda: os.getenv("REPORTS_DIR", "reports"))

    # Attachments
    attachment_root: str = field(
        default_factory=lambda: os.getenv("ATTACHMENT_ROOT", "data/attachments")
    )
    attachment_timeout: int = field(
        default_factory=lambda: int(os.getenv("ATTACHMENT_TIMEOUT", "30"))
    )

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "log_level": self.log_level,
            "brand_name": self.brand_name,
            "pdf_compression": self.pdf_compression,
            "reports_dir": self.reports_dir,
            "attachment_root": self.attachment_root,
            "attachment_timeout": self.attachment_timeout,
        }
