"""
Utility modules for the claim report engine.
"""

from .formatting import (
    PLACEHOLDER,
    display,
    format_currency,
    format_number,
    format_percent,
    format_time_12h,
    safe_filename,
)
from .config import Config

__all__ = [
    "PLACEHOLDER",
    "display",
    "format_currency",
    "format_number",
    "format_percent",
    "format_time_12h",
    "safe_filename",
    "Config",
]
