"""
Formatting utilities.
"""

import re
from typing import Optional

PLACEHOLDER = "—"


def format_currency(amount: float, currency: str = "USD") -> str:
    """
    Format an amount as currency with two decimal places.

    Args:
        amount: The amount in whole units (dollars, not cents).
        currency: Currency code (default USD).

    Returns:
        Formatted currency string, e.g. "$1,234.50".
    """
    symbols = {
        "USD": "$",
        "GBP": "£",
        "EUR": "€",
    }
    symbol = symbols.get(currency, currency + " ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_percent(value: float, decimals: int = 1) -> str:
    """
    Format a number as a percentage.

    Args:
        value: The percentage value.
        decimals: Number of decimal places.

    Returns:
        Formatted percentage string.
    """
    return f"{value:.{decimals}f}%"


def format_number(value: float) -> str:
    """Format a quantity without a trailing ".0" for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def format_time_12h(value: str) -> str:
    """
    Convert a 24-hour "HH:MM[:SS]" string to "H:MM AM/PM".

    Unparseable input is returned unchanged.
    """
    parts = value.split(":")
    if len(parts) < 2 or not parts[0].isdigit():
        return value or PLACEHOLDER
    hour = int(parts[0])
    suffix = "PM" if hour >= 12 else "AM"
    hour_12 = 12 if hour % 12 == 0 else hour % 12
    return f"{hour_12}:{parts[1]} {suffix}"


def display(value: Optional[object]) -> str:
    """Render a scalar for display, substituting a dash for empty values."""
    if value is None:
        return PLACEHOLDER
    text = str(value).strip()
    return text or PLACEHOLDER


def safe_filename(name: str, max_length: int = 60, fallback: str = "report") -> str:
    """Strip characters that are unsafe in attachment filenames."""
    safe = re.sub(r"[^a-zA-Z0-9 _-]", "", name).strip()[:max_length].strip()
    safe = safe.replace(" ", "_")
    return safe or fallback
