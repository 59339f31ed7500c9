"""Display helpers for finding messages."""

from typing import Optional


def truncate_address(address: Optional[str]) -> str:
    """Shorten an address to first6...last4 for display."""
    if not address:
        return "unknown"
    if len(address) <= 12:
        return address
    return f"{address[:6]}...{address[-4:]}"


def format_large_number(value: int) -> str:
    """Thousands separators, or a digit-count summary past 15 digits."""
    digits = str(value)
    if len(digits) > 15:
        return f"{digits[:3]}...{digits[-3:]} ({len(digits)} digits)"
    return f"{value:,}"
