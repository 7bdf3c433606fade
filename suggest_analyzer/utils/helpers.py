"""General-purpose helper utilities for the suggest analyzer."""

import re
from typing import Optional


def format_volume(n: int) -> str:
    """Format a result count with thousands separators.

    Args:
        n: Non-negative integer count.

    Returns:
        Grouped string (e.g. 1234567 -> '1,234,567').

    Examples:
        >>> format_volume(1500)
        '1,500'
        >>> format_volume(999)
        '999'
    """
    return f"{n:,}"


def parse_volume(text: str) -> Optional[int]:
    """Parse a count written by :func:`format_volume` back into an int.

    Returns None when the text holds no digits.

    Examples:
        >>> parse_volume("1,234,567")
        1234567
        >>> parse_volume("n/a") is None
        True
    """
    digits = re.sub(r"[^\d]", "", text)
    if not digits:
        return None
    return int(digits)


def truncate_text(text: str, max_length: int = 500, suffix: str = "...") -> str:
    """Truncate text to a maximum length for log output.

    Args:
        text: Input text.
        max_length: Maximum allowed length including suffix.
        suffix: String appended when truncation occurs.

    Returns:
        Truncated text with suffix if it was shortened.
    """
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix
