"""
Core Utilities.

Shared utility functions used across the package.
"""

import re
from datetime import datetime, timezone

_HEX_COLOR = re.compile(r"^#?([0-9A-Fa-f]{6})$")


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and
    assumed to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_hex(value: str) -> str:
    """
    Normalize a color value to ``#RRGGBB``.

    Accepts six hex digits with or without a leading ``#``. Alpha
    channels and short forms are rejected.

    Raises:
        ValueError: If the value is not a six digit hex color
    """
    match = _HEX_COLOR.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid hex color: {value!r}")
    return f"#{match.group(1).upper()}"
