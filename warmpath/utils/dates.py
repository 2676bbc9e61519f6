"""Lenient parsing for connection dates found in imported contact data."""

from datetime import date, datetime
from typing import Any, Optional

# ISO first; LinkedIn exports write "10 Feb 2026"
CONNECTION_DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%d %b %Y",
    "%d %B %Y",
    "%m/%d/%Y",
)


def parse_connection_date(value: Any) -> Optional[date]:
    """Parse a connection date, returning None instead of raising.

    Accepts ``date``/``datetime`` objects, ISO calendar dates (a trailing
    time component is ignored) and the formats in ``CONNECTION_DATE_FORMATS``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    # "2024-01-05T10:00:00Z" style values carry a usable calendar date prefix
    if len(text) > 10 and text[4:5] == "-" and text[10:11] in ("T", " "):
        text = text[:10]

    for fmt in CONNECTION_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None
