# ABOUTME: Date helpers for release-date reconciliation and display.
# ABOUTME: Year extraction, year-only detection, and a formatter that never raises.

import re
from datetime import datetime, timezone

from dateutil import parser as date_parser

_YEAR_RE = re.compile(r"\d{4}")
_YEAR_ONLY_RE = re.compile(r"^\d{4}$")
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
# Audiobook and edition feeds often append a midnight timestamp to a plain date.
_TIME_SUFFIX_RE = re.compile(r"T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?$")

# dateutil fills missing components from this default; day 1 keeps "June 2020"
# from borrowing today's day of month.
_PARSE_DEFAULT = datetime(2000, 1, 1)


def clean_date(value: str) -> str:
    """Strip whitespace and a trailing ISO time portion from a date string."""
    return _TIME_SUFFIX_RE.sub("", value.strip())


def is_year_only(value: str) -> bool:
    """Whether a date string is just a 4-digit year, e.g. "1965"."""
    return bool(_YEAR_ONLY_RE.match(value.strip()))


def extract_year(value: str | int | None) -> int | None:
    """Return the first 4-digit run in a date string as an int, or None."""
    if value is None:
        return None
    match = _YEAR_RE.search(str(value))
    return int(match.group(0)) if match else None


def _display(date: datetime) -> str:
    return f"{date:%b} {date.day:02d}, {date.year}"


def _iso_date(value: str) -> datetime | None:
    """Build a UTC date from YYYY-MM-DD, or None if the shape or day is invalid."""
    match = _ISO_DATE_RE.match(value)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        return None


def format_display_date(value: str | None) -> str:
    """Render a provider date string for display.

    - plain 4-digit years pass through unchanged
    - a valid YYYY-MM-DD is built as a UTC date so no timezone shifts the day
    - anything else, including impossible ISO days, goes through a general parse
    - unparseable strings fall back to their first year, then to the raw text
    """
    if not value:
        return ""

    clean = value.split("T")[0].strip()
    if _YEAR_ONLY_RE.match(clean):
        return clean

    iso = _iso_date(clean)
    if iso is not None:
        return _display(iso)

    # Without digits dateutil happily invents a date from a bare month name.
    if not any(ch.isdigit() for ch in clean):
        return value

    try:
        parsed = date_parser.parse(value, default=_PARSE_DEFAULT)
    except (ValueError, OverflowError):
        year = _YEAR_RE.search(clean)
        return year.group(0) if year else value
    return _display(parsed)
