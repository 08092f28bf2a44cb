from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from ..core.constants import DISPLAY_DATE_FORMAT, ISO_DATE_FORMAT
from ..core.exceptions import ValidationError


def convert_date_to_iso(value: Optional[str]) -> str:
    """DD/MM/YYYY -> YYYY-MM-DD. Strings without '/' are returned as-is."""

    if not value:
        return ""
    if "/" in value:
        parts = value.split("/")
        if len(parts) == 3:
            day, month, year = parts
            return f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    return value


def convert_date_to_display(value: Optional[str]) -> str:
    """YYYY-MM-DD -> DD/MM/YYYY. Anything else is returned unchanged."""

    if not value:
        return ""
    parts = value.split("-")
    if len(parts) == 3:
        year, month, day = parts
        return f"{day}/{month}/{year}"
    return value


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, ISO_DATE_FORMAT).date()


def normalize_date(value) -> str:
    """Canonical YYYY-MM-DD for a date object or a display/ISO string.

    Raises ValidationError when the result is not a real calendar date.
    """

    if isinstance(value, datetime):
        return value.date().strftime(ISO_DATE_FORMAT)
    if isinstance(value, date):
        return value.strftime(ISO_DATE_FORMAT)

    iso = convert_date_to_iso(str(value or "").strip())
    if not iso:
        raise ValidationError("Date is required")
    try:
        parsed = parse_iso_date(iso)
    except ValueError:
        raise ValidationError(f"Invalid date: {value}")
    # strptime accepts "2024-3-5"; the stored form is always zero padded.
    return parsed.strftime(ISO_DATE_FORMAT)


def format_display_date(value: date) -> str:
    return value.strftime(DISPLAY_DATE_FORMAT)


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)
