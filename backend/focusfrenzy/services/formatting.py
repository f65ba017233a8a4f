"""
Display formatting shared by the upload log, the gallery page and the JSON listing.

Dates are rendered in the server's local time zone in a US-style
"MM/DD/YYYY, HH:MM:SS AM" layout; sizes in kibibytes with two decimals.
"""

from datetime import datetime, timezone
from typing import Optional

INVALID_DATE = "Invalid Date"


def format_size_kb(size: int) -> str:
    """Bytes as a kibibyte string with two decimals, e.g. 2048 -> '2.00'."""
    return f"{size / 1024:.2f}"


def format_datetime(value: datetime) -> str:
    return value.astimezone().strftime("%m/%d/%Y, %I:%M:%S %p")


def format_date(value: datetime) -> str:
    return value.astimezone().strftime("%m/%d/%Y")


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """UTC ISO 8601 with millisecond precision and a trailing 'Z'."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_client_timestamp(raw: Optional[str]) -> str:
    """
    Render the timestamp a client sent along with its upload.

    The game sends epoch milliseconds; ISO 8601 strings are accepted too.
    Anything unparseable is shown as 'Invalid Date'. The value is only ever
    logged and never affects the stored capture.
    """
    if not raw:
        return INVALID_DATE
    raw = raw.strip()
    try:
        parsed = datetime.fromtimestamp(float(raw) / 1000, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        try:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return INVALID_DATE
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
    return format_datetime(parsed)
