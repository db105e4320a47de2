"""Time utilities for upstream contest timestamps.

Every timestamp leaving this module is a timezone-aware UTC datetime, which is
what the ``TIMESTAMPTZ`` columns store and what the API serializes.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

CODECHEF_DATE_FORMATS = (
    "%d %b %Y %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
)


def from_epoch_seconds(value) -> datetime:
    """Convert a UNIX timestamp in seconds to an aware UTC datetime.

    Raises ``TypeError``/``ValueError`` for non-numeric input so callers can
    treat it as a malformed payload.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected epoch seconds, got {value!r}")
    return datetime.fromtimestamp(value, tz=timezone.utc)


def parse_upstream_datetime(value, local_tz_name: str) -> datetime | None:
    """Parse a date string from an upstream listing into aware UTC.

    * ISO8601 with an offset is converted to UTC.
    * ISO8601 without an offset, and the ``"18 Oct 2025  20:00:00"`` listing
      format, are read as ``local_tz_name`` local time.

    Returns ``None`` if the input cannot be parsed.
    """
    if not isinstance(value, str):
        return None
    text = " ".join(value.split())
    if not text:
        return None

    parsed = None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        for fmt in CODECHEF_DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=ZoneInfo(local_tz_name))
    return parsed.astimezone(timezone.utc)
