"""Date and time utilities for token bookkeeping."""

import re
from datetime import datetime
from typing import Optional

import pytz

# Creation time given to tokens whose timestamp could not be parsed
ZERO_TIME = datetime(1, 1, 1, tzinfo=pytz.utc)

_RFC3339_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d{1,9}))?"
    r"(?P<tz>[Zz]|[+-]\d{2}:\d{2})$"
)


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure datetime is in UTC.

    Args:
        dt: Datetime to convert

    Returns:
        UTC datetime
    """
    if dt.tzinfo is None:
        return pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(pytz.utc)


def parse_rfc3339_nano(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an RFC3339 timestamp with up to nanosecond precision.

    Python datetimes hold microseconds, so extra fractional digits are
    truncated.

    Args:
        value: Timestamp such as ``2015-11-11T03:36:18.714Z``

    Returns:
        UTC datetime, or None if the value is not a valid timestamp
    """
    if not value:
        return None
    match = _RFC3339_RE.match(value.strip())
    if match is None:
        return None

    frac = (match.group("frac") or "")[:6].ljust(6, "0")
    tz = match.group("tz")
    if tz in ("Z", "z"):
        tz = "+00:00"
    text = f"{match.group('base').replace('t', 'T')}.{frac}{tz}"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None
