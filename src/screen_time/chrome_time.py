"""Conversion between Chrome history timestamps and datetimes.

Chrome stores visit times as microseconds since 1601-01-01 UTC (the Windows
FILETIME epoch). Conversions use integer microseconds so that values survive a
round trip exactly.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

# Seconds between 1601-01-01 and 1970-01-01.
CHROME_EPOCH_OFFSET = 11_644_473_600

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
CHROME_EPOCH = UNIX_EPOCH - timedelta(seconds=CHROME_EPOCH_OFFSET)

_ONE_MICROSECOND = timedelta(microseconds=1)


def to_chrome_time(instant: datetime) -> int:
    """Return the Chrome timestamp for ``instant``.

    Naive datetimes are interpreted as local time, like ``datetime.timestamp``.
    """
    if instant.tzinfo is None:
        instant = instant.astimezone()
    return (instant - CHROME_EPOCH) // _ONE_MICROSECOND


def from_chrome_time(raw_value: int) -> datetime:
    """Return the aware UTC datetime for a Chrome timestamp."""
    return CHROME_EPOCH + timedelta(microseconds=int(raw_value))
