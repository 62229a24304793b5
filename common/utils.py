from __future__ import annotations

from datetime import datetime, timezone
import numpy as np


def decimal_str(x: float) -> str:
    """
    Shortest round-tripping decimal form of `x`, never in exponent notation
    and without a trailing ".0" (37.7749 -> "37.7749", 42.0 -> "42").
    """
    return np.format_float_positional(float(x), unique=True, trim="-")


def utc_date(ts: datetime) -> str:
    """Calendar date of `ts` in UTC as YYYY-MM-DD. Naive datetimes are taken as UTC."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).date().isoformat()


def from_epoch_utc(seconds: float) -> datetime:
    """POSIX timestamp (e.g. st_mtime) to an aware UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)
