"""Date utilities for the GDELT Event Globe.

GDELT stamps event days as YYYYMMDD and export files as YYYYMMDDHHMMSS (UTC).
Route both through these helpers before displaying or scheduling on them.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

_FILE_TIMESTAMP_RE = re.compile(r"^\d{14}$")
_EVENT_DAY_RE = re.compile(r"^\d{8}")


def parse_feed_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """Parse a 14-digit GDELT file timestamp into an aware UTC datetime.

    Args:
        raw: Timestamp string such as "20240101120000".

    Returns:
        Timezone-aware UTC datetime, or None when the string is not a valid timestamp.
    """
    if not raw or not _FILE_TIMESTAMP_RE.match(raw.strip()):
        return None
    try:
        parsed = datetime.strptime(raw.strip(), "%Y%m%d%H%M%S")
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def format_event_day(day: Optional[str], default: str = "N/A") -> str:
    """Render a GDELT SQLDATE (YYYYMMDD) as YYYY-MM-DD.

    Values that do not start with eight digits are returned as the default.
    """
    if not day or not _EVENT_DAY_RE.match(day):
        return default
    return f"{day[:4]}-{day[4:6]}-{day[6:8]}"


def isoformat_utc(value: Optional[datetime]) -> str:
    """ISO 8601 rendering with a trailing Z, e.g. 2024-01-01T12:25:00Z."""
    if value is None:
        return ""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
