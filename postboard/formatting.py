"""
Display formatting for timestamps.

Every createtime on the site is shown the same way regardless of the viewer:
US English, abbreviated month, 12-hour clock with a zero-padded hour, in the
configured display zone. Example: "Jan 5, 2024, 03:07 PM".
"""

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from postboard.config import settings

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_timestamp(value: Optional[datetime], tz_name: Optional[str] = None) -> str:
    """
    Render `value` as "<Mon> <d>, <yyyy>, <hh>:<mm> <AM|PM>".

    Naive datetimes are taken as UTC (SQLite drops the offset on read).
    Month names come from a fixed table so the output never depends on the
    process locale. Returns "" for None.
    """
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    local = value.astimezone(ZoneInfo(tz_name or settings.display_timezone))

    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return (
        f"{_MONTHS[local.month - 1]} {local.day}, {local.year}, "
        f"{hour:02d}:{local.minute:02d} {meridiem}"
    )
