"""
Event duration and overage hours.

Wall-clock arithmetic only: no dates, no DST. An end time earlier than the
start time means the party runs past midnight (one wrap, never more than 24h).
Every package bundles a flat 4-hour block; any started hour beyond that is
billed as a full hour.
"""

import logging
import math
import re
from datetime import time
from typing import Optional

from .coerce import parse_number

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

# "20:00", "8", "8:30 PM", "8pm", "08:00 p.m.", "20:00:00"
_TIME_RE = re.compile(
    r"^(\d{1,2})(?::(\d{1,2}))?(?::\d{1,2})?\s*(?:([ap])\.?\s*m\.?)?$",
    re.IGNORECASE,
)


def _normalize_meridiem(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip().lower().replace(".", "")
    if text in ("am", "a"):
        return "am"
    if text in ("pm", "p"):
        return "pm"
    return None


def _to_minutes(hour: int, minute: int, meridiem: Optional[str]) -> Optional[int]:
    if not 0 <= minute <= 59:
        return None
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12
        if meridiem == "pm":
            hour += 12
    elif not 0 <= hour <= 23:
        return None
    return hour * 60 + minute


def parse_time_of_day(value, meridiem=None) -> Optional[int]:
    """
    Minutes since midnight for a wall-clock time, or None if unreadable.

    Accepts 24-hour "HH:MM", 12-hour "H[:MM] AM/PM" (qualifier embedded or
    passed separately), (hour, minute[, meridiem]) tuples and datetime.time.
    Minutes are read as an integer numerator over 60.
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    if isinstance(value, (tuple, list)):
        if not value:
            return None
        hour = parse_number(value[0], default=None)
        minute = parse_number(value[1], default=0.0) if len(value) > 1 else 0.0
        if len(value) > 2 and meridiem is None:
            meridiem = value[2]
        if hour is None or hour != int(hour) or minute != int(minute):
            return None
        return _to_minutes(int(hour), int(minute), _normalize_meridiem(meridiem))

    match = _TIME_RE.match(str(value).strip())
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    embedded = match.group(3)
    qualifier = _normalize_meridiem(embedded) if embedded else _normalize_meridiem(meridiem)
    return _to_minutes(hour, minute, qualifier)


def compute_duration(start, end, start_meridiem=None, end_meridiem=None) -> float:
    """
    Event length in hours. Returns 0.0 when either time is missing or
    unparseable; callers treat 0 as "not computable yet".
    """
    start_min = parse_time_of_day(start, start_meridiem)
    end_min = parse_time_of_day(end, end_meridiem)
    if start_min is None or end_min is None:
        logger.debug("Duration not computable: start=%r end=%r", start, end)
        return 0.0
    if end_min < start_min:
        end_min += MINUTES_PER_DAY
    return (end_min - start_min) / 60.0


def compute_overage_hours(hours, base_hours=4) -> int:
    """max(0, ceil(hours - base_hours)). A started hour is a billed hour."""
    duration = max(0.0, parse_number(hours, default=0.0))
    base = max(0.0, parse_number(base_hours, default=4.0))
    # Round away float noise so 4.0000000001 doesn't bill an extra hour
    overage = round(duration - base, 6)
    return max(0, math.ceil(overage))


def format_time(minutes_since_midnight: int) -> str:
    """Zero-padded 'HH:MM' for display."""
    minutes = int(minutes_since_midnight) % MINUTES_PER_DAY
    return "%02d:%02d" % (minutes // 60, minutes % 60)


def format_duration(hours) -> str:
    """'6 h' or '4 h 30 m', as shown on the event sheet."""
    total_minutes = int(round(max(0.0, parse_number(hours, default=0.0)) * 60))
    h, m = divmod(total_minutes, 60)
    if m:
        return "%d h %d m" % (h, m)
    return "%d h" % h
