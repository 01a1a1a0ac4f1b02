from __future__ import annotations

from datetime import time
from typing import Tuple

from timeline_planner.errors import MalformedTime

MINUTES_PER_DAY = 24 * 60


def parse_time_of_day(s: str) -> time:
    """Convert an "HH:MM" (or "H:MM") wall-clock string to time."""
    try:
        h, m = map(int, s.strip().split(":"))
        return time(h, m)
    except (AttributeError, TypeError, ValueError):
        raise MalformedTime(s)


def format_time_of_day(t: time) -> str:
    return t.strftime("%H:%M")


def shift_time_of_day(t: time, minutes: int) -> Tuple[time, int]:
    """
    Move `t` by `minutes` on a 24h clock.

    Returns the new time of day and the number of whole days crossed
    (negative when the shift goes back past midnight).
    """
    total = t.hour * 60 + t.minute + minutes
    day_offset, rest = divmod(total, MINUTES_PER_DAY)
    return time(rest // 60, rest % 60), day_offset
