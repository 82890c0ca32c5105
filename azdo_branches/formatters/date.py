"""Date and time formatting utilities."""

import time
from typing import Optional

_UNITS = (
    (365 * 24 * 3600, "year", "a year"),
    (30 * 24 * 3600, "month", "a month"),
    (7 * 24 * 3600, "week", "a week"),
    (24 * 3600, "day", "a day"),
    (3600, "hour", "an hour"),
    (60, "minute", "a minute"),
)


def format_relative_time(timestamp: int, now: Optional[float] = None) -> str:
    """
    Format a unix timestamp relative to now.

    Args:
        timestamp: Seconds since the epoch
        now: Reference time, defaults to the current time

    Returns:
        Human readable string such as "3 days ago" or "in an hour"
    """
    if now is None:
        now = time.time()

    delta = int(now - timestamp)
    seconds = abs(delta)
    if seconds < 60:
        return "now"

    for size, unit, single in _UNITS:
        if seconds >= size:
            count = seconds // size
            amount = single if count == 1 else f"{count} {unit}s"
            return f"{amount} ago" if delta > 0 else f"in {amount}"
    return "now"
