"""Date manipulation utilities"""

from datetime import date, timedelta
from typing import Optional, Tuple


def window_bounds(start: date, end: date) -> Tuple[date, date]:
    """Turn an inclusive [start, end] range into a half-open [start, end + 1 day) pair"""
    return start, end + timedelta(days=1)


def in_window(day: Optional[date], start: date, end: date) -> bool:
    """True when day falls on or between start and end (whole end date included)"""
    if day is None:
        return False
    lower, upper = window_bounds(start, end)
    return lower <= day < upper
