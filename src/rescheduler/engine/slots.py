"""Find replacement meeting dates for sessions on disrupted days.

Every search is bounded: ``find_next_available_date`` looks at most
``scan_limit_days`` days ahead and raises :class:`NoAvailableSlot` when the
horizon holds no meeting day outside the unavailable set.
"""

from __future__ import annotations

from datetime import date

from .calendar import is_valid_class_day, shift_days
from .model import Course

DEFAULT_SCAN_LIMIT_DAYS = 366
DEFAULT_ALTERNATIVE_WINDOW_DAYS = 7


class NoAvailableSlot(Exception):
    """No valid, non-disrupted meeting day inside the search horizon."""

    def __init__(self, day: date, horizon_days: int) -> None:
        super().__init__(
            f"No available meeting day within {horizon_days} days after {day.isoformat()}"
        )
        self.day = day
        self.horizon_days = horizon_days


def _is_open(day: date, unavailable: frozenset[date], course: Course) -> bool:
    return day not in unavailable and is_valid_class_day(day, course)


def find_next_available_date(
    day: date,
    unavailable: frozenset[date],
    course: Course,
    *,
    scan_limit_days: int = DEFAULT_SCAN_LIMIT_DAYS,
) -> date:
    """Return the first open meeting day strictly after ``day``."""
    for offset in range(1, max(1, scan_limit_days) + 1):
        candidate = shift_days(day, offset)
        if _is_open(candidate, unavailable, course):
            return candidate
    raise NoAvailableSlot(day, scan_limit_days)


def find_alternative_date(
    day: date,
    unavailable: frozenset[date],
    course: Course,
    *,
    window_days: int = DEFAULT_ALTERNATIVE_WINDOW_DAYS,
    scan_limit_days: int = DEFAULT_SCAN_LIMIT_DAYS,
) -> date:
    """Prefer an open meeting day in the next week, else fall back to the next one."""
    for offset in range(1, max(0, window_days) + 1):
        candidate = shift_days(day, offset)
        if _is_open(candidate, unavailable, course):
            return candidate
    return find_next_available_date(day, unavailable, course, scan_limit_days=scan_limit_days)


def advance_meeting_days(
    day: date,
    unavailable: frozenset[date],
    course: Course,
    steps: int,
    *,
    scan_limit_days: int = DEFAULT_SCAN_LIMIT_DAYS,
) -> date:
    """Move ``day`` forward by ``steps`` further open meeting days."""
    current = day
    for _ in range(max(0, steps)):
        current = find_next_available_date(current, unavailable, course, scan_limit_days=scan_limit_days)
    return current
