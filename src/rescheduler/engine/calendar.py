"""Weekday and date helpers for course calendars."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from .model import Course

_WEEKDAY_NAMES = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


def to_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_weekday(name: str) -> int:
    """Map ``Monday``/``mon``/``MON`` to a weekday index (Monday = 0)."""
    key = name.strip().lower()[:3]
    if key not in _WEEKDAY_NAMES:
        raise ValueError(f"Unknown weekday: {name!r}")
    return _WEEKDAY_NAMES.index(key)


def is_valid_class_day(day: date, course: Course) -> bool:
    return day.weekday() in course.meeting_days


def week_number(day: date) -> int:
    """ISO-8601 week number (weeks start Monday, week 1 holds the first Thursday)."""
    return day.isocalendar()[1]


def week_key(day: date) -> tuple[int, int]:
    iso = day.isocalendar()
    return (iso[0], iso[1])


def shift_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def within(day: date, start: date, end: date) -> bool:
    return start <= day <= end
