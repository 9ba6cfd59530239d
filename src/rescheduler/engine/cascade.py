"""Recompute assignment due dates from the sessions they depend on."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import date

from .calendar import shift_days
from .model import Assignment, Topic


def latest_topic_date(required_topics: Iterable[str], topics: Iterable[Topic]) -> date | None:
    """Latest session date across the required topics, ``None`` if nothing is scheduled."""
    required = set(required_topics)
    if not required:
        return None
    latest: date | None = None
    for topic in topics:
        if topic.topic_id not in required:
            continue
        last = topic.last_session_date()
        if last is not None and (latest is None or last > latest):
            latest = last
    return latest


def cascade_assignment(assignment: Assignment, topics: tuple[Topic, ...]) -> Assignment:
    latest = latest_topic_date(assignment.required_topics, topics)
    if latest is None:
        return assignment
    due = shift_days(latest, assignment.min_prep_days)
    if due == assignment.due_date:
        return assignment
    return replace(assignment, due_date=due)


def cascade_assignments(topics: tuple[Topic, ...], assignments: Iterable[Assignment]) -> tuple[Assignment, ...]:
    """Apply the prep-time cascade to every assignment against ``topics``."""
    return tuple(cascade_assignment(assignment, topics) for assignment in assignments)


def prep_time_satisfied(assignment: Assignment, topics: tuple[Topic, ...]) -> bool:
    latest = latest_topic_date(assignment.required_topics, topics)
    if latest is None:
        return True
    return assignment.due_date >= shift_days(latest, assignment.min_prep_days)
