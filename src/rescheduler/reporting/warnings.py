"""Warnings attached to generated rescheduling options."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from rescheduler.engine.cascade import latest_topic_date, prep_time_satisfied
from rescheduler.engine.model import CourseSnapshot, Disruption, ScoredStrategy, Topic


def _session_count(topics: Iterable[Topic]) -> int:
    return sum(len(topic.sessions) for topic in topics)


def build_option_warnings(
    options: Iterable[ScoredStrategy],
    snapshot: CourseSnapshot,
    disruptions: Iterable[Disruption],
) -> list[dict[str, Any]]:
    """Per-option warnings: unplaced/removed sessions, overrun, prep time."""
    warnings: list[dict[str, Any]] = []
    course = snapshot.course
    original_sessions = _session_count(snapshot.topics)
    unavailable = {d.disruption_date for d in disruptions}

    touched = any(
        session.scheduled_date in unavailable for topic in snapshot.topics for session in topic.sessions
    )
    if unavailable and not touched:
        warnings.append(
            {
                "code": "NO_SESSIONS_AFFECTED",
                "severity": "info",
                "option": None,
                "message": "No scheduled session falls on a disrupted date.",
            }
        )

    for option in options:
        strategy = option.strategy
        for failure in strategy.failures:
            warnings.append(
                {
                    "code": "SESSION_NOT_PLACED",
                    "severity": "critical",
                    "option": strategy.name,
                    "topic_id": failure.topic_id,
                    "session_number": failure.session_number,
                    "message": failure.message,
                }
            )

        removed = original_sessions - _session_count(strategy.topics)
        if removed > 0:
            warnings.append(
                {
                    "code": "SESSIONS_REMOVED",
                    "severity": "warning",
                    "option": strategy.name,
                    "count": removed,
                    "message": f"{removed} session(s) removed from the calendar.",
                }
            )

        last_session = max(
            (session.scheduled_date for topic in strategy.topics for session in topic.sessions),
            default=None,
        )
        if last_session is not None and last_session > course.end_date:
            overrun = (last_session - course.end_date).days
            warnings.append(
                {
                    "code": "SEMESTER_EXTENDED",
                    "severity": "warning",
                    "option": strategy.name,
                    "overrun_days": overrun,
                    "message": f"Last session on {last_session.isoformat()}, {overrun} day(s) after the semester end.",
                }
            )

        for assignment in strategy.assignments:
            if prep_time_satisfied(assignment, strategy.topics):
                continue
            latest = latest_topic_date(assignment.required_topics, strategy.topics)
            warnings.append(
                {
                    "code": "PREP_TIME_VIOLATION",
                    "severity": "warning",
                    "option": strategy.name,
                    "assignment_id": assignment.assignment_id,
                    "message": (
                        f"{assignment.title or assignment.assignment_id} is due {assignment.due_date.isoformat()}, "
                        f"less than {assignment.min_prep_days} day(s) after {latest.isoformat() if latest else 'its topics'}."
                    ),
                }
            )

    return warnings
