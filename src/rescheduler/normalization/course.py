"""Convert validated course/disruption documents into engine values."""

from __future__ import annotations

from typing import Any

from rescheduler.engine.calendar import parse_weekday, to_date
from rescheduler.engine.model import Assignment, Course, CourseSnapshot, Disruption, Session, Topic


def _items(root: Any, key: str) -> list[dict[str, Any]]:
    if isinstance(root, dict):
        items = root.get(key, [])
        if isinstance(items, list):
            return [item for item in items if isinstance(item, dict)]
    return []


def _meeting_day_name(raw: Any) -> str:
    if isinstance(raw, dict):
        return str(raw.get("day_of_week", ""))
    return str(raw)


def meeting_day_names(course: dict[str, Any]) -> list[str]:
    """Meeting days from ``meeting_days`` names or ``meeting_times`` objects."""
    raw = course.get("meeting_days")
    if not isinstance(raw, list):
        raw = course.get("meeting_times", [])
    if not isinstance(raw, list):
        return []
    return [_meeting_day_name(item) for item in raw]


def build_course(course: dict[str, Any]) -> Course:
    meeting_days: list[int] = []
    for name in meeting_day_names(course):
        index = parse_weekday(name)
        if index not in meeting_days:
            meeting_days.append(index)

    finals = course.get("finals_week_start")
    return Course(
        course_id=str(course.get("course_id", "")),
        title=str(course.get("title", "")),
        semester=str(course.get("semester", "") or ""),
        start_date=to_date(course["start_date"]),
        end_date=to_date(course["end_date"]),
        finals_week_start=to_date(finals) if finals else None,
        meeting_days=tuple(meeting_days),
    )


def _build_topic(raw: dict[str, Any], idx: int) -> Topic:
    sessions = sorted(
        (
            Session(
                session_number=int(session["session_number"]),
                scheduled_date=to_date(session["scheduled_date"]),
                status=str(session.get("status", "scheduled")),
                session_id=str(session["session_id"]) if session.get("session_id") is not None else None,
            )
            for session in _items(raw, "sessions")
        ),
        key=lambda s: s.session_number,
    )
    prerequisites = raw.get("prerequisites") or []
    return Topic(
        topic_id=str(raw["topic_id"]),
        title=str(raw.get("title", "")),
        position=int(raw.get("position", idx)),
        sessions=tuple(sessions),
        prerequisites=tuple(str(item) for item in prerequisites),
    )


def _build_assignment(raw: dict[str, Any]) -> Assignment:
    required = raw.get("required_topics") or []
    return Assignment(
        assignment_id=str(raw["assignment_id"]),
        title=str(raw.get("title", "")),
        type=str(raw.get("type", "homework")),
        due_date=to_date(raw["due_date"]),
        weight=float(raw.get("weight", 0) or 0),
        min_prep_days=int(raw.get("min_prep_days", 0) or 0),
        required_topics=tuple(str(item) for item in required),
    )


def build_course_snapshot(course_document: dict[str, Any]) -> CourseSnapshot:
    """Build the immutable snapshot; topics are ordered by ``position``."""
    topics = [_build_topic(raw, idx) for idx, raw in enumerate(_items(course_document, "topics"))]
    topics.sort(key=lambda topic: topic.position)
    return CourseSnapshot(
        course=build_course(course_document.get("course", {})),
        topics=tuple(topics),
        assignments=tuple(_build_assignment(raw) for raw in _items(course_document, "assignments")),
    )


def build_disruptions(disruptions_document: dict[str, Any]) -> tuple[Disruption, ...]:
    return tuple(
        Disruption(
            disruption_date=to_date(raw["disruption_date"]),
            reason=str(raw.get("reason", "") or ""),
            disruption_id=str(raw["disruption_id"]) if raw.get("disruption_id") is not None else None,
        )
        for raw in _items(disruptions_document, "disruptions")
    )
