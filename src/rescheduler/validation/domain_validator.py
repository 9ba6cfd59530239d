"""Cross-entity rules for course and disruption documents."""

from __future__ import annotations

from datetime import date
from typing import Any

from rescheduler.engine.calendar import parse_weekday

from .errors import ValidationReport


def validate_domain_inputs(loaded_payload: dict[str, Any]) -> ValidationReport:
    """Validate coherence rules the structural schema cannot express."""
    report = ValidationReport()

    course_doc = loaded_payload.get("course", {})
    if not isinstance(course_doc, dict):
        return report

    course = course_doc.get("course", {})
    if isinstance(course, dict):
        _validate_course_window(course, report)
        _validate_meeting_days(course, report)

    topics = [item for item in course_doc.get("topics", []) or [] if isinstance(item, dict)]
    topic_ids = _validate_topics(topics, report)
    _validate_prerequisite_graph(topics, topic_ids, report)
    _validate_assignments(course_doc.get("assignments", []) or [], topic_ids, report)

    disruptions_doc = loaded_payload.get("disruptions", {})
    if isinstance(disruptions_doc, dict) and isinstance(course, dict):
        _validate_disruptions(disruptions_doc.get("disruptions", []) or [], course, report)

    return report


def _validate_course_window(course: dict[str, Any], report: ValidationReport) -> None:
    start = _parse_date(course.get("start_date"))
    end = _parse_date(course.get("end_date"))
    if start and end and start > end:
        report.add_error(
            code="INVALID_DATE_WINDOW",
            message="start_date must be <= end_date",
            field_path="$.course.course",
            suggested_fix="Swap the dates or adjust the semester window.",
        )

    finals = _parse_date(course.get("finals_week_start"))
    if finals and start and end and not start <= finals <= end:
        report.add_info(
            code="INFO_FINALS_OUTSIDE_SEMESTER",
            message="finals_week_start falls outside the semester; the exam end-of-term exemption never applies",
            field_path="$.course.course.finals_week_start",
        )


def _validate_meeting_days(course: dict[str, Any], report: ValidationReport) -> None:
    raw = course.get("meeting_days")
    key = "meeting_days"
    if not isinstance(raw, list):
        raw = course.get("meeting_times")
        key = "meeting_times"
    if not isinstance(raw, list) or not raw:
        report.add_error(
            code="EMPTY_MEETING_DAYS",
            message="Course must meet on at least one weekday",
            field_path="$.course.course.meeting_days",
        )
        return

    for idx, item in enumerate(raw):
        name = item.get("day_of_week") if isinstance(item, dict) else item
        try:
            parse_weekday(str(name))
        except ValueError:
            report.add_error(
                code="INVALID_WEEKDAY",
                message=f"Unknown weekday: {name!r}",
                field_path=f"$.course.course.{key}[{idx}]",
                suggested_fix="Use Monday..Sunday or mon..sun.",
            )


def _validate_topics(topics: list[dict[str, Any]], report: ValidationReport) -> set[str]:
    topic_ids: set[str] = set()
    for idx, topic in enumerate(topics):
        topic_id = topic.get("topic_id")
        if isinstance(topic_id, str):
            if topic_id in topic_ids:
                report.add_error(
                    code="DUPLICATE_TOPIC_ID",
                    message=f"Duplicate topic_id: {topic_id}",
                    field_path=f"$.course.topics[{idx}].topic_id",
                )
            topic_ids.add(topic_id)

        numbers: set[int] = set()
        for s_idx, session in enumerate(topic.get("sessions", []) or []):
            if not isinstance(session, dict):
                continue
            number = session.get("session_number")
            if isinstance(number, int) and number in numbers:
                report.add_error(
                    code="DUPLICATE_SESSION_NUMBER",
                    message=f"Duplicate session_number {number} in topic {topic_id}",
                    field_path=f"$.course.topics[{idx}].sessions[{s_idx}].session_number",
                )
            if isinstance(number, int):
                numbers.add(number)
    return topic_ids


def _validate_prerequisite_graph(topics: list[dict[str, Any]], topic_ids: set[str], report: ValidationReport) -> None:
    edges: dict[str, list[str]] = {}
    for idx, topic in enumerate(topics):
        topic_id = topic.get("topic_id")
        if not isinstance(topic_id, str):
            continue
        prereqs = [p for p in topic.get("prerequisites") or [] if isinstance(p, str)]
        for p_idx, prereq in enumerate(prereqs):
            if prereq not in topic_ids:
                report.add_error(
                    code="UNKNOWN_TOPIC_REFERENCE",
                    message=f"Unknown prerequisite topic: {prereq}",
                    field_path=f"$.course.topics[{idx}].prerequisites[{p_idx}]",
                )
        edges.setdefault(topic_id, []).extend(p for p in prereqs if p in topic_ids)

    cycle = _find_cycle(edges)
    if cycle:
        report.add_error(
            code="PREREQUISITE_CYCLE",
            message=f"Prerequisites form a cycle: {' -> '.join(cycle)}",
            field_path="$.course.topics",
            suggested_fix="Remove one prerequisite link so topics form a DAG.",
        )


def _find_cycle(edges: dict[str, list[str]]) -> list[str]:
    """Return one cycle as a node path, or an empty list for a DAG."""
    visiting: list[str] = []
    state: dict[str, int] = {}

    def visit(node: str) -> list[str]:
        state[node] = 1
        visiting.append(node)
        for nxt in sorted(edges.get(node, [])):
            if state.get(nxt) == 1:
                return visiting[visiting.index(nxt):] + [nxt]
            if state.get(nxt) is None:
                found = visit(nxt)
                if found:
                    return found
        visiting.pop()
        state[node] = 2
        return []

    for node in sorted(edges):
        if state.get(node) is None:
            found = visit(node)
            if found:
                return found
    return []


def _validate_assignments(assignments: list[Any], topic_ids: set[str], report: ValidationReport) -> None:
    seen: set[str] = set()
    for idx, assignment in enumerate(assignments):
        if not isinstance(assignment, dict):
            continue
        assignment_id = assignment.get("assignment_id")
        if isinstance(assignment_id, str):
            if assignment_id in seen:
                report.add_error(
                    code="DUPLICATE_ASSIGNMENT_ID",
                    message=f"Duplicate assignment_id: {assignment_id}",
                    field_path=f"$.course.assignments[{idx}].assignment_id",
                )
            seen.add(assignment_id)

        for r_idx, topic_id in enumerate(assignment.get("required_topics") or []):
            if isinstance(topic_id, str) and topic_id not in topic_ids:
                report.add_error(
                    code="UNKNOWN_TOPIC_REFERENCE",
                    message=f"Unknown required topic: {topic_id}",
                    field_path=f"$.course.assignments[{idx}].required_topics[{r_idx}]",
                )


def _validate_disruptions(disruptions: list[Any], course: dict[str, Any], report: ValidationReport) -> None:
    start = _parse_date(course.get("start_date"))
    end = _parse_date(course.get("end_date"))
    for idx, disruption in enumerate(disruptions):
        if not isinstance(disruption, dict):
            continue
        day = _parse_date(disruption.get("disruption_date"))
        if day and start and end and not start <= day <= end:
            report.add_info(
                code="INFO_DISRUPTION_OUTSIDE_SEMESTER",
                message="Disruption date is outside the semester and affects no session",
                field_path=f"$.disruptions.disruptions[{idx}].disruption_date",
            )


def _parse_date(raw: Any) -> date | None:
    if not isinstance(raw, str):
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None
