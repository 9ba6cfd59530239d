"""Composite scoring of candidate calendars."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from statistics import pvariance
from typing import Any

from .calendar import shift_days, week_key, within
from .cascade import latest_topic_date
from .model import CourseSnapshot, ScoreBreakdown, Strategy

DEFAULT_SCORE_WEIGHTS: dict[str, float] = {
    "w_workload": 0.3,
    "w_dependency": 5.0,
    "w_spacing": 0.2,
    "w_change": 1.5,
    "w_policy": 10.0,
}

DEFAULT_POLICY_CONFIG: dict[str, int] = {
    "policy_window_days": 7,
    "finals_week_days": 7,
    "spacing_wide_gap_days": 7,
    "spacing_narrow_gap_days": 3,
}


def _cfg(config: dict[str, Any] | None) -> dict[str, Any]:
    return {**DEFAULT_SCORE_WEIGHTS, **DEFAULT_POLICY_CONFIG, **(config or {})}


def compute_score(features: dict[str, float], weights: dict[str, float] | None = None) -> float:
    """Combine metric values into a score clamped to [0, 100]."""

    w = DEFAULT_SCORE_WEIGHTS if weights is None else weights
    raw = (
        100.0
        - float(w.get("w_workload", 0.0)) * float(features.get("workload_variance", 0.0))
        - float(w.get("w_dependency", 0.0)) * float(features.get("dependency_violations", 0.0))
        + float(w.get("w_spacing", 0.0)) * float(features.get("spacing_score", 0.0))
        - float(w.get("w_change", 0.0)) * float(features.get("change_count", 0.0))
        - float(w.get("w_policy", 0.0)) * float(features.get("policy_violations", 0.0))
    )
    return max(0.0, min(100.0, raw))


def workload_variance(strategy: Strategy) -> float:
    """Population variance of summed assignment weight per ISO week."""
    weekly: dict[tuple[int, int], float] = defaultdict(float)
    for assignment in strategy.assignments:
        weekly[week_key(assignment.due_date)] += float(assignment.weight)
    if not weekly:
        return 0.0
    return float(pvariance(list(weekly.values())))


def dependency_violations(strategy: Strategy) -> int:
    violations = 0
    for assignment in strategy.assignments:
        latest = latest_topic_date(assignment.required_topics, strategy.topics)
        if latest is not None and assignment.due_date <= latest:
            violations += 1

    by_id = {topic.topic_id: topic for topic in strategy.topics}
    for topic in strategy.topics:
        start = topic.first_session_date()
        if start is None:
            continue
        for prereq_id in topic.prerequisites:
            prereq = by_id.get(prereq_id)
            if prereq is None:
                continue
            prereq_end = prereq.last_session_date()
            if prereq_end is not None and start <= prereq_end:
                violations += 1
    return violations


def assignment_spacing(strategy: Strategy, config: dict[str, Any] | None = None) -> int:
    cfg = _cfg(config)
    wide = int(cfg["spacing_wide_gap_days"])
    narrow = int(cfg["spacing_narrow_gap_days"])
    ordered = sorted(strategy.assignments, key=lambda a: a.due_date)
    spacing = 0
    for prev, curr in zip(ordered, ordered[1:]):
        gap = (curr.due_date - prev.due_date).days
        if gap >= wide:
            spacing += 2
        elif gap >= narrow:
            spacing += 1
    return spacing


def count_changes(strategy: Strategy, original: CourseSnapshot) -> int:
    """Sessions and assignments whose date differs from the original course."""
    original_sessions = {
        (topic.topic_id, session.session_number): session.scheduled_date
        for topic in original.topics
        for session in topic.sessions
    }
    original_dues = {a.assignment_id: a.due_date for a in original.assignments}

    changes = 0
    for topic in strategy.topics:
        for session in topic.sessions:
            before = original_sessions.get((topic.topic_id, session.session_number))
            if before is not None and before != session.scheduled_date:
                changes += 1
    for assignment in strategy.assignments:
        before = original_dues.get(assignment.assignment_id)
        if before is not None and before != assignment.due_date:
            changes += 1
    return changes


def is_finals_week(day: date, finals_week_start: date | None, finals_week_days: int = 7) -> bool:
    if finals_week_start is None:
        return False
    return within(day, finals_week_start, shift_days(finals_week_start, finals_week_days))


def policy_violations(strategy: Strategy, original: CourseSnapshot, config: dict[str, Any] | None = None) -> int:
    cfg = _cfg(config)
    course = original.course
    window = int(cfg["policy_window_days"])
    first_week_end = shift_days(course.start_date, window)
    last_week_start = shift_days(course.end_date, -window)

    violations = 0
    for assignment in strategy.assignments:
        due = assignment.due_date
        if assignment.type == "exam":
            if within(due, course.start_date, first_week_end):
                violations += 1
            if within(due, last_week_start, course.end_date) and not is_finals_week(
                due, course.finals_week_start, int(cfg["finals_week_days"])
            ):
                violations += 1
        if not within(due, course.start_date, course.end_date):
            violations += 1

    for topic in strategy.topics:
        for session in topic.sessions:
            if not within(session.scheduled_date, course.start_date, course.end_date):
                violations += 1
    return violations


def score_strategy(strategy: Strategy, original: CourseSnapshot, config: dict[str, Any] | None = None) -> ScoreBreakdown:
    """Compute all five metrics and the clamped composite score."""
    cfg = _cfg(config)
    features = {
        "workload_variance": workload_variance(strategy),
        "dependency_violations": dependency_violations(strategy),
        "spacing_score": assignment_spacing(strategy, cfg),
        "change_count": count_changes(strategy, original),
        "policy_violations": policy_violations(strategy, original, cfg),
    }
    return ScoreBreakdown(
        workload_variance=features["workload_variance"],
        dependency_violations=features["dependency_violations"],
        spacing_score=features["spacing_score"],
        change_count=features["change_count"],
        policy_violations=features["policy_violations"],
        score=compute_score(features, weights=cfg),
    )


def deterministic_tie_breaker_key(score: float, generation_index: int) -> tuple[float, int]:
    """Sort key: higher score first, then earlier generated candidate."""
    return (-score, generation_index)
