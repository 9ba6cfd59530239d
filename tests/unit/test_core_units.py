from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from rescheduler.engine.calendar import is_valid_class_day, parse_weekday, week_key, week_number
from rescheduler.engine.cascade import cascade_assignments, latest_topic_date, prep_time_satisfied
from rescheduler.engine.model import (
    Assignment,
    Course,
    CourseSnapshot,
    EngineContext,
    Session,
    SessionMove,
    SessionPolicy,
    Strategy,
    StrategyKind,
    Topic,
)
from rescheduler.engine.scoring import (
    assignment_spacing,
    compute_score,
    count_changes,
    dependency_violations,
    policy_violations,
    score_strategy,
    workload_variance,
)
from rescheduler.engine.slots import (
    NoAvailableSlot,
    advance_meeting_days,
    find_alternative_date,
    find_next_available_date,
)
from rescheduler.engine.strategies import build_strategy, generate_strategies

MWF = (0, 2, 4)


def _course(**overrides: Any) -> Course:
    values: dict[str, Any] = {
        "course_id": "c1",
        "title": "Test Course",
        "start_date": date(2024, 1, 15),
        "end_date": date(2024, 5, 15),
        "finals_week_start": date(2024, 5, 10),
        "meeting_days": MWF,
    }
    values.update(overrides)
    return Course(**values)


def _snapshot(course: Course | None = None) -> CourseSnapshot:
    return CourseSnapshot(
        course=course or _course(),
        topics=(
            Topic(
                topic_id="topic1",
                title="Introduction",
                position=1,
                sessions=(Session(1, date(2024, 1, 15)), Session(2, date(2024, 1, 17))),
            ),
            Topic(
                topic_id="topic2",
                title="Advanced Topics",
                position=2,
                sessions=(Session(1, date(2024, 1, 22)), Session(2, date(2024, 1, 24))),
            ),
        ),
        assignments=(
            Assignment("ass1", "Homework 1", "homework", date(2024, 1, 24), 10, 7, ("topic1",)),
            Assignment("ass2", "Midterm Exam", "exam", date(2024, 3, 1), 30, 14, ("topic1", "topic2")),
        ),
    )


def _context(*disrupted: date, **config: Any) -> EngineContext:
    return EngineContext(snapshot=_snapshot(), unavailable=frozenset(disrupted), config=dict(config))


def _strategy(topics: tuple[Topic, ...], assignments: tuple[Assignment, ...]) -> Strategy:
    return Strategy(kind=StrategyKind.EXTEND_SEMESTER, topics=topics, assignments=assignments)


def test_weekday_parsing_and_class_days() -> None:
    assert parse_weekday("Monday") == 0
    assert parse_weekday("wed") == 2
    assert parse_weekday(" FRIDAY ") == 4
    with pytest.raises(ValueError):
        parse_weekday("Funday")

    course = _course()
    assert is_valid_class_day(date(2024, 1, 15), course)
    assert not is_valid_class_day(date(2024, 1, 16), course)


def test_week_number_is_iso_thursday_anchored() -> None:
    assert week_number(date(2024, 1, 1)) == 1
    assert week_number(date(2024, 1, 24)) == 4
    # 2021-01-01 is a Friday, so it belongs to week 53 of 2020.
    assert week_number(date(2021, 1, 1)) == 53
    assert week_key(date(2021, 1, 1)) == (2020, 53)


def test_next_available_date_skips_disruptions_and_non_meeting_days() -> None:
    course = _course()
    unavailable = frozenset({date(2024, 1, 15), date(2024, 1, 17)})
    assert find_next_available_date(date(2024, 1, 15), unavailable, course) == date(2024, 1, 19)


def test_next_available_date_is_bounded() -> None:
    course = _course(meeting_days=(0,))
    unavailable = frozenset({date(2024, 1, 22)})
    with pytest.raises(NoAvailableSlot):
        find_next_available_date(date(2024, 1, 15), unavailable, course, scan_limit_days=7)


def test_alternative_date_prefers_next_week_then_falls_back() -> None:
    course = _course(meeting_days=(0,))
    assert find_alternative_date(date(2024, 1, 15), frozenset(), course) == date(2024, 1, 22)

    unavailable = frozenset({date(2024, 1, 22)})
    assert find_alternative_date(date(2024, 1, 15), unavailable, course) == date(2024, 1, 29)


def test_advance_meeting_days_moves_extra_slots() -> None:
    course = _course()
    assert advance_meeting_days(date(2024, 1, 17), frozenset(), course, 2) == date(2024, 1, 22)
    assert advance_meeting_days(date(2024, 1, 17), frozenset(), course, 0) == date(2024, 1, 17)


def test_cascade_uses_latest_required_session_plus_prep_days() -> None:
    snapshot = _snapshot()
    assert latest_topic_date(("topic1", "topic2"), snapshot.topics) == date(2024, 1, 24)
    assert latest_topic_date((), snapshot.topics) is None

    cascaded = cascade_assignments(snapshot.topics, snapshot.assignments)
    assert cascaded[0].due_date == date(2024, 1, 24)
    assert cascaded[1].due_date == date(2024, 2, 7)


def test_cascade_leaves_assignment_without_sessions_unchanged() -> None:
    free = Assignment("essay", "Essay", "project", date(2024, 4, 1), 20, 3, ())
    ghost = Assignment("ghost", "Ghost", "quiz", date(2024, 4, 2), 5, 3, ("missing",))
    assert cascade_assignments(_snapshot().topics, (free, ghost)) == (free, ghost)
    assert prep_time_satisfied(free, _snapshot().topics)


def test_rescheduled_last_session_drives_due_date() -> None:
    strategy = build_strategy(StrategyKind.EXTEND_SEMESTER, _context(date(2024, 1, 17)))

    topic1 = strategy.topics[0]
    assert topic1.last_session_date() == date(2024, 1, 19)
    homework = strategy.assignments[0]
    assert homework.due_date == date(2024, 1, 26)


def test_three_strategies_in_generation_order() -> None:
    strategies = generate_strategies(_context(date(2024, 1, 15)))
    assert [s.name for s in strategies] == ["Extend Semester", "Compress Content", "Redistribute"]

    extend, compress, redistribute = strategies
    assert [s.scheduled_date for s in extend.topics[0].sessions] == [date(2024, 1, 17), date(2024, 1, 17)]
    assert all(
        session.scheduled_date != date(2024, 1, 15) for topic in compress.topics for session in topic.sessions
    )
    assert len(compress.topics[0].sessions) == 1
    assert redistribute.topics[0].sessions[0].scheduled_date == date(2024, 1, 17)


def test_unplaceable_session_is_reported_not_raised() -> None:
    course = _course(meeting_days=(0,))
    snapshot = CourseSnapshot(
        course=course,
        topics=(Topic("t", "Only", 1, sessions=(Session(1, date(2024, 1, 15)),)),),
    )
    context = EngineContext(
        snapshot=snapshot,
        unavailable=frozenset({date(2024, 1, 15), date(2024, 1, 22)}),
        config={"scan_limit_days": 7},
    )

    strategy = build_strategy(StrategyKind.EXTEND_SEMESTER, context)

    assert strategy.topics[0].sessions[0].scheduled_date == date(2024, 1, 15)
    assert len(strategy.failures) == 1
    assert strategy.failures[0].policy is SessionPolicy.PUSH


def test_explicit_moves_override_default_policy() -> None:
    context = _context(date(2024, 1, 15))
    strategy = build_strategy(
        StrategyKind.REDISTRIBUTE,
        context,
        {("topic1", 1): SessionMove(policy=SessionPolicy.DROP)},
    )
    assert len(strategy.topics[0].sessions) == 1
    assert strategy.move_for(("topic1", 1)) == SessionMove(policy=SessionPolicy.DROP)


def test_workload_variance_and_spacing() -> None:
    snapshot = _snapshot()
    strategy = _strategy(snapshot.topics, cascade_assignments(snapshot.topics, snapshot.assignments))
    assert workload_variance(strategy) == pytest.approx(100.0)
    assert assignment_spacing(strategy) == 2

    empty = _strategy(snapshot.topics, ())
    assert workload_variance(empty) == 0.0
    assert assignment_spacing(empty) == 0


def test_spacing_awards_narrow_gaps() -> None:
    assignments = (
        Assignment("a", "A", "quiz", date(2024, 2, 1), 5),
        Assignment("b", "B", "quiz", date(2024, 2, 4), 5),
        Assignment("c", "C", "quiz", date(2024, 2, 5), 5),
    )
    assert assignment_spacing(_strategy((), assignments)) == 1


def test_exam_in_first_week_is_a_policy_violation() -> None:
    snapshot = _snapshot()
    early_exam = Assignment("quiz", "Placement Exam", "exam", date(2024, 1, 18), 5)
    strategy = _strategy(snapshot.topics, (early_exam,))
    assert policy_violations(strategy, snapshot) >= 1


def test_exam_in_finals_week_is_exempt_only_with_finals_declared() -> None:
    final = Assignment("final", "Final", "exam", date(2024, 5, 12), 40)
    with_finals = _snapshot()
    assert policy_violations(_strategy(with_finals.topics, (final,)), with_finals) == 0

    without_finals = _snapshot(_course(finals_week_start=None))
    assert policy_violations(_strategy(without_finals.topics, (final,)), without_finals) == 1


def test_dates_outside_semester_are_policy_violations() -> None:
    snapshot = _snapshot()
    late_topic = Topic("late", "Late", 3, sessions=(Session(1, date(2024, 5, 20)),))
    late_homework = Assignment("hw", "HW", "homework", date(2024, 5, 22), 5)
    strategy = _strategy((*snapshot.topics, late_topic), (late_homework,))
    assert policy_violations(strategy, snapshot) == 2


def test_prerequisite_overlap_is_a_dependency_violation() -> None:
    topic1 = Topic("topic1", "Intro", 1, sessions=(Session(1, date(2024, 1, 15)), Session(2, date(2024, 1, 24))))
    topic2 = Topic("topic2", "Next", 2, sessions=(Session(1, date(2024, 1, 22)),), prerequisites=("topic1",))
    assert dependency_violations(_strategy((topic1, topic2), ())) >= 1


def test_assignment_due_before_its_topics_is_a_dependency_violation() -> None:
    snapshot = _snapshot()
    rushed = Assignment("hw", "HW", "homework", date(2024, 1, 17), 10, 7, ("topic1",))
    assert dependency_violations(_strategy(snapshot.topics, (rushed,))) == 1
    assert not prep_time_satisfied(rushed, snapshot.topics)


def test_change_count_ignores_removed_sessions() -> None:
    context = _context(date(2024, 1, 15))
    extend, compress, _ = generate_strategies(context)
    assert count_changes(extend, context.snapshot) == 2
    assert count_changes(compress, context.snapshot) == 1


def test_seed_scores_match_the_weighted_formula() -> None:
    context = _context(date(2024, 1, 15))
    extend, compress, redistribute = generate_strategies(context)

    breakdown = score_strategy(extend, context.snapshot)
    assert breakdown.workload_variance == pytest.approx(100.0)
    assert breakdown.dependency_violations == 0
    assert breakdown.spacing_score == 2
    assert breakdown.change_count == 2
    assert breakdown.policy_violations == 0
    assert breakdown.score == pytest.approx(67.4)
    assert score_strategy(compress, context.snapshot).score == pytest.approx(68.9)
    assert score_strategy(redistribute, context.snapshot).score == pytest.approx(67.4)


def test_compute_score_is_clamped() -> None:
    assert compute_score({"policy_violations": 50}) == 0.0
    assert compute_score({"spacing_score": 1000}) == 100.0
    assert compute_score({}) == 100.0
