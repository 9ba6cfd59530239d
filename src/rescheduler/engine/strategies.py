"""Build candidate calendars for a disrupted course."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from .cascade import cascade_assignments
from .model import (
    DEFAULT_POLICY_BY_KIND,
    EngineContext,
    Session,
    SessionKey,
    SessionMove,
    SessionPolicy,
    SlotFailure,
    Strategy,
    StrategyKind,
    Topic,
)
from .slots import (
    DEFAULT_ALTERNATIVE_WINDOW_DAYS,
    DEFAULT_SCAN_LIMIT_DAYS,
    NoAvailableSlot,
    advance_meeting_days,
    find_alternative_date,
    find_next_available_date,
)

logger = logging.getLogger(__name__)


def affected_sessions(context: EngineContext) -> tuple[SessionKey, ...]:
    """Sessions of the original course that fall on an unavailable date."""
    keys: list[SessionKey] = []
    for topic in context.snapshot.topics:
        for session in topic.sessions:
            if session.scheduled_date in context.unavailable:
                keys.append((topic.topic_id, session.session_number))
    return tuple(keys)


def default_moves(kind: StrategyKind, context: EngineContext) -> dict[SessionKey, SessionMove]:
    policy = DEFAULT_POLICY_BY_KIND[kind]
    return {key: SessionMove(policy=policy) for key in affected_sessions(context)}


def _relocate(session_date: date, move: SessionMove, context: EngineContext) -> date:
    course = context.snapshot.course
    cfg = context.config
    scan_limit = int(cfg.get("scan_limit_days", DEFAULT_SCAN_LIMIT_DAYS))
    if move.policy is SessionPolicy.NEARBY:
        target = find_alternative_date(
            session_date,
            context.unavailable,
            course,
            window_days=int(cfg.get("alternative_window_days", DEFAULT_ALTERNATIVE_WINDOW_DAYS)),
            scan_limit_days=scan_limit,
        )
    else:
        target = find_next_available_date(session_date, context.unavailable, course, scan_limit_days=scan_limit)
    return advance_meeting_days(target, context.unavailable, course, move.extra_steps, scan_limit_days=scan_limit)


def build_strategy(
    kind: StrategyKind,
    context: EngineContext,
    moves: dict[SessionKey, SessionMove] | None = None,
) -> Strategy:
    """Apply a per-session decision table and cascade assignments.

    Sessions without an entry in ``moves`` use the kind's default policy.
    A session that cannot be placed keeps its original date and is reported
    in ``Strategy.failures``.
    """
    decisions = default_moves(kind, context)
    if moves:
        decisions.update({key: move for key, move in moves.items() if key in decisions})

    failures: list[SlotFailure] = []
    topics: list[Topic] = []
    for topic in context.snapshot.topics:
        sessions: list[Session] = []
        for session in topic.sessions:
            key = (topic.topic_id, session.session_number)
            move = decisions.get(key)
            if move is None:
                sessions.append(session)
                continue
            if move.policy is SessionPolicy.DROP:
                continue
            try:
                new_date = _relocate(session.scheduled_date, move, context)
            except NoAvailableSlot as exc:
                logger.warning(
                    "Session %s/%s could not be placed (%s): %s",
                    topic.topic_id,
                    session.session_number,
                    kind.label,
                    exc,
                )
                failures.append(
                    SlotFailure(
                        topic_id=topic.topic_id,
                        session_number=session.session_number,
                        original_date=session.scheduled_date,
                        policy=move.policy,
                        message=str(exc),
                    )
                )
                sessions.append(session)
                continue
            sessions.append(replace(session, scheduled_date=new_date))
        topics.append(replace(topic, sessions=tuple(sessions)))

    new_topics = tuple(topics)
    return Strategy(
        kind=kind,
        topics=new_topics,
        assignments=cascade_assignments(new_topics, context.snapshot.assignments),
        moves=tuple(sorted(decisions.items(), key=lambda item: item[0])),
        failures=tuple(failures),
    )


def generate_strategies(context: EngineContext) -> list[Strategy]:
    """Extend Semester, Compress Content and Redistribute, in that order."""
    return [build_strategy(kind, context) for kind in StrategyKind]
