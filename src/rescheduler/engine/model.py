"""Immutable values shared by the rescheduling engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

SESSION_STATUSES = ("scheduled", "completed", "cancelled")
ASSIGNMENT_TYPES = ("homework", "quiz", "project", "exam")

SessionKey = tuple[str, int]


class StrategyKind(Enum):
    """Named rescheduling families, in generation order."""

    EXTEND_SEMESTER = "extend_semester"
    COMPRESS_CONTENT = "compress_content"
    REDISTRIBUTE = "redistribute"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]

    @property
    def description(self) -> str:
        return _KIND_DESCRIPTIONS[self]

    @property
    def order(self) -> int:
        return list(StrategyKind).index(self)


_KIND_LABELS = {
    StrategyKind.EXTEND_SEMESTER: "Extend Semester",
    StrategyKind.COMPRESS_CONTENT: "Compress Content",
    StrategyKind.REDISTRIBUTE: "Redistribute",
}

_KIND_DESCRIPTIONS = {
    StrategyKind.EXTEND_SEMESTER: "Extend the semester by adding makeup days at the end",
    StrategyKind.COMPRESS_CONTENT: "Combine topics to fit within the original semester",
    StrategyKind.REDISTRIBUTE: "Redistribute topics to available days throughout the semester",
}


class SessionPolicy(Enum):
    """What happens to one session that sits on a disrupted date."""

    PUSH = "push"
    NEARBY = "nearby"
    DROP = "drop"


DEFAULT_POLICY_BY_KIND: dict[StrategyKind, SessionPolicy] = {
    StrategyKind.EXTEND_SEMESTER: SessionPolicy.PUSH,
    StrategyKind.COMPRESS_CONTENT: SessionPolicy.DROP,
    StrategyKind.REDISTRIBUTE: SessionPolicy.NEARBY,
}

# Policies a refined candidate may switch to without changing its family.
ALLOWED_POLICIES_BY_KIND: dict[StrategyKind, tuple[SessionPolicy, ...]] = {
    StrategyKind.EXTEND_SEMESTER: (SessionPolicy.PUSH,),
    StrategyKind.COMPRESS_CONTENT: (SessionPolicy.DROP, SessionPolicy.NEARBY),
    StrategyKind.REDISTRIBUTE: (SessionPolicy.NEARBY, SessionPolicy.PUSH),
}


@dataclass(frozen=True, slots=True)
class Course:
    course_id: str
    title: str
    start_date: date
    end_date: date
    meeting_days: tuple[int, ...]
    semester: str = ""
    finals_week_start: date | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "course_id": self.course_id,
            "title": self.title,
            "semester": self.semester,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "finals_week_start": self.finals_week_start.isoformat() if self.finals_week_start else None,
            "meeting_days": list(self.meeting_days),
        }


@dataclass(frozen=True, slots=True)
class Session:
    session_number: int
    scheduled_date: date
    status: str = "scheduled"
    session_id: str | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "session_number": self.session_number,
            "scheduled_date": self.scheduled_date.isoformat(),
            "status": self.status,
        }
        if self.session_id is not None:
            payload["session_id"] = self.session_id
        return payload


@dataclass(frozen=True, slots=True)
class Topic:
    topic_id: str
    title: str
    position: int
    sessions: tuple[Session, ...] = ()
    prerequisites: tuple[str, ...] = ()

    def first_session_date(self) -> date | None:
        return min((s.scheduled_date for s in self.sessions), default=None)

    def last_session_date(self) -> date | None:
        return max((s.scheduled_date for s in self.sessions), default=None)

    def as_dict(self) -> dict[str, Any]:
        return {
            "topic_id": self.topic_id,
            "title": self.title,
            "position": self.position,
            "prerequisites": list(self.prerequisites),
            "sessions": [session.as_dict() for session in self.sessions],
        }


@dataclass(frozen=True, slots=True)
class Assignment:
    assignment_id: str
    title: str
    type: str
    due_date: date
    weight: float = 0.0
    min_prep_days: int = 0
    required_topics: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {
            "assignment_id": self.assignment_id,
            "title": self.title,
            "type": self.type,
            "due_date": self.due_date.isoformat(),
            "weight": self.weight,
            "min_prep_days": self.min_prep_days,
            "required_topics": list(self.required_topics),
        }


@dataclass(frozen=True, slots=True)
class Disruption:
    disruption_date: date
    reason: str = ""
    disruption_id: str | None = None


@dataclass(frozen=True, slots=True)
class CourseSnapshot:
    """Read-only view of one course for the duration of an engine run."""

    course: Course
    topics: tuple[Topic, ...] = ()
    assignments: tuple[Assignment, ...] = ()


@dataclass(frozen=True, slots=True)
class SessionMove:
    """Decision applied to one disrupted session."""

    policy: SessionPolicy
    extra_steps: int = 0


@dataclass(frozen=True, slots=True)
class SlotFailure:
    topic_id: str
    session_number: int
    original_date: date
    policy: SessionPolicy
    message: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "topic_id": self.topic_id,
            "session_number": self.session_number,
            "original_date": self.original_date.isoformat(),
            "policy": self.policy.value,
            "message": self.message,
        }


@dataclass(frozen=True, slots=True)
class Strategy:
    """One candidate calendar for the course."""

    kind: StrategyKind
    topics: tuple[Topic, ...]
    assignments: tuple[Assignment, ...]
    moves: tuple[tuple[SessionKey, SessionMove], ...] = ()
    failures: tuple[SlotFailure, ...] = ()

    @property
    def name(self) -> str:
        return self.kind.label

    @property
    def description(self) -> str:
        return self.kind.description

    def move_for(self, key: SessionKey) -> SessionMove | None:
        for move_key, move in self.moves:
            if move_key == key:
                return move
        return None

    def signature(self) -> tuple[Any, ...]:
        """Calendar identity used to deduplicate search candidates."""
        sessions = tuple(
            (topic.topic_id, session.session_number, session.scheduled_date)
            for topic in self.topics
            for session in topic.sessions
        )
        dues = tuple((a.assignment_id, a.due_date) for a in self.assignments)
        return (self.kind, sessions, dues)

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "description": self.description,
            "topics": [topic.as_dict() for topic in self.topics],
            "assignments": [assignment.as_dict() for assignment in self.assignments],
            "session_moves": [
                {
                    "topic_id": topic_id,
                    "session_number": number,
                    "policy": move.policy.value,
                    "extra_steps": move.extra_steps,
                }
                for (topic_id, number), move in self.moves
            ],
            "failures": [failure.as_dict() for failure in self.failures],
        }


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    workload_variance: float
    dependency_violations: int
    spacing_score: int
    change_count: int
    policy_violations: int
    score: float

    def as_dict(self) -> dict[str, Any]:
        return {
            "workload_variance": self.workload_variance,
            "dependency_violations": self.dependency_violations,
            "spacing_score": self.spacing_score,
            "change_count": self.change_count,
            "policy_violations": self.policy_violations,
            "score": self.score,
        }


@dataclass(frozen=True, slots=True)
class ScoredStrategy:
    strategy: Strategy
    score: float
    breakdown: ScoreBreakdown
    pros: tuple[str, ...] = ()
    cons: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.strategy.name

    def as_option(self) -> dict[str, Any]:
        """Shape consumed by the HTTP layer and the version store."""
        return {
            "name": self.name,
            "score": self.score,
            "pros": list(self.pros),
            "cons": list(self.cons),
            "breakdown": self.breakdown.as_dict(),
            "preview": self.strategy.as_dict(),
        }


@dataclass(frozen=True, slots=True)
class EngineContext:
    """Inputs every strategy build and score needs for one run."""

    snapshot: CourseSnapshot
    unavailable: frozenset[date]
    config: dict[str, Any] = field(default_factory=dict)
