"""Pros/cons rationale attached to each rescheduling option."""

from __future__ import annotations

from rescheduler.engine.cascade import prep_time_satisfied
from rescheduler.engine.model import Strategy, StrategyKind

PREP_TIME_OK = "All assignments have proper prep time"
PREP_TIME_MISSING = "Some assignments lack proper prep time"
SESSIONS_UNPLACED = "Some sessions could not be placed on an open meeting day"

RATIONALE_BY_KIND: dict[StrategyKind, dict[str, tuple[str, ...]]] = {
    StrategyKind.EXTEND_SEMESTER: {
        "pros": (
            "Maintains original content structure",
            "Minimizes impact on assignment spacing",
            "Students have extra time to prepare",
        ),
        "cons": (
            "Delays end of semester",
            "May conflict with finals week",
            "Students may have schedule conflicts",
        ),
    },
    StrategyKind.COMPRESS_CONTENT: {
        "pros": (
            "Finishes on original semester end date",
            "No makeup classes required",
            "Students know the end date in advance",
        ),
        "cons": (
            "Topics may be rushed",
            "Less review time before exams",
            "Potential content gaps",
        ),
    },
    StrategyKind.REDISTRIBUTE: {
        "pros": (
            "Balanced workload distribution",
            "Minimizes overall disruption",
            "Fits within original semester dates",
        ),
        "cons": (
            "Topics may be out of order",
            "Uneven workload distribution",
            "Increased stress for students",
        ),
    },
}


def explain_strategy(strategy: Strategy) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Return ordered ``(pros, cons)`` for one candidate calendar."""
    template = RATIONALE_BY_KIND[strategy.kind]
    pros = list(template["pros"])
    cons = list(template["cons"])

    if all(prep_time_satisfied(assignment, strategy.topics) for assignment in strategy.assignments):
        pros.append(PREP_TIME_OK)
    else:
        cons.append(PREP_TIME_MISSING)

    if strategy.failures:
        cons.append(SESSIONS_UNPLACED)

    return tuple(pros), tuple(cons)
