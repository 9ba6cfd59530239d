"""Rescheduling engine runner."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from rescheduler.normalization.course import build_course_snapshot, build_disruptions
from rescheduler.reporting.rationale import explain_strategy
from rescheduler.reporting.search_trace import SearchTraceCollector
from rescheduler.reporting.warnings import build_option_warnings

from .beam import beam_search
from .model import CourseSnapshot, Disruption, EngineContext, ScoredStrategy
from .scoring import score_strategy
from .strategies import affected_sessions, generate_strategies

logger = logging.getLogger(__name__)

MAX_OPTIONS = 3


def generate_rescheduling_options(
    snapshot: CourseSnapshot,
    disruptions: Iterable[Disruption],
    config: dict[str, Any] | None = None,
    *,
    trace: SearchTraceCollector | None = None,
) -> tuple[ScoredStrategy, ...]:
    """Generate, refine, score and explain; return the best options first.

    At most one option per strategy kind is returned, so the result never
    holds more than ``MAX_OPTIONS`` entries. Ties keep generation order.
    """
    unavailable = frozenset(d.disruption_date for d in disruptions)
    context = EngineContext(snapshot=snapshot, unavailable=unavailable, config=dict(config or {}))
    logger.debug(
        "Rescheduling %s: %d unavailable date(s), %d affected session(s)",
        snapshot.course.course_id,
        len(unavailable),
        len(affected_sessions(context)),
    )

    seeds = generate_strategies(context)
    refined = beam_search(seeds, context, trace=trace)

    options: list[ScoredStrategy] = []
    for candidate in refined.best_by_kind:
        breakdown = score_strategy(candidate.strategy, snapshot, context.config)
        pros, cons = explain_strategy(candidate.strategy)
        options.append(
            ScoredStrategy(
                strategy=candidate.strategy,
                score=breakdown.score,
                breakdown=breakdown,
                pros=pros,
                cons=cons,
            )
        )

    options.sort(key=lambda option: (-option.score, option.strategy.kind.order))
    return tuple(options[:MAX_OPTIONS])


def run_rescheduler(payload: dict[str, Any]) -> dict[str, Any]:
    """Run the engine on validated course/disruption documents."""
    snapshot = build_course_snapshot(payload.get("course", {}))
    disruptions = build_disruptions(payload.get("disruptions", {}))
    config = payload.get("effective_config", {}) if isinstance(payload.get("effective_config"), dict) else {}

    trace = SearchTraceCollector()
    options = generate_rescheduling_options(snapshot, disruptions, config, trace=trace)
    warnings = build_option_warnings(options, snapshot, disruptions)

    return {
        "status": "ok",
        "course_id": snapshot.course.course_id,
        "unavailable_dates": sorted({d.disruption_date.isoformat() for d in disruptions}),
        "options": [option.as_option() for option in options],
        "warnings": warnings,
        "search_trace": trace.as_list(),
        "effective_config": config,
        "course": snapshot.course.as_dict(),
    }
