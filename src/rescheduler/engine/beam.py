"""Beam-search refinement over candidate calendars.

Each round expands every beam member into single-session perturbations
(a policy swap allowed for the strategy family, or one extra meeting-day
shift), scores the new calendars and keeps the ``BEAM_WIDTH`` best. A
Compress Content candidate always keeps at least one dropped session. Parents
stay in the candidate pool, so the best score never drops between rounds.
Ties are broken by generation order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rescheduler.reporting.search_trace import SearchTraceCollector

from .model import (
    ALLOWED_POLICIES_BY_KIND,
    EngineContext,
    ScoreBreakdown,
    SessionKey,
    SessionMove,
    SessionPolicy,
    Strategy,
    StrategyKind,
)
from .scoring import deterministic_tie_breaker_key, score_strategy
from .strategies import build_strategy

logger = logging.getLogger(__name__)

BEAM_WIDTH = 5
ITERATIONS = 3
MAX_EXTRA_STEPS = 2


@dataclass(frozen=True, slots=True)
class Candidate:
    strategy: Strategy
    breakdown: ScoreBreakdown
    index: int

    @property
    def score(self) -> float:
        return self.breakdown.score

    def sort_key(self) -> tuple[float, int]:
        return deterministic_tie_breaker_key(self.score, self.index)


@dataclass(frozen=True, slots=True)
class BeamResult:
    beam: tuple[Candidate, ...]
    best_by_kind: tuple[Candidate, ...]


def _keeps_family(kind: StrategyKind, moves: dict[SessionKey, SessionMove]) -> bool:
    if kind is not StrategyKind.COMPRESS_CONTENT or not moves:
        return True
    return any(move.policy is SessionPolicy.DROP for move in moves.values())


def generate_variations(strategy: Strategy, context: EngineContext) -> list[Strategy]:
    """Rebuild ``strategy`` with one session decision changed at a time."""
    current = dict(strategy.moves)
    variations: list[Strategy] = []
    for key, move in strategy.moves:
        for policy in ALLOWED_POLICIES_BY_KIND[strategy.kind]:
            if policy is move.policy:
                continue
            swapped = {**current, key: SessionMove(policy=policy)}
            if not _keeps_family(strategy.kind, swapped):
                continue
            variations.append(build_strategy(strategy.kind, context, swapped))
        if move.policy is not SessionPolicy.DROP and move.extra_steps < MAX_EXTRA_STEPS:
            shifted = SessionMove(policy=move.policy, extra_steps=move.extra_steps + 1)
            variations.append(build_strategy(strategy.kind, context, {**current, key: shifted}))
    return variations


def _kept_summary(beam: list[Candidate]) -> list[dict[str, object]]:
    return [{"name": c.strategy.name, "score": c.score, "index": c.index} for c in beam]


def beam_search(
    seeds: list[Strategy],
    context: EngineContext,
    *,
    trace: SearchTraceCollector | None = None,
) -> BeamResult:
    """Refine ``seeds`` for ``ITERATIONS`` rounds keeping the top ``BEAM_WIDTH``."""
    original = context.snapshot
    counter = 0
    seen: set[tuple[object, ...]] = set()
    best: dict[StrategyKind, Candidate] = {}

    def admit(strategy: Strategy) -> Candidate | None:
        nonlocal counter
        signature = strategy.signature()
        if signature in seen:
            return None
        seen.add(signature)
        candidate = Candidate(strategy, score_strategy(strategy, original, context.config), counter)
        counter += 1
        incumbent = best.get(strategy.kind)
        if incumbent is None or candidate.sort_key() < incumbent.sort_key():
            best[strategy.kind] = candidate
        return candidate

    beam = [c for c in (admit(seed) for seed in seeds) if c is not None]
    beam.sort(key=Candidate.sort_key)
    beam = beam[:BEAM_WIDTH]

    for round_index in range(1, ITERATIONS + 1):
        pool = list(beam)
        considered = 0
        duplicates = 0
        for member in beam:
            for variation in generate_variations(member.strategy, context):
                considered += 1
                candidate = admit(variation)
                if candidate is None:
                    duplicates += 1
                    continue
                pool.append(candidate)

        pool.sort(key=Candidate.sort_key)
        beam = pool[:BEAM_WIDTH]
        best_score = beam[0].score if beam else 0.0
        logger.debug(
            "Beam round %d: %d variations, %d duplicates, best %.2f",
            round_index,
            considered,
            duplicates,
            best_score,
        )
        if trace is not None:
            trace.record(
                round_index=round_index,
                candidates_considered=considered,
                duplicates_skipped=duplicates,
                kept=_kept_summary(beam),
                best_score=best_score,
            )

    return BeamResult(
        beam=tuple(beam),
        best_by_kind=tuple(best[kind] for kind in StrategyKind if kind in best),
    )
