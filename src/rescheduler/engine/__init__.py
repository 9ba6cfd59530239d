"""Rescheduling engine."""

from .beam import BEAM_WIDTH, ITERATIONS, beam_search, generate_variations
from .runner import MAX_OPTIONS, generate_rescheduling_options, run_rescheduler
from .scoring import DEFAULT_SCORE_WEIGHTS, compute_score, score_strategy
from .slots import NoAvailableSlot, find_alternative_date, find_next_available_date
from .strategies import build_strategy, generate_strategies

__all__ = [
    "BEAM_WIDTH",
    "DEFAULT_SCORE_WEIGHTS",
    "ITERATIONS",
    "MAX_OPTIONS",
    "NoAvailableSlot",
    "beam_search",
    "build_strategy",
    "compute_score",
    "find_alternative_date",
    "find_next_available_date",
    "generate_rescheduling_options",
    "generate_strategies",
    "generate_variations",
    "run_rescheduler",
    "score_strategy",
]
