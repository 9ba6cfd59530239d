"""Trace of beam-search rounds for debugging and report export."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class SearchTraceCollector:
    """Collect one entry per refinement round, in execution order."""

    _sequence: int = 0
    _items: list[dict[str, Any]] = field(default_factory=list)

    def record(
        self,
        *,
        round_index: int,
        candidates_considered: int,
        duplicates_skipped: int,
        kept: list[dict[str, Any]],
        best_score: float,
    ) -> None:
        self._sequence += 1
        self._items.append(
            {
                "trace_id": f"r-{self._sequence:04d}",
                "round": round_index,
                "candidates_considered": candidates_considered,
                "duplicates_skipped": duplicates_skipped,
                "kept": kept,
                "best_score": float(best_score),
            }
        )

    def as_list(self) -> list[dict[str, Any]]:
        return sorted(self._items, key=lambda item: (int(item["round"]), str(item["trace_id"])))
