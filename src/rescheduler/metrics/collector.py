"""Summary metrics for one rescheduling run."""

from __future__ import annotations

from datetime import date
from statistics import mean
from typing import Any


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def _confidence_level(score: float) -> str:
    if score >= 75:
        return "high"
    if score >= 55:
        return "medium"
    return "low"


def _option_metrics(option: dict[str, Any], end_date: date | None) -> dict[str, Any]:
    preview = option.get("preview", {}) if isinstance(option.get("preview"), dict) else {}
    moves = [item for item in preview.get("session_moves", []) if isinstance(item, dict)]
    failures = [item for item in preview.get("failures", []) if isinstance(item, dict)]
    topics = [item for item in preview.get("topics", []) if isinstance(item, dict)]
    assignments = [item for item in preview.get("assignments", []) if isinstance(item, dict)]

    session_dates = [
        date.fromisoformat(str(session["scheduled_date"]))
        for topic in topics
        for session in topic.get("sessions", [])
        if isinstance(session, dict) and session.get("scheduled_date")
    ]
    removed = sum(1 for move in moves if move.get("policy") == "drop")
    unplaced = len(failures)
    last_session = max(session_dates) if session_dates else None
    overrun_days = max(0, (last_session - end_date).days) if last_session and end_date else 0

    breakdown = option.get("breakdown", {}) if isinstance(option.get("breakdown"), dict) else {}
    changes = int(breakdown.get("change_count", 0) or 0)
    stability_score = _clamp01(1.0 - changes / max(1, len(session_dates) + len(assignments)))

    return {
        "name": option.get("name"),
        "score": float(option.get("score", 0.0) or 0.0),
        "sessions_total": len(session_dates),
        "sessions_moved": len(moves) - removed - unplaced,
        "sessions_removed": removed,
        "sessions_unplaced": unplaced,
        "last_session_date": last_session.isoformat() if last_session else None,
        "overrun_days": overrun_days,
        "stability_score": stability_score,
    }


def collect_metrics(result: dict[str, Any]) -> dict[str, Any]:
    """Aggregate per-option figures and a confidence level for the best option."""
    options = [item for item in result.get("options", []) if isinstance(item, dict)]
    course = result.get("course", {}) if isinstance(result.get("course"), dict) else {}
    raw_end = course.get("end_date")
    end_date = date.fromisoformat(raw_end) if isinstance(raw_end, str) else None

    per_option = [_option_metrics(option, end_date) for option in options]
    scores = [item["score"] for item in per_option]
    best = per_option[0] if per_option else None

    return {
        "options_count": len(per_option),
        "best_option": best["name"] if best else None,
        "best_score": max(scores) if scores else 0.0,
        "mean_score": mean(scores) if scores else 0.0,
        "score_spread": (max(scores) - min(scores)) if scores else 0.0,
        "best_overrun_days": best["overrun_days"] if best else 0,
        "best_stability_score": best["stability_score"] if best else 1.0,
        "confidence_level": _confidence_level(best["score"]) if best else "low",
        "warnings_count": len(result.get("warnings", []) or []),
        "by_option": per_option,
    }
