"""Schedule-version records for the external version store.

Records are keyed by ``(course_id, disruption_id, version_number)``. Version
numbers continue after the highest number already stored for the same
course/disruption pair. Applying a version marks it ``applied`` once and
resolves the triggering disruption; both functions return new records and
never mutate their inputs.
"""

from __future__ import annotations

from typing import Any

from rescheduler.io import dumps_stable


class ScheduleVersionError(Exception):
    """Raised when a version cannot be applied."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


def next_version_number(existing: list[dict[str, Any]], course_id: str, disruption_id: str) -> int:
    numbers = [
        int(item.get("version_number", 0) or 0)
        for item in existing
        if str(item.get("course_id")) == course_id and str(item.get("disruption_id")) == disruption_id
    ]
    return max(numbers, default=0) + 1


def build_schedule_versions(
    *,
    course_id: str,
    disruption_id: str,
    options: list[dict[str, Any]],
    existing: list[dict[str, Any]] | None = None,
) -> list[dict[str, Any]]:
    """One unapplied version record per option, in ranking order."""
    start = next_version_number(existing or [], course_id, disruption_id)
    return [
        {
            "course_id": course_id,
            "disruption_id": disruption_id,
            "version_number": start + offset,
            "strategy_name": option["name"],
            "schedule_data": dumps_stable(option["preview"], indent=None),
            "score": option["score"],
            "pros": list(option.get("pros", [])),
            "cons": list(option.get("cons", [])),
            "applied": False,
        }
        for offset, option in enumerate(options)
    ]


def apply_schedule_version(
    *,
    versions: list[dict[str, Any]],
    disruptions: list[dict[str, Any]],
    disruption_id: str,
    strategy_name: str,
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Mark the latest version of ``strategy_name`` applied and resolve the disruption."""
    if not any(str(d.get("disruption_id")) == disruption_id for d in disruptions):
        raise ScheduleVersionError("disruption_not_found", f"Disruption not found: {disruption_id}")

    matching = [
        (idx, item)
        for idx, item in enumerate(versions)
        if str(item.get("disruption_id")) == disruption_id and item.get("strategy_name") == strategy_name
    ]
    if not matching:
        raise ScheduleVersionError("version_not_found", f"Schedule version not found: {strategy_name}")
    if any(bool(item.get("applied")) for item in versions if str(item.get("disruption_id")) == disruption_id):
        raise ScheduleVersionError("already_applied", f"A schedule was already applied for {disruption_id}")

    target_idx, _ = max(matching, key=lambda entry: int(entry[1].get("version_number", 0) or 0))
    new_versions = [
        {**item, "applied": True} if idx == target_idx else dict(item)
        for idx, item in enumerate(versions)
    ]
    new_disruptions = [
        {**item, "resolved": True} if str(item.get("disruption_id")) == disruption_id else dict(item)
        for item in disruptions
    ]
    return new_versions, new_disruptions
