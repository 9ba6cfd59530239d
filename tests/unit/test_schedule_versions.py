from __future__ import annotations

import json
from copy import deepcopy

import pytest

from rescheduler.reporting.versions import (
    ScheduleVersionError,
    apply_schedule_version,
    build_schedule_versions,
    next_version_number,
)


def _options() -> list[dict]:
    return [
        {
            "name": name,
            "score": score,
            "pros": ["p"],
            "cons": ["c"],
            "preview": {"topics": [], "assignments": [], "name": name},
        }
        for name, score in (("Compress Content", 68.9), ("Extend Semester", 67.4), ("Redistribute", 67.4))
    ]


def _disruptions() -> list[dict]:
    return [
        {"disruption_id": "d1", "disruption_date": "2024-01-15", "resolved": False},
        {"disruption_id": "d2", "disruption_date": "2024-02-02", "resolved": False},
    ]


def test_versions_are_numbered_in_ranking_order() -> None:
    versions = build_schedule_versions(course_id="c1", disruption_id="d1", options=_options())

    assert [(v["version_number"], v["strategy_name"]) for v in versions] == [
        (1, "Compress Content"),
        (2, "Extend Semester"),
        (3, "Redistribute"),
    ]
    assert not any(v["applied"] for v in versions)
    assert json.loads(versions[0]["schedule_data"])["name"] == "Compress Content"


def test_version_numbers_continue_per_course_and_disruption() -> None:
    existing = [
        {"course_id": "c1", "disruption_id": "d1", "version_number": 3},
        {"course_id": "c1", "disruption_id": "d2", "version_number": 9},
        {"course_id": "c2", "disruption_id": "d1", "version_number": 7},
    ]
    assert next_version_number(existing, "c1", "d1") == 4
    assert next_version_number([], "c1", "d1") == 1

    versions = build_schedule_versions(course_id="c1", disruption_id="d1", options=_options(), existing=existing)
    assert [v["version_number"] for v in versions] == [4, 5, 6]


def test_apply_marks_latest_matching_version_and_resolves_disruption() -> None:
    versions = build_schedule_versions(course_id="c1", disruption_id="d1", options=_options())
    versions += build_schedule_versions(course_id="c1", disruption_id="d1", options=_options(), existing=versions)
    disruptions = _disruptions()
    snapshot = deepcopy((versions, disruptions))

    new_versions, new_disruptions = apply_schedule_version(
        versions=versions,
        disruptions=disruptions,
        disruption_id="d1",
        strategy_name="Extend Semester",
    )

    applied = [v for v in new_versions if v["applied"]]
    assert [(v["strategy_name"], v["version_number"]) for v in applied] == [("Extend Semester", 5)]
    assert [d["resolved"] for d in new_disruptions] == [True, False]
    assert (versions, disruptions) == snapshot


def test_apply_twice_is_rejected() -> None:
    versions = build_schedule_versions(course_id="c1", disruption_id="d1", options=_options())
    new_versions, new_disruptions = apply_schedule_version(
        versions=versions,
        disruptions=_disruptions(),
        disruption_id="d1",
        strategy_name="Redistribute",
    )

    with pytest.raises(ScheduleVersionError) as excinfo:
        apply_schedule_version(
            versions=new_versions,
            disruptions=new_disruptions,
            disruption_id="d1",
            strategy_name="Compress Content",
        )
    assert excinfo.value.code == "already_applied"


@pytest.mark.parametrize(
    ("disruption_id", "strategy_name", "code"),
    [
        ("d9", "Extend Semester", "disruption_not_found"),
        ("d1", "Teleport", "version_not_found"),
        ("d2", "Extend Semester", "version_not_found"),
    ],
)
def test_apply_reports_missing_records(disruption_id: str, strategy_name: str, code: str) -> None:
    versions = build_schedule_versions(course_id="c1", disruption_id="d1", options=_options())
    with pytest.raises(ScheduleVersionError) as excinfo:
        apply_schedule_version(
            versions=versions,
            disruptions=_disruptions(),
            disruption_id=disruption_id,
            strategy_name=strategy_name,
        )
    assert excinfo.value.code == code
