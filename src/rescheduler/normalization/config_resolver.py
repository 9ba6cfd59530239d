"""Resolve the effective engine configuration from layered inputs."""

from __future__ import annotations

from typing import Any

from rescheduler.engine.scoring import DEFAULT_POLICY_CONFIG, DEFAULT_SCORE_WEIGHTS
from rescheduler.engine.slots import DEFAULT_ALTERNATIVE_WINDOW_DAYS, DEFAULT_SCAN_LIMIT_DAYS
from rescheduler.validation import ValidationReport

DEFAULT_ENGINE_CONFIG: dict[str, Any] = {
    **DEFAULT_SCORE_WEIGHTS,
    **DEFAULT_POLICY_CONFIG,
    "alternative_window_days": DEFAULT_ALTERNATIVE_WINDOW_DAYS,
    "scan_limit_days": DEFAULT_SCAN_LIMIT_DAYS,
}

_WEIGHT_KEYS = frozenset(DEFAULT_SCORE_WEIGHTS)


def resolve_engine_config(loaded_payload: dict[str, Any], validation_report: ValidationReport) -> dict[str, Any]:
    """Merge ``engine_config`` overrides over the defaults.

    Unknown keys are errors. Negative weights clamp to 0 and day windows
    below 1 clamp to 1, each with an info entry.
    """
    source = loaded_payload.get("engine_config", {})
    effective = dict(DEFAULT_ENGINE_CONFIG)
    if not isinstance(source, dict):
        return effective

    for key, value in source.items():
        if key == "schema_version":
            continue
        path = f"$.engine_config.{key}"
        if key not in DEFAULT_ENGINE_CONFIG:
            validation_report.add_error(
                code="INVALID_CONFIG_KEY",
                message=f"Config key {key!r} is not allowed",
                field_path=path,
                suggested_fix=f"Use one of: {', '.join(sorted(DEFAULT_ENGINE_CONFIG))}",
            )
            continue
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            validation_report.add_error(
                code="INVALID_TYPE",
                message=f"Config key {key!r} must be numeric",
                field_path=path,
            )
            continue

        if key in _WEIGHT_KEYS:
            applied: float | int = max(0.0, float(value))
        else:
            applied = max(1, int(value))
        if applied != value:
            validation_report.add_info(
                code="INFO_CLAMP_APPLIED",
                message=f"{key} was clamped to {applied}",
                field_path=path,
                extra={"applied_value": applied},
            )
        effective[key] = applied

    if effective["spacing_narrow_gap_days"] > effective["spacing_wide_gap_days"]:
        validation_report.add_error(
            code="INVALID_SPACING_WINDOW",
            message="spacing_narrow_gap_days must be <= spacing_wide_gap_days",
            field_path="$.engine_config.spacing_narrow_gap_days",
        )

    return effective
