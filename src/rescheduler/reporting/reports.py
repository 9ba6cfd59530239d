"""Documents written by the CLI."""

from __future__ import annotations

from typing import Any

from rescheduler.validation import ValidationError, ValidationReport

OPTIONS_OUTPUT_SCHEMA_VERSION = "1.0.0"
_OPTION_FIELDS = ("name", "score", "pros", "cons", "preview")


def build_error_report(
    errors: list[ValidationError],
    *,
    code: str = "validation_error",
    validation_report: ValidationReport | None = None,
) -> dict[str, Any]:
    """Error document for exit code 2; carries the full report when one exists."""
    payload: dict[str, Any] = {
        "status": "error",
        "error": {"code": code, "count": len(errors), "details": [err.as_dict() for err in errors]},
    }
    if validation_report is not None:
        payload["validation_report"] = validation_report.as_dict()
    return payload


def build_success_report(
    result: dict[str, Any],
    metrics: dict[str, Any],
    validation_report: ValidationReport,
    *,
    request_id: str | None = None,
    schedule_versions: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Wrap the engine result into the ``options_output`` document.

    Options are trimmed to the public ``{name, score, pros, cons, preview}``
    shape. No wall-clock fields are added, so identical inputs give identical
    bytes.
    """
    options_output: dict[str, Any] = {
        "schema_version": OPTIONS_OUTPUT_SCHEMA_VERSION,
        "request_id": request_id,
        "course_id": result.get("course_id"),
        "unavailable_dates": result.get("unavailable_dates", []),
        "options": [{key: option[key] for key in _OPTION_FIELDS} for option in result.get("options", [])],
        "warnings": result.get("warnings", []),
        "metrics": metrics,
        "search_trace": result.get("search_trace", []),
        "effective_config": result.get("effective_config", {}),
        "validation_report": validation_report.as_dict(),
    }
    if schedule_versions is not None:
        options_output["schedule_versions"] = schedule_versions
    return {"status": "ok", "result": result, "options_output": options_output}
