"""CLI entrypoint for the rescheduler."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from rescheduler.engine import run_rescheduler
from rescheduler.io import read_json, write_json
from rescheduler.metrics import collect_metrics
from rescheduler.normalization import normalize_request, resolve_engine_config
from rescheduler.reporting import build_error_report, build_success_report
from rescheduler.reporting.versions import ScheduleVersionError, apply_schedule_version, build_schedule_versions
from rescheduler.validation import (
    InvalidInputError,
    ValidationError,
    ValidationReport,
    validate_domain_inputs,
    validate_inputs_with_schema,
    validate_options_request,
)

logger = logging.getLogger(__name__)

_PATH_FIELDS = {
    "course_path": "course",
    "disruptions_path": "disruptions",
    "engine_config_path": "engine_config",
}


def _resolve_input_path(request_file: Path, value: str) -> Path:
    path = Path(value)
    if path.is_absolute():
        return path
    return (request_file.parent / path).resolve()


def _load_referenced_inputs(request_file: Path, request: dict[str, Any]) -> tuple[dict[str, Any], list[ValidationError]]:
    loaded = dict(request)
    errors: list[ValidationError] = []

    for path_field, target_field in _PATH_FIELDS.items():
        if request.get(path_field) is None:
            continue
        resolved = _resolve_input_path(request_file, request[path_field])
        try:
            loaded[target_field] = read_json(resolved)
        except FileNotFoundError:
            errors.append(
                ValidationError(
                    code="file_not_found",
                    message=f"Referenced file not found: {resolved}",
                    path=f"$.{path_field}",
                )
            )
        except ValueError as exc:
            errors.append(ValidationError(code="invalid_json", message=str(exc), path=f"$.{path_field}"))

    return loaded, errors


def validate_loaded_inputs(loaded: dict[str, Any], validation_report: ValidationReport) -> None:
    """Run schema and domain checks; raise before any scoring if anything fails."""
    validation_report.extend(validate_inputs_with_schema(loaded))
    if not validation_report.errors:
        validation_report.extend(validate_domain_inputs(loaded))
    loaded["effective_config"] = resolve_engine_config(loaded, validation_report)
    if validation_report.errors:
        raise InvalidInputError(validation_report)


def build_options_result(loaded: dict[str, Any], validation_report: ValidationReport | None = None) -> dict[str, Any]:
    """Validate course/disruption documents and run the engine."""
    report = validation_report if validation_report is not None else ValidationReport()
    validate_loaded_inputs(loaded, report)
    return run_rescheduler(loaded)


def _disruption_id(request: dict[str, Any], loaded: dict[str, Any]) -> str | None:
    if request.get("disruption_id") is not None:
        return str(request["disruption_id"])
    for item in loaded.get("disruptions", {}).get("disruptions", []):
        if isinstance(item, dict) and item.get("disruption_id") is not None:
            return str(item["disruption_id"])
    return None


def _fail(
    output_path: str,
    errors: list[ValidationError],
    *,
    code: str = "validation_error",
    validation_report: ValidationReport | None = None,
) -> int:
    write_json(output_path, build_error_report(errors, code=code, validation_report=validation_report))
    return 2


def run_options_command(request_path: str, output_path: str) -> int:
    validation_report = ValidationReport()

    try:
        request_payload = normalize_request(read_json(request_path))
    except (OSError, ValueError) as exc:
        error = ValidationError(code="invalid_request", message=str(exc), path="$.request")
        return _fail(output_path, [error], code="request_read_error")

    errors = validate_options_request(request_payload)
    if errors:
        return _fail(output_path, errors)

    loaded_request, load_errors = _load_referenced_inputs(Path(request_path), request_payload)
    if load_errors:
        return _fail(output_path, load_errors, code="input_load_error", validation_report=validation_report)

    try:
        result = build_options_result(loaded_request, validation_report)
    except InvalidInputError as exc:
        logger.info("Rejected request %s: %s", request_payload.get("request_id"), exc)
        return _fail(output_path, exc.report.as_errors(), validation_report=exc.report)

    versions = None
    disruption_id = _disruption_id(request_payload, loaded_request)
    if disruption_id is not None:
        versions = build_schedule_versions(
            course_id=str(result["course_id"]),
            disruption_id=disruption_id,
            options=result["options"],
        )

    report = build_success_report(
        result,
        collect_metrics(result),
        validation_report,
        request_id=request_payload.get("request_id"),
        schedule_versions=versions,
    )
    write_json(output_path, report)
    return 0


def _records(document: Any, key: str) -> list[dict[str, Any]]:
    records = document.get(key, []) if isinstance(document, dict) else None
    if not isinstance(records, list) or not all(isinstance(item, dict) for item in records):
        raise ValueError(f"\"{key}\" must be a list of objects")
    return records


def run_apply_command(
    versions_path: str,
    disruptions_path: str,
    disruption_id: str,
    strategy_name: str,
    output_path: str,
) -> int:
    """Mark one stored schedule version applied and resolve its disruption."""
    try:
        versions = _records(read_json(versions_path), "versions")
        disruptions = _records(read_json(disruptions_path), "disruptions")
    except (OSError, ValueError) as exc:
        error = ValidationError(code="invalid_request", message=str(exc), path="$")
        return _fail(output_path, [error], code="request_read_error")

    try:
        new_versions, new_disruptions = apply_schedule_version(
            versions=versions,
            disruptions=disruptions,
            disruption_id=disruption_id,
            strategy_name=strategy_name,
        )
    except ScheduleVersionError as exc:
        error = ValidationError(code=exc.code, message=str(exc), path="$.versions")
        return _fail(output_path, [error], code=exc.code)

    logger.info("Applied %r for disruption %s", strategy_name, disruption_id)
    write_json(output_path, {"status": "ok", "versions": new_versions, "disruptions": new_disruptions})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rescheduler", description="Course rescheduling strategy engine")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    options_parser = subparsers.add_parser("options", help="Generate ranked rescheduling options")
    options_parser.add_argument("--request", required=True, help="Path to options_request.json")
    options_parser.add_argument("--output", required=True, help="Path to options_output.json")

    apply_parser = subparsers.add_parser("apply", help="Mark a stored schedule version as applied")
    apply_parser.add_argument("--versions", required=True, help="Path to a JSON file with a 'versions' list")
    apply_parser.add_argument("--disruptions", required=True, help="Path to the disruptions JSON file")
    apply_parser.add_argument("--disruption-id", required=True, help="Disruption that triggered the versions")
    apply_parser.add_argument("--strategy", required=True, help="Strategy name to apply, e.g. 'Extend Semester'")
    apply_parser.add_argument("--output", required=True, help="Path for the updated records")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "options":
        return run_options_command(args.request, args.output)
    if args.command == "apply":
        return run_apply_command(args.versions, args.disruptions, args.disruption_id, args.strategy, args.output)

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
