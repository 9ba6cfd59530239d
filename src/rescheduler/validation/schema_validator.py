"""Structural validation of course documents and option output."""

from __future__ import annotations

from datetime import date
from typing import Any

from rescheduler.engine.model import ASSIGNMENT_TYPES, SESSION_STATUSES

from .errors import ValidationReport

_DATE = {"type": "string", "format": "date"}
_ID = {"type": "string", "minLength": 1}
_STRINGS = {"type": "array", "items": {"type": "string"}}

SESSION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["session_number", "scheduled_date"],
    "properties": {
        "session_number": {"type": "integer", "minimum": 1},
        "scheduled_date": _DATE,
        "status": {"type": "string", "enum": list(SESSION_STATUSES)},
    },
}

COURSE_DOCUMENT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["course", "topics", "assignments"],
    "properties": {
        "course": {
            "type": "object",
            "required": ["course_id", "start_date", "end_date"],
            "properties": {
                "course_id": _ID,
                "title": {"type": "string"},
                "semester": {"type": ["string", "null"]},
                "start_date": _DATE,
                "end_date": _DATE,
                "finals_week_start": {"type": ["string", "null"], "format": "date"},
                "meeting_days": _STRINGS,
                "meeting_times": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "required": ["day_of_week"],
                        "properties": {"day_of_week": {"type": "string"}},
                    },
                },
            },
        },
        "topics": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["topic_id", "sessions"],
                "properties": {
                    "topic_id": _ID,
                    "title": {"type": "string"},
                    "position": {"type": "integer"},
                    "prerequisites": {"type": ["array", "null"], "items": {"type": "string"}},
                    "sessions": {"type": "array", "items": SESSION_SCHEMA},
                },
            },
        },
        "assignments": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["assignment_id", "type", "due_date"],
                "properties": {
                    "assignment_id": _ID,
                    "title": {"type": "string"},
                    "type": {"type": "string", "enum": list(ASSIGNMENT_TYPES)},
                    "due_date": _DATE,
                    "weight": {"type": "number", "minimum": 0, "maximum": 100},
                    "min_prep_days": {"type": "integer", "minimum": 0},
                    "required_topics": {"type": ["array", "null"], "items": {"type": "string"}},
                },
            },
        },
    },
}

DISRUPTIONS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["disruptions"],
    "properties": {
        "disruptions": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["disruption_date"],
                "properties": {
                    "disruption_id": {"type": ["string", "integer"]},
                    "disruption_date": _DATE,
                    "reason": {"type": ["string", "null"]},
                },
            },
        },
    },
}

ENGINE_CONFIG_SCHEMA: dict[str, Any] = {"type": "object"}

OPTIONS_OUTPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["options"],
    "properties": {
        "options": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["name", "score", "pros", "cons", "preview"],
                "properties": {
                    "name": {"type": "string", "enum": ["Extend Semester", "Compress Content", "Redistribute"]},
                    "score": {"type": "number", "minimum": 0, "maximum": 100},
                    "pros": _STRINGS,
                    "cons": _STRINGS,
                    "preview": {"type": "object", "required": ["topics", "assignments"]},
                },
            },
        },
    },
}

_SCHEMA_BY_PAYLOAD = {
    "course": COURSE_DOCUMENT_SCHEMA,
    "disruptions": DISRUPTIONS_SCHEMA,
    "engine_config": ENGINE_CONFIG_SCHEMA,
}


def validate_inputs_with_schema(payloads: dict[str, Any]) -> ValidationReport:
    report = ValidationReport()
    for payload_name, schema in _SCHEMA_BY_PAYLOAD.items():
        if payload_name not in payloads:
            continue
        _validate_node(value=payloads[payload_name], schema=schema, path=f"$.{payload_name}", report=report)
    return report


def validate_options_output_with_schema(payload: dict[str, Any]) -> ValidationReport:
    report = ValidationReport()
    _validate_node(value=payload, schema=OPTIONS_OUTPUT_SCHEMA, path="$", report=report)
    return report


def _validate_node(*, value: Any, schema: dict[str, Any], path: str, report: ValidationReport) -> None:
    expected = schema.get("type")
    if expected and not _matches_type(value, expected):
        code = "MISSING_REQUIRED_FIELD" if value is None else "INVALID_TYPE"
        report.add_error(code=code, message=f"Expected type {expected}, got {type(value).__name__}", field_path=path)
        return

    if "enum" in schema and value not in schema["enum"]:
        report.add_error(
            code="INVALID_ENUM_VALUE",
            message=f"Value {value!r} not in enum",
            field_path=path,
            suggested_fix=f"Use one of: {', '.join(str(item) for item in schema['enum'])}",
        )

    if isinstance(value, dict):
        for key in schema.get("required", []):
            if key not in value:
                report.add_error(
                    code="MISSING_REQUIRED_FIELD",
                    message=f"Missing required field: {key}",
                    field_path=f"{path}.{key}",
                )
        for key, prop_schema in schema.get("properties", {}).items():
            if key in value:
                _validate_node(value=value[key], schema=prop_schema, path=f"{path}.{key}", report=report)

    elif isinstance(value, list):
        min_items = schema.get("minItems")
        if min_items is not None and len(value) < min_items:
            report.add_error(
                code="EMPTY_ARRAY_NOT_ALLOWED",
                message=f"Array must have at least {min_items} items",
                field_path=path,
            )
        items_schema = schema.get("items")
        if isinstance(items_schema, dict):
            for idx, item in enumerate(value):
                _validate_node(value=item, schema=items_schema, path=f"{path}[{idx}]", report=report)

    elif isinstance(value, str):
        min_len = schema.get("minLength")
        if min_len is not None and len(value) < min_len:
            report.add_error(code="MISSING_REQUIRED_FIELD", message="String cannot be empty", field_path=path)
        if schema.get("format") == "date" and not _is_date(value):
            report.add_error(
                code="INVALID_DATE_FORMAT",
                message=f"Invalid date {value!r}, expected YYYY-MM-DD",
                field_path=path,
            )

    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        minimum = schema.get("minimum")
        if minimum is not None and value < minimum:
            report.add_error(code="OUT_OF_RANGE", message=f"Value must be >= {minimum}", field_path=path)
        maximum = schema.get("maximum")
        if maximum is not None and value > maximum:
            report.add_error(code="OUT_OF_RANGE", message=f"Value must be <= {maximum}", field_path=path)


def _matches_type(value: Any, expected: str | list[str]) -> bool:
    if isinstance(expected, list):
        return any(_matches_type(value, item) for item in expected)
    return {
        "object": isinstance(value, dict),
        "array": isinstance(value, list),
        "string": isinstance(value, str),
        "integer": isinstance(value, int) and not isinstance(value, bool),
        "number": isinstance(value, (int, float)) and not isinstance(value, bool),
        "boolean": isinstance(value, bool),
        "null": value is None,
    }.get(expected, True)


def _is_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return len(value) == 10
