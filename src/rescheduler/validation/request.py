"""Validation for the options request payload."""

from __future__ import annotations

from typing import Any

from .errors import ValidationError

_REQUIRED_PATH_FIELDS = (
    "course_path",
    "disruptions_path",
)
_OPTIONAL_PATH_FIELDS = ("engine_config_path",)


def _check_path(payload: dict[str, Any], field: str) -> ValidationError | None:
    value = payload.get(field)
    if not isinstance(value, str) or not value.strip():
        return ValidationError(
            code="invalid_type",
            message=f"Field must be a non-empty string path: {field}",
            path=f"$.{field}",
        )
    return None


def validate_options_request(payload: dict[str, Any]) -> list[ValidationError]:
    """Check that the request points at the course and disruption documents."""
    errors: list[ValidationError] = []

    for field in _REQUIRED_PATH_FIELDS:
        if payload.get(field) is None:
            errors.append(
                ValidationError(
                    code="missing_field",
                    message=f"Missing required field: {field}",
                    path=f"$.{field}",
                )
            )
            continue
        error = _check_path(payload, field)
        if error is not None:
            errors.append(error)

    for field in _OPTIONAL_PATH_FIELDS:
        if payload.get(field) is None:
            continue
        error = _check_path(payload, field)
        if error is not None:
            errors.append(error)

    return errors
