"""Normalization for incoming request payloads."""

from __future__ import annotations

from typing import Any


def normalize_request(payload: dict[str, Any]) -> dict[str, Any]:
    """Return a normalized copy of the options request."""
    normalized = dict(payload)
    if "schema_version" not in normalized:
        normalized["schema_version"] = "1.0"
    for field in ("course_path", "disruptions_path", "engine_config_path"):
        value = normalized.get(field)
        if isinstance(value, str):
            normalized[field] = value.strip()
    return normalized
