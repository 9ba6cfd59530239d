"""JSON helpers shared by the CLI and the version records."""

from __future__ import annotations

import json
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any


def _encode(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps_stable(payload: Any, *, indent: int | None = 2) -> str:
    """Serialize with sorted keys so equal payloads give equal bytes."""
    return json.dumps(payload, ensure_ascii=False, indent=indent, sort_keys=True, default=_encode)


def read_json(path: str | Path) -> dict[str, Any]:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"JSON root must be an object: {path}")
    return payload


def write_json(path: str | Path, payload: dict[str, Any]) -> None:
    Path(path).write_text(dumps_stable(payload) + "\n", encoding="utf-8")
